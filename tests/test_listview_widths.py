"""
Column width negotiator tests: initialization, resize protocol, locked
columns and pointer listener lifecycle.
"""
import pytest

from helpdesk.listview.columns import MAX_WIDTH, MIN_WIDTH, Column
from helpdesk.listview.widths import (
    POINTER_MOVE,
    POINTER_UP,
    ColumnWidthNegotiator,
    ResizeSession,
)


class FakePointerHost:
    """Records viewport-wide listeners like a browser window would."""

    def __init__(self):
        self.listeners = {}

    def add_listener(self, event_type, callback):
        self.listeners.setdefault(event_type, []).append(callback)

    def remove_listener(self, event_type, callback):
        self.listeners[event_type].remove(callback)

    def count(self, event_type):
        return len(self.listeners.get(event_type, []))

    def fire(self, event_type, *args):
        for cb in list(self.listeners.get(event_type, [])):
            cb(*args)


@pytest.fixture()
def columns():
    return [
        Column("checkbox", locked=True),
        Column("title", "Title", default_width=200),
        Column("status", "Status"),
        Column("category", "Category"),
    ]


def test_initial_widths_only_for_resizable_columns(columns):
    neg = ColumnWidthNegotiator(columns)
    assert neg.widths == {"title": 200, "category": 150}


def test_initial_width_clamped(columns):
    neg = ColumnWidthNegotiator([Column("a", default_width=10), Column("b", default_width=999)])
    assert neg.widths == {"a": MIN_WIDTH, "b": MAX_WIDTH}


def test_width_of_locked_column_reads_table(columns):
    neg = ColumnWidthNegotiator(columns)
    assert neg.width_of("checkbox") == 50
    assert neg.width_of("status") == 140
    assert neg.width_of("title") == 200


def test_resize_scenario_title_plus_150(columns):
    neg = ColumnWidthNegotiator(columns)
    assert neg.begin_resize("title", 200, 500) is True
    assert neg.session == ResizeSession("title", 500, 200)
    assert neg.update_resize(650) == 350
    neg.end_resize()
    assert neg.session is None
    assert neg.width_of("title") == 350


def test_resize_locked_column_is_noop(columns):
    neg = ColumnWidthNegotiator(columns)
    before = neg.widths
    assert neg.begin_resize("checkbox", 50, 500) is False
    assert neg.session is None
    assert neg.update_resize(900) is None
    neg.end_resize()
    assert neg.widths == before
    assert neg.width_of("checkbox") == 50


def test_resize_table_locked_column_is_noop(columns):
    neg = ColumnWidthNegotiator(columns)
    assert neg.begin_resize("status", 140, 0) is False
    assert neg.width_of("status") == 140


def test_resize_unknown_column_is_noop(columns):
    neg = ColumnWidthNegotiator(columns)
    assert neg.begin_resize("nope", 100, 0) is False


def test_update_is_clamped(columns):
    neg = ColumnWidthNegotiator(columns)
    neg.begin_resize("title", 200, 500)
    assert neg.update_resize(5000) == MAX_WIDTH
    assert neg.update_resize(-5000) == MIN_WIDTH


def test_update_is_idempotent_for_same_pointer(columns):
    neg = ColumnWidthNegotiator(columns)
    neg.begin_resize("title", 200, 500)
    first = neg.update_resize(560)
    second = neg.update_resize(560)
    assert first == second == 260


def test_only_last_pointer_position_matters(columns):
    replayed = ColumnWidthNegotiator(columns)
    replayed.begin_resize("title", 200, 500)
    for x in (900, 100, 530, 700, 610):
        replayed.update_resize(x)

    direct = ColumnWidthNegotiator(columns)
    direct.begin_resize("title", 200, 500)
    direct.update_resize(610)

    assert replayed.widths == direct.widths
    assert replayed.width_of("title") == 310


def test_update_without_session_is_noop(columns):
    neg = ColumnWidthNegotiator(columns)
    assert neg.update_resize(700) is None
    assert neg.width_of("title") == 200


def test_end_keeps_last_width_and_later_moves_do_nothing(columns):
    neg = ColumnWidthNegotiator(columns)
    neg.begin_resize("title", 200, 500)
    neg.update_resize(540)
    neg.end_resize()
    neg.update_resize(900)
    assert neg.width_of("title") == 240


def test_new_begin_replaces_open_session(columns):
    neg = ColumnWidthNegotiator(columns)
    neg.begin_resize("title", 200, 500)
    neg.begin_resize("category", 150, 100)
    assert neg.session.column_key == "category"
    neg.update_resize(150)
    assert neg.widths == {"title": 200, "category": 200}


def test_fractional_pointer_rounds_to_whole_pixels(columns):
    neg = ColumnWidthNegotiator(columns)
    neg.begin_resize("title", 200, 500.25)
    assert neg.update_resize(550.75) == 250


def test_widths_snapshot_is_a_copy(columns):
    neg = ColumnWidthNegotiator(columns)
    snapshot = neg.widths
    snapshot["title"] = 999
    assert neg.width_of("title") == 200


def test_resizing_context_closes_session_on_error(columns):
    neg = ColumnWidthNegotiator(columns)
    with pytest.raises(RuntimeError):
        with neg.resizing("title", 200, 500) as opened:
            assert opened is True
            neg.update_resize(520)
            raise RuntimeError("pointer lost")
    assert neg.session is None
    assert neg.width_of("title") == 220


def test_resizing_context_on_locked_column(columns):
    neg = ColumnWidthNegotiator(columns)
    with neg.resizing("checkbox", 50, 0) as opened:
        assert opened is False
        assert neg.session is None


def test_host_listeners_attached_for_session_only(columns):
    host = FakePointerHost()
    neg = ColumnWidthNegotiator(columns, host=host)
    assert host.count(POINTER_MOVE) == 0

    neg.begin_resize("title", 200, 500)
    assert host.count(POINTER_MOVE) == 1
    assert host.count(POINTER_UP) == 1

    host.fire(POINTER_MOVE, 580)
    assert neg.width_of("title") == 280

    host.fire(POINTER_UP)
    assert neg.session is None
    assert host.count(POINTER_MOVE) == 0
    assert host.count(POINTER_UP) == 0


def test_replacing_session_does_not_stack_listeners(columns):
    host = FakePointerHost()
    neg = ColumnWidthNegotiator(columns, host=host)
    neg.begin_resize("title", 200, 500)
    neg.begin_resize("category", 150, 0)
    assert host.count(POINTER_MOVE) == 1
    assert host.count(POINTER_UP) == 1


def test_locked_resize_never_attaches_listeners(columns):
    host = FakePointerHost()
    neg = ColumnWidthNegotiator(columns, host=host)
    neg.begin_resize("checkbox", 50, 0)
    assert host.listeners == {}


def test_close_releases_listeners_and_blocks_new_sessions(columns):
    host = FakePointerHost()
    with ColumnWidthNegotiator(columns, host=host) as neg:
        neg.begin_resize("title", 200, 500)
    assert neg.session is None
    assert host.count(POINTER_MOVE) == 0
    assert neg.begin_resize("title", 200, 500) is False


def test_instances_do_not_share_state(columns):
    a = ColumnWidthNegotiator(columns)
    b = ColumnWidthNegotiator(columns)
    a.begin_resize("title", 200, 0)
    a.update_resize(100)
    assert a.width_of("title") == 300
    assert b.width_of("title") == 200
    assert b.session is None
