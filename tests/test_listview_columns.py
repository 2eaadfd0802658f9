"""
Column model tests: clamping, locked widths and configuration checks.
"""
import pytest

from helpdesk.listview.columns import (
    FALLBACK_DEFAULT_WIDTH,
    LOCKED_WIDTHS,
    MAX_WIDTH,
    MIN_WIDTH,
    Align,
    Column,
    Row,
    clamp_width,
    locked_width,
    validate_columns,
)
from helpdesk.shared.errors import ColumnConfigError


@pytest.mark.parametrize("requested", [-500, 0, 10, 79, 80, 81, 200, 359, 360, 361, 10_000])
def test_clamp_stays_in_bounds_and_is_idempotent(requested):
    once = clamp_width(requested)
    assert MIN_WIDTH <= once <= MAX_WIDTH
    assert clamp_width(once) == once


def test_clamp_with_custom_lower_bound():
    assert clamp_width(90, lower=120) == 120
    assert clamp_width(500, lower=120) == MAX_WIDTH


def test_initial_width_uses_default_or_fallback():
    assert Column("title", default_width=200).initial_width == 200
    assert Column("title").initial_width == FALLBACK_DEFAULT_WIDTH
    assert Column("title", default_width=10).initial_width == MIN_WIDTH
    assert Column("title", default_width=900).initial_width == MAX_WIDTH


def test_table_keys_are_locked_even_without_flag():
    col = Column("status", "Status", default_width=300)
    assert col.is_locked
    assert locked_width(col) == LOCKED_WIDTHS["status"]


def test_flag_locked_column_outside_table_pins_its_own_width():
    col = Column("sla", "SLA", locked=True, default_width=500)
    assert col.is_locked
    assert locked_width(col) == MAX_WIDTH


def test_resizable_column_has_no_locked_width():
    assert locked_width(Column("title")) is None


def test_selection_column_convention():
    assert Column("checkbox").is_selection
    assert not Column("title").is_selection


def test_lower_bound_defaults_to_min_width():
    assert Column("title").lower_bound == MIN_WIDTH
    assert Column("title", min_width=120).lower_bound == 120


def test_row_cell_lookup():
    row = Row(id=1, cells={"title": "A"})
    assert row.cell("title") == "A"
    assert row.cell("missing") is None


def test_validate_columns_returns_tuple():
    cols = validate_columns(c for c in [Column("a"), Column("b")])
    assert isinstance(cols, tuple)
    assert [c.key for c in cols] == ["a", "b"]


def test_validate_rejects_duplicate_keys():
    with pytest.raises(ColumnConfigError, match="duplicate"):
        validate_columns([Column("title"), Column("title")])


def test_validate_rejects_empty_key():
    with pytest.raises(ColumnConfigError):
        validate_columns([Column("")])


def test_validate_rejects_min_width_above_max():
    with pytest.raises(ColumnConfigError, match="min_width"):
        validate_columns([Column("title", min_width=MAX_WIDTH + 1)])


def test_validate_rejects_unknown_alignment():
    with pytest.raises(ColumnConfigError, match="alignment"):
        validate_columns([Column("title", align="right")])


def test_validate_accepts_known_alignments():
    validate_columns([Column("a", align=Align.LEFT), Column("b", align=Align.CENTER)])


def test_column_config_error_is_value_error():
    assert issubclass(ColumnConfigError, ValueError)
