"""
Column width negotiator.

Owns the width of every resizable column for one list view instance and
turns pointer gestures into width changes. A resize session records where
the drag started; every move recomputes the width from that start point,
so only the latest pointer position matters.
"""
import logging
from collections.abc import Callable, Iterable
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Protocol

from helpdesk.listview.columns import (
    MAX_WIDTH,
    MIN_WIDTH,
    Column,
    clamp_width,
    locked_width,
    validate_columns,
)

log = logging.getLogger(__name__)

POINTER_MOVE = "pointermove"
POINTER_UP = "pointerup"


class PointerHost(Protocol):
    """Anything that can deliver pointer events from the whole viewport."""

    def add_listener(self, event_type: str, callback: Callable) -> None: ...

    def remove_listener(self, event_type: str, callback: Callable) -> None: ...


@dataclass(frozen=True)
class ResizeSession:
    """An in-progress drag on one column."""
    column_key: str
    start_pointer_x: float
    start_width: float


class ColumnWidthNegotiator:
    """Width state for one list view, with its resize protocol."""

    def __init__(self, columns: Iterable[Column], host: PointerHost | None = None):
        self._columns = {c.key: c for c in validate_columns(columns)}
        self._widths: dict[str, float] = {
            key: col.initial_width
            for key, col in self._columns.items()
            if not col.is_locked
        }
        self._session: ResizeSession | None = None
        self._host = host
        self._listening = False
        self._closed = False

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()
        return False

    @property
    def session(self) -> ResizeSession | None:
        return self._session

    @property
    def widths(self) -> dict[str, float]:
        """Snapshot of the resizable column widths."""
        return dict(self._widths)

    def is_resizable(self, column_key: str) -> bool:
        return column_key in self._widths

    def width_of(self, column_key: str) -> float:
        """Current width of a column. Locked columns report their fixed width."""
        col = self._columns[column_key]
        fixed = locked_width(col)
        if fixed is not None:
            return fixed
        return self._widths[column_key]

    def begin_resize(self, column_key: str, start_width: float, start_pointer_x: float) -> bool:
        """Open a resize session. Returns False when the column cannot be resized."""
        if self._closed or not self.is_resizable(column_key):
            log.debug("Ignoring resize start on column %r", column_key)
            return False

        if self._session is not None:
            log.debug("Replacing open resize session on %r", self._session.column_key)
            self._release_pointer()

        self._session = ResizeSession(
            column_key=column_key,
            start_pointer_x=start_pointer_x,
            start_width=start_width,
        )
        self._capture_pointer()
        return True

    def update_resize(self, current_pointer_x: float) -> float | None:
        """Apply the pointer position to the open session and return the new width."""
        session = self._session
        if session is None:
            return None

        delta = current_pointer_x - session.start_pointer_x
        width = round(clamp_width(session.start_width + delta, MIN_WIDTH, MAX_WIDTH))
        self._widths[session.column_key] = width
        return width

    def end_resize(self) -> None:
        """Close the open session. The last width written stands."""
        try:
            if self._session is not None:
                log.debug(
                    "Resized %r to %spx",
                    self._session.column_key,
                    self._widths.get(self._session.column_key),
                )
        finally:
            self._session = None
            self._release_pointer()

    @contextmanager
    def resizing(self, column_key: str, start_width: float, start_pointer_x: float):
        """Scope a resize session; it is closed however the block exits."""
        opened = self.begin_resize(column_key, start_width, start_pointer_x)
        try:
            yield opened
        finally:
            if opened:
                self.end_resize()

    def close(self) -> None:
        """Tear down on unmount. Further resize starts are ignored."""
        self.end_resize()
        self._closed = True

    # ------------------------------------------------------------ pointer host
    def _on_pointer_move(self, pointer_x: float) -> None:
        self.update_resize(pointer_x)

    def _on_pointer_up(self, *_args) -> None:
        self.end_resize()

    def _capture_pointer(self) -> None:
        if self._host is None or self._listening:
            return
        self._host.add_listener(POINTER_MOVE, self._on_pointer_move)
        self._host.add_listener(POINTER_UP, self._on_pointer_up)
        self._listening = True

    def _release_pointer(self) -> None:
        if self._host is None or not self._listening:
            return
        self._listening = False
        try:
            self._host.remove_listener(POINTER_MOVE, self._on_pointer_move)
        finally:
            self._host.remove_listener(POINTER_UP, self._on_pointer_up)
