"""
Column and row model for the list view.

Width constants, the locked-width table and clamping live here so the
negotiator, the template builder and the renderer agree on one policy.
"""
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from typing import Any

from helpdesk.shared.errors import ColumnConfigError

MIN_WIDTH = 80
MAX_WIDTH = 360
FALLBACK_DEFAULT_WIDTH = 150

FLEXIBLE_MIN_WIDTH = 300
FLEXIBLE_MAX_WIDTH = 420

SELECTION_COLUMN_KEY = "checkbox"

LOCKED_WIDTHS: Mapping[str, int] = {
    "checkbox": 50,
    "ticket_id": 110,
    "status": 140,
    "priority": 130,
    "tasks": 80,
}


class Align:
    LEFT = "left"
    CENTER = "center"

    ALL = (LEFT, CENTER)


def clamp_width(value: float, lower: float = MIN_WIDTH, upper: float = MAX_WIDTH) -> float:
    """Clamp a width into [lower, upper]."""
    return min(upper, max(lower, value))


@dataclass(frozen=True)
class Column:
    """One list view column. The key is the column's identity."""
    key: str
    label: str = ""
    align: str = Align.LEFT
    locked: bool = False
    min_width: int | None = None
    default_width: int | None = None
    flexible: bool = False

    @property
    def is_locked(self) -> bool:
        return self.locked or self.key in LOCKED_WIDTHS

    @property
    def is_selection(self) -> bool:
        return self.key == SELECTION_COLUMN_KEY

    @property
    def lower_bound(self) -> int:
        return self.min_width if self.min_width is not None else MIN_WIDTH

    @property
    def initial_width(self) -> float:
        base = self.default_width if self.default_width is not None else FALLBACK_DEFAULT_WIDTH
        return clamp_width(base)


def locked_width(column: Column) -> float | None:
    """Return the fixed width of a locked column, or None if it is resizable.

    Table entries win. A column locked only by its flag is pinned to the
    clamped width of its own definition.
    """
    if column.key in LOCKED_WIDTHS:
        return LOCKED_WIDTHS[column.key]
    if column.locked:
        return column.initial_width
    return None


@dataclass(frozen=True)
class Row:
    """One row of data: an id unique in the dataset and cell content by column key."""
    id: Any
    cells: Mapping[str, Any] = field(default_factory=dict)

    def cell(self, key: str) -> Any:
        return self.cells.get(key)


def validate_columns(columns: Iterable[Column]) -> tuple[Column, ...]:
    """Check a column set once at construction and return it as a tuple.

    Raises ColumnConfigError for duplicate or empty keys, unknown alignment,
    or a per-column minimum above MAX_WIDTH.
    """
    result = tuple(columns)
    seen: set[str] = set()
    for col in result:
        if not col.key:
            raise ColumnConfigError("column key must not be empty")
        if col.key in seen:
            raise ColumnConfigError(f"duplicate column key '{col.key}'")
        seen.add(col.key)
        if col.align not in Align.ALL:
            raise ColumnConfigError(
                f"column '{col.key}' has alignment '{col.align}', expected one of {Align.ALL}"
            )
        if col.min_width is not None and col.min_width > MAX_WIDTH:
            raise ColumnConfigError(
                f"column '{col.key}' min_width {col.min_width} exceeds MAX_WIDTH {MAX_WIDTH}"
            )
    return result
