"""
Grid template builder.

Produces one size token per column, in column order. The header and every
body row of a render use the same GridTemplate, which keeps their cells
aligned.
"""
from collections.abc import Sequence
from dataclasses import dataclass

from helpdesk.listview.columns import (
    FLEXIBLE_MAX_WIDTH,
    FLEXIBLE_MIN_WIDTH,
    MAX_WIDTH,
    Column,
    clamp_width,
    locked_width,
)
from helpdesk.listview.widths import ColumnWidthNegotiator


def _px(value: float) -> str:
    return f"{int(value)}px" if float(value).is_integer() else f"{value}px"


@dataclass(frozen=True)
class SizeToken:
    """Track size for one column: a fixed pixel width or a minmax range."""
    column_key: str
    min_px: float
    max_px: float
    fixed: bool = False

    @property
    def css(self) -> str:
        if self.fixed:
            return _px(self.max_px)
        return f"minmax({_px(self.min_px)}, {_px(self.max_px)})"


@dataclass(frozen=True)
class GridTemplate:
    tokens: tuple[SizeToken, ...]

    @property
    def css(self) -> str:
        return " ".join(t.css for t in self.tokens)

    def __str__(self) -> str:
        return self.css

    def __len__(self) -> int:
        return len(self.tokens)


def size_token(column: Column, current_width: float | None) -> SizeToken:
    """Size token for a single column given its negotiated width."""
    fixed = locked_width(column)
    if fixed is not None:
        return SizeToken(column.key, fixed, fixed, fixed=True)

    lower = column.lower_bound
    width = clamp_width(current_width if current_width is not None else lower, lower, MAX_WIDTH)
    if column.flexible:
        return SizeToken(
            column.key,
            max(FLEXIBLE_MIN_WIDTH, lower),
            max(width, FLEXIBLE_MAX_WIDTH),
        )
    return SizeToken(column.key, lower, width)


def build_template(columns: Sequence[Column], negotiator: ColumnWidthNegotiator) -> GridTemplate:
    widths = negotiator.widths
    return GridTemplate(tuple(size_token(col, widths.get(col.key)) for col in columns))
