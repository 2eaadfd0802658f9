"""
List view renderer.

Renders header and body rows to HTML from a column set, the caller's rows
and the caller's selection, and turns browser events back into caller
callbacks. Width state is delegated to a ColumnWidthNegotiator owned by
the ListView instance; the selection set is only ever read.
"""
import logging
from collections.abc import Callable, Collection, Iterable, Sequence
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from jinja2 import Environment, FileSystemLoader, select_autoescape
from markupsafe import Markup

from helpdesk.listview.columns import Column, Row
from helpdesk.listview.template import GridTemplate, build_template
from helpdesk.listview.widths import ColumnWidthNegotiator, PointerHost

log = logging.getLogger(__name__)

_HERE = Path(__file__).resolve().parent

_env = Environment(
    loader=FileSystemLoader(_HERE / "templates"),
    autoescape=select_autoescape(["html"]),
    trim_blocks=True,
    lstrip_blocks=True,
)

LOADING_TEXT = "Loading…"
EMPTY_TEXT = "No data"

RowClick = Callable[[Row], Any]
SelectionChange = Callable[[Any, bool], Any]
SelectAll = Callable[[bool, int], Any]
CellRenderer = Callable[[Column, Any, Row], Any]


@dataclass
class ListViewProps:
    """What the caller supplies on every render."""
    rows: Sequence[Row] = ()
    on_row_click: RowClick | None = None
    on_selection_change: SelectionChange | None = None
    on_select_all: SelectAll | None = None
    selected_row_ids: Collection = field(default_factory=frozenset)
    is_loading: bool = False
    empty_state: Any = None
    render_cell: CellRenderer | None = None


@dataclass(frozen=True)
class RenderedListView:
    html: Markup
    template: GridTemplate
    all_selected: bool

    def __html__(self) -> str:
        return str(self.html)


def all_selected(rows: Sequence[Row], selected_row_ids: Collection) -> bool:
    """True iff there is at least one row and every row id is selected."""
    return len(rows) > 0 and all(r.id in selected_row_ids for r in rows)


class ListView:
    """A data grid: resizable columns, row selection and custom cells."""

    def __init__(
        self,
        columns: Iterable[Column],
        grid_id: str = "listview",
        host: PointerHost | None = None,
    ):
        self.columns: tuple[Column, ...] = tuple(columns)
        self.negotiator = ColumnWidthNegotiator(self.columns, host=host)
        self.grid_id = grid_id

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()
        return False

    def close(self) -> None:
        self.negotiator.close()

    def template(self) -> GridTemplate:
        return build_template(self.columns, self.negotiator)

    # ----------------------------------------------------------------- render
    def render(self, props: ListViewProps) -> RenderedListView:
        template = self.template()
        selected = props.selected_row_ids
        everything_selected = all_selected(props.rows, selected)

        header = []
        for col in self.columns:
            header.append({
                "column": col,
                "resizable": self.negotiator.is_resizable(col.key),
                "width": self.negotiator.width_of(col.key),
            })

        body = []
        if not props.is_loading:
            for row in props.rows:
                body.append({
                    "row": row,
                    "selected": row.id in selected,
                    "cells": [
                        {
                            "column": col,
                            "content": self._cell_content(props, col, row),
                            "custom": props.render_cell is not None,
                        }
                        for col in self.columns
                    ],
                })

        html = _env.get_template("listview.html").render(
            grid_id=self.grid_id,
            template=template.css,
            header=header,
            body=body,
            all_selected=everything_selected,
            total_rows=len(props.rows),
            is_loading=props.is_loading,
            empty_state=props.empty_state,
            loading_text=LOADING_TEXT,
            empty_text=EMPTY_TEXT,
        )
        return RenderedListView(Markup(html), template, everything_selected)

    @staticmethod
    def _cell_content(props: ListViewProps, column: Column, row: Row) -> Any:
        if column.is_selection:
            return None
        value = row.cell(column.key)
        if props.render_cell is not None:
            return props.render_cell(column, value, row)
        return "" if value is None else value

    # ----------------------------------------------------------------- events
    def find_row(self, props: ListViewProps, row_id: Any) -> Row | None:
        for row in props.rows:
            if row.id == row_id or str(row.id) == str(row_id):
                return row
        return None

    def row_clicked(self, props: ListViewProps, row_id: Any) -> bool:
        row = self.find_row(props, row_id)
        if row is None:
            log.debug("Row click on unknown row %r", row_id)
            return False
        if props.on_row_click is not None:
            props.on_row_click(row)
        return True

    def selection_toggled(self, props: ListViewProps, row_id: Any, selected: bool) -> bool:
        """Report a row checkbox change. Never fires the row click."""
        row = self.find_row(props, row_id)
        if row is None:
            log.debug("Selection change on unknown row %r", row_id)
            return False
        if props.on_selection_change is not None:
            props.on_selection_change(row.id, bool(selected))
        return True

    def select_all_toggled(self, props: ListViewProps, selected: bool) -> None:
        if props.on_select_all is not None:
            props.on_select_all(bool(selected), len(props.rows))

    def resize_started(self, column_key: str, pointer_x: float) -> bool:
        """Pointer-down on a resize handle: capture the column's current width."""
        if not self.negotiator.is_resizable(column_key):
            return False
        start_width = self.negotiator.width_of(column_key)
        return self.negotiator.begin_resize(column_key, start_width, pointer_x)

    def pointer_moved(self, pointer_x: float) -> float | None:
        return self.negotiator.update_resize(pointer_x)

    def pointer_released(self) -> None:
        self.negotiator.end_resize()
