"""
Ticket list wiring for the list view.

Turns tickets into list view rows and owns the caller side of the
contract: the selection set is stored server-side under the session's
selection key and is replaced, never mutated in place, from the list
view callbacks.
"""
import logging

from fastapi import Request
from markupsafe import Markup, escape

from helpdesk.listview.columns import Align, Column, Row
from helpdesk.listview.view import ListViewProps
from helpdesk.shared.app_state import AppState
from helpdesk.tickets.storage.ticket_repository import Ticket
from helpdesk.web.dependencies import (
    get_selection_key,
    get_selection_repository,
    get_ticket_repository,
)

log = logging.getLogger(__name__)

TICKET_COLUMNS = (
    Column("checkbox", "", align=Align.CENTER, locked=True),
    Column("ticket_id", "ID", locked=True),
    Column("title", "Title", default_width=320, flexible=True),
    Column("status", "Status", align=Align.CENTER, locked=True),
    Column("priority", "Priority", align=Align.CENTER, locked=True),
    Column("category", "Category", default_width=160),
    Column("assignee", "Assignee", default_width=160),
    Column("tasks", "Tasks", align=Align.CENTER, locked=True),
    Column("created_at", "Created", min_width=110, default_width=130),
)

EMPTY_STATE = Markup(
    '<p class="empty-title">No tickets match this view.</p>'
    '<p class="empty-hint">Clear the filters or create a ticket.</p>'
)

_BADGE_COLUMNS = ("status", "priority")


def ticket_to_row(ticket: Ticket) -> Row:
    return Row(
        id=ticket.id,
        cells={
            "ticket_id": ticket.ticket_id,
            "title": ticket.title,
            "status": ticket.status,
            "priority": ticket.priority,
            "category": ticket.category,
            "assignee": ticket.assignee,
            "tasks": ticket.task_count,
            "created_at": ticket.created_at,
        },
    )


def render_ticket_cell(column: Column, value, row: Row):
    if value is None or value == "":
        return Markup('<span class="muted">&mdash;</span>')
    if column.key in _BADGE_COLUMNS:
        label = str(value).replace("_", " ")
        return Markup('<span class="badge badge-{}-{}">{}</span>').format(
            column.key, value, label
        )
    if column.key == "title":
        return Markup('<a class="ticket-link listview-truncate" href="/tickets/{}">{}</a>').format(
            row.id, value
        )
    if column.key == "created_at":
        return escape(str(value)[:10])
    return Markup('<span class="listview-truncate">{}</span>').format(value)


class TicketListSession:
    """Caller side of one ticket list request."""

    def __init__(self, request: Request, state: AppState):
        self.request = request
        self.state = state
        self.redirect: str | None = None
        repo = get_ticket_repository(state)
        tickets = repo.list_tickets(status=state.status_filter, search=state.search)
        self.rows = [ticket_to_row(t) for t in tickets]
        self._selected = list(state.selected_ticket_ids)

    @property
    def selected_ids(self) -> frozenset:
        return frozenset(self._selected)

    @property
    def selected(self) -> list[str]:
        return list(self._selected)

    def props(self, is_loading: bool = False) -> ListViewProps:
        return ListViewProps(
            rows=self.rows,
            on_row_click=self.on_row_click,
            on_selection_change=self.on_selection_change,
            on_select_all=self.on_select_all,
            selected_row_ids=self.selected_ids,
            is_loading=is_loading,
            empty_state=EMPTY_STATE,
            render_cell=render_ticket_cell,
        )

    def _store_selection(self, ids: list[str]) -> None:
        key = get_selection_key(self.request)
        get_selection_repository(self.state).replace(key, ids)
        self._selected = ids

    def on_row_click(self, row: Row) -> None:
        self.redirect = f"/tickets/{row.id}"

    def on_selection_change(self, row_id, selected: bool) -> None:
        ids = [i for i in self._selected if i != row_id]
        if selected:
            ids.append(row_id)
        self._store_selection(ids)

    def on_select_all(self, selected: bool, total_rows: int) -> None:
        ids = [r.id for r in self.rows] if selected else []
        log.debug("Select all=%s over %d row(s)", selected, total_rows)
        self._store_selection(ids)

    def retain_visible(self) -> None:
        """Drop selected tickets that the current filters hide."""
        visible = {r.id for r in self.rows}
        kept = [i for i in self._selected if i in visible]
        if kept != self._selected:
            self._store_selection(kept)
