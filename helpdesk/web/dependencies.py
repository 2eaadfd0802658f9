"""
Dependency injection for FastAPI routes.
"""
import os
from pathlib import Path

from fastapi import Request
from fastapi.templating import Jinja2Templates

from helpdesk.shared.app_state import AppState
from helpdesk.tickets.storage.selection_repository import SelectionRepository, new_selection_key
from helpdesk.tickets.storage.ticket_repository import TicketRepository
from helpdesk.web.grid_registry import GridRegistry

_HERE = Path(__file__).resolve().parent
templates = Jinja2Templates(directory=_HERE / "templates")

DATA_ROOT = Path(os.environ.get("HELPDESK_DATA_ROOT", "./data"))


def get_state(request: Request) -> AppState:
    """Reconstruct AppState from session; the selection itself is loaded from SQLite."""
    session = request.session
    state = AppState(
        data_root=DATA_ROOT,
        status_filter=session.get("status_filter"),
        search=session.get("search"),
        selection_key=session.get("selection_key"),
    )
    if state.selection_key:
        state.selected_ticket_ids = get_selection_repository(state).get(state.selection_key)
    return state


def get_selection_key(request: Request) -> str:
    """Selection key for this session, created on first use."""
    key = request.session.get("selection_key")
    if not key:
        key = new_selection_key()
        request.session["selection_key"] = key
    return key


def get_ticket_repository(state: AppState) -> TicketRepository:
    """Get TicketRepository for the configured data root."""
    return TicketRepository(state.tickets_db)


def get_selection_repository(state: AppState) -> SelectionRepository:
    """Get SelectionRepository; selections share the ticket database."""
    return SelectionRepository(state.tickets_db)


def get_grid_registry(request: Request) -> GridRegistry:
    """Registry of mounted list views, created at application startup."""
    return request.app.state.grids


def get_template_context(request: Request) -> dict:
    """Build common template context with nav state."""
    state = get_state(request)
    return {
        "request": request,
        "status_filter": state.status_filter,
        "search": state.search or "",
        "selected_count": len(state.selected_ticket_ids),
    }
