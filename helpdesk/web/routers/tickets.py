"""Ticket pages and ticket API."""
import csv
import io
import logging

from fastapi import APIRouter, Request, Query
from fastapi.responses import JSONResponse, StreamingResponse

from helpdesk.shared.errors import AppErrors
from helpdesk.tickets.storage.ticket_repository import TicketPriority, TicketStatus
from helpdesk.web.dependencies import (
    get_grid_registry,
    get_selection_repository,
    get_state,
    get_template_context,
    get_ticket_repository,
    templates,
)
from helpdesk.web.ticket_list import TICKET_COLUMNS, TicketListSession

log = logging.getLogger(__name__)
router = APIRouter()


def _ticket_to_dict(t):
    return {
        "id": t.id,
        "ticket_id": t.ticket_id,
        "title": t.title,
        "status": t.status,
        "priority": t.priority,
        "category": t.category,
        "assignee": t.assignee,
        "task_count": t.task_count,
        "created_at": t.created_at,
        "updated_at": t.updated_at,
        "closed_at": t.closed_at,
    }


@router.get("/tickets")
async def tickets_page(request: Request):
    state = get_state(request)
    view = get_grid_registry(request).mount(TICKET_COLUMNS)
    listing = TicketListSession(request, state)

    ctx = get_template_context(request)
    ctx["grid"] = view.render(listing.props())
    ctx["grid_id"] = view.grid_id
    ctx["statuses"] = TicketStatus.ALL
    ctx["priorities"] = TicketPriority.ALL
    return templates.TemplateResponse(request, "tickets.html", ctx)


@router.get("/tickets/{ticket_id}")
async def ticket_detail_page(ticket_id: str, request: Request):
    state = get_state(request)
    repo = get_ticket_repository(state)
    ticket = repo.get_by_id(ticket_id)
    if not ticket:
        return JSONResponse({"error": AppErrors.TICKET_NOT_FOUND}, status_code=404)

    ctx = get_template_context(request)
    ctx["ticket"] = ticket
    ctx["history"] = repo.get_history(ticket_id)
    ctx["statuses"] = TicketStatus.ALL
    return templates.TemplateResponse(request, "ticket_detail.html", ctx)


@router.get("/api/tickets")
async def list_tickets(
    request: Request,
    status: str = Query(default=None),
    search: str = Query(default=None),
):
    state = get_state(request)
    repo = get_ticket_repository(state)
    tickets = repo.list_tickets(status=status, search=search)
    return {"tickets": [_ticket_to_dict(t) for t in tickets], "total": len(tickets)}


@router.post("/api/tickets")
async def create_ticket(request: Request):
    state = get_state(request)
    body = await request.json()

    title = (body.get("title") or "").strip()
    if not title:
        return JSONResponse({"error": AppErrors.TITLE_REQUIRED}, status_code=400)

    repo = get_ticket_repository(state)
    try:
        ticket = repo.create_ticket(
            title=title,
            priority=body.get("priority") or TicketPriority.MEDIUM,
            status=body.get("status") or TicketStatus.OPEN,
            category=body.get("category") or None,
            assignee=body.get("assignee") or None,
            task_count=int(body.get("task_count") or 0),
        )
    except ValueError as e:
        return JSONResponse({"error": str(e)}, status_code=400)
    return _ticket_to_dict(ticket)


@router.put("/api/tickets/{ticket_id}/status")
async def move_ticket(ticket_id: str, request: Request):
    state = get_state(request)
    body = await request.json()

    new_status = (body.get("status") or "").strip()
    if not new_status:
        return JSONResponse({"error": AppErrors.STATUS_REQUIRED}, status_code=400)

    repo = get_ticket_repository(state)
    try:
        ticket = repo.update_status(ticket_id, new_status)
    except ValueError as e:
        return JSONResponse({"error": str(e)}, status_code=400)
    if not ticket:
        return JSONResponse({"error": AppErrors.TICKET_NOT_FOUND}, status_code=404)
    return _ticket_to_dict(ticket)


@router.get("/api/tickets/{ticket_id}/history")
async def ticket_history(ticket_id: str, request: Request):
    state = get_state(request)
    repo = get_ticket_repository(state)
    if not repo.get_by_id(ticket_id):
        return JSONResponse({"error": AppErrors.TICKET_NOT_FOUND}, status_code=404)

    return [
        {
            "from_status": h.from_status,
            "to_status": h.to_status,
            "changed_at": h.changed_at,
        }
        for h in repo.get_history(ticket_id)
    ]


@router.post("/api/tickets/filter")
async def set_filter(request: Request):
    """Store list filters in the session; the selection keeps only visible tickets."""
    body = await request.json()
    status = (body.get("status") or "").strip() or None
    if status and status not in TicketStatus.ALL:
        return JSONResponse({"error": f"Unknown status '{status}'."}, status_code=400)
    request.session["status_filter"] = status
    request.session["search"] = (body.get("search") or "").strip() or None

    listing = TicketListSession(request, get_state(request))
    listing.retain_visible()
    return {"status_filter": status, "search": request.session["search"], "total": len(listing.rows)}


@router.post("/api/tickets/bulk/delete")
async def bulk_delete(request: Request):
    state = get_state(request)
    if not state.selected_ticket_ids:
        return JSONResponse({"error": AppErrors.NO_SELECTION}, status_code=400)

    repo = get_ticket_repository(state)
    deleted = repo.delete_tickets(state.selected_ticket_ids)
    selections = get_selection_repository(state)
    selections.forget_tickets(state.selected_ticket_ids)
    selections.clear(state.selection_key)
    return {"status": "deleted", "deleted": deleted}


@router.get("/api/tickets/export-csv")
async def export_csv(request: Request):
    """Export selected tickets (or all visible tickets if none) as a CSV download."""
    state = get_state(request)
    repo = get_ticket_repository(state)
    tickets = repo.list_tickets(status=state.status_filter, search=state.search)
    if state.selected_ticket_ids:
        chosen = set(state.selected_ticket_ids)
        tickets = [t for t in tickets if t.id in chosen]

    output = io.StringIO()
    writer = csv.writer(output)
    writer.writerow(["ID", "Title", "Status", "Priority", "Category", "Assignee", "Tasks", "Created", "Updated", "Closed"])
    for t in tickets:
        writer.writerow([
            t.ticket_id,
            t.title,
            t.status,
            t.priority,
            t.category or "",
            t.assignee or "",
            t.task_count,
            t.created_at,
            t.updated_at,
            t.closed_at or "",
        ])

    content = output.getvalue()
    return StreamingResponse(
        io.BytesIO(content.encode("utf-8-sig")),
        media_type="text/csv",
        headers={"Content-Disposition": "attachment; filename=tickets_export.csv"},
    )
