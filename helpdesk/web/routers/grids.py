"""List view event endpoints: resize protocol, selection, row clicks."""
import logging

from fastapi import APIRouter, Request, Query
from fastapi.responses import HTMLResponse, JSONResponse

from helpdesk.shared.errors import AppErrors
from helpdesk.web.dependencies import get_grid_registry, get_state
from helpdesk.web.ticket_list import TicketListSession

log = logging.getLogger(__name__)
router = APIRouter()


def _get_view(request: Request, grid_id: str):
    return get_grid_registry(request).get(grid_id)


def _not_found():
    return JSONResponse({"error": AppErrors.GRID_NOT_FOUND}, status_code=404)


def _pointer_x(body: dict) -> float | None:
    value = body.get("pointer_x")
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    return value


@router.get("/api/grids/{grid_id}")
async def render_grid(grid_id: str, request: Request, loading: bool = Query(default=False)):
    view = _get_view(request, grid_id)
    if view is None:
        return _not_found()
    listing = TicketListSession(request, get_state(request))
    return HTMLResponse(str(view.render(listing.props(is_loading=loading)).html))


@router.delete("/api/grids/{grid_id}")
async def unmount_grid(grid_id: str, request: Request):
    if not get_grid_registry(request).unmount(grid_id):
        return _not_found()
    return {"status": "unmounted"}


@router.post("/api/grids/{grid_id}/resize/start")
async def resize_start(grid_id: str, request: Request):
    view = _get_view(request, grid_id)
    if view is None:
        return _not_found()
    body = await request.json()

    column_key = (body.get("column_key") or "").strip()
    if not column_key:
        return JSONResponse({"error": AppErrors.COLUMN_KEY_REQUIRED}, status_code=400)
    pointer_x = _pointer_x(body)
    if pointer_x is None:
        return JSONResponse({"error": AppErrors.POINTER_X_REQUIRED}, status_code=400)

    started = view.resize_started(column_key, pointer_x)
    return {"resizing": started, "column_key": column_key if started else None}


@router.post("/api/grids/{grid_id}/resize/move")
async def resize_move(grid_id: str, request: Request):
    view = _get_view(request, grid_id)
    if view is None:
        return _not_found()
    body = await request.json()

    pointer_x = _pointer_x(body)
    if pointer_x is None:
        return JSONResponse({"error": AppErrors.POINTER_X_REQUIRED}, status_code=400)

    session = view.negotiator.session
    width = view.pointer_moved(pointer_x)
    return {
        "column_key": session.column_key if session else None,
        "width": width,
        "widths": view.negotiator.widths,
        "template": view.template().css,
    }


@router.post("/api/grids/{grid_id}/resize/end")
async def resize_end(grid_id: str, request: Request):
    view = _get_view(request, grid_id)
    if view is None:
        return _not_found()
    body = await request.json() if await request.body() else {}

    # Last pointer position is applied before the session closes
    if body.get("pointer_x") is not None:
        pointer_x = _pointer_x(body)
        if pointer_x is None:
            return JSONResponse({"error": AppErrors.POINTER_X_REQUIRED}, status_code=400)
        view.pointer_moved(pointer_x)
    view.pointer_released()
    return {"widths": view.negotiator.widths, "template": view.template().css}


@router.post("/api/grids/{grid_id}/selection")
async def toggle_row(grid_id: str, request: Request):
    view = _get_view(request, grid_id)
    if view is None:
        return _not_found()
    body = await request.json()

    row_id = body.get("row_id")
    if row_id is None or row_id == "":
        return JSONResponse({"error": AppErrors.ROW_ID_REQUIRED}, status_code=400)
    selected = body.get("selected")
    if not isinstance(selected, bool):
        return JSONResponse({"error": AppErrors.SELECTED_REQUIRED}, status_code=400)

    listing = TicketListSession(request, get_state(request))
    view.selection_toggled(listing.props(), row_id, selected)
    return {
        "selected": listing.selected,
        "html": str(view.render(listing.props()).html),
    }


@router.post("/api/grids/{grid_id}/select-all")
async def toggle_all(grid_id: str, request: Request):
    view = _get_view(request, grid_id)
    if view is None:
        return _not_found()
    body = await request.json()

    selected = body.get("selected")
    if not isinstance(selected, bool):
        return JSONResponse({"error": AppErrors.SELECTED_REQUIRED}, status_code=400)

    listing = TicketListSession(request, get_state(request))
    view.select_all_toggled(listing.props(), selected)
    return {
        "selected": listing.selected,
        "html": str(view.render(listing.props()).html),
    }


@router.post("/api/grids/{grid_id}/row-click")
async def row_click(grid_id: str, request: Request):
    view = _get_view(request, grid_id)
    if view is None:
        return _not_found()
    body = await request.json()

    row_id = body.get("row_id")
    if row_id is None or row_id == "":
        return JSONResponse({"error": AppErrors.ROW_ID_REQUIRED}, status_code=400)

    listing = TicketListSession(request, get_state(request))
    if not view.row_clicked(listing.props(), row_id):
        return JSONResponse({"error": AppErrors.TICKET_NOT_FOUND}, status_code=404)
    return {"redirect": listing.redirect}
