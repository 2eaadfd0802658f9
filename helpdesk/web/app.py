"""
FastAPI application for the help-desk front end.
"""
import logging
import os
import secrets
from contextlib import asynccontextmanager
from pathlib import Path

import uvicorn
from fastapi import FastAPI
from fastapi.staticfiles import StaticFiles
from starlette.middleware.sessions import SessionMiddleware

from helpdesk.shared.logging_config import configure_logging
from helpdesk.web.grid_registry import GridRegistry

_HERE = Path(__file__).resolve().parent
_DATA_ROOT = Path(os.environ.get("HELPDESK_DATA_ROOT", "./data"))

log = logging.getLogger(__name__)


def _get_session_secret() -> str:
    """Get or generate a persistent session secret key."""
    env_key = os.environ.get("SESSION_SECRET")
    if env_key:
        return env_key
    _DATA_ROOT.mkdir(parents=True, exist_ok=True)
    key_file = _DATA_ROOT / ".session_key"
    if key_file.exists():
        return key_file.read_text().strip()
    key = secrets.token_hex(32)
    key_file.write_text(key)
    return key


def _max_grids() -> int:
    raw = os.environ.get("HELPDESK_MAX_GRIDS", "64")
    try:
        return int(raw)
    except ValueError:
        log.warning("Invalid HELPDESK_MAX_GRIDS=%r, using 64", raw)
        return 64


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan: mount the list view registry, close it on shutdown."""
    app.state.grids = GridRegistry(_max_grids())
    yield
    app.state.grids.close_all()


app = FastAPI(title="Help Desk", version="0.3.0", lifespan=lifespan)
app.add_middleware(SessionMiddleware, secret_key=_get_session_secret())
app.mount("/static", StaticFiles(directory=_HERE / "static"), name="static")

# Import and include routers
from helpdesk.web.routers import grids, tickets  # noqa: E402

app.include_router(tickets.router)
app.include_router(grids.router)


@app.get("/")
async def index():
    from fastapi.responses import RedirectResponse
    return RedirectResponse(url="/tickets")


def main():
    configure_logging()
    uvicorn.run(
        "helpdesk.web.app:app",
        host=os.environ.get("HELPDESK_HOST", "127.0.0.1"),
        port=int(os.environ.get("HELPDESK_PORT", "8000")),
        reload=False,
    )


if __name__ == "__main__":
    main()
