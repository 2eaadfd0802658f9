"""
Application state: per-request view of the session for the web routes.
"""
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional


@dataclass
class AppState:
    """Session-backed state used by the ticket routes."""
    data_root: Path
    status_filter: Optional[str] = None
    search: Optional[str] = None
    selection_key: Optional[str] = None
    selected_ticket_ids: list[str] = field(default_factory=list)

    @property
    def tickets_db(self) -> Path:
        return self.data_root / "tickets.sqlite"
