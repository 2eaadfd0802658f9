"""
Server-side ticket selections.

A selection can hold every ticket in the list, so it is kept in SQLite and
the session cookie only carries the opaque key that owns it.
"""
import logging
import secrets
import sqlite3
from pathlib import Path

log = logging.getLogger(__name__)


def new_selection_key() -> str:
    return secrets.token_urlsafe(16)


class SelectionRepository:
    """Selected ticket ids per selection key."""

    def __init__(self, db_path: Path):
        self.db_path = Path(db_path)
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        self._init_schema()

    def _init_schema(self):
        with sqlite3.connect(self.db_path) as conn:
            conn.execute("""
                CREATE TABLE IF NOT EXISTS ticket_selections (
                    selection_key TEXT NOT NULL,
                    ticket_id TEXT NOT NULL,
                    PRIMARY KEY (selection_key, ticket_id)
                )
            """)
            conn.commit()

    def get(self, selection_key: str | None) -> list[str]:
        """Selected ticket ids in the order they were selected."""
        if not selection_key:
            return []
        with sqlite3.connect(self.db_path) as conn:
            rows = conn.execute(
                "SELECT ticket_id FROM ticket_selections WHERE selection_key = ? ORDER BY rowid",
                (selection_key,)
            ).fetchall()
        return [r[0] for r in rows]

    def replace(self, selection_key: str, ticket_ids: list[str]) -> None:
        """Swap the whole selection for ticket_ids in one transaction."""
        with sqlite3.connect(self.db_path) as conn:
            conn.execute("DELETE FROM ticket_selections WHERE selection_key = ?", (selection_key,))
            conn.executemany(
                "INSERT OR IGNORE INTO ticket_selections (selection_key, ticket_id) VALUES (?, ?)",
                [(selection_key, tid) for tid in ticket_ids],
            )
            conn.commit()
        log.debug("Selection %s now holds %d ticket(s)", selection_key, len(ticket_ids))

    def clear(self, selection_key: str | None) -> None:
        if selection_key:
            self.replace(selection_key, [])

    def forget_tickets(self, ticket_ids: list[str]) -> None:
        """Drop deleted tickets from every selection."""
        if not ticket_ids:
            return
        marks = ", ".join("?" for _ in ticket_ids)
        with sqlite3.connect(self.db_path) as conn:
            conn.execute(f"DELETE FROM ticket_selections WHERE ticket_id IN ({marks})", ticket_ids)
            conn.commit()
