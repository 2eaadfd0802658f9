"""
Ticket repository backing the ticket list view.

SQLite store with status history. Rows for the list view are built from
these tickets by the web layer; the repository knows nothing about columns.
"""
import logging
import sqlite3
import uuid
from dataclasses import dataclass
from datetime import UTC, datetime
from pathlib import Path
from typing import Optional

log = logging.getLogger(__name__)


class TicketStatus:
    """Status constants, in board order."""
    OPEN = "open"
    IN_PROGRESS = "in_progress"
    ON_HOLD = "on_hold"
    RESOLVED = "resolved"
    CLOSED = "closed"

    ALL = (OPEN, IN_PROGRESS, ON_HOLD, RESOLVED, CLOSED)
    TERMINAL = (RESOLVED, CLOSED)


class TicketPriority:
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    URGENT = "urgent"

    ALL = (LOW, MEDIUM, HIGH, URGENT)


@dataclass
class Ticket:
    """Ticket entity."""
    id: str
    ticket_id: str
    title: str
    status: str
    priority: str
    category: str | None
    assignee: str | None
    task_count: int
    created_at: str
    updated_at: str
    closed_at: str | None


@dataclass
class TicketHistoryEntry:
    id: str
    ticket_id: str
    from_status: str | None
    to_status: str
    changed_at: str


_TICKET_FIELDS = (
    "id, ticket_id, title, status, priority, category, assignee, task_count, "
    "created_at, updated_at, closed_at"
)


class TicketRepository:
    """Ticket store with its own SQLite database."""

    def __init__(self, db_path: Path):
        self.db_path = Path(db_path)
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        self._init_schema()

    def _init_schema(self):
        """Initialize ticket tables."""
        with sqlite3.connect(self.db_path) as conn:
            conn.execute("""
                CREATE TABLE IF NOT EXISTS tickets (
                    id TEXT PRIMARY KEY,
                    ticket_id TEXT NOT NULL,
                    title TEXT NOT NULL,
                    status TEXT NOT NULL,
                    priority TEXT NOT NULL,
                    category TEXT,
                    assignee TEXT,
                    task_count INTEGER NOT NULL DEFAULT 0,
                    created_at TEXT NOT NULL,
                    updated_at TEXT NOT NULL,
                    closed_at TEXT NULL
                )
            """)
            conn.execute("""
                CREATE TABLE IF NOT EXISTS ticket_history (
                    id TEXT PRIMARY KEY,
                    ticket_id TEXT NOT NULL,
                    from_status TEXT,
                    to_status TEXT NOT NULL,
                    changed_at TEXT NOT NULL,
                    FOREIGN KEY (ticket_id) REFERENCES tickets(id)
                )
            """)
            conn.execute("""
                CREATE INDEX IF NOT EXISTS idx_tickets_status
                ON tickets(status)
            """)
            conn.execute("""
                CREATE INDEX IF NOT EXISTS idx_ticket_history_ticket_id
                ON ticket_history(ticket_id)
            """)
            conn.commit()

    def _next_reference(self, conn: sqlite3.Connection) -> str:
        last = conn.execute(
            "SELECT MAX(CAST(SUBSTR(ticket_id, 5) AS INTEGER)) FROM tickets WHERE ticket_id LIKE 'TKT-%'"
        ).fetchone()[0]
        return f"TKT-{(last or 0) + 1:04d}"

    def create_ticket(
        self,
        title: str,
        priority: str = TicketPriority.MEDIUM,
        status: str = TicketStatus.OPEN,
        category: str | None = None,
        assignee: str | None = None,
        task_count: int = 0,
        ticket_id: str | None = None,
    ) -> Ticket:
        """Create a new ticket and record its initial status."""
        if status not in TicketStatus.ALL:
            raise ValueError(f"Unknown status '{status}'.")
        if priority not in TicketPriority.ALL:
            raise ValueError(f"Unknown priority '{priority}'.")

        internal_id = str(uuid.uuid4())
        now = datetime.now(UTC).isoformat()
        closed_at = now if status in TicketStatus.TERMINAL else None

        with sqlite3.connect(self.db_path) as conn:
            reference = ticket_id or self._next_reference(conn)
            conn.execute(f"""
                INSERT INTO tickets ({_TICKET_FIELDS})
                VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
            """, (
                internal_id,
                reference,
                title,
                status,
                priority,
                category,
                assignee,
                task_count,
                now,
                now,
                closed_at,
            ))

            conn.execute("""
                INSERT INTO ticket_history (id, ticket_id, from_status, to_status, changed_at)
                VALUES (?, ?, ?, ?, ?)
            """, (str(uuid.uuid4()), internal_id, None, status, now))

            conn.commit()

        log.info("Created ticket %s (%s)", reference, internal_id)
        return self.get_by_id(internal_id)

    def get_by_id(self, internal_id: str) -> Optional[Ticket]:
        """Get ticket by internal ID."""
        with sqlite3.connect(self.db_path) as conn:
            row = conn.execute(
                f"SELECT {_TICKET_FIELDS} FROM tickets WHERE id = ?",
                (internal_id,)
            ).fetchone()

            if row:
                return Ticket(*row)

        return None

    def update_status(self, internal_id: str, new_status: str) -> Optional[Ticket]:
        """Update ticket status and record history."""
        if new_status not in TicketStatus.ALL:
            raise ValueError(f"Unknown status '{new_status}'.")

        now = datetime.now(UTC).isoformat()

        with sqlite3.connect(self.db_path) as conn:
            row = conn.execute(
                "SELECT status FROM tickets WHERE id = ?", (internal_id,)
            ).fetchone()

            if not row:
                return None

            old_status = row[0]
            closed_at = now if new_status in TicketStatus.TERMINAL else None

            conn.execute(
                "UPDATE tickets SET status = ?, updated_at = ?, closed_at = ? WHERE id = ?",
                (new_status, now, closed_at, internal_id)
            )

            conn.execute("""
                INSERT INTO ticket_history (id, ticket_id, from_status, to_status, changed_at)
                VALUES (?, ?, ?, ?, ?)
            """, (str(uuid.uuid4()), internal_id, old_status, new_status, now))

            conn.commit()

        log.info("Ticket %s moved %s -> %s", internal_id, old_status, new_status)
        return self.get_by_id(internal_id)

    def list_tickets(self, status: str | None = None, search: str | None = None) -> list[Ticket]:
        """List tickets newest first, optionally filtered by status and title/reference text."""
        clauses = []
        params: list = []
        if status:
            clauses.append("status = ?")
            params.append(status)
        if search:
            clauses.append("(title LIKE ? OR ticket_id LIKE ?)")
            params.extend([f"%{search}%", f"%{search}%"])

        where = f" WHERE {' AND '.join(clauses)}" if clauses else ""
        with sqlite3.connect(self.db_path) as conn:
            rows = conn.execute(
                f"SELECT {_TICKET_FIELDS} FROM tickets{where} ORDER BY created_at DESC, rowid DESC",
                params,
            ).fetchall()
            return [Ticket(*r) for r in rows]

    def get_history(self, internal_id: str) -> list[TicketHistoryEntry]:
        """Get ticket status history."""
        with sqlite3.connect(self.db_path) as conn:
            rows = conn.execute(
                "SELECT id, ticket_id, from_status, to_status, changed_at FROM ticket_history WHERE ticket_id = ? ORDER BY changed_at ASC, rowid ASC",
                (internal_id,)
            ).fetchall()

            return [TicketHistoryEntry(*r) for r in rows]

    def delete_tickets(self, internal_ids: list[str]) -> int:
        """Delete tickets and their history. Returns the number deleted."""
        if not internal_ids:
            return 0
        marks = ", ".join("?" for _ in internal_ids)
        with sqlite3.connect(self.db_path) as conn:
            conn.execute(f"DELETE FROM ticket_history WHERE ticket_id IN ({marks})", internal_ids)
            cur = conn.execute(f"DELETE FROM tickets WHERE id IN ({marks})", internal_ids)
            conn.commit()
            deleted = cur.rowcount
        log.info("Deleted %d ticket(s)", deleted)
        return deleted
