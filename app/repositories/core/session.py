"""Session repository - sittings and the chamber-wide active session slot."""

from datetime import datetime

from app.models import Session, SessionState
from app.repositories.base import BaseRepository

COLUMNS = (
    "id, code, state, quorum, open_initiative_id, created_at, started_at, started_by, "
    "paused_at, pause_until, closed_at, closed_by"
)


class SessionRepository(BaseRepository):
    """Repository for session rows, the active session slot and the open initiative pointer."""

    def get(self, session_id: int) -> Session | None:
        row = self.fetchone(f"SELECT {COLUMNS} FROM session WHERE id = ?", [session_id])
        return Session(*row) if row else None

    def create(self, code: str, quorum: int | None, created_at: datetime) -> int:
        row = self.fetchone(
            "INSERT INTO session (code, quorum, created_at) VALUES (?, ?, ?) RETURNING id",
            [code, quorum, created_at],
        )
        return int(row[0])

    def list_all(self, state: SessionState | None = None) -> list[Session]:
        if state:
            rows = self.fetchall(f"SELECT {COLUMNS} FROM session WHERE state = ? ORDER BY id", [state.value])
        else:
            rows = self.fetchall(f"SELECT {COLUMNS} FROM session ORDER BY id")
        return [Session(*r) for r in rows]

    # ========== Active session slot ==========

    def active_id(self) -> int | None:
        row = self.fetchone("SELECT session_id FROM session_slot WHERE slot = 1")
        return row[0] if row else None

    def claim_slot(self, session_id: int, expected: int | None) -> bool:
        """Swap the active session pointer from ``expected`` to ``session_id``."""
        return (
            self.modify(
                "UPDATE session_slot SET session_id = ? WHERE slot = 1 AND session_id IS NOT DISTINCT FROM ?",
                [session_id, expected],
            )
            == 1
        )

    def release_slot(self, session_id: int) -> bool:
        return self.modify("UPDATE session_slot SET session_id = NULL WHERE slot = 1 AND session_id = ?", [session_id]) == 1

    # ========== State transitions ==========

    def mark_started(self, session_id: int, actor_role: str, at: datetime) -> bool:
        return (
            self.modify(
                "UPDATE session SET state = 'started', started_at = ?, started_by = ? "
                "WHERE id = ? AND state = 'prepared'",
                [at, actor_role, session_id],
            )
            == 1
        )

    def mark_paused(self, session_id: int, at: datetime, until: datetime | None) -> bool:
        return (
            self.modify(
                "UPDATE session SET state = 'paused', paused_at = ?, pause_until = ? WHERE id = ? AND state = 'started'",
                [at, until, session_id],
            )
            == 1
        )

    def mark_resumed(self, session_id: int) -> bool:
        return (
            self.modify(
                "UPDATE session SET state = 'started', pause_until = NULL WHERE id = ? AND state = 'paused'",
                [session_id],
            )
            == 1
        )

    def mark_closed(self, session_id: int, actor_role: str, at: datetime) -> bool:
        return (
            self.modify(
                "UPDATE session SET state = 'closed', closed_at = ?, closed_by = ?, open_initiative_id = NULL, "
                "pause_until = NULL WHERE id = ? AND state IN ('started', 'paused')",
                [at, actor_role, session_id],
            )
            == 1
        )

    # ========== Open initiative pointer ==========

    def swap_open_initiative(self, session_id: int, expected: int | None, new: int | None) -> bool:
        """Compare-and-swap the session's current open initiative."""
        return (
            self.modify(
                "UPDATE session SET open_initiative_id = ? WHERE id = ? AND open_initiative_id IS NOT DISTINCT FROM ?",
                [new, session_id, expected],
            )
            == 1
        )

    def by_code(self, code: str) -> Session | None:
        row = self.fetchone(f"SELECT {COLUMNS} FROM session WHERE code = ?", [code])
        return Session(*row) if row else None
