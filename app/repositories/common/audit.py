"""Audit repository - sitting history."""

from typing import Any

from app.models import AuditEntry, utcnow
from app.repositories.base import BaseRepository


class AuditRepository(BaseRepository):
    """Repository for audit log entries."""

    def add(
        self,
        action: str,
        actor_role: str,
        actor_id: int | None,
        session_id: int | None,
        detail: dict[str, Any],
    ) -> None:
        self.execute(
            """
            INSERT INTO audit_log (session_id, action, actor_role, actor_id, detail, created_at)
            VALUES (?, ?, ?, ?, ?, ?)
            """,
            [session_id, action, actor_role, actor_id, self.to_json(detail), utcnow()],
        )

    def for_session(self, session_id: int) -> list[AuditEntry]:
        rows = self.fetchall(
            """
            SELECT id, session_id, action, actor_role, actor_id, detail, created_at
            FROM audit_log WHERE session_id = ? ORDER BY id
            """,
            [session_id],
        )
        return [AuditEntry(r[0], r[1], r[2], r[3], r[4], self.from_json(r[5]), r[6]) for r in rows]
