"""Outbox repository - pending notifications."""

from datetime import datetime
from typing import Any

from loguru import logger

from app.models import OutboxEvent, utcnow
from app.repositories.base import BaseRepository


class OutboxRepository(BaseRepository):
    """Repository for the notification outbox."""

    def add(self, event: str, payload: dict[str, Any]) -> int:
        row = self.fetchone(
            "INSERT INTO outbox (event, payload, created_at) VALUES (?, ?, ?) RETURNING id",
            [event, self.to_json(payload), utcnow()],
        )
        logger.debug("Outbox +{} #{}", event, row[0])
        return int(row[0])

    def pending(self, limit: int = 100) -> list[OutboxEvent]:
        rows = self.fetchall(
            "SELECT id, event, payload, created_at, published_at FROM outbox "
            "WHERE published_at IS NULL ORDER BY id LIMIT ?",
            [limit],
        )
        return [OutboxEvent(r[0], r[1], self.from_json(r[2]), r[3], r[4]) for r in rows]

    def mark_published(self, event_id: int, at: datetime) -> None:
        self.execute("UPDATE outbox SET published_at = ? WHERE id = ?", [at, event_id])

    def recent(self, limit: int = 50) -> list[OutboxEvent]:
        rows = self.fetchall(
            "SELECT id, event, payload, created_at, published_at FROM outbox ORDER BY id DESC LIMIT ?",
            [limit],
        )
        return [OutboxEvent(r[0], r[1], self.from_json(r[2]), r[3], r[4]) for r in rows]
