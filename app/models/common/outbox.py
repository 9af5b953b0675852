"""Outbox table - notifications written in the same transaction as the mutation."""

from dataclasses import dataclass
from datetime import datetime
from typing import Any

from app.models.common.base import BaseEntity

OUTBOX_SEQ_DDL = "CREATE SEQUENCE IF NOT EXISTS seq_outbox START 1"

OUTBOX_DDL = """
CREATE TABLE IF NOT EXISTS outbox (
    id BIGINT PRIMARY KEY DEFAULT nextval('seq_outbox'),
    event VARCHAR NOT NULL,
    payload JSON NOT NULL,
    created_at TIMESTAMP NOT NULL,
    published_at TIMESTAMP
)
"""


@dataclass
class OutboxEvent(BaseEntity):
    """A committed notification waiting for (or done with) delivery."""

    id: int
    event: str
    payload: dict[str, Any]
    created_at: datetime
    published_at: datetime | None = None
