"""Audit log table - history of every committed chamber action."""

from dataclasses import dataclass
from datetime import datetime
from typing import Any

from app.models.common.base import BaseEntity

AUDIT_SEQ_DDL = "CREATE SEQUENCE IF NOT EXISTS seq_audit START 1"

AUDIT_DDL = """
CREATE TABLE IF NOT EXISTS audit_log (
    id BIGINT PRIMARY KEY DEFAULT nextval('seq_audit'),
    session_id INTEGER,
    action VARCHAR NOT NULL,
    actor_role VARCHAR NOT NULL,
    actor_id INTEGER,
    detail JSON NOT NULL,
    created_at TIMESTAMP NOT NULL
)
"""

AUDIT_INDEXES = [
    "CREATE INDEX IF NOT EXISTS idx_audit_session ON audit_log(session_id)",
]


@dataclass
class AuditEntry(BaseEntity):
    """One line of a sitting's history."""

    id: int
    session_id: int | None
    action: str
    actor_role: str
    actor_id: int | None
    detail: dict[str, Any]
    created_at: datetime
