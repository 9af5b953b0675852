"""Common models - base classes and shared tables."""

from app.models.common.audit import AUDIT_DDL, AUDIT_INDEXES, AUDIT_SEQ_DDL, AuditEntry
from app.models.common.base import BaseEntity, utcnow
from app.models.common.outbox import OUTBOX_DDL, OUTBOX_SEQ_DDL, OutboxEvent

__all__ = [
    "BaseEntity",
    "utcnow",
    "OUTBOX_SEQ_DDL",
    "OUTBOX_DDL",
    "OutboxEvent",
    "AUDIT_SEQ_DDL",
    "AUDIT_DDL",
    "AUDIT_INDEXES",
    "AuditEntry",
]
