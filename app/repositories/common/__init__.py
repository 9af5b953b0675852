from app.repositories.common.audit import AuditRepository
from app.repositories.common.outbox import OutboxRepository

__all__ = ["AuditRepository", "OutboxRepository"]
