"""Core domain models - legislators and sittings."""

from app.models.core.legislator import LEGISLATOR_DDL, Legislator
from app.models.core.session import (
    SESSION_DDL,
    SESSION_SEQ_DDL,
    SESSION_SLOT_DDL,
    SESSION_SLOT_SEED,
    Session,
    SessionState,
)

__all__ = [
    "LEGISLATOR_DDL",
    "Legislator",
    "SESSION_SEQ_DDL",
    "SESSION_DDL",
    "SESSION_SLOT_DDL",
    "SESSION_SLOT_SEED",
    "Session",
    "SessionState",
]
