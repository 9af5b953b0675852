"""Models package - DDL and entities for all domains."""

from app.models.agenda import (
    INITIATIVE_DDL,
    INITIATIVE_INDEXES,
    INITIATIVE_SEQ_DDL,
    AgendaItem,
    Initiative,
    InitiativeResult,
    InitiativeStatus,
    MajorityRule,
)
from app.models.attendance import (
    ATTENDANCE_DDL,
    ROLL_CALL_DDL,
    ROLL_CALL_INDEXES,
    ROLL_CALL_SEQ_DDL,
    Attendance,
    Presence,
    RollCall,
)
from app.models.common import (
    AUDIT_DDL,
    AUDIT_INDEXES,
    AUDIT_SEQ_DDL,
    OUTBOX_DDL,
    OUTBOX_SEQ_DDL,
    AuditEntry,
    BaseEntity,
    OutboxEvent,
    utcnow,
)
from app.models.core import (
    LEGISLATOR_DDL,
    SESSION_DDL,
    SESSION_SEQ_DDL,
    SESSION_SLOT_DDL,
    SESSION_SLOT_SEED,
    Legislator,
    Session,
    SessionState,
)
from app.models.voting import VOTE_DDL, QuorumStatus, Tally, VoteChoice

ALL_DDL = [
    # Sequences
    SESSION_SEQ_DDL,
    INITIATIVE_SEQ_DDL,
    ROLL_CALL_SEQ_DDL,
    OUTBOX_SEQ_DDL,
    AUDIT_SEQ_DDL,
    # Core
    LEGISLATOR_DDL,
    SESSION_DDL,
    SESSION_SLOT_DDL,
    SESSION_SLOT_SEED,
    # Agenda
    INITIATIVE_DDL,
    *INITIATIVE_INDEXES,
    # Attendance
    ROLL_CALL_DDL,
    ATTENDANCE_DDL,
    *ROLL_CALL_INDEXES,
    # Voting
    VOTE_DDL,
    # Common
    OUTBOX_DDL,
    AUDIT_DDL,
    *AUDIT_INDEXES,
]

__all__ = [
    # Common
    "BaseEntity",
    "utcnow",
    "OutboxEvent",
    "AuditEntry",
    # Core
    "Legislator",
    "Session",
    "SessionState",
    # Agenda
    "AgendaItem",
    "Initiative",
    "InitiativeResult",
    "InitiativeStatus",
    "MajorityRule",
    # Attendance
    "Attendance",
    "Presence",
    "RollCall",
    # Voting
    "VoteChoice",
    "Tally",
    "QuorumStatus",
    # All DDL
    "ALL_DDL",
]
