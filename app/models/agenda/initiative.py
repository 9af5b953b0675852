"""Initiative (agenda item) model."""

from dataclasses import dataclass
from datetime import datetime
from enum import StrEnum

from app.models.common import BaseEntity

INITIATIVE_SEQ_DDL = "CREATE SEQUENCE IF NOT EXISTS seq_initiative START 1"

INITIATIVE_DDL = """
CREATE TABLE IF NOT EXISTS initiative (
    id INTEGER PRIMARY KEY DEFAULT nextval('seq_initiative'),
    session_id INTEGER NOT NULL,
    number INTEGER NOT NULL,
    title VARCHAR NOT NULL,
    majority_rule VARCHAR NOT NULL
        CHECK (majority_rule IN ('simple', 'absolute', 'qualified', 'unanimous')),
    description VARCHAR,
    presenter VARCHAR,
    is_open BOOLEAN NOT NULL DEFAULT FALSE,
    is_closed BOOLEAN NOT NULL DEFAULT FALSE,
    result VARCHAR CHECK (result IS NULL OR result IN ('approved', 'rejected', 'undecided')),
    favor INTEGER NOT NULL DEFAULT 0,
    against INTEGER NOT NULL DEFAULT 0,
    abstain INTEGER NOT NULL DEFAULT 0,
    eligible_count INTEGER,
    opened_at TIMESTAMP,
    closed_at TIMESTAMP,
    UNIQUE (session_id, number)
)
"""

INITIATIVE_INDEXES = [
    "CREATE INDEX IF NOT EXISTS idx_initiative_session ON initiative(session_id)",
]


class MajorityRule(StrEnum):
    """Approval function applied to the final tally."""

    SIMPLE = "simple"
    ABSOLUTE = "absolute"
    QUALIFIED = "qualified"
    UNANIMOUS = "unanimous"


class InitiativeResult(StrEnum):
    """Stored outcome. UNDECIDED is set only by an explicit close without decision."""

    APPROVED = "approved"
    REJECTED = "rejected"
    UNDECIDED = "undecided"


class InitiativeStatus(StrEnum):
    """Sub-state derived from the (open, closed) pair."""

    PENDING = "pending"
    OPEN = "open"
    CLOSED = "closed"


@dataclass
class AgendaItem(BaseEntity):
    """Agenda loader output - one item to create as an Initiative."""

    number: int
    title: str
    majority_rule: MajorityRule = MajorityRule.SIMPLE
    description: str | None = None
    presenter: str | None = None


@dataclass
class Initiative(BaseEntity):
    """Agenda item subject to a single favor/against/abstain vote."""

    id: int
    session_id: int
    number: int
    title: str
    majority_rule: MajorityRule
    description: str | None
    presenter: str | None
    is_open: bool
    is_closed: bool
    result: InitiativeResult | None
    favor: int
    against: int
    abstain: int
    eligible_count: int | None
    opened_at: datetime | None
    closed_at: datetime | None

    def __post_init__(self):
        self.majority_rule = MajorityRule(self.majority_rule)
        if self.result is not None:
            self.result = InitiativeResult(self.result)

    @property
    def status(self) -> InitiativeStatus:
        if self.is_closed:
            return InitiativeStatus.CLOSED
        if self.is_open:
            return InitiativeStatus.OPEN
        return InitiativeStatus.PENDING

    @property
    def can_reopen(self) -> bool:
        return self.is_closed and self.result == InitiativeResult.UNDECIDED

    def summary(self) -> dict:
        """Identity used in conflict reports and notifications."""
        return {"id": self.id, "number": self.number, "title": self.title}
