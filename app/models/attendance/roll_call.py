"""Roll call (attendance taking) and per-legislator attendance models."""

from dataclasses import dataclass
from datetime import datetime
from enum import StrEnum

from app.models.common import BaseEntity

ROLL_CALL_SEQ_DDL = "CREATE SEQUENCE IF NOT EXISTS seq_roll_call START 1"

ROLL_CALL_DDL = """
CREATE TABLE IF NOT EXISTS roll_call (
    id INTEGER PRIMARY KEY DEFAULT nextval('seq_roll_call'),
    session_id INTEGER NOT NULL,
    created_at TIMESTAMP NOT NULL,
    confirmed BOOLEAN NOT NULL DEFAULT FALSE,
    confirmed_at TIMESTAMP,
    finalized BOOLEAN NOT NULL DEFAULT FALSE,
    present_count INTEGER NOT NULL DEFAULT 0,
    absent_count INTEGER NOT NULL DEFAULT 0
)
"""

ATTENDANCE_DDL = """
CREATE TABLE IF NOT EXISTS attendance (
    roll_call_id INTEGER NOT NULL,
    legislator_id INTEGER NOT NULL,
    presence VARCHAR NOT NULL CHECK (presence IN ('present', 'absent', 'unmarked')),
    late_arrival BOOLEAN NOT NULL DEFAULT FALSE,
    marked_by VARCHAR,
    marked_at TIMESTAMP NOT NULL,
    justification VARCHAR,
    justified_by VARCHAR,
    justified_at TIMESTAMP,
    PRIMARY KEY (roll_call_id, legislator_id)
)
"""

ROLL_CALL_INDEXES = [
    "CREATE INDEX IF NOT EXISTS idx_roll_call_session ON roll_call(session_id)",
]


class Presence(StrEnum):
    """Attendance mark for one legislator."""

    PRESENT = "present"
    ABSENT = "absent"
    UNMARKED = "unmarked"


@dataclass
class RollCall(BaseEntity):
    """Attendance taking for a sitting. Counts are frozen on confirm and re-derived on correction."""

    id: int
    session_id: int
    created_at: datetime
    confirmed: bool
    confirmed_at: datetime | None
    finalized: bool
    present_count: int
    absent_count: int


@dataclass
class Attendance(BaseEntity):
    """(roll call, legislator) -> presence. Absences may carry a justification."""

    roll_call_id: int
    legislator_id: int
    presence: Presence
    late_arrival: bool
    marked_by: str | None
    marked_at: datetime
    justification: str | None = None
    justified_by: str | None = None
    justified_at: datetime | None = None

    def __post_init__(self):
        self.presence = Presence(self.presence)
