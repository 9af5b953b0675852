"""Session (sitting) model and the chamber-wide active session slot."""

from dataclasses import dataclass
from datetime import datetime
from enum import StrEnum

from app.models.common import BaseEntity

SESSION_SEQ_DDL = "CREATE SEQUENCE IF NOT EXISTS seq_session START 1"

SESSION_DDL = """
CREATE TABLE IF NOT EXISTS session (
    id INTEGER PRIMARY KEY DEFAULT nextval('seq_session'),
    code VARCHAR NOT NULL UNIQUE,
    state VARCHAR NOT NULL DEFAULT 'prepared'
        CHECK (state IN ('prepared', 'started', 'paused', 'closed')),
    quorum INTEGER,
    open_initiative_id INTEGER,
    created_at TIMESTAMP NOT NULL,
    started_at TIMESTAMP,
    started_by VARCHAR,
    paused_at TIMESTAMP,
    pause_until TIMESTAMP,
    closed_at TIMESTAMP,
    closed_by VARCHAR
)
"""

# Single row (slot = 1). session_id is the one started/paused session, NULL when none.
SESSION_SLOT_DDL = """
CREATE TABLE IF NOT EXISTS session_slot (
    slot INTEGER PRIMARY KEY CHECK (slot = 1),
    session_id INTEGER
)
"""

SESSION_SLOT_SEED = "INSERT OR IGNORE INTO session_slot VALUES (1, NULL)"


class SessionState(StrEnum):
    """Sitting lifecycle states."""

    PREPARED = "prepared"
    STARTED = "started"
    PAUSED = "paused"
    CLOSED = "closed"


@dataclass
class Session(BaseEntity):
    """One convened sitting of the chamber."""

    id: int
    code: str
    state: SessionState
    quorum: int | None
    open_initiative_id: int | None
    created_at: datetime
    started_at: datetime | None = None
    started_by: str | None = None
    paused_at: datetime | None = None
    pause_until: datetime | None = None
    closed_at: datetime | None = None
    closed_by: str | None = None

    def __post_init__(self):
        self.state = SessionState(self.state)

    @property
    def is_active(self) -> bool:
        return self.state in (SessionState.STARTED, SessionState.PAUSED)

    def pause_expired(self, now: datetime) -> bool:
        """Advisory: the announced recess is over but nobody resumed yet."""
        if self.state != SessionState.PAUSED or self.pause_until is None:
            return False
        return now >= self.pause_until
