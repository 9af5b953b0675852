"""Attendance API schemas."""

from datetime import datetime

from pydantic import BaseModel

from web.api.session.schemas import QuorumItem, RollCallItem


class AttendanceItem(BaseModel):
    """Presence of one legislator in the current roll call."""

    legislator_id: int
    presence: str
    late_arrival: bool
    marked_by: str | None
    marked_at: datetime
    justification: str | None = None
    justified_by: str | None = None
    justified_at: datetime | None = None


class AttendanceResponse(BaseModel):
    """Current roll call of a session."""

    session_id: int
    roll_call: RollCallItem | None
    items: list[AttendanceItem]
    quorum: QuorumItem


class MarkAttendanceResponse(BaseModel):
    item: AttendanceItem
    quorum: QuorumItem
