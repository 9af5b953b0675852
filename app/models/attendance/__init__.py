"""Attendance domain models - roll calls and presence marks."""

from app.models.attendance.roll_call import (
    ATTENDANCE_DDL,
    ROLL_CALL_DDL,
    ROLL_CALL_INDEXES,
    ROLL_CALL_SEQ_DDL,
    Attendance,
    Presence,
    RollCall,
)

__all__ = [
    "ROLL_CALL_SEQ_DDL",
    "ROLL_CALL_DDL",
    "ROLL_CALL_INDEXES",
    "ATTENDANCE_DDL",
    "Attendance",
    "Presence",
    "RollCall",
]
