"""Attendance API."""

from web.api.attendance.views import (
    confirm_roll_call,
    create_roll_call,
    get_attendance,
    get_quorum,
    mark_attendance,
    restart_roll_call,
)

__all__ = [
    "create_roll_call",
    "restart_roll_call",
    "mark_attendance",
    "confirm_roll_call",
    "get_attendance",
    "get_quorum",
]
