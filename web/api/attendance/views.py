"""Attendance API views - roll call and quorum."""

from app.container import container
from app.services.permissions import Actor
from web.api.errors import validate_majority_rule, validate_positive, validate_presence
from web.api.session.schemas import QuorumItem, RollCallItem

from .schemas import AttendanceItem, AttendanceResponse, MarkAttendanceResponse


def create_roll_call(actor: Actor, session_id: int) -> RollCallItem:
    """Open the session's roll call (returns the existing one if open)."""
    validate_positive(session_id, "session_id")
    return RollCallItem.from_entity(container.coordinator.create_roll_call(actor, session_id))


def restart_roll_call(actor: Actor, session_id: int) -> RollCallItem:
    validate_positive(session_id, "session_id")
    return RollCallItem.from_entity(container.coordinator.restart_roll_call(actor, session_id))


def mark_attendance(
    actor: Actor,
    roll_call_id: int,
    legislator_id: int,
    presence: str,
    justification: str | None = None,
) -> MarkAttendanceResponse:
    """Mark one legislator. ``justification`` is accepted on absences only."""
    validate_positive(roll_call_id, "roll_call_id")
    validate_positive(legislator_id, "legislator_id")
    record = container.coordinator.mark_attendance(
        actor, roll_call_id, legislator_id, validate_presence(presence), justification
    )
    session_id = container.coordinator.tracker.get(roll_call_id).session_id
    return MarkAttendanceResponse(
        item=AttendanceItem(**record.to_dict()),
        quorum=QuorumItem.from_entity(container.coordinator.quorum(actor, session_id)),
    )


def confirm_roll_call(actor: Actor, roll_call_id: int) -> RollCallItem:
    validate_positive(roll_call_id, "roll_call_id")
    return RollCallItem.from_entity(container.coordinator.confirm_roll_call(actor, roll_call_id))


def get_attendance(actor: Actor, session_id: int) -> AttendanceResponse:
    validate_positive(session_id, "session_id")
    records = container.coordinator.attendance(actor, session_id)
    roll_call = container.coordinator.tracker.current(session_id)
    return AttendanceResponse(
        session_id=session_id,
        roll_call=RollCallItem.from_entity(roll_call) if roll_call else None,
        items=[AttendanceItem(**r.to_dict()) for r in records],
        quorum=QuorumItem.from_entity(container.coordinator.quorum(actor, session_id)),
    )


def get_quorum(actor: Actor, session_id: int, majority_rule: str | None = None) -> QuorumItem:
    """Quorum for the session, optionally for a specific majority rule."""
    validate_positive(session_id, "session_id")
    rule = validate_majority_rule(majority_rule) if majority_rule else None
    return QuorumItem.from_entity(container.coordinator.quorum(actor, session_id, rule))
