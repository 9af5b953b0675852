"""Services package - service class exports."""

from app.services.agenda.activation import ActivationGate
from app.services.attendance.roll_call import RollCallTracker
from app.services.coordinator import ChamberStatus, Coordinator
from app.services.permissions import Actor, Capability, Role, require
from app.services.session.lifecycle import SessionLifecycle
from app.services.voting.ledger import VoteLedger

__all__ = [
    "ActivationGate",
    "Actor",
    "Capability",
    "ChamberStatus",
    "Coordinator",
    "Role",
    "RollCallTracker",
    "SessionLifecycle",
    "VoteLedger",
    "require",
]
