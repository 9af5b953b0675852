"""Chamber roles and the single capability check used by every operation."""

from dataclasses import dataclass
from enum import StrEnum

from app.errors import Forbidden, Invalid


class Role(StrEnum):
    """Resolved caller roles supplied by the identity provider."""

    PRESIDING = "presiding"
    DEPUTY_PRESIDING = "deputy_presiding"
    SECRETARIAT = "secretariat"
    CHAMBER_SECRETARY = "chamber_secretary"
    OPERATOR = "operator"
    LEGISLATOR = "legislator"
    SUPERADMIN = "superadmin"
    DISPLAY = "display"


class Capability(StrEnum):
    LOAD_AGENDA = "load_agenda"
    START_SESSION = "start_session"
    CLOSE_SESSION = "close_session"
    PAUSE_SESSION = "pause_session"
    SUPERSEDE_SESSION = "supersede_session"
    MANAGE_ROLL_CALL = "manage_roll_call"
    MANAGE_VOTING = "manage_voting"
    DECIDE_UNDECIDED = "decide_undecided"
    CAST_VOTE = "cast_vote"
    REMOVE_VOTE = "remove_vote"
    MANAGE_REGISTRY = "manage_registry"
    VIEW = "view"


CAPABILITIES: dict[Capability, frozenset[Role]] = {
    Capability.LOAD_AGENDA: frozenset({Role.OPERATOR, Role.SECRETARIAT, Role.SUPERADMIN}),
    Capability.START_SESSION: frozenset({Role.PRESIDING, Role.DEPUTY_PRESIDING, Role.SECRETARIAT}),
    Capability.CLOSE_SESSION: frozenset({Role.PRESIDING, Role.DEPUTY_PRESIDING, Role.SECRETARIAT}),
    Capability.PAUSE_SESSION: frozenset({Role.PRESIDING, Role.DEPUTY_PRESIDING}),
    Capability.SUPERSEDE_SESSION: frozenset({Role.SUPERADMIN}),
    Capability.MANAGE_ROLL_CALL: frozenset({Role.CHAMBER_SECRETARY, Role.SECRETARIAT}),
    Capability.MANAGE_VOTING: frozenset({Role.PRESIDING, Role.CHAMBER_SECRETARY, Role.OPERATOR, Role.SUPERADMIN}),
    Capability.DECIDE_UNDECIDED: frozenset({Role.PRESIDING, Role.SUPERADMIN}),
    Capability.CAST_VOTE: frozenset({Role.LEGISLATOR, Role.PRESIDING, Role.DEPUTY_PRESIDING, Role.CHAMBER_SECRETARY}),
    Capability.REMOVE_VOTE: frozenset({Role.SUPERADMIN}),
    Capability.MANAGE_REGISTRY: frozenset({Role.SECRETARIAT, Role.SUPERADMIN}),
    Capability.VIEW: frozenset(Role),
}


def parse_role(value: str) -> Role:
    """Role from its string form; unknown strings are ``Invalid``."""
    try:
        return Role(value)
    except ValueError:
        raise Invalid(f"Unknown role: {value!r}", role=value) from None


def can(role: str, capability: Capability) -> bool:
    return parse_role(role) in CAPABILITIES[capability]


def require(role: str, capability: Capability) -> Role:
    """Raise ``Forbidden`` unless the role holds the capability."""
    parsed = parse_role(role)
    if parsed not in CAPABILITIES[capability]:
        raise Forbidden(f"Role {parsed} may not {capability}", role=parsed.value, capability=capability.value)
    return parsed


@dataclass(frozen=True)
class Actor:
    """Caller identity as resolved by the identity provider."""

    role: str
    id: int | None = None
