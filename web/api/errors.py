"""API errors and validation helpers."""

from typing import Any

from pydantic import BaseModel

from app.errors import Conflict, CoordinatorError, Forbidden, Invalid, NotFound, PreconditionFailed, coerce
from app.models import MajorityRule, Presence, VoteChoice
from app.services.permissions import Role

# Error kind -> HTTP-style status
ERROR_STATUS: dict[type[CoordinatorError], int] = {
    Forbidden: 403,
    PreconditionFailed: 412,
    Conflict: 409,
    NotFound: 404,
    Invalid: 422,
}


class ErrorResponse(BaseModel):
    """Rejected operation."""

    status: int
    kind: str
    message: str
    context: dict[str, Any] = {}


def status_for(exc: CoordinatorError) -> int:
    return ERROR_STATUS.get(type(exc), 500)


def error_response(exc: CoordinatorError) -> ErrorResponse:
    return ErrorResponse(status=status_for(exc), kind=exc.kind, message=exc.message, context=exc.context)


def validate_role(role: str) -> Role:
    """Validate role is one of the chamber roles."""
    return coerce(Role, role, "role")


def validate_choice(choice: str) -> VoteChoice:
    return coerce(VoteChoice, choice, "choice")


def validate_presence(presence: str) -> Presence:
    return coerce(Presence, presence, "presence")


def validate_majority_rule(rule: str) -> MajorityRule:
    return coerce(MajorityRule, rule, "majority_rule")


def validate_positive(value: int, name: str) -> None:
    """Validate id-like integers."""
    if value < 1:
        raise Invalid(f"Invalid {name}: {value}. Must be positive", **{name: value})
