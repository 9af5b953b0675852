"""Coordinator errors - one class per failure kind returned to callers."""

from enum import StrEnum
from typing import Any


class CoordinatorError(Exception):
    """Base class for every rejected chamber operation."""

    kind = "error"

    def __init__(self, message: str = "Operation rejected", **context: Any):
        self.message = message
        self.context = context
        super().__init__(self.message)

    def to_dict(self) -> dict[str, Any]:
        return {"kind": self.kind, "message": self.message, **self.context}


class Forbidden(CoordinatorError):
    """Role or voting eligibility check failed."""

    kind = "forbidden"


class PreconditionFailed(CoordinatorError):
    """A required prior state is missing (agenda, roll call, quorum, started session)."""

    kind = "precondition_failed"


class Conflict(CoordinatorError):
    """A mutually exclusive state is already taken (active session, open initiative)."""

    kind = "conflict"


class NotFound(CoordinatorError):
    """Unknown id."""

    kind = "not_found"


class Invalid(CoordinatorError):
    """Malformed choice, role or rule value."""

    kind = "invalid"


def coerce(enum_cls: type[StrEnum], value: Any, name: str) -> Any:
    """Enum member from a raw value; anything else is ``Invalid``."""
    try:
        return enum_cls(value)
    except ValueError:
        allowed = ", ".join(m.value for m in enum_cls)
        raise Invalid(f"Invalid {name}: {value!r} (expected one of {allowed})", **{name: value}) from None
