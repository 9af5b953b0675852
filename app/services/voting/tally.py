"""Majority rules - pure functions, no dependencies, easily testable."""

from math import ceil

from app.models import InitiativeResult, MajorityRule, Tally


def qualified_threshold(eligible: int) -> int:
    """Two thirds of the eligible voters, rounded up."""
    return ceil(eligible * 2 / 3)


def approves(rule: MajorityRule, tally: Tally, eligible: int) -> bool:
    """Whether the tally passes the rule for ``eligible`` active legislators."""
    if rule == MajorityRule.SIMPLE:
        return tally.favor > tally.against
    if rule == MajorityRule.ABSOLUTE:
        return tally.favor > eligible / 2
    if rule == MajorityRule.QUALIFIED:
        return tally.favor >= qualified_threshold(eligible)
    if rule == MajorityRule.UNANIMOUS:
        return tally.favor == eligible
    raise ValueError(f"Unknown majority rule: {rule}")


def evaluate(rule: MajorityRule, tally: Tally, eligible: int) -> InitiativeResult:
    """Final result of an initiative."""
    return InitiativeResult.APPROVED if approves(rule, tally, eligible) else InitiativeResult.REJECTED


def required_quorum(rule: MajorityRule, total: int, session_default: int) -> int:
    """Present legislators needed before a vote under ``rule`` may open."""
    if rule == MajorityRule.QUALIFIED:
        return qualified_threshold(total)
    if rule == MajorityRule.UNANIMOUS:
        return total
    return session_default


def default_quorum(total: int) -> int:
    """Majority of the chamber."""
    return total // 2 + 1
