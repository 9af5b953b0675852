"""Agenda domain models - initiatives and their majority rules."""

from app.models.agenda.initiative import (
    INITIATIVE_DDL,
    INITIATIVE_INDEXES,
    INITIATIVE_SEQ_DDL,
    AgendaItem,
    Initiative,
    InitiativeResult,
    InitiativeStatus,
    MajorityRule,
)

__all__ = [
    "INITIATIVE_SEQ_DDL",
    "INITIATIVE_DDL",
    "INITIATIVE_INDEXES",
    "AgendaItem",
    "Initiative",
    "InitiativeResult",
    "InitiativeStatus",
    "MajorityRule",
]
