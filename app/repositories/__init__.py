"""Repositories package - data access layer for our database."""

from app.repositories.agenda import InitiativeRepository
from app.repositories.attendance import RollCallRepository
from app.repositories.base import BaseRepository
from app.repositories.common import AuditRepository, OutboxRepository
from app.repositories.core import LegislatorRepository, SessionRepository
from app.repositories.db import (
    close_db,
    configure,
    get_db,
    init_tables,
    transaction,
)
from app.repositories.voting import VoteRepository

__all__ = [
    # DB
    "configure",
    "get_db",
    "close_db",
    "init_tables",
    "transaction",
    # Base
    "BaseRepository",
    # Common
    "AuditRepository",
    "OutboxRepository",
    # Core
    "LegislatorRepository",
    "SessionRepository",
    # Agenda
    "InitiativeRepository",
    # Attendance
    "RollCallRepository",
    # Voting
    "VoteRepository",
]
