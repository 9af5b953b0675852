"""Legislator (seated member) model."""

from dataclasses import dataclass

from app.models.common import BaseEntity

LEGISLATOR_DDL = """
CREATE TABLE IF NOT EXISTS legislator (
    id INTEGER PRIMARY KEY,
    name VARCHAR NOT NULL,
    party VARCHAR,
    seat_order INTEGER,
    active BOOLEAN NOT NULL DEFAULT TRUE
)
"""


@dataclass
class Legislator(BaseEntity):
    """Member of the chamber. Owned by the registry; only ``active`` changes here."""

    id: int
    name: str
    party: str | None
    seat_order: int | None
    active: bool
