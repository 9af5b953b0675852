"""Legislator repository - the registry of seated members."""

from loguru import logger

from app.models import Legislator
from app.repositories.base import BaseRepository

COLUMNS = "id, name, party, seat_order, active"


class LegislatorRepository(BaseRepository):
    """Repository for legislator registry access."""

    def get(self, legislator_id: int) -> Legislator | None:
        row = self.fetchone(f"SELECT {COLUMNS} FROM legislator WHERE id = ?", [legislator_id])
        return Legislator(*row) if row else None

    def list_all(self, active_only: bool = False) -> list[Legislator]:
        """Legislators in seating order."""
        where = "WHERE active" if active_only else ""
        rows = self.fetchall(f"SELECT {COLUMNS} FROM legislator {where} ORDER BY seat_order NULLS LAST, id")
        return [Legislator(*r) for r in rows]

    def count_active(self) -> int:
        """Live count of active legislators - the eligible voter denominator."""
        return int(self.fetchone("SELECT COUNT(*) FROM legislator WHERE active")[0])

    def upsert(self, legislators: list[Legislator]) -> int:
        for leg in legislators:
            self.execute(
                f"INSERT OR REPLACE INTO legislator ({COLUMNS}) VALUES (?, ?, ?, ?, ?)",
                [leg.id, leg.name, leg.party, leg.seat_order, leg.active],
            )
        logger.info("Upserted {} legislators", len(legislators))
        return len(legislators)

    def set_active(self, legislator_id: int, active: bool) -> bool:
        return self.modify("UPDATE legislator SET active = ? WHERE id = ?", [active, legislator_id]) == 1
