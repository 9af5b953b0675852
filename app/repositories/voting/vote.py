"""Vote repository - one row per (initiative, legislator)."""

from datetime import datetime

from app.models import Legislator, Tally, VoteChoice
from app.repositories.base import BaseRepository

COLUMNS = "initiative_id, legislator_id, choice, cast_at"


class VoteRepository(BaseRepository):
    """Repository for the vote ledger."""

    def upsert(self, initiative_id: int, legislator_id: int, choice: VoteChoice, at: datetime) -> None:
        """Replace-on-conflict: the latest choice wins."""
        self.execute(
            f"INSERT OR REPLACE INTO vote ({COLUMNS}) VALUES (?, ?, ?, ?)",
            [initiative_id, legislator_id, choice.value, at],
        )

    def delete(self, initiative_id: int, legislator_id: int) -> bool:
        return (
            self.modify(
                "DELETE FROM vote WHERE initiative_id = ? AND legislator_id = ?",
                [initiative_id, legislator_id],
            )
            == 1
        )

    def tally(self, initiative_id: int) -> Tally:
        """Choices of active legislators, the same population as the eligible count."""
        row = self.fetchone(
            """
            SELECT
                COUNT(*) FILTER (WHERE v.choice = 'favor'),
                COUNT(*) FILTER (WHERE v.choice = 'against'),
                COUNT(*) FILTER (WHERE v.choice = 'abstain')
            FROM vote v
            JOIN legislator l ON l.id = v.legislator_id
            WHERE v.initiative_id = ? AND l.active
            """,
            [initiative_id],
        )
        return Tally(favor=int(row[0]), against=int(row[1]), abstain=int(row[2]))

    def non_voters(self, initiative_id: int, roll_call_id: int) -> list[Legislator]:
        """Present, active legislators with no vote on the initiative yet."""
        rows = self.fetchall(
            """
            SELECT l.id, l.name, l.party, l.seat_order, l.active
            FROM legislator l
            JOIN attendance a ON a.legislator_id = l.id AND a.roll_call_id = ?
            WHERE l.active AND a.presence = 'present'
              AND l.id NOT IN (SELECT legislator_id FROM vote WHERE initiative_id = ?)
            ORDER BY l.seat_order NULLS LAST, l.id
            """,
            [roll_call_id, initiative_id],
        )
        return [Legislator(*r) for r in rows]
