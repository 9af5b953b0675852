"""Initiative repository - agenda items and their voting sub-state."""

from datetime import datetime

from loguru import logger

from app.models import AgendaItem, Initiative, InitiativeResult, Tally
from app.repositories.base import BaseRepository

COLUMNS = (
    "id, session_id, number, title, majority_rule, description, presenter, is_open, is_closed, "
    "result, favor, against, abstain, eligible_count, opened_at, closed_at"
)


class InitiativeRepository(BaseRepository):
    """Repository for initiative rows."""

    def get(self, initiative_id: int) -> Initiative | None:
        row = self.fetchone(f"SELECT {COLUMNS} FROM initiative WHERE id = ?", [initiative_id])
        return Initiative(*row) if row else None

    def for_session(self, session_id: int) -> list[Initiative]:
        """Agenda in order."""
        rows = self.fetchall(f"SELECT {COLUMNS} FROM initiative WHERE session_id = ? ORDER BY number", [session_id])
        return [Initiative(*r) for r in rows]

    def open_in_session(self, session_id: int) -> list[Initiative]:
        rows = self.fetchall(f"SELECT {COLUMNS} FROM initiative WHERE session_id = ? AND is_open", [session_id])
        return [Initiative(*r) for r in rows]

    def count(self, session_id: int) -> int:
        return int(self.fetchone("SELECT COUNT(*) FROM initiative WHERE session_id = ?", [session_id])[0])

    def create_many(self, session_id: int, items: list[AgendaItem]) -> list[int]:
        ids = []
        for item in items:
            row = self.fetchone(
                """
                INSERT INTO initiative (session_id, number, title, majority_rule, description, presenter)
                VALUES (?, ?, ?, ?, ?, ?)
                RETURNING id
                """,
                [session_id, item.number, item.title, item.majority_rule.value, item.description, item.presenter],
            )
            ids.append(int(row[0]))
        logger.debug("Created {} initiatives for session {}", len(ids), session_id)
        return ids

    def set_open(self, initiative_id: int, at: datetime) -> bool:
        """Pending -> Open."""
        return (
            self.modify(
                "UPDATE initiative SET is_open = TRUE, opened_at = ? WHERE id = ? AND NOT is_open AND NOT is_closed",
                [at, initiative_id],
            )
            == 1
        )

    def clear_open(self, initiative_id: int) -> bool:
        """Open -> Pending (superseded, votes kept)."""
        return self.modify("UPDATE initiative SET is_open = FALSE WHERE id = ? AND is_open", [initiative_id]) == 1

    def touch_open(self, initiative_id: int) -> bool:
        """Write to the row only if still open, so a racing close conflicts instead of skewing."""
        return (
            self.modify(
                "UPDATE initiative SET is_open = TRUE WHERE id = ? AND is_open AND NOT is_closed",
                [initiative_id],
            )
            == 1
        )

    def set_closed(
        self,
        initiative_id: int,
        result: InitiativeResult,
        tally: Tally,
        eligible_count: int,
        at: datetime,
    ) -> bool:
        return (
            self.modify(
                """
                UPDATE initiative
                SET is_open = FALSE, is_closed = TRUE, result = ?,
                    favor = ?, against = ?, abstain = ?, eligible_count = ?, closed_at = ?
                WHERE id = ? AND NOT is_closed
                """,
                [result.value, tally.favor, tally.against, tally.abstain, eligible_count, at, initiative_id],
            )
            == 1
        )

    def reopen(self, initiative_id: int, at: datetime) -> bool:
        """Closed(undecided) -> Open."""
        return (
            self.modify(
                """
                UPDATE initiative
                SET is_open = TRUE, is_closed = FALSE, result = NULL, eligible_count = NULL,
                    closed_at = NULL, opened_at = ?
                WHERE id = ? AND is_closed AND result = 'undecided'
                """,
                [at, initiative_id],
            )
            == 1
        )
