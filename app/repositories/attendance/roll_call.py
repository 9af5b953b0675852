"""Roll call repository - attendance taking per sitting."""

from datetime import datetime

from app.models import Attendance, Presence, RollCall
from app.repositories.base import BaseRepository

COLUMNS = "id, session_id, created_at, confirmed, confirmed_at, finalized, present_count, absent_count"
ATTENDANCE_COLUMNS = (
    "roll_call_id, legislator_id, presence, late_arrival, marked_by, marked_at, justification, justified_by, justified_at"
)


class RollCallRepository(BaseRepository):
    """Repository for roll calls and attendance marks."""

    def get(self, roll_call_id: int) -> RollCall | None:
        row = self.fetchone(f"SELECT {COLUMNS} FROM roll_call WHERE id = ?", [roll_call_id])
        return RollCall(*row) if row else None

    def current(self, session_id: int) -> RollCall | None:
        """The session's non-finalized roll call, if any."""
        row = self.fetchone(
            f"SELECT {COLUMNS} FROM roll_call WHERE session_id = ? AND NOT finalized ORDER BY id DESC LIMIT 1",
            [session_id],
        )
        return RollCall(*row) if row else None

    def create(self, session_id: int, at: datetime) -> int:
        row = self.fetchone(
            "INSERT INTO roll_call (session_id, created_at) VALUES (?, ?) RETURNING id",
            [session_id, at],
        )
        return int(row[0])

    def finalize(self, roll_call_id: int) -> bool:
        return self.modify("UPDATE roll_call SET finalized = TRUE WHERE id = ? AND NOT finalized", [roll_call_id]) == 1

    def finalize_all(self, session_id: int) -> int:
        return self.modify("UPDATE roll_call SET finalized = TRUE WHERE session_id = ? AND NOT finalized", [session_id])

    def store_counts(self, roll_call_id: int, present: int, absent: int, confirmed_at: datetime | None = None) -> None:
        if confirmed_at:
            self.execute(
                "UPDATE roll_call SET present_count = ?, absent_count = ?, confirmed = TRUE, confirmed_at = ? WHERE id = ?",
                [present, absent, confirmed_at, roll_call_id],
            )
        else:
            self.execute(
                "UPDATE roll_call SET present_count = ?, absent_count = ? WHERE id = ?",
                [present, absent, roll_call_id],
            )

    # ========== Attendance ==========

    def attendance(self, roll_call_id: int, legislator_id: int) -> Attendance | None:
        row = self.fetchone(
            f"SELECT {ATTENDANCE_COLUMNS} FROM attendance WHERE roll_call_id = ? AND legislator_id = ?",
            [roll_call_id, legislator_id],
        )
        return Attendance(*row) if row else None

    def attendances(self, roll_call_id: int) -> list[Attendance]:
        rows = self.fetchall(
            f"SELECT {ATTENDANCE_COLUMNS} FROM attendance WHERE roll_call_id = ? ORDER BY legislator_id",
            [roll_call_id],
        )
        return [Attendance(*r) for r in rows]

    def upsert_attendance(self, record: Attendance) -> None:
        self.execute(
            f"INSERT OR REPLACE INTO attendance ({ATTENDANCE_COLUMNS}) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)",
            [
                record.roll_call_id,
                record.legislator_id,
                record.presence.value,
                record.late_arrival,
                record.marked_by,
                record.marked_at,
                record.justification,
                record.justified_by,
                record.justified_at,
            ],
        )

    def counts(self, roll_call_id: int) -> dict[Presence, int]:
        rows = self.fetchall(
            "SELECT presence, COUNT(*) FROM attendance WHERE roll_call_id = ? GROUP BY presence",
            [roll_call_id],
        )
        result = {p: 0 for p in Presence}
        for presence, n in rows:
            result[Presence(presence)] = int(n)
        return result

    def present_count(self, roll_call_id: int) -> int:
        """Present legislators that are still active in the registry."""
        row = self.fetchone(
            """
            SELECT COUNT(*) FROM attendance a
            JOIN legislator l ON l.id = a.legislator_id
            WHERE a.roll_call_id = ? AND a.presence = 'present' AND l.active
            """,
            [roll_call_id],
        )
        return int(row[0])
