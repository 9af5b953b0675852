"""Roll-call tracker - attendance, voting eligibility and quorum."""

from loguru import logger

from app.errors import Invalid, NotFound, PreconditionFailed
from app.models import Attendance, MajorityRule, Presence, QuorumStatus, RollCall, utcnow
from app.repositories.attendance import RollCallRepository
from app.repositories.core import LegislatorRepository, SessionRepository
from app.services.voting.tally import default_quorum, required_quorum


class RollCallTracker:
    """Records presence for the current sitting.

    ``is_eligible_to_vote`` is the only gate the vote ledger consults. Counts are
    frozen on ``confirm`` and re-derived on every later correction.
    """

    def __init__(
        self,
        roll_call_repo: RollCallRepository,
        legislator_repo: LegislatorRepository,
        session_repo: SessionRepository,
        default_quorum: int | None = None,
    ):
        self._roll_calls = roll_call_repo
        self._legislators = legislator_repo
        self._sessions = session_repo
        self._default_quorum = default_quorum
        logger.debug("RollCallTracker initialized")

    def get(self, roll_call_id: int) -> RollCall:
        roll_call = self._roll_calls.get(roll_call_id)
        if roll_call is None:
            raise NotFound(f"Roll call {roll_call_id} not found", roll_call_id=roll_call_id)
        return roll_call

    def current(self, session_id: int) -> RollCall | None:
        return self._roll_calls.current(session_id)

    def create_roll_call(self, session_id: int) -> tuple[RollCall, bool]:
        """Open roll call for the session, creating it if none. Second item tells whether it was created."""
        existing = self._roll_calls.current(session_id)
        if existing:
            return existing, False
        roll_call_id = self._roll_calls.create(session_id, utcnow())
        logger.info("Roll call {} opened for session {}", roll_call_id, session_id)
        return self._roll_calls.get(roll_call_id), True

    def restart(self, session_id: int) -> RollCall:
        """Finalize the current roll call and start over."""
        current = self._roll_calls.current(session_id)
        if current:
            self._roll_calls.finalize(current.id)
        roll_call, _ = self.create_roll_call(session_id)
        return roll_call

    def finalize_all(self, session_id: int) -> int:
        return self._roll_calls.finalize_all(session_id)

    def mark_attendance(
        self,
        roll_call_id: int,
        legislator_id: int,
        presence: Presence,
        marked_by: str | None = None,
        justification: str | None = None,
    ) -> tuple[Attendance, RollCall]:
        """Upsert one mark. A justification is only accepted on an absence and is
        kept across later absent re-marks; marking present drops it.
        """
        if justification is not None:
            justification = justification.strip()
            if presence != Presence.ABSENT:
                raise Invalid("Only an absence can be justified", presence=presence.value)
            if not justification:
                raise Invalid("Justification must not be blank", legislator_id=legislator_id)

        roll_call = self.get(roll_call_id)
        if roll_call.finalized:
            raise PreconditionFailed(f"Roll call {roll_call_id} is finalized", roll_call_id=roll_call_id)
        if self._legislators.get(legislator_id) is None:
            raise NotFound(f"Legislator {legislator_id} not found", legislator_id=legislator_id)

        previous = self._roll_calls.attendance(roll_call_id, legislator_id)
        late = bool(previous and previous.late_arrival)
        if roll_call.confirmed and previous and previous.presence == Presence.ABSENT and presence == Presence.PRESENT:
            late = True
            logger.info("Late arrival: legislator {} in roll call {}", legislator_id, roll_call_id)

        now = utcnow()
        justified_by, justified_at = None, None
        if justification:
            justified_by, justified_at = marked_by, now
            logger.info("Absence of legislator {} justified by {}", legislator_id, marked_by)
        elif presence == Presence.ABSENT and previous and previous.presence == Presence.ABSENT:
            justification = previous.justification
            justified_by, justified_at = previous.justified_by, previous.justified_at

        record = Attendance(
            roll_call_id=roll_call_id,
            legislator_id=legislator_id,
            presence=presence,
            late_arrival=late and presence == Presence.PRESENT,
            marked_by=marked_by,
            marked_at=now,
            justification=justification,
            justified_by=justified_by,
            justified_at=justified_at,
        )
        self._roll_calls.upsert_attendance(record)

        if roll_call.confirmed:
            self._store_counts(roll_call_id)
        return record, self._roll_calls.get(roll_call_id)

    def confirm(self, roll_call_id: int) -> RollCall:
        """Freeze the present/absent counts. Later corrections stay allowed."""
        roll_call = self.get(roll_call_id)
        if roll_call.finalized:
            raise PreconditionFailed(f"Roll call {roll_call_id} is finalized", roll_call_id=roll_call_id)
        counts = self._roll_calls.counts(roll_call_id)
        if not counts[Presence.PRESENT] + counts[Presence.ABSENT]:
            raise PreconditionFailed("No attendance recorded yet", roll_call_id=roll_call_id)
        self._store_counts(roll_call_id, confirm=True)
        logger.info(
            "Roll call {} confirmed: {} present, {} absent",
            roll_call_id,
            counts[Presence.PRESENT],
            counts[Presence.ABSENT],
        )
        return self._roll_calls.get(roll_call_id)

    def _store_counts(self, roll_call_id: int, confirm: bool = False) -> None:
        counts = self._roll_calls.counts(roll_call_id)
        self._roll_calls.store_counts(
            roll_call_id,
            counts[Presence.PRESENT],
            counts[Presence.ABSENT],
            confirmed_at=utcnow() if confirm else None,
        )

    def attendances(self, session_id: int) -> list[Attendance]:
        roll_call = self._roll_calls.current(session_id)
        return self._roll_calls.attendances(roll_call.id) if roll_call else []

    # ========== Eligibility ==========

    def has_recorded_attendance(self, session_id: int) -> bool:
        """At least one legislator marked present or absent in the current roll call."""
        roll_call = self._roll_calls.current(session_id)
        if roll_call is None:
            return False
        counts = self._roll_calls.counts(roll_call.id)
        return counts[Presence.PRESENT] + counts[Presence.ABSENT] > 0

    def is_eligible_to_vote(self, session_id: int, legislator_id: int) -> bool:
        roll_call = self._roll_calls.current(session_id)
        if roll_call is None:
            return False
        record = self._roll_calls.attendance(roll_call.id, legislator_id)
        return record is not None and record.presence == Presence.PRESENT

    # ========== Quorum ==========

    def session_quorum(self, session_id: int, total: int) -> int:
        """Session threshold: configured on the session, else global default, else majority."""
        session = self._sessions.get(session_id)
        if session and session.quorum:
            return session.quorum
        return self._default_quorum or default_quorum(total)

    def quorum(self, session_id: int, rule: MajorityRule | None = None) -> QuorumStatus:
        total = self._legislators.count_active()
        threshold = self.session_quorum(session_id, total)
        if rule is not None:
            threshold = required_quorum(rule, total, threshold)
        roll_call = self._roll_calls.current(session_id)
        present = self._roll_calls.present_count(roll_call.id) if roll_call else 0
        return QuorumStatus(present=present, required=threshold, total=total)

    def has_quorum(
        self,
        session_id: int,
        required_count: int | None = None,
        rule: MajorityRule | None = None,
    ) -> bool:
        status = self.quorum(session_id, rule)
        if required_count is not None:
            return status.present >= required_count
        return status.met
