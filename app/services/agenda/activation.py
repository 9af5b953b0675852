"""Initiative activation gate - at most one open initiative per session."""

from loguru import logger

from app.errors import Conflict, NotFound, PreconditionFailed
from app.models import Initiative, InitiativeResult, QuorumStatus, Session, SessionState, Tally, utcnow
from app.repositories.agenda import InitiativeRepository
from app.repositories.core import SessionRepository
from app.services.attendance.roll_call import RollCallTracker
from app.services.voting.ledger import VoteLedger


class ActivationGate:
    """Moves initiatives through Pending -> Open -> Closed.

    The session's ``open_initiative_id`` is only ever changed by compare-and-swap,
    so of two racing activations exactly one wins.
    """

    def __init__(
        self,
        initiative_repo: InitiativeRepository,
        session_repo: SessionRepository,
        tracker: RollCallTracker,
        ledger: VoteLedger,
    ):
        self._initiatives = initiative_repo
        self._sessions = session_repo
        self._tracker = tracker
        self._ledger = ledger
        logger.debug("ActivationGate initialized")

    def get(self, initiative_id: int) -> Initiative:
        initiative = self._initiatives.get(initiative_id)
        if initiative is None:
            raise NotFound(f"Initiative {initiative_id} not found", initiative_id=initiative_id)
        return initiative

    def _started_session(self, initiative: Initiative) -> Session:
        session = self._sessions.get(initiative.session_id)
        if session.state != SessionState.STARTED:
            raise PreconditionFailed(
                f"Session {session.code} is {session.state}, not started",
                session_id=session.id,
                state=session.state.value,
            )
        return session

    def activate(
        self,
        initiative_id: int,
        force: bool = False,
        force_quorum: bool = False,
    ) -> tuple[Initiative, Initiative | None, QuorumStatus]:
        """Open an initiative for voting.

        Returns the opened initiative, the one it superseded (back to Pending, votes
        kept) and the quorum it was opened with.
        """
        initiative = self.get(initiative_id)
        session = self._started_session(initiative)

        if initiative.is_closed:
            raise PreconditionFailed(
                f"Initiative {initiative.number} is already closed",
                initiative_id=initiative_id,
                result=initiative.result.value,
            )
        if initiative.is_open:
            raise Conflict(
                f"Initiative {initiative.number} is already open",
                open_initiative=initiative.summary(),
                requires_force=False,
            )
        if not self._tracker.has_recorded_attendance(session.id):
            raise PreconditionFailed(f"No attendance recorded for session {session.code}", session_id=session.id)

        current_id = session.open_initiative_id
        current = self._initiatives.get(current_id) if current_id else None
        if current and not force:
            raise Conflict(
                f"Initiative {current.number} is open; confirm to supersede it",
                open_initiative=current.summary(),
                requires_force=True,
            )

        quorum = self._tracker.quorum(session.id, initiative.majority_rule)
        if not quorum.met:
            if not force_quorum:
                raise PreconditionFailed(
                    f"Quorum not met: {quorum.present} present, {quorum.required} required",
                    present=quorum.present,
                    required=quorum.required,
                    total=quorum.total,
                    shortfall=quorum.shortfall,
                    majority_rule=initiative.majority_rule.value,
                    requires_force_quorum=True,
                )
            logger.warning(
                "Initiative {} opened without quorum ({}/{})", initiative.number, quorum.present, quorum.required
            )

        if not self._sessions.swap_open_initiative(session.id, current_id, initiative_id):
            raise Conflict("Open initiative changed concurrently, retry", session_id=session.id)
        if current:
            self._initiatives.clear_open(current.id)
            logger.info("Initiative {} superseded by {}", current.number, initiative.number)
        if not self._initiatives.set_open(initiative_id, utcnow()):
            raise Conflict(f"Initiative {initiative.number} changed concurrently, retry", initiative_id=initiative_id)

        logger.info("Initiative {} opened in session {}", initiative.number, session.code)
        return self.get(initiative_id), current, quorum

    def close(self, initiative_id: int, undecided: bool = False) -> tuple[Initiative, bool]:
        """Close and compute the result. Second item is False when nothing changed."""
        initiative = self.get(initiative_id)

        if initiative.is_closed:
            return self._reclose(initiative, undecided), False
        if not initiative.is_open:
            raise PreconditionFailed(f"Initiative {initiative.number} is not open", initiative_id=initiative_id)

        result, tally, eligible = self._ledger.evaluate(initiative)
        if undecided:
            result = InitiativeResult.UNDECIDED
        if not self._initiatives.set_closed(initiative_id, result, tally, eligible, utcnow()):
            raise Conflict(f"Initiative {initiative.number} changed concurrently, retry", initiative_id=initiative_id)
        if not self._sessions.swap_open_initiative(initiative.session_id, initiative_id, None):
            raise Conflict("Open initiative changed concurrently, retry", session_id=initiative.session_id)

        logger.info(
            "Initiative {} closed: {} ({}/{}/{} of {})",
            initiative.number,
            result,
            tally.favor,
            tally.against,
            tally.abstain,
            eligible,
        )
        return self.get(initiative_id), True

    def _reclose(self, initiative: Initiative, undecided: bool) -> Initiative:
        """Closing twice is accepted only if the stored result is reproduced."""
        if initiative.result == InitiativeResult.UNDECIDED:
            return initiative
        if undecided:
            raise Conflict(
                f"Initiative {initiative.number} already closed as {initiative.result}",
                initiative_id=initiative.id,
                result=initiative.result.value,
            )
        result, tally, _ = self._ledger.evaluate(initiative, initiative.eligible_count)
        stored = Tally(initiative.favor, initiative.against, initiative.abstain)
        if result != initiative.result or tally != stored:
            raise Conflict(
                f"Initiative {initiative.number} is closed and its votes changed",
                initiative_id=initiative.id,
                stored_result=initiative.result.value,
                current_result=result.value,
            )
        return initiative

    def reopen(self, initiative_id: int) -> Initiative:
        """Closed(undecided) -> Open."""
        initiative = self.get(initiative_id)
        if not initiative.can_reopen:
            raise PreconditionFailed(
                f"Initiative {initiative.number} has no undecided result to reopen",
                initiative_id=initiative_id,
                status=initiative.status.value,
            )
        session = self._started_session(initiative)
        if session.open_initiative_id is not None:
            current = self.get(session.open_initiative_id)
            raise Conflict(
                f"Initiative {current.number} is open; close it first",
                open_initiative=current.summary(),
                requires_force=False,
            )
        if not self._sessions.swap_open_initiative(session.id, None, initiative_id):
            raise Conflict("Open initiative changed concurrently, retry", session_id=session.id)
        if not self._initiatives.reopen(initiative_id, utcnow()):
            raise Conflict(f"Initiative {initiative.number} changed concurrently, retry", initiative_id=initiative_id)

        logger.warning("Initiative {} reopened after undecided close", initiative.number)
        return self.get(initiative_id)

    def close_open(self, session_id: int) -> list[Initiative]:
        """Force-close every open initiative of the session."""
        return [self.close(i.id)[0] for i in self._initiatives.open_in_session(session_id)]
