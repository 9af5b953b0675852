"""Vote ledger - one vote per (initiative, legislator), live tallies and final results."""

from loguru import logger

from app.errors import Forbidden, NotFound, PreconditionFailed
from app.models import Initiative, InitiativeResult, Legislator, SessionState, Tally, VoteChoice, utcnow
from app.repositories.agenda import InitiativeRepository
from app.repositories.core import LegislatorRepository, SessionRepository
from app.repositories.voting import VoteRepository
from app.services.attendance.roll_call import RollCallTracker
from app.services.voting import tally as rules


class VoteLedger:
    """Accepts votes on the open initiative and evaluates results."""

    def __init__(
        self,
        vote_repo: VoteRepository,
        initiative_repo: InitiativeRepository,
        session_repo: SessionRepository,
        legislator_repo: LegislatorRepository,
        tracker: RollCallTracker,
    ):
        self._votes = vote_repo
        self._initiatives = initiative_repo
        self._sessions = session_repo
        self._legislators = legislator_repo
        self._tracker = tracker
        logger.debug("VoteLedger initialized")

    def _open_initiative(self, initiative_id: int) -> Initiative:
        initiative = self._initiatives.get(initiative_id)
        if initiative is None:
            raise NotFound(f"Initiative {initiative_id} not found", initiative_id=initiative_id)
        if not initiative.is_open or initiative.is_closed:
            raise PreconditionFailed(
                f"Initiative {initiative.number} is not open for voting",
                initiative_id=initiative_id,
                status=initiative.status.value,
            )
        return initiative

    def cast_vote(self, initiative_id: int, legislator_id: int, choice: VoteChoice) -> Tally:
        """Record or replace a vote. Returns the live tally."""
        initiative = self._open_initiative(initiative_id)
        session = self._sessions.get(initiative.session_id)
        if session.state != SessionState.STARTED:
            raise PreconditionFailed(
                f"Session {session.code} is {session.state}, voting is suspended",
                session_id=session.id,
                state=session.state.value,
            )

        legislator = self._legislators.get(legislator_id)
        if legislator is None:
            raise NotFound(f"Legislator {legislator_id} not found", legislator_id=legislator_id)
        if not legislator.active:
            raise Forbidden(f"Legislator {legislator_id} is not active", legislator_id=legislator_id)
        if not self._tracker.is_eligible_to_vote(session.id, legislator_id):
            raise Forbidden(
                f"Legislator {legislator_id} is not marked present in the current roll call",
                legislator_id=legislator_id,
            )

        # Row write so a concurrent close conflicts with this vote
        if not self._initiatives.touch_open(initiative_id):
            raise PreconditionFailed(f"Initiative {initiative.number} closed meanwhile", initiative_id=initiative_id)

        self._votes.upsert(initiative_id, legislator_id, choice, utcnow())
        logger.debug("Vote {} by {} on initiative {}", choice, legislator_id, initiative_id)
        return self._votes.tally(initiative_id)

    def remove_vote(self, initiative_id: int, legislator_id: int) -> Tally:
        self._open_initiative(initiative_id)
        if not self._votes.delete(initiative_id, legislator_id):
            raise NotFound(
                f"No vote by legislator {legislator_id} on initiative {initiative_id}",
                initiative_id=initiative_id,
                legislator_id=legislator_id,
            )
        logger.info("Vote by {} on initiative {} removed", legislator_id, initiative_id)
        return self._votes.tally(initiative_id)

    def tally(self, initiative_id: int) -> Tally:
        return self._votes.tally(initiative_id)

    def non_voters(self, initiative_id: int) -> list[Legislator]:
        """Present legislators with no vote yet on the initiative."""
        initiative = self._initiatives.get(initiative_id)
        if initiative is None:
            raise NotFound(f"Initiative {initiative_id} not found", initiative_id=initiative_id)
        roll_call = self._tracker.current(initiative.session_id)
        if roll_call is None:
            return []
        return self._votes.non_voters(initiative_id, roll_call.id)

    def eligible_voter_count(self) -> int:
        """Active legislators right now."""
        return self._legislators.count_active()

    def evaluate(self, initiative: Initiative, eligible: int | None = None) -> tuple[InitiativeResult, Tally, int]:
        """Result from the current votes. ``eligible`` defaults to the live active count."""
        if eligible is None:
            eligible = self.eligible_voter_count()
        tally = self._votes.tally(initiative.id)
        return rules.evaluate(initiative.majority_rule, tally, eligible), tally, eligible
