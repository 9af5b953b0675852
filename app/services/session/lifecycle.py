"""Session lifecycle - prepared -> started -> paused <-> started -> closed."""

from datetime import timedelta

from loguru import logger

from app.errors import Conflict, Invalid, NotFound, PreconditionFailed
from app.models import AgendaItem, Initiative, RollCall, Session, SessionState, utcnow
from app.repositories.agenda import InitiativeRepository
from app.repositories.core import SessionRepository
from app.services.agenda.activation import ActivationGate
from app.services.attendance.roll_call import RollCallTracker


class SessionLifecycle:
    """Owns the session state machine and the chamber-wide active session slot."""

    def __init__(
        self,
        session_repo: SessionRepository,
        initiative_repo: InitiativeRepository,
        tracker: RollCallTracker,
        gate: ActivationGate,
    ):
        self._sessions = session_repo
        self._initiatives = initiative_repo
        self._tracker = tracker
        self._gate = gate
        logger.debug("SessionLifecycle initialized")

    def get(self, session_id: int) -> Session:
        session = self._sessions.get(session_id)
        if session is None:
            raise NotFound(f"Session {session_id} not found", session_id=session_id)
        return session

    def active(self) -> Session | None:
        active_id = self._sessions.active_id()
        return self._sessions.get(active_id) if active_id else None

    def load_agenda(self, code: str, items: list[AgendaItem], quorum: int | None = None) -> tuple[Session, list[Initiative]]:
        """Create a Prepared session with its ordered agenda."""
        if not code or not code.strip():
            raise Invalid("Session code is required")
        if not items:
            raise PreconditionFailed("Agenda has no initiatives", code=code)
        if quorum is not None and quorum < 1:
            raise Invalid(f"Quorum must be positive, got {quorum}", quorum=quorum)

        numbers = [item.number for item in items]
        if len(set(numbers)) != len(numbers):
            raise Invalid("Duplicate initiative numbers in agenda", numbers=numbers)
        blank = [item.number for item in items if not item.title or not item.title.strip()]
        if blank:
            raise Invalid("Initiatives without title", numbers=blank)
        if self._sessions.by_code(code):
            raise Conflict(f"Session {code} already exists", code=code)

        session_id = self._sessions.create(code, quorum, utcnow())
        self._initiatives.create_many(session_id, sorted(items, key=lambda i: i.number))
        logger.info("Agenda loaded: session {} with {} initiatives", code, len(items))
        return self.get(session_id), self._initiatives.for_session(session_id)

    def start(
        self,
        session_id: int,
        actor_role: str,
        supersede: bool = False,
    ) -> tuple[Session, RollCall, tuple[Session, list[Initiative]] | None]:
        """Start a prepared session and open its roll call.

        With ``supersede`` the currently active session is closed first; the
        closed session and its force-closed initiatives are returned as third item.
        """
        session = self.get(session_id)
        if session.state != SessionState.PREPARED:
            raise Conflict(f"Session {session.code} is {session.state}", session_id=session_id, state=session.state.value)
        if not self._initiatives.count(session_id):
            raise PreconditionFailed(f"Session {session.code} has no initiatives", session_id=session_id)

        superseded = None
        active_id = self._sessions.active_id()
        if active_id is not None:
            active = self.get(active_id)
            if not supersede:
                raise Conflict(
                    f"Session {active.code} is active",
                    active_session={"id": active.id, "code": active.code},
                    requires_supersede=True,
                )
            logger.warning("Session {} superseded by {}", active.code, session.code)
            superseded = self.close(active_id, actor_role)

        if not self._sessions.claim_slot(session_id, None):
            raise Conflict("Active session changed concurrently, retry", session_id=session_id)
        if not self._sessions.mark_started(session_id, actor_role, utcnow()):
            raise Conflict(f"Session {session.code} changed concurrently, retry", session_id=session_id)
        roll_call, _ = self._tracker.create_roll_call(session_id)

        logger.info("Session {} started by {}", session.code, actor_role)
        return self.get(session_id), roll_call, superseded

    def pause(self, session_id: int, minutes: int | None = None) -> Session:
        if minutes is not None and minutes <= 0:
            raise Invalid(f"Pause minutes must be positive, got {minutes}", minutes=minutes)
        session = self.get(session_id)
        now = utcnow()
        until = now + timedelta(minutes=minutes) if minutes else None
        if not self._sessions.mark_paused(session_id, now, until):
            raise Conflict(f"Session {session.code} is {session.state}, not started", state=session.state.value)
        logger.info("Session {} paused (until {})", session.code, until)
        return self.get(session_id)

    def resume(self, session_id: int) -> Session:
        session = self.get(session_id)
        if not self._sessions.mark_resumed(session_id):
            raise Conflict(f"Session {session.code} is {session.state}, not paused", state=session.state.value)
        logger.info("Session {} resumed", session.code)
        return self.get(session_id)

    def close(self, session_id: int, actor_role: str) -> tuple[Session, list[Initiative]]:
        """Close the session for good, force-closing any open initiative first."""
        session = self.get(session_id)
        if not session.is_active:
            raise Conflict(f"Session {session.code} is {session.state}", session_id=session_id, state=session.state.value)

        closed = self._gate.close_open(session_id)
        self._tracker.finalize_all(session_id)
        if not self._sessions.mark_closed(session_id, actor_role, utcnow()):
            raise Conflict(f"Session {session.code} changed concurrently, retry", session_id=session_id)
        self._sessions.release_slot(session_id)

        logger.info("Session {} closed by {}", session.code, actor_role)
        return self.get(session_id), closed
