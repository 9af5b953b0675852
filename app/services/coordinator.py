"""Coordinator facade - the single entry point for chamber operations.

Every mutation runs as: capability check, aggregate lock, one transaction holding
the change plus its audit row and exactly one outbox event, commit, then relay drain.
A rejected operation rolls back and publishes nothing.
"""

from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Any

from loguru import logger

from app.errors import Forbidden, NotFound, PreconditionFailed, coerce
from app.models import (
    AgendaItem,
    Attendance,
    AuditEntry,
    Initiative,
    Legislator,
    MajorityRule,
    OutboxEvent,
    Presence,
    QuorumStatus,
    RollCall,
    Session,
    Tally,
    VoteChoice,
    utcnow,
)
from app.repositories import (
    AuditRepository,
    InitiativeRepository,
    LegislatorRepository,
    OutboxRepository,
    SessionRepository,
    transaction,
)
from app.services.agenda.activation import ActivationGate
from app.services.attendance.roll_call import RollCallTracker
from app.services.locks import CHAMBER, KeyedLocks, session_key
from app.services.notifications import EventName, OutboxRelay
from app.services.permissions import Actor, Capability, require
from app.services.session.lifecycle import SessionLifecycle
from app.services.voting.ledger import VoteLedger


def _initiative_payload(initiative: Initiative) -> dict[str, Any]:
    return {**initiative.summary(), "majority_rule": initiative.majority_rule.value}


def _result_payload(initiative: Initiative) -> dict[str, Any]:
    return {
        **initiative.summary(),
        "result": initiative.result.value if initiative.result else None,
        "tally": {"favor": initiative.favor, "against": initiative.against, "abstain": initiative.abstain},
        "eligible_count": initiative.eligible_count,
    }


@dataclass
class Mutation:
    """Collects the one event a committed mutation publishes."""

    actor: Actor
    action: str
    event: EventName | None = None
    payload: dict[str, Any] = field(default_factory=dict)
    session_id: int | None = None

    def publish(self, event: EventName, payload: dict[str, Any], session_id: int | None = None) -> None:
        if self.event is not None:
            raise RuntimeError(f"{self.action} already publishes {self.event}")
        self.event = event
        self.payload = payload
        self.session_id = session_id


@dataclass
class ChamberStatus:
    """Everything a console or display needs in one read."""

    session: Session | None
    initiatives: list[Initiative]
    open_initiative: Initiative | None
    tally: Tally | None
    roll_call: RollCall | None
    quorum: QuorumStatus | None
    pause_expired: bool


class Coordinator:
    """Facade over lifecycle, roll call, activation and ledger."""

    def __init__(
        self,
        session_repo: SessionRepository,
        initiative_repo: InitiativeRepository,
        legislator_repo: LegislatorRepository,
        audit_repo: AuditRepository,
        outbox_repo: OutboxRepository,
        lifecycle: SessionLifecycle,
        tracker: RollCallTracker,
        gate: ActivationGate,
        ledger: VoteLedger,
        relay: OutboxRelay,
        locks: KeyedLocks | None = None,
    ):
        self._sessions = session_repo
        self._initiatives = initiative_repo
        self._legislators = legislator_repo
        self._audit = audit_repo
        self._outbox = outbox_repo
        self.lifecycle = lifecycle
        self.tracker = tracker
        self.gate = gate
        self.ledger = ledger
        self.relay = relay
        self._locks = locks or KeyedLocks()
        logger.debug("Coordinator initialized")

    @contextmanager
    def _mutation(self, actor: Actor, action: str, *lock_keys: str, drain: bool = True) -> Iterator[Mutation]:
        """Locks, transaction, audit row and outbox row. With ``drain=False`` the caller drains
        once it has released any locks of its own."""
        mutation = Mutation(actor, action)
        with self._locks.hold(*lock_keys), transaction():
            yield mutation
            if mutation.event is not None:
                self._audit.add(action, actor.role, actor.id, mutation.session_id, mutation.payload)
                self._outbox.add(mutation.event, mutation.payload)

        if mutation.event is None:
            return
        logger.bind(audit=True, action=action).info(
            "{} (id={}) session={} {}", actor.role, actor.id, mutation.session_id, mutation.payload
        )
        if drain:
            self.relay.drain()

    def _session_of_initiative(self, initiative_id: int) -> int:
        initiative = self._initiatives.get(initiative_id)
        if initiative is None:
            raise NotFound(f"Initiative {initiative_id} not found", initiative_id=initiative_id)
        return initiative.session_id

    def _active_session(self, session_id: int) -> Session:
        session = self.lifecycle.get(session_id)
        if not session.is_active:
            raise PreconditionFailed(
                f"Session {session.code} is {session.state}", session_id=session_id, state=session.state.value
            )
        return session

    # ========== Session lifecycle ==========

    def load_agenda(
        self,
        actor: Actor,
        code: str,
        items: list[AgendaItem],
        quorum: int | None = None,
    ) -> tuple[Session, list[Initiative]]:
        require(actor.role, Capability.LOAD_AGENDA)
        for item in items:
            item.majority_rule = coerce(MajorityRule, item.majority_rule, "majority_rule")

        with self._mutation(actor, "load_agenda", CHAMBER) as m:
            session, initiatives = self.lifecycle.load_agenda(code, items, quorum)
            m.publish(
                EventName.AGENDA_LOADED,
                {
                    "session_id": session.id,
                    "code": session.code,
                    "quorum": session.quorum,
                    "initiatives": [_initiative_payload(i) for i in initiatives],
                },
                session.id,
            )
        return session, initiatives

    def start_session(self, actor: Actor, session_id: int, supersede: bool = False) -> Session:
        require(actor.role, Capability.SUPERSEDE_SESSION if supersede else Capability.START_SESSION)

        with self._locks.hold(CHAMBER):
            active_id = self._sessions.active_id()
            keys = [session_key(session_id)]
            if supersede and active_id is not None and active_id != session_id:
                keys.append(session_key(active_id))

            with self._mutation(actor, "start_session", CHAMBER, *keys, drain=False) as m:
                session, roll_call, superseded = self.lifecycle.start(session_id, actor.role, supersede)
                payload = {
                    "session_id": session.id,
                    "code": session.code,
                    "started_by": actor.role,
                    "roll_call_id": roll_call.id,
                }
                if superseded:
                    old, closed = superseded
                    payload["superseded_session_id"] = old.id
                    payload["superseded_results"] = [_result_payload(i) for i in closed]
                m.publish(EventName.SESSION_STARTED, payload, session.id)
        if superseded:
            self._locks.discard(session_key(superseded[0].id))
        self.relay.drain()
        return session

    def pause_session(self, actor: Actor, session_id: int, minutes: int | None = None) -> Session:
        require(actor.role, Capability.PAUSE_SESSION)
        with self._mutation(actor, "pause_session", session_key(session_id)) as m:
            session = self.lifecycle.pause(session_id, minutes)
            m.publish(
                EventName.SESSION_PAUSED,
                {"session_id": session.id, "code": session.code, "minutes": minutes, "pause_until": session.pause_until},
                session.id,
            )
        return session

    def resume_session(self, actor: Actor, session_id: int) -> Session:
        require(actor.role, Capability.PAUSE_SESSION)
        with self._mutation(actor, "resume_session", session_key(session_id)) as m:
            session = self.lifecycle.resume(session_id)
            m.publish(EventName.SESSION_RESUMED, {"session_id": session.id, "code": session.code}, session.id)
        return session

    def close_session(self, actor: Actor, session_id: int) -> tuple[Session, list[Initiative]]:
        require(actor.role, Capability.CLOSE_SESSION)
        with self._mutation(actor, "close_session", CHAMBER, session_key(session_id)) as m:
            session, closed = self.lifecycle.close(session_id, actor.role)
            m.publish(
                EventName.SESSION_CLOSED,
                {
                    "session_id": session.id,
                    "code": session.code,
                    "closed_by": actor.role,
                    "results": [_result_payload(i) for i in closed],
                },
                session.id,
            )
        self._locks.discard(session_key(session_id))
        return session, closed

    # ========== Roll call ==========

    def create_roll_call(self, actor: Actor, session_id: int) -> RollCall:
        """Idempotent: an existing open roll call is returned without an event."""
        require(actor.role, Capability.MANAGE_ROLL_CALL)
        with self._mutation(actor, "create_roll_call", session_key(session_id)) as m:
            self._active_session(session_id)
            roll_call, created = self.tracker.create_roll_call(session_id)
            if created:
                m.publish(EventName.ROLL_CALL_OPENED, {"session_id": session_id, "roll_call_id": roll_call.id}, session_id)
        return roll_call

    def restart_roll_call(self, actor: Actor, session_id: int) -> RollCall:
        require(actor.role, Capability.MANAGE_ROLL_CALL)
        with self._mutation(actor, "restart_roll_call", session_key(session_id)) as m:
            self._active_session(session_id)
            previous = self.tracker.current(session_id)
            roll_call = self.tracker.restart(session_id)
            m.publish(
                EventName.ROLL_CALL_OPENED,
                {
                    "session_id": session_id,
                    "roll_call_id": roll_call.id,
                    "restarted_from": previous.id if previous else None,
                },
                session_id,
            )
        return roll_call

    def mark_attendance(
        self,
        actor: Actor,
        roll_call_id: int,
        legislator_id: int,
        presence: Presence | str,
        justification: str | None = None,
    ) -> Attendance:
        require(actor.role, Capability.MANAGE_ROLL_CALL)
        presence = coerce(Presence, presence, "presence")
        session_id = self.tracker.get(roll_call_id).session_id

        with self._mutation(actor, "mark_attendance", session_key(session_id)) as m:
            record, roll_call = self.tracker.mark_attendance(
                roll_call_id, legislator_id, presence, actor.role, justification
            )
            m.publish(
                EventName.ATTENDANCE_UPDATED,
                {
                    "session_id": session_id,
                    "roll_call_id": roll_call_id,
                    "legislator_id": legislator_id,
                    "presence": record.presence.value,
                    "late_arrival": record.late_arrival,
                    "justification": record.justification,
                    "justified_by": record.justified_by,
                    "confirmed": roll_call.confirmed,
                    "quorum": self.tracker.quorum(session_id).to_dict(),
                },
                session_id,
            )
        return record

    def confirm_roll_call(self, actor: Actor, roll_call_id: int) -> RollCall:
        require(actor.role, Capability.MANAGE_ROLL_CALL)
        session_id = self.tracker.get(roll_call_id).session_id

        with self._mutation(actor, "confirm_roll_call", session_key(session_id)) as m:
            roll_call = self.tracker.confirm(roll_call_id)
            m.publish(
                EventName.ROLL_CALL_CONFIRMED,
                {
                    "session_id": session_id,
                    "roll_call_id": roll_call.id,
                    "present_count": roll_call.present_count,
                    "absent_count": roll_call.absent_count,
                    "quorum": self.tracker.quorum(session_id).to_dict(),
                },
                session_id,
            )
        return roll_call

    # ========== Initiatives ==========

    def activate(self, actor: Actor, initiative_id: int, force: bool = False, force_quorum: bool = False) -> Initiative:
        require(actor.role, Capability.MANAGE_VOTING)
        session_id = self._session_of_initiative(initiative_id)

        with self._mutation(actor, "activate", session_key(session_id)) as m:
            initiative, superseded, quorum = self.gate.activate(initiative_id, force, force_quorum)
            m.publish(
                EventName.INITIATIVE_OPENED,
                {
                    "session_id": session_id,
                    "initiative": _initiative_payload(initiative),
                    "superseded": superseded.summary() if superseded else None,
                    "quorum": quorum.to_dict(),
                    "quorum_forced": not quorum.met,
                },
                session_id,
            )
        return initiative

    def close_initiative(self, actor: Actor, initiative_id: int, undecided: bool = False) -> Initiative:
        """Close with a computed result, or as undecided. Re-closing returns the stored result."""
        require(actor.role, Capability.DECIDE_UNDECIDED if undecided else Capability.MANAGE_VOTING)
        session_id = self._session_of_initiative(initiative_id)

        with self._mutation(actor, "close_initiative", session_key(session_id)) as m:
            initiative, changed = self.gate.close(initiative_id, undecided)
            if changed:
                m.publish(EventName.INITIATIVE_CLOSED, {"session_id": session_id, **_result_payload(initiative)}, session_id)
        return initiative

    def reopen_initiative(self, actor: Actor, initiative_id: int) -> Initiative:
        require(actor.role, Capability.DECIDE_UNDECIDED)
        session_id = self._session_of_initiative(initiative_id)

        with self._mutation(actor, "reopen_initiative", session_key(session_id)) as m:
            initiative = self.gate.reopen(initiative_id)
            m.publish(
                EventName.INITIATIVE_REOPENED,
                {"session_id": session_id, "initiative": _initiative_payload(initiative), "tally": self.ledger.tally(initiative_id).to_dict()},
                session_id,
            )
        return initiative

    # ========== Votes ==========

    def cast_vote(self, actor: Actor, initiative_id: int, legislator_id: int, choice: VoteChoice | str) -> Tally:
        require(actor.role, Capability.CAST_VOTE)
        if actor.id != legislator_id:
            raise Forbidden("Votes can only be cast by the legislator in person", legislator_id=legislator_id)
        choice = coerce(VoteChoice, choice, "choice")
        session_id = self._session_of_initiative(initiative_id)

        with self._mutation(actor, "cast_vote", session_key(session_id)) as m:
            tally = self.ledger.cast_vote(initiative_id, legislator_id, choice)
            m.publish(
                EventName.VOTE_RECORDED,
                {
                    "session_id": session_id,
                    "initiative_id": initiative_id,
                    "legislator_id": legislator_id,
                    "choice": choice.value,
                    "tally": tally.to_dict(),
                },
                session_id,
            )
        return tally

    def remove_vote(self, actor: Actor, initiative_id: int, legislator_id: int) -> Tally:
        require(actor.role, Capability.REMOVE_VOTE)
        session_id = self._session_of_initiative(initiative_id)

        with self._mutation(actor, "remove_vote", session_key(session_id)) as m:
            tally = self.ledger.remove_vote(initiative_id, legislator_id)
            m.publish(
                EventName.VOTE_REMOVED,
                {
                    "session_id": session_id,
                    "initiative_id": initiative_id,
                    "legislator_id": legislator_id,
                    "tally": tally.to_dict(),
                },
                session_id,
            )
        return tally

    # ========== Registry ==========

    def set_legislator_active(self, actor: Actor, legislator_id: int, active: bool) -> Legislator:
        require(actor.role, Capability.MANAGE_REGISTRY)
        with self._mutation(actor, "set_legislator_active", CHAMBER) as m:
            if not self._legislators.set_active(legislator_id, active):
                raise NotFound(f"Legislator {legislator_id} not found", legislator_id=legislator_id)
            legislator = self._legislators.get(legislator_id)
            m.publish(EventName.LEGISLATOR_UPDATED, legislator.to_dict(), self._sessions.active_id())
        logger.info("Legislator {} active={}", legislator_id, active)
        return legislator

    # ========== Read models ==========

    def status(self, actor: Actor) -> ChamberStatus:
        require(actor.role, Capability.VIEW)
        session = self.lifecycle.active()
        if session is None:
            return ChamberStatus(None, [], None, None, None, None, False)

        initiatives = self._initiatives.for_session(session.id)
        open_initiative = next((i for i in initiatives if i.is_open), None)
        return ChamberStatus(
            session=session,
            initiatives=initiatives,
            open_initiative=open_initiative,
            tally=self.ledger.tally(open_initiative.id) if open_initiative else None,
            roll_call=self.tracker.current(session.id),
            quorum=self.tracker.quorum(session.id, open_initiative.majority_rule if open_initiative else None),
            pause_expired=session.pause_expired(utcnow()),
        )

    def sessions(self, actor: Actor) -> list[Session]:
        require(actor.role, Capability.VIEW)
        return self._sessions.list_all()

    def session(self, actor: Actor, session_id: int) -> Session:
        require(actor.role, Capability.VIEW)
        return self.lifecycle.get(session_id)

    def agenda(self, actor: Actor, session_id: int) -> list[Initiative]:
        require(actor.role, Capability.VIEW)
        self.lifecycle.get(session_id)
        return self._initiatives.for_session(session_id)

    def live_tally(self, actor: Actor, initiative_id: int) -> Tally:
        require(actor.role, Capability.VIEW)
        self._session_of_initiative(initiative_id)
        return self.ledger.tally(initiative_id)

    def non_voters(self, actor: Actor, initiative_id: int) -> list[Legislator]:
        require(actor.role, Capability.VIEW)
        return self.ledger.non_voters(initiative_id)

    def quorum(self, actor: Actor, session_id: int, majority_rule: MajorityRule | str | None = None) -> QuorumStatus:
        require(actor.role, Capability.VIEW)
        self.lifecycle.get(session_id)
        rule = coerce(MajorityRule, majority_rule, "majority_rule") if majority_rule else None
        return self.tracker.quorum(session_id, rule)

    def attendance(self, actor: Actor, session_id: int) -> list[Attendance]:
        require(actor.role, Capability.VIEW)
        self.lifecycle.get(session_id)
        return self.tracker.attendances(session_id)

    def legislators(self, actor: Actor, active_only: bool = False) -> list[Legislator]:
        require(actor.role, Capability.VIEW)
        return self._legislators.list_all(active_only)

    def history(self, actor: Actor, session_id: int) -> list[AuditEntry]:
        require(actor.role, Capability.VIEW)
        self.lifecycle.get(session_id)
        return self._audit.for_session(session_id)

    def events(self, actor: Actor, limit: int = 50) -> list[OutboxEvent]:
        require(actor.role, Capability.VIEW)
        return self._outbox.recent(limit)
