"""Session API views - thin layer over the coordinator."""

from app.container import container
from app.models import AgendaItem
from app.services.permissions import Actor
from web.api.errors import validate_majority_rule, validate_positive, validate_role

from .schemas import (
    AgendaItemIn,
    AgendaResponse,
    CloseSessionResponse,
    EventItem,
    EventsResponse,
    HistoryItem,
    HistoryResponse,
    InitiativeItem,
    QuorumItem,
    RollCallItem,
    SessionItem,
    StatusResponse,
    TallyItem,
)


def load_agenda(actor: Actor, code: str, items: list[AgendaItemIn], quorum: int | None = None) -> AgendaResponse:
    """Create a prepared session from loader output."""
    validate_role(actor.role)
    agenda = [
        AgendaItem(
            number=i.number,
            title=i.title,
            majority_rule=validate_majority_rule(i.majority_rule),
            description=i.description,
            presenter=i.presenter,
        )
        for i in items
    ]
    session, initiatives = container.coordinator.load_agenda(actor, code, agenda, quorum)
    return AgendaResponse(
        session=SessionItem.from_entity(session),
        initiatives=[InitiativeItem.from_entity(i) for i in initiatives],
    )


def start_session(actor: Actor, session_id: int, supersede: bool = False) -> SessionItem:
    validate_positive(session_id, "session_id")
    return SessionItem.from_entity(container.coordinator.start_session(actor, session_id, supersede))


def pause_session(actor: Actor, session_id: int, minutes: int | None = None) -> SessionItem:
    validate_positive(session_id, "session_id")
    return SessionItem.from_entity(container.coordinator.pause_session(actor, session_id, minutes))


def resume_session(actor: Actor, session_id: int) -> SessionItem:
    validate_positive(session_id, "session_id")
    return SessionItem.from_entity(container.coordinator.resume_session(actor, session_id))


def close_session(actor: Actor, session_id: int) -> CloseSessionResponse:
    validate_positive(session_id, "session_id")
    session, closed = container.coordinator.close_session(actor, session_id)
    return CloseSessionResponse(
        session=SessionItem.from_entity(session),
        results=[InitiativeItem.from_entity(i) for i in closed],
    )


def get_status(actor: Actor) -> StatusResponse:
    """Active session, agenda, open item, live tally and quorum."""
    s = container.coordinator.status(actor)
    return StatusResponse(
        session=SessionItem.from_entity(s.session) if s.session else None,
        initiatives=[InitiativeItem.from_entity(i) for i in s.initiatives],
        open_initiative=InitiativeItem.from_entity(s.open_initiative) if s.open_initiative else None,
        tally=TallyItem.from_entity(s.tally) if s.tally else None,
        roll_call=RollCallItem.from_entity(s.roll_call) if s.roll_call else None,
        quorum=QuorumItem.from_entity(s.quorum) if s.quorum else None,
        pause_expired=s.pause_expired,
    )


def list_sessions(actor: Actor) -> list[SessionItem]:
    return [SessionItem.from_entity(s) for s in container.coordinator.sessions(actor)]


def get_agenda(actor: Actor, session_id: int) -> AgendaResponse:
    validate_positive(session_id, "session_id")
    session = container.coordinator.session(actor, session_id)
    initiatives = container.coordinator.agenda(actor, session_id)
    return AgendaResponse(
        session=SessionItem.from_entity(session),
        initiatives=[InitiativeItem.from_entity(i) for i in initiatives],
    )


def get_history(actor: Actor, session_id: int) -> HistoryResponse:
    """Audit trail of a sitting."""
    validate_positive(session_id, "session_id")
    entries = container.coordinator.history(actor, session_id)
    return HistoryResponse(
        session_id=session_id,
        items=[HistoryItem(**e.to_dict()) for e in entries],
    )


def get_events(actor: Actor, limit: int = 50) -> EventsResponse:
    """Most recent notifications, newest first."""
    events = container.coordinator.events(actor, limit)
    return EventsResponse(items=[EventItem(**e.to_dict()) for e in events])
