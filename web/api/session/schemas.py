"""Session API schemas."""

from datetime import datetime

from pydantic import BaseModel, Field

from app.models import Initiative, QuorumStatus, RollCall, Session, Tally


class AgendaItemIn(BaseModel):
    """One agenda line as produced by the agenda loader."""

    number: int = Field(ge=1)
    title: str = Field(min_length=1)
    majority_rule: str = "simple"
    description: str | None = None
    presenter: str | None = None


class InitiativeItem(BaseModel):
    """Initiative with its voting sub-state."""

    id: int
    number: int
    title: str
    majority_rule: str
    status: str
    result: str | None
    favor: int
    against: int
    abstain: int
    eligible_count: int | None
    presenter: str | None = None

    @classmethod
    def from_entity(cls, i: Initiative) -> "InitiativeItem":
        return cls(
            id=i.id,
            number=i.number,
            title=i.title,
            majority_rule=i.majority_rule.value,
            status=i.status.value,
            result=i.result.value if i.result else None,
            favor=i.favor,
            against=i.against,
            abstain=i.abstain,
            eligible_count=i.eligible_count,
            presenter=i.presenter,
        )


class SessionItem(BaseModel):
    """Session summary."""

    id: int
    code: str
    state: str
    quorum: int | None
    open_initiative_id: int | None
    started_at: datetime | None
    started_by: str | None
    pause_until: datetime | None
    closed_at: datetime | None

    @classmethod
    def from_entity(cls, s: Session) -> "SessionItem":
        return cls(**{**s.to_dict(), "state": s.state.value})


class AgendaResponse(BaseModel):
    """Session with its ordered agenda."""

    session: SessionItem
    initiatives: list[InitiativeItem]


class QuorumItem(BaseModel):
    present: int
    required: int
    total: int
    met: bool
    shortfall: int

    @classmethod
    def from_entity(cls, q: QuorumStatus) -> "QuorumItem":
        return cls(**q.to_dict())


class TallyItem(BaseModel):
    favor: int
    against: int
    abstain: int
    total: int

    @classmethod
    def from_entity(cls, t: Tally) -> "TallyItem":
        return cls(favor=t.favor, against=t.against, abstain=t.abstain, total=t.total)


class RollCallItem(BaseModel):
    id: int
    session_id: int
    confirmed: bool
    present_count: int
    absent_count: int

    @classmethod
    def from_entity(cls, rc: RollCall) -> "RollCallItem":
        return cls(**rc.to_dict())


class StatusResponse(BaseModel):
    """Chamber status for consoles and the public display."""

    session: SessionItem | None
    initiatives: list[InitiativeItem]
    open_initiative: InitiativeItem | None
    tally: TallyItem | None
    roll_call: RollCallItem | None
    quorum: QuorumItem | None
    pause_expired: bool


class CloseSessionResponse(BaseModel):
    """Closed session and the results of initiatives closed with it."""

    session: SessionItem
    results: list[InitiativeItem]


class HistoryItem(BaseModel):
    id: int
    action: str
    actor_role: str
    actor_id: int | None
    detail: dict
    created_at: datetime


class HistoryResponse(BaseModel):
    session_id: int
    items: list[HistoryItem]


class EventItem(BaseModel):
    id: int
    event: str
    payload: dict
    created_at: datetime
    published_at: datetime | None


class EventsResponse(BaseModel):
    items: list[EventItem]
