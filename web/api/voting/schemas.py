"""Voting API schemas."""

from pydantic import BaseModel

from web.api.session.schemas import InitiativeItem, TallyItem


class VoteResponse(BaseModel):
    """Live tally after a vote was recorded or removed."""

    initiative_id: int
    legislator_id: int
    choice: str | None
    tally: TallyItem


class TallyResponse(BaseModel):
    initiative: InitiativeItem
    tally: TallyItem


class LegislatorItem(BaseModel):
    id: int
    name: str
    party: str | None
    seat_order: int | None
    active: bool


class NonVotersResponse(BaseModel):
    """Present legislators who have not voted yet."""

    initiative_id: int
    items: list[LegislatorItem]
