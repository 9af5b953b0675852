"""Registry API schemas."""

from pydantic import BaseModel

from web.api.voting.schemas import LegislatorItem


class LegislatorsResponse(BaseModel):
    items: list[LegislatorItem]
    active: int
