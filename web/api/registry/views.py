"""Registry API views - legislators."""

from app.container import container
from app.services.permissions import Actor
from web.api.errors import validate_positive
from web.api.voting.schemas import LegislatorItem

from .schemas import LegislatorsResponse


def list_legislators(actor: Actor, active_only: bool = False) -> LegislatorsResponse:
    data = container.coordinator.legislators(actor, active_only)
    return LegislatorsResponse(
        items=[LegislatorItem(**leg.to_dict()) for leg in data],
        active=sum(1 for leg in data if leg.active),
    )


def set_legislator_active(actor: Actor, legislator_id: int, active: bool) -> LegislatorItem:
    validate_positive(legislator_id, "legislator_id")
    return LegislatorItem(**container.coordinator.set_legislator_active(actor, legislator_id, active).to_dict())
