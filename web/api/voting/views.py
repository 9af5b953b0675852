"""Voting API views - thin layer over the coordinator."""

from app.container import container
from app.services.permissions import Actor
from web.api.errors import validate_choice, validate_positive
from web.api.session.schemas import InitiativeItem, TallyItem

from .schemas import LegislatorItem, NonVotersResponse, TallyResponse, VoteResponse


def activate_initiative(
    actor: Actor,
    initiative_id: int,
    force: bool = False,
    force_quorum: bool = False,
) -> InitiativeItem:
    """Open an initiative. Conflicts and quorum shortfalls come back as two-phase confirmations."""
    validate_positive(initiative_id, "initiative_id")
    return InitiativeItem.from_entity(container.coordinator.activate(actor, initiative_id, force, force_quorum))


def close_initiative(actor: Actor, initiative_id: int, undecided: bool = False) -> InitiativeItem:
    validate_positive(initiative_id, "initiative_id")
    return InitiativeItem.from_entity(container.coordinator.close_initiative(actor, initiative_id, undecided))


def reopen_initiative(actor: Actor, initiative_id: int) -> InitiativeItem:
    validate_positive(initiative_id, "initiative_id")
    return InitiativeItem.from_entity(container.coordinator.reopen_initiative(actor, initiative_id))


def cast_vote(actor: Actor, initiative_id: int, choice: str) -> VoteResponse:
    """Vote as the calling legislator."""
    validate_positive(initiative_id, "initiative_id")
    vote = validate_choice(choice)
    tally = container.coordinator.cast_vote(actor, initiative_id, actor.id, vote)
    return VoteResponse(
        initiative_id=initiative_id,
        legislator_id=actor.id,
        choice=vote.value,
        tally=TallyItem.from_entity(tally),
    )


def remove_vote(actor: Actor, initiative_id: int, legislator_id: int) -> VoteResponse:
    validate_positive(initiative_id, "initiative_id")
    validate_positive(legislator_id, "legislator_id")
    tally = container.coordinator.remove_vote(actor, initiative_id, legislator_id)
    return VoteResponse(
        initiative_id=initiative_id,
        legislator_id=legislator_id,
        choice=None,
        tally=TallyItem.from_entity(tally),
    )


def get_tally(actor: Actor, initiative_id: int) -> TallyResponse:
    validate_positive(initiative_id, "initiative_id")
    tally = container.coordinator.live_tally(actor, initiative_id)
    initiative = container.coordinator.gate.get(initiative_id)
    return TallyResponse(
        initiative=InitiativeItem.from_entity(initiative),
        tally=TallyItem.from_entity(tally),
    )


def get_non_voters(actor: Actor, initiative_id: int) -> NonVotersResponse:
    validate_positive(initiative_id, "initiative_id")
    data = container.coordinator.non_voters(actor, initiative_id)
    return NonVotersResponse(
        initiative_id=initiative_id,
        items=[LegislatorItem(**leg.to_dict()) for leg in data],
    )
