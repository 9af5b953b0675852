"""Tests for vote casting, replacement and removal."""

import pytest

from app.errors import Forbidden, Invalid, NotFound, PreconditionFailed
from app.models import InitiativeResult, Presence
from tests.unit.conftest import DISPLAY, OPERATOR, PRESIDING, SECRETARY, SUPERADMIN, legislator


@pytest.fixture
def opened(chamber, coordinator):
    """Started session, 12 present, first initiative open."""
    session, (a, b), roll_call = chamber.ready()
    coordinator.activate(PRESIDING, a.id)
    chamber.channel.clear()
    return session, a, b, roll_call


class TestCastVote:
    def test_tally(self, chamber, coordinator, opened):
        _, a, _, _ = opened
        chamber.vote(a.id, {1: "favor", 2: "against", 3: "abstain", 4: "favor"})
        tally = coordinator.live_tally(DISPLAY, a.id)
        assert (tally.favor, tally.against, tally.abstain, tally.total) == (2, 1, 1, 4)

    def test_event(self, coordinator, channel, opened):
        _, a, _, _ = opened
        tally = coordinator.cast_vote(legislator(5), a.id, 5, "favor")
        assert tally.favor == 1
        assert channel.names() == ["VoteRecorded"]
        payload = channel.of("VoteRecorded")[0]
        assert (payload["legislator_id"], payload["choice"]) == (5, "favor")
        assert payload["tally"]["favor"] == 1

    def test_revote_replaces(self, chamber, coordinator, opened):
        _, a, _, _ = opened
        chamber.vote(a.id, {1: "favor"})
        chamber.vote(a.id, {1: "against"})
        tally = coordinator.live_tally(DISPLAY, a.id)
        assert (tally.favor, tally.against, tally.total) == (0, 1, 1)

    def test_presiding_votes_as_legislator(self, coordinator, opened):
        _, a, _, _ = opened
        assert coordinator.cast_vote(PRESIDING, a.id, PRESIDING.id, "favor").favor == 1

    def test_pending_item(self, coordinator, opened):
        _, _, b, _ = opened
        with pytest.raises(PreconditionFailed):
            coordinator.cast_vote(legislator(1), b.id, 1, "favor")

    def test_closed_item(self, coordinator, opened):
        _, a, _, _ = opened
        coordinator.close_initiative(PRESIDING, a.id)
        with pytest.raises(PreconditionFailed):
            coordinator.cast_vote(legislator(1), a.id, 1, "favor")

    def test_paused(self, coordinator, opened):
        session, a, _, _ = opened
        coordinator.pause_session(PRESIDING, session.id, 10)
        with pytest.raises(PreconditionFailed):
            coordinator.cast_vote(legislator(1), a.id, 1, "favor")
        coordinator.resume_session(PRESIDING, session.id)
        assert coordinator.cast_vote(legislator(1), a.id, 1, "favor").favor == 1

    def test_absent(self, chamber, coordinator, opened):
        _, a, _, roll_call = opened
        chamber.mark(roll_call.id, [15], Presence.ABSENT)
        with pytest.raises(Forbidden):
            coordinator.cast_vote(legislator(15), a.id, 15, "favor")

    def test_unmarked(self, coordinator, opened):
        _, a, _, _ = opened
        with pytest.raises(Forbidden):
            coordinator.cast_vote(legislator(16), a.id, 16, "favor")

    def test_late_arrival_may_vote(self, chamber, coordinator, opened):
        _, a, _, roll_call = opened
        chamber.mark(roll_call.id, [17])
        assert coordinator.cast_vote(legislator(17), a.id, 17, "favor").favor == 1

    def test_marked_absent_after_voting(self, chamber, coordinator, opened):
        _, a, _, roll_call = opened
        chamber.vote(a.id, {1: "favor"})
        chamber.mark(roll_call.id, [1], Presence.ABSENT)
        with pytest.raises(Forbidden):
            coordinator.cast_vote(legislator(1), a.id, 1, "against")
        assert coordinator.live_tally(DISPLAY, a.id).favor == 1

    def test_other_legislator(self, coordinator, opened):
        _, a, _, _ = opened
        with pytest.raises(Forbidden):
            coordinator.cast_vote(legislator(1), a.id, 2, "favor")

    def test_role(self, coordinator, opened):
        _, a, _, _ = opened
        with pytest.raises(Forbidden):
            coordinator.cast_vote(OPERATOR, a.id, 1, "favor")

    def test_bad_choice(self, coordinator, channel, opened):
        _, a, _, _ = opened
        with pytest.raises(Invalid):
            coordinator.cast_vote(legislator(1), a.id, 1, "maybe")
        assert channel.events == []

    def test_inactive(self, coordinator, opened):
        _, a, _, _ = opened
        coordinator.set_legislator_active(SUPERADMIN, 3, False)
        with pytest.raises(Forbidden):
            coordinator.cast_vote(legislator(3), a.id, 3, "favor")

    def test_unknown_initiative(self, coordinator, opened):
        with pytest.raises(NotFound):
            coordinator.cast_vote(legislator(1), 999, 1, "favor")


class TestRemoveVote:
    def test_superadmin(self, chamber, coordinator, channel, opened):
        _, a, _, _ = opened
        chamber.vote(a.id, {1: "favor", 2: "favor"})
        channel.clear()

        tally = coordinator.remove_vote(SUPERADMIN, a.id, 1)

        assert tally.favor == 1
        assert channel.names() == ["VoteRemoved"]

    def test_role(self, chamber, coordinator, opened):
        _, a, _, _ = opened
        chamber.vote(a.id, {1: "favor"})
        for actor in (PRESIDING, SECRETARY, legislator(1)):
            with pytest.raises(Forbidden):
                coordinator.remove_vote(actor, a.id, 1)

    def test_missing_vote(self, coordinator, opened):
        _, a, _, _ = opened
        with pytest.raises(NotFound):
            coordinator.remove_vote(SUPERADMIN, a.id, 1)

    def test_closed_item(self, chamber, coordinator, opened):
        _, a, _, _ = opened
        chamber.vote(a.id, {1: "favor"})
        coordinator.close_initiative(PRESIDING, a.id)
        with pytest.raises(PreconditionFailed):
            coordinator.remove_vote(SUPERADMIN, a.id, 1)


class TestNonVoters:
    def test_present_without_vote(self, chamber, coordinator, opened):
        _, a, _, _ = opened
        chamber.vote(a.id, dict.fromkeys(range(1, 11), "favor"))
        assert [leg.id for leg in coordinator.non_voters(DISPLAY, a.id)] == [11, 12]

    def test_all_voted(self, chamber, coordinator, opened):
        _, a, _, _ = opened
        chamber.vote(a.id, dict.fromkeys(range(1, 13), "abstain"))
        assert coordinator.non_voters(DISPLAY, a.id) == []


class TestResults:
    @pytest.mark.parametrize(
        "rule, favor, against, expected",
        [
            ("simple", 6, 5, InitiativeResult.APPROVED),
            ("simple", 5, 5, InitiativeResult.REJECTED),
            ("absolute", 11, 0, InitiativeResult.APPROVED),
            ("absolute", 10, 0, InitiativeResult.REJECTED),
        ],
    )
    def test_rules(self, chamber, coordinator, rule, favor, against, expected):
        _, (item, _), _ = chamber.ready(rules=(rule, "simple"), present=range(1, 21))
        coordinator.activate(PRESIDING, item.id)
        choices = {i: "favor" for i in range(1, favor + 1)}
        choices |= {i: "against" for i in range(favor + 1, favor + against + 1)}
        chamber.vote(item.id, choices)
        assert coordinator.close_initiative(PRESIDING, item.id).result == expected

    def test_qualified(self, chamber, coordinator):
        _, (item, _), _ = chamber.ready(rules=("qualified", "simple"), present=range(1, 21))
        coordinator.activate(PRESIDING, item.id)
        chamber.vote(item.id, dict.fromkeys(range(1, 15), "favor"))
        closed = coordinator.close_initiative(PRESIDING, item.id)
        assert (closed.result, closed.favor) == (InitiativeResult.APPROVED, 14)

    def test_unanimous_needs_every_active_legislator(self, chamber, coordinator):
        _, (item, _), _ = chamber.ready(rules=("unanimous", "simple"), present=range(1, 21))
        coordinator.activate(PRESIDING, item.id)
        chamber.vote(item.id, dict.fromkeys(range(1, 20), "favor"))
        assert coordinator.close_initiative(PRESIDING, item.id).result == InitiativeResult.REJECTED
