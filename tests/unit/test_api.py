"""Tests for the API views and error mapping."""

import pytest

from app.container import container
from app.errors import Conflict, Forbidden, Invalid, NotFound, PreconditionFailed
from app.models import MajorityRule
from tests.unit.conftest import DISPLAY, OPERATOR, PRESIDING, SECRETARY, SUPERADMIN, legislator
from web.api import attendance, registry, session, voting
from web.api.errors import (
    error_response,
    status_for,
    validate_choice,
    validate_majority_rule,
    validate_positive,
    validate_role,
)
from web.api.session.schemas import AgendaItemIn


@pytest.fixture
def api(coordinator, monkeypatch):
    monkeypatch.setattr(container, "coordinator", coordinator, raising=False)
    return coordinator


def agenda(*rules):
    return [AgendaItemIn(number=n, title=f"Item {n}", majority_rule=r) for n, r in enumerate(rules, 1)]


class TestErrors:
    @pytest.mark.parametrize(
        "exc, status",
        [
            (Forbidden(), 403),
            (PreconditionFailed(), 412),
            (Conflict(), 409),
            (NotFound(), 404),
            (Invalid(), 422),
        ],
    )
    def test_status(self, exc, status):
        assert status_for(exc) == status

    def test_response(self):
        err = error_response(Conflict("Initiative 1 is open", open_initiative={"id": 1}, requires_force=True))
        assert err.status == 409
        assert err.kind == "conflict"
        assert err.context == {"open_initiative": {"id": 1}, "requires_force": True}

    def test_validators(self):
        assert validate_role("presiding") == "presiding"
        assert validate_choice("abstain") == "abstain"
        assert validate_majority_rule("qualified") == MajorityRule.QUALIFIED
        with pytest.raises(Invalid):
            validate_role("president")
        with pytest.raises(Invalid):
            validate_choice("yes")
        with pytest.raises(Invalid):
            validate_positive(0, "session_id")

    def test_same_rejection_as_coordinator(self, api):
        with pytest.raises(Invalid) as from_view:
            validate_choice("yes")
        with pytest.raises(Invalid) as from_coordinator:
            api.cast_vote(legislator(1), 1, 1, "yes")
        assert from_view.value.message == from_coordinator.value.message
        assert "expected one of favor, against, abstain" in from_view.value.message
        assert from_view.value.context == {"choice": "yes"}


class TestSessionViews:
    def test_load_and_start(self, api):
        loaded = session.load_agenda(OPERATOR, "S-9", agenda("simple", "absolute"), quorum=5)
        assert loaded.session.state == "prepared"
        assert [i.majority_rule for i in loaded.initiatives] == ["simple", "absolute"]

        started = session.start_session(PRESIDING, loaded.session.id)
        assert started.state == "started"
        assert started.started_by == "presiding"

        status = session.get_status(DISPLAY)
        assert status.session.code == "S-9"
        assert status.roll_call is not None
        assert status.quorum.required == 5

    def test_bad_rule(self, api):
        with pytest.raises(Invalid):
            session.load_agenda(OPERATOR, "S-9", agenda("plurality"))

    def test_close(self, api, chamber):
        s, (a, _), _ = chamber.ready()
        voting.activate_initiative(PRESIDING, a.id)
        voting.cast_vote(legislator(1), a.id, "favor")
        closed = session.close_session(PRESIDING, s.id)
        assert closed.session.state == "closed"
        assert [(i.id, i.result) for i in closed.results] == [(a.id, "approved")]
        assert session.get_status(DISPLAY).session is None

    def test_history_and_events(self, api, chamber):
        s, _, _ = chamber.start()
        history = session.get_history(DISPLAY, s.id)
        assert [h.action for h in history.items] == ["load_agenda", "start_session"]
        events = session.get_events(DISPLAY, limit=1)
        assert [e.event for e in events.items] == ["SessionStarted"]

    def test_agenda(self, api, chamber):
        s, _ = chamber.load(rules=("simple", "unanimous", "qualified"))
        data = session.get_agenda(DISPLAY, s.id)
        assert [i.number for i in data.initiatives] == [1, 2, 3]
        assert all(i.status == "pending" for i in data.initiatives)
        assert [x.code for x in session.list_sessions(DISPLAY)] == ["S-1"]


class TestAttendanceViews:
    def test_mark_and_quorum(self, api, chamber):
        s, _, rc = chamber.start()
        marked = attendance.mark_attendance(SECRETARY, rc.id, 4, "present")
        assert marked.item.presence == "present"
        assert (marked.quorum.present, marked.quorum.required, marked.quorum.shortfall) == (1, 11, 10)

        data = attendance.get_attendance(DISPLAY, s.id)
        assert data.roll_call.id == rc.id
        assert [a.legislator_id for a in data.items] == [4]

        assert attendance.get_quorum(DISPLAY, s.id, "unanimous").required == 20

    def test_justified_absence(self, api, chamber):
        s, _, rc = chamber.start()
        marked = attendance.mark_attendance(SECRETARY, rc.id, 4, "absent", justification="Medical leave")
        assert (marked.item.justification, marked.item.justified_by) == ("Medical leave", "chamber_secretary")
        (item,) = attendance.get_attendance(DISPLAY, s.id).items
        assert item.justified_at is not None

    def test_bad_presence(self, api, chamber):
        _, _, rc = chamber.start()
        with pytest.raises(Invalid):
            attendance.mark_attendance(SECRETARY, rc.id, 4, "here")

    def test_confirm_and_restart(self, api, chamber):
        s, _, rc = chamber.start()
        attendance.mark_attendance(SECRETARY, rc.id, 1, "present")
        assert attendance.confirm_roll_call(SECRETARY, rc.id).confirmed
        restarted = attendance.restart_roll_call(SECRETARY, s.id)
        assert restarted.id != rc.id and not restarted.confirmed
        assert attendance.create_roll_call(SECRETARY, s.id).id == restarted.id


class TestVotingViews:
    def test_two_phase_activation(self, api, chamber):
        _, (a, b), _ = chamber.ready()
        voting.activate_initiative(PRESIDING, a.id)

        with pytest.raises(Conflict) as exc:
            voting.activate_initiative(PRESIDING, b.id)
        err = error_response(exc.value)
        assert (err.status, err.context["requires_force"]) == (409, True)

        opened = voting.activate_initiative(PRESIDING, b.id, force=True)
        assert opened.status == "open"

    def test_vote_and_tally(self, api, chamber):
        _, (a, _), _ = chamber.ready()
        voting.activate_initiative(PRESIDING, a.id)

        response = voting.cast_vote(legislator(3), a.id, "favor")
        assert (response.legislator_id, response.choice, response.tally.favor) == (3, "favor", 1)

        data = voting.get_tally(DISPLAY, a.id)
        assert data.initiative.status == "open"
        assert data.tally.total == 1

        non_voters = voting.get_non_voters(DISPLAY, a.id)
        assert len(non_voters.items) == 11

        removed = voting.remove_vote(SUPERADMIN, a.id, 3)
        assert removed.choice is None and removed.tally.total == 0

    def test_close_and_reopen(self, api, chamber):
        _, (a, _), _ = chamber.ready()
        voting.activate_initiative(PRESIDING, a.id)
        assert voting.close_initiative(PRESIDING, a.id, undecided=True).result == "undecided"
        assert voting.reopen_initiative(PRESIDING, a.id).status == "open"

    def test_bad_choice(self, api, chamber):
        _, (a, _), _ = chamber.ready()
        with pytest.raises(Invalid):
            voting.cast_vote(legislator(3), a.id, "yes")


class TestRegistryViews:
    def test_list_and_deactivate(self, api):
        assert registry.list_legislators(DISPLAY).active == 20
        item = registry.set_legislator_active(SUPERADMIN, 5, False)
        assert not item.active
        listed = registry.list_legislators(DISPLAY, active_only=True)
        assert (len(listed.items), listed.active) == (19, 19)
