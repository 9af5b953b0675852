"""Tests for the session lifecycle."""

from datetime import timedelta

import pytest

from app.errors import Conflict, Forbidden, Invalid, PreconditionFailed
from app.models import AgendaItem, InitiativeResult, SessionState, utcnow
from tests.unit.conftest import DEPUTY, DISPLAY, OPERATOR, PRESIDING, SECRETARIAT, SUPERADMIN, legislator


class TestLoadAgenda:
    def test_creates_prepared_session(self, chamber, channel):
        session, initiatives = chamber.load(("simple", "qualified"))
        assert session.state == SessionState.PREPARED
        assert [i.number for i in initiatives] == [1, 2]
        assert initiatives[1].majority_rule == "qualified"
        assert channel.names() == ["AgendaLoaded"]

    def test_empty_agenda(self, coordinator, channel):
        with pytest.raises(PreconditionFailed):
            coordinator.load_agenda(OPERATOR, "S-1", [])
        assert channel.events == []

    def test_bad_rule(self, coordinator):
        with pytest.raises(Invalid):
            coordinator.load_agenda(OPERATOR, "S-1", [AgendaItem(1, "Budget", "supermajority")])

    def test_duplicate_numbers(self, coordinator):
        items = [AgendaItem(1, "Budget"), AgendaItem(1, "Roads")]
        with pytest.raises(Invalid):
            coordinator.load_agenda(OPERATOR, "S-1", items)

    def test_duplicate_code(self, chamber):
        chamber.load(code="S-1")
        with pytest.raises(Conflict):
            chamber.load(code="S-1")

    def test_role(self, coordinator):
        with pytest.raises(Forbidden):
            coordinator.load_agenda(PRESIDING, "S-1", [AgendaItem(1, "Budget")])

    def test_items_sorted_by_number(self, coordinator):
        _, initiatives = coordinator.load_agenda(OPERATOR, "S-1", [AgendaItem(2, "B"), AgendaItem(1, "A")])
        assert [i.title for i in initiatives] == ["A", "B"]


class TestStart:
    def test_starts_and_opens_roll_call(self, chamber, coordinator, channel):
        session, _ = chamber.load()
        started = coordinator.start_session(PRESIDING, session.id)
        assert started.state == SessionState.STARTED
        assert started.started_by == "presiding"
        assert coordinator.tracker.current(session.id) is not None
        payload = channel.of("SessionStarted")[0]
        assert payload["roll_call_id"] == coordinator.tracker.current(session.id).id

    def test_one_notification(self, chamber, coordinator, channel):
        session, _ = chamber.load()
        channel.clear()
        coordinator.start_session(DEPUTY, session.id)
        assert channel.names() == ["SessionStarted"]

    @pytest.mark.parametrize("actor", [OPERATOR, legislator(5), DISPLAY])
    def test_role(self, chamber, coordinator, actor):
        session, _ = chamber.load()
        with pytest.raises(Forbidden):
            coordinator.start_session(actor, session.id)

    def test_twice(self, chamber, coordinator):
        session, _, _ = chamber.start()
        with pytest.raises(Conflict):
            coordinator.start_session(PRESIDING, session.id)

    def test_other_session_active(self, chamber, coordinator, channel):
        chamber.start(code="S-1")
        other, _ = chamber.load(code="S-2")
        channel.clear()
        with pytest.raises(Conflict) as exc:
            coordinator.start_session(SECRETARIAT, other.id)
        assert exc.value.context["active_session"]["code"] == "S-1"
        assert channel.events == []

    def test_supersede(self, chamber, coordinator, channel):
        first, initiatives, roll_call = chamber.start(code="S-1")
        chamber.mark(roll_call.id, range(1, 13))
        coordinator.activate(PRESIDING, initiatives[0].id)
        other, _ = chamber.load(code="S-2")
        channel.clear()

        coordinator.start_session(SUPERADMIN, other.id, supersede=True)

        assert coordinator.session(DISPLAY, first.id).state == SessionState.CLOSED
        assert coordinator.session(DISPLAY, other.id).state == SessionState.STARTED
        assert channel.names() == ["SessionStarted"]
        payload = channel.of("SessionStarted")[0]
        assert payload["superseded_session_id"] == first.id
        assert payload["superseded_results"][0]["result"] == InitiativeResult.REJECTED

    def test_supersede_needs_superadmin(self, chamber, coordinator):
        chamber.start(code="S-1")
        other, _ = chamber.load(code="S-2")
        with pytest.raises(Forbidden):
            coordinator.start_session(PRESIDING, other.id, supersede=True)


class TestPause:
    def test_pause_resume(self, chamber, coordinator, channel):
        session, _, _ = chamber.start()
        channel.clear()
        paused = coordinator.pause_session(PRESIDING, session.id, minutes=10)
        assert paused.state == SessionState.PAUSED
        assert paused.pause_until is not None
        resumed = coordinator.resume_session(DEPUTY, session.id)
        assert resumed.state == SessionState.STARTED
        assert resumed.pause_until is None
        assert channel.names() == ["SessionPaused", "SessionResumed"]

    def test_pause_twice(self, chamber, coordinator):
        session, _, _ = chamber.start()
        coordinator.pause_session(PRESIDING, session.id)
        with pytest.raises(Conflict):
            coordinator.pause_session(PRESIDING, session.id)

    def test_resume_started(self, chamber, coordinator):
        session, _, _ = chamber.start()
        with pytest.raises(Conflict):
            coordinator.resume_session(PRESIDING, session.id)

    def test_pause_prepared(self, chamber, coordinator):
        session, _ = chamber.load()
        with pytest.raises(Conflict):
            coordinator.pause_session(PRESIDING, session.id)

    def test_secretariat_cannot_pause(self, chamber, coordinator):
        session, _, _ = chamber.start()
        with pytest.raises(Forbidden):
            coordinator.pause_session(SECRETARIAT, session.id)

    def test_bad_minutes(self, chamber, coordinator):
        session, _, _ = chamber.start()
        with pytest.raises(Invalid):
            coordinator.pause_session(PRESIDING, session.id, minutes=0)

    def test_expiry_is_advisory(self, chamber, coordinator):
        session, _, _ = chamber.start()
        paused = coordinator.pause_session(PRESIDING, session.id, minutes=5)
        assert not paused.pause_expired(utcnow())
        assert paused.pause_expired(utcnow() + timedelta(minutes=6))
        assert coordinator.session(DISPLAY, session.id).state == SessionState.PAUSED


class TestClose:
    def test_close_force_closes_open_initiative(self, chamber, coordinator, channel):
        session, initiatives, _ = chamber.ready()
        coordinator.activate(PRESIDING, initiatives[0].id)
        chamber.vote(initiatives[0].id, {1: "favor", 2: "favor", 3: "against"})
        channel.clear()

        closed, results = coordinator.close_session(PRESIDING, session.id)

        assert closed.state == SessionState.CLOSED
        assert closed.open_initiative_id is None
        assert [r.result for r in results] == [InitiativeResult.APPROVED]
        assert channel.names() == ["SessionClosed"]
        assert channel.of("SessionClosed")[0]["results"][0]["tally"] == {"favor": 2, "against": 1, "abstain": 0}

    def test_pending_items_stay_pending(self, chamber, coordinator):
        session, initiatives, _ = chamber.ready()
        coordinator.close_session(PRESIDING, session.id)
        assert [i.status for i in coordinator.agenda(DISPLAY, session.id)] == ["pending", "pending"]

    def test_close_paused(self, chamber, coordinator):
        session, _, _ = chamber.start()
        coordinator.pause_session(PRESIDING, session.id)
        assert coordinator.close_session(SECRETARIAT, session.id)[0].state == SessionState.CLOSED

    def test_close_prepared(self, chamber, coordinator):
        session, _ = chamber.load()
        with pytest.raises(Conflict):
            coordinator.close_session(PRESIDING, session.id)

    def test_terminal(self, chamber, coordinator):
        session, _, _ = chamber.start()
        coordinator.close_session(PRESIDING, session.id)
        with pytest.raises(Conflict):
            coordinator.close_session(PRESIDING, session.id)
        with pytest.raises(Conflict):
            coordinator.start_session(PRESIDING, session.id)

    def test_frees_slot(self, chamber, coordinator):
        first, _, _ = chamber.start(code="S-1")
        coordinator.close_session(PRESIDING, first.id)
        other, _ = chamber.load(code="S-2")
        assert coordinator.start_session(PRESIDING, other.id).state == SessionState.STARTED

    def test_roll_call_finalized(self, chamber, coordinator):
        session, _, roll_call = chamber.start()
        coordinator.close_session(PRESIDING, session.id)
        assert coordinator.tracker.current(session.id) is None
        assert coordinator.tracker.get(roll_call.id).finalized


class TestSingleActiveSession:
    def test_at_most_one_active(self, chamber, coordinator):
        for n in range(1, 4):
            session, _ = chamber.load(code=f"S-{n}")
            try:
                coordinator.start_session(PRESIDING, session.id)
            except Conflict:
                pass
        active = [s for s in coordinator.sessions(DISPLAY) if s.is_active]
        assert len(active) == 1
