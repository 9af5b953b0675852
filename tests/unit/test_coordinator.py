"""Tests for the coordinator facade: outbox, audit trail, read models, channels."""

import httpx
import pytest

from app.container import build_coordinator, container
from app.errors import Conflict, Forbidden, NotFound, PreconditionFailed
from app.repositories import SessionRepository
from app.services.notifications import HttpChannel, MemoryChannel, PublishError
from app.services.notifications.channels import _is_retryable_error
from tests.unit.conftest import DISPLAY, OPERATOR, PRESIDING, SECRETARY, SUPERADMIN, Chamber, legislator


class TestOutbox:
    def test_one_event_per_mutation(self, chamber, coordinator, channel):
        session, (a, _), roll_call = chamber.start()
        assert channel.names() == ["AgendaLoaded", "SessionStarted"]

        chamber.mark(roll_call.id, range(1, 13))
        coordinator.confirm_roll_call(SECRETARY, roll_call.id)
        coordinator.activate(PRESIDING, a.id)
        chamber.vote(a.id, {1: "favor"})
        coordinator.close_initiative(PRESIDING, a.id)
        coordinator.close_session(PRESIDING, session.id)

        assert channel.names()[2:] == [
            *["AttendanceUpdated"] * 12,
            "RollCallConfirmed",
            "InitiativeOpened",
            "VoteRecorded",
            "InitiativeClosed",
            "SessionClosed",
        ]
        assert all(e.published_at for e in coordinator.events(DISPLAY, 100))

    def test_rejection_writes_nothing(self, chamber, coordinator, channel):
        session, (a, _), _ = chamber.start()
        before = len(coordinator.events(DISPLAY, 100))
        history = len(coordinator.history(DISPLAY, session.id))

        with pytest.raises(PreconditionFailed):
            coordinator.activate(PRESIDING, a.id)
        with pytest.raises(Forbidden):
            coordinator.close_session(OPERATOR, session.id)

        assert len(coordinator.events(DISPLAY, 100)) == before
        assert len(coordinator.history(DISPLAY, session.id)) == history

    def test_rolled_back_change(self, chamber, coordinator):
        session, _ = chamber.load()
        coordinator.start_session(PRESIDING, session.id)
        with pytest.raises(Conflict):
            coordinator.start_session(PRESIDING, session.id)
        assert len(coordinator.tracker.attendances(session.id)) == 0
        assert coordinator.tracker.current(session.id) is not None

    def test_failed_channel_keeps_event_pending(self, registry):
        failing = MemoryChannel(fail=True)
        coordinator = build_coordinator(failing, default_quorum=None)
        session, _ = Chamber(coordinator, failing).load()

        pending = coordinator.events(DISPLAY)
        assert [e.event for e in pending] == ["AgendaLoaded"]
        assert pending[0].published_at is None
        failing.fail = False
        assert coordinator.relay.drain() == 1
        assert failing.names() == ["AgendaLoaded"]
        assert coordinator.events(DISPLAY)[0].published_at is not None

    def test_events_in_commit_order(self, registry):
        failing = MemoryChannel(fail=True)
        coordinator = build_coordinator(failing, default_quorum=None)
        chamber = Chamber(coordinator, failing)
        session, _ = chamber.load()
        coordinator.start_session(PRESIDING, session.id)

        failing.fail = False
        assert coordinator.relay.drain() == 2
        assert failing.names() == ["AgendaLoaded", "SessionStarted"]


class TestHistory:
    def test_audit_rows(self, chamber, coordinator):
        session, (a, _), _ = chamber.ready()
        coordinator.activate(PRESIDING, a.id)
        chamber.vote(a.id, {4: "against"})

        entries = coordinator.history(DISPLAY, session.id)

        assert [e.action for e in entries][-2:] == ["activate", "cast_vote"]
        vote = entries[-1]
        assert (vote.actor_role, vote.actor_id) == ("legislator", 4)
        assert vote.detail["choice"] == "against"
        assert entries[0].action == "load_agenda"

    def test_idempotent_roll_call_has_no_row(self, chamber, coordinator, channel):
        session, _, roll_call = chamber.start()
        channel.clear()
        assert coordinator.create_roll_call(SECRETARY, session.id).id == roll_call.id
        assert channel.events == []


class TestStatus:
    def test_idle(self, coordinator):
        status = coordinator.status(DISPLAY)
        assert status.session is None
        assert status.initiatives == []
        assert not status.pause_expired

    def test_live(self, chamber, coordinator):
        session, (a, b), roll_call = chamber.ready(rules=("qualified", "simple"), present=range(1, 16))
        coordinator.activate(PRESIDING, a.id)
        chamber.vote(a.id, {1: "favor", 2: "favor", 3: "abstain"})

        status = coordinator.status(DISPLAY)

        assert status.session.id == session.id
        assert [i.id for i in status.initiatives] == [a.id, b.id]
        assert status.open_initiative.id == a.id
        assert (status.tally.favor, status.tally.abstain) == (2, 1)
        assert status.roll_call.id == roll_call.id
        assert (status.quorum.present, status.quorum.required, status.quorum.met) == (15, 14, True)

    def test_pause_expired(self, chamber, coordinator):
        session, _, _ = chamber.start()
        coordinator.pause_session(PRESIDING, session.id, 5)
        SessionRepository().execute(
            "UPDATE session SET pause_until = pause_until - INTERVAL 1 HOUR WHERE id = ?", [session.id]
        )
        assert coordinator.status(DISPLAY).pause_expired


class TestRegistry:
    def test_set_active(self, coordinator, channel):
        leg = coordinator.set_legislator_active(SUPERADMIN, 7, False)
        assert not leg.active
        assert 7 not in [x.id for x in coordinator.legislators(DISPLAY, active_only=True)]
        assert len(coordinator.legislators(DISPLAY)) == 20
        assert channel.of("LegislatorUpdated")[0]["id"] == 7

    def test_role(self, coordinator):
        with pytest.raises(Forbidden):
            coordinator.set_legislator_active(PRESIDING, 7, False)

    def test_unknown(self, coordinator, channel):
        with pytest.raises(NotFound):
            coordinator.set_legislator_active(SUPERADMIN, 99, False)
        assert channel.events == []


def transport(*responses):
    """MockTransport answering with the given status codes in turn."""
    calls = []
    codes = iter(responses)

    def handler(request: httpx.Request) -> httpx.Response:
        calls.append(request)
        return httpx.Response(next(codes), json={})

    return httpx.MockTransport(handler), calls


@pytest.fixture
def no_wait(monkeypatch):
    monkeypatch.setattr(HttpChannel._post.retry, "sleep", lambda _: None)


class TestHttpChannel:
    def test_publish(self, no_wait):
        mock, calls = transport(200)
        channel = HttpChannel("http://gateway/events", client=httpx.Client(transport=mock))

        channel.publish("VoteRecorded", {"initiative_id": 1})

        assert len(calls) == 1
        assert calls[0].url == "http://gateway/events"
        assert b'"event":"VoteRecorded"' in calls[0].content.replace(b" ", b"")

    def test_client_error(self, no_wait):
        mock, calls = transport(400)
        channel = HttpChannel("http://gateway/events", client=httpx.Client(transport=mock))
        with pytest.raises(PublishError):
            channel.publish("VoteRecorded", {})
        assert len(calls) == 1

    def test_retries_server_error(self, no_wait):
        mock, calls = transport(503, 200)
        channel = HttpChannel("http://gateway/events", client=httpx.Client(transport=mock))
        channel.publish("VoteRecorded", {})
        assert len(calls) == 2

    def test_gives_up(self, no_wait):
        mock, calls = transport(503, 503, 503)
        channel = HttpChannel("http://gateway/events", client=httpx.Client(transport=mock))
        with pytest.raises(PublishError):
            channel.publish("VoteRecorded", {})
        assert len(calls) == 3

    def test_retryable(self):
        request = httpx.Request("POST", "http://gateway")
        assert _is_retryable_error(httpx.ConnectError("down", request=request))
        server = httpx.HTTPStatusError("x", request=request, response=httpx.Response(502, request=request))
        client = httpx.HTTPStatusError("x", request=request, response=httpx.Response(404, request=request))
        assert _is_retryable_error(server)
        assert not _is_retryable_error(client)

    def test_relay_end_to_end(self, registry, no_wait):
        mock, calls = transport(200, 200)
        channel = HttpChannel("http://gateway/events", client=httpx.Client(transport=mock))
        coordinator = build_coordinator(channel, default_quorum=None)
        Chamber(coordinator, channel).load()
        assert len(calls) == 1
        assert coordinator.events(DISPLAY)[0].published_at is not None

    def test_close(self):
        client = httpx.Client(transport=transport(200)[0])
        HttpChannel("http://gateway/events", client=client).close()
        assert client.is_closed

    def test_container_reset_closes_client(self, registry, no_wait):
        client = httpx.Client(transport=transport(200)[0])
        container.init(HttpChannel("http://gateway/events", client=client))
        try:
            assert not client.is_closed
        finally:
            container.reset()
        assert client.is_closed

        container.reset()


class TestVoterView:
    def test_legislator_reads_status(self, chamber, coordinator):
        chamber.ready()
        assert coordinator.status(legislator(5)).session is not None
