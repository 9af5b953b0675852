"""Shared fixtures: temporary chamber database, seeded registry, wired coordinator."""

import pytest

from app.container import build_coordinator
from app.models import AgendaItem, Legislator, Presence
from app.repositories import LegislatorRepository, close_db, configure
from app.services.notifications import MemoryChannel
from app.services.permissions import Actor

PRESIDING = Actor("presiding", 1)
DEPUTY = Actor("deputy_presiding", 2)
SECRETARY = Actor("chamber_secretary", 3)
SECRETARIAT = Actor("secretariat")
OPERATOR = Actor("operator")
SUPERADMIN = Actor("superadmin")
DISPLAY = Actor("display")

PARTIES = ["Blue", "Red", "Green", "Yellow"]


def legislator(legislator_id: int) -> Actor:
    return Actor("legislator", legislator_id)


@pytest.fixture
def db(tmp_path):
    configure(str(tmp_path / "chamber.duckdb"))
    yield
    close_db()


@pytest.fixture
def registry(db):
    repo = LegislatorRepository()
    repo.upsert([Legislator(i, f"Legislator {i:02d}", PARTIES[i % 4], i, True) for i in range(1, 21)])
    return repo


@pytest.fixture
def channel():
    return MemoryChannel()


@pytest.fixture
def coordinator(registry, channel):
    return build_coordinator(channel, default_quorum=None)


class Chamber:
    """Drives the coordinator through the usual opening steps."""

    def __init__(self, coordinator, channel):
        self.coordinator = coordinator
        self.channel = channel

    def load(self, rules=("simple", "simple"), code="S-1", quorum=None):
        items = [AgendaItem(number=n, title=f"Initiative {n}", majority_rule=r) for n, r in enumerate(rules, 1)]
        return self.coordinator.load_agenda(OPERATOR, code, items, quorum)

    def start(self, rules=("simple", "simple"), code="S-1", quorum=None):
        session, initiatives = self.load(rules, code, quorum)
        self.coordinator.start_session(PRESIDING, session.id)
        roll_call = self.coordinator.tracker.current(session.id)
        return self.coordinator.session(DISPLAY, session.id), initiatives, roll_call

    def mark(self, roll_call_id, ids, presence=Presence.PRESENT):
        for i in ids:
            self.coordinator.mark_attendance(SECRETARY, roll_call_id, i, presence)

    def ready(self, rules=("simple", "simple"), present=range(1, 13), code="S-1", quorum=None):
        """Started session with a confirmed roll call (12 of 20 present by default)."""
        session, initiatives, roll_call = self.start(rules, code, quorum)
        self.mark(roll_call.id, present)
        self.coordinator.confirm_roll_call(SECRETARY, roll_call.id)
        self.channel.clear()
        return session, initiatives, roll_call

    def vote(self, initiative_id, choices: dict[int, str]):
        for legislator_id, choice in choices.items():
            self.coordinator.cast_vote(legislator(legislator_id), initiative_id, legislator_id, choice)


@pytest.fixture
def chamber(coordinator, channel):
    return Chamber(coordinator, channel)
