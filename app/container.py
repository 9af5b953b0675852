"""Dependency Injection container - initialized at app startup."""

from app.repositories.agenda import InitiativeRepository
from app.repositories.attendance import RollCallRepository
from app.repositories.common import AuditRepository, OutboxRepository
from app.repositories.core import LegislatorRepository, SessionRepository
from app.repositories.voting import VoteRepository
from app.services.agenda.activation import ActivationGate
from app.services.attendance.roll_call import RollCallTracker
from app.services.coordinator import Coordinator
from app.services.notifications import HttpChannel, LoggingChannel, NotificationChannel, OutboxRelay
from app.services.session.lifecycle import SessionLifecycle
from app.services.voting.ledger import VoteLedger
from settings import DEFAULT_QUORUM, NOTIFY_URL, OUTBOX_BATCH_SIZE


def default_channel() -> NotificationChannel:
    """HTTP gateway when configured, log otherwise."""
    return HttpChannel(NOTIFY_URL) if NOTIFY_URL else LoggingChannel()


def build_coordinator(
    channel: NotificationChannel | None = None,
    default_quorum: int | None = DEFAULT_QUORUM,
) -> Coordinator:
    """Wire repositories and services into a coordinator."""
    # Repositories
    session_repo = SessionRepository()
    initiative_repo = InitiativeRepository()
    legislator_repo = LegislatorRepository()
    roll_call_repo = RollCallRepository()
    vote_repo = VoteRepository()
    outbox_repo = OutboxRepository()
    audit_repo = AuditRepository()

    # Services (leaf first)
    tracker = RollCallTracker(roll_call_repo, legislator_repo, session_repo, default_quorum)
    ledger = VoteLedger(vote_repo, initiative_repo, session_repo, legislator_repo, tracker)
    gate = ActivationGate(initiative_repo, session_repo, tracker, ledger)
    lifecycle = SessionLifecycle(session_repo, initiative_repo, tracker, gate)
    relay = OutboxRelay(outbox_repo, channel or default_channel(), OUTBOX_BATCH_SIZE)

    return Coordinator(
        session_repo=session_repo,
        initiative_repo=initiative_repo,
        legislator_repo=legislator_repo,
        audit_repo=audit_repo,
        outbox_repo=outbox_repo,
        lifecycle=lifecycle,
        tracker=tracker,
        gate=gate,
        ledger=ledger,
        relay=relay,
    )


class Container:
    """Application DI container - holds all singleton instances."""

    _instance = None
    _initialized = False

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def init(self, channel: NotificationChannel | None = None) -> None:
        """Initialize all dependencies. Call once at app startup."""
        if self._initialized:
            return

        self.coordinator = build_coordinator(channel)
        # Events left pending by a previous run
        self.coordinator.relay.drain()

        self._initialized = True

    def reset(self) -> None:
        """Close the notification channel and drop the wiring so the next ``init`` rebuilds it."""
        if not self._initialized:
            return
        self.coordinator.relay.channel.close()
        self._initialized = False


# Global container instance
container = Container()
