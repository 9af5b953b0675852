"""Outbox relay - publishes committed events in order."""

import threading

from loguru import logger

from app.models import utcnow
from app.repositories.common import OutboxRepository
from app.services.notifications.channels import NotificationChannel, PublishError
from settings import OUTBOX_BATCH_SIZE


class OutboxRelay:
    """Drains pending outbox rows through a channel.

    A delivery failure stops the drain and leaves the row pending; the next drain
    picks it up again.
    """

    def __init__(self, outbox_repo: OutboxRepository, channel: NotificationChannel, batch_size: int = OUTBOX_BATCH_SIZE):
        self._outbox = outbox_repo
        self.channel = channel
        self._batch_size = batch_size
        self._lock = threading.Lock()
        logger.debug("OutboxRelay initialized ({})", channel.__class__.__name__)

    def drain(self) -> int:
        """Publish everything pending. Returns the number of events delivered."""
        published = 0
        with self._lock:
            while True:
                batch = self._outbox.pending(self._batch_size)
                for event in batch:
                    try:
                        self.channel.publish(event.event, event.payload)
                    except PublishError as e:
                        logger.warning("Outbox #{} {} left pending: {}", event.id, event.event, e)
                        return published
                    self._outbox.mark_published(event.id, utcnow())
                    published += 1
                if len(batch) < self._batch_size:
                    break
        if published:
            logger.debug("Outbox drained: {} events", published)
        return published
