"""Notification channels - where committed events are delivered."""

import threading
from typing import Any, Protocol

import httpx
from loguru import logger
from tenacity import RetryError, retry, retry_if_exception, stop_after_attempt, wait_exponential

from settings import NOTIFY_TIMEOUT, PUBLISH_ATTEMPTS


class PublishError(Exception):
    """Channel could not deliver an event; the outbox row stays pending."""


class NotificationChannel(Protocol):
    def publish(self, event: str, payload: dict[str, Any]) -> None: ...

    def close(self) -> None: ...


class LoggingChannel:
    """Writes events to the log. Used when no fan-out gateway is configured."""

    def publish(self, event: str, payload: dict[str, Any]) -> None:
        logger.info("Event {}: {}", event, payload)

    def close(self) -> None:
        pass


class MemoryChannel:
    """Keeps delivered events in memory (tests, console event feed)."""

    def __init__(self, fail: bool = False):
        self.events: list[tuple[str, dict[str, Any]]] = []
        self.fail = fail
        self._lock = threading.Lock()

    def publish(self, event: str, payload: dict[str, Any]) -> None:
        if self.fail:
            raise PublishError(f"Channel unavailable for {event}")
        with self._lock:
            self.events.append((event, payload))

    def names(self) -> list[str]:
        with self._lock:
            return [name for name, _ in self.events]

    def of(self, event: str) -> list[dict[str, Any]]:
        with self._lock:
            return [payload for name, payload in self.events if name == event]

    def clear(self) -> None:
        with self._lock:
            self.events.clear()

    def close(self) -> None:
        pass


def _is_retryable_error(exc: BaseException) -> bool:
    """Check if exception is retryable (network errors + 5xx server errors)."""
    if isinstance(exc, (httpx.ReadError, httpx.ConnectError, httpx.TimeoutException)):
        return True
    return isinstance(exc, httpx.HTTPStatusError) and exc.response.status_code >= 500


class HttpChannel:
    """POSTs ``{"event", "payload"}`` to the real-time fan-out gateway."""

    def __init__(self, url: str, timeout: int = NOTIFY_TIMEOUT, client: httpx.Client | None = None):
        self._url = url
        self._client = client or httpx.Client(timeout=timeout)
        self._request_count = 0
        logger.info("{}: url={}", self.__class__.__name__, url)

    @retry(
        stop=stop_after_attempt(PUBLISH_ATTEMPTS),
        wait=wait_exponential(multiplier=1, min=1, max=30),
        retry=retry_if_exception(_is_retryable_error),
    )
    def _post(self, body: dict[str, Any]) -> None:
        self._request_count += 1
        resp = self._client.post(self._url, json=body)
        resp.raise_for_status()

    def publish(self, event: str, payload: dict[str, Any]) -> None:
        try:
            self._post({"event": event, "payload": payload})
        except (httpx.HTTPError, RetryError) as e:
            raise PublishError(f"Publishing {event} failed: {e}") from e

    def close(self) -> None:
        logger.info("Total notify requests: {}", self._request_count)
        self._client.close()
