"""Per-aggregate in-process locks."""

import threading
from collections.abc import Iterator
from contextlib import ExitStack, contextmanager

CHAMBER = "chamber"


def session_key(session_id: int) -> str:
    return f"session:{session_id}"


class KeyedLocks:
    """One re-entrant lock per aggregate key, created on first use.

    Callers that need several keys pass them in a fixed order: ``CHAMBER`` first,
    then session keys.
    """

    def __init__(self):
        self._guard = threading.Lock()
        self._locks: dict[str, threading.RLock] = {}

    def get(self, key: str) -> threading.RLock:
        with self._guard:
            lock = self._locks.get(key)
            if lock is None:
                lock = self._locks[key] = threading.RLock()
            return lock

    @contextmanager
    def hold(self, *keys: str) -> Iterator[None]:
        with ExitStack() as stack:
            for key in keys:
                stack.enter_context(self.get(key))
            yield

    def discard(self, key: str) -> None:
        """Forget the lock of a closed session. Closed is terminal, so no later mutation needs it."""
        with self._guard:
            self._locks.pop(key, None)

    def __len__(self) -> int:
        return len(self._locks)
