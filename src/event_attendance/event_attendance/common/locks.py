from __future__ import annotations

import threading
from collections.abc import Hashable
from contextlib import contextmanager
from typing import Iterator


class KeyedLocks:
    """Registry of one lock per key, created on demand.

    Entries are dropped once no thread holds or waits on them, so the
    registry stays proportional to the keys in use.
    """

    def __init__(self):
        self._guard = threading.Lock()
        self._locks: dict[Hashable, threading.Lock] = {}
        self._users: dict[Hashable, int] = {}

    def _checkout(self, key: Hashable) -> threading.Lock:
        with self._guard:
            lock = self._locks.get(key)
            if lock is None:
                lock = threading.Lock()
                self._locks[key] = lock
            self._users[key] = self._users.get(key, 0) + 1
            return lock

    def _checkin(self, key: Hashable) -> None:
        with self._guard:
            remaining = self._users[key] - 1
            if remaining:
                self._users[key] = remaining
            else:
                del self._users[key]
                del self._locks[key]

    @contextmanager
    def hold(self, key: Hashable) -> Iterator[None]:
        """Block until the key's lock is free, then hold it."""
        lock = self._checkout(key)
        try:
            with lock:
                yield
        finally:
            self._checkin(key)

    @contextmanager
    def try_hold(self, key: Hashable) -> Iterator[bool]:
        """Hold the key's lock if it is free; yields whether it was acquired."""
        lock = self._checkout(key)
        acquired = lock.acquire(blocking=False)
        try:
            yield acquired
        finally:
            if acquired:
                lock.release()
            self._checkin(key)
