from __future__ import annotations

import threading
from contextlib import contextmanager
from typing import Hashable, Iterator

from ..core.constants import DEFAULT_LOCK_TIMEOUT_SECONDS
from ..core.exceptions import LockTimeoutError


class _Slot:
    __slots__ = ("lock", "users")

    def __init__(self):
        self.lock = threading.RLock()
        self.users = 0


class KeyedLocks:
    """One re-entrant lock per key, acquired with a bounded wait.

    Several keys are always taken in sorted order so two callers holding
    overlapping key sets cannot deadlock. A key's lock exists only while
    some caller holds or waits for it.
    """

    def __init__(self, timeout: float = DEFAULT_LOCK_TIMEOUT_SECONDS):
        self._timeout = float(timeout)
        self._guard = threading.Lock()
        self._slots: dict[Hashable, _Slot] = {}

    @property
    def timeout(self) -> float:
        return self._timeout

    def __len__(self) -> int:
        with self._guard:
            return len(self._slots)

    def _checkout(self, key: Hashable) -> threading.RLock:
        with self._guard:
            slot = self._slots.get(key)
            if slot is None:
                slot = _Slot()
                self._slots[key] = slot
            slot.users += 1
            return slot.lock

    def _checkin(self, key: Hashable) -> None:
        with self._guard:
            slot = self._slots[key]
            slot.users -= 1
            if slot.users == 0:
                del self._slots[key]

    @contextmanager
    def hold(self, *keys: Hashable) -> Iterator[None]:
        checked_out: list[Hashable] = []
        acquired: list[threading.RLock] = []
        try:
            for key in sorted(set(keys)):
                lock = self._checkout(key)
                checked_out.append(key)
                if not lock.acquire(timeout=self._timeout):
                    raise LockTimeoutError(f"Timed out after {self._timeout:g}s waiting for {key}")
                acquired.append(lock)
            yield
        finally:
            for lock in reversed(acquired):
                lock.release()
            for key in reversed(checked_out):
                self._checkin(key)
