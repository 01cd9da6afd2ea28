"""
Per-sale mutual exclusion.

At most one mutation is in flight per SaleKey. The API serves requests from a
thread pool, so purchases and admin changes on the same sale are serialized
here. Different sales never contend.

A thread that re-enters an operation on a sale it is already mutating (for
example a collaborator calling back into purchase) gets ReentrantCall instead
of a deadlock.
"""

from __future__ import annotations

import threading
from contextlib import contextmanager
from typing import Dict, Hashable, Iterator, Set

from domain.errors import ReentrantCall


class KeyedLocks:
    def __init__(self) -> None:
        self._locks: Dict[Hashable, threading.Lock] = {}
        self._registry_guard = threading.Lock()
        self._local = threading.local()

    def _held(self) -> Set[Hashable]:
        held = getattr(self._local, "held", None)
        if held is None:
            held = set()
            self._local.held = held
        return held

    def _lock_for(self, key: Hashable) -> threading.Lock:
        with self._registry_guard:
            lock = self._locks.get(key)
            if lock is None:
                lock = threading.Lock()
                self._locks[key] = lock
            return lock

    def is_held(self, key: Hashable) -> bool:
        """True if the current thread holds the lock for `key`."""

        return key in self._held()

    @contextmanager
    def hold(self, key: Hashable) -> Iterator[None]:
        held = self._held()
        if key in held:
            raise ReentrantCall(key)

        lock = self._lock_for(key)
        with lock:
            held.add(key)
            try:
                yield
            finally:
                held.discard(key)


__all__ = ["KeyedLocks"]
