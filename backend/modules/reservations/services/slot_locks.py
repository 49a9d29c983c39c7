# backend/modules/reservations/services/slot_locks.py

"""
Per-slot mutual exclusion for writes.

Creates and cancellations for the same (date, time) run one at a time so the
capacity check and the insert form a single unit of work. Different slots
never contend. Reads take no lock.
"""

from contextlib import contextmanager
from datetime import date, time
from typing import Dict, Iterator, Optional, Tuple
import threading

SlotKey = Tuple[date, time]


class SlotLockRegistry:
    """Lazily creates one lock per slot. Idle locks of past dates are dropped once a day."""

    def __init__(self):
        self._locks: Dict[SlotKey, threading.Lock] = {}
        self._guard = threading.Lock()
        self._pruned_on: Optional[date] = None

    def lock_for(self, reservation_date: date, reservation_time: time) -> threading.Lock:
        key = (reservation_date, reservation_time)
        today = date.today()
        with self._guard:
            if self._pruned_on != today:
                self._drop_past(today)
            lock = self._locks.get(key)
            if lock is None:
                lock = self._locks[key] = threading.Lock()
            return lock

    def prune(self, today: Optional[date] = None):
        """Drop idle locks of slots dated before ``today``"""
        with self._guard:
            self._drop_past(today or date.today())

    def _drop_past(self, today: date):
        self._pruned_on = today
        stale = [
            key for key, lock in self._locks.items()
            if key[0] < today and not lock.locked()
        ]
        for key in stale:
            del self._locks[key]

    @contextmanager
    def hold(self, *slots: SlotKey) -> Iterator[None]:
        """
        Hold the locks of all given slots. Locks are taken in sorted order so
        two writers moving reservations between the same slots cannot deadlock.
        """
        locks = [self.lock_for(d, t) for d, t in sorted(set(slots))]
        for lock in locks:
            lock.acquire()
        try:
            yield
        finally:
            for lock in reversed(locks):
                lock.release()

    def __len__(self) -> int:
        return len(self._locks)


# Process-wide registry
slot_locks = SlotLockRegistry()
