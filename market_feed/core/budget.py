"""
Daily request budget for expensive "today" queries.

The counter lives in an injected key-value store as a small JSON record
``{"date": "YYYY-MM-DD", "count": N}``. A new calendar day is detected
lazily: reads compare the stored date against today and treat a mismatch
as a fresh budget, and the first increment of the day overwrites the
record with a count of 1. Nothing resets the record on a timer.
"""

from __future__ import annotations

import json
import logging
import threading
from collections.abc import Callable
from datetime import datetime
from zoneinfo import ZoneInfo

from .storage import KeyValueStore
from .types import BudgetState

logger = logging.getLogger(__name__)

MAX_REQUESTS = 2
STORAGE_KEY = "today_requests"


class RequestBudget:
    """Caps how many expensive requests a caller may make per day.

    Without a store (e.g. a non-interactive context with nowhere to keep
    state) the budget is unlimited: every check passes, ``remaining``
    reports the full budget and increments do nothing.

    Increments are serialized by a per-instance lock, so concurrent
    callers sharing one ``RequestBudget`` cannot lose updates.

    Attributes:
        max_requests: Requests allowed per calendar day
        key: Store key holding the budget record
    """

    def __init__(
        self,
        store: KeyValueStore | None,
        max_requests: int = MAX_REQUESTS,
        key: str = STORAGE_KEY,
        tz: str | None = None,
        clock: Callable[[], datetime] | None = None,
    ):
        self._store = store
        self.max_requests = max_requests
        self.key = key
        self._tz = ZoneInfo(tz) if tz else None
        self._clock = clock or (lambda: datetime.now(self._tz))
        self._lock = threading.Lock()

    @classmethod
    def from_config(cls, cfg, store: KeyValueStore | None) -> "RequestBudget":
        """Build a budget from a BudgetConfig."""
        return cls(store, max_requests=cfg.max_requests, key=cfg.storage_key, tz=cfg.timezone)

    def today(self) -> str:
        """The current budget day as an ISO date string."""
        now = self._clock()
        if self._tz is not None and now.tzinfo is not None:
            now = now.astimezone(self._tz)
        return now.date().isoformat()

    def state(self) -> BudgetState:
        """Stored budget record, or the empty state when missing or malformed."""
        if self._store is None:
            return BudgetState()
        return _parse_state(self._store.get(self.key))

    def can_make_request(self) -> bool:
        if self._store is None:
            return True
        state = self.state()
        if state.date != self.today():
            return True
        return state.count < self.max_requests

    def remaining(self) -> int:
        if self._store is None:
            return self.max_requests
        state = self.state()
        if state.date != self.today():
            return self.max_requests
        return max(0, self.max_requests - state.count)

    def increment_request(self) -> None:
        if self._store is None:
            return
        with self._lock:
            self._increment()

    def try_acquire(self) -> bool:
        """Check the budget and, if allowed, spend one request atomically."""
        if self._store is None:
            return True
        with self._lock:
            if not self.can_make_request():
                return False
            self._increment()
            return True

    def _increment(self) -> None:
        state = self.state()
        today = self.today()
        if state.date != today:
            updated = BudgetState(date=today, count=1)
        else:
            updated = BudgetState(date=today, count=state.count + 1)
        self._store.set(self.key, json.dumps({"date": updated.date, "count": updated.count}))
        logger.debug("Request budget %s now %d/%d on %s", self.key, updated.count, self.max_requests, today)


def _parse_state(raw: str | None) -> BudgetState:
    if not raw:
        return BudgetState()
    try:
        data = json.loads(raw)
    except (ValueError, RecursionError):
        logger.debug("Discarding malformed budget record: %r", raw)
        return BudgetState()
    if not isinstance(data, dict):
        logger.debug("Discarding budget record that is not an object: %r", raw)
        return BudgetState()
    date = data.get("date")
    count = data.get("count")
    if not isinstance(date, str) or isinstance(count, bool) or not isinstance(count, int) or count < 0:
        logger.debug("Discarding budget record with invalid fields: %r", raw)
        return BudgetState()
    return BudgetState(date=date, count=count)
