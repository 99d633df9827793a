"""Per-user daily counter for external-model narrative generations.

Counts live in-process behind a lock, keyed by (user, day). A request reserves
a slot before the upstream call and releases it if the call fails, so
concurrent requests can never exceed the limit and failed calls never use up
quota. Counts from earlier days are dropped as soon as a new day is seen.
"""

from __future__ import annotations

import os
import threading
from datetime import date
from typing import Dict, Optional, Tuple


class DailyLimitReachedError(RuntimeError):
    def __init__(self, used: int, limit: int) -> None:
        super().__init__(f"Daily limit reached ({limit} per day)")
        self.used = used
        self.limit = limit


def daily_limit() -> int:
    return int(os.getenv("LLM_DAILY_LIMIT", "5"))


class DailyUsage:
    def __init__(self) -> None:
        self._counts: Dict[Tuple[str, date], int] = {}
        self._lock = threading.Lock()

    def _prune(self, today: date) -> None:
        for key in [key for key in self._counts if key[1] != today]:
            del self._counts[key]

    def used(self, user_id: str, today: Optional[date] = None) -> int:
        with self._lock:
            return self._counts.get((user_id, today or date.today()), 0)

    def remaining(self, user_id: str, today: Optional[date] = None) -> int:
        return max(daily_limit() - self.used(user_id, today), 0)

    def reserve(self, user_id: str, today: Optional[date] = None) -> int:
        """Take one generation slot for today, or raise when none are left."""
        today = today or date.today()
        limit = daily_limit()
        with self._lock:
            self._prune(today)
            used = self._counts.get((user_id, today), 0)
            if used >= limit:
                raise DailyLimitReachedError(used, limit)
            self._counts[(user_id, today)] = used + 1
            return used + 1

    def release(self, user_id: str, today: Optional[date] = None) -> None:
        key = (user_id, today or date.today())
        with self._lock:
            used = self._counts.get(key, 0)
            if used <= 1:
                self._counts.pop(key, None)
            else:
                self._counts[key] = used - 1

    def tracked_days(self) -> set:
        with self._lock:
            return {day for _, day in self._counts}

    def reset(self) -> None:
        with self._lock:
            self._counts.clear()


# Global singleton used by the narratives router.
USAGE = DailyUsage()
