from datetime import date, datetime, timezone

import pytest

from api.middleware.ratelimit import _counters
from api.services.record_store import STORE
from api.services.usage import USAGE
from src.narrative.models import ImpactEntry

_ENV_FLAGS = (
    "AUTH_ENABLED",
    "API_KEYS",
    "DEFAULT_USER_ID",
    "RATE_LIMIT_ENABLED",
    "RATE_LIMIT_PER_MINUTE",
    "LOGGING_ENABLED",
    "LLM_DAILY_LIMIT",
    "LLM_MAX_ENTRIES",
    "OPENAI_API_KEY",
)


@pytest.fixture(autouse=True)
def _isolated_state(monkeypatch):
    for name in _ENV_FLAGS:
        monkeypatch.delenv(name, raising=False)
    STORE.reset()
    USAGE.reset()
    _counters.clear()
    yield
    STORE.reset()
    USAGE.reset()
    _counters.clear()


@pytest.fixture
def make_entry():
    counter = {"n": 0}

    def _make(what="", problem="", who="", evidence="", tags=(), week_of=date(2026, 2, 2)):
        counter["n"] += 1
        return ImpactEntry(
            id=f"e{counter['n']}",
            created_at=datetime(2026, 2, 3, 12, 0, tzinfo=timezone.utc),
            week_of=week_of,
            what_you_did=what,
            who_benefited=who,
            problem_solved=problem,
            evidence=evidence,
            tags=tuple(tags),
        )

    return _make
