from datetime import date

import pytest

from api.services.usage import DailyLimitReachedError, DailyUsage

DAY = date(2026, 2, 2)


def test_reserve_counts_up_to_the_daily_limit(monkeypatch):
    monkeypatch.setenv("LLM_DAILY_LIMIT", "2")
    usage = DailyUsage()
    assert usage.reserve("alice", DAY) == 1
    assert usage.reserve("alice", DAY) == 2
    with pytest.raises(DailyLimitReachedError) as info:
        usage.reserve("alice", DAY)
    assert (info.value.used, info.value.limit) == (2, 2)
    # other users keep their own quota
    assert usage.reserve("bob", DAY) == 1


def test_in_flight_reservation_blocks_a_concurrent_request(monkeypatch):
    monkeypatch.setenv("LLM_DAILY_LIMIT", "1")
    usage = DailyUsage()
    usage.reserve("alice", DAY)
    with pytest.raises(DailyLimitReachedError):
        usage.reserve("alice", DAY)
    usage.release("alice", DAY)
    assert usage.used("alice", DAY) == 0
    assert usage.reserve("alice", DAY) == 1


def test_release_never_goes_negative():
    usage = DailyUsage()
    usage.release("alice", DAY)
    assert usage.used("alice", DAY) == 0


def test_earlier_days_are_pruned():
    usage = DailyUsage()
    usage.reserve("alice", DAY)
    usage.reserve("bob", DAY)
    usage.reserve("alice", date(2026, 2, 3))
    assert usage.tracked_days() == {date(2026, 2, 3)}
    assert usage.used("alice", DAY) == 0
