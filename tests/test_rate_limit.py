"""Tests for the fixed-window request budget."""

import pytest

from trip_planner_api.app.core.errors import RateLimitError
from trip_planner_api.app.core.rate_limit import RateLimiter


class FakeClock:
    def __init__(self) -> None:
        self.now = 1000.0

    def __call__(self) -> float:
        return self.now


@pytest.fixture
def clock():
    return FakeClock()


def test_budget_plus_one_is_rejected(clock):
    limiter = RateLimiter(max_requests=3, window_seconds=900, clock=clock)
    for _ in range(3):
        limiter.hit("10.0.0.1")

    with pytest.raises(RateLimitError) as exc_info:
        limiter.hit("10.0.0.1")
    assert exc_info.value.status_code == 429
    assert exc_info.value.retry_after == 900


def test_budget_resets_after_window(clock):
    limiter = RateLimiter(max_requests=2, window_seconds=900, clock=clock)
    limiter.hit("10.0.0.1")
    limiter.hit("10.0.0.1")

    clock.now += 600
    with pytest.raises(RateLimitError) as exc_info:
        limiter.hit("10.0.0.1")
    assert exc_info.value.retry_after == 300

    clock.now += 300
    assert limiter.hit("10.0.0.1") == 1


def test_clients_have_separate_budgets(clock):
    limiter = RateLimiter(max_requests=1, window_seconds=60, clock=clock)
    limiter.hit("10.0.0.1")
    assert limiter.hit("10.0.0.2") == 0
    with pytest.raises(RateLimitError):
        limiter.hit("10.0.0.1")


def test_remaining_budget_counts_down(clock):
    limiter = RateLimiter(max_requests=3, window_seconds=60, clock=clock)
    assert [limiter.hit("k") for _ in range(3)] == [2, 1, 0]


def test_reset_clears_all_windows(clock):
    limiter = RateLimiter(max_requests=1, window_seconds=60, clock=clock)
    limiter.hit("k")
    limiter.reset()
    assert limiter.hit("k") == 0
