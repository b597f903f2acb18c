from __future__ import annotations

import pytest

from ddbjson.errors import ValidationError
from ddbjson.retry import RetryPolicy
from ddbjson.testkit import FakeClock


def _count(policy: RetryPolicy, clock: FakeClock) -> int:
    attempt = policy.start(clock=clock, sleep=clock.sleep)
    n = 0
    while attempt.next():
        n += 1
    return n


def test_default_policy() -> None:
    policy = RetryPolicy()
    assert policy.min_attempts == 5
    assert policy.total_seconds == 5.0
    assert policy.delay_seconds == 0.2


def test_min_attempts_run_even_without_time_budget() -> None:
    clock = FakeClock()
    assert _count(RetryPolicy(min_attempts=4, total_seconds=0.0, delay_seconds=0.0), clock) == 4
    assert clock.sleeps == []


def test_time_budget_extends_past_min_attempts() -> None:
    clock = FakeClock()
    n = _count(RetryPolicy(min_attempts=1, total_seconds=1.0, delay_seconds=0.25), clock)
    # Attempts start at 0, 0.25, 0.5 and 0.75; 1.0 is past the budget.
    assert n == 4
    assert clock.sleeps == pytest.approx([0.25, 0.25, 0.25])


def test_first_attempt_never_sleeps() -> None:
    clock = FakeClock()
    attempt = RetryPolicy(delay_seconds=1.0).start(clock=clock, sleep=clock.sleep)
    assert attempt.next()
    assert attempt.count == 1
    assert clock.sleeps == []


def test_sleep_accounts_for_time_already_spent() -> None:
    clock = FakeClock()
    attempt = RetryPolicy(min_attempts=3, total_seconds=0.0, delay_seconds=1.0).start(clock=clock, sleep=clock.sleep)
    assert attempt.next()
    clock.advance(0.75)
    assert attempt.next()
    assert clock.sleeps == pytest.approx([0.25])

    clock.advance(2.0)
    assert attempt.next()
    assert clock.sleeps == pytest.approx([0.25])


def test_has_next_reports_without_consuming() -> None:
    clock = FakeClock()
    attempt = RetryPolicy(min_attempts=2, total_seconds=0.0, delay_seconds=0.0).start(clock=clock, sleep=clock.sleep)
    assert attempt.has_next()
    attempt.next()
    assert attempt.has_next()
    attempt.next()
    assert not attempt.has_next()
    assert attempt.count == 2
    assert not attempt.next()


def test_no_retry() -> None:
    assert _count(RetryPolicy.no_retry(), FakeClock()) == 1


@pytest.mark.parametrize(
    "kwargs",
    [{"min_attempts": 0}, {"total_seconds": -1.0}, {"delay_seconds": -0.1}],
)
def test_policy_validation(kwargs: dict[str, float]) -> None:
    with pytest.raises(ValidationError):
        RetryPolicy(**kwargs)  # type: ignore[arg-type]
