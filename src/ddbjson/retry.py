from __future__ import annotations

import time
from collections.abc import Callable
from dataclasses import dataclass

from .errors import ValidationError


@dataclass(frozen=True)
class RetryPolicy:
    """Bounded retry schedule for one logical call.

    An attempt is allowed while fewer than ``min_attempts`` have run, or while
    the next attempt would still start before ``total_seconds`` have elapsed
    since the first one. Consecutive attempts are spaced ``delay_seconds``
    apart.
    """

    min_attempts: int = 5
    total_seconds: float = 5.0
    delay_seconds: float = 0.2

    def __post_init__(self) -> None:
        if self.min_attempts < 1:
            raise ValidationError("min_attempts must be >= 1")
        if self.total_seconds < 0 or self.delay_seconds < 0:
            raise ValidationError("total_seconds and delay_seconds must be >= 0")

    @staticmethod
    def no_retry() -> RetryPolicy:
        return RetryPolicy(min_attempts=1, total_seconds=0.0, delay_seconds=0.0)

    def start(
        self,
        *,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], None] = time.sleep,
    ) -> Attempt:
        return Attempt(self, clock=clock, sleep=sleep)


class Attempt:
    def __init__(
        self,
        policy: RetryPolicy,
        *,
        clock: Callable[[], float],
        sleep: Callable[[float], None],
    ) -> None:
        self._policy = policy
        self._clock = clock
        self._sleep = sleep
        self._end = clock() + policy.total_seconds
        self._last: float | None = None
        self.count = 0

    def _next_sleep(self, now: float) -> float:
        if self._last is None:
            return 0.0
        return max(0.0, self._policy.delay_seconds - (now - self._last))

    def has_next(self) -> bool:
        now = self._clock()
        if self.count < self._policy.min_attempts:
            return True
        return now + self._next_sleep(now) < self._end

    def next(self) -> bool:
        now = self._clock()
        pause = self._next_sleep(now)
        if self.count >= self._policy.min_attempts and not now + pause < self._end:
            return False
        if pause > 0 and self.count > 0:
            self._sleep(pause)
            now = self._clock()
        self.count += 1
        self._last = now
        return True
