"""
Bounded-time condition polling.

``poll_until`` repeatedly evaluates a predicate until it returns True or the
timeout elapses. It never hangs: control always comes back to the caller after
at most ``timeout`` seconds (plus the duration of one predicate call).

The clock is injectable so tests can simulate time passing without sleeping.
"""

import time
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Callable, Optional

from .errors import NotReadyError


class Clock(ABC):
    """Source of time for the poller."""

    @abstractmethod
    def now(self) -> float:
        """Current time in seconds (monotonic)."""
        pass

    @abstractmethod
    def sleep(self, seconds: float) -> None:
        """Block for the given number of seconds."""
        pass


class SystemClock(Clock):
    """Wall-clock implementation backed by the ``time`` module."""

    def now(self) -> float:
        return time.monotonic()

    def sleep(self, seconds: float) -> None:
        if seconds > 0:
            time.sleep(seconds)


@dataclass(frozen=True)
class PollResult:
    """Outcome of one bounded poll."""

    satisfied: bool
    elapsed: float  # seconds, within [0, timeout]


def poll_until(
    predicate: Callable[[], bool],
    timeout: float,
    clock: Optional[Clock] = None,
    interval: float = 0.0,
) -> PollResult:
    """
    Evaluate ``predicate`` until it is true or ``timeout`` seconds pass.

    Args:
        predicate: Callable returning True once the condition holds
        timeout: Maximum time to wait in seconds
        clock: Time source (defaults to SystemClock)
        interval: Pause between checks; 0 busy-polls

    Returns:
        PollResult with ``satisfied`` and the elapsed seconds

    NotReadyError raised by the predicate counts as "not yet" and polling
    continues. Any other exception propagates.
    """
    clock = clock or SystemClock()
    timeout = max(float(timeout), 0.0)
    end = clock.now() + timeout
    satisfied = False

    while True:
        try:
            if predicate():
                satisfied = True
                break
        except NotReadyError:
            pass

        remaining = end - clock.now()
        if remaining <= 0:
            break
        if interval > 0:
            clock.sleep(min(interval, remaining))

    elapsed = timeout - (end - clock.now())
    elapsed = min(max(elapsed, 0.0), timeout)
    return PollResult(satisfied=satisfied, elapsed=elapsed)
