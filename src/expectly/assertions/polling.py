"""Fixed-interval polling until a supplier returns an expected value."""

from __future__ import annotations

import logging
import math
import time
from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum
from typing import Any

from expectly.assertions.compare import deep_equal
from expectly.config import DEFAULT_POLL_INTERVAL, DEFAULT_POLL_TIMEOUT

logger = logging.getLogger(__name__)


class PollState(Enum):
    """Lifecycle of a single poll run."""

    IDLE = "idle"
    POLLING = "polling"
    SUCCEEDED = "succeeded"
    TIMED_OUT = "timed_out"


@dataclass(frozen=True, slots=True)
class PollOutcome:
    """Result of :meth:`PollingScheduler.poll`.

    Attributes
    ----------
    state
        ``SUCCEEDED`` or ``TIMED_OUT``.
    attempts
        Number of times the supplier was invoked.
    elapsed
        Seconds between the first invocation and the final state.
    last_value
        Value returned by the last invocation.
    """

    state: PollState
    attempts: int
    elapsed: float
    last_value: Any = None

    @property
    def matched(self) -> bool:
        return self.state is PollState.SUCCEEDED


class PollingScheduler:
    """Invoke a supplier at fixed ticks until it matches or a deadline passes.

    The supplier runs once immediately and then once per tick boundary
    (``start + k * interval`` for whole ``k``). Ticks missed because a supplier
    ran long are dropped. A tick that lands on the deadline, up to float
    rounding, still polls. Exceptions
    raised by the supplier propagate to the caller.

    ``clock`` and ``sleep`` default to ``time.monotonic`` and ``time.sleep``;
    pass fakes to drive the scheduler deterministically.
    """

    def __init__(
        self,
        timeout: float = DEFAULT_POLL_TIMEOUT,
        interval: float = DEFAULT_POLL_INTERVAL,
        *,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        if timeout < 0:
            raise ValueError(f"timeout must be >= 0, got {timeout}")
        if interval <= 0:
            raise ValueError(f"interval must be > 0, got {interval}")
        self.timeout = timeout
        self.interval = interval
        self._clock = clock
        self._sleep = sleep
        self.state = PollState.IDLE

    def poll(self, supplier: Callable[[], Any], expected: Any) -> PollOutcome:
        """Run ``supplier`` until its result structurally equals ``expected``."""
        self.state = PollState.POLLING
        start = self._clock()
        deadline = start + self.timeout
        attempts = 0
        tick = 0
        scheduled = start

        while True:
            value = supplier()
            attempts += 1
            now = self._clock()

            if deep_equal(expected, value):
                return self._finish(PollState.SUCCEEDED, attempts, now - start, value)
            if scheduled >= deadline or now >= deadline:
                return self._finish(PollState.TIMED_OUT, attempts, now - start, value)

            tick += 1
            while start + tick * self.interval <= now:
                tick += 1
            scheduled = start + tick * self.interval
            if math.isclose(scheduled, deadline):
                # 300 * 0.1 is not exactly 30.0; that tick is the deadline.
                scheduled = deadline
            elif scheduled > deadline:
                self._sleep(deadline - now)
                return self._finish(PollState.TIMED_OUT, attempts, self._clock() - start, value)
            self._sleep(scheduled - now)

    def _finish(self, state: PollState, attempts: int, elapsed: float, value: Any) -> PollOutcome:
        self.state = state
        logger.debug("Polling %s after %d attempt(s) in %.3fs", state.value, attempts, elapsed)
        return PollOutcome(state=state, attempts=attempts, elapsed=elapsed, last_value=value)
