from __future__ import annotations

import logging
import time
from typing import Callable

logger = logging.getLogger(__name__)

MIN_WAIT_S = 0.001


class WindowCounter:
    """
    Fixed accounting window (one second by default) counting admissions.

    Not thread-safe on its own: the owning limiter calls it under its lock.
    """

    def __init__(self, window_s: float = 1.0, clock: Callable[[], float] = time.monotonic) -> None:
        if window_s <= 0:
            raise ValueError("window_s must be > 0")
        self._window_s = window_s
        self._clock = clock
        self._window_start = clock()
        self._admitted = 0

    @property
    def window_s(self) -> float:
        return self._window_s

    @property
    def window_start(self) -> float:
        return self._window_start

    @property
    def admitted(self) -> int:
        return self._admitted

    def check_and_roll(self, now: float) -> bool:
        if now - self._window_start < self._window_s:
            return False

        logger.debug("Window rolled admitted=%s elapsed_s=%.3f", self._admitted, now - self._window_start)
        self._admitted = 0
        self._window_start = now
        return True

    def remaining_capacity(self, throughput: int) -> int:
        # Negative when throughput was lowered below the admitted count.
        return throughput - self._admitted

    def record_admission(self) -> None:
        self._admitted += 1

    def time_to_roll(self, now: float) -> float:
        return max(MIN_WAIT_S, self._window_s - (now - self._window_start))
