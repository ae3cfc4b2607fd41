from __future__ import annotations

import logging
import threading
import time
from dataclasses import dataclass
from typing import Callable

from priority_gate_service.limiter.admission import AdmissionController
from priority_gate_service.limiter.errors import AdmissionCancelled, AdmissionTimedOut
from priority_gate_service.limiter.registry import PriorityRegistry
from priority_gate_service.limiter.window import MIN_WAIT_S, WindowCounter

logger = logging.getLogger(__name__)

BASELINE_PRIORITY = 1


@dataclass(frozen=True)
class LimiterSnapshot:
    throughput: int
    timeout_s: float | None
    window_s: float
    admitted_count: int
    pending_count: int


class PriorityRateLimiter:
    """
    Admits at most `throughput` callers per window, preferring higher priorities.

    Callers block in acquire() until admitted. A blocked caller sleeps until the
    current window rolls over (or until another caller leaves the registry) and
    then re-evaluates, so its view of admissibility is never older than one
    window. timeout_s=None means acquire() waits indefinitely.

    One instance is shared by every caller of the guarded resource.
    """

    def __init__(
            self,
            throughput: int,
            timeout_s: float | None = None,
            *,
            window_s: float = 1.0,
            baseline_priority: int = BASELINE_PRIORITY,
            clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._throughput = max(0, int(throughput))
        self._timeout_s = timeout_s
        self._baseline = baseline_priority
        self._clock = clock
        self._cond = threading.Condition(threading.Lock())
        self._window = WindowCounter(window_s=window_s, clock=clock)
        self._registry = PriorityRegistry()
        self._admission = AdmissionController(self._window, self._registry, baseline_priority)

    @property
    def baseline_priority(self) -> int:
        return self._baseline

    @property
    def timeout_s(self) -> float | None:
        return self._timeout_s

    @property
    def window_s(self) -> float:
        return self._window.window_s

    def acquire(self, priority: int | None = None, *, cancel_event: threading.Event | None = None) -> None:
        """
        Block until admitted.

        Raises AdmissionTimedOut once the configured timeout has elapsed and
        AdmissionCancelled if cancel_event is set while waiting. The caller's
        registry entry is removed on every exit path.
        """
        if priority is None:
            priority = self._baseline

        with self._cond:
            started = self._clock()
            ticket = self._registry.insert(priority)
            try:
                while True:
                    now = self._clock()
                    if self._window.check_and_roll(now):
                        self._cond.notify_all()

                    if self._admission.try_admit(ticket, self._throughput):
                        return

                    wait_s = self._window.time_to_roll(now)
                    timeout_s = self._timeout_s
                    if timeout_s is not None:
                        wait_s = min(wait_s, max(MIN_WAIT_S, timeout_s - (now - started)))

                    self._cond.wait(wait_s)

                    if cancel_event is not None and cancel_event.is_set():
                        logger.info("Admission cancelled priority=%s", priority)
                        raise AdmissionCancelled(priority)

                    waited_s = self._clock() - started
                    timeout_s = self._timeout_s
                    if timeout_s is not None and waited_s >= timeout_s:
                        logger.warning(
                            "Admission timed out priority=%s waited_s=%.3f timeout_s=%s",
                            priority,
                            waited_s,
                            timeout_s,
                        )
                        raise AdmissionTimedOut(priority, waited_s)
            finally:
                # Admitted tickets are already gone; anything else is a timeout,
                # a cancellation or an interrupt.
                self._registry.remove(ticket)
                self._cond.notify_all()

    def try_acquire(self, priority: int | None = None) -> bool:
        """
        Single admission attempt that never blocks.
        """
        if priority is None:
            priority = self._baseline

        with self._cond:
            self._window.check_and_roll(self._clock())
            ticket = self._registry.insert(priority)
            try:
                return self._admission.try_admit(ticket, self._throughput)
            finally:
                self._registry.remove(ticket)
                self._cond.notify_all()

    def wake_waiters(self) -> None:
        """
        Wake every blocked caller so it re-polls now (e.g. after setting a cancel event).
        """
        with self._cond:
            self._cond.notify_all()

    def adjust_limit(self, throughput: int) -> None:
        """
        Set the per-window ceiling. Blocked callers see it on their next poll.
        """
        with self._cond:
            old = self._throughput
            new = self._throughput = max(0, int(throughput))
        logger.info("Throughput adjusted %s -> %s", old, new)

    def adjust_limit_by(self, delta: int) -> None:
        with self._cond:
            old = self._throughput
            new = self._throughput = max(0, old + int(delta))
        logger.info("Throughput adjusted %s -> %s", old, new)

    def adjust_timeout(self, timeout_s: float | None) -> None:
        with self._cond:
            self._timeout_s = timeout_s
        logger.info("Timeout adjusted to %s", timeout_s)

    def current_rate(self) -> int:
        return self._throughput

    def admitted_count(self) -> int:
        """
        Admissions granted in the current window (not the number of blocked callers).

        Rolls an elapsed window first, so an idle limiter reads 0 like snapshot().
        """
        with self._cond:
            self._window.check_and_roll(self._clock())
            return self._window.admitted

    # kept for callers using the older name
    queue_size = admitted_count

    def pending_count(self) -> int:
        with self._cond:
            return len(self._registry)

    def snapshot(self) -> LimiterSnapshot:
        with self._cond:
            self._window.check_and_roll(self._clock())
            return LimiterSnapshot(
                throughput=self._throughput,
                timeout_s=self._timeout_s,
                window_s=self._window.window_s,
                admitted_count=self._window.admitted,
                pending_count=len(self._registry),
            )


class StandardRateLimiter:
    """
    Limiter without priorities: every caller is baseline and waits indefinitely.
    """

    def __init__(
            self,
            throughput: int,
            *,
            window_s: float = 1.0,
            clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._limiter = PriorityRateLimiter(throughput, None, window_s=window_s, clock=clock)

    def acquire(self, *, cancel_event: threading.Event | None = None) -> None:
        self._limiter.acquire(cancel_event=cancel_event)

    def try_acquire(self) -> bool:
        return self._limiter.try_acquire()

    def increase(self, amount: int) -> None:
        self._limiter.adjust_limit_by(amount)

    def decrease(self, amount: int) -> None:
        self._limiter.adjust_limit_by(-amount)

    def current_rate(self) -> int:
        return self._limiter.current_rate()

    def queue_size(self) -> int:
        return self._limiter.admitted_count()
