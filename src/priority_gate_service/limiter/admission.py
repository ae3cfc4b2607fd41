from __future__ import annotations

import logging

from priority_gate_service.limiter.registry import PriorityRegistry, Ticket
from priority_gate_service.limiter.window import WindowCounter

logger = logging.getLogger(__name__)


class AdmissionController:
    """
    Decides whether one pending ticket may proceed in the current window.

    Rules, applied while the limiter lock is held:
    - The window is full (admitted >= throughput): deny.
    - Fast path: every waiter is at baseline priority, so the head-of-line
      tickets covering the remaining slots are admitted in arrival order.
    - Otherwise only the `slots` highest-ranked tickets are eligible, which
      holds lower priorities back while higher ones are still pending.

    Admission is the only mutation: the window count goes up by one and the
    caller's own ticket leaves the registry.
    """

    def __init__(self, window: WindowCounter, registry: PriorityRegistry, baseline_priority: int) -> None:
        self._window = window
        self._registry = registry
        self._baseline = baseline_priority

    def try_admit(self, ticket: Ticket, throughput: int) -> bool:
        slots = self._window.remaining_capacity(throughput)
        if slots <= 0:
            return False

        if self._registry.front_priority() == self._baseline:
            position = self._registry.position(ticket)
            eligible = position is not None and position < slots
        else:
            eligible = ticket in self._registry.top_n(slots)

        if not eligible:
            return False

        self._window.record_admission()
        self._registry.remove(ticket)
        logger.debug(
            "Admitted priority=%s seq=%s admitted=%s throughput=%s",
            ticket.priority,
            ticket.seq,
            self._window.admitted,
            throughput,
        )
        return True
