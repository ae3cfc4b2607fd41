from __future__ import annotations

import bisect
import itertools
from dataclasses import dataclass


@dataclass(frozen=True)
class Ticket:
    """
    One pending acquire() call.

    seq is the arrival number; it orders callers sharing a priority value
    and lets a caller remove its own entry rather than any equal one.
    """
    priority: int
    seq: int

    @property
    def sort_key(self) -> tuple[int, int]:
        return -self.priority, self.seq


def _ticket(key: tuple[int, int]) -> Ticket:
    return Ticket(priority=-key[0], seq=key[1])


class PriorityRegistry:
    """
    Pending callers ordered by descending priority, FIFO among equal priorities.

    Not thread-safe on its own: the owning limiter calls it under its lock.
    """

    def __init__(self) -> None:
        self._keys: list[tuple[int, int]] = []
        self._seq = itertools.count()

    def __len__(self) -> int:
        return len(self._keys)

    def __contains__(self, ticket: object) -> bool:
        return isinstance(ticket, Ticket) and self.position(ticket) is not None

    def insert(self, priority: int) -> Ticket:
        ticket = Ticket(priority=priority, seq=next(self._seq))
        # seq only grows, so a new ticket lands after every equal priority
        bisect.insort(self._keys, ticket.sort_key)
        return ticket

    def remove(self, ticket: Ticket) -> bool:
        idx = self.position(ticket)
        if idx is None:
            return False
        del self._keys[idx]
        return True

    def remove_priority(self, priority: int) -> bool:
        """
        Remove the first pending entry with this priority value, if any.
        """
        idx = bisect.bisect_left(self._keys, (-priority, -1))
        if idx < len(self._keys) and self._keys[idx][0] == -priority:
            del self._keys[idx]
            return True
        return False

    def position(self, ticket: Ticket) -> int | None:
        key = ticket.sort_key
        idx = bisect.bisect_left(self._keys, key)
        if idx < len(self._keys) and self._keys[idx] == key:
            return idx
        return None

    def front_priority(self) -> int | None:
        if not self._keys:
            return None
        return -self._keys[0][0]

    def top_n(self, n: int) -> list[Ticket]:
        if n <= 0:
            return []
        return [_ticket(key) for key in self._keys[:n]]

    def priorities(self) -> list[int]:
        return [-key[0] for key in self._keys]
