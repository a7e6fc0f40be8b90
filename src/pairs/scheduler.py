from __future__ import annotations

import heapq
import itertools
import logging
from dataclasses import dataclass, field
from typing import Generic, List, Optional, Set, Tuple, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass(order=True, frozen=True)
class Scheduled(Generic[T]):
    """Handle for an event queued at virtual time ``due``."""

    due: float
    seq: int
    event: T = field(compare=False)


class DeferredQueue(Generic[T]):
    """Cancellable queue of future events on a virtual clock.

    Nothing here sleeps or spawns threads: the owner moves time forward with
    :meth:`advance` and receives the events that became due, in due order
    (ties in scheduling order).
    """

    def __init__(self) -> None:
        self._heap: List[Scheduled[T]] = []
        self._cancelled: Set[int] = set()
        self._seq = itertools.count()
        self._now = 0.0

    @property
    def now(self) -> float:
        return self._now

    def __len__(self) -> int:
        return len(self._heap) - len(self._cancelled)

    def schedule(self, delay: float, event: T) -> Scheduled[T]:
        if delay < 0:
            raise ValueError("delay must be non-negative")
        item = Scheduled(self._now + delay, next(self._seq), event)
        heapq.heappush(self._heap, item)
        logger.debug("Scheduled %r at t=%.3f", event, item.due)
        return item

    def cancel(self, item: Scheduled[T]) -> None:
        if any(s.seq == item.seq for s in self._heap):
            self._cancelled.add(item.seq)

    def cancel_all(self) -> None:
        if self._heap:
            logger.debug("Cancelling %d queued events", len(self))
        self._heap.clear()
        self._cancelled.clear()

    def next_due(self) -> Optional[float]:
        self._drop_cancelled()
        return self._heap[0].due if self._heap else None

    def pop_due(self, until: float) -> Optional[Tuple[float, T]]:
        """Pop the earliest event due at or before ``until``, if any."""
        self._drop_cancelled()
        if not self._heap or self._heap[0].due > until:
            return None
        item = heapq.heappop(self._heap)
        self._now = max(self._now, item.due)
        return item.due, item.event

    def advance(self, dt: float) -> List[T]:
        """Move the clock by ``dt`` and return every event that fell due."""
        if dt < 0:
            raise ValueError("dt must be non-negative")
        target = self._now + dt
        due: List[T] = []
        while True:
            popped = self.pop_due(target)
            if popped is None:
                break
            due.append(popped[1])
        self._now = target
        return due

    def _drop_cancelled(self) -> None:
        while self._heap and self._heap[0].seq in self._cancelled:
            self._cancelled.discard(heapq.heappop(self._heap).seq)
