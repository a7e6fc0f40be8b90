from __future__ import annotations

import logging
from enum import Enum

logger = logging.getLogger(__name__)


class TickResult(str, Enum):
    CONTINUING = "continuing"
    EXPIRED = "expired"
    IDLE = "idle"


class CountdownTimer:
    """Whole-second countdown driven entirely by external ticks.

    The timer holds no clock of its own: the host calls :meth:`tick` once per
    elapsed second while the timer is running.
    """

    def __init__(self, duration: int) -> None:
        if duration <= 0:
            raise ValueError("Timer duration must be positive")
        self._duration = int(duration)
        self._remaining = self._duration
        self._running = False

    @property
    def duration(self) -> int:
        return self._duration

    @property
    def remaining_seconds(self) -> int:
        return self._remaining

    @property
    def running(self) -> bool:
        return self._running

    @property
    def expired(self) -> bool:
        return self._remaining <= 0

    def start(self) -> bool:
        """Start counting down.

        Safe to call multiple times; returns True only when the call actually
        started the timer. An expired timer cannot be restarted without reset.
        """
        if self._running or self.expired:
            return False
        self._running = True
        logger.debug("Timer started with %ds remaining", self._remaining)
        return True

    def tick(self) -> TickResult:
        if not self._running:
            logger.debug("tick() called while timer stopped; ignored")
            return TickResult.IDLE
        self._remaining -= 1
        if self._remaining <= 0:
            self._remaining = 0
            self._running = False
            logger.info("Timer expired")
            return TickResult.EXPIRED
        return TickResult.CONTINUING

    def stop(self) -> None:
        self._running = False

    def reset(self, duration: int | None = None) -> None:
        if duration is not None:
            if duration <= 0:
                raise ValueError("Timer duration must be positive")
            self._duration = int(duration)
        self._remaining = self._duration
        self._running = False

    def __repr__(self) -> str:
        return f"CountdownTimer(remaining={self._remaining}, running={self._running})"
