from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import Callable, Optional

from .session import Session
from .state import GameOutcome

logger = logging.getLogger(__name__)


@dataclass
class RunnerConfig:
    """Configuration for the headless session loop.

    Attributes:
        tick_rate: Target updates per second. If 0 or None, updates as fast as possible.
        max_steps: If provided and > 0, the loop stops after this many updates.
        fixed_dt: If set, every update advances the session by exactly this many
            simulated seconds and the loop never sleeps.
    """

    tick_rate: float = 30.0
    max_steps: Optional[int] = None
    fixed_dt: Optional[float] = None


class SessionRunner:
    """Drives a :class:`Session` clock from a blocking headless loop.

    Each update advances the session's host clock (firing reverts and
    countdown ticks) and then calls ``on_step`` so a player can act. The loop
    stops by itself once the game is won or lost.
    """

    def __init__(
        self,
        session: Session,
        config: Optional[RunnerConfig] = None,
        on_step: Optional[Callable[[Session], None]] = None,
    ) -> None:
        self.session = session
        self.config = config or RunnerConfig()
        self.on_step = on_step
        self._running: bool = False
        self._step: int = 0
        self._last_time: Optional[float] = None

    @property
    def running(self) -> bool:
        return self._running

    @property
    def step(self) -> int:
        return self._step

    def start(self) -> None:
        """Start the loop state.

        Safe to call multiple times; subsequent calls are no-ops.
        """
        if self._running:
            logger.debug("SessionRunner.start() called while already running")
            return
        self._running = True
        self._step = 0
        self._last_time = time.perf_counter()
        logger.info("SessionRunner started (tick_rate=%s, max_steps=%s, fixed_dt=%s)",
                    self.config.tick_rate, self.config.max_steps, self.config.fixed_dt)

    def stop(self) -> None:
        if not self._running:
            return
        self._running = False
        logger.info("SessionRunner stopped at step=%s", self._step)

    def update(self, dt: float) -> None:
        """Perform a single update.

        Args:
            dt: Seconds since the last update; replaced by ``fixed_dt`` when configured.
        """
        if not self._running:
            logger.debug("update() called while not running; ignored")
            return
        if self.config.fixed_dt is not None:
            dt = self.config.fixed_dt
        self._step += 1
        self.session.advance(dt)
        if self.on_step is not None and self.session.outcome is GameOutcome.IN_PROGRESS:
            self.on_step(self.session)

        if self.session.outcome is not GameOutcome.IN_PROGRESS:
            logger.info("Game finished: %s", self.session.outcome.value)
            self.stop()
        elif self.config.max_steps is not None and self._step >= self.config.max_steps:
            self.stop()

    def run(self) -> GameOutcome:
        """Run until the game ends or max_steps is reached; returns the outcome."""
        self.start()
        throttle = self.config.fixed_dt is None and bool(self.config.tick_rate and self.config.tick_rate > 0)
        target_dt = 1.0 / float(self.config.tick_rate) if throttle else 0.0

        while self._running:
            now = time.perf_counter()
            dt = 0.0 if self._last_time is None else now - self._last_time
            self._last_time = now

            self.update(dt)

            if target_dt > 0:
                remaining = target_dt - (time.perf_counter() - now)
                if remaining > 0:
                    time.sleep(remaining)

        logger.info("Loop complete (steps=%d)", self._step)
        return self.session.outcome
