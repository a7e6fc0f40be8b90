from __future__ import annotations

import logging
from threading import RLock
from typing import List, Optional

from .commands import Command, ScheduleRevert, TimerStarted
from .config import GameConfig
from .deck import Deck, build_deck
from .errors import PairsError
from .events import ALL_COMMANDS, CommandHandler, Event, EventBus, Restart, RevertDue, Select, Tick
from .rng import RNGManager
from .scheduler import DeferredQueue
from .state import GameOutcome, GameState
from .timer import CountdownTimer

logger = logging.getLogger(__name__)

TICK_INTERVAL = 1.0


class Session:
    """Owns the current game and serializes every event that touches it.

    - ``new_game()``/``restart()`` deal a fresh deck and a fresh GameState,
      bump the generation and cancel anything still queued for the old game.
    - ``select``/``tick``/``resolve_revert``/``handle`` run under one lock,
      return the commands produced and publish them on ``bus``.
    - ``advance(dt)`` is the host clock: it fires queued reverts and
      per-second ticks that fell due.

    By default the session schedules its own ticks once the timer starts,
    so a host that calls ``advance`` must not also call ``tick``. A host
    with its own one-second clock passes ``auto_tick=False`` and calls
    ``tick`` itself; ``advance`` then only fires reverts.
    """

    def __init__(
        self,
        config: Optional[GameConfig] = None,
        rng: Optional[RNGManager] = None,
        bus: Optional[EventBus] = None,
        auto_tick: bool = True,
    ) -> None:
        self.config = config or GameConfig()
        self.rng = rng or RNGManager(self.config.seed)
        self.bus = bus or EventBus()
        self.auto_tick = auto_tick
        self._lock = RLock()
        self._queue: DeferredQueue[Event] = DeferredQueue()
        self._generation = 0
        self._state: Optional[GameState] = None

    # Lifecycle

    def new_game(self) -> Deck:
        """Deal and install a fresh game; returns the deck for layout.

        Raises InvalidConfiguration without touching the current game when
        the grid size and catalog cannot produce a deck.
        """
        with self._lock:
            generation = self._generation + 1
            deck = build_deck(self.config.catalog, self.config.grid_size, self.rng.deck_rng(generation))
            timer = CountdownTimer(self.config.timer_duration_seconds)
            self._state = GameState(
                deck,
                timer,
                revert_delay=self.config.mismatch_revert_delay_seconds,
                strict=self.config.strict,
                generation=generation,
            )
            self._generation = generation
            self._queue.cancel_all()
            logger.info("Started game %d", generation)
            return deck

    def restart(self) -> Deck:
        return self.new_game()

    # Views

    @property
    def generation(self) -> int:
        return self._generation

    @property
    def state(self) -> GameState:
        if self._state is None:
            raise PairsError("No game in progress; call new_game() first")
        return self._state

    @property
    def deck(self) -> Deck:
        return self.state.deck

    @property
    def outcome(self) -> GameOutcome:
        return self.state.outcome

    @property
    def clock(self) -> float:
        return self._queue.now

    def subscribe(self, callback: CommandHandler, kind: Optional[str] = None) -> None:
        self.bus.subscribe(kind or ALL_COMMANDS, callback)

    # Inbound events

    def select(self, index: int) -> List[Command]:
        return self.handle(Select(index))

    def tick(self) -> List[Command]:
        return self.handle(Tick())

    def resolve_revert(self, generation: int, turn: int) -> List[Command]:
        return self.handle(RevertDue(generation, turn))

    def handle(self, event: Event) -> List[Command]:
        with self._lock:
            if isinstance(event, Restart):
                self.new_game()
                return []
            commands = self._dispatch(event)
        self._publish(commands)
        return commands

    def advance(self, dt: float) -> List[Command]:
        """Move the host clock forward by ``dt`` seconds.

        Queued events are handled one at a time in due order, so an event
        scheduled while handling another (the next tick) still fires within
        this call when it falls inside the window.
        """
        if dt < 0:
            raise ValueError("dt must be non-negative")
        commands: List[Command] = []
        with self._lock:
            target = self._queue.now + dt
            while True:
                popped = self._queue.pop_due(target)
                if popped is None:
                    break
                commands.extend(self._dispatch(popped[1]))
            self._queue.advance(target - self._queue.now)
        self._publish(commands)
        return commands

    # Internal

    def _dispatch(self, event: Event) -> List[Command]:
        state = self.state
        if isinstance(event, Select):
            commands = state.on_select(event.index)
        elif isinstance(event, Tick):
            if event.generation is not None and event.generation != self._generation:
                logger.debug("Dropping tick from game %d", event.generation)
                return []
            commands = state.on_tick()
            if event.generation is not None and state.timer.running:
                self._queue.schedule(TICK_INTERVAL, Tick(self._generation))
        elif isinstance(event, RevertDue):
            commands = state.resolve_revert(event.generation, event.turn)
        else:
            raise TypeError(f"Unsupported event: {event!r}")

        for cmd in commands:
            if isinstance(cmd, ScheduleRevert):
                self._queue.schedule(cmd.delay, RevertDue(cmd.generation, cmd.turn))
            elif isinstance(cmd, TimerStarted) and self.auto_tick:
                self._queue.schedule(TICK_INTERVAL, Tick(self._generation))
        return commands

    def _publish(self, commands: List[Command]) -> None:
        for cmd in commands:
            self.bus.publish(cmd)
