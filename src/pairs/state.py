from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import FrozenSet, List, Optional, Tuple

from .commands import (
    Command,
    GameLost,
    GameWon,
    HideCard,
    MarkMatched,
    RevealCard,
    ScheduleRevert,
    TimeRemaining,
    TimerStarted,
)
from .deck import CardStatus, Deck
from .errors import InvalidIndex
from .timer import CountdownTimer, TickResult

logger = logging.getLogger(__name__)


class GameOutcome(str, Enum):
    IN_PROGRESS = "in_progress"
    WON = "won"
    LOST = "lost"


@dataclass(frozen=True)
class PendingRevert:
    """A mismatched pair waiting for its deferred flip-down."""

    indices: Tuple[int, int]
    generation: int
    turn: int


class GameState:
    """Card-flip state machine for one game.

    Cards go FaceDown -> FaceUp -> Matched, or FaceUp -> FaceDown after a
    mismatch. Each operation returns the commands the presentation layer
    needs; spurious input returns an empty list instead of raising.

    A mismatch does not flip the pair back straight away. The state emits
    ``ScheduleRevert`` and keeps both cards face-up and the selection buffer
    locked until :meth:`resolve_revert` is called with the matching
    generation and turn.
    """

    def __init__(
        self,
        deck: Deck,
        timer: CountdownTimer,
        revert_delay: float = 1.0,
        strict: bool = False,
        generation: int = 0,
    ) -> None:
        self._timer = timer
        self.revert_delay = float(revert_delay)
        self.strict = strict
        self._generation = generation
        self.reset(deck, generation)

    def reset(self, deck: Deck, generation: Optional[int] = None) -> None:
        """Install a new deck and return to a fresh, not-yet-started game.

        Without an explicit ``generation`` the current one is bumped, so a
        revert still in flight for the replaced deck can never commit.
        """
        self._deck = deck
        self._generation = self._generation + 1 if generation is None else generation
        self._status: List[CardStatus] = [CardStatus.FACE_DOWN] * len(deck)
        self._selection: List[int] = []
        self._matched: set[int] = set()
        self._pending: Optional[PendingRevert] = None
        self._turn = 0
        self._timer.reset()
        logger.info("Game %d dealt with %d cards", self._generation, len(deck))

    # Views

    @property
    def deck(self) -> Deck:
        return self._deck

    @property
    def generation(self) -> int:
        return self._generation

    @property
    def timer(self) -> CountdownTimer:
        return self._timer

    @property
    def selection(self) -> Tuple[int, ...]:
        return tuple(self._selection)

    @property
    def matched(self) -> FrozenSet[int]:
        return frozenset(self._matched)

    @property
    def pending_revert(self) -> Optional[PendingRevert]:
        return self._pending

    @property
    def outcome(self) -> GameOutcome:
        if len(self._matched) == len(self._deck):
            return GameOutcome.WON
        if self._timer.expired:
            return GameOutcome.LOST
        return GameOutcome.IN_PROGRESS

    def status(self, index: int) -> CardStatus:
        return self._status[index]

    # Inbound

    def on_select(self, index: int) -> List[Command]:
        if not self._deck.in_range(index):
            if self.strict:
                raise InvalidIndex(f"Card index {index} outside grid of {len(self._deck)}")
            logger.debug("Ignoring out-of-range selection %r", index)
            return []
        if self.outcome is not GameOutcome.IN_PROGRESS:
            logger.debug("Ignoring selection %d: game is %s", index, self.outcome.value)
            return []
        if len(self._selection) >= 2:
            logger.debug("Ignoring selection %d: pair %s unresolved", index, self._selection)
            return []
        if self._status[index] is not CardStatus.FACE_DOWN:
            logger.debug("Ignoring selection %d: card is %s", index, self._status[index].value)
            return []

        fresh = not self._matched and not self._selection
        self._status[index] = CardStatus.FACE_UP
        self._selection.append(index)
        commands: List[Command] = [RevealCard(index)]

        if fresh and self._timer.start():
            commands.append(TimerStarted(self._timer.remaining_seconds))

        if len(self._selection) == 2:
            commands.extend(self._evaluate())
        return commands

    def on_tick(self) -> List[Command]:
        if self.outcome is not GameOutcome.IN_PROGRESS:
            return []
        result = self._timer.tick()
        if result is TickResult.IDLE:
            return []
        commands: List[Command] = [TimeRemaining(self._timer.remaining_seconds)]
        if result is TickResult.EXPIRED:
            logger.info("Game %d lost: time is up with %d/%d matched",
                        self._generation, len(self._matched), len(self._deck))
            commands.append(GameLost())
        return commands

    def resolve_revert(self, generation: int, turn: int) -> List[Command]:
        """Commit the deferred flip-down of a mismatched pair."""
        pending = self._pending
        if pending is None or pending.generation != generation or pending.turn != turn:
            logger.debug("Dropping stale revert (generation=%s, turn=%s)", generation, turn)
            return []
        self._pending = None
        self._selection.clear()
        commands: List[Command] = []
        for i in pending.indices:
            self._status[i] = CardStatus.FACE_DOWN
            commands.append(HideCard(i))
        return commands

    # Internal

    def _evaluate(self) -> List[Command]:
        first, second = self._selection
        self._turn += 1
        if self._deck.face(first) == self._deck.face(second):
            commands: List[Command] = []
            for i in (first, second):
                self._status[i] = CardStatus.MATCHED
                self._matched.add(i)
                commands.append(MarkMatched(i))
            self._selection.clear()
            logger.debug("Matched %d and %d (%s)", first, second, self._deck.face(first))
            if self.outcome is GameOutcome.WON:
                self._timer.stop()
                logger.info("Game %d won with %ds left", self._generation, self._timer.remaining_seconds)
                commands.append(GameWon())
            return commands

        self._pending = PendingRevert((first, second), self._generation, self._turn)
        logger.debug("Mismatch %d/%d; revert in %.2fs", first, second, self.revert_delay)
        return [ScheduleRevert((first, second), self.revert_delay, self._generation, self._turn)]
