from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any, ClassVar, Dict, Tuple, Union


@dataclass(frozen=True)
class RevealCard:
    """Show the card's face."""

    kind: ClassVar[str] = "reveal_card"
    index: int


@dataclass(frozen=True)
class HideCard:
    """Show the card back again after a mismatch."""

    kind: ClassVar[str] = "hide_card"
    index: int


@dataclass(frozen=True)
class MarkMatched:
    """Lock the card visually as part of a found pair."""

    kind: ClassVar[str] = "mark_matched"
    index: int


@dataclass(frozen=True)
class ScheduleRevert:
    """A mismatched pair must be flipped back after ``delay`` seconds.

    The host answers with ``RevertDue(generation, turn)``; the tag lets the
    game drop answers that belong to a superseded game or turn.
    """

    kind: ClassVar[str] = "schedule_revert"
    indices: Tuple[int, int]
    delay: float
    generation: int
    turn: int


@dataclass(frozen=True)
class TimerStarted:
    kind: ClassVar[str] = "timer_started"
    seconds: int


@dataclass(frozen=True)
class TimeRemaining:
    """Countdown display update."""

    kind: ClassVar[str] = "time_remaining"
    seconds: int

    @property
    def display(self) -> str:
        """``MM:SS`` clock text, clamped at zero."""
        seconds = max(self.seconds, 0)
        return f"{seconds // 60:02d}:{seconds % 60:02d}"


@dataclass(frozen=True)
class GameWon:
    kind: ClassVar[str] = "game_won"


@dataclass(frozen=True)
class GameLost:
    kind: ClassVar[str] = "game_lost"


Command = Union[
    RevealCard,
    HideCard,
    MarkMatched,
    ScheduleRevert,
    TimerStarted,
    TimeRemaining,
    GameWon,
    GameLost,
]


def to_dict(command: Command) -> Dict[str, Any]:
    """JSON-friendly form: the command kind plus its payload fields."""
    data: Dict[str, Any] = {"kind": command.kind}
    data.update(asdict(command))
    if isinstance(command, ScheduleRevert):
        data["indices"] = list(command.indices)
    if isinstance(command, TimeRemaining):
        data["display"] = command.display
    return data
