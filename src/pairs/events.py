from __future__ import annotations

import logging
from collections import defaultdict
from dataclasses import dataclass
from threading import RLock
from typing import Callable, ClassVar, DefaultDict, List, Optional, Union

from .commands import Command

logger = logging.getLogger(__name__)


# Inbound events, delivered by the presentation layer or the session's own queue.


@dataclass(frozen=True)
class Select:
    kind: ClassVar[str] = "select"
    index: int


@dataclass(frozen=True)
class Tick:
    """One real-world second has elapsed."""

    kind: ClassVar[str] = "tick"
    generation: Optional[int] = None


@dataclass(frozen=True)
class Restart:
    kind: ClassVar[str] = "restart"


@dataclass(frozen=True)
class RevertDue:
    """The delay of a ``ScheduleRevert`` command has passed."""

    kind: ClassVar[str] = "revert_due"
    generation: int
    turn: int


Event = Union[Select, Tick, Restart, RevertDue]

CommandHandler = Callable[[Command], None]

ALL_COMMANDS = "*"


class EventBus:
    """A lightweight thread-safe publish/subscribe bus for outbound commands.

    Subscribers register for a command kind (``"reveal_card"``, ...) or for
    every command with ``"*"``. Callbacks run synchronously in registration
    order; a failing subscriber is logged and does not stop the others.
    """

    def __init__(self) -> None:
        self._subs: DefaultDict[str, List[CommandHandler]] = defaultdict(list)
        self._lock = RLock()

    def subscribe(self, kind: str, callback: CommandHandler) -> None:
        """Subscribe a callback for a given command kind.

        Args:
            kind: The command kind to listen for, or ``"*"`` for all.
            callback: A function accepting a single command argument.
        """
        if not callable(callback):
            raise TypeError("callback must be callable")
        with self._lock:
            if callback not in self._subs[kind]:
                self._subs[kind].append(callback)
                logger.debug("Subscribed %s to '%s'", getattr(callback, "__name__", str(callback)), kind)

    def unsubscribe(self, kind: str, callback: CommandHandler) -> None:
        """Unsubscribe a callback. Silently ignores unknown callbacks."""
        with self._lock:
            if kind in self._subs and callback in self._subs[kind]:
                self._subs[kind].remove(callback)
                logger.debug("Unsubscribed %s from '%s'", getattr(callback, "__name__", str(callback)), kind)

    def clear(self) -> None:
        with self._lock:
            self._subs.clear()

    def publish(self, command: Command) -> None:
        """Deliver a command to its kind's subscribers, then to wildcard ones."""
        with self._lock:
            subs = list(self._subs.get(command.kind, [])) + list(self._subs.get(ALL_COMMANDS, []))
        logger.debug("Publishing %r to %d subscribers", command, len(subs))
        for cb in subs:
            try:
                cb(command)
            except Exception:
                logger.exception("Unhandled exception in command subscriber for '%s'", command.kind)
