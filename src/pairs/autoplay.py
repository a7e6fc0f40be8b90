from __future__ import annotations

import logging
import random
from typing import Dict, List, Optional

from .catalog import Symbol
from .commands import Command, RevealCard
from .deck import CardStatus
from .session import Session

logger = logging.getLogger(__name__)


class AutoPlayer:
    """Headless player with perfect recall of every face it has seen.

    It learns faces only from ``RevealCard`` commands, so it plays fair:
    when it knows where both cards of a face are it takes that pair,
    otherwise it turns an unseen card, and if the first card of a turn has a
    known partner it completes the pair. Subscribe it to the session before
    the first move.
    """

    def __init__(self, session: Session, rng: Optional[random.Random] = None) -> None:
        self.session = session
        self.rng = rng or random.Random()
        self.seen: Dict[int, Symbol] = {}
        self.moves = 0
        session.subscribe(self.observe, RevealCard.kind)

    def observe(self, command: Command) -> None:
        if isinstance(command, RevealCard):
            self.seen[command.index] = self.session.deck.face(command.index)

    def forget(self) -> None:
        """Drop everything learned; call after a restart."""
        self.seen.clear()

    def step(self, session: Optional[Session] = None) -> Optional[int]:
        """Select one card if a selection is currently possible."""
        state = self.session.state
        if len(state.selection) >= 2:
            return None
        index = self._choose(state.selection)
        if index is None:
            return None
        self.session.select(index)
        self.moves += 1
        return index

    def _choose(self, selection: tuple) -> Optional[int]:
        state = self.session.state
        hidden = [i for i in range(len(state.deck)) if state.status(i) is CardStatus.FACE_DOWN]
        if not hidden:
            return None

        if selection:
            face = self.seen.get(selection[0])
            for i in hidden:
                if self.seen.get(i) == face:
                    return i
            return self._unseen_or_any(hidden)

        by_face: Dict[Symbol, List[int]] = {}
        for i in hidden:
            if i in self.seen:
                by_face.setdefault(self.seen[i], []).append(i)
        for indices in by_face.values():
            if len(indices) == 2:
                return indices[0]
        return self._unseen_or_any(hidden)

    def _unseen_or_any(self, hidden: List[int]) -> int:
        unseen = [i for i in hidden if i not in self.seen]
        return self.rng.choice(unseen or hidden)
