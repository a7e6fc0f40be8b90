from __future__ import annotations

import logging
import random
from collections import Counter
from dataclasses import dataclass
from enum import Enum
from typing import Iterable, Iterator, List, Optional, Sequence, Tuple

from .catalog import Symbol, SymbolCatalog
from .errors import InvalidConfiguration

logger = logging.getLogger(__name__)


class CardStatus(str, Enum):
    FACE_DOWN = "face_down"
    FACE_UP = "face_up"
    MATCHED = "matched"


@dataclass(frozen=True)
class Card:
    """One grid cell: a stable position and the face dealt to it."""

    index: int
    face: Symbol


@dataclass(frozen=True)
class Deck:
    """Ordered, immutable assignment of faces to grid positions for one game.

    Card statuses are not stored here; they belong to the game state that
    plays the deck.
    """

    cards: Tuple[Card, ...]

    def __post_init__(self) -> None:
        for pos, card in enumerate(self.cards):
            if card.index != pos:
                raise InvalidConfiguration(f"Card at position {pos} has index {card.index}")
        _check_pairing(self.faces)

    @classmethod
    def from_faces(cls, faces: Iterable[Symbol]) -> "Deck":
        """Build a deck from an explicit face order, e.g. ``["A", "B", "B", "A"]``."""
        return cls(tuple(Card(index=i, face=f) for i, f in enumerate(faces)))

    @property
    def faces(self) -> Tuple[Symbol, ...]:
        return tuple(c.face for c in self.cards)

    @property
    def symbols(self) -> Tuple[Symbol, ...]:
        """Distinct faces in first-seen order."""
        return tuple(dict.fromkeys(self.faces))

    def face(self, index: int) -> Symbol:
        return self.cards[index].face

    def partner_of(self, index: int) -> int:
        """Index of the other card sharing this card's face."""
        face = self.cards[index].face
        for card in self.cards:
            if card.face == face and card.index != index:
                return card.index
        raise InvalidConfiguration(f"Card {index} has no partner")  # pragma: no cover - pairing checked on init

    def in_range(self, index: int) -> bool:
        if isinstance(index, bool) or not isinstance(index, int):
            return False
        return 0 <= index < len(self.cards)

    def __len__(self) -> int:
        return len(self.cards)

    def __iter__(self) -> Iterator[Card]:
        return iter(self.cards)

    def __getitem__(self, index: int) -> Card:
        return self.cards[index]


def _check_pairing(faces: Sequence[Symbol]) -> None:
    if not faces or len(faces) % 2:
        raise InvalidConfiguration(f"Deck size must be even and positive, got {len(faces)}")
    bad = {face: n for face, n in Counter(faces).items() if n != 2}
    if bad:
        raise InvalidConfiguration(f"Every face must appear exactly twice; offending counts: {bad}")


def validate_grid(catalog: SymbolCatalog, grid_size: int) -> None:
    """Raise InvalidConfiguration unless ``catalog`` can fill ``grid_size`` cards."""
    if isinstance(grid_size, bool) or not isinstance(grid_size, int):
        raise InvalidConfiguration(f"grid_size must be an integer, got {grid_size!r}")
    if grid_size <= 0 or grid_size % 2:
        raise InvalidConfiguration(f"grid_size must be even and positive, got {grid_size}")
    if len(catalog) < grid_size // 2:
        raise InvalidConfiguration(
            f"grid_size {grid_size} needs {grid_size // 2} symbols; catalog has {len(catalog)}"
        )


def build_deck(catalog: SymbolCatalog, grid_size: int, rng: Optional[random.Random] = None) -> Deck:
    """Deal a shuffled deck of ``grid_size`` cards with every chosen face twice.

    Exactly ``grid_size // 2`` symbols are sampled from the catalog (all of
    them when the catalog is exactly that size), each is duplicated, and the
    result is shuffled with ``rng`` (Fisher-Yates via ``random.Random.shuffle``).
    """
    validate_grid(catalog, grid_size)
    rng = rng or random.Random()
    chosen: List[Symbol] = rng.sample(list(catalog.symbols), grid_size // 2)
    faces = chosen * 2
    rng.shuffle(faces)
    deck = Deck.from_faces(faces)
    logger.debug("Built deck of %d cards from %d symbols", len(deck), len(chosen))
    return deck
