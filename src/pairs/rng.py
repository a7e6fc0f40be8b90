from __future__ import annotations

import hashlib
import logging
import random
import secrets
from dataclasses import dataclass
from typing import Union

logger = logging.getLogger(__name__)

Seed = Union[int, str, bytes, None]


def _seed_bytes(seed: Union[int, str, bytes]) -> bytes:
    if isinstance(seed, bytes):
        return seed
    if isinstance(seed, bool):
        raise TypeError("Unsupported seed type: %r" % (type(seed),))
    if isinstance(seed, int):
        if seed < 0:
            raise ValueError("Seed must be non-negative")
        return seed.to_bytes((seed.bit_length() + 7) // 8 or 1, "big")
    if isinstance(seed, str):
        return seed.strip().encode("utf-8")
    raise TypeError("Unsupported seed type: %r" % (type(seed),))


@dataclass(frozen=True)
class RNGManager:
    """Per-game shuffle source derived from one master seed.

    Game ``n`` always gets the same deck for the same master seed, and
    consecutive games get different decks. Without a seed a random one is
    drawn and logged so a surprising deal can be replayed with ``--seed``.
    """

    master_seed: Seed = None

    def __post_init__(self) -> None:
        if self.master_seed is None:
            raw = secrets.token_bytes(16)
            logger.info("No seed given; dealing with random seed %s", raw.hex())
        else:
            raw = _seed_bytes(self.master_seed)
        object.__setattr__(self, "_master", raw)

    def deck_seed(self, generation: int) -> int:
        """64-bit shuffle seed for the given game generation."""
        h = hashlib.blake2b(self._master, digest_size=8, person=b"pairs-deck")
        h.update(generation.to_bytes(8, "big", signed=True))
        return int.from_bytes(h.digest(), "big")

    def deck_rng(self, generation: int) -> random.Random:
        seed = self.deck_seed(generation)
        logger.debug("Deck seed for game %d: %d", generation, seed)
        return random.Random(seed)

    def get_master_seed_hex(self) -> str:
        return self._master.hex()
