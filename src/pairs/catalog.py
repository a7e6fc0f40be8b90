from __future__ import annotations

from collections import Counter
from dataclasses import dataclass
from typing import Iterable, Iterator, Tuple, Union

from .errors import InvalidConfiguration

# A card face: a name such as "dog", or a small integer.
Symbol = Union[int, str]

# Faces for the standard 4x4 board: one per pair.
DEFAULT_SYMBOLS: Tuple[Symbol, ...] = (
    "plane",
    "train",
    "house",
    "dog",
    "plant2",
    "plant",
    "donut",
    "cake",
)


@dataclass(frozen=True)
class SymbolCatalog:
    """Immutable, ordered list of distinct symbols usable as card faces."""

    symbols: Tuple[Symbol, ...] = DEFAULT_SYMBOLS

    def __post_init__(self) -> None:
        symbols = tuple(self.symbols)
        object.__setattr__(self, "symbols", symbols)
        if len(set(symbols)) != len(symbols):
            dupes = sorted((s for s, n in Counter(symbols).items() if n > 1), key=str)
            raise InvalidConfiguration(f"Symbol catalog contains duplicates: {dupes}")

    @classmethod
    def of(cls, symbols: Iterable[Symbol]) -> "SymbolCatalog":
        return cls(tuple(symbols))

    def __len__(self) -> int:
        return len(self.symbols)

    def __iter__(self) -> Iterator[Symbol]:
        return iter(self.symbols)

    def __contains__(self, symbol: object) -> bool:
        return symbol in self.symbols

    def supports(self, grid_size: int) -> bool:
        """True if the catalog has enough symbols for ``grid_size`` cards."""
        return grid_size > 0 and grid_size % 2 == 0 and len(self) >= grid_size // 2


DEFAULT_CATALOG = SymbolCatalog()
