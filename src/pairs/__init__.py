"""
Pairs package root.

Timed memory-matching game core. Everything here is pure game logic; the
presentation layer talks to it through inbound events and outbound commands
(see :mod:`pairs.events` and :mod:`pairs.commands`).
"""

from importlib.metadata import version, PackageNotFoundError

__all__ = ["__version__"]

try:
    __version__ = version("pairs-core")
except PackageNotFoundError:  # pragma: no cover - during tests without packaging
    __version__ = "0.0.0"
