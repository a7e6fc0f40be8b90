class PairsError(Exception):
    """Base error for the pairs game core."""


class InvalidConfiguration(PairsError, ValueError):
    """Raised when grid size, catalog or config values cannot produce a game."""


class InvalidIndex(PairsError, IndexError):
    """Raised in strict mode when a selection falls outside the grid."""
