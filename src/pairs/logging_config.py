import logging
import os

LOG_LEVEL_ENV = "PAIRS_LOG_LEVEL"
LOG_FORMAT = "[%(asctime)s] [%(levelname)s] %(name)s: %(message)s"


def level_for_verbosity(verbosity: int) -> int:
    """Map a ``-v`` count to a level: warnings only, then INFO, then DEBUG."""
    if verbosity <= 0:
        return logging.WARNING
    if verbosity == 1:
        return logging.INFO
    return logging.DEBUG


def configure_logging(verbosity: int = 0) -> int:
    """Configure the root logger for the CLI and return the level used.

    PAIRS_LOG_LEVEL, when set to a known level name, wins over ``verbosity``
    so game internals can be traced without changing the command line.
    """
    level = level_for_verbosity(verbosity)
    name = os.getenv(LOG_LEVEL_ENV)
    if name:
        chosen = logging.getLevelName(name.strip().upper())
        if isinstance(chosen, int):
            level = chosen
        else:
            logging.getLogger(__name__).warning("Ignoring unknown %s=%r", LOG_LEVEL_ENV, name)
    logging.basicConfig(level=level, format=LOG_FORMAT)
    return level
