from __future__ import annotations

import logging
from importlib import resources
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

import yaml
from platformdirs import user_config_dir
from pydantic import BaseModel, ConfigDict, Field, StrictInt, ValidationError, field_validator

from .catalog import DEFAULT_SYMBOLS, Symbol, SymbolCatalog
from .errors import InvalidConfiguration

logger = logging.getLogger(__name__)

APP_NAME = "pairs"
CONFIG_FILENAME = "config.yaml"


class GameConfig(BaseModel):
    """Recognized game options.

    Field types and ranges are checked here. Whether ``grid_size`` and
    ``symbol_catalog`` fit together is left to the deck builder, so a bad
    combination fails the ``new_game()`` call that tries to use it.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    grid_size: int = Field(16, description="Number of cards; must be even")
    timer_duration_seconds: int = Field(60, gt=0, description="Countdown length per game")
    mismatch_revert_delay_seconds: float = Field(
        1.0, ge=0.0, description="How long a mismatched pair stays visible"
    )
    symbol_catalog: List[Union[StrictInt, str]] = Field(
        default_factory=lambda: list(DEFAULT_SYMBOLS), description="Card faces: names or small integers"
    )
    strict: bool = Field(False, description="Raise InvalidIndex for out-of-range selections")
    seed: Optional[Union[int, str]] = Field(None, description="Master seed for reproducible decks")

    @field_validator("symbol_catalog")
    @classmethod
    def symbols_not_blank(cls, v: List[Symbol]) -> List[Symbol]:
        cleaned = [s.strip() if isinstance(s, str) else s for s in v]
        if any(s == "" for s in cleaned):
            raise ValueError("symbol names must not be blank")
        return cleaned

    @property
    def catalog(self) -> SymbolCatalog:
        return SymbolCatalog.of(self.symbol_catalog)


def default_user_config_path() -> Path:
    return Path(user_config_dir(appname=APP_NAME)) / CONFIG_FILENAME


def _load_yaml_text(text: str, source: str) -> Dict[str, Any]:
    try:
        data = yaml.safe_load(text) or {}
    except yaml.YAMLError as exc:
        raise InvalidConfiguration(f"Malformed YAML in {source}: {exc}") from exc
    if not isinstance(data, dict):
        raise InvalidConfiguration(f"Config in {source} must be a mapping, got {type(data).__name__}")
    return data


def _load_defaults() -> Dict[str, Any]:
    text = resources.files("pairs").joinpath("default_config.yaml").read_text(encoding="utf-8")
    return _load_yaml_text(text, "packaged defaults")


def load_config(
    path: Optional[Union[str, Path]] = None,
    overrides: Optional[Dict[str, Any]] = None,
) -> GameConfig:
    """Load configuration from packaged defaults, a user file and overrides.

    If ``path`` is None, ``config.yaml`` in the platform user config
    directory is used when it exists. An explicit ``path`` must exist.
    ``overrides`` entries set to None are skipped so CLI flags can be passed
    through unconditionally.
    """
    data = _load_defaults()
    if path is not None:
        user_path = Path(path)
        if not user_path.exists():
            raise FileNotFoundError(f"Config file not found: {user_path}")
    else:
        user_path = default_user_config_path()

    if user_path.exists():
        data.update(_load_yaml_text(user_path.read_text(encoding="utf-8"), str(user_path)))
        logger.debug("Loaded config overlay from %s", user_path)

    for key, value in (overrides or {}).items():
        if value is not None:
            data[key] = value

    try:
        cfg = GameConfig(**data)
    except ValidationError as exc:
        raise InvalidConfiguration(str(exc)) from exc
    logger.info(
        "Config: grid_size=%d timer=%ds revert_delay=%.2fs symbols=%d strict=%s",
        cfg.grid_size,
        cfg.timer_duration_seconds,
        cfg.mismatch_revert_delay_seconds,
        len(cfg.symbol_catalog),
        cfg.strict,
    )
    return cfg
