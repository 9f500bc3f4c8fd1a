"""``Fussel.toml`` discovery, parsing and validation."""

from __future__ import annotations

import logging
import os
import tomllib
from pathlib import Path
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from fussel.core.pipeline import DEFAULT_CAPACITY
from fussel.errors import ConfigError
from fussel.lints.incomplete_work import DEFAULT_KEYWORDS

logger = logging.getLogger(__name__)

CONFIG_FILENAME = "Fussel.toml"
CONFIG_ENV_VAR = "FUSSEL_CONFIG"
LOG_LEVEL_ENV_VAR = "FUSSEL_LOG_LEVEL"


class _Section(BaseModel):
    model_config = ConfigDict(extra="forbid")


class TrailingWhitespaceConfig(_Section):
    enabled: bool = True
    extension_blacklist: set[str] = Field(default_factory=set)


class IncompleteWorkConfig(_Section):
    enabled: bool = True
    keywords: list[str] = Field(default_factory=lambda: list(DEFAULT_KEYWORDS))

    @field_validator("keywords")
    @classmethod
    def _reject_empty_keywords(cls, keywords: list[str]) -> list[str]:
        if any(not keyword for keyword in keywords):
            raise ValueError("keywords must not be empty strings")
        return keywords


class WalkConfig(_Section):
    respect_gitignore: bool = True
    front_end: Literal["walker", "tree"] = "walker"
    channel_capacity: int = Field(default=DEFAULT_CAPACITY, ge=1)


class FusselConfig(_Section):
    trailing_whitespace: TrailingWhitespaceConfig = Field(default_factory=TrailingWhitespaceConfig)
    incomplete_work: IncompleteWorkConfig = Field(default_factory=IncompleteWorkConfig)
    walk: WalkConfig = Field(default_factory=WalkConfig)


def load_config(path: Path) -> FusselConfig:
    """Load and validate the configuration file at *path*."""
    try:
        with path.open("rb") as handle:
            data = tomllib.load(handle)
    except OSError as exc:
        raise ConfigError(f"Cannot read configuration file {path}") from exc
    except tomllib.TOMLDecodeError as exc:
        raise ConfigError(f"Configuration file {path} is not valid TOML") from exc
    try:
        return FusselConfig.model_validate(data)
    except ValidationError as exc:
        raise ConfigError(f"Configuration file {path} is invalid") from exc


def find_config(start: Path) -> Path | None:
    """Return the nearest ``Fussel.toml`` at or above *start*."""
    for directory in (start, *start.parents):
        candidate = directory / CONFIG_FILENAME
        if candidate.is_file():
            return candidate
    return None


def discover_config(start: Path, explicit: Path | None = None) -> tuple[FusselConfig, Path | None]:
    """Resolve the configuration for a run started in *start*.

    An explicit path (argument or ``FUSSEL_CONFIG``) must exist. Otherwise the
    nearest ``Fussel.toml`` is used, falling back to the defaults when there is
    none. Returns the configuration and the file it came from.
    """
    if explicit is None and os.getenv(CONFIG_ENV_VAR):
        explicit = Path(os.environ[CONFIG_ENV_VAR])
    if explicit is not None:
        return load_config(explicit), explicit
    found = find_config(start.resolve())
    if found is None:
        logger.info("No %s found above %s, using defaults", CONFIG_FILENAME, start)
        return FusselConfig(), None
    logger.info("Loading configuration from %s", found)
    return load_config(found), found


def log_level() -> str:
    return os.getenv(LOG_LEVEL_ENV_VAR, "WARNING").upper()
