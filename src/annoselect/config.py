"""Centralised configuration using pydantic-settings.

All environment variables are read through the Settings class.
Consumers call ``get_settings()`` to obtain a cached, validated instance.
Tests construct ``Settings(_env_file=None, ...)`` directly for isolation.
"""

from __future__ import annotations

import logging
from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import BaseModel, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger(__name__)

# src/annoselect/config.py  ->  parent x3  ->  project root
_PROJECT_ROOT = Path(__file__).resolve().parent.parent.parent

LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


# ---------------------------------------------------------------------------
# Sub-models (one per configuration domain)
# ---------------------------------------------------------------------------
class SelectionConfig(BaseModel):
    """Markup conventions and gating for the selection coordinator."""

    annotation_class: str = "r6o-annotation"
    selection_class: str = "r6o-selection"
    hide_selection_class: str = "r6o-hide-selection"
    id_attribute: str = "data-id"
    read_only: bool = False

    @model_validator(mode="after")
    def classes_are_distinct(self) -> SelectionConfig:
        classes = {self.annotation_class, self.selection_class}
        if len(classes) != 2:
            msg = "SELECTION__SELECTION_CLASS must differ from annotation_class"
            raise ValueError(msg)
        if self.hide_selection_class in classes:
            msg = "SELECTION__HIDE_SELECTION_CLASS must be a class of its own"
            raise ValueError(msg)
        return self


class LoggingConfig(BaseModel):
    """Log destinations and verbosity."""

    log_dir: Path = Path("logs")
    console_level: LogLevel = "INFO"
    file_level: LogLevel = "DEBUG"


# ---------------------------------------------------------------------------
# Root settings
# ---------------------------------------------------------------------------
class Settings(BaseSettings):
    """Settings with automatic .env loading and type validation.

    Environment variables use double-underscore delimiter for nesting:
    ``SELECTION__READ_ONLY``, ``LOG__CONSOLE_LEVEL``, etc.
    """

    model_config = SettingsConfigDict(
        env_file=_PROJECT_ROOT / ".env",
        env_nested_delimiter="__",
        extra="ignore",
    )

    selection: SelectionConfig = SelectionConfig()
    log: LoggingConfig = LoggingConfig()


# ---------------------------------------------------------------------------
# Singleton access
# ---------------------------------------------------------------------------
@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return a cached Settings instance.

    Call ``get_settings.cache_clear()`` in tests to reset.
    """
    settings = Settings()

    env_file = settings.model_config.get("env_file")
    if env_file is not None and Path(str(env_file)).is_file():
        logger.info("Settings loaded .env from: %s", env_file)
    else:
        logger.info("Settings: no .env file found, using env vars and defaults")

    return settings
