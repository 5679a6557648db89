"""Configuration management using pydantic-settings."""

import logging
from pathlib import Path
from typing import Any

from pydantic import Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from timelog.engine.aggregate import AggregationConfig
from timelog.engine.errors import NoteReadError
from timelog.engine.periods import parse_period
from timelog.vault.connector import VaultNoteSource

logger = logging.getLogger(__name__)

# Frontmatter keys of the in-vault config note -> Settings fields
CONFIG_NOTE_KEYS = {
    "dailyNotesPath": "note_folder",
    "hierarchyField": "hierarchy_column",
    "breakdownField": "breakdown_column",
    "rowDurationHours": "row_duration_hours",
    "defaultPeriod": "default_period",
}


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="TIMELOG_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Server settings
    host: str = "127.0.0.1"
    port: int = 8000
    debug: bool = False
    cors_origins: list[str] = []  # JSON list in TIMELOG_CORS_ORIGINS

    # Vault settings
    vault_path: Path | None = None
    note_folder: str = "00_Daily"
    config_note: str | None = None  # vault-relative note whose frontmatter overrides these

    # Table settings
    hierarchy_column: str = Field(default="Hierarchy", min_length=1)
    breakdown_column: str | None = None
    row_duration_hours: float = Field(default=0.5, gt=0)

    # Summary settings
    default_period: str = "This week"
    max_workers: int = Field(default=4, ge=1)
    cache_ttl: float = 60.0  # seconds

    @field_validator("default_period")
    @classmethod
    def _known_period(cls, value: str) -> str:
        return parse_period(value).value


def get_settings() -> Settings:
    """Get application settings instance."""
    return Settings()


def apply_config_note(settings: Settings) -> Settings:
    """Return settings overridden by the vault config note's frontmatter.

    A missing or unreadable note, or one holding invalid values, leaves the
    settings unchanged.
    """
    if not settings.config_note or not settings.vault_path:
        return settings

    source = VaultNoteSource(settings.vault_path)
    try:
        note = source.read_note(settings.config_note)
    except NoteReadError as e:
        logger.warning("Config note not loaded: %s", e)
        return settings

    overrides: dict[str, Any] = {}
    for key, field_name in CONFIG_NOTE_KEYS.items():
        value = note.frontmatter.get(key)
        if value is None or value == "":
            continue
        overrides[field_name] = value

    if not overrides:
        return settings

    try:
        applied = Settings.model_validate({**settings.model_dump(), **overrides})
    except ValidationError as e:
        logger.warning("Config note %s ignored, invalid values: %s", settings.config_note, e)
        return settings

    logger.info("Applying config note %s: %s", settings.config_note, sorted(overrides))
    return applied


def load_aggregation_config(settings: Settings) -> AggregationConfig:
    """Build the engine config from settings.

    Pass settings through ``apply_config_note`` first so the note's overrides apply.
    """
    return AggregationConfig(
        hierarchy_column=settings.hierarchy_column,
        row_duration_hours=settings.row_duration_hours,
        breakdown_column=settings.breakdown_column,
        note_folder=settings.note_folder,
        max_workers=settings.max_workers,
    )
