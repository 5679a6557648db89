"""FastAPI dependency injection for shared resources."""

import logging
from functools import lru_cache

from fastapi import HTTPException

from timelog.config import Settings
from timelog.engine.aggregate import BuildTracker
from timelog.vault.connector import VaultNoteSource

logger = logging.getLogger(__name__)


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


@lru_cache
def get_build_tracker() -> BuildTracker:
    """Get the process-wide build tracker."""
    return BuildTracker()


def get_note_source(settings: Settings, note_folder: str) -> VaultNoteSource:
    """Note source for the configured vault; 503 when the vault is missing."""
    vault_path = settings.vault_path
    if not vault_path:
        raise HTTPException(
            status_code=503,
            detail="Vault path not configured. Set TIMELOG_VAULT_PATH environment variable.",
        )
    if not vault_path.exists():
        raise HTTPException(status_code=503, detail=f"Vault path does not exist: {vault_path}")
    return VaultNoteSource(vault_path, note_folder=note_folder)
