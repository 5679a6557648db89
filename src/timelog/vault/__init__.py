"""Vault note source and parser modules."""

from timelog.vault.connector import VaultNoteSource
from timelog.vault.parser import parse_markdown

__all__ = ["VaultNoteSource", "parse_markdown"]
