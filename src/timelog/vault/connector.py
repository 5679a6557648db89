"""Vault note source: lists and reads dated daily notes from an Obsidian vault."""

import fnmatch
import logging
from pathlib import Path

from timelog.engine.errors import NoteReadError
from timelog.engine.periods import TimeWindow
from timelog.engine.source import NoteRef
from timelog.models import Note
from timelog.vault.parser import note_date, parse_markdown

logger = logging.getLogger(__name__)


class VaultNoteSource:
    """Reads daily notes from a folder of an Obsidian vault."""

    DEFAULT_EXCLUDES = [
        ".obsidian/*",
        ".trash/*",
        ".git/*",
        "*.excalidraw.md",
        "*Templates/*",
    ]

    def __init__(
        self,
        vault_path: Path,
        note_folder: str = "",
        exclude_patterns: list[str] | None = None,
    ) -> None:
        """Initialize the note source.

        Args:
            vault_path: Path to the Obsidian vault root.
            note_folder: Vault-relative folder holding the daily notes ("" for the whole vault).
            exclude_patterns: Glob patterns (vault-relative) for files to skip.
        """
        self.vault_path = vault_path
        self.note_folder = note_folder.strip("/")
        self.exclude_patterns = exclude_patterns or self.DEFAULT_EXCLUDES

    def _should_exclude(self, relative_path: str) -> bool:
        return any(fnmatch.fnmatch(relative_path, pattern) for pattern in self.exclude_patterns)

    def _iter_markdown(self) -> list[Path]:
        root = self.vault_path / self.note_folder if self.note_folder else self.vault_path
        if not root.is_dir():
            logger.warning("Note folder does not exist: %s", root)
            return []
        paths: list[Path] = []
        for file_path in root.glob("**/*.md"):
            if not file_path.is_file():
                continue
            relative = file_path.relative_to(self.vault_path)
            if not self._should_exclude(relative.as_posix()):
                paths.append(relative)
        return sorted(paths)

    def _dated(self, relative: Path) -> NoteRef | None:
        path = relative.as_posix()
        day = note_date(path, {})
        if day is None:
            # Not named by date: fall back to the frontmatter
            try:
                day = self.read_note(path).day
            except NoteReadError as e:
                logger.warning("Skipping undated note %s: %s", path, e)
                return None
        if day is None:
            return None
        return NoteRef(path=path, date=day)

    def list_notes(self, window: TimeWindow) -> list[NoteRef]:
        """List dated notes inside ``window``, ascending by date then path."""
        notes: list[NoteRef] = []
        for relative in self._iter_markdown():
            ref = self._dated(relative)
            if ref is not None and window.contains(ref.date):
                notes.append(ref)
        notes.sort(key=lambda n: (n.date, n.path))
        return notes

    def read_note(self, path: str) -> Note:
        """Read and parse a single note.

        Raises:
            NoteReadError: if the file is missing, unreadable, or not UTF-8.
        """
        full_path = self.vault_path / path
        try:
            content = full_path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            raise NoteReadError(path, str(e)) from e
        return parse_markdown(path, content)

    def load_content(self, path: str) -> str:
        """Note body with its frontmatter removed."""
        return self.read_note(path).content
