"""Note source interface consumed by the aggregation pipeline."""

from dataclasses import dataclass
from datetime import date
from typing import Protocol

from timelog.engine.periods import TimeWindow


@dataclass(frozen=True)
class NoteRef:
    """A daily note and the day it logs."""

    path: str
    date: date


class NoteSource(Protocol):
    """Supplies daily-note listings and raw note text."""

    def list_notes(self, window: TimeWindow) -> list[NoteRef]:
        """Notes dated inside ``window``, ascending by date."""
        ...

    def load_content(self, path: str) -> str:
        """Raw text of one note; raises NoteReadError if unavailable."""
        ...
