"""Pydantic models for notes and the TimeLog API."""

from datetime import date

from pydantic import BaseModel


class Note(BaseModel):
    """A parsed daily note from the vault."""

    path: str
    content: str
    frontmatter: dict[str, object]
    day: date | None = None  # the day the note logs


class WarningResponse(BaseModel):
    """A row or note skipped while building the summary."""

    kind: str  # "row_shape_mismatch", "empty_hierarchy", "note_read_error"
    message: str
    source: str
    line: int | None = None


class DrillViewResponse(BaseModel):
    """One drill-down level of a period's time summary."""

    period: str
    start: date
    end: date
    path: list[str]
    requested_path: list[str]
    fell_back: bool
    level: str
    labels: list[str]
    values: list[float]
    percentages: list[float | None]
    colors: list[str]
    total: float
    is_terminal: bool
    notes_scanned: int
    notes_failed: int
    warnings: list[WarningResponse]


class PeriodsResponse(BaseModel):
    """Recognized period names and the configured default."""

    periods: list[str]
    default: str
