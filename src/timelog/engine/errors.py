"""Error and warning types for the aggregation engine.

Row- and note-level problems are collected as ``ParseWarning`` values and never
abort a build. Exceptions are reserved for caller input errors
(``InvalidPeriodError``) and for navigation misses, which the navigator
recovers from itself.
"""

from dataclasses import dataclass
from enum import StrEnum


class TimeLogError(Exception):
    """Base class for all TimeLog errors."""


class InvalidPeriodError(TimeLogError, ValueError):
    """Raised when a period name is not one of the recognized periods."""

    def __init__(self, name: object) -> None:
        self.name = name
        super().__init__(f"Unknown period: {name!r}")


class NoteReadError(TimeLogError):
    """Raised by a note source when a note's content cannot be loaded."""

    def __init__(self, path: str, reason: str = "") -> None:
        self.path = path
        self.reason = reason
        message = f"Could not read note {path}"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)


class NavigationMismatch(TimeLogError, LookupError):
    """Raised when a drill path does not resolve inside an aggregation tree.

    ``depth`` is the index of the first segment that failed to resolve.
    """

    def __init__(self, path: tuple[str, ...], depth: int) -> None:
        self.path = path
        self.depth = depth
        super().__init__(f"Path {' > '.join(path)!r} does not resolve at segment {depth}")


class WarningKind(StrEnum):
    """Kinds of recoverable problems found while building a tree."""

    ROW_SHAPE_MISMATCH = "row_shape_mismatch"
    EMPTY_HIERARCHY = "empty_hierarchy"
    NOTE_READ_ERROR = "note_read_error"


@dataclass
class ParseWarning:
    """A skipped row or note, reported alongside a (partial) result."""

    kind: WarningKind
    message: str
    source: str = ""  # note path, "" when parsing free text
    line: int | None = None  # 1-based line number within the source
