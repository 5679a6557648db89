"""Aggregation pipeline: period -> notes -> rows -> one aggregation tree."""

from __future__ import annotations

import itertools
import logging
import threading
import time
from collections.abc import Callable, Sequence
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field, replace
from datetime import date, datetime

from pydantic import BaseModel, Field

from timelog.engine.errors import NoteReadError, ParseWarning, WarningKind
from timelog.engine.hierarchy import fold_rows
from timelog.engine.navigator import DrillView, view
from timelog.engine.navigator import back as back_path
from timelog.engine.navigator import select as select_path
from timelog.engine.periods import Period, TimeWindow, resolve_period
from timelog.engine.source import NoteRef, NoteSource
from timelog.engine.tables import extract_tables
from timelog.engine.tree import Branch, HierarchyPath, merge_into, node_sum

logger = logging.getLogger(__name__)


class AggregationConfig(BaseModel):
    """Options controlling how rows are read and weighted."""

    hierarchy_column: str = Field(min_length=1)
    row_duration_hours: float = Field(default=0.5, gt=0)
    breakdown_column: str | None = None
    note_folder: str = ""
    max_workers: int = Field(default=4, ge=1)


@dataclass
class AggregationResult:
    """A built tree plus everything that was skipped while building it."""

    window: TimeWindow
    tree: Branch
    warnings: list[ParseWarning] = field(default_factory=list)
    notes_scanned: int = 0
    notes_failed: int = 0
    rows_folded: int = 0

    @property
    def total(self) -> float:
        return node_sum(self.tree)


@dataclass
class _NoteResult:
    tree: Branch
    warnings: list[ParseWarning]
    rows: int = 0
    failed: bool = False


def parse_note_text(text: str, config: AggregationConfig, source: str = "") -> _NoteResult:
    """Build the subtree for one note's text.

    Tables without the hierarchy column are not time logs and are ignored.
    """
    warnings: list[ParseWarning] = []
    tree = Branch()
    rows = 0
    for table in extract_tables(text, source=source, warnings=warnings):
        if config.hierarchy_column not in table.header:
            logger.debug(
                "Ignoring table at %s line %d: no %r column",
                source or "<text>",
                table.line,
                config.hierarchy_column,
            )
            continue
        log_rows = table.log_rows()
        before = len(warnings)
        fold_rows(
            log_rows,
            config.hierarchy_column,
            config.row_duration_hours,
            breakdown_column=config.breakdown_column,
            tree=tree,
            source=source,
            lines=table.row_lines,
            warnings=warnings,
        )
        rows += len(log_rows) - (len(warnings) - before)
    return _NoteResult(tree=tree, warnings=warnings, rows=rows)


def _parse_note(source: NoteSource, note: NoteRef, config: AggregationConfig) -> _NoteResult:
    try:
        text = source.load_content(note.path)
    except NoteReadError as e:
        logger.warning("Skipping note %s: %s", note.path, e)
        warning = ParseWarning(kind=WarningKind.NOTE_READ_ERROR, message=str(e), source=note.path)
        return _NoteResult(tree=Branch(), warnings=[warning], failed=True)
    return parse_note_text(text, config, source=note.path)


def build_tree(
    source: NoteSource,
    window: TimeWindow,
    config: AggregationConfig,
    *,
    is_cancelled: Callable[[], bool] | None = None,
) -> AggregationResult | None:
    """Aggregate every note in ``window`` into one tree.

    Notes are parsed in parallel, each into its own subtree, and merged once.
    Returns None if ``is_cancelled`` reports True before the merge completes;
    partial results of a cancelled build are never returned.
    """
    start = time.time()
    notes = source.list_notes(window)
    result = AggregationResult(window=window, tree=Branch())

    with ThreadPoolExecutor(max_workers=config.max_workers) as pool:
        futures = [pool.submit(_parse_note, source, note, config) for note in notes]
        for future in futures:
            if is_cancelled is not None and is_cancelled():
                for pending in futures:
                    pending.cancel()
                logger.info("Build for %s cancelled", window.key)
                return None
            note_result = future.result()
            merge_into(result.tree, note_result.tree)
            result.warnings.extend(note_result.warnings)
            result.rows_folded += note_result.rows
            result.notes_scanned += 1
            if note_result.failed:
                result.notes_failed += 1

    if is_cancelled is not None and is_cancelled():
        logger.info("Build for %s cancelled", window.key)
        return None

    logger.info(
        "Built tree for %s: %d notes (%d failed), %d rows, %d warnings in %dms",
        window.key,
        result.notes_scanned,
        result.notes_failed,
        result.rows_folded,
        len(result.warnings),
        int((time.time() - start) * 1000),
    )
    return result


@dataclass(frozen=True)
class BuildTicket:
    """Identifies one build request."""

    window: TimeWindow
    generation: int


class BuildTracker:
    """Tracks the latest requested window so stale builds can be discarded.

    Starting a build for a new window supersedes every earlier ticket; starting
    one for the current window shares its ticket, so overlapping requests for
    the same period all succeed. ``accept`` only admits a result whose ticket
    is still the latest one.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._counter = itertools.count(1)
        self._current: BuildTicket | None = None

    def start(self, window: TimeWindow) -> BuildTicket:
        with self._lock:
            if self._current is not None and self._current.window == window:
                return self._current
            ticket = BuildTicket(window=window, generation=next(self._counter))
            self._current = ticket
            return ticket

    def is_current(self, ticket: BuildTicket) -> bool:
        with self._lock:
            return self._current == ticket

    def cancel_check(self, ticket: BuildTicket) -> Callable[[], bool]:
        """A callable for ``build_tree(is_cancelled=...)``."""
        return lambda: not self.is_current(ticket)

    def accept(self, ticket: BuildTicket, result: AggregationResult | None) -> bool:
        if result is None or result.window != ticket.window:
            return False
        if not self.is_current(ticket):
            logger.info("Discarding stale build for %s", ticket.window.key)
            return False
        return True


@dataclass(frozen=True)
class AppState:
    """Window, tree and drill path for one dashboard session."""

    window: TimeWindow
    tree: Branch
    path: HierarchyPath = ()

    def view(self) -> DrillView:
        return view(self.tree, self.path)

    def select(self, label: str) -> AppState:
        return replace(self, path=select_path(self.tree, self.path, label))

    def back(self) -> AppState:
        return replace(self, path=back_path(self.path))

    def home(self) -> AppState:
        return replace(self, path=())

    def with_tree(self, window: TimeWindow, tree: Branch) -> AppState:
        """New period: the drill path resets to the root."""
        return AppState(window=window, tree=tree)


def summarize(
    source: NoteSource,
    period: str | Period,
    config: AggregationConfig,
    now: date | datetime,
    path: Sequence[str] = (),
) -> tuple[AggregationResult, DrillView]:
    """Resolve ``period``, build its tree and project the view at ``path``.

    Raises:
        InvalidPeriodError: if ``period`` is not recognized.
    """
    window = resolve_period(period, now)
    result = build_tree(source, window, config)
    assert result is not None  # never cancelled without is_cancelled
    return result, view(result.tree, path)
