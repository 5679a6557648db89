"""Hierarchy resolver: turns log rows into tree paths and folds them."""

import logging
from collections.abc import Iterable, Sequence

from timelog.engine.errors import ParseWarning, WarningKind
from timelog.engine.tables import LogRow
from timelog.engine.tree import Branch, HierarchyPath, fold

logger = logging.getLogger(__name__)

HIERARCHY_DELIMITER = ">"


def split_hierarchy(value: str) -> HierarchyPath:
    """Split ``"Work > Project 1 > Debugging"`` into trimmed, non-empty segments."""
    return tuple(part.strip() for part in value.split(HIERARCHY_DELIMITER) if part.strip())


def resolve_row(
    row: LogRow,
    hierarchy_column: str,
    row_duration: float,
    *,
    breakdown_column: str | None = None,
    source: str = "",
    line: int | None = None,
    warnings: list[ParseWarning] | None = None,
) -> tuple[HierarchyPath, float] | None:
    """Resolve one row to its hierarchy path and duration.

    Returns None (and records an ``EMPTY_HIERARCHY`` warning) when the hierarchy
    cell is missing, blank, or made only of delimiters. A non-blank breakdown
    cell is appended as one more segment.
    """
    value = row.get(hierarchy_column, "")
    path = split_hierarchy(value) if value else ()
    if not path:
        logger.debug("No hierarchy in row from %s: %r", source or "<text>", row)
        if warnings is not None:
            warnings.append(
                ParseWarning(
                    kind=WarningKind.EMPTY_HIERARCHY,
                    message=f"Column {hierarchy_column!r} is empty or missing",
                    source=source,
                    line=line,
                )
            )
        return None

    if breakdown_column:
        breakdown = row.get(breakdown_column, "").strip()
        if breakdown:
            path = path + (breakdown,)

    return path, row_duration


def fold_rows(
    rows: Iterable[LogRow],
    hierarchy_column: str,
    row_duration: float,
    *,
    breakdown_column: str | None = None,
    tree: Branch | None = None,
    source: str = "",
    lines: Sequence[int] | None = None,
    warnings: list[ParseWarning] | None = None,
) -> Branch:
    """Fold every resolvable row into ``tree`` (a new tree if not given).

    ``lines`` gives the source line of each row, used in warnings.
    """
    if tree is None:
        tree = Branch()
    row_lines = iter(lines) if lines is not None else None
    for row in rows:
        line = next(row_lines, None) if row_lines is not None else None
        resolved = resolve_row(
            row,
            hierarchy_column,
            row_duration,
            breakdown_column=breakdown_column,
            source=source,
            line=line,
            warnings=warnings,
        )
        if resolved is None:
            continue
        path, duration = resolved
        fold(tree, path, duration)
    return tree
