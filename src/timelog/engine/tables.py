"""Table extractor: pulls markdown tables out of loosely formatted note text."""

import logging
import re
from collections.abc import Iterator
from dataclasses import dataclass, field

from timelog.engine.errors import ParseWarning, WarningKind

logger = logging.getLogger(__name__)

# Cell boundary: a pipe not preceded by a backslash ("\|" is a literal pipe,
# which Obsidian writes for wiki-link aliases inside tables)
CELL_SPLIT_RE = re.compile(r"(?<!\\)\|")

LogRow = dict[str, str]


@dataclass
class Table:
    """One markdown table: a header and the data rows that matched its shape."""

    header: list[str]
    rows: list[list[str]] = field(default_factory=list)
    line: int = 0  # 1-based line number of the header
    row_lines: list[int] = field(default_factory=list)  # 1-based line of each row

    def log_rows(self) -> list[LogRow]:
        """Zip each data row onto the header.

        A header repeating a name keeps only the last cell mapped to it.
        """
        return [dict(zip(self.header, row, strict=True)) for row in self.rows]


def is_separator_line(line: str) -> bool:
    """Return True for a header separator such as ``|---|:---:|``."""
    stripped = line.strip()
    return stripped.startswith("|") and "---" in stripped


def split_header(line: str) -> list[str]:
    """Split a header line into names, dropping empty pieces."""
    return [cell.strip() for cell in line.split("|") if cell.strip()]


def split_row(line: str) -> list[str]:
    """Split a data row into cells.

    Only the empty pieces outside the border pipes are removed; empty cells
    inside the row are kept so that column positions stay aligned.
    """
    stripped = line.strip()
    cells = [cell.strip().replace("\\|", "|") for cell in CELL_SPLIT_RE.split(stripped)]
    if cells and stripped.startswith("|") and cells[0] == "":
        cells = cells[1:]
    if cells and stripped.endswith("|") and not stripped.endswith("\\|") and cells[-1] == "":
        cells = cells[:-1]
    return cells


def extract_tables(
    text: str,
    source: str = "",
    warnings: list[ParseWarning] | None = None,
) -> list[Table]:
    """Extract every markdown table found in ``text``.

    Rows whose cell count differs from the header are skipped and reported as
    ``ROW_SHAPE_MISMATCH`` warnings.
    """
    lines = text.split("\n")
    tables: list[Table] = []
    current: Table | None = None

    for index, line in enumerate(lines):
        stripped = line.strip()

        if is_separator_line(line):
            current = None
            if index == 0:
                continue
            header = split_header(lines[index - 1])
            if not header:
                continue
            current = Table(header=header, line=index)
            tables.append(current)
            continue

        if current is None:
            continue

        if not stripped.startswith("|"):
            current = None
            continue

        cells = split_row(line)
        if len(cells) != len(current.header):
            message = (
                f"Row has {len(cells)} cells, header has {len(current.header)}: {stripped}"
            )
            logger.debug("Skipping row in %s line %d: %s", source or "<text>", index + 1, message)
            if warnings is not None:
                warnings.append(
                    ParseWarning(
                        kind=WarningKind.ROW_SHAPE_MISMATCH,
                        message=message,
                        source=source,
                        line=index + 1,
                    )
                )
            continue

        current.rows.append(cells)
        current.row_lines.append(index + 1)

    return tables


def iter_log_rows(
    text: str,
    source: str = "",
    warnings: list[ParseWarning] | None = None,
) -> Iterator[LogRow]:
    """Yield a LogRow for every well-formed data row of every table."""
    for table in extract_tables(text, source=source, warnings=warnings):
        yield from table.log_rows()
