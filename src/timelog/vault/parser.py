"""Markdown parser for Obsidian daily notes."""

import logging
import re
from datetime import date, datetime
from pathlib import Path

import frontmatter
import yaml

from timelog.models import Note

logger = logging.getLogger(__name__)

# Daily note file stems: "2026-02-14" or "2026-02-14 Saturday"
DATE_STEM_RE = re.compile(r"^(\d{4}-\d{2}-\d{2})")


def parse_markdown(path: str, content: str) -> Note:
    """Split a markdown file into frontmatter and body.

    Malformed frontmatter is logged and the whole text is kept as the body so
    that tables in the note are still found.
    """
    try:
        post = frontmatter.loads(content)
    except yaml.YAMLError as e:
        logger.warning("Invalid frontmatter in %s: %s", path, e)
        return Note(path=path, content=content, frontmatter={}, day=_date_from_stem(path))

    metadata = dict(post.metadata)
    return Note(
        path=path,
        content=post.content,
        frontmatter=metadata,
        day=note_date(path, metadata),
    )


def note_date(path: str, metadata: dict[str, object]) -> date | None:
    """Work out which day a note logs.

    Priority:
    1. A YYYY-MM-DD file name
    2. Frontmatter 'date' field
    """
    from_stem = _date_from_stem(path)
    if from_stem is not None:
        return from_stem

    value = metadata.get("date")
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        try:
            return date.fromisoformat(value.strip()[:10])
        except ValueError:
            return None
    return None


def _date_from_stem(path: str) -> date | None:
    match = DATE_STEM_RE.match(Path(path).stem)
    if not match:
        return None
    try:
        return date.fromisoformat(match.group(1))
    except ValueError:
        return None
