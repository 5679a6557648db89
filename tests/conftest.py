"""Shared test fixtures."""

from contextlib import contextmanager
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from timelog.api.dependencies import get_settings
from timelog.main import app

DAILY_TEMPLATE = """\
---
type: daily
date: {date}
---

# {date}

## Time Log

| Time | Activity | Hierarchy |
|------|----------|-----------|
{rows}

## Notes
- Nothing special
"""


def make_daily_note(daily_dir: Path, date_str: str, rows: list[tuple[str, str, str]]) -> Path:
    """Write a daily note whose time-log table holds ``(time, activity, hierarchy)`` rows."""
    daily_dir.mkdir(parents=True, exist_ok=True)
    body = "\n".join(f"| {t} | {a} | {h} |" for t, a, h in rows)
    note = daily_dir / f"{date_str}.md"
    note.write_text(DAILY_TEMPLATE.format(date=date_str, rows=body), encoding="utf-8")
    return note


@pytest.fixture
def client():
    return TestClient(app)


@contextmanager
def override_settings(**overrides):
    """Temporarily override fields of the cached settings, restoring them on exit."""
    settings = get_settings()
    originals = {name: getattr(settings, name) for name in overrides}
    for name, value in overrides.items():
        setattr(settings, name, value)
    try:
        yield settings
    finally:
        for name, value in originals.items():
            setattr(settings, name, value)


@contextmanager
def override_vault_path(path):
    """Temporarily override the cached settings vault_path, restoring it on exit."""
    with override_settings(vault_path=path) as settings:
        yield settings
