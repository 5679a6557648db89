"""Time summary API endpoints."""

import asyncio
import logging
import time
from datetime import datetime
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Query

from timelog.api.dependencies import get_build_tracker, get_note_source, get_settings
from timelog.config import Settings, apply_config_note, load_aggregation_config
from timelog.engine.aggregate import AggregationConfig, AggregationResult, build_tree
from timelog.engine.errors import InvalidPeriodError
from timelog.engine.navigator import view
from timelog.engine.periods import Period, TimeWindow, resolve_period
from timelog.models import DrillViewResponse, PeriodsResponse, WarningResponse
from timelog.palette import segment_colors
from timelog.vault.connector import VaultNoteSource

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1", tags=["summary"])

# Simple TTL cache for the last built tree, keyed by window, vault and table config
_cache: dict[str, object] = {"data": None, "ts": 0.0, "key": ""}


def _cache_key(source: VaultNoteSource, window: TimeWindow, config: AggregationConfig) -> str:
    return (
        f"{window.key}:{source.vault_path}:{config.note_folder}:{config.hierarchy_column}:"
        f"{config.breakdown_column}:{config.row_duration_hours}"
    )


def _build(
    source: VaultNoteSource,
    window: TimeWindow,
    config: AggregationConfig,
    ttl: float,
) -> AggregationResult | None:
    """Build (or reuse) the tree for ``window``; None if superseded while building."""
    key = _cache_key(source, window, config)
    now = time.time()
    if (
        _cache["data"] is not None
        and (now - _cache["ts"]) < ttl  # type: ignore[operator]
        and _cache["key"] == key
    ):
        return _cache["data"]  # type: ignore[return-value]

    tracker = get_build_tracker()
    ticket = tracker.start(window)
    result = build_tree(source, window, config, is_cancelled=tracker.cancel_check(ticket))
    if not tracker.accept(ticket, result):
        return None

    _cache["data"] = result
    _cache["ts"] = now
    _cache["key"] = key
    return result


@router.get("/periods", response_model=PeriodsResponse)
async def list_periods(
    settings: Annotated[Settings, Depends(get_settings)],
) -> PeriodsResponse:
    """List the recognized period names."""
    settings = apply_config_note(settings)
    return PeriodsResponse(periods=[p.value for p in Period], default=settings.default_period)


@router.get("/summary", response_model=DrillViewResponse)
async def get_summary(
    settings: Annotated[Settings, Depends(get_settings)],
    period: str | None = Query(default=None, description="Period name, e.g. 'This week'"),
    path: Annotated[list[str] | None, Query(description="Drill path, one label per level")] = None,
) -> DrillViewResponse:
    """Get one drill-down level of the time summary for a period."""
    settings = apply_config_note(settings)
    period_name = period or settings.default_period
    try:
        window = resolve_period(period_name, datetime.now())
    except InvalidPeriodError as e:
        raise HTTPException(status_code=400, detail=str(e)) from e

    config = load_aggregation_config(settings)
    source = get_note_source(settings, config.note_folder)

    result = await asyncio.to_thread(_build, source, window, config, settings.cache_ttl)
    if result is None:
        raise HTTPException(status_code=409, detail="Superseded by a newer summary request")

    drill = view(result.tree, path or [])
    return DrillViewResponse(
        period=period_name,
        start=window.start,
        end=window.end,
        path=list(drill.path),
        requested_path=list(drill.requested_path),
        fell_back=drill.fell_back,
        level=drill.level_name,
        labels=list(drill.labels),
        values=list(drill.values),
        percentages=drill.percentages(),
        colors=segment_colors(len(drill.labels)),
        total=drill.total,
        is_terminal=drill.is_terminal,
        notes_scanned=result.notes_scanned,
        notes_failed=result.notes_failed,
        warnings=[
            WarningResponse(kind=w.kind.value, message=w.message, source=w.source, line=w.line)
            for w in result.warnings
        ],
    )
