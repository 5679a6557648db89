"""Time report: prints one drill-down level of a period's time summary."""

import argparse
import logging
import sys
from datetime import datetime
from pathlib import Path

from timelog.config import apply_config_note, get_settings, load_aggregation_config
from timelog.engine.aggregate import AggregationResult, summarize
from timelog.engine.errors import InvalidPeriodError
from timelog.engine.hierarchy import split_hierarchy
from timelog.engine.navigator import DrillView, format_percentage
from timelog.engine.periods import Period
from timelog.vault.connector import VaultNoteSource

logger = logging.getLogger(__name__)


def render_report(result: AggregationResult, drill: DrillView, period: str) -> str:
    """Render a drill view as a markdown table."""
    window = result.window
    title = " > ".join(drill.path) if drill.path else "All categories"
    lines = [
        f"## {title} — {period} ({window.start.isoformat()} to {window.end.isoformat()})",
        "",
    ]
    if drill.fell_back:
        lines.append(f"_Path {' > '.join(drill.requested_path)!r} not found, showing parent._")
        lines.append("")

    if drill.is_terminal:
        lines.append(f"No finer breakdown: {drill.total:g}h logged.")
    else:
        lines.append(f"| {drill.level_name} | Hours | Share |")
        lines.append("|---|---:|---:|")
        for label, value, pct in zip(drill.labels, drill.values, drill.percentages(), strict=True):
            lines.append(f"| {label} | {value:g} | {format_percentage(pct)} |")
        lines.append(f"| **Total** | **{drill.total:g}** | |")

    lines.append("")
    lines.append(
        f"{result.notes_scanned} notes scanned, {result.notes_failed} unreadable, "
        f"{len(result.warnings)} warnings"
    )
    return "\n".join(lines)


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(description="TimeLog time-allocation report")
    parser.add_argument(
        "period",
        nargs="?",
        default=None,
        help=f"Period to report (one of: {', '.join(p.value for p in Period)})",
    )
    parser.add_argument(
        "--path",
        default="",
        help='Drill path, e.g. "Work > Project 1" (default: top level)',
    )
    parser.add_argument(
        "--vault-path",
        type=Path,
        default=None,
        help="Override vault path (default: from config/env)",
    )
    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Enable verbose logging",
    )
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    settings = get_settings()
    if args.vault_path is not None:
        settings.vault_path = args.vault_path

    vault_path = settings.vault_path
    if vault_path is None:
        logger.error("No vault path configured. Set TIMELOG_VAULT_PATH or use --vault-path")
        sys.exit(1)
    if not vault_path.exists():
        logger.error("Vault path does not exist: %s", vault_path)
        sys.exit(1)

    settings = apply_config_note(settings)
    config = load_aggregation_config(settings)
    source = VaultNoteSource(vault_path, note_folder=config.note_folder)
    period = args.period or settings.default_period

    try:
        result, drill = summarize(
            source, period, config, datetime.now(), path=split_hierarchy(args.path)
        )
    except InvalidPeriodError as e:
        logger.error("%s", e)
        sys.exit(2)

    for warning in result.warnings:
        logger.debug(
            "%s: %s (%s line %s)", warning.kind, warning.message, warning.source, warning.line
        )

    print(render_report(result, drill, period))


if __name__ == "__main__":
    main()
