"""TimeLog: drillable time-allocation summaries from Obsidian daily notes."""

__version__ = "0.1.0"
