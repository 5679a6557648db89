"""Hierarchical time-aggregation and drill-down engine."""

from timelog.engine.aggregate import AggregationConfig, AggregationResult, build_tree, summarize
from timelog.engine.navigator import DrillView, view
from timelog.engine.periods import Period, TimeWindow, resolve_period
from timelog.engine.tree import Branch, Leaf

__all__ = [
    "AggregationConfig",
    "AggregationResult",
    "Branch",
    "DrillView",
    "Leaf",
    "Period",
    "TimeWindow",
    "build_tree",
    "resolve_period",
    "summarize",
    "view",
]
