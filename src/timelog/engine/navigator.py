"""Drill-down navigator: projects views of an aggregation tree, level by level."""

import logging
from collections.abc import Sequence
from dataclasses import dataclass, field

from timelog.engine.errors import NavigationMismatch
from timelog.engine.tree import Branch, HierarchyPath, Leaf, node_at, node_sum

logger = logging.getLogger(__name__)

# Level names shown by the dashboard for the first four depths
LEVEL_NAMES = ("Root", "Category", "Subcategory", "Activity")


@dataclass(frozen=True)
class DrillView:
    """What a renderer needs to draw one level of the drill-down."""

    path: HierarchyPath
    labels: tuple[str, ...]
    values: tuple[float, ...]
    total: float
    is_terminal: bool
    requested_path: HierarchyPath = field(default=())

    @property
    def fell_back(self) -> bool:
        """True when the requested path did not resolve and a parent is shown."""
        return self.path != self.requested_path

    @property
    def level_name(self) -> str:
        depth = len(self.path)
        return LEVEL_NAMES[depth] if depth < len(LEVEL_NAMES) else f"Level {depth}"

    def percentages(self) -> list[float | None]:
        """Share of the total per label; None when the total is zero."""
        if self.total == 0:
            return [None for _ in self.values]
        return [value / self.total * 100 for value in self.values]

    def on_select(self, label: str) -> HierarchyPath:
        """Path to show after ``label`` is clicked in this view."""
        if label not in self.labels:
            raise NavigationMismatch(self.path + (label,), len(self.path))
        return self.path + (label,)


def format_percentage(value: float | None) -> str:
    if value is None:
        return "—"
    return f"{value:.1f}%"


def view(tree: Branch, path: Sequence[str] = ()) -> DrillView:
    """Project the view for ``path``.

    A path that does not resolve falls back one level at a time until it does;
    the root always resolves, so this never raises.
    """
    requested = tuple(path)
    current = requested
    while True:
        try:
            node = node_at(tree, current)
            break
        except NavigationMismatch as e:
            logger.debug("Drill path %r unresolved at depth %d, falling back", current, e.depth)
            current = current[:-1]

    if isinstance(node, Leaf):
        return DrillView(
            path=current,
            labels=(),
            values=(),
            total=node.duration,
            is_terminal=True,
            requested_path=requested,
        )

    sums = [(name, node_sum(child)) for name, child in node.children.items()]
    sums.sort(key=lambda item: (-item[1], item[0]))
    return DrillView(
        path=current,
        labels=tuple(name for name, _ in sums),
        values=tuple(value for _, value in sums),
        total=node_sum(node),
        is_terminal=not sums,
        requested_path=requested,
    )


def select(tree: Branch, path: Sequence[str], label: str) -> HierarchyPath:
    """Drill into ``label`` from ``path``.

    Raises:
        NavigationMismatch: if ``path + (label,)`` is not reachable.
    """
    new_path = tuple(path) + (label,)
    node_at(tree, new_path)
    return new_path


def back(path: Sequence[str]) -> HierarchyPath:
    return tuple(path)[:-1]


def home() -> HierarchyPath:
    return ()
