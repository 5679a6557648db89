"""Aggregation tree: a ``Leaf | Branch`` union of accumulated durations.

Time logged at a name that also has finer breakdowns lives in a child of the
same name, so ``Work`` logged on its own next to ``Work > Project`` becomes::

    Branch({"Work": Branch({"Work": Leaf(1.0), "Project": Leaf(0.5)})})

Folding is order independent: any permutation of the same ``(path, duration)``
pairs produces an equal tree.
"""

from __future__ import annotations

import copy
import math
from collections.abc import Iterator, Sequence
from dataclasses import dataclass, field

from timelog.engine.errors import NavigationMismatch

HierarchyPath = tuple[str, ...]


@dataclass
class Leaf:
    """Accumulated hours at a terminal path."""

    duration: float = 0.0


@dataclass
class Branch:
    """An internal category holding named children."""

    children: dict[str, Node] = field(default_factory=dict)


Node = Leaf | Branch


def _check_duration(duration: float) -> None:
    if not math.isfinite(duration) or duration < 0:
        raise ValueError(f"Duration must be a non-negative finite number, got {duration!r}")


def _deposit(branch: Branch, name: str, duration: float) -> None:
    """Add ``duration`` at ``branch[name]``, descending into same-name buckets."""
    while True:
        node = branch.children.get(name)
        if node is None:
            branch.children[name] = Leaf(duration)
            return
        if isinstance(node, Leaf):
            node.duration += duration
            return
        branch = node


def fold(tree: Branch, path: Sequence[str], duration: float) -> None:
    """Fold one ``(path, duration)`` pair into ``tree`` in place."""
    if not path:
        raise ValueError("Cannot fold an empty hierarchy path")
    _check_duration(duration)

    current = tree
    for segment in path[:-1]:
        node = current.children.get(segment)
        if node is None:
            node = Branch()
            current.children[segment] = node
        elif isinstance(node, Leaf):
            # Promote: the leaf's own time moves to a same-name child
            node = Branch(children={segment: node})
            current.children[segment] = node
        current = node

    _deposit(current, path[-1], duration)


def node_sum(node: Node) -> float:
    """Total hours of every leaf reachable from ``node``.

    Uses an explicit stack so pathological depths do not hit the recursion limit.
    """
    if isinstance(node, Leaf):
        return node.duration
    durations: list[float] = []
    stack: list[Node] = [node]
    while stack:
        current = stack.pop()
        if isinstance(current, Leaf):
            durations.append(current.duration)
        else:
            stack.extend(current.children.values())
    return math.fsum(durations)


def iter_leaves(node: Node, prefix: HierarchyPath = ()) -> Iterator[tuple[HierarchyPath, float]]:
    """Yield ``(path, duration)`` for every leaf under ``node``."""
    stack: list[tuple[HierarchyPath, Node]] = [(prefix, node)]
    while stack:
        path, current = stack.pop()
        if isinstance(current, Leaf):
            yield path, current.duration
            continue
        for name, child in current.children.items():
            stack.append((path + (name,), child))


def merge_into(target: Branch, other: Branch) -> Branch:
    """Fold every leaf of ``other`` into ``target`` in place and return it."""
    for path, duration in iter_leaves(other):
        if path:
            fold(target, path, duration)
    return target


def merge(left: Branch, right: Branch) -> Branch:
    """Return a new tree holding the union of ``left`` and ``right``.

    Neither input is modified.
    """
    return merge_into(copy.deepcopy(left), right)


def node_at(tree: Branch, path: Sequence[str]) -> Node:
    """Return the node addressed by ``path``.

    Raises:
        NavigationMismatch: if a segment is missing, or a Leaf is reached while
            segments remain.
    """
    node: Node = tree
    for depth, segment in enumerate(path):
        if isinstance(node, Leaf):
            raise NavigationMismatch(tuple(path), depth)
        child = node.children.get(segment)
        if child is None:
            raise NavigationMismatch(tuple(path), depth)
        node = child
    return node


def to_dict(node: Node) -> dict[str, object] | float:
    """Convert a node to nested dicts and floats."""
    if isinstance(node, Leaf):
        return node.duration
    return {name: to_dict(child) for name, child in node.children.items()}
