"""Tests for the drill-down navigator."""

import copy

import pytest

from timelog.engine.errors import NavigationMismatch
from timelog.engine.navigator import DrillView, back, format_percentage, home, select, view
from timelog.engine.tree import Branch, fold


def _tree() -> Branch:
    tree = Branch()
    for path, duration in [
        (("Work", "Proj", "Debug"), 1.5),
        (("Work", "Proj", "Review"), 0.5),
        (("Work", "Meetings"), 1.0),
        (("Personal",), 1.0),
    ]:
        fold(tree, path, duration)
    return tree


class TestView:
    def test_root_view(self):
        v = view(_tree())
        assert v.path == ()
        assert v.labels == ("Work", "Personal")
        assert v.values == (3.0, 1.0)
        assert v.total == 4.0
        assert not v.is_terminal
        assert not v.fell_back
        assert v.level_name == "Root"

    def test_drill_into_branch_resums_subtree(self):
        v = view(_tree(), ["Work"])
        assert v.labels == ("Proj", "Meetings")
        assert v.values == (2.0, 1.0)
        assert v.total == 3.0
        assert v.level_name == "Category"

    def test_ties_sorted_by_label(self):
        tree = Branch()
        fold(tree, ("b",), 1.0)
        fold(tree, ("a",), 1.0)
        assert view(tree).labels == ("a", "b")

    def test_leaf_view_is_terminal(self):
        v = view(_tree(), ["Personal"])
        assert v.is_terminal
        assert v.labels == ()
        assert v.total == 1.0
        assert v.path == ("Personal",)

    def test_fallback_when_leaf_has_no_children(self):
        tree = Branch()
        fold(tree, ("A",), 1.0)
        v = view(tree, ["A", "B"])
        assert v == DrillView(
            path=("A",),
            labels=(),
            values=(),
            total=1.0,
            is_terminal=True,
            requested_path=("A", "B"),
        )
        assert v.fell_back

    def test_fallback_walks_up_several_levels(self):
        v = view(_tree(), ["Nope", "Still", "Missing"])
        assert v.path == ()
        assert v.requested_path == ("Nope", "Still", "Missing")
        assert v.labels == ("Work", "Personal")

    def test_fallback_one_level(self):
        v = view(_tree(), ["Work", "Proj", "Missing"])
        assert v.path == ("Work", "Proj")
        assert v.labels == ("Debug", "Review")

    def test_empty_tree(self):
        v = view(Branch())
        assert v.total == 0
        assert v.is_terminal
        assert v.percentages() == []

    def test_view_does_not_mutate_tree(self):
        tree = _tree()
        before = copy.deepcopy(tree)
        view(tree, ["Work", "Nope"])
        assert tree == before


class TestPercentages:
    def test_percentages(self):
        assert view(_tree()).percentages() == [75.0, 25.0]

    def test_zero_total_is_undefined(self):
        tree = Branch()
        fold(tree, ("Idle",), 0.0)
        assert view(tree).percentages() == [None]

    def test_format(self):
        assert format_percentage(None) == "—"
        assert format_percentage(12.345) == "12.3%"


class TestTransitions:
    def test_select_extends_path(self):
        assert select(_tree(), ("Work",), "Proj") == ("Work", "Proj")

    def test_select_leaf_allowed(self):
        assert select(_tree(), (), "Personal") == ("Personal",)

    def test_select_unknown_label(self):
        with pytest.raises(NavigationMismatch):
            select(_tree(), ("Work",), "Nope")

    def test_on_select(self):
        v = view(_tree(), ["Work"])
        assert v.on_select("Meetings") == ("Work", "Meetings")
        with pytest.raises(NavigationMismatch):
            v.on_select("Personal")

    def test_home_and_back(self):
        assert home() == ()
        assert back(("Work", "Proj")) == ("Work",)
        assert back(()) == ()
