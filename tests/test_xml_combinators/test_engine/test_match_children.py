"""Tests for the children-matching algorithm and its derived combinators."""

from typing import List

import pytest

from xml_combinators.engine import NoMatchingChild, Other, RemainingItems, Scope
from xml_combinators.tree import Node


def named(expected: str):
    """Rule matching a childless, attribute-free node with the given name."""
    def rule(scope: Scope) -> str:
        scope.match_name(expected)
        return expected
    return rule


def value_of(scope: Scope) -> int:
    scope.match_name("item")
    return int(scope.take_attr("v"))


def items(*values: str) -> List[Node]:
    return [Node("item", {"v": v}) for v in values]


def remaining_names(scope: Scope) -> List[str]:
    return [slot.node.name for slot in scope.context.children]


class TestMatchChildren:
    """Test the core scan over remaining children."""

    def test_matches_in_document_order(self) -> None:
        """Test results follow the order of the matching children."""
        scope = Scope.for_node(Node("list", children=[
            Node("item", {"v": "1"}), Node("other"), Node("item", {"v": "2"}),
        ]))

        result = scope.match_children(None, value_of)

        assert result == [1, 2]
        assert remaining_names(scope) == ["other"]

    def test_quota_limits_matches(self) -> None:
        """Test children past the quota stay untouched."""
        scope = Scope.for_node(Node("list", children=items("1", "2", "3", "4")))

        result = scope.match_children(2, value_of)

        assert result == [1, 2]
        remaining = scope.context.children
        assert [slot.node.attrs["v"] for slot in remaining] == ["3", "4"]
        assert all(slot.errors == () for slot in remaining)

    @pytest.mark.parametrize("quota", [1, 2, 3, 10, None])
    def test_counts_add_up(self, quota) -> None:
        """Test matched plus remaining equals the original child count."""
        children = [Node("item", {"v": "1"}), Node("x"), Node("item", {"v": "2"}),
                    Node("item", {"v": "3"}), Node("y")]
        scope = Scope.for_node(Node("list", children=children))

        result = scope.match_children(quota, value_of)

        if quota is not None:
            assert len(result) <= quota
        assert len(result) + len(scope.context.children) == len(children)

    def test_failures_are_recorded_on_children(self) -> None:
        """Test each failed child keeps its growing error history."""
        scope = Scope.for_node(Node("list", children=[Node("a"), Node("b")]))

        assert scope.match_children(None, named("x")) == []
        assert scope.match_children(None, named("y")) == []

        histories = [
            [error.formatted() for error in slot.errors]
            for slot in scope.context.children
        ]
        assert histories == [
            ["Element name is not x", "Element name is not y"],
            ["Element name is not x", "Element name is not y"],
        ]

    def test_residue_in_child_is_a_failure(self) -> None:
        """Test a child whose sub-parse leaves items is not matched."""
        scope = Scope.for_node(Node("list", children=[Node("item", {"v": "1", "extra": "x"})]))

        result = scope.match_children(None, value_of)

        assert result == []
        error = scope.context.children[0].last_error
        assert isinstance(error, RemainingItems)
        assert error.attrs == {"extra": "x"}

    def test_children_outside_quota_keep_their_histories(self) -> None:
        """Test earlier errors survive on children skipped by the quota."""
        scope = Scope.for_node(Node("list", children=items("1", "2")))
        scope.match_children(None, named("other"))

        scope.match_children(1, value_of)

        slot = scope.context.children[0]
        assert slot.node.attrs["v"] == "2"
        assert len(slot.errors) == 1

    def test_no_children_is_empty_result(self) -> None:
        """Test a node without children yields nothing and never fails."""
        scope = Scope.for_node(Node("empty"))

        assert scope.match_children(None, value_of) == []

    def test_sub_parse_runs_on_fresh_context(self) -> None:
        """Test the rule sees the child node, not the parent."""
        seen = []

        def rule(scope: Scope) -> None:
            seen.append(scope.node)
            scope.take_attr("v")

        child = Node("item", {"v": "1"})
        Scope.for_node(Node("list", {"p": "q"}, [child])).match_children(None, rule)

        assert seen == [child]

    def test_rule_returning_none_still_matches(self) -> None:
        """Test None is a legitimate value."""
        scope = Scope.for_node(Node("list", children=[Node("a")]))

        result = scope.match_children(None, lambda s: None)

        assert result == [None]
        assert scope.context.children == []

    @pytest.mark.parametrize("quota", [0, -1, 1.5, True, "1"])
    def test_invalid_quota_raises(self, quota) -> None:
        """Test the quota must be a positive integer or None."""
        scope = Scope.for_node(Node("list"))

        with pytest.raises(ValueError, match="at_most must be a positive integer"):
            scope.match_children(quota, value_of)

    def test_non_parse_errors_propagate(self) -> None:
        """Test programming errors in a rule are not swallowed."""
        def broken(scope: Scope) -> None:
            raise KeyError("bug")

        scope = Scope.for_node(Node("list", children=[Node("a")]))

        with pytest.raises(KeyError):
            scope.match_children(None, broken)


class TestDerivedCombinators:
    """Test optional/required one/many."""

    def test_optional_child_found(self) -> None:
        """Test the first matching child is returned."""
        scope = Scope.for_node(Node("list", children=items("1", "2")))

        assert scope.optional_child(value_of) == 1
        assert len(scope.context.children) == 1

    def test_optional_child_missing(self) -> None:
        """Test None when nothing matches."""
        scope = Scope.for_node(Node("list", children=[Node("other")]))

        assert scope.optional_child(value_of) is None

    def test_child_found(self) -> None:
        """Test the required variant returns its single match."""
        scope = Scope.for_node(Node("list", children=[Node("other"), *items("7")]))

        assert scope.child(value_of) == 7
        assert remaining_names(scope) == ["other"]

    def test_child_missing_reports_last_errors(self) -> None:
        """Test the error lists only the most recent error per child."""
        scope = Scope.for_node(Node("list", children=[Node("a"), Node("b")]))
        scope.match_children(None, named("earlier"))

        with pytest.raises(NoMatchingChild) as exc_info:
            scope.child(named("wanted"))

        error = exc_info.value
        assert error.node.name == "list"
        assert [ce.node.name for ce in error.errors] == ["a", "b"]
        assert [ce.error.formatted() for ce in error.errors] == [
            "Element name is not wanted",
            "Element name is not wanted",
        ]

    def test_child_missing_without_children(self) -> None:
        """Test a node without children reports zero tried."""
        with pytest.raises(NoMatchingChild) as exc_info:
            Scope.for_node(Node("empty")).child(value_of)

        assert exc_info.value.errors == ()

    def test_optional_children(self) -> None:
        """Test every match is returned and none is fine."""
        scope = Scope.for_node(Node("list", children=items("1", "2", "3")))

        assert scope.optional_children(value_of) == [1, 2, 3]
        assert scope.optional_children(value_of) == []

    def test_children_required(self) -> None:
        """Test at least one match is required."""
        scope = Scope.for_node(Node("list", children=[Node("x")]))

        with pytest.raises(NoMatchingChild, match="No matching child \\(1 tried\\)"):
            scope.children(value_of)

    def test_children_returns_all_matches(self) -> None:
        """Test all matches are returned."""
        scope = Scope.for_node(Node("list", children=items("4", "5")))

        assert scope.children(value_of) == [4, 5]
        assert scope.context.is_drained
