"""Tests for the immutable node tree and its diagnostic renderings."""

import pytest

from xml_combinators.tree import Node, format_attrs, format_text


class TestNodeConstruction:
    """Test Node invariants."""

    def test_node_creation_with_valid_data(self) -> None:
        """Test creating a node with attributes and children."""
        leaf = Node("leaf", text="value")
        node = Node("root", {"id": "1"}, [leaf])

        assert node.name == "root"
        assert node.attrs["id"] == "1"
        assert node.children == (leaf,)
        assert node.text is None

    def test_empty_name_raises_error(self) -> None:
        """Test that an empty name is rejected."""
        with pytest.raises(ValueError, match="Name must be non-empty"):
            Node("")

    def test_children_and_text_raise_error(self) -> None:
        """Test that mixed content is rejected."""
        with pytest.raises(ValueError, match="Mixed content is not supported. Element root."):
            Node("root", children=[Node("child")], text="hello")

    def test_children_and_empty_text_raise_error(self) -> None:
        """Test that present-but-empty text still counts as text."""
        with pytest.raises(ValueError, match="Mixed content"):
            Node("root", children=[Node("child")], text="")

    def test_leaf_may_carry_blank_text(self) -> None:
        """Test that a childless node keeps blank text."""
        node = Node("root", text="   ")

        assert node.text == "   "

    def test_node_is_immutable(self) -> None:
        """Test that fields and containers cannot be modified."""
        source_attrs = {"a": "1"}
        source_children = [Node("child")]
        node = Node("root", source_attrs, source_children)

        source_attrs["b"] = "2"
        source_children.append(Node("other"))

        assert dict(node.attrs) == {"a": "1"}
        assert len(node.children) == 1
        with pytest.raises(TypeError):
            node.attrs["c"] = "3"  # type: ignore[index]
        with pytest.raises(AttributeError):
            node.name = "changed"  # type: ignore[misc]

    def test_equal_nodes_compare_equal(self) -> None:
        """Test structural equality."""
        assert Node("a", {"x": "1"}, [Node("b")]) == Node("a", {"x": "1"}, [Node("b")])
        assert Node("a", {"x": "1"}) != Node("a", {"x": "2"})

    def test_equal_nodes_hash_equal(self) -> None:
        """Test nodes with attributes can be hashed and used in sets."""
        first = Node("a", {"x": "1", "y": "2"}, [Node("b", {"k": "v"})])
        second = Node("a", {"y": "2", "x": "1"}, [Node("b", {"k": "v"})])

        assert hash(first) == hash(second)
        assert {first, second, Node("leaf", text="t")} == {first, Node("leaf", text="t")}


class TestNodeFormatting:
    """Test the one-line intro and the tree dump."""

    def test_intro_without_attributes(self) -> None:
        """Test intro of a node without attributes is just the name."""
        assert Node("point").formatted_intro() == "point"

    def test_intro_with_attributes(self) -> None:
        """Test intro lists attributes in insertion order."""
        node = Node("point", {"x": "1", "y": "2"})

        assert node.formatted_intro() == "point @ x=1,y=2"

    def test_tree_dump_indents_children(self) -> None:
        """Test nested lines are indented by two spaces per level."""
        node = Node("shape", children=[
            Node("circle", {"r": "3"}),
            Node("group", children=[Node("square")]),
        ])

        assert node.formatted_lines() == [
            "- shape",
            "  - circle @ r=3",
            "  - group",
            "    - square",
        ]

    def test_tree_dump_shows_text_preview(self) -> None:
        """Test text is trimmed, truncated and has escaped newlines."""
        text = "  first line\nsecond line " + "x" * 100
        node = Node("doc", children=[Node("para", text=text)])

        lines = node.formatted_lines()

        assert lines[0] == "- doc"
        assert lines[1] == "  - para"
        assert lines[2].startswith("    # first line\\nsecond line ")
        assert lines[2] == "    # " + format_text(text)
        # 70 characters kept, the newline among them rendered as two
        assert len(lines[2]) == len("    # ") + 71

    def test_str_is_formatted_dump(self) -> None:
        """Test str() renders the multi-line dump."""
        node = Node("root", children=[Node("child")])

        assert str(node) == "- root\n  - child"
        assert node.formatted() == str(node)

    def test_rendering_is_stable(self) -> None:
        """Test rendering twice yields the same output."""
        node = Node("root", {"a": "1"}, [Node("leaf", text="t")])

        assert node.formatted() == node.formatted()

    def test_format_helpers(self) -> None:
        """Test attribute and text helpers."""
        assert format_attrs({}) == ""
        assert format_attrs({"a": "1", "b": "2"}) == "a=1,b=2"
        assert format_text("  a\nb  ") == "a\\nb"
        assert format_text("y" * 80) == "y" * 70


class TestNodeNavigation:
    """Test traversal helpers."""

    def test_iter_nodes_in_document_order(self) -> None:
        """Test pre-order traversal."""
        node = Node("a", children=[Node("b", children=[Node("c")]), Node("d")])

        assert [n.name for n in node.iter_nodes()] == ["a", "b", "c", "d"]

    def test_depth(self) -> None:
        """Test subtree height."""
        assert Node("a").depth() == 0
        assert Node("a", children=[Node("b", children=[Node("c")])]).depth() == 2

    def test_to_dict(self) -> None:
        """Test dictionary conversion."""
        node = Node("a", {"k": "v"}, [Node("b", text="t")])

        assert node.to_dict() == {
            "name": "a",
            "attrs": {"k": "v"},
            "children": [{"name": "b", "attrs": {}, "text": "t"}],
        }
