"""Immutable element tree consumed by the grammar engine.

A ``Node`` is one element: a local name, its attributes, its child elements
in document order and optional text. Mixed content is not supported, so a
node carries either children or text, never both.
"""

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Dict, Iterator, List, Mapping, Optional, Sequence, Tuple

# Max length of text previews in diagnostics
TEXT_PREVIEW_LENGTH = 70


def format_attrs(attrs: Mapping[str, str]) -> str:
    """Render attributes as ``key=value`` pairs joined by commas."""
    return ",".join(f"{key}={value}" for key, value in attrs.items())


def format_text(text: str) -> str:
    """Render a one-line preview of text content for diagnostics."""
    return text.strip()[:TEXT_PREVIEW_LENGTH].replace("\n", "\\n")


@dataclass(frozen=True)
class Node:
    """One element of the generic tree.

    Attributes and children are copied on construction into read-only
    containers, so a node never changes once built.
    """

    name: str
    attrs: Mapping[str, str] = field(default_factory=dict)
    children: Sequence["Node"] = field(default_factory=tuple)
    text: Optional[str] = None

    def __post_init__(self) -> None:
        """Validate node invariants and freeze containers."""
        if not self.name:
            raise ValueError("Name must be non-empty.")
        children: Tuple["Node", ...] = tuple(self.children)
        if children and self.text is not None:
            raise ValueError(f"Mixed content is not supported. Element {self.name}.")
        object.__setattr__(self, "attrs", MappingProxyType(dict(self.attrs)))
        object.__setattr__(self, "children", children)

    def __hash__(self) -> int:
        # MappingProxyType is unhashable; hash a sorted snapshot instead
        return hash((self.name, tuple(sorted(self.attrs.items())), self.children, self.text))

    def formatted_intro(self) -> str:
        """One-line summary: the name followed by attributes, if any."""
        attributes = format_attrs(self.attrs)
        if not attributes:
            return self.name
        return f"{self.name} @ {attributes}"

    def formatted_lines(self) -> List[str]:
        """Recursive dump of this subtree, one line per node."""
        intro = f"- {self.formatted_intro()}"
        if self.text is not None:
            return [intro, f"  # {format_text(self.text)}"]
        lines = [intro]
        for child in self.children:
            lines.extend(f"  {line}" for line in child.formatted_lines())
        return lines

    def formatted(self) -> str:
        return "\n".join(self.formatted_lines())

    def __str__(self) -> str:
        return self.formatted()

    def iter_nodes(self) -> Iterator["Node"]:
        """Iterate over this node and all descendants in document order."""
        yield self
        for child in self.children:
            yield from child.iter_nodes()

    def depth(self) -> int:
        """Height of the subtree rooted here (a leaf has depth 0)."""
        if not self.children:
            return 0
        return 1 + max(child.depth() for child in self.children)

    def to_dict(self) -> Dict[str, Any]:
        """Convert node to dictionary representation."""
        result: Dict[str, Any] = {"name": self.name, "attrs": dict(self.attrs)}
        if self.text is not None:
            result["text"] = self.text
        if self.children:
            result["children"] = [child.to_dict() for child in self.children]
        return result
