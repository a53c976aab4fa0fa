"""Mutable bookkeeping of what remains to be consumed from a node.

A ``ParseContext`` starts as a full copy of a node's attributes, children and
text. Rules shrink it as they consume items; when a rule is done the context
must be empty, otherwise the leftovers are reported.
"""

from dataclasses import dataclass, field
from typing import Dict, Generic, List, Optional, Tuple, TypeVar

from xml_combinators.engine.errors import ChildError, ParseError
from xml_combinators.tree import Node

T = TypeVar("T")


@dataclass(frozen=True)
class ChildSlot:
    """A remaining child plus every error from failed attempts to match it."""

    node: Node
    errors: Tuple[ParseError, ...] = ()

    def with_error(self, error: ParseError) -> "ChildSlot":
        return ChildSlot(self.node, self.errors + (error,))

    @property
    def last_error(self) -> Optional[ParseError]:
        return self.errors[-1] if self.errors else None

    def to_child_error(self) -> ChildError:
        """Pair the node with its most recent error."""
        if not self.errors:
            raise ValueError(f"Child {self.node.name} has not been tried yet")
        return ChildError(self.node, self.errors[-1])


@dataclass
class ParseContext:
    """Items of ``origin`` not yet consumed by the running rule.

    ``origin`` and ``name`` never change; ``attrs``, ``children`` and ``text``
    shrink as rules consume them.
    """

    origin: Node
    name: str
    attrs: Dict[str, str]
    children: List[ChildSlot]
    text: Optional[str]

    @classmethod
    def for_node(cls, node: Node) -> "ParseContext":
        return cls(
            origin=node,
            name=node.name,
            attrs=dict(node.attrs),
            children=[ChildSlot(child) for child in node.children],
            text=node.text,
        )

    def clone(self) -> "ParseContext":
        """Independent copy; mutating it never affects this context."""
        return ParseContext(
            origin=self.origin,
            name=self.name,
            attrs=dict(self.attrs),
            children=list(self.children),
            text=self.text,
        )

    def adopt(self, other: "ParseContext") -> None:
        """Take over the remaining items of ``other``."""
        self.attrs = other.attrs
        self.children = other.children
        self.text = other.text

    @property
    def is_drained(self) -> bool:
        return not self.attrs and not self.children and self.text is None


@dataclass
class VariantContext(Generic[T]):
    """State of one ordered choice over ``original``.

    At most one result is ever recorded; ``has_result`` is tracked apart from
    the value so that a rule returning ``None`` still counts as a success.
    """

    original: ParseContext
    result: Optional[T] = None
    errors: List[ParseError] = field(default_factory=list)
    has_result: bool = False

    def record(self, value: T) -> None:
        if self.has_result:
            raise ValueError("Ordered choice already has a result")
        self.result = value
        self.has_result = True
