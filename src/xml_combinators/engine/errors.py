"""Parse errors explaining why a grammar did not match.

Every error renders itself as an indented report. Errors nest: a child or an
alternative that failed contributes its own report, so the final report of a
failed parse is a tree mirroring how deep the grammar got before giving up.
"""

from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Any, Dict, List, Mapping, Optional, Sequence

from xml_combinators.tree import Node, format_attrs, format_text

if TYPE_CHECKING:
    from xml_combinators.engine.context import ChildSlot


class ParseErrorKind(Enum):
    """Closed set of reasons a parse can fail."""

    OTHER = "other"
    REMAINING_ITEMS = "remaining_items"
    NO_MATCHING_CHILD = "no_matching_child"
    NO_MATCHING_VARIANT = "no_matching_variant"


class UnsupportedFeatureError(Exception):
    """Raised by a grammar that meets a construct it refuses to model.

    This is not a ``ParseError``: ordered choice and children matching do
    not catch it, so it always aborts the whole parse.
    """


class ParseError(Exception):
    """Base class of all recoverable grammar failures."""

    kind: ParseErrorKind

    def formatted_lines(self) -> List[str]:
        raise NotImplementedError

    def formatted(self) -> str:
        """Render the full report as text."""
        return "\n".join(self.formatted_lines())

    def __str__(self) -> str:
        return self.formatted()

    def to_dict(self) -> Dict[str, Any]:
        raise NotImplementedError


class Other(ParseError):
    """Atomic failure described by a message."""

    kind = ParseErrorKind.OTHER

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    def formatted_lines(self) -> List[str]:
        return [self.message]

    def to_dict(self) -> Dict[str, Any]:
        return {"kind": self.kind.value, "message": self.message}


@dataclass(frozen=True)
class ChildError:
    """A child node paired with the most recent reason it did not match."""

    node: Node
    error: ParseError


class RemainingItems(ParseError):
    """A context that had to be fully drained still holds items.

    Each remaining child carries every error collected while the grammar
    tried to match it.
    """

    kind = ParseErrorKind.REMAINING_ITEMS

    def __init__(
        self,
        node: Node,
        attrs: Mapping[str, str],
        children: Sequence["ChildSlot"],
        text: Optional[str],
    ) -> None:
        super().__init__(node.name)
        self.node = node
        self.attrs = dict(attrs)
        self.children = tuple(children)
        self.text = text

    def formatted_lines(self) -> List[str]:
        stats = []
        if self.attrs:
            stats.append(f"{len(self.attrs)} attrs")
        if self.children:
            stats.append(f"{len(self.children)} children")
        if self.text is not None:
            stats.append("text")

        lines = [
            f"Remaining items ({', '.join(stats)})",
            self.node.formatted_intro(),
        ]
        if self.attrs:
            lines.append("  Remaining attributes:")
            lines.append(f"  {format_attrs(self.attrs)}")
        for child_idx, slot in enumerate(self.children):
            lines.append(f"  Remaining child {child_idx}:")
            lines.append(f"  {slot.node.formatted_intro()}")
            for error_idx, error in enumerate(slot.errors):
                lines.append(f"    Error {error_idx}")
                lines.extend(f"      {line}" for line in error.formatted_lines())
        if self.text is not None:
            lines.append("  Remaining text:")
            lines.append(f"  {format_text(self.text)}")
        return lines

    def to_dict(self) -> Dict[str, Any]:
        return {
            "kind": self.kind.value,
            "node": self.node.formatted_intro(),
            "attrs": dict(self.attrs),
            "children": [
                {
                    "node": slot.node.formatted_intro(),
                    "errors": [error.to_dict() for error in slot.errors],
                }
                for slot in self.children
            ],
            "text": self.text,
        }


class NoMatchingChild(ParseError):
    """A required child rule matched none of the remaining children."""

    kind = ParseErrorKind.NO_MATCHING_CHILD

    def __init__(self, node: Node, errors: Sequence[ChildError]) -> None:
        super().__init__(node.name)
        self.node = node
        self.errors = tuple(errors)

    def formatted_lines(self) -> List[str]:
        lines = [
            f"No matching child ({len(self.errors)} tried)",
            self.node.formatted_intro(),
        ]
        for idx, child_error in enumerate(self.errors):
            lines.append(f"  Child {idx}:")
            lines.append(f"  {child_error.node.formatted_intro()}")
            lines.extend(f"    {line}" for line in child_error.error.formatted_lines())
        return lines

    def to_dict(self) -> Dict[str, Any]:
        return {
            "kind": self.kind.value,
            "node": self.node.formatted_intro(),
            "children": [
                {"node": ce.node.formatted_intro(), "error": ce.error.to_dict()}
                for ce in self.errors
            ],
        }


class NoMatchingVariant(ParseError):
    """Every alternative of an ordered choice failed."""

    kind = ParseErrorKind.NO_MATCHING_VARIANT

    def __init__(self, node: Node, errors: Sequence[ParseError]) -> None:
        super().__init__(node.name)
        self.node = node
        self.errors = tuple(errors)

    def formatted_lines(self) -> List[str]:
        lines = [
            f"No matching variant ({len(self.errors)} tried)",
            self.node.formatted_intro(),
        ]
        for idx, error in enumerate(self.errors):
            lines.append(f"  Variant {idx}:")
            lines.extend(f"    {line}" for line in error.formatted_lines())
        return lines

    def to_dict(self) -> Dict[str, Any]:
        return {
            "kind": self.kind.value,
            "node": self.node.formatted_intro(),
            "variants": [error.to_dict() for error in self.errors],
        }
