"""Combinators that consume items from a parse context.

A grammar rule is any callable taking a ``Scope`` and returning a value.
Rules are built from the methods below. A method that succeeds removes
exactly what it consumed from the context; a method that fails raises a
``ParseError`` and may leave the context partially consumed. Rolling back
such partial consumption is the job of ``one_of``.

``ParseError`` is caught in two places only: per child inside
``match_children`` and per alternative inside ``one_of``.
"""

import logging
from typing import Callable, List, Optional, TypeVar

from xml_combinators.engine.context import ChildSlot, ParseContext, VariantContext
from xml_combinators.engine.errors import (
    NoMatchingChild,
    NoMatchingVariant,
    Other,
    ParseError,
    RemainingItems,
)
from xml_combinators.shared import CorrelationLogger, get_logger
from xml_combinators.tree import Node

T = TypeVar("T")
Rule = Callable[["Scope"], T]


def check_no_remaining_items(context: ParseContext) -> None:
    """Raise ``RemainingItems`` unless the context is fully drained."""
    if not context.is_drained:
        raise RemainingItems(
            context.origin, context.attrs, context.children, context.text
        )


class Scope:
    """Handle bound to one parse context; the receiver of all combinators."""

    def __init__(
        self,
        context: ParseContext,
        logger: Optional[CorrelationLogger] = None
    ) -> None:
        self.context = context
        self.logger = logger or get_logger(__name__, component="engine")

    @classmethod
    def for_node(
        cls, node: Node, logger: Optional[CorrelationLogger] = None
    ) -> "Scope":
        return cls(ParseContext.for_node(node), logger)

    @property
    def name(self) -> str:
        return self.context.name

    @property
    def node(self) -> Node:
        return self.context.origin

    # Names and attributes

    def match_name(self, expected: str) -> None:
        if self.context.name != expected:
            raise Other(f"Element name is not {expected}")

    def take_attr_optional(self, key: str) -> Optional[str]:
        return self.context.attrs.pop(key, None)

    def take_attr(self, key: str) -> str:
        value = self.take_attr_optional(key)
        if value is None:
            raise Other(f"Attribute {key} not found")
        return value

    def require_attr_equals(self, key: str, expected: str) -> None:
        value = self.take_attr(key)
        if value != expected:
            raise Other(f"Attribute {key} is {value}, expected {expected}")

    def discard_attr(self, key: str) -> None:
        self.context.attrs.pop(key, None)

    # Text

    def take_text(self) -> str:
        text = self.context.text
        self.context.text = None
        return text if text is not None else ""

    def require_blank_text(self) -> None:
        text = self.take_text()
        if text.strip():
            raise Other("Text is not blank")

    # Children

    def discard_children_named(self, name: str) -> None:
        self.context.children = [
            slot for slot in self.context.children if slot.node.name != name
        ]

    def match_children(self, at_most: Optional[int], rule: Rule[T]) -> List[T]:
        """Match up to ``at_most`` remaining children against ``rule``.

        Children are tried once each, left to right. A child matches when
        ``rule`` succeeds on a fresh context for it and leaves that context
        fully drained. Matched children are removed; every other child stays
        in place with the failure appended to its error history. Children
        beyond the quota are kept untouched. Never raises ``ParseError``; an
        empty list means no child matched.

        Args:
            at_most: Positive quota, or None for no limit
            rule: Rule run against each candidate child

        Returns:
            Values produced by the matched children in document order
        """
        if at_most is not None and (
            isinstance(at_most, bool) or not isinstance(at_most, int) or at_most < 1
        ):
            raise ValueError(f"at_most must be a positive integer or None, got {at_most!r}")

        remaining: List[ChildSlot] = []
        result: List[T] = []

        for slot in self.context.children:
            if at_most is not None and len(result) == at_most:
                remaining.append(slot)
                continue

            try:
                child_scope = Scope.for_node(slot.node, self.logger)
                parsed = rule(child_scope)
                check_no_remaining_items(child_scope.context)
            except ParseError as e:
                remaining.append(slot.with_error(e))
                continue
            result.append(parsed)

        self.context.children = remaining

        if self.logger.is_enabled_for(logging.DEBUG):
            self.logger.debug(
                "Children matched",
                extra={
                    "node": self.context.name,
                    "matched": len(result),
                    "remaining": len(remaining),
                }
            )
        return result

    def _no_matching_child(self) -> NoMatchingChild:
        return NoMatchingChild(
            self.context.origin,
            [slot.to_child_error() for slot in self.context.children],
        )

    def optional_child(self, rule: Rule[T]) -> Optional[T]:
        result = self.match_children(1, rule)
        return result[0] if result else None

    def child(self, rule: Rule[T]) -> T:
        result = self.match_children(1, rule)
        if not result:
            raise self._no_matching_child()
        return result[0]

    def optional_children(self, rule: Rule[T]) -> List[T]:
        return self.match_children(None, rule)

    def children(self, rule: Rule[T]) -> List[T]:
        result = self.match_children(None, rule)
        if not result:
            raise self._no_matching_child()
        return result

    # Ordered choice

    def one_of(self, *alternatives: Rule[T]) -> T:
        """Return the value of the first alternative that succeeds.

        Each alternative runs against its own clone of this context. The
        first success commits its clone's state back into this context and
        later alternatives are never run. If every alternative fails, this
        context is left exactly as it was and ``NoMatchingVariant`` carries
        the errors of all alternatives in declaration order.

        Raises:
            NoMatchingVariant: If no alternative succeeds
        """
        if not alternatives:
            raise ValueError("one_of requires at least one alternative")

        variants: VariantContext[T] = VariantContext(self.context)
        for alternative in alternatives:
            if variants.has_result:
                break
            self._attempt_variant(variants, alternative)

        if not variants.has_result:
            raise NoMatchingVariant(self.context.origin, variants.errors)
        return variants.result  # type: ignore[return-value]

    def _attempt_variant(self, variants: VariantContext[T], alternative: Rule[T]) -> None:
        clone = Scope(variants.original.clone(), self.logger)
        try:
            value = alternative(clone)
        except ParseError as e:
            variants.errors.append(e)
            if self.logger.is_enabled_for(logging.DEBUG):
                self.logger.debug(
                    "Alternative failed",
                    extra={
                        "node": self.context.name,
                        "variant": len(variants.errors) - 1,
                        "error_kind": e.kind.value,
                    }
                )
            return

        variants.record(value)
        variants.original.adopt(clone.context)

    # Post-conditions

    def check_no_remaining_items(self) -> None:
        check_no_remaining_items(self.context)
