"""Combinator engine turning node trees into typed values.

Key Components:
    Scope: Receiver of all combinators, bound to one ParseContext
    ParseContext: Mutable view of the items of a node still to be consumed
    run: Top-level driver requiring the root to be fully consumed
    ParseError: Base of the closed family of failure reports
"""

from .context import ChildSlot, ParseContext, VariantContext
from .errors import (
    ChildError,
    NoMatchingChild,
    NoMatchingVariant,
    Other,
    ParseError,
    ParseErrorKind,
    RemainingItems,
    UnsupportedFeatureError,
)
from .runner import run
from .scope import Rule, Scope, check_no_remaining_items

__all__ = [
    "ChildSlot",
    "ParseContext",
    "VariantContext",
    "ChildError",
    "NoMatchingChild",
    "NoMatchingVariant",
    "Other",
    "ParseError",
    "ParseErrorKind",
    "RemainingItems",
    "UnsupportedFeatureError",
    "run",
    "Rule",
    "Scope",
    "check_no_remaining_items",
]
