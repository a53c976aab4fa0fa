"""Top-level driver running a grammar rule against a root node."""

import time
from typing import Optional, TypeVar

from xml_combinators.engine.errors import ParseError
from xml_combinators.engine.scope import Rule, Scope, check_no_remaining_items
from xml_combinators.shared import get_logger
from xml_combinators.tree import Node

T = TypeVar("T")


def run(node: Node, rule: Rule[T], correlation_id: Optional[str] = None) -> T:
    """Run ``rule`` on ``node`` and require the whole node to be consumed.

    Args:
        node: Root of the tree to parse
        rule: Grammar rule producing the result
        correlation_id: Optional correlation ID for log records

    Returns:
        The value produced by ``rule``

    Raises:
        ParseError: The first error not intercepted by the grammar, or
            ``RemainingItems`` if the rule left part of the root unconsumed
    """
    start_time = time.time()
    logger = get_logger(__name__, correlation_id, "engine")
    logger.info("Starting grammar run", extra={"root": node.name})

    scope = Scope.for_node(node, logger)
    try:
        parsed = rule(scope)
        check_no_remaining_items(scope.context)
    except ParseError as e:
        logger.info(
            "Grammar run failed",
            extra={
                "root": node.name,
                "error_kind": e.kind.value,
                "processing_time_ms": (time.time() - start_time) * 1000,
            }
        )
        raise

    logger.info(
        "Grammar run finished",
        extra={
            "root": node.name,
            "processing_time_ms": (time.time() - start_time) * 1000,
        }
    )
    return parsed
