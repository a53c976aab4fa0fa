"""Document-level parsing API.

``run`` raises on the first unexplained failure. The functions here wrap the
whole pipeline (reading the document, running the grammar, checking that
everything was consumed) and turn parse and ingestion failures into a failed
``GrammarResult`` with the rendered failure report attached. Other errors,
such as ``UnsupportedFeatureError`` from a grammar that meets a construct it
deliberately rejects, propagate to the caller.
"""

import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable, Dict, Generic, List, Optional, TypeVar, Union

from xml_combinators.engine import ParseError, Rule, UnsupportedFeatureError, run
from xml_combinators.shared import (
    DiagnosticEntry,
    DiagnosticSeverity,
    ParseMetrics,
    ParserConfig,
    get_logger,
)
from xml_combinators.tree import IngestionError, Node, NodeReader

T = TypeVar("T")

MS_PER_SECOND = 1000


@dataclass
class GrammarResult(Generic[T]):
    """Outcome of parsing one document with one grammar rule.

    ``value`` is set iff ``success``; otherwise ``error`` holds the parse or
    ingestion error (or, when built by a caller, the unsupported feature)
    and ``report`` its rendered text.
    """

    success: bool
    value: Optional[T] = None
    error: Optional[Exception] = None
    report: str = ""
    node: Optional[Node] = None
    diagnostics: List[DiagnosticEntry] = field(default_factory=list)
    metrics: ParseMetrics = field(default_factory=ParseMetrics)
    correlation_id: Optional[str] = None

    def to_dict(self, serialize: Optional[Callable[[T], Any]] = None) -> Dict[str, Any]:
        """Convert result to a JSON-friendly dictionary.

        Args:
            serialize: Converts the value; defaults to its ``to_dict`` method
        """
        result: Dict[str, Any] = {
            "success": self.success,
            "diagnostics": [entry.to_dict() for entry in self.diagnostics],
            "metrics": self.metrics.to_dict(),
        }
        if self.success:
            if serialize is not None:
                result["value"] = serialize(self.value)  # type: ignore[arg-type]
            elif hasattr(self.value, "to_dict"):
                result["value"] = self.value.to_dict()  # type: ignore[union-attr]
            else:
                result["value"] = self.value
        else:
            result["report"] = self.report
            if isinstance(self.error, ParseError):
                result["error"] = self.error.to_dict()
            elif isinstance(self.error, UnsupportedFeatureError):
                result["error"] = {"kind": "unsupported_feature", "message": str(self.error)}
            else:
                result["error"] = {"kind": "ingestion", "message": str(self.error)}
        return result


class GrammarParser:
    """Reads documents and runs grammar rules over them.

    Examples:
        >>> from xml_combinators.xsd import schema
        >>> result = GrammarParser().parse_string('<schema/>', schema)
        >>> result.success
        True
    """

    def __init__(self, config: Optional[ParserConfig] = None) -> None:
        self.config = config or ParserConfig()
        self.correlation_id = self.config.correlation_id
        self.logger = get_logger(__name__, self.correlation_id, "grammar_parser")
        self.reader = NodeReader(self.config.reader, self.correlation_id)

    def parse_node(self, node: Node, rule: Rule[T]) -> GrammarResult[T]:
        """Run ``rule`` over an already ingested tree."""
        start_time = time.time()
        try:
            value = run(node, rule, self.correlation_id)
        except ParseError as e:
            return self._failure(e, "engine", node, start_time)

        return GrammarResult(
            success=True,
            value=value,
            node=node,
            metrics=self._metrics(node, start_time),
            correlation_id=self.correlation_id,
        )

    def parse_string(self, xml: str, rule: Rule[T]) -> GrammarResult[T]:
        """Read ``xml`` and run ``rule`` over its root element."""
        start_time = time.time()
        try:
            node = self.reader.from_string(xml)
        except IngestionError as e:
            return self._failure(e, "reader", None, start_time)
        return self._with_reading_time(self.parse_node(node, rule), start_time)

    def parse_file(self, path: Union[str, Path], rule: Rule[T]) -> GrammarResult[T]:
        """Read the document at ``path`` and run ``rule`` over its root element."""
        start_time = time.time()
        try:
            node = self.reader.from_file(path)
        except IngestionError as e:
            return self._failure(e, "reader", None, start_time, source=str(path))
        return self._with_reading_time(self.parse_node(node, rule), start_time)

    def _with_reading_time(self, result: GrammarResult[T], start_time: float) -> GrammarResult[T]:
        result.metrics.processing_time_ms = (time.time() - start_time) * MS_PER_SECOND
        return result

    def _metrics(self, node: Optional[Node], start_time: float) -> ParseMetrics:
        metrics = ParseMetrics(
            processing_time_ms=(time.time() - start_time) * MS_PER_SECOND
        )
        if node is not None:
            metrics.nodes_total = sum(1 for _ in node.iter_nodes())
            metrics.max_depth = node.depth()
        return metrics

    def _failure(
        self,
        error: Exception,
        component: str,
        node: Optional[Node],
        start_time: float,
        source: Optional[str] = None,
    ) -> GrammarResult[Any]:
        report = error.formatted() if isinstance(error, ParseError) else str(error)
        details: Dict[str, Any] = {}
        if isinstance(error, ParseError):
            details["error_kind"] = error.kind.value
        if source is not None:
            details["source"] = source

        first_line = report.splitlines()[0] if report else type(error).__name__
        self.logger.warning(
            "Document did not parse",
            extra={"failed_component": component, "summary": first_line}
        )
        return GrammarResult(
            success=False,
            error=error,
            report=report,
            node=node,
            diagnostics=[
                DiagnosticEntry(
                    severity=DiagnosticSeverity.ERROR,
                    message=first_line,
                    component=component,
                    details=details or None,
                    correlation_id=self.correlation_id,
                )
            ],
            metrics=self._metrics(node, start_time),
            correlation_id=self.correlation_id,
        )


def parse_node(node: Node, rule: Rule[T], correlation_id: Optional[str] = None) -> GrammarResult[T]:
    """Run ``rule`` over ``node`` and return a result instead of raising."""
    return GrammarParser(ParserConfig(correlation_id=correlation_id)).parse_node(node, rule)


def parse_string(xml: str, rule: Rule[T], config: Optional[ParserConfig] = None) -> GrammarResult[T]:
    """Read ``xml`` and run ``rule`` over it, returning a result.

    Examples:
        >>> from xml_combinators.xsd import schema
        >>> result = parse_string('<schema><element/></schema>', schema)
        >>> result.success
        False
        >>> result.report.splitlines()[0]
        'Remaining items (1 children)'
    """
    return GrammarParser(config).parse_string(xml, rule)


def parse_file(path: Union[str, Path], rule: Rule[T], config: Optional[ParserConfig] = None) -> GrammarResult[T]:
    """Read the document at ``path`` and run ``rule`` over it, returning a result."""
    return GrammarParser(config).parse_file(path, rule)
