"""Ingestion of XML documents into the generic node tree.

The reader is the only place where a concrete document format is touched.
It uses lxml to parse the document and then converts each element into a
``Node``: element names are reduced to local names, attribute keys keep
their prefix as written, comments are skipped, text runs are concatenated
and blank text next to child elements is dropped.
"""

import time
from pathlib import Path
from typing import Dict, List, Optional, Union

from lxml import etree

from xml_combinators.shared import ReaderConfig, get_logger
from xml_combinators.tree.node import Node

PathLike = Union[str, Path]


class IngestionError(ValueError):
    """Raised when a document cannot be represented as a node tree."""


_XML_NAMESPACE = "http://www.w3.org/XML/1998/namespace"


def _local_name(qualified: str) -> str:
    return etree.QName(qualified).localname


def _attr_name(element: etree._Element, key: str) -> str:
    """Attribute key as written in the document: ``prefix:local`` or ``local``."""
    qname = etree.QName(key)
    if qname.namespace is None:
        return qname.localname
    if qname.namespace == _XML_NAMESPACE:
        return f"xml:{qname.localname}"
    for prefix, uri in element.nsmap.items():
        if prefix and uri == qname.namespace:
            return f"{prefix}:{qname.localname}"
    return key


class NodeReader:
    """Converts lxml documents and elements into ``Node`` trees."""

    def __init__(
        self,
        config: Optional[ReaderConfig] = None,
        correlation_id: Optional[str] = None
    ) -> None:
        """Initialize reader.

        Args:
            config: Reader configuration, defaults to ``ReaderConfig()``
            correlation_id: Optional correlation ID for log records
        """
        self.config = config or ReaderConfig()
        self.correlation_id = correlation_id
        self.logger = get_logger(__name__, correlation_id, "node_reader")

    def _make_parser(self) -> etree.XMLParser:
        return etree.XMLParser(
            remove_comments=False,
            no_network=True,
            resolve_entities=self.config.resolve_entities,
            huge_tree=self.config.huge_tree,
        )

    def from_element(self, element: etree._Element) -> Node:
        """Convert an lxml element and its subtree.

        Raises:
            IngestionError: On duplicate attributes, unsupported node kinds
                or mixed content
        """
        name = _local_name(element.tag)

        attrs: Dict[str, str] = {}
        for key, value in element.attrib.items():
            attr_name = _attr_name(element, key)
            if attr_name in attrs:
                raise IngestionError(
                    f"Element {name} contains duplicate attribute {attr_name}. "
                    f"Values {attrs[attr_name]} and {value}."
                )
            attrs[attr_name] = value

        children: List[Node] = []
        text_runs: List[str] = []
        if element.text is not None:
            text_runs.append(element.text)
        for child in element:
            if child.tag is etree.Comment:
                pass
            elif isinstance(child.tag, str):
                children.append(self.from_element(child))
            else:
                raise IngestionError(
                    f"Element {name} contains node of unsupported type: "
                    f"{type(child).__name__}."
                )
            if child.tail is not None:
                text_runs.append(child.tail)

        text: Optional[str] = "".join(text_runs) if text_runs else None
        # Whitespace between child elements is layout, not content
        if children and (text is None or not text.strip()):
            text = None

        try:
            return Node(name, attrs, children, text)
        except ValueError as e:
            raise IngestionError(str(e)) from e

    def from_bytes(self, data: bytes) -> Node:
        """Parse an encoded document."""
        return self._read(lambda: etree.fromstring(data, self._make_parser()), len(data))

    def from_string(self, text: str) -> Node:
        """Parse a document held in a string.

        The string must not carry an encoding declaration; pass bytes for
        documents that do.
        """
        return self._read(lambda: etree.fromstring(text, self._make_parser()), len(text))

    def from_file(self, path: PathLike) -> Node:
        """Parse the document stored at ``path``."""
        def load() -> etree._Element:
            return etree.parse(str(path), self._make_parser()).getroot()

        return self._read(load, None, source=str(path))

    def _read(self, load, size: Optional[int], source: Optional[str] = None) -> Node:
        start_time = time.time()
        self.logger.info(
            "Reading document",
            extra={"source": source or "<memory>", "input_size": size}
        )
        try:
            root = load()
        except etree.XMLSyntaxError as e:
            raise IngestionError(f"Malformed document: {e}") from e
        except OSError as e:
            raise IngestionError(f"Cannot read document {source}: {e}") from e
        except ValueError as e:
            raise IngestionError(str(e)) from e

        node = self.from_element(root)
        self.logger.info(
            "Document read",
            extra={
                "root": node.name,
                "processing_time_ms": (time.time() - start_time) * 1000,
            }
        )
        return node


def read_string(text: str, config: Optional[ReaderConfig] = None) -> Node:
    """Parse a document string into a node tree."""
    return NodeReader(config).from_string(text)


def read_bytes(data: bytes, config: Optional[ReaderConfig] = None) -> Node:
    """Parse an encoded document into a node tree."""
    return NodeReader(config).from_bytes(data)


def read_file(path: PathLike, config: Optional[ReaderConfig] = None) -> Node:
    """Parse a document file into a node tree."""
    return NodeReader(config).from_file(path)
