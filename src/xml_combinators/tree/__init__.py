"""Generic element tree and its XML ingestion.

Key Components:
    Node: Immutable element with attributes, ordered children and optional text
    NodeReader: Converts XML documents into ``Node`` trees
    IngestionError: Raised when a document cannot be represented as nodes
"""

from .node import Node, TEXT_PREVIEW_LENGTH, format_attrs, format_text
from .reader import IngestionError, NodeReader, read_bytes, read_file, read_string

__all__ = [
    "Node",
    "TEXT_PREVIEW_LENGTH",
    "format_attrs",
    "format_text",
    "IngestionError",
    "NodeReader",
    "read_bytes",
    "read_file",
    "read_string",
]
