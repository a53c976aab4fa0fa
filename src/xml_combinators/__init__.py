"""XML Combinators.

A declarative parser-combinator engine that turns XML element trees into
typed values and explains, path by path, why a grammar did not match.

Progressive API Disclosure:
- Level 1: Simple functions - parse_string(), parse_file(), parse_node()
- Level 2: Configured parser - GrammarParser class
- Level 3: Engine - Scope combinators, run() and the ParseError family
"""

__version__ = "0.1.0"
__author__ = "XML Combinators Team"

from .api import GrammarParser, GrammarResult, parse_file, parse_node, parse_string
from .engine import (
    NoMatchingChild,
    NoMatchingVariant,
    Other,
    ParseError,
    RemainingItems,
    Scope,
    run,
)
from .shared.config import ParserConfig, ReaderConfig
from .tree import IngestionError, Node, NodeReader

__all__ = [
    # Version and metadata
    "__author__",
    "__version__",

    # Level 1: Simple parsing functions
    "parse_string",
    "parse_file",
    "parse_node",

    # Level 2: Configured parser
    "GrammarParser",
    "GrammarResult",

    # Level 3: Engine
    "Scope",
    "run",
    "ParseError",
    "Other",
    "RemainingItems",
    "NoMatchingChild",
    "NoMatchingVariant",

    # Tree model and ingestion
    "Node",
    "NodeReader",
    "IngestionError",

    # Configuration classes
    "ParserConfig",
    "ReaderConfig",
]
