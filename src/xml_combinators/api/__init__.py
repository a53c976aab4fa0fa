"""Document-level API for running grammars over XML input.

Progressive API disclosure:
- Level 1: Simple functions - parse_node(), parse_string(), parse_file()
- Level 2: Configured parser - GrammarParser class
"""

from .parser import (
    GrammarParser,
    GrammarResult,
    parse_file,
    parse_node,
    parse_string,
)

__all__ = [
    "GrammarParser",
    "GrammarResult",
    "parse_file",
    "parse_node",
    "parse_string",
]
