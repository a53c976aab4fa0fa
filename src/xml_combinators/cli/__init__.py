"""Command-line interface for xml-combinators.

This module provides CLI tools for dumping documents as node trees and for
parsing XML Schema files with full failure reports.
"""

from .main import main

__all__ = ["main"]
