"""Main CLI entry point for the xml-combinators command-line tool.

Provides commands to dump documents as node trees and to parse XML Schema
files, printing the full failure report when a file does not parse.
"""

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional

from xml_combinators import __version__
from xml_combinators.api import GrammarParser, GrammarResult
from xml_combinators.engine import UnsupportedFeatureError
from xml_combinators.shared import (
    ConfigError,
    DiagnosticEntry,
    DiagnosticSeverity,
    ParserConfig,
    get_logger,
)
from xml_combinators.tree import IngestionError
from xml_combinators.xsd import Schema, schema


def load_config(config_path: Optional[Path]) -> ParserConfig:
    """Load parser configuration from a JSON file, or return defaults.

    Raises:
        ConfigError: If the file cannot be read or holds invalid settings
    """
    if config_path is None:
        return ParserConfig()
    try:
        text = config_path.read_text()
    except OSError as e:
        raise ConfigError(f"Could not read config file {config_path}: {e}") from e
    return ParserConfig.from_json(text)


def create_argument_parser() -> argparse.ArgumentParser:
    """Create the main argument parser."""
    parser = argparse.ArgumentParser(
        prog="xml-combinators",
        description="Parse XML documents with declarative grammars and explain mismatches"
    )

    parser.add_argument("--version", action="version", version=__version__)
    parser.add_argument(
        "--config", "-c",
        type=Path,
        help="Configuration file path (JSON)"
    )
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Verbose output"
    )
    parser.add_argument(
        "--quiet", "-q",
        action="store_true",
        help="Quiet output"
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    tree_parser = subparsers.add_parser("tree", help="Print documents as node trees")
    tree_parser.add_argument(
        "paths",
        nargs="+",
        type=Path,
        help="XML files to print"
    )

    xsd_parser = subparsers.add_parser("xsd", help="Parse XML Schema files")
    xsd_parser.add_argument(
        "paths",
        nargs="+",
        type=Path,
        help="XSD files to parse"
    )
    xsd_parser.add_argument(
        "--format", "-f",
        choices=["text", "json"],
        default="text",
        help="Output format (default: text)"
    )
    xsd_parser.add_argument(
        "--output", "-o",
        type=Path,
        help="Output file (default: stdout)"
    )

    return parser


def _describe_item(item: Any) -> str:
    name = getattr(item, "name", None)
    return f"{item.kind} {name}" if name else item.kind


def format_results(results: Dict[Path, GrammarResult[Schema]], format_type: str) -> str:
    """Format schema parse results for output."""
    if format_type == "json":
        return json.dumps(
            {str(path): result.to_dict() for path, result in results.items()},
            indent=2,
        )

    lines: List[str] = []
    successful = sum(1 for result in results.values() if result.success)
    lines.append(f"Parsed {len(results)} files, {successful} successful")
    lines.append("-" * 60)

    for path, result in results.items():
        if result.success and result.value is not None:
            lines.append(f"OK {path}")
            namespace = result.value.target_namespace
            if namespace:
                lines.append(f"   Target namespace: {namespace}")
            for item in result.value.items:
                lines.append(f"   {_describe_item(item)}")
        else:
            lines.append(f"FAILED {path}")
            lines.extend(f"   {line}" for line in result.report.splitlines())
        lines.append("")

    return "\n".join(lines)


def cmd_tree(args: argparse.Namespace, config: ParserConfig) -> int:
    """Handle tree command."""
    parser = GrammarParser(config)
    exit_code = 0
    for path in args.paths:
        try:
            node = parser.reader.from_file(path)
        except IngestionError as e:
            print(f"{path}: {e}", file=sys.stderr)
            exit_code = 1
            continue
        print(node.formatted())
    return exit_code


def cmd_xsd(args: argparse.Namespace, config: ParserConfig) -> int:
    """Handle xsd command."""
    parser = GrammarParser(config)
    logger = get_logger(__name__, config.correlation_id, "cli")
    results: Dict[Path, GrammarResult[Schema]] = {}
    for path in args.paths:
        try:
            results[path] = parser.parse_file(path, schema)
        except UnsupportedFeatureError as e:
            logger.warning(
                "Schema uses an unsupported feature",
                extra={"source": str(path), "summary": str(e)}
            )
            results[path] = GrammarResult(
                success=False,
                error=e,
                report=str(e),
                diagnostics=[
                    DiagnosticEntry(
                        severity=DiagnosticSeverity.ERROR,
                        message=str(e),
                        component="grammar",
                        details={"source": str(path)},
                        correlation_id=config.correlation_id,
                    )
                ],
                correlation_id=config.correlation_id,
            )

    formatted_output = format_results(results, args.format)

    if args.output:
        try:
            args.output.write_text(formatted_output)
        except OSError as e:
            print(f"Error writing output: {e}", file=sys.stderr)
            return 1
        print(f"Results written to {args.output}", file=sys.stderr)
    else:
        print(formatted_output)

    return 0 if all(result.success for result in results.values()) else 1


def main(argv: Optional[List[str]] = None) -> int:
    """Main CLI entry point."""
    parser = create_argument_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 1

    try:
        config = load_config(args.config)
    except ConfigError as e:
        print(f"Invalid configuration: {e}", file=sys.stderr)
        return 1

    # Set up logging verbosity
    if args.verbose:
        logging.basicConfig(level=logging.DEBUG)
    elif args.quiet:
        logging.basicConfig(level=logging.ERROR)
    else:
        logging.basicConfig(level=getattr(logging, config.logging_level))

    logger = get_logger(__name__, config.correlation_id, "cli")
    logger.debug("Running command", extra={"command": args.command})

    try:
        if args.command == "tree":
            return cmd_tree(args, config)
        if args.command == "xsd":
            return cmd_xsd(args, config)
        print(f"Unknown command: {args.command}", file=sys.stderr)
        return 1

    except KeyboardInterrupt:
        print("\nOperation interrupted by user", file=sys.stderr)
        return 130  # Standard exit code for SIGINT


if __name__ == "__main__":
    sys.exit(main())
