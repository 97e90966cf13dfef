"""Main CLI entry point for the tagtree command-line tool.

Provides parse, validate, query and profile commands over XML files.
"""

import argparse
import json
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

from tagtree import __version__
from tagtree.api import XMLParser
from tagtree.shared import (
    ConfigValidationError,
    ParserConfig,
    TagTreeError,
    configure_logging,
    get_logger,
)
from tagtree.tools import ParseProfiler
from tagtree.tree import Element

logger = get_logger(__name__, None, "cli")

EXIT_OK = 0
EXIT_FAILURE = 1
EXIT_USAGE = 2
EXIT_INTERRUPTED = 130


def create_argument_parser() -> argparse.ArgumentParser:
    """Create the main argument parser."""
    parser = argparse.ArgumentParser(
        prog="tagtree",
        description="Parse XML documents into element trees, validate and query them"
    )

    parser.add_argument("--version", action="version", version=__version__)
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
    parser.add_argument(
        "--config", "-c",
        type=Path,
        help="Parser configuration file (JSON)"
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # Parse command
    parse_parser = subparsers.add_parser("parse", help="Parse XML files and print them")
    parse_parser.add_argument(
        "paths",
        nargs="+",
        type=Path,
        help="XML files to parse"
    )
    parse_parser.add_argument(
        "--format", "-f",
        choices=["xml", "json", "text"],
        default="xml",
        help="Output format (default: xml)"
    )
    parse_parser.add_argument(
        "--indent",
        type=int,
        help="Indent serialized XML with this many spaces instead of tabs"
    )

    # Validate command
    validate_parser = subparsers.add_parser("validate", help="Check XML files")
    validate_parser.add_argument(
        "paths",
        nargs="+",
        type=Path,
        help="XML files to validate"
    )
    validate_parser.add_argument(
        "--format", "-f",
        choices=["json", "text"],
        default="text",
        help="Output format"
    )

    # Query command
    query_parser = subparsers.add_parser(
        "query", help="Print the element found by following tag names from the root"
    )
    query_parser.add_argument("path", type=Path, help="XML file to query")
    query_parser.add_argument(
        "tags",
        nargs="+",
        help="Child tag names to follow, one per level"
    )
    query_parser.add_argument(
        "--index", "-n",
        type=int,
        default=0,
        help="Zero-based index among matches of the last tag (default: 0)"
    )
    query_parser.add_argument(
        "--attribute", "-a",
        metavar="NAME=VALUE",
        help="Only match last-level elements with this attribute value"
    )

    # Profile command
    profile_parser = subparsers.add_parser("profile", help="Time parsing of XML files")
    profile_parser.add_argument(
        "paths",
        nargs="+",
        type=Path,
        help="XML files to profile"
    )
    profile_parser.add_argument(
        "--repeat", "-r",
        type=int,
        default=10,
        help="Number of parses per file (default: 10)"
    )

    return parser


def load_parser_config(config_path: Optional[Path]) -> ParserConfig:
    """Read a JSON parser configuration, or return the defaults.

    Raises:
        ConfigValidationError: if the file is missing or invalid
    """
    if config_path is None:
        return ParserConfig()
    try:
        return ParserConfig.from_json(config_path.read_text(encoding="utf-8"))
    except OSError as e:
        raise ConfigValidationError(f"Could not read config file: {e}") from e


def parse_single_file(
    parser: XMLParser, path: Path
) -> Tuple[Optional[Element], Dict[str, Any]]:
    """Parse one file and describe the outcome."""
    try:
        root = parser.parse_file(path)
    except (TagTreeError, OSError, ValueError) as e:
        logger.warning("Failed to process file", extra={"file": str(path)})
        return None, {
            "file": str(path),
            "success": False,
            "error": str(e),
            "error_type": type(e).__name__,
        }

    metrics = parser.last_metrics
    return root, {
        "file": str(path),
        "success": True,
        "root": root.name,
        "element_count": metrics.elements_created,
        "token_count": metrics.tokens_generated,
        "processing_time_ms": metrics.processing_time_ms,
    }


def format_results(results: List[Dict[str, Any]], format_type: str) -> str:
    """Format per-file results for output."""
    if format_type == "json":
        return json.dumps(results, indent=2)

    if not results:
        return "No results to display."

    lines = []
    successful = sum(1 for r in results if r.get("success", False))
    lines.append(f"Processed {len(results)} files, {successful} successful")
    lines.append("-" * 60)

    for result in results:
        status = "✓" if result.get("success", False) else "✗"
        lines.append(f"{status} {result['file']}")
        if result.get("success", False):
            lines.append(
                f"   Root: <{result['root']}>, Elements: {result['element_count']}, "
                f"Tokens: {result['token_count']}, "
                f"Time: {result['processing_time_ms']:.1f}ms"
            )
        else:
            lines.append(f"   Error: {result.get('error', '')}")

    return "\n".join(lines)


def cmd_parse(args: argparse.Namespace, config: ParserConfig) -> int:
    """Handle parse command."""
    if args.indent is not None:
        if args.indent < 0:
            print("--indent must be >= 0", file=sys.stderr)
            return EXIT_USAGE
        config = config.override(serialization__indent=" " * args.indent)

    parser = XMLParser(config)
    results = []
    documents = []
    for path in args.paths:
        root, result = parse_single_file(parser, path)
        results.append(result)
        if root is None:
            continue
        if args.format == "json":
            result["tree"] = root.to_dict()
        documents.append(root.serialize(config.serialization.indent))

    if args.format == "xml":
        if documents:
            print("\n".join(documents))
        for result in results:
            if not result["success"]:
                print(f"{result['file']}: {result['error']}", file=sys.stderr)
    else:
        print(format_results(results, args.format))

    return EXIT_OK if all(r["success"] for r in results) else EXIT_FAILURE


def cmd_validate(args: argparse.Namespace, config: ParserConfig) -> int:
    """Handle validate command."""
    parser = XMLParser(config)
    results = []

    for path in args.paths:
        _, result = parse_single_file(parser, path)
        results.append({
            "file": result["file"],
            "valid": result["success"],
            "error": result.get("error"),
        })

    if args.format == "json":
        print(json.dumps(results, indent=2))
    else:
        valid_count = sum(1 for r in results if r["valid"])
        print(f"Validated {len(results)} files, {valid_count} valid")
        print("-" * 50)
        for result in results:
            status = "✓" if result["valid"] else "✗"
            print(f"{status} {result['file']}")
            if not result["valid"]:
                print(f"   Error: {result['error']}")

    return EXIT_OK if all(r["valid"] for r in results) else EXIT_FAILURE


def find_element(
    root: Element,
    tags: List[str],
    index: int = 0,
    attribute: Optional[Tuple[str, str]] = None
) -> Optional[Element]:
    """Follow ``tags`` from ``root``, one level of children per tag.

    Every level but the last takes the first match; the last takes the
    ``index``-th match, filtered by ``attribute`` when given.
    """
    element: Optional[Element] = root
    for tag in tags[:-1]:
        element = element.first_tag(tag)
        if element is None:
            return None
    if attribute is None:
        return element.nth_tag(tags[-1], index)
    return element.nth_tag_with_attribute(tags[-1], attribute[0], attribute[1], index)


def cmd_query(args: argparse.Namespace, config: ParserConfig) -> int:
    """Handle query command."""
    attribute = None
    if args.attribute is not None:
        name, separator, value = args.attribute.partition("=")
        if not name or not separator:
            print("--attribute must look like NAME=VALUE", file=sys.stderr)
            return EXIT_USAGE
        attribute = (name, value)

    parser = XMLParser(config)
    root, result = parse_single_file(parser, args.path)
    if root is None:
        print(f"{result['file']}: {result['error']}", file=sys.stderr)
        return EXIT_FAILURE

    element = find_element(root, args.tags, args.index, attribute)
    if element is None:
        print(f"No match for {'/'.join(args.tags)}", file=sys.stderr)
        return EXIT_FAILURE

    print(element.serialize(config.serialization.indent))
    return EXIT_OK


def cmd_profile(args: argparse.Namespace, config: ParserConfig) -> int:
    """Handle profile command."""
    if args.repeat < 1:
        print("--repeat must be >= 1", file=sys.stderr)
        return EXIT_USAGE

    profiler = ParseProfiler(config)
    failures = []
    for path in args.paths:
        try:
            profiler.profile(path, repeat=args.repeat)
        except (TagTreeError, OSError, ValueError) as e:
            failures.append({"file": str(path), "error": str(e)})

    report = profiler.report()
    report["failures"] = failures
    print(json.dumps(report, indent=2))
    return EXIT_FAILURE if failures else EXIT_OK


COMMANDS = {
    "parse": cmd_parse,
    "validate": cmd_validate,
    "query": cmd_query,
    "profile": cmd_profile,
}


def main(argv: Optional[List[str]] = None) -> int:
    """Main CLI entry point."""
    parser = create_argument_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return EXIT_FAILURE

    try:
        config = load_parser_config(args.config)
    except ConfigValidationError as e:
        print(f"Invalid configuration: {e}", file=sys.stderr)
        return EXIT_USAGE

    if args.verbose:
        configure_logging("DEBUG")
    elif args.quiet:
        configure_logging("ERROR")
    else:
        configure_logging(config.global_.logging_level)

    try:
        return COMMANDS[args.command](args, config)
    except KeyboardInterrupt:
        print("\nOperation interrupted by user", file=sys.stderr)
        return EXIT_INTERRUPTED


if __name__ == "__main__":
    sys.exit(main())
