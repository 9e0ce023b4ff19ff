"""Main CLI entry point for the xml-stream-reader command-line tool.

Reads one XML file in chunks and prints completed elements, or the completed
document, as JSON.
"""

import argparse
import json
import sys
from pathlib import Path
from typing import List, Optional

from xml_stream_reader import __version__
from xml_stream_reader.api.reader import create
from xml_stream_reader.shared import ConfigError, configure_logging, get_logger
from xml_stream_reader.tree import Node

EXIT_COMPLETED = 0
EXIT_INCOMPLETE = 1
EXIT_UNREADABLE = 2


def create_argument_parser() -> argparse.ArgumentParser:
    """Create the argument parser for the CLI."""
    parser = argparse.ArgumentParser(
        prog="xml-stream-reader",
        description="Read an XML document in chunks and print completed elements as JSON",
    )
    parser.add_argument("--version", action="version", version=__version__)
    parser.add_argument(
        "path",
        type=Path,
        help="XML file to read"
    )
    parser.add_argument(
        "--tag", "-t",
        action="append",
        default=[],
        metavar="NAME",
        help="Print each completed element with this name (repeatable)"
    )
    parser.add_argument(
        "--stream", "-s",
        action="store_true",
        help="Discard completed top-level elements to bound memory"
    )
    parser.add_argument(
        "--no-parent-nodes",
        action="store_true",
        help="Clear parent references on completed elements"
    )
    parser.add_argument(
        "--top-level-only",
        action="store_true",
        help="Only publish direct children of the root"
    )
    parser.add_argument(
        "--chunk-size",
        type=int,
        default=None,
        help="Bytes read per chunk"
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

    return parser


def format_node(node: Node) -> str:
    """Render a node as a single line of JSON."""
    return json.dumps(node.to_dict(), ensure_ascii=False)


def main(argv: Optional[List[str]] = None) -> int:
    """Main CLI entry point."""
    parser = create_argument_parser()
    args = parser.parse_args(argv)

    configure_logging(verbose=args.verbose, quiet=args.quiet)
    logger = get_logger(__name__, None, "cli")

    options = {
        "stream": args.stream,
        "parent_nodes": not args.no_parent_nodes,
        "emit_top_level_only": args.top_level_only,
        "debug": args.verbose,
    }
    if args.chunk_size is not None:
        options["chunk_size"] = args.chunk_size

    try:
        reader = create(**options)
    except ConfigError as e:
        print(f"Invalid option: {e}", file=sys.stderr)
        return EXIT_UNREADABLE

    def print_node(node: Node) -> None:
        print(format_node(node))

    if args.tag:
        for name in args.tag:
            reader.on(reader.router.element_event_name(name), print_node)
    else:
        reader.on(reader.config.done_event, print_node)

    try:
        with args.path.open("rb") as handle:
            reader.parse_stream(handle)
    except OSError as e:
        print(f"Cannot read {args.path}: {e}", file=sys.stderr)
        return EXIT_UNREADABLE
    except UnicodeDecodeError as e:
        print(f"Cannot decode {args.path}: {e}", file=sys.stderr)
        return EXIT_UNREADABLE
    except KeyboardInterrupt:
        print("\nOperation interrupted by user", file=sys.stderr)
        return 130

    if not reader.is_done:
        logger.warning(
            "Document never completed",
            extra={"path": str(args.path), "statistics": reader.statistics.to_dict()}
        )
        return EXIT_INCOMPLETE
    return EXIT_COMPLETED


if __name__ == "__main__":
    sys.exit(main())
