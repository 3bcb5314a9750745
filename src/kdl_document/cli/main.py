"""Main CLI entry point for the kdl-document command-line tool.

Every command reads a JSON-lines event file (``-`` for stdin), builds the
document and writes it back out:

* ``emit``: canonical KDL text
* ``print``: s-expression debug rendering
* ``flatten``: canonical JSON-lines events
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional

from kdl_document.api import KDLProcessor
from kdl_document.debug import print_document
from kdl_document.events import read_events, write_events
from kdl_document.shared import ConfigError, KDLConfig, KDLError, KdlVersion
from kdl_document.tree import Document


def create_argument_parser() -> argparse.ArgumentParser:
    """Create the command-line argument parser."""
    parser = argparse.ArgumentParser(
        prog="kdl-document",
        description="Build KDL documents from event streams and emit them",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    emit_parser = subparsers.add_parser("emit", help="Write a document as KDL text")
    emit_parser.add_argument("file", help="JSON-lines event file, or - for stdin")
    emit_parser.add_argument(
        "--kdl-version",
        type=int,
        choices=[1, 2],
        default=None,
        help="KDL version to emit (default from config: 2)"
    )
    emit_parser.add_argument(
        "--indent",
        type=int,
        default=None,
        help="Spaces per nesting level"
    )

    print_parser = subparsers.add_parser("print", help="Print a document as an s-expression")
    print_parser.add_argument("file", help="JSON-lines event file, or - for stdin")

    flatten_parser = subparsers.add_parser(
        "flatten", help="Rebuild and write the canonical event stream"
    )
    flatten_parser.add_argument("file", help="JSON-lines event file, or - for stdin")

    # Global options
    parser.add_argument(
        "--config", "-c",
        type=Path,
        help="JSON configuration file"
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
    parser.add_argument(
        "--trace",
        action="store_true",
        help="Log every event consumed by the tree builder"
    )

    return parser


def load_config(args: argparse.Namespace) -> KDLConfig:
    """Load the configuration file, if any, and apply command-line overrides."""
    config = KDLConfig.canonical()
    if args.config is not None:
        config = KDLConfig.from_json(args.config.read_text(encoding="utf-8"))

    overrides: Dict[str, Any] = {}
    if args.trace:
        overrides["builder__trace_events"] = True
    if getattr(args, "kdl_version", None) is not None:
        overrides["emitter__version"] = KdlVersion(args.kdl_version)
    if getattr(args, "indent", None) is not None:
        overrides["emitter__indent"] = args.indent

    if overrides:
        config = config.override(**overrides)
    return config


def configure_logging(args: argparse.Namespace, config: KDLConfig) -> None:
    """Set up logging verbosity from flags, falling back to the configuration."""
    if args.verbose or args.trace:
        level = logging.DEBUG
    elif args.quiet:
        level = logging.ERROR
    else:
        level = getattr(logging, config.global_.logging_level)
    logging.basicConfig(
        level=level,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )


def read_document(processor: KDLProcessor, file_name: str) -> Document:
    """Build a document from an event file or stdin."""
    if file_name == "-":
        return processor.build(read_events(sys.stdin))
    return processor.build(Path(file_name))


def cmd_emit(processor: KDLProcessor, args: argparse.Namespace) -> int:
    """Handle emit command."""
    document = read_document(processor, args.file)
    processor.emit(document, sys.stdout)
    return 0


def cmd_print(processor: KDLProcessor, args: argparse.Namespace) -> int:
    """Handle print command."""
    document = read_document(processor, args.file)
    print(print_document(document))
    return 0


def cmd_flatten(processor: KDLProcessor, args: argparse.Namespace) -> int:
    """Handle flatten command."""
    document = read_document(processor, args.file)
    write_events(processor.flatten(document), sys.stdout)
    return 0


_COMMANDS = {
    "emit": cmd_emit,
    "print": cmd_print,
    "flatten": cmd_flatten,
}


def main(argv: Optional[List[str]] = None) -> int:
    """Main CLI entry point."""
    parser = create_argument_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 1

    try:
        config = load_config(args)
    except (ConfigError, OSError) as e:
        print(f"Error loading configuration: {e}", file=sys.stderr)
        return 1

    configure_logging(args, config)

    try:
        processor = KDLProcessor(config)
        return _COMMANDS[args.command](processor, args)
    except KDLError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    except OSError as e:
        print(f"Error reading {args.file}: {e}", file=sys.stderr)
        return 1
    except KeyboardInterrupt:
        print("\nOperation interrupted by user", file=sys.stderr)
        return 130  # Standard exit code for SIGINT


if __name__ == "__main__":
    sys.exit(main())
