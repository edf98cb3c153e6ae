"""Command-line interface for running the optimizer outside Lambda."""

import sys
import json
import argparse
import logging
from typing import Any, Dict, List, Optional

from . import __version__
from .core import ImageOptimizerError, get_logger
from .handler import build_pipeline, process_event


def _event_for_keys(keys: List[str]) -> Dict[str, Any]:
    """Build a minimal S3 event naming the given object keys."""
    return {"Records": [{"s3": {"object": {"key": key, "size": 0}}} for key in keys]}


def _load_event(path: str) -> Dict[str, Any]:
    if path == "-":
        return json.load(sys.stdin)
    with open(path, "r", encoding="utf-8") as fh:
        return json.load(fh)


def build_parser() -> argparse.ArgumentParser:
    parser: argparse.ArgumentParser = argparse.ArgumentParser(
        prog="image-optimizer",
        description="Image Optimizer - compress and resize S3 images through Tinify",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Replay a captured S3 event
  image-optimizer invoke event.json

  # Optimize specific objects of the images bucket
  image-optimizer optimize photos/42_uncompressed.jpg

  # Show version
  image-optimizer version
        """,
    )
    parser.add_argument("--debug", action="store_true", help="Enable debug logging")

    subparsers: argparse._SubParsersAction = parser.add_subparsers(
        dest="command", help="Available commands"
    )

    invoke_parser = subparsers.add_parser(
        "invoke", help="Run the Lambda handler against an S3 event JSON file"
    )
    invoke_parser.add_argument("event_file", help="Path to the event JSON ('-' for stdin)")

    optimize_parser = subparsers.add_parser(
        "optimize", help="Optimize the given object keys"
    )
    optimize_parser.add_argument("keys", nargs="+", help="Object keys to optimize")

    subparsers.add_parser("version", help="Show version information")

    return parser


def main(argv: Optional[List[str]] = None) -> None:
    """
    Entry point for the `image-optimizer` CLI.

    `invoke` and `optimize` share the Lambda code path; the summary is
    printed as JSON. Any failure exits with status 1.
    """
    parser = build_parser()
    args: argparse.Namespace = parser.parse_args(argv)

    if args.command == "version":
        print("Image Optimizer CLI")
        print(f"Version {__version__}")
        sys.exit(0)

    if args.command not in ("invoke", "optimize"):
        parser.print_help()
        sys.exit(1)

    logger = get_logger("image-optimizer.cli")
    if args.debug:
        logger.setLevel(logging.DEBUG)
        get_logger("image-optimizer").setLevel(logging.DEBUG)

    try:
        if args.command == "invoke":
            event = _load_event(args.event_file)
        else:
            event = _event_for_keys(args.keys)

        summary = process_event(event, build_pipeline())
    except KeyboardInterrupt:
        logger.warning("Optimization interrupted by user.")
        sys.exit(1)
    except (ImageOptimizerError, OSError, ValueError) as e:
        logger.error(f"Optimization failed: {e}", exc_info=args.debug)
        sys.exit(1)

    print(json.dumps(summary, indent=2))
    sys.exit(0)


if __name__ == "__main__":
    main()
