"""Command-line entry point (``mdbook-rolltables``).

Usage:
    mdbook-rolltables supports <renderer>   # exit status 0 = supported, 1 = not
    mdbook-rolltables < input.json          # [context, book] in, book out

Logs go to stderr; stdout carries only the book JSON.  The log level comes from
ROLLTABLES_LOG_LEVEL (default INFO), which may be set in a .env file.
"""

import argparse
import json
import logging
import os
import sys

from dotenv import load_dotenv

from mdbook_rolltables.errors import RollTablesError
from mdbook_rolltables.preprocessor import RollTables, parse_input

logger = logging.getLogger(__name__)

_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="mdbook-rolltables", description="mdBook preprocessor that fills in roll tables for RPG books")
    subparsers = parser.add_subparsers(dest="command")
    supports = subparsers.add_parser("supports", help="Check whether a renderer is supported (exit status 0 = yes)")
    supports.add_argument("renderer", help="Name of the mdBook renderer, e.g. html")
    return parser


def _configure_logging() -> None:
    load_dotenv()
    level = os.getenv("ROLLTABLES_LOG_LEVEL", "INFO").upper()
    if level not in _LOG_LEVELS:
        level = "INFO"
    logging.basicConfig(level=level, format="%(asctime)s - %(levelname)s - %(message)s", stream=sys.stderr)


def main(argv: list[str] | None = None) -> int:
    """Run the preprocessor and return the process exit status."""
    args = build_parser().parse_args(argv)
    _configure_logging()
    preprocessor = RollTables()

    if args.command == "supports":
        return 0 if preprocessor.supports_renderer(args.renderer) else 1

    try:
        context, book = parse_input(sys.stdin.buffer)
        preprocessor.check_version(context)
        book = preprocessor.run(context, book)
    except RollTablesError as exc:
        logger.error("%s", exc)
        return 1

    # ensure_ascii output is valid in any stdout encoding
    json.dump(book, sys.stdout, ensure_ascii=True)
    return 0


if __name__ == "__main__":
    sys.exit(main())
