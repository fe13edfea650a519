"""The ``rolltables`` mdBook preprocessor.

mdBook runs the preprocessor with ``[context, book]`` as JSON on stdin and
expects the modified book as JSON on stdout.  Before a build it also asks
``mdbook-rolltables supports <renderer>`` and reads the answer from the exit
status.
"""

import json
import logging
from typing import IO, Any

from packaging.version import InvalidVersion, Version

from mdbook_rolltables.book import iter_chapters
from mdbook_rolltables.config import PREPROCESSOR_NAME, load_config
from mdbook_rolltables.errors import RollTablesError
from mdbook_rolltables.tables.pipeline import process_chapter

logger = logging.getLogger(__name__)

# mdBook release the JSON protocol handling was written against
MDBOOK_VERSION = "0.4.40"


def parse_input(stream: IO[bytes]) -> tuple[dict[str, Any], dict[str, Any]]:
    """Read the ``[context, book]`` pair mdBook writes to the preprocessor's stdin.

    *stream* is binary: mdBook always writes UTF-8, whatever the locale's stdio encoding is.
    """
    try:
        payload = json.loads(stream.read().decode("utf-8"))
    except (UnicodeDecodeError, json.JSONDecodeError) as exc:
        raise RollTablesError(f"Unable to parse the input from mdBook: {exc}") from exc
    if not isinstance(payload, list) or len(payload) != 2 or not all(isinstance(part, dict) for part in payload):
        raise RollTablesError("Expected a JSON array [context, book] on stdin")
    context, book = payload
    return context, book


def is_compatible_version(mdbook_version: str, built_against: str = MDBOOK_VERSION) -> bool:
    """Return True if *mdbook_version* satisfies the caret requirement ``^built_against``.

    Caret rules: same major version, or same minor version while the major is 0,
    and not older than *built_against*.
    """
    try:
        actual = Version(mdbook_version)
        required = Version(built_against)
    except InvalidVersion:
        return False
    if actual < required:
        return False
    if required.major > 0:
        return actual.major == required.major
    return actual.major == 0 and actual.minor == required.minor


class RollTables:
    """Preprocessor entry points: renderer support check and the book rewrite."""

    name = PREPROCESSOR_NAME

    def supports_renderer(self, renderer: str) -> bool:
        """All renderers are supported: the output is ordinary markdown."""
        logger.debug("Renderer %r supported", renderer)
        return True

    def check_version(self, context: dict[str, Any]) -> None:
        """Warn (never fail) when the calling mdBook is outside the supported version range."""
        mdbook_version = str(context.get("mdbook_version", ""))
        if not is_compatible_version(mdbook_version):
            logger.warning(
                "The %s plugin was built against version %s of mdbook, but we're being called from version %s",
                self.name,
                MDBOOK_VERSION,
                mdbook_version or "unknown",
            )

    def run(self, context: dict[str, Any], book: dict[str, Any]) -> dict[str, Any]:
        """Rewrite every chapter of *book* in place and return it.

        The configuration is validated before any chapter is processed; any
        fatal error aborts the whole run.
        """
        config = load_config(context)
        n_chapters = 0
        for chapter in iter_chapters(book):
            name = chapter.get("name", "")
            try:
                chapter["content"] = process_chapter(chapter.get("content", ""), config, name)
            except RollTablesError:
                logger.error("Failed to process chapter %r", name)
                raise
            n_chapters += 1
        logger.debug("Processed %d chapters", n_chapters)
        return book
