"""Helpers for mdBook's JSON book model.

A book is ``{"sections": [...]}`` (``"items"`` in newer mdBook releases).  Each
item is ``{"Chapter": {...}}``, ``{"PartTitle": "..."}`` or the string
``"Separator"``; chapters nest further chapters under ``sub_items``.
"""

from collections.abc import Iterator
from typing import Any


def _book_items(book: dict[str, Any]) -> list:
    if "items" in book:
        return book["items"]
    return book.get("sections", [])


def _walk(items: list) -> Iterator[dict[str, Any]]:
    for item in items:
        # Separators are bare strings; part titles have no content
        if not isinstance(item, dict) or "Chapter" not in item:
            continue
        chapter = item["Chapter"]
        yield chapter
        yield from _walk(chapter.get("sub_items", []))


def iter_chapters(book: dict[str, Any]) -> Iterator[dict[str, Any]]:
    """Yield every chapter dict of *book* depth-first, in reading order.

    The dicts are the book's own, so assigning ``chapter["content"]`` edits the book.
    """
    yield from _walk(_book_items(book))
