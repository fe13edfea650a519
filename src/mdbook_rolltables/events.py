"""Token-stream event types.

A chapter is handled as a flat stream of events.  Only the table structure and
plain text inside table cells are modelled explicitly; every other token the
markdown tokenizer produces travels through the pipeline wrapped in ``Other``
and is never looked at.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any


class Alignment(str, Enum):
    """Column alignment, as given by the table's delimiter row."""

    NONE = "none"
    LEFT = "left"
    CENTER = "center"
    RIGHT = "right"


# ─── Structural Events ───────────────────────────────────────────────────────


@dataclass(frozen=True)
class TableStart:
    alignment: tuple[Alignment, ...]


@dataclass(frozen=True)
class TableEnd:
    alignment: tuple[Alignment, ...]


@dataclass(frozen=True)
class HeadStart:
    pass


@dataclass(frozen=True)
class HeadEnd:
    pass


@dataclass(frozen=True)
class RowStart:
    pass


@dataclass(frozen=True)
class RowEnd:
    pass


@dataclass(frozen=True)
class CellStart:
    pass


@dataclass(frozen=True)
class CellEnd:
    pass


# ─── Content Events ──────────────────────────────────────────────────────────


@dataclass(frozen=True)
class Text:
    """Plain text inside a table cell."""

    value: str


@dataclass(frozen=True)
class Other:
    """Any tokenizer token the pipeline must preserve verbatim (emphasis, code, links, whole paragraphs...)."""

    token: Any


Event = TableStart | TableEnd | HeadStart | HeadEnd | RowStart | RowEnd | CellStart | CellEnd | Text | Other


def text_cell(value: str) -> list[Event]:
    """Build the token sequence of a cell holding a single piece of text."""
    return [Text(value)]
