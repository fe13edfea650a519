"""Shared test helpers and fixtures."""

import pytest

from mdbook_rolltables.config import DieConfig
from mdbook_rolltables.events import (
    Alignment,
    CellEnd,
    CellStart,
    Event,
    HeadEnd,
    HeadStart,
    RowEnd,
    RowStart,
    TableEnd,
    TableStart,
    Text,
)


def cell_events(value: str) -> list[Event]:
    """Events for one cell; an empty string gives an empty cell."""
    content: list[Event] = [Text(value)] if value else []
    return [CellStart(), *content, CellEnd()]


def make_table_events(header: list[str], rows: list[list[str]], alignment: tuple[Alignment, ...] | None = None) -> list[Event]:
    """Build the event sequence of a table from plain strings."""
    alignment = alignment if alignment is not None else tuple(Alignment.NONE for _ in header)
    events: list[Event] = [TableStart(alignment), HeadStart()]
    for value in header:
        events.extend(cell_events(value))
    events.append(HeadEnd())
    for row in rows:
        events.append(RowStart())
        for value in row:
            events.extend(cell_events(value))
        events.append(RowEnd())
    events.append(TableEnd(alignment))
    return events


@pytest.fixture
def default_config() -> DieConfig:
    return DieConfig()
