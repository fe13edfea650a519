"""Table extraction from, and reassembly into, the event stream.

``extract_table`` rebuilds a row/column structure from the events between a
``TableStart`` and its ``TableEnd``; ``table_events`` walks that structure and
emits the same nesting again.  Extracting and then reassembling an untouched
table reproduces the original events exactly.
"""

from collections.abc import Iterator
from dataclasses import dataclass, field

from mdbook_rolltables.errors import MalformedTableStream
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
)

Cell = list[Event]
Row = list[Cell]


@dataclass
class Table:
    """A markdown table held in memory for the duration of one rewrite.

    ``rows[0]`` is the header row; ``rows[1:]`` are the body rows.  Each cell
    is the list of events found between its ``CellStart`` and ``CellEnd``.
    """

    alignment: tuple[Alignment, ...]
    rows: list[Row] = field(default_factory=list)

    @property
    def head(self) -> Row:
        return self.rows[0]

    @property
    def body(self) -> list[Row]:
        return self.rows[1:]


# ─── Extraction ──────────────────────────────────────────────────────────────


def extract_table(alignment: tuple[Alignment, ...], events: Iterator[Event]) -> Table:
    """Consume *events* up to and including the matching ``TableEnd`` and return the table.

    *events* must be positioned just after the ``TableStart`` whose alignment is
    passed in.  Raises MalformedTableStream if the nesting is not
    table > row > cell or the stream ends before the table does.
    """
    table = Table(alignment)
    row_open = False
    cell_open = False

    for event in events:
        if isinstance(event, TableEnd):
            if row_open:
                raise MalformedTableStream("Table ended inside an open row")
            return table
        if isinstance(event, (HeadStart, RowStart)):
            if row_open:
                raise MalformedTableStream(f"{type(event).__name__} while row {len(table.rows) - 1} is still open")
            table.rows.append([])
            row_open = True
        elif isinstance(event, (HeadEnd, RowEnd)):
            if not row_open or cell_open:
                raise MalformedTableStream(f"{type(event).__name__} without a matching open row")
            row_open = False
        elif isinstance(event, CellStart):
            if not row_open or cell_open:
                raise MalformedTableStream("Cell start outside of a row")
            table.rows[-1].append([])
            cell_open = True
        elif isinstance(event, CellEnd):
            if not cell_open:
                raise MalformedTableStream("Cell end without a matching open cell")
            cell_open = False
        elif isinstance(event, TableStart):
            raise MalformedTableStream("Nested table start inside a table")
        else:
            if not cell_open:
                raise MalformedTableStream(f"Content {event!r} outside of a table cell")
            table.rows[-1][-1].append(event)

    raise MalformedTableStream(f"Event stream ended before the table was closed ({len(table.rows)} rows read)")


# ─── Reassembly ──────────────────────────────────────────────────────────────


def _row_events(row: Row) -> Iterator[Event]:
    for cell in row:
        yield CellStart()
        yield from cell
        yield CellEnd()


def table_events(table: Table) -> Iterator[Event]:
    """Yield the event sequence for *table*: the exact inverse of ``extract_table``."""
    yield TableStart(table.alignment)
    if table.rows:
        yield HeadStart()
        yield from _row_events(table.head)
        yield HeadEnd()
        for row in table.body:
            yield RowStart()
            yield from _row_events(row)
            yield RowEnd()
    yield TableEnd(table.alignment)
