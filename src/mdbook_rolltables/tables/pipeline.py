"""Chapter-level roll-table rewriting.

Runs a single pass over a chapter's event stream.  Everything outside tables is
passed through untouched; each table is extracted, checked against the
roll-table pattern, labelled if it matches, and reassembled in place.

Pipeline position: chapter markdown -> markdown.to_events -> transform_events
-> markdown.from_events -> rendered markdown.
"""

import logging
from collections.abc import Iterable, Iterator
from dataclasses import dataclass

from mdbook_rolltables.config import DieConfig
from mdbook_rolltables.errors import GeneratorLengthMismatch
from mdbook_rolltables.events import Event, TableStart
from mdbook_rolltables.markdown import from_events, parse_markdown, render_markdown, to_events
from mdbook_rolltables.tables.detection import is_roll_table
from mdbook_rolltables.tables.dice import dice_labels
from mdbook_rolltables.tables.extraction import Table, extract_table, table_events

logger = logging.getLogger(__name__)


@dataclass
class TransformStats:
    """Per-chapter counters, for logging."""

    tables: int = 0
    rewritten: int = 0


# ─── Table Labelling ─────────────────────────────────────────────────────────


def label_table(table: Table, config: DieConfig) -> None:
    """Overwrite the roll column of *table* in place: die notation in the header, ranges in the rows."""
    rows = table.body
    header, labels = dice_labels(len(rows), config)
    label_cells = list(labels)
    if len(label_cells) != len(rows):
        raise GeneratorLengthMismatch(f"Dice generator produced {len(label_cells)} labels for {len(rows)} rows")

    table.head[0] = header
    for row, cell in zip(rows, label_cells):
        row[0] = cell


# ─── Event Stream Pass ───────────────────────────────────────────────────────


def transform_events(events: Iterable[Event], config: DieConfig, stats: TransformStats | None = None) -> Iterator[Event]:
    """Yield *events* with every roll table labelled; all other events pass through unchanged."""
    stream = iter(events)
    for event in stream:
        if not isinstance(event, TableStart):
            yield event
            continue

        table = extract_table(event.alignment, stream)
        if stats is not None:
            stats.tables += 1
        if is_roll_table(table):
            label_table(table, config)
            if stats is not None:
                stats.rewritten += 1
            logger.debug("Labelled roll table with %d rows", len(table.body))
        yield from table_events(table)


def process_chapter(content: str, config: DieConfig, name: str = "") -> str:
    """Rewrite the roll tables in one chapter's markdown and return the re-rendered text."""
    tokens, env = parse_markdown(content)
    stats = TransformStats()
    output = from_events(transform_events(to_events(tokens), config, stats))
    logger.debug("Chapter %r: %d tables, %d roll tables rewritten", name, stats.tables, stats.rewritten)
    return render_markdown(output, env)
