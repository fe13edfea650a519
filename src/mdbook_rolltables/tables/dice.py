"""Die selection and roll-label generation.

The number of body rows decides the die.  A few row counts are rolled with
two dice read together (a d6 and a d4 for 24 rows, giving 1.1 ... 6.4); every
other count N is a single dN numbered 1 to N.  Factorisations outside
``COMBINED_DICE`` (12 = 3 x 4, say) deliberately stay single dice.
"""

import logging
from collections.abc import Iterator

from mdbook_rolltables.config import DieConfig
from mdbook_rolltables.events import Event, text_cell

logger = logging.getLogger(__name__)

# Row count -> (first die, second die), in the pairing easiest to read at the table
COMBINED_DICE: dict[int, tuple[int, int]] = {
    16: (4, 4),
    24: (6, 4),
    32: (8, 4),
    36: (6, 6),
    48: (8, 6),
    64: (8, 8),
}

# Single dice found in a standard set (plus d100); anything else is "unusual"
STANDARD_DICE = (4, 6, 8, 10, 12, 20, 100)


def die_notation(row_count: int, config: DieConfig) -> str:
    """Return the header label for a table of *row_count* rows, e.g. 'd6' or 'd6.6'."""
    if row_count in COMBINED_DICE:
        first, second = COMBINED_DICE[row_count]
        return f"d{first}{config.label_separator}{second}"
    return f"d{row_count}"


def _combined_labels(first: int, second: int, separator: str) -> Iterator[list[Event]]:
    # First die is the outer loop: 1.1, 1.2, ..., 1.<second>, 2.1, ...
    for n0 in range(1, first + 1):
        for n1 in range(1, second + 1):
            yield text_cell(f"{n0}{separator}{n1}")


def _single_labels(sides: int) -> Iterator[list[Event]]:
    for value in range(1, sides + 1):
        yield text_cell(str(value))


def dice_labels(row_count: int, config: DieConfig) -> tuple[list[Event], Iterator[list[Event]]]:
    """Return the header cell and a lazy sequence of exactly *row_count* row cells.

    The row labels must be consumed in row order.  When a single die outside
    ``STANDARD_DICE`` is chosen and ``config.warn_unusual_dice`` is set, one
    warning is logged; the labels are the same either way.
    """
    header = text_cell(die_notation(row_count, config))

    if row_count in COMBINED_DICE:
        first, second = COMBINED_DICE[row_count]
        return header, _combined_labels(first, second, config.value_separator)

    if config.warn_unusual_dice and row_count not in STANDARD_DICE:
        logger.warning("Roll table created with unusual dice: d%d", row_count)
    return header, _single_labels(row_count)
