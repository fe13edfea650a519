"""Roll-table detection.

A table is a roll table when its header's first cell is exactly the text ``d``
and no body row has anything in its first column.  Everything else is left
alone.
"""

from mdbook_rolltables.events import Text
from mdbook_rolltables.tables.extraction import Table

# Header text that marks the first column as the roll column
ROLL_MARKER = "d"


def is_roll_table(table: Table) -> bool:
    """Return True if *table* should have its first column filled with dice ranges."""
    if not table.rows or not table.head:
        return False
    if table.head[0] != [Text(ROLL_MARKER)]:
        return False
    # A row without any cells cannot carry a roll value
    return all(row and not row[0] for row in table.body)
