"""Exception hierarchy for the roll-table preprocessor.

Every fatal condition derives from RollTablesError so the CLI can report it
and exit non-zero without catching unrelated bugs.  Tables that simply do not
match the roll-table pattern are not errors and never raise.
"""


class RollTablesError(Exception):
    """Base class for all fatal preprocessor errors."""


class ConfigValidationError(RollTablesError, ValueError):
    """Raised when the [preprocessor.rolltables] table has unknown keys or wrong-typed values."""


class MalformedTableStream(RollTablesError, ValueError):
    """Raised when table tokens are not nested table > row > cell as expected."""


class GeneratorLengthMismatch(RollTablesError, RuntimeError):
    """Raised when the dice generator yields a different number of labels than there are rows."""
