"""Preprocessor configuration.

Options live in the book's ``book.toml`` under ``[preprocessor.rolltables]``
and reach the preprocessor inside the mdBook context JSON.  They are validated
once per run, before any chapter is touched:

    [preprocessor.rolltables]
    separator = "."              # joins the two values of a combined roll, e.g. 3.4
    label-separator = ""         # joins the two die sizes in the header, e.g. d6.6
    warn-unusual-dice = true     # log a warning for d7, d9, ...
"""

import logging
from typing import Any

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, ValidationError, model_validator

from mdbook_rolltables.errors import ConfigValidationError

logger = logging.getLogger(__name__)

PREPROCESSOR_NAME = "rolltables"

# Keys mdBook itself reads from every [preprocessor.*] table
HOST_KEYS = frozenset({"command", "renderer", "renderers", "before", "after", "optional"})


class DieConfig(BaseModel):
    """Validated roll-table options, shared read-only by every chapter of a run.

    Unknown keys and wrong-typed values are rejected (``extra="forbid"``,
    strict mode) rather than silently ignored.
    """

    model_config = ConfigDict(extra="forbid", strict=True, frozen=True)

    value_separator: str = Field(
        default=".",
        validation_alias=AliasChoices("separator", "value-separator", "value_separator"),
    )
    label_separator: str = Field(
        default="",
        validation_alias=AliasChoices("label-separator", "head-separator", "label_separator"),
    )
    warn_unusual_dice: bool = Field(
        default=False,
        validation_alias=AliasChoices("warn-unusual-dice", "warn-on-unusual-dice", "warn_unusual_dice"),
    )

    @model_validator(mode="before")
    @classmethod
    def reject_allow_unusual_dice(cls, data: Any) -> Any:
        """Refuse the inverted-polarity ``allow-unusual-dice`` key instead of guessing its meaning."""
        if isinstance(data, dict) and "allow-unusual-dice" in data:
            raise ValueError("'allow-unusual-dice' is not supported; set 'warn-unusual-dice = true' to be warned about unusual dice")
        return data


def preprocessor_options(context: dict[str, Any], name: str = PREPROCESSOR_NAME) -> dict[str, Any]:
    """Return the raw ``[preprocessor.<name>]`` table from an mdBook context (empty if absent)."""
    preprocessors = context.get("config", {}).get("preprocessor", {})
    options = preprocessors.get(name) or {}
    if not isinstance(options, dict):
        raise ConfigValidationError(f"[preprocessor.{name}] must be a table, got {type(options).__name__}")
    return options


def load_config(context: dict[str, Any]) -> DieConfig:
    """Validate the roll-table options of an mdBook context.

    Raises ConfigValidationError on unknown keys or wrong-typed values.
    """
    options = {key: value for key, value in preprocessor_options(context).items() if key not in HOST_KEYS}
    try:
        config = DieConfig.model_validate(options)
    except ValidationError as exc:
        raise ConfigValidationError(f"Invalid [preprocessor.{PREPROCESSOR_NAME}] configuration:\n{exc}") from exc
    logger.debug("Loaded configuration: %s", config)
    return config
