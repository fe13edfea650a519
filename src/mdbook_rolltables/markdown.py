"""Bridge between chapter markdown and the event stream.

Tokenizing is done by markdown-it-py (CommonMark plus the GFM table rule) and
rendering back to markdown by mdformat's ``MDRenderer`` with the
mdformat-tables plugin.  In between, ``to_events`` flattens the markdown-it
token list into the table-aware event stream and ``from_events`` rebuilds the
token list the renderer expects.

markdown-it wraps the header cells in a ``tr`` inside ``thead`` and the body
rows in ``tbody``; those wrappers carry no information of their own, so they
are folded into ``HeadStart``/``RowStart`` here and regenerated on the way back.

Reference-link labels are stored so ``[text][label]`` links render as references.
Like ``mdformat.text``, the renderer only writes back the link reference
definitions that are used: a definition such as ``[1]: http://x`` whose only
``[1]`` in the text is escaped is dropped from the rendered chapter.
"""

import functools
import logging
from collections.abc import Iterable, Iterator, Sequence
from typing import Any

from markdown_it import MarkdownIt
from markdown_it.token import Token
from mdformat.plugins import PARSER_EXTENSIONS
from mdformat.renderer import MDRenderer

from mdbook_rolltables.errors import MalformedTableStream, RollTablesError
from mdbook_rolltables.events import (
    Alignment,
    CellEnd,
    CellStart,
    Event,
    HeadEnd,
    HeadStart,
    Other,
    RowEnd,
    RowStart,
    TableEnd,
    TableStart,
    Text,
)

logger = logging.getLogger(__name__)


# ─── Tokenizer / Renderer Setup ──────────────────────────────────────────────

# Options read by the mdformat renderer; "keep" preserves the author's line wrapping
MDFORMAT_OPTIONS = {"wrap": "keep", "number": False, "end_of_line": "lf", "validate": True}

# markdown-it encodes column alignment as an inline style on every th/td
_ALIGN_STYLE_PREFIX = "text-align:"


@functools.cache
def _markdown_it() -> MarkdownIt:
    """Build the shared markdown-it instance, wired for mdformat rendering with table support."""
    try:
        tables_plugin = PARSER_EXTENSIONS["tables"]
    except KeyError as exc:
        raise RollTablesError("The mdformat 'tables' plugin is not installed (pip install mdformat-tables)") from exc

    mdit = MarkdownIt("commonmark", renderer_cls=MDRenderer)
    mdit.options["mdformat"] = dict(MDFORMAT_OPTIONS)
    # keep reference-link labels so [text][label] links are not inlined on render
    mdit.options["store_labels"] = True
    mdit.options["codeformatters"] = {}
    mdit.options["parser_extension"] = []
    tables_plugin.update_mdit(mdit)
    mdit.options["parser_extension"].append(tables_plugin)
    logger.debug("Initialised markdown-it with rules: %s", mdit.get_active_rules())
    return mdit


def parse_markdown(text: str) -> tuple[list[Token], dict[str, Any]]:
    """Tokenize *text*; returns the token list and the parser env (reference definitions etc.)."""
    env: dict[str, Any] = {}
    tokens = _markdown_it().parse(text, env)
    return tokens, env


def render_markdown(tokens: Sequence[Token], env: dict[str, Any]) -> str:
    """Render a markdown-it token list back to markdown text.

    *env* must be the one returned by ``parse_markdown`` so that reference-style
    link definitions survive the round trip.
    """
    mdit = _markdown_it()
    return mdit.renderer.render(tokens, mdit.options, env)


# ─── Tokens -> Events ────────────────────────────────────────────────────────


def _cell_alignment(token: Token) -> Alignment:
    """Return the alignment encoded in a th/td token's style attribute."""
    style = token.attrs.get("style", "") if token.attrs else ""
    if isinstance(style, str) and style.startswith(_ALIGN_STYLE_PREFIX):
        return Alignment(style[len(_ALIGN_STYLE_PREFIX) :])
    return Alignment.NONE


def _read_alignment(tokens: Sequence[Token], table_open_idx: int) -> tuple[Alignment, ...]:
    """Collect the per-column alignment from the header cells following a table_open token."""
    alignment: list[Alignment] = []
    for token in tokens[table_open_idx + 1 :]:
        if token.type == "thead_close":
            break
        if token.type == "th_open":
            alignment.append(_cell_alignment(token))
    return tuple(alignment)


def to_events(tokens: Sequence[Token]) -> Iterator[Event]:
    """Flatten a markdown-it token list into the event stream.

    Cell contents are split into their inline children: ``text`` children
    become ``Text`` and everything else (emphasis, code spans, links...) is
    wrapped in ``Other``.  Tokens outside tables are wrapped whole.
    """
    alignment: tuple[Alignment, ...] = ()
    in_head = False
    in_cell = False

    for idx, token in enumerate(tokens):
        kind = token.type
        if kind == "table_open":
            alignment = _read_alignment(tokens, idx)
            yield TableStart(alignment)
        elif kind == "table_close":
            yield TableEnd(alignment)
        elif kind == "thead_open":
            in_head = True
            yield HeadStart()
        elif kind == "thead_close":
            in_head = False
            yield HeadEnd()
        elif kind in ("tbody_open", "tbody_close"):
            continue
        elif kind == "tr_open":
            if not in_head:
                yield RowStart()
        elif kind == "tr_close":
            if not in_head:
                yield RowEnd()
        elif kind in ("th_open", "td_open"):
            in_cell = True
            yield CellStart()
        elif kind in ("th_close", "td_close"):
            in_cell = False
            yield CellEnd()
        elif kind == "inline" and in_cell:
            for child in token.children or []:
                yield Text(child.content) if child.type == "text" else Other(child)
        else:
            yield Other(token)


# ─── Events -> Tokens ────────────────────────────────────────────────────────


class _TokenBuilder:
    """Rebuilds markdown-it tokens from events, tracking table nesting as it goes."""

    def __init__(self) -> None:
        self.tokens: list[Token] = []
        self._level = 0
        self._alignment: tuple[Alignment, ...] = ()
        self._cell_tag = "td"
        self._column = 0
        self._body_open = False
        self._cell_children: list[Token] | None = None

    def _push(self, kind: str, tag: str, nesting: int, attrs: dict | None = None) -> None:
        if nesting < 0:
            self._level -= 1
        self.tokens.append(Token(kind, tag, nesting, attrs=attrs or {}, level=self._level, block=True))
        if nesting > 0:
            self._level += 1

    def _cell_attrs(self) -> dict:
        if self._column < len(self._alignment) and self._alignment[self._column] is not Alignment.NONE:
            return {"style": _ALIGN_STYLE_PREFIX + self._alignment[self._column].value}
        return {}

    def feed(self, event: Event) -> None:  # pylint: disable=too-many-branches
        """Append the token(s) corresponding to one event."""
        if isinstance(event, TableStart):
            self._alignment = event.alignment
            self._body_open = False
            self._push("table_open", "table", 1)
        elif isinstance(event, TableEnd):
            if self._body_open:
                self._push("tbody_close", "tbody", -1)
            self._push("table_close", "table", -1)
        elif isinstance(event, HeadStart):
            self._cell_tag = "th"
            self._column = 0
            self._push("thead_open", "thead", 1)
            self._push("tr_open", "tr", 1)
        elif isinstance(event, HeadEnd):
            self._push("tr_close", "tr", -1)
            self._push("thead_close", "thead", -1)
        elif isinstance(event, RowStart):
            if not self._body_open:
                self._body_open = True
                self._push("tbody_open", "tbody", 1)
            self._cell_tag = "td"
            self._column = 0
            self._push("tr_open", "tr", 1)
        elif isinstance(event, RowEnd):
            self._push("tr_close", "tr", -1)
        elif isinstance(event, CellStart):
            self._push(f"{self._cell_tag}_open", self._cell_tag, 1, self._cell_attrs())
            self._cell_children = []
        elif isinstance(event, CellEnd):
            self._close_cell()
        elif isinstance(event, Text):
            if self._cell_children is None:
                raise MalformedTableStream(f"Text {event.value!r} outside a table cell")
            self._cell_children.append(Token("text", "", 0, content=event.value))
        elif self._cell_children is not None:
            self._cell_children.append(event.token)
        else:
            self.tokens.append(event.token)

    def _close_cell(self) -> None:
        if self._cell_children is None:
            raise MalformedTableStream("Cell end without an open cell")
        children = self._cell_children
        content = "".join(child.content for child in children)
        # mdformat-tables renders every cell from exactly one inline child, even when empty
        self.tokens.append(Token("inline", "", 0, content=content, children=children, level=self._level, block=True))
        self._cell_children = None
        self._push(f"{self._cell_tag}_close", self._cell_tag, -1)
        self._column += 1


def from_events(events: Iterable[Event]) -> list[Token]:
    """Rebuild the markdown-it token list for an event stream (inverse of ``to_events``)."""
    builder = _TokenBuilder()
    for event in events:
        builder.feed(event)
    return builder.tokens
