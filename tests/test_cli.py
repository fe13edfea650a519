"""Tests for the mdbook-rolltables command line."""

# pylint: disable=missing-class-docstring,missing-function-docstring

import io
import json
import sys

import pytest

from mdbook_rolltables.cli import build_parser, main

CONTENT = "| d | Loot |\n|:-:|---|\n| | Gold |\n| | Gem |\n| | Sword |\n| | Nothing |\n| | Map |\n| | Potion |\n"


def make_payload(options: dict | None = None, content: str = CONTENT) -> str:
    context = {
        "root": "/book",
        "config": {"book": {"title": "Loot"}, "preprocessor": {"rolltables": options or {"command": "mdbook-rolltables"}}},
        "renderer": "html",
        "mdbook_version": "0.4.40",
    }
    book = {
        "sections": [
            {"Chapter": {"name": "Loot", "content": content, "number": [1], "sub_items": [], "path": "loot.md", "source_path": "loot.md", "parent_names": []}}
        ],
        "__non_exhaustive": None,
    }
    # mdBook writes raw UTF-8, not \u escapes
    return json.dumps([context, book], ensure_ascii=False)


def make_stdin(payload: str, encoding: str = "utf-8") -> io.TextIOWrapper:
    """Stdin as mdBook provides it: UTF-8 bytes, decoded by the text layer with *encoding*."""
    return io.TextIOWrapper(io.BytesIO(payload.encode("utf-8")), encoding=encoding)


class TestParser:

    def test_supports_subcommand(self):
        args = build_parser().parse_args(["supports", "html"])
        assert args.command == "supports"
        assert args.renderer == "html"

    def test_no_subcommand(self):
        assert build_parser().parse_args([]).command is None

    def test_supports_requires_renderer(self):
        with pytest.raises(SystemExit):
            build_parser().parse_args(["supports"])


class TestMain:

    def test_supports_exit_status(self):
        assert main(["supports", "html"]) == 0

    def test_preprocess_book(self, monkeypatch, capsys):
        monkeypatch.setattr(sys, "stdin", make_stdin(make_payload()))
        assert main([]) == 0
        book = json.loads(capsys.readouterr().out)
        content = book["sections"][0]["Chapter"]["content"]
        assert "d6" in content
        assert "Potion" in content

    def test_invalid_config_exits_non_zero(self, monkeypatch, capsys):
        monkeypatch.setattr(sys, "stdin", make_stdin(make_payload({"warn-unusual-dice": "sure"})))
        assert main([]) == 1
        assert capsys.readouterr().out == ""

    def test_invalid_json_exits_non_zero(self, monkeypatch, capsys):
        monkeypatch.setattr(sys, "stdin", make_stdin("{not json"))
        assert main([]) == 1
        assert capsys.readouterr().out == ""

    def test_wrong_payload_shape(self, monkeypatch, capsys):
        monkeypatch.setattr(sys, "stdin", make_stdin(json.dumps({"context": {}, "book": {}})))
        assert main([]) == 1
        assert capsys.readouterr().out == ""

    def test_utf8_input_under_non_utf8_locale(self, monkeypatch, capsys):
        """Chapter text is read as UTF-8 even when the stdio encoding is cp1252."""
        content = "Épée ☃\n\n" + CONTENT
        monkeypatch.setattr(sys, "stdin", make_stdin(make_payload(content=content), encoding="cp1252"))
        assert main([]) == 0
        book = json.loads(capsys.readouterr().out)
        output = book["sections"][0]["Chapter"]["content"]
        assert output.startswith("Épée ☃\n")
        assert "d6" in output

    def test_invalid_utf8_exits_non_zero(self, monkeypatch, capsys):
        monkeypatch.setattr(sys, "stdin", io.TextIOWrapper(io.BytesIO(b"[\xff\xfe]"), encoding="latin-1"))
        assert main([]) == 1
        assert capsys.readouterr().out == ""
