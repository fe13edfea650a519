"""Tests for mdBook book traversal and the RollTables preprocessor."""

# pylint: disable=missing-class-docstring,missing-function-docstring

import logging

import pytest

from mdbook_rolltables.book import iter_chapters
from mdbook_rolltables.errors import ConfigValidationError
from mdbook_rolltables.preprocessor import MDBOOK_VERSION, RollTables, is_compatible_version

ROLL_TABLE = "| d | Class |\n|---|---|\n| | Warrior |\n| | Thief |\n| | Wizard |\n| | Cleric |\n"


def make_chapter(name: str, content: str, sub_items: list | None = None) -> dict:
    return {
        "Chapter": {
            "name": name,
            "content": content,
            "number": None,
            "sub_items": sub_items or [],
            "path": f"{name.lower()}.md",
            "source_path": f"{name.lower()}.md",
            "parent_names": [],
        }
    }


def make_book(key: str = "sections") -> dict:
    nested = make_chapter("Nested", ROLL_TABLE)
    return {
        key: [
            make_chapter("Intro", "Welcome.\n"),
            "Separator",
            {"PartTitle": "Tables"},
            make_chapter("Classes", ROLL_TABLE, [nested]),
        ],
        "__non_exhaustive": None,
    }


def make_context(options: dict | None = None, version: str = MDBOOK_VERSION) -> dict:
    preprocessor = {"rolltables": options} if options is not None else {}
    return {"root": "/book", "config": {"book": {}, "preprocessor": preprocessor}, "renderer": "html", "mdbook_version": version}


# ===========================================================================
# iter_chapters tests
# ===========================================================================


class TestIterChapters:

    def test_depth_first_order(self):
        names = [chapter["name"] for chapter in iter_chapters(make_book())]
        assert names == ["Intro", "Classes", "Nested"]

    def test_items_key(self):
        names = [chapter["name"] for chapter in iter_chapters(make_book("items"))]
        assert names == ["Intro", "Classes", "Nested"]

    def test_empty_book(self):
        assert not list(iter_chapters({"sections": []}))

    def test_yields_book_dicts(self):
        book = make_book()
        for chapter in iter_chapters(book):
            chapter["content"] = "changed"
        assert book["sections"][0]["Chapter"]["content"] == "changed"


# ===========================================================================
# RollTables tests
# ===========================================================================


class TestRollTables:

    def test_name(self):
        assert RollTables().name == "rolltables"

    @pytest.mark.parametrize("renderer", ["html", "markdown", "epub"])
    def test_supports_renderer(self, renderer):
        assert RollTables().supports_renderer(renderer) is True

    def test_run_rewrites_every_chapter(self):
        book = RollTables().run(make_context(), make_book())
        classes = book["sections"][3]["Chapter"]
        assert "d4" in classes["content"]
        assert "d4" in classes["sub_items"][0]["Chapter"]["content"]
        assert book["sections"][0]["Chapter"]["content"] == "Welcome.\n"

    def test_bad_config_fails_before_processing(self):
        book = make_book()
        with pytest.raises(ConfigValidationError):
            RollTables().run(make_context({"separator": 3}), book)
        assert book["sections"][3]["Chapter"]["content"] == ROLL_TABLE

    def test_version_warning(self, caplog):
        with caplog.at_level(logging.WARNING):
            RollTables().check_version(make_context(version="0.1.0"))
        assert "built against version" in caplog.text

    def test_no_version_warning(self, caplog):
        with caplog.at_level(logging.WARNING):
            RollTables().check_version(make_context())
        assert "built against version" not in caplog.text


class TestIsCompatibleVersion:

    def test_same_version(self):
        assert is_compatible_version(MDBOOK_VERSION) is True

    def test_newer_patch(self):
        assert is_compatible_version("0.4.99", "0.4.40") is True

    def test_older_patch(self):
        assert is_compatible_version("0.4.10", "0.4.40") is False

    def test_next_minor_on_zero_major(self):
        assert is_compatible_version("0.5.0", "0.4.40") is False

    def test_same_major(self):
        assert is_compatible_version("1.3.0", "1.0.0") is True
        assert is_compatible_version("2.0.0", "1.0.0") is False

    def test_garbage(self):
        assert is_compatible_version("not-a-version") is False
