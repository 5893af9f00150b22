from __future__ import annotations

import pytest

from book_forge.errors import UnsupportedNestingError
from book_forge.toc import Chapter, GeneratedHeading, chapter_slug, normalize_title, parse_chapters

SUMMARY = """# Summary

Some free text that is not a chapter.

* [Getting Started](getting-started.md)
    * [Installing Rust](installing-rust.md)
    * [Hello, world!](hello-world.md)
* [Syntax and Semantics](syntax-and-semantics.md)
\t* [Variable Bindings](variable-bindings.md)
* [Glossary](glossary.md)
"""


def test_parse_chapters_keeps_document_order_and_depth() -> None:
    chapters = parse_chapters(SUMMARY)

    assert chapters == [
        Chapter("getting-started.md", "Getting Started", 0),
        Chapter("installing-rust.md", "Installing Rust", 1),
        Chapter("hello-world.md", "Hello, world!", 1),
        Chapter("syntax-and-semantics.md", "Syntax and Semantics", 0),
        Chapter("variable-bindings.md", "Variable Bindings", 1),
        Chapter("glossary.md", "Glossary", 0),
    ]


def test_free_text_and_links_without_bullets_are_skipped() -> None:
    toc = "[Introduction](README.md)\nsee * [not a bullet](x.md) here\n- [Dash](dash.md)\n"

    assert parse_chapters(toc) == [Chapter("dash.md", "Dash", 0)]


def test_any_indentation_selects_nested_depth() -> None:
    chapters = parse_chapters("* [A](a.md)\n  * [B](b.md)\n  * [C](c.md)\n")

    assert [chapter.depth for chapter in chapters] == [0, 1, 1]


def test_first_entry_indented_is_nested() -> None:
    assert parse_chapters("   * [Lonely](lonely.md)\n")[0].depth == 1


def test_third_level_is_rejected() -> None:
    toc = "* [A](a.md)\n  * [B](b.md)\n    * [C](c.md)\n"

    with pytest.raises(UnsupportedNestingError, match="line 3") as excinfo:
        parse_chapters(toc)

    assert excinfo.value.title == "C"
    assert excinfo.value.depth == 2


def test_dedent_returns_to_matching_level() -> None:
    toc = "* [A](a.md)\n    * [B](b.md)\n  * [C](c.md)\n* [D](d.md)\n"

    assert [chapter.depth for chapter in parse_chapters(toc)] == [0, 1, 1, 0]


def test_slug_strips_directory_and_extension() -> None:
    assert chapter_slug("src/ch01-02-hello.md") == "ch01-02-hello"
    assert chapter_slug("nested\\dir\\intro.md") == "intro"
    assert chapter_slug("appendix.v2.md") == "appendix.v2"
    assert Chapter("ch1.md", "Title").slug == "ch1"


def test_generated_heading_uses_depth_and_slug() -> None:
    top = GeneratedHeading.for_chapter(Chapter("ch1.md", "Title", 0))
    nested = GeneratedHeading.for_chapter(Chapter("dir/ch1-1.md", "Nested", 1))

    assert top.render() == "# Title {#sec--ch1}"
    assert nested.level == 2
    assert nested.render() == "## Nested {#sec--ch1-1}"


def test_title_numerals_are_optional() -> None:
    toc = "* [II: Syntax and Semantics](syntax.md)\n"

    assert parse_chapters(toc)[0].title == "II: Syntax and Semantics"
    assert parse_chapters(toc, strip_title_numerals=True)[0].title == "Syntax and Semantics"
    assert normalize_title("Iterators") == "Iterators"
