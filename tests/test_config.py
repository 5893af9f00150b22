from __future__ import annotations

import re

import pytest

from book_forge.config import DEFAULT_FORMATS, BuildConfig, OutputFormat, render_meta


def test_defaults_render_every_format_with_dated_names() -> None:
    config = BuildConfig(prefix="trpl", release_date="2017-06-12")

    assert [fmt.name for fmt in config.formats] == ["html", "epub", "tex", "a4.pdf", "letter.pdf"]
    assert config.artifact_name("md") == "trpl-2017-06-12.md"
    assert config.artifact_name("a4.pdf") == "trpl-2017-06-12.a4.pdf"


def test_default_release_date_is_today_in_iso_format() -> None:
    assert re.fullmatch(r"\d{4}-\d{2}-\d{2}", BuildConfig().release_date)


def test_invalid_release_date_is_rejected() -> None:
    with pytest.raises(ValueError, match="release_date"):
        BuildConfig(release_date="12.06.2017")


def test_wrap_width_must_fit_marker() -> None:
    with pytest.raises(ValueError, match="wrap_width"):
        BuildConfig(wrap_width=3)


def test_select_formats_keeps_configured_order() -> None:
    config = BuildConfig(release_date="2017-06-12").select_formats(["a4.pdf", "html"])

    assert [fmt.name for fmt in config.formats] == ["html", "a4.pdf"]


def test_select_unknown_format_fails() -> None:
    with pytest.raises(ValueError, match="docx"):
        BuildConfig(release_date="2017-06-12").select_formats(["docx"])


def test_option_strings_are_split_like_a_shell() -> None:
    fmt = OutputFormat("pdf", "pdf", "--variable 'mainfont=DejaVu Serif' --to=latex")

    assert fmt.option_args() == ["--variable", "mainfont=DejaVu Serif", "--to=latex"]


def test_latex_formats_use_plain_text() -> None:
    plain = {fmt.name for fmt in DEFAULT_FORMATS if fmt.plain}

    assert plain == {"tex", "a4.pdf", "letter.pdf"}


def test_render_meta_substitutes_release_date() -> None:
    meta = "---\ntitle: \"The Book\"\ndate: {release_date}\n...\n"

    assert render_meta(meta, "2017-06-12") == "---\ntitle: \"The Book\"\ndate: 2017-06-12\n...\n"
