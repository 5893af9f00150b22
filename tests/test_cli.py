from __future__ import annotations

import logging
from pathlib import Path

import pytest

from book_forge import cli
from book_forge.config import OutputFormat
from book_forge.errors import RendererError


@pytest.fixture
def book_dir(tmp_path: Path) -> Path:
    book = tmp_path / "book"
    book.mkdir()
    (book / "SUMMARY.md").write_text("# Summary\n\n* [One](ch1.md)\n", encoding="utf-8")
    (book / "ch1.md").write_text("# One\n\nBody\n", encoding="utf-8")
    return book


def _argv(book_dir: Path, *extra: str) -> list[str]:
    return [
        "--source",
        str(book_dir),
        "--output-dir",
        str(book_dir.parent / "dist"),
        "--prefix",
        "trpl",
        "--release-date",
        "2017-06-12",
        *extra,
    ]


def test_markdown_only_writes_merged_book(book_dir: Path, capsys: pytest.CaptureFixture[str]) -> None:
    assert cli.main(_argv(book_dir, "--markdown-only")) == 0

    target = book_dir.parent / "dist" / "trpl-2017-06-12.md"
    assert "# One {#sec--ch1}\n\n### One\n\nBody\n" in target.read_text(encoding="utf-8")
    assert f"Wrote {target}" in capsys.readouterr().out


def test_missing_source_directory(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    assert cli.main(["--source", str(tmp_path / "nope")]) == 1
    assert "was not found" in capsys.readouterr().err


def test_invalid_release_date_is_rejected(book_dir: Path) -> None:
    assert cli.main(_argv(book_dir, "--release-date", "12/06/2017", "--markdown-only")) == 1


def test_deep_nesting_fails_before_writing(book_dir: Path, capsys: pytest.CaptureFixture[str]) -> None:
    (book_dir / "SUMMARY.md").write_text(
        "* [A](a.md)\n    * [B](b.md)\n        * [C](c.md)\n", encoding="utf-8"
    )

    assert cli.main(_argv(book_dir, "--markdown-only")) == 1
    assert "line 3" in capsys.readouterr().err
    assert not (book_dir.parent / "dist").exists()


def test_renderer_failure_exits_with_two(
    book_dir: Path, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    def fail(self: object, markdown: str, fmt: OutputFormat, dialect: str) -> bytes:
        raise RendererError(fmt.name, 43, stderr="no latex")

    monkeypatch.setattr(cli.PandocRenderer, "render", fail)

    assert cli.main(_argv(book_dir, "--format", "a4.pdf")) == 2
    assert "no latex" in capsys.readouterr().err
    assert (book_dir.parent / "dist" / "trpl-2017-06-12.md").exists()
    assert not (book_dir.parent / "dist" / "trpl-2017-06-12.a4.pdf").exists()


def test_keep_going_renders_the_other_formats(
    book_dir: Path, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    def render(self: object, markdown: str, fmt: OutputFormat, dialect: str) -> bytes:
        if fmt.name == "epub":
            raise RendererError(fmt.name, 1, stderr="bad epub")
        return fmt.name.encode("utf-8")

    monkeypatch.setattr(cli.PandocRenderer, "render", render)

    assert cli.main(_argv(book_dir, "--format", "html", "--format", "epub", "--keep-going")) == 2
    dist = book_dir.parent / "dist"
    assert (dist / "trpl-2017-06-12.html").read_bytes() == b"html"
    assert "Failed to render epub" in capsys.readouterr().err


def test_unclosed_fence_is_reported_once(
    book_dir: Path, caplog: pytest.LogCaptureFixture, capsys: pytest.CaptureFixture[str]
) -> None:
    (book_dir / "ch1.md").write_text("```rust\nfn broken() {\n", encoding="utf-8")

    with caplog.at_level(logging.INFO, logger="book_forge"):
        assert cli.main(_argv(book_dir, "--markdown-only")) == 0

    warnings = [record for record in caplog.records if "never closed" in record.getMessage()]
    assert len(warnings) == 1
    assert warnings[0].levelno == logging.WARNING
    assert "Warning:" not in capsys.readouterr().err
