from __future__ import annotations

from pathlib import Path

from book_forge.tui import build_command, resolve_book_dir


def test_resolve_book_dir_from_summary_or_directory(tmp_path: Path) -> None:
    book = tmp_path / "book"
    book.mkdir()
    (book / "SUMMARY.md").write_text("* [One](ch1.md)\n", encoding="utf-8")
    (book / "ch1.md").write_text("Body\n", encoding="utf-8")

    assert resolve_book_dir(book) == book
    assert resolve_book_dir(book / "SUMMARY.md") == book
    assert resolve_book_dir(book / "ch1.md") is None
    assert resolve_book_dir(tmp_path) is None
    assert resolve_book_dir(None) is None


def test_build_command_lists_selected_formats(tmp_path: Path) -> None:
    command = build_command(tmp_path, ["html", "a4.pdf"], python="python3", output_dir=tmp_path / "dist")

    assert command == [
        "python3",
        "-m",
        "book_forge.cli",
        "--source",
        str(tmp_path),
        "--output-dir",
        str(tmp_path / "dist"),
        "--format",
        "html",
        "--format",
        "a4.pdf",
    ]


def test_build_command_without_formats_only_writes_markdown(tmp_path: Path) -> None:
    assert build_command(tmp_path, [], python="python3")[-1] == "--markdown-only"
