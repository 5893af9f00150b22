#!/usr/bin/env python3
"""Compile a multi-chapter markdown book into single-file HTML, EPUB and PDF.

Part of the `book_forge` framework.

The book directory must contain a `SUMMARY.md` table of contents whose
entries look like `* [Title](chapter.md)`; a `README.md` next to it becomes
the introduction. Chapters are merged into one markdown document
(`dist/<prefix>-<release-date>.md`), which Pandoc then renders into every
requested format.

Usage:
    book-forge --source book [--meta book_meta.yml] [--format html --format epub]

Options:
    --markdown-only  Stop after writing the merged markdown.
    --keep-going     Continue with the remaining formats when one fails.
    --pandoc PATH    Specify a custom pandoc executable (default: "pandoc" on PATH).
"""

from __future__ import annotations

import argparse
from dataclasses import replace
import logging
from pathlib import Path
import sys

from book_forge.assemble import assemble_from_directory
from book_forge.build import render_book, write_markdown
from book_forge.config import DEFAULT_FORMATS, BuildConfig, today
from book_forge.errors import (
    ChapterReadError,
    ReferenceExtractionError,
    RendererError,
    RendererUnavailableError,
    UnsupportedNestingError,
)
from book_forge.pandoc import PandocRenderer


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Configure CLI options for book compilation."""
    parser = argparse.ArgumentParser(description="Compile a markdown book to EBook formats via Pandoc.")
    parser.add_argument("--source", type=Path, default=Path("book"), help="Book directory holding SUMMARY.md (default: book)")
    parser.add_argument("--toc", type=str, default="SUMMARY.md", help="Table of contents file inside the book directory")
    parser.add_argument(
        "--meta",
        type=Path,
        help="Metadata block prepended to the book; `{release_date}` is substituted",
    )
    parser.add_argument("--prefix", type=str, default="book", help="Artifact name prefix (default: book)")
    parser.add_argument("--release-date", type=str, default=None, help="Release date as YYYY-MM-DD (default: today)")
    parser.add_argument("--output-dir", "-o", type=Path, default=Path("dist"), help="Destination directory (default: dist)")
    parser.add_argument(
        "--format",
        dest="formats",
        action="append",
        choices=[fmt.name for fmt in DEFAULT_FORMATS],
        help="Output format to render; repeat for several (default: all)",
    )
    parser.add_argument("--markdown-only", action="store_true", help="Only write the merged markdown")
    parser.add_argument("--keep-going", action="store_true", help="Render remaining formats after a failure")
    parser.add_argument("--wrap-width", type=int, default=87, help="Maximum width of code lines (default: 87)")
    parser.add_argument(
        "--strip-title-numerals",
        action="store_true",
        help="Drop part numerals such as 'II: ' from chapter titles",
    )
    parser.add_argument(
        "--checkmarks",
        action="store_true",
        help="Convert check mark characters to LaTeX \\checkmark in every format",
    )
    parser.add_argument("--pandoc", type=str, default="pandoc", help="Pandoc executable to use (default: pandoc)")
    verbosity = parser.add_mutually_exclusive_group()
    verbosity.add_argument("--verbose", "-v", action="store_true", help="Log every chapter")
    verbosity.add_argument("--quiet", "-q", action="store_true", help="Only log warnings and errors")
    return parser.parse_args(argv)


def _configure_logging(args: argparse.Namespace) -> None:
    level = logging.INFO
    if args.verbose:
        level = logging.DEBUG
    elif args.quiet:
        level = logging.WARNING
    logging.basicConfig(format="%(levelname)s %(name)s: %(message)s", level=level)


def config_from_args(args: argparse.Namespace) -> BuildConfig:
    config = BuildConfig(
        prefix=args.prefix,
        release_date=args.release_date or today(),
        toc_file=args.toc,
        wrap_width=args.wrap_width,
        strip_title_numerals=args.strip_title_numerals,
        convert_checkmarks=args.checkmarks,
        keep_going=args.keep_going,
    )
    if args.formats:
        config = config.select_formats(args.formats)
    if args.markdown_only:
        config = replace(config, formats=())
    return config


def main(argv: list[str] | None = None) -> int:
    """CLI entry point that compiles a book directory."""
    args = parse_args(argv)
    _configure_logging(args)

    source: Path = args.source
    if not source.is_dir():
        print(f"Book directory '{source}' was not found", file=sys.stderr)
        return 1
    if args.meta and not args.meta.exists():
        print(f"Metadata file '{args.meta}' was not found", file=sys.stderr)
        return 1

    try:
        config = config_from_args(args)
    except ValueError as exc:
        print(str(exc), file=sys.stderr)
        return 1

    try:
        book = assemble_from_directory(source, config, meta_path=args.meta)
    except (ChapterReadError, UnsupportedNestingError) as exc:
        print(str(exc), file=sys.stderr)
        return 1
    except ReferenceExtractionError as exc:
        print(f"Internal error while renaming references: {exc}", file=sys.stderr)
        return 1

    markdown_path = write_markdown(book.text, config, args.output_dir)
    print(f"Wrote {markdown_path}")

    if not config.formats:
        return 0

    renderer = PandocRenderer(pandoc=args.pandoc, resource_paths=[source.resolve()])
    try:
        report = render_book(book.text, config, args.output_dir, renderer)
    except RendererUnavailableError as exc:
        print(str(exc), file=sys.stderr)
        return 1
    except RendererError as exc:
        print(str(exc), file=sys.stderr)
        return 2

    for path in report.written:
        print(f"Wrote {path}")
    for name, exc in report.failures.items():
        print(f"Failed to render {name}: {exc}", file=sys.stderr)
    return 0 if report.ok else 2


if __name__ == "__main__":
    raise SystemExit(main())
