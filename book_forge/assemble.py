"""Assemble a book's chapters into a single normalized markdown document.

Part of the `book_forge` pipeline.

Chapters are processed one after another in table-of-contents order: the
generated headings and their anchors are positional, so the order of the
table of contents is the order of the book. Every chapter starts with a fresh
fence state, so an unterminated code block is reported as a warning for that
chapter instead of swallowing the rest of the book.
"""

from __future__ import annotations

from dataclasses import dataclass
import logging
from pathlib import Path
from typing import Callable, List, Sequence

from book_forge.config import BuildConfig, render_meta
from book_forge.events import EventCallback, emit
from book_forge.fences import ends_inside_fence, split_lines
from book_forge.files import read_text_file
from book_forge.normalize import prepare_chapter
from book_forge.toc import Chapter, GeneratedHeading, chapter_slug, parse_chapters

Reader = Callable[[Path], str]


@dataclass(frozen=True, slots=True)
class AssembledBook:
    text: str
    chapters: tuple[Chapter, ...]
    warnings: tuple[str, ...] = ()


def _same_file(left: str, right: str) -> bool:
    return Path(left).as_posix().lower() == Path(right).as_posix().lower()


def _check_fences(
    prepared: str, label: str, warnings: List[str], on_event: EventCallback | None
) -> None:
    if ends_inside_fence(split_lines(prepared)):
        message = "code fence is never closed; the renderer may treat the rest of the book as code"
        warnings.append(f"{label}: {message}")
        emit(on_event, logging.WARNING, "warning", message, chapter=label)


def assemble_book(
    source_dir: Path,
    toc_text: str,
    meta_text: str,
    config: BuildConfig,
    read: Reader = read_text_file,
    on_event: EventCallback | None = None,
) -> AssembledBook:
    """Merge the introduction and every table-of-contents chapter into one document."""
    chapters = parse_chapters(toc_text, strip_title_numerals=config.strip_title_numerals)
    emit(on_event, logging.INFO, "read", f"{len(chapters)} chapters listed in the table of contents")

    parts: List[str] = [render_meta(meta_text, config.release_date), "\n"]
    warnings: List[str] = []

    intro_file = config.introduction_file
    if intro_file and (source_dir / intro_file).exists():
        content = read(source_dir / intro_file)
        prepared = prepare_chapter(
            content, config.introduction_base_level, chapter_slug(intro_file).lower(), config
        )
        _check_fences(prepared, intro_file, warnings, on_event)
        parts.extend(["\n\n", f"{'#' * config.introduction_base_level} {config.introduction_title}", "\n\n", prepared])
        emit(on_event, logging.DEBUG, "chapter", "added as introduction", chapter=intro_file)
    else:
        intro_file = None

    body = _body_chapters(chapters, intro_file)
    for chapter in body:
        content = read(source_dir / chapter.source_file)
        prepared = prepare_chapter(content, config.chapter_base_level, chapter.slug, config)
        _check_fences(prepared, chapter.source_file, warnings, on_event)
        parts.extend(["\n\n", GeneratedHeading.for_chapter(chapter).render(), "\n\n", prepared])
        emit(on_event, logging.DEBUG, "chapter", f"added at depth {chapter.depth}", chapter=chapter.source_file)

    emit(on_event, logging.INFO, "assemble", f"assembled {len(body)} chapters")
    return AssembledBook(text="".join(parts), chapters=tuple(chapters), warnings=tuple(warnings))


def _body_chapters(chapters: Sequence[Chapter], intro_file: str | None) -> List[Chapter]:
    if intro_file is None:
        return list(chapters)
    return [chapter for chapter in chapters if not _same_file(chapter.source_file, intro_file)]


def assemble_from_directory(
    source_dir: Path,
    config: BuildConfig,
    meta_path: Path | None = None,
    read: Reader = read_text_file,
    on_event: EventCallback | None = None,
) -> AssembledBook:
    """Read the table of contents (and optional metadata file) from disk, then assemble."""
    toc_text = read(source_dir / config.toc_file)
    meta_text = read(meta_path) if meta_path is not None else ""
    return assemble_book(source_dir, toc_text, meta_text, config, read=read, on_event=on_event)
