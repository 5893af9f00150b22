"""Parse a `SUMMARY.md` table of contents into an ordered list of chapters."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import PurePosixPath
import re
from typing import Iterable, List, Tuple

from book_forge.errors import UnsupportedNestingError

TOC_LINK_PATTERN = re.compile(r"^(?P<indent>[ \t]*)[*+-] \[(?P<title>.+?)\]\((?P<filename>.+?)\)")
PART_NUMERAL_PATTERN = re.compile(r"^[IVXLC]+:\s+")
ANCHOR_PREFIX = "sec--"
TAB_WIDTH = 4
MAX_DEPTH = 1


@dataclass(frozen=True, slots=True)
class Chapter:
    source_file: str
    title: str
    depth: int = 0

    @property
    def slug(self) -> str:
        return chapter_slug(self.source_file)


@dataclass(frozen=True, slots=True)
class GeneratedHeading:
    level: int
    text: str
    anchor_id: str

    @classmethod
    def for_chapter(cls, chapter: Chapter) -> "GeneratedHeading":
        return cls(level=chapter.depth + 1, text=chapter.title, anchor_id=f"{ANCHOR_PREFIX}{chapter.slug}")

    def render(self) -> str:
        return f"{'#' * self.level} {self.text} {{#{self.anchor_id}}}"


def chapter_slug(source_file: str) -> str:
    """`src/ch01-02-intro.md` -> `ch01-02-intro`."""
    return PurePosixPath(source_file.replace("\\", "/")).stem


def normalize_title(title: str) -> str:
    # Some chapter titles start with a part numeral, e.g. "II: Syntax and Semantics"
    return PART_NUMERAL_PATTERN.sub("", title, count=1)


def _indent_width(indent: str) -> int:
    return len(indent.expandtabs(TAB_WIDTH))


def iter_toc_entries(lines: Iterable[str]) -> Iterable[Tuple[int, int, str, str]]:
    """Yield `(line_number, indent_width, title, filename)` for every chapter line."""
    for line_number, line in enumerate(lines, start=1):
        match = TOC_LINK_PATTERN.match(line)
        if not match:
            continue
        yield line_number, _indent_width(match.group("indent")), match.group("title"), match.group("filename")


def parse_chapters(toc_text: str, *, strip_title_numerals: bool = False) -> List[Chapter]:
    """Return the chapters listed in `toc_text` in document order.

    Unindented entries are top-level chapters (depth 0), entries indented below
    them are nested (depth 1). Anything nested deeper raises
    `UnsupportedNestingError`: the assembled book has no heading level for it.
    """
    chapters: List[Chapter] = []
    # indent widths of the currently open nesting levels
    open_indents: List[int] = []

    for line_number, indent, title, filename in iter_toc_entries(toc_text.splitlines()):
        if indent == 0:
            open_indents = [0]
        else:
            while open_indents and open_indents[-1] > indent:
                open_indents.pop()
            if not open_indents:
                open_indents = [0]
            if open_indents[-1] < indent:
                open_indents.append(indent)
        depth = len(open_indents) - 1

        if depth > MAX_DEPTH:
            raise UnsupportedNestingError(line_number, title, depth)

        if strip_title_numerals:
            title = normalize_title(title)
        chapters.append(Chapter(source_file=filename, title=title, depth=depth))

    return chapters
