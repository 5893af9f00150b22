"""Heading level adjustment for chapters merged into a single book."""

from __future__ import annotations

import re
from typing import List

from book_forge.fences import LineKind, classify_text, join_lines

HEADING_PATTERN = re.compile(r"^(?P<level>#+)\s(?P<title>.+)$")
FILE_TITLE_PATTERN = re.compile(r"\A%\s(.+)\n")


def calc_header_level(base_level: int, current_level: int) -> int:
    return current_level + base_level - 1


def adjust_header_level(text: str, base_level: int) -> str:
    """Shift every prose heading so that a level-1 heading lands on `base_level`.

    Applying it twice shifts twice; callers run it exactly once per chapter.
    """
    if base_level < 1:
        raise ValueError(f"base_level must be at least 1, got {base_level}")

    result: List[str] = []
    for line in classify_text(text):
        if line.kind is LineKind.INSIDE_FENCE:
            result.append(line.text)
            continue
        match = HEADING_PATTERN.match(line.text)
        if not match:
            result.append(line.text)
            continue
        new_level = calc_header_level(base_level, len(match.group("level")))
        result.append(f"{'#' * new_level} {match.group('title')}")
    return join_lines(result)


def remove_file_title(text: str) -> str:
    """Drop a leading Pandoc title block line (`% Title`)."""
    return FILE_TITLE_PATTERN.sub("", text, count=1)
