"""Rewrites applied to fenced code: long-line wrapping and fence normalization."""

from __future__ import annotations

import re
from typing import Iterable, List

from book_forge.fences import CODE_BLOCK_TOGGLE, LineKind, classify_text, join_lines

DEFAULT_CONTINUATION_MARKER = "↳ "
DEFAULT_HIDDEN_MARKER = "# "
DEFAULT_LANGUAGES = ("rust",)


def break_long_line(line: str, max_len: int, marker: str) -> str:
    """Break `line` into segments that fit `max_len` glyphs, marker included.

    The first segment keeps `max_len - 1` glyphs; every continuation segment
    starts with `marker` and keeps `max_len - len(marker) - 1` glyphs after it.
    Segments are joined with newlines.
    """
    marker_length = len(marker)
    continuation_width = max_len - marker_length - 1
    if max_len < 2 or continuation_width < 1:
        raise ValueError(f"max_len {max_len} leaves no room after the {marker_length}-glyph marker")

    if len(line) < max_len:
        return line

    segments = [line[: max_len - 1]]
    position = max_len - 1
    while position < len(line):
        segments.append(marker + line[position : position + continuation_width])
        position += continuation_width
    return "\n".join(segments)


def break_code_blocks(text: str, max_len: int, marker: str = DEFAULT_CONTINUATION_MARKER) -> str:
    """Wrap every line inside a code fence; prose and fence lines are left as they are."""
    result: List[str] = []
    for line in classify_text(text):
        if line.is_code:
            result.append(break_long_line(line.text, max_len, marker))
        else:
            result.append(line.text)
    return join_lines(result)


def _language_pattern(languages: Iterable[str]) -> re.Pattern[str]:
    alternatives = "|".join(re.escape(language) for language in languages)
    return re.compile(rf"(?P<language>{alternatives})")


def detect_language(opener: str, languages: Iterable[str] = DEFAULT_LANGUAGES) -> str | None:
    """Return the first recognized language found anywhere after the fence token."""
    languages = tuple(languages)
    if not languages:
        return None
    match = _language_pattern(languages).search(opener[len(CODE_BLOCK_TOGGLE) :])
    return match.group("language") if match else None


def normalize_code_start(
    text: str,
    languages: Iterable[str] = DEFAULT_LANGUAGES,
    hidden_marker: str = DEFAULT_HIDDEN_MARKER,
    continuation_marker: str | None = None,
) -> str:
    """Canonicalize fence openers and drop hidden lines from recognized code.

    ```` ```{rust,ignore} ```` and ```` ``` rust,no_extras ```` both become
    ```` ```rust ````. Inside such a fence, lines starting with `hidden_marker`
    only exist to make the example compile and are removed, along with any
    wrapped continuation lines (starting with `continuation_marker`) that
    belonged to them. Fences in other languages are left untouched, so shell
    comments survive.
    """
    languages = tuple(languages)
    result: List[str] = []
    current_language: str | None = None
    dropping_continuation = False

    for line in classify_text(text):
        if line.kind is LineKind.FENCE_DELIMITER:
            dropping_continuation = False
            if line.opens:
                current_language = detect_language(line.text, languages)
                if current_language is not None:
                    result.append(f"{CODE_BLOCK_TOGGLE}{current_language}")
                    continue
            else:
                current_language = None
            result.append(line.text)
            continue

        if line.is_code and current_language is not None:
            if line.text.startswith(hidden_marker) or line.text == hidden_marker.rstrip():
                dropping_continuation = True
                continue
            if dropping_continuation and continuation_marker and line.text.startswith(continuation_marker):
                continue
        dropping_continuation = False
        result.append(line.text)

    return join_lines(result)
