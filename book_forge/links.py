"""Link rewriting for the merged book.

Relative links to sibling documentation trees (`../std/...`) point nowhere once
the book leaves its original site, so they become absolute URLs. Links between
chapters of the same book (`ch03-01.html`, `ch03-01.html#shadowing`) become
anchors inside the merged document.
"""

from __future__ import annotations

import re
from typing import Iterable, List, Sequence, Tuple

from book_forge.fences import classify_text, join_lines
from book_forge.toc import ANCHOR_PREFIX

DEFAULT_LINK_PREFIXES: Tuple[Tuple[str, str], ...] = (
    ("../std", "https://doc.rust-lang.org/std"),
    ("../reference", "https://doc.rust-lang.org/reference"),
    ("../rustc", "https://doc.rust-lang.org/rustc"),
    ("../syntax", "https://doc.rust-lang.org/syntax"),
    ("../core", "https://doc.rust-lang.org/core"),
)

CROSS_SECTION_LINK_PATTERN = re.compile(r"\]\((?P<file>[\w-]+)\.html(?:#(?P<section>[^)\s]+))?\)")
CROSS_SECTION_DEFINITION_PATTERN = re.compile(
    r"^(?P<label>\[[^\]]+\]:\s+)(?P<file>[\w-]+)\.html(?:#(?P<section>\S+))?(?P<rest>\s.*)?$"
)


def _anchor_for(file_stem: str, section: str | None) -> str:
    if section:
        return f"#{section}"
    return f"#{ANCHOR_PREFIX}{file_stem}"


def replace_link_prefixes(line: str, prefixes: Iterable[Tuple[str, str]]) -> str:
    for relative, absolute in prefixes:
        line = line.replace(relative, absolute)
    return line


def rewrite_cross_section_links(line: str) -> str:
    definition = CROSS_SECTION_DEFINITION_PATTERN.match(line)
    if definition:
        anchor = _anchor_for(definition.group("file"), definition.group("section"))
        return f"{definition.group('label')}{anchor}{definition.group('rest') or ''}"

    def replace(match: re.Match[str]) -> str:
        return f"]({_anchor_for(match.group('file'), match.group('section'))})"

    return CROSS_SECTION_LINK_PATTERN.sub(replace, line)


def normalize_links(text: str, prefixes: Sequence[Tuple[str, str]] = DEFAULT_LINK_PREFIXES) -> str:
    """Absolutize documentation links, then turn chapter links into anchors.

    Code inside fences is left alone: examples may well contain `.html` text.
    """
    result: List[str] = []
    for line in classify_text(text):
        if line.is_code:
            result.append(line.text)
            continue
        updated = replace_link_prefixes(line.text, prefixes)
        result.append(rewrite_cross_section_links(updated))
    return join_lines(result)
