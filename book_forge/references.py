"""Chapter-scoped renaming of reference links, footnotes and their definitions.

Chapters written separately reuse reference ids freely (`[std]`, `[^1]`).
Once merged they would collide, so every id is prefixed with the owning
chapter's slug: `[text][id]` becomes `[text][<prefix>--id]`.

Matching is line based: a reference split across lines is left alone, as are
shortcut references (`[id]` with no second pair of brackets).
Inline code in prose is not skipped, so `` `m[0][1]` `` becomes `m[0][<prefix>--1]`.
"""

from __future__ import annotations

from dataclasses import dataclass
import re
from typing import List

from book_forge.errors import ReferenceExtractionError
from book_forge.fences import LineKind, classify_text, join_lines

NAMESPACE_DELIMITER = "--"

REFERENCE_LINK_PATTERN = re.compile(r"\[(?P<title>[^\[\]]+)\]\[(?P<id>[^\[\]]*)\]")
FOOTNOTE_MARK_PATTERN = re.compile(r"\[\^(?P<id>[^\[\]\s]+)\](?!:)")
DEFINITION_PATTERN = re.compile(r"^\[(?P<caret>\^?)(?P<id>[^\[\]]+)\]:\s(?P<target>.+)$")


def namespaced_id(prefix: str, ident: str) -> str:
    return f"{prefix}{NAMESPACE_DELIMITER}{ident}"


@dataclass(frozen=True, slots=True)
class InlineLink:
    title: str
    id: str

    def namespaced(self, prefix: str) -> "InlineLink":
        # `[title][]` refers to the definition named like its title
        return InlineLink(self.title, namespaced_id(prefix, self.id or self.title))

    def render(self) -> str:
        return f"[{self.title}][{self.id}]"


@dataclass(frozen=True, slots=True)
class FootnoteMark:
    id: str

    def namespaced(self, prefix: str) -> "FootnoteMark":
        return FootnoteMark(namespaced_id(prefix, self.id))

    def render(self) -> str:
        return f"[^{self.id}]"


@dataclass(frozen=True, slots=True)
class DefinitionLine:
    is_footnote: bool
    id: str
    target: str

    def namespaced(self, prefix: str) -> "DefinitionLine":
        return DefinitionLine(self.is_footnote, namespaced_id(prefix, self.id), self.target)

    def render(self) -> str:
        caret = "^" if self.is_footnote else ""
        return f"[{caret}{self.id}]: {self.target}"


def extract_definition(match: re.Match[str]) -> DefinitionLine:
    ident = match.group("id")
    target = match.group("target")
    if not ident or target is None:
        raise ReferenceExtractionError(f"Reference definition matched without id or target: {match.group(0)!r}")
    return DefinitionLine(is_footnote=match.group("caret") == "^", id=ident, target=target)


def _rename_inline(line: str, prefix: str) -> str:
    def replace_link(match: re.Match[str]) -> str:
        link = InlineLink(title=match.group("title"), id=match.group("id"))
        return link.namespaced(prefix).render()

    def replace_mark(match: re.Match[str]) -> str:
        return FootnoteMark(match.group("id")).namespaced(prefix).render()

    line = REFERENCE_LINK_PATTERN.sub(replace_link, line)
    return FOOTNOTE_MARK_PATTERN.sub(replace_mark, line)


def adjust_reference_names(text: str, prefix: str) -> str:
    """Prefix every reference id outside of code fences with `prefix--`."""
    result: List[str] = []
    for line in classify_text(text):
        if line.kind is not LineKind.PROSE:
            result.append(line.text)
            continue

        match = DEFINITION_PATTERN.match(line.text)
        if match:
            definition = extract_definition(match).namespaced(prefix)
            if definition.is_footnote:
                definition = DefinitionLine(True, definition.id, _rename_inline(definition.target, prefix))
            result.append(definition.render())
            continue

        result.append(_rename_inline(line.text, prefix))
    return join_lines(result)
