"""The per-chapter normalization sequence."""

from __future__ import annotations

from book_forge.code_blocks import break_code_blocks, normalize_code_start
from book_forge.config import BuildConfig
from book_forge.headings import adjust_header_level, remove_file_title
from book_forge.links import normalize_links
from book_forge.references import adjust_reference_names
from book_forge.typography import convert_checkmarks


def normalize(text: str, config: BuildConfig) -> str:
    """Wrap code lines, canonicalize fences, then rewrite links. Order matters."""
    output = break_code_blocks(text, config.wrap_width, config.continuation_marker)
    output = normalize_code_start(
        output,
        languages=config.code_languages,
        hidden_marker=config.hidden_marker,
        continuation_marker=config.continuation_marker,
    )
    output = normalize_links(output, config.link_prefixes)
    if config.convert_checkmarks:
        output = convert_checkmarks(output)
    return output


def prepare_chapter(text: str, base_level: int, prefix: str, config: BuildConfig) -> str:
    content = adjust_header_level(text, base_level)
    content = remove_file_title(content)
    content = adjust_reference_names(content, prefix)
    return normalize(content, config)
