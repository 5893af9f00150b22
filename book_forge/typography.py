"""Character replacements for outputs rendered through LaTeX."""

from __future__ import annotations

import re

CHECKMARK_PATTERN = re.compile("[\u2713\u2714]")
EMOJI_PATTERN = re.compile(
    "["
    "\U0001F000-\U0001FAFF"  # pictographs, emoticons, transport, symbols
    "\u2600-\u27BF"  # miscellaneous symbols and dingbats
    "\u2B00-\u2BFF"  # arrows and stars
    "\uFE0F"  # emoji presentation selector
    "\u200D"  # zero width joiner
    "]+"
)


def convert_checkmarks(text: str) -> str:
    # rely on pandoc's raw latex support
    return CHECKMARK_PATTERN.sub(r"\\checkmark", text)


def remove_emojis(text: str) -> str:
    return EMOJI_PATTERN.sub("", text)


def plain_variant(text: str) -> str:
    """Text safe for the LaTeX engine: checkmarks as macros, emoji dropped."""
    return remove_emojis(convert_checkmarks(text))
