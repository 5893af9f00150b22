from __future__ import annotations

from book_forge.typography import convert_checkmarks, plain_variant, remove_emojis


def test_checkmarks_become_latex_macros() -> None:
    assert convert_checkmarks("checks: ✓ ✔") == "checks: \\checkmark \\checkmark"


def test_emojis_are_removed() -> None:
    assert remove_emojis("Ferris 🦀 says hi 👋🏽!") == "Ferris  says hi !"


def test_plain_variant_keeps_checkmarks_and_continuation_marker() -> None:
    text = "✓ done 🎉\n↳ continued\n"

    assert plain_variant(text) == "\\checkmark done \n↳ continued\n"
