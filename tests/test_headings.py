from __future__ import annotations

import pytest

from book_forge.headings import adjust_header_level, calc_header_level, remove_file_title


@pytest.mark.parametrize(
    ("base_level", "current_level", "expected"),
    [
        (1, 1, 1),
        (1, 2, 2),
        (2, 2, 3),
        (2, 1, 2),
    ],
)
def test_header_level_calculation(base_level: int, current_level: int, expected: int) -> None:
    assert calc_header_level(base_level, current_level) == expected


def test_headings_are_shifted_by_base_level() -> None:
    text = "# Title {#custom}\n\nSome text.\n\n## Section\n"

    assert adjust_header_level(text, 3) == "### Title {#custom}\n\nSome text.\n\n#### Section\n"


def test_base_level_one_keeps_levels() -> None:
    text = "# Title\n## Sub\n"

    assert adjust_header_level(text, 1) == text


def test_levels_are_not_clamped() -> None:
    assert adjust_header_level("##### Deep\n", 3) == "####### Deep\n"


def test_code_blocks_are_copied_verbatim() -> None:
    text = "# Title\n\n```sh\n# this is a shell comment\n## and so is this\n```\n\n## After\n"

    assert adjust_header_level(text, 2) == (
        "## Title\n\n```sh\n# this is a shell comment\n## and so is this\n```\n\n### After\n"
    )


def test_lines_without_space_after_hashes_are_not_headings() -> None:
    text = "#hashtag\n#\n"

    assert adjust_header_level(text, 3) == text


def test_adjusting_twice_keeps_shifting() -> None:
    once = adjust_header_level("# Title\n", 2)

    assert adjust_header_level(once, 2) == "### Title\n"


def test_base_level_below_one_is_rejected() -> None:
    with pytest.raises(ValueError, match="base_level"):
        adjust_header_level("# Title\n", 0)


def test_remove_file_title_only_strips_leading_title_block() -> None:
    assert remove_file_title("% The Stack and the Heap\n\nText\n") == "\nText\n"
    assert remove_file_title("Text\n% not a title\n") == "Text\n% not a title\n"
