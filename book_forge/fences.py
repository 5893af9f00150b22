"""Line classification for fenced code blocks.

Every transform that has to leave example code alone walks the chapter through
`classify_lines` instead of tracking the fence state on its own. The state
machine is deliberately simple: a line starting with the toggle token flips
between prose and code, whatever follows the token on that line.
"""

from __future__ import annotations

from dataclasses import dataclass
import enum
from typing import Iterable, Iterator, List, Tuple

CODE_BLOCK_TOGGLE = "```"


class LineKind(enum.Enum):
    PROSE = "prose"
    FENCE_DELIMITER = "fence-delimiter"
    INSIDE_FENCE = "inside-fence"


@dataclass(frozen=True, slots=True)
class FenceState:
    """Immutable tracker state; `opener` is the line that opened the current fence."""

    inside: bool = False
    opener: str | None = None

    def classify(self, line: str) -> Tuple[LineKind, "FenceState"]:
        if line.startswith(CODE_BLOCK_TOGGLE):
            if self.inside:
                return LineKind.FENCE_DELIMITER, FenceState()
            return LineKind.FENCE_DELIMITER, FenceState(inside=True, opener=line)
        if self.inside:
            return LineKind.INSIDE_FENCE, self
        return LineKind.PROSE, self


@dataclass(frozen=True, slots=True)
class ClassifiedLine:
    kind: LineKind
    text: str
    # For delimiter lines: True when the line opens a fence, False when it closes one.
    # For lines inside a fence: the opener of that fence.
    opens: bool = False
    opener: str | None = None

    @property
    def is_code(self) -> bool:
        return self.kind is LineKind.INSIDE_FENCE


def split_lines(text: str) -> List[str]:
    lines = text.split("\n")
    if lines and lines[-1] == "":
        lines.pop()
    return [line[:-1] if line.endswith("\r") else line for line in lines]


def join_lines(lines: Iterable[str]) -> str:
    return "".join(f"{line}\n" for line in lines)


def classify_lines(lines: Iterable[str]) -> Iterator[ClassifiedLine]:
    """Lazily classify `lines`, starting outside of any fence."""
    state = FenceState()
    for line in lines:
        kind, next_state = state.classify(line)
        if kind is LineKind.FENCE_DELIMITER:
            yield ClassifiedLine(kind, line, opens=next_state.inside, opener=next_state.opener)
        else:
            yield ClassifiedLine(kind, line, opener=state.opener)
        state = next_state


def classify_text(text: str) -> Iterator[ClassifiedLine]:
    return classify_lines(split_lines(text))


def ends_inside_fence(lines: Iterable[str]) -> bool:
    """True when the last fence opened in `lines` is never closed."""
    state = FenceState()
    for line in lines:
        _, state = state.classify(line)
    return state.inside
