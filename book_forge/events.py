"""Leveled build events emitted between pipeline stages."""

from __future__ import annotations

from dataclasses import dataclass
import logging
from typing import Callable

LOGGER = logging.getLogger("book_forge")


@dataclass(frozen=True, slots=True)
class BuildEvent:
    level: int
    stage: str
    message: str
    chapter: str | None = None

    def describe(self) -> str:
        if self.chapter:
            return f"[{self.stage}] {self.chapter}: {self.message}"
        return f"[{self.stage}] {self.message}"


EventCallback = Callable[[BuildEvent], None]


def log_event(event: BuildEvent) -> None:
    """Default callback: forward the event to the `book_forge` logger."""
    LOGGER.log(event.level, event.describe())


def emit(
    on_event: EventCallback | None,
    level: int,
    stage: str,
    message: str,
    chapter: str | None = None,
) -> None:
    callback = log_event if on_event is None else on_event
    callback(BuildEvent(level=level, stage=stage, message=message, chapter=chapter))
