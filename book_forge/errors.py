"""Exception types raised while assembling and rendering a book."""

from __future__ import annotations

from pathlib import Path


class BookForgeError(Exception):
    """Base class for every error raised by `book_forge`."""


class ChapterReadError(BookForgeError, OSError):
    """A chapter or table-of-contents file could not be read."""

    def __init__(self, path: Path | str, reason: str) -> None:
        self.path = Path(path)
        self.reason = reason
        super().__init__(f"Could not read '{self.path}': {reason}")


class UnsupportedNestingError(BookForgeError, ValueError):
    """A table-of-contents entry is nested deeper than one level."""

    def __init__(self, line_number: int, title: str, depth: int) -> None:
        self.line_number = line_number
        self.title = title
        self.depth = depth
        super().__init__(
            f"Table of contents line {line_number} ('{title}') is nested {depth} levels deep; "
            "only two levels are supported"
        )


class ReferenceExtractionError(BookForgeError, AssertionError):
    """A line matched a reference pattern but its parts could not be extracted."""


class RendererUnavailableError(BookForgeError, FileNotFoundError):
    """The external renderer executable is missing."""


class RendererError(BookForgeError, RuntimeError):
    """The renderer ran but failed to produce one output format."""

    def __init__(self, format_name: str, returncode: int, stdout: str = "", stderr: str = "") -> None:
        self.format_name = format_name
        self.returncode = returncode
        self.stdout = stdout
        self.stderr = stderr
        message_parts = [
            f"Pandoc failed to render '{format_name}' with exit code {returncode}.",
        ]
        if stdout:
            message_parts.append(f"stdout:\n{stdout}")
        if stderr:
            message_parts.append(f"stderr:\n{stderr}")
        super().__init__("\n".join(message_parts))
