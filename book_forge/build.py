"""Write the assembled book and its rendered formats to the output directory."""

from __future__ import annotations

from dataclasses import dataclass, field
import logging
from pathlib import Path
from typing import Dict, List, Protocol

from book_forge.config import BuildConfig, OutputFormat
from book_forge.errors import RendererError
from book_forge.events import EventCallback, emit
from book_forge.files import write_bytes_atomic, write_text_file
from book_forge.typography import plain_variant


class Renderer(Protocol):
    def render(self, markdown: str, fmt: OutputFormat, dialect: str) -> bytes:
        ...


@dataclass
class RenderReport:
    written: List[Path] = field(default_factory=list)
    failures: Dict[str, RendererError] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return not self.failures


def write_markdown(book_text: str, config: BuildConfig, output_dir: Path) -> Path:
    target = output_dir / config.artifact_name("md")
    write_text_file(target, book_text)
    return target


def render_book(
    book_text: str,
    config: BuildConfig,
    output_dir: Path,
    renderer: Renderer,
    on_event: EventCallback | None = None,
) -> RenderReport:
    """Render every configured format in order.

    A renderer failure is terminal for its format. Formats written before it
    stay on disk untouched; nothing is written for the failed one. Unless
    `config.keep_going` is set the failure is re-raised immediately, otherwise
    it is recorded and the remaining formats are attempted.
    A missing renderer (`RendererUnavailableError`) always stops the run.
    """
    report = RenderReport()
    plain_text: str | None = None

    for fmt in config.formats:
        source = book_text
        if fmt.plain:
            if plain_text is None:
                plain_text = plain_variant(book_text)
            source = plain_text

        emit(on_event, logging.INFO, "render", f"rendering {fmt.name}")
        try:
            data = renderer.render(source, fmt, config.markdown_dialect)
        except RendererError as exc:
            emit(on_event, logging.ERROR, "render", str(exc))
            if not config.keep_going:
                raise
            report.failures[fmt.name] = exc
            continue

        target = output_dir / config.artifact_name(fmt.extension)
        write_bytes_atomic(target, data)
        report.written.append(target)
        emit(on_event, logging.INFO, "write", f"wrote {target}")

    return report
