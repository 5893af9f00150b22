"""Render the assembled markdown book through Pandoc.

Part of the `book_forge` pipeline.

The book is piped to `pandoc` on stdin. Pandoc writes each format into a
private temporary directory and the bytes are handed back, so the caller
decides where (and whether) the artifact is stored. HTML and EPUB output
embed a small Georgia/Menlo stylesheet.
"""

from __future__ import annotations

import os
from pathlib import Path
import shutil
import subprocess
import tempfile
from typing import Iterable, List

from book_forge.config import OutputFormat
from book_forge.errors import RendererError, RendererUnavailableError

DEFAULT_CSS = """
body {
    font-family: 'Georgia', 'Times New Roman', serif;
    line-height: 1.6;
    margin: 2.5rem auto;
    max-width: 960px;
    padding: 0 1.5rem;
    color: #222;
}

h1, h2, h3, h4, h5, h6 {
    font-family: 'Georgia', 'Times New Roman', serif;
    line-height: 1.25;
    color: #111;
    margin-top: 1.5em;
}

h1 {
    break-before: page;
    page-break-before: always;
}

pre, code, kbd, samp {
    font-family: 'Menlo', 'Courier New', monospace;
}

pre {
    background: #f0f2f5;
    border-radius: 6px;
    padding: 1rem;
    white-space: pre-wrap;
}

a {
    color: #0b5cad;
    text-decoration: none;
}

blockquote {
    border-left: 4px solid #d0d7de;
    margin: 1.5rem 0;
    padding: 0.5rem 1rem;
    color: #4b5563;
    background: #f7f9fc;
}
""".strip()


class PandocRenderer:
    """Runs the `pandoc` executable once per output format."""

    def __init__(self, pandoc: str = "pandoc", resource_paths: Iterable[Path] = ()) -> None:
        self.pandoc = pandoc
        self.resource_paths = [Path(path) for path in resource_paths]

    def ensure_available(self) -> None:
        if shutil.which(self.pandoc) is None:
            raise RendererUnavailableError(
                f"Pandoc executable '{self.pandoc}' was not found on PATH. Install pandoc or specify --pandoc."
            )

    def build_command(self, fmt: OutputFormat, dialect: str, output: Path, css_path: Path | None) -> List[str]:
        pandoc_cmd = [self.pandoc, f"--from={dialect}", *fmt.option_args()]
        if self.resource_paths:
            resource_path_arg = os.pathsep.join(str(path) for path in self.resource_paths)
            pandoc_cmd.extend(["--resource-path", resource_path_arg])
        if css_path is not None:
            pandoc_cmd.extend(["--css", str(css_path)])
        pandoc_cmd.append(f"--output={output}")
        return pandoc_cmd

    def render(self, markdown: str, fmt: OutputFormat, dialect: str) -> bytes:
        """Return the rendered bytes of `markdown` in `fmt`, or raise `RendererError`."""
        self.ensure_available()

        with tempfile.TemporaryDirectory(prefix="book-forge-") as workdir:
            work_path = Path(workdir)
            # Pandoc picks the writer for PDF output from the file extension
            output = work_path / f"book.{fmt.extension}"
            css_path: Path | None = None
            if fmt.stylesheet:
                css_path = work_path / "book.css"
                css_path.write_text(DEFAULT_CSS, encoding="utf-8")

            pandoc_cmd = self.build_command(fmt, dialect, output, css_path)
            completed = subprocess.run(
                pandoc_cmd,
                input=markdown.encode("utf-8"),
                check=False,
                capture_output=True,
            )

            if completed.returncode != 0:
                raise RendererError(
                    fmt.name,
                    completed.returncode,
                    completed.stdout.decode("utf-8", errors="replace").strip(),
                    completed.stderr.decode("utf-8", errors="replace").strip(),
                )
            if not output.exists():
                raise RendererError(fmt.name, completed.returncode, stderr="Pandoc produced no output file")
            return output.read_bytes()
