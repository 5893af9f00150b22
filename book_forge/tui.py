"""Terminal launcher for compiling books with `book-forge`.

Browse to a book directory (or its `SUMMARY.md`), toggle the output formats
to render and run the build; its output streams into the log pane.
"""

from __future__ import annotations

import asyncio
import os
import platform
import shlex
import shutil
import sys
from pathlib import Path
from typing import Iterable, Optional, Sequence

from rich.text import Text
from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import Horizontal, Vertical
from textual.widgets import DirectoryTree, Footer, Header, ListItem, ListView, Log, Static

from book_forge.config import DEFAULT_FORMATS, OutputFormat

DEFAULT_TOC_FILE = "SUMMARY.md"


def resolve_book_dir(path: Path | None, toc_file: str = DEFAULT_TOC_FILE) -> Optional[Path]:
    """Return the book directory for a selected tree entry, if it is one."""
    if path is None:
        return None
    if path.is_file():
        if path.name == toc_file:
            return path.parent
        return None
    if path.is_dir() and (path / toc_file).is_file():
        return path
    return None


def build_command(
    book_dir: Path,
    formats: Sequence[str],
    python: str | None = None,
    output_dir: Path | None = None,
) -> list[str]:
    command = [python or sys.executable, "-m", "book_forge.cli", "--source", str(book_dir)]
    if output_dir is not None:
        command.extend(["--output-dir", str(output_dir)])
    if formats:
        for name in formats:
            command.extend(["--format", name])
    else:
        command.append("--markdown-only")
    return command


class FormatItem(ListItem):
    def __init__(self, fmt: OutputFormat) -> None:
        self.fmt = fmt
        self.enabled = True
        self.label = Static(self._label_text())
        super().__init__(self.label)

    def _label_text(self) -> Text:
        mark = "[x]" if self.enabled else "[ ]"
        return Text.assemble((f"{mark} ", ""), (self.fmt.name, "bold"), (f"  .{self.fmt.extension}", "dim"))

    def toggle(self) -> None:
        self.enabled = not self.enabled
        self.label.update(self._label_text())
        self.set_class(not self.enabled, "dim")


class BookDirectoryTree(DirectoryTree):
    """DirectoryTree that prepends ASCII file-type tags to sources and artifacts."""

    EXT_TAGS = {
        ".md": "[MD] ",
        ".pdf": "[PDF] ",
        ".epub": "[EPUB] ",
        ".html": "[HTML] ",
        ".tex": "[TEX] ",
    }

    def render_label(self, node, base_style, style) -> Text:  # type: ignore[override]
        data = getattr(node, "data", None)
        raw_path = getattr(data, "path", None)
        if raw_path is None:
            return super().render_label(node, base_style, style)
        path = Path(str(raw_path))
        if path.is_dir():
            name = f"{path.name}/"
            if (path / DEFAULT_TOC_FILE).is_file():
                name = f"{name} (book)"
            return Text(name, style=style)
        prefix = self.EXT_TAGS.get(path.suffix.lower(), "")
        return Text(f"{prefix}{path.name}", style=style)


class BookForgeApp(App[None]):
    CSS = """
    Screen {
        layout: vertical;
    }
    Horizontal {
        height: 1fr;
    }
    DirectoryTree {
        width: 50%;
        border: round $primary;
    }
    #right {
        border: round $surface;
        width: 50%;
        padding: 1 1;
    }
    #format_list {
        height: auto;
    }
    #command {
        padding: 1 0 0 0;
    }
    #log {
        height: 1fr;
        border: round $boost;
        padding: 1 1;
    }
    .dim {
        color: $text-muted;
    }
    """

    BINDINGS = [
        Binding("space", "toggle_format", "Toggle format"),
        Binding("tab", "switch_panels", "Switch"),
        Binding("r", "refresh", "Refresh"),
        Binding("o", "open", "Open"),
        Binding("b", "build", "Build"),
        Binding("q", "quit", "Quit"),
    ]

    def __init__(
        self,
        root_path: Path | None = None,
        formats: Iterable[OutputFormat] = DEFAULT_FORMATS,
        output_dir: Path | None = None,
    ) -> None:
        super().__init__()
        self.root_path = root_path or Path.cwd()
        self.formats = list(formats)
        self.output_dir = output_dir
        self.selected_path: Path | None = None
        self._is_running = False

    def compose(self) -> ComposeResult:
        yield Header()
        with Horizontal():
            yield BookDirectoryTree(str(self.root_path), id="tree")
            with Vertical(id="right"):
                yield Static("Formats", classes="title")
                yield ListView(*[FormatItem(fmt) for fmt in self.formats], id="format_list")
                yield Static("Command", id="command")
                yield Static("Select a book directory or its SUMMARY.md", id="command_preview")
                yield Log(id="log", highlight=True)
        yield Footer()

    def on_mount(self) -> None:
        self.set_focus(self.query_one("#tree", DirectoryTree))

    def on_directory_tree_file_selected(self, event: DirectoryTree.FileSelected) -> None:
        self.selected_path = Path(event.path)
        self._update_command_preview()

    def on_directory_tree_directory_selected(self, event: DirectoryTree.DirectorySelected) -> None:
        self.selected_path = Path(event.path)
        self._update_command_preview()

    def on_list_view_selected(self, event: ListView.Selected) -> None:
        if isinstance(event.item, FormatItem):
            event.item.toggle()
            self._update_command_preview()

    def _enabled_formats(self) -> list[str]:
        items = self.query_one("#format_list", ListView).children
        return [item.fmt.name for item in items if isinstance(item, FormatItem) and item.enabled]

    def _current_command(self) -> list[str] | None:
        book_dir = resolve_book_dir(self.selected_path)
        if book_dir is None:
            return None
        return build_command(book_dir, self._enabled_formats(), output_dir=self.output_dir)

    def _update_command_preview(self) -> None:
        preview = self.query_one("#command_preview", Static)
        command = self._current_command()
        if command is None:
            preview.update("Select a book directory or its SUMMARY.md")
            return
        preview.update(" ".join(shlex.quote(part) for part in command))

    def action_toggle_format(self) -> None:
        list_view = self.query_one("#format_list", ListView)
        item = list_view.highlighted_child
        if isinstance(item, FormatItem):
            item.toggle()
            self._update_command_preview()

    async def action_build(self) -> None:
        log = self.query_one(Log)
        log.clear()
        command = self._current_command()
        if command is None:
            log.write_line("Select a book directory or its SUMMARY.md before building")
            return
        # Prevent concurrent runs
        if self._is_running:
            log.write_line("A build is already running; please wait...")
            return
        self._is_running = True
        log.write_line(f"Running: {' '.join(shlex.quote(part) for part in command)}")
        start = asyncio.get_running_loop().time()
        try:
            process = await asyncio.create_subprocess_exec(
                *command,
                cwd=str(self.root_path),
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.STDOUT,
            )
            assert process.stdout is not None
            while True:
                line = await process.stdout.readline()
                if not line:
                    break
                log.write_line(line.decode(errors="replace").rstrip())
            await process.wait()
            elapsed = asyncio.get_running_loop().time() - start
            if process.returncode == 0:
                log.write_line(f"Completed successfully in {elapsed:.2f}s")
                # Show the freshly written artifacts
                await self.action_refresh()
            else:
                log.write_line(f"Failed with exit code {process.returncode} in {elapsed:.2f}s")
        finally:
            self._is_running = False

    def _current_tree_path(self) -> Path | None:
        node = self.query_one("#tree", DirectoryTree).cursor_node
        raw_path = getattr(getattr(node, "data", None), "path", None)
        return Path(str(raw_path)) if raw_path is not None else None

    async def _open_with_system(self, path: Path) -> None:
        system = platform.system().lower()
        if system == "darwin":
            await asyncio.create_subprocess_exec("open", str(path))
            return
        if system.startswith("windows"):
            await asyncio.create_subprocess_exec("cmd", "/c", "start", str(path))
            return
        opener = shutil.which("xdg-open") or shutil.which("gio")
        if opener is None:
            self.query_one(Log).write_line(f"No program found to open {path}")
            return
        if os.path.basename(opener) == "gio":
            await asyncio.create_subprocess_exec(opener, "open", str(path))
        else:
            await asyncio.create_subprocess_exec(opener, str(path))

    async def action_open(self) -> None:
        path = self._current_tree_path() or self.selected_path
        if path is None or path.is_dir():
            return
        await self._open_with_system(path)

    async def action_refresh(self) -> None:
        await self.query_one("#tree", DirectoryTree).reload()

    def action_switch_panels(self) -> None:
        tree = self.query_one("#tree", DirectoryTree)
        format_list = self.query_one("#format_list", ListView)
        if self.focused is tree:
            self.set_focus(format_list)
        else:
            self.set_focus(tree)


def main(argv: list[str] | None = None) -> None:
    args = sys.argv[1:] if argv is None else argv
    root = Path(args[0]) if args else Path.cwd()
    BookForgeApp(root_path=root).run()


if __name__ == "__main__":
    main()
