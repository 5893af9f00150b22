"""Reading chapters and writing build artifacts."""

from __future__ import annotations

import os
from pathlib import Path
import tempfile

from book_forge.errors import ChapterReadError


def read_text_file(path: Path) -> str:
    try:
        return path.read_text(encoding="utf-8")
    except UnicodeDecodeError as exc:
        raise ChapterReadError(path, f"not valid UTF-8 ({exc.reason})") from exc
    except OSError as exc:
        raise ChapterReadError(path, exc.strerror or str(exc)) from exc


def _default_file_mode() -> int:
    umask = os.umask(0)
    os.umask(umask)
    return 0o666 & ~umask


def write_bytes_atomic(path: Path, data: bytes) -> None:
    """Write `data` to a temp file next to `path`, then move it into place.

    The artifact gets the permissions a plain `open(path, "wb")` would give it.
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    fd, temp_name = tempfile.mkstemp(dir=path.parent, prefix=f".{path.name}.", suffix=".partial")
    temp_path = Path(temp_name)
    try:
        with os.fdopen(fd, "wb") as handle:
            handle.write(data)
        os.chmod(temp_path, _default_file_mode())
        os.replace(temp_path, path)
    except BaseException:
        try:
            temp_path.unlink()
        except FileNotFoundError:
            pass
        raise


def write_text_file(path: Path, text: str) -> None:
    write_bytes_atomic(path, text.encode("utf-8"))
