"""Build configuration: output formats, Pandoc options and pipeline knobs."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
import datetime as dt
import re
import shlex
from typing import Iterable, List, Tuple

from book_forge.code_blocks import DEFAULT_CONTINUATION_MARKER, DEFAULT_HIDDEN_MARKER, DEFAULT_LANGUAGES
from book_forge.links import DEFAULT_LINK_PREFIXES

RELEASE_DATE_PATTERN = re.compile(r"^\d{4}-\d{2}-\d{2}$")

MARKDOWN_DIALECT = (
    "markdown+grid_tables+pipe_tables-simple_tables+raw_html+implicit_figures+footnotes"
    "+intraword_underscores+auto_identifiers-inline_code_attributes"
)

_COMMON_OPTIONS = "--standalone --highlight-style=tango --table-of-contents"
_LATEX_OPTIONS = f"{_COMMON_OPTIONS} --top-level-division=chapter --pdf-engine=xelatex --to=latex"


@dataclass(frozen=True, slots=True)
class OutputFormat:
    """One rendered artifact: `<prefix>-<release_date>.<extension>`."""

    name: str
    extension: str
    options: str
    plain: bool = False
    stylesheet: bool = False

    def option_args(self) -> List[str]:
        return shlex.split(self.options)


DEFAULT_FORMATS: Tuple[OutputFormat, ...] = (
    OutputFormat(
        "html",
        "html",
        f"{_COMMON_OPTIONS} --embed-resources --section-divs --to=html5",
        stylesheet=True,
    ),
    OutputFormat("epub", "epub", f"{_COMMON_OPTIONS} --epub-chapter-level=1 --to=epub3", stylesheet=True),
    OutputFormat("tex", "tex", _LATEX_OPTIONS, plain=True),
    OutputFormat("a4.pdf", "a4.pdf", f"{_LATEX_OPTIONS} --variable papersize=a4", plain=True),
    OutputFormat("letter.pdf", "letter.pdf", f"{_LATEX_OPTIONS} --variable papersize=letter", plain=True),
)


def today() -> str:
    return dt.date.today().isoformat()


@dataclass(frozen=True, slots=True)
class BuildConfig:
    """Everything one book build needs; passed explicitly to the orchestrator."""

    prefix: str = "book"
    release_date: str = field(default_factory=today)
    markdown_dialect: str = MARKDOWN_DIALECT
    formats: Tuple[OutputFormat, ...] = DEFAULT_FORMATS
    toc_file: str = "SUMMARY.md"
    introduction_file: str | None = "README.md"
    introduction_title: str = "Introduction"
    introduction_base_level: int = 1
    chapter_base_level: int = 3
    wrap_width: int = 87
    continuation_marker: str = DEFAULT_CONTINUATION_MARKER
    code_languages: Tuple[str, ...] = DEFAULT_LANGUAGES
    hidden_marker: str = DEFAULT_HIDDEN_MARKER
    link_prefixes: Tuple[Tuple[str, str], ...] = DEFAULT_LINK_PREFIXES
    strip_title_numerals: bool = False
    convert_checkmarks: bool = False
    keep_going: bool = False

    def __post_init__(self) -> None:
        if not self.prefix:
            raise ValueError("prefix cannot be empty")
        if not RELEASE_DATE_PATTERN.match(self.release_date):
            raise ValueError(f"release_date must look like YYYY-MM-DD, got '{self.release_date}'")
        if self.introduction_base_level < 1 or self.chapter_base_level < 1:
            raise ValueError("heading base levels must be at least 1")
        if self.wrap_width - len(self.continuation_marker) - 1 < 1:
            raise ValueError(f"wrap_width {self.wrap_width} is too small for the continuation marker")

    def artifact_name(self, extension: str) -> str:
        return f"{self.prefix}-{self.release_date}.{extension}"

    def select_formats(self, names: Iterable[str]) -> "BuildConfig":
        """Return a copy restricted to `names`, keeping the configured order."""
        wanted = list(names)
        known = {fmt.name for fmt in self.formats}
        unknown = [name for name in wanted if name not in known]
        if unknown:
            raise ValueError(
                f"Unknown output format(s): {', '.join(unknown)}; choose from {', '.join(sorted(known))}"
            )
        return replace(self, formats=tuple(fmt for fmt in self.formats if fmt.name in wanted))


def render_meta(meta_text: str, release_date: str) -> str:
    """Fill the `{release_date}` placeholder of a metadata block."""
    return meta_text.replace("{release_date}", release_date)
