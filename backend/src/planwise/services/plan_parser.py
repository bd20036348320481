"""Plan text parsing to blocks - line classifier and block assembler.

The generation prompt asks the model for a small, fixed vocabulary of line
prefixes (emoji markers or Markdown headings) plus `- ` list items. This is a
single-pass, line-based parser for that vocabulary only: anything it does not
recognise becomes a paragraph, so model output that drifts from the
convention still renders.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Iterable, NamedTuple, Union


class BlockKind(str, Enum):
    HEADING_1 = "heading_1"
    HEADING_2 = "heading_2"
    HEADING_3 = "heading_3"
    LIST_ITEM = "list_item"
    SPACER = "spacer"
    PARAGRAPH = "paragraph"


_HEADING_LEVELS = {
    BlockKind.HEADING_1: 1,
    BlockKind.HEADING_2: 2,
    BlockKind.HEADING_3: 3,
}


@dataclass(frozen=True)
class MarkerTable:
    """Line prefixes per block kind. Each prefix includes its separating space."""

    name: str
    heading_1: tuple[str, ...]
    heading_2: tuple[str, ...]
    heading_3: tuple[str, ...]
    list_item: tuple[str, ...]

    def ordered(self) -> list[tuple[BlockKind, str]]:
        """Prefixes in match priority: h1, h2, h3, list item."""
        out: list[tuple[BlockKind, str]] = []
        for kind, prefixes in (
            (BlockKind.HEADING_1, self.heading_1),
            (BlockKind.HEADING_2, self.heading_2),
            (BlockKind.HEADING_3, self.heading_3),
            (BlockKind.LIST_ITEM, self.list_item),
        ):
            out.extend((kind, p) for p in prefixes)
        return out


EMOJI_MARKERS = MarkerTable(
    name="emoji",
    heading_1=("📜 ",),
    heading_2=("📅 ", "💡 "),
    # Models sometimes drop the U+FE0F variation selector.
    heading_3=("☀️ ", "🌤️ ", "🌙 ", "☀ ", "🌤 "),
    list_item=("- ",),
)

MARKDOWN_MARKERS = MarkerTable(
    name="markdown",
    heading_1=("# ",),
    heading_2=("## ",),
    heading_3=("### ",),
    list_item=("- ", "* "),
)

MARKER_TABLES: dict[str, MarkerTable] = {
    EMOJI_MARKERS.name: EMOJI_MARKERS,
    MARKDOWN_MARKERS.name: MARKDOWN_MARKERS,
}


def get_marker_table(name: str | None) -> MarkerTable:
    """Look up a marker table by name ("emoji" or "markdown")."""
    key = (name or "").strip().lower() or EMOJI_MARKERS.name
    table = MARKER_TABLES.get(key)
    if table is None:
        raise ValueError(f"Unknown marker style: {name!r} (expected one of {sorted(MARKER_TABLES)})")
    return table


class Line(NamedTuple):
    index: int
    text: str


class ClassifiedLine(NamedTuple):
    kind: BlockKind
    content: str
    index: int = 0


@dataclass(frozen=True)
class Heading:
    level: int
    text: str
    line: int = 0


@dataclass(frozen=True)
class ListBlock:
    items: tuple[str, ...]
    line: int = 0


@dataclass(frozen=True)
class Paragraph:
    text: str
    line: int = 0


@dataclass(frozen=True)
class Spacer:
    line: int = 0


Block = Union[Heading, ListBlock, Paragraph, Spacer]


def split_lines(text: str) -> list[Line]:
    """Split on "\\n". A final newline does not start an extra empty line."""
    if not text:
        return []
    parts = text.split("\n")
    if parts[-1] == "":
        parts.pop()
    return [Line(i, part) for i, part in enumerate(parts)]


def classify_line(line: str, markers: MarkerTable = EMOJI_MARKERS, index: int = 0) -> ClassifiedLine:
    """Return the line's block kind and its content with the marker removed."""
    if line.endswith("\r"):
        line = line[:-1]
    for kind, prefix in markers.ordered():
        if line.startswith(prefix):
            return ClassifiedLine(kind, line[len(prefix):], index)
    if not line.strip():
        return ClassifiedLine(BlockKind.SPACER, "", index)
    return ClassifiedLine(BlockKind.PARAGRAPH, line, index)


def assemble_blocks(lines: Iterable[ClassifiedLine]) -> list[Block]:
    """Fold classified lines into blocks, merging each run of list items into one ListBlock."""
    blocks: list[Block] = []
    pending: list[str] = []
    pending_start = 0

    def flush_list() -> None:
        if pending:
            blocks.append(ListBlock(tuple(pending), pending_start))
            pending.clear()

    for kind, content, index in lines:
        if kind == BlockKind.LIST_ITEM:
            if not pending:
                pending_start = index
            pending.append(content)
            continue
        flush_list()
        if kind in _HEADING_LEVELS:
            blocks.append(Heading(_HEADING_LEVELS[kind], content, index))
        elif kind == BlockKind.SPACER:
            blocks.append(Spacer(index))
        else:
            blocks.append(Paragraph(content, index))
    flush_list()
    return blocks


def parse_plan(text: str, markers: MarkerTable = EMOJI_MARKERS) -> list[Block]:
    """
    Parse plan text into an ordered list of blocks.
    Never raises: unrecognised lines become paragraphs, and "" gives [].
    """
    return assemble_blocks(classify_line(ln.text, markers, ln.index) for ln in split_lines(text))
