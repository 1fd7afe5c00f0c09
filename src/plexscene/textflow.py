"""
Text flow and pagination.

Wraps arbitrary text into lines that fit a pixel width, groups the lines
into height-bounded chunks, and emits one text primitive per chunk stacked
top to bottom. Glyph width is estimated as 0.6 x font size, which is close
enough for the sans-serif and monospace fonts the renderer uses.

Tables are rendered as fixed-width, space-padded monospace text and passed
through the same flow.
"""

import math
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence

from .primitives import FONT_MONO, Primitive, TextStyle, make_text

AVERAGE_GLYPH_RATIO = 0.6
MAX_LINES_PER_CHUNK = 15
CHUNK_GAP = 10
ELLIPSIS = "..."

TABLE_COLUMN_SEPARATOR = "  "
TABLE_RULE_CHAR = "─"
TABLE_EMPTY_TEXT = "[No data available]"
TABLE_PLACEHOLDER_NOTE = (
    "Note: Fields marked as [unknown] or [to be completed] require "
    "additional data collection."
)

TABLE_STYLE = TextStyle(
    font_size=11,
    line_height=1.4,
    stroke_color="#4b5563",
    font_family=FONT_MONO,
    group_ids=("documentation",),
)


def characters_per_line(font_size: float, max_width: float) -> int:
    """How many average glyphs fit in ``max_width`` (at least one)."""
    return max(1, math.floor(max_width / (AVERAGE_GLYPH_RATIO * font_size)))


def truncate(text: str, max_chars: int) -> str:
    """Cut ``text`` to ``max_chars`` including a trailing ellipsis."""
    if len(text) <= max_chars:
        return text
    return text[: max(max_chars - len(ELLIPSIS), 0)] + ELLIPSIS


def wrap_line(line: str, max_chars: int) -> List[str]:
    """
    Greedy word wrap of a single logical line.

    A word that cannot fit on a line of its own is cut to
    ``max_chars - 3`` characters followed by an ellipsis.
    """
    if len(line) <= max_chars:
        return [line]

    wrapped: List[str] = []
    current = ""
    for word in line.split(" "):
        candidate = f"{current} {word}" if current else word
        if len(candidate) <= max_chars:
            current = candidate
            continue

        if current:
            wrapped.append(current)
        if len(word) > max_chars:
            wrapped.append(truncate(word, max_chars))
            current = ""
        else:
            current = word

    if current:
        wrapped.append(current)
    return wrapped


def chunk_text(
    text: str, max_chars: int, max_lines: int = MAX_LINES_PER_CHUNK
) -> List[str]:
    """
    Wrap ``text`` and split the wrapped lines into chunks.

    Explicit line breaks are kept. Each returned chunk holds at most
    ``max_lines`` lines joined with newlines.
    """
    chunks: List[str] = []
    current: List[str] = []

    for logical_line in text.split("\n"):
        for line in wrap_line(logical_line, max_chars):
            current.append(line)
            if len(current) >= max_lines:
                chunks.append("\n".join(current))
                current = []

    if current:
        chunks.append("\n".join(current))
    return chunks or [text]


def text_height(text: str, font_size: float, line_height: float) -> float:
    """Exact height of ``text`` with no padding."""
    return len(text.split("\n")) * font_size * line_height


@dataclass
class FlowResult:
    elements: List[Primitive] = field(default_factory=list)
    total_height: float = 0


class IdSequence:
    """Deterministic element id generator (``<prefix>-1``, ``<prefix>-2``...)."""

    def __init__(self, prefix: str = "doc"):
        self.prefix = prefix
        self._counter = 0

    def next(self) -> str:
        self._counter += 1
        return f"{self.prefix}-{self._counter}"


class TextFlow:
    """
    Flows text into chunked text primitives.

    Args:
        ids: Id generator for produced primitives.
        max_lines_per_chunk: Line budget per text primitive.
        chunk_gap: Vertical gap added after each chunk when the text needs
            more than one chunk.
    """

    def __init__(
        self,
        ids: Optional[IdSequence] = None,
        max_lines_per_chunk: int = MAX_LINES_PER_CHUNK,
        chunk_gap: float = CHUNK_GAP,
    ):
        if max_lines_per_chunk < 1:
            raise ValueError("max_lines_per_chunk must be at least 1")
        self.ids = ids if ids is not None else IdSequence()
        self.max_lines_per_chunk = max_lines_per_chunk
        self.chunk_gap = chunk_gap

    def flow(
        self, text: str, x: float, y: float, max_width: float, style: TextStyle
    ) -> FlowResult:
        """
        Lay out ``text`` at (x, y) within ``max_width``.

        Returns:
            FlowResult with one text primitive per chunk and the cumulative
            height consumed, including inter-chunk gaps.
        """
        max_chars = characters_per_line(style.font_size, max_width)
        chunks = chunk_text(text, max_chars, self.max_lines_per_chunk)
        gap = self.chunk_gap if len(chunks) > 1 else 0

        result = FlowResult()
        current_y = y
        for chunk in chunks:
            height = text_height(chunk, style.font_size, style.line_height)
            result.elements.append(
                make_text(
                    self.ids.next(), chunk, x, current_y, max_width, height, style
                )
            )
            current_y += height + gap
            result.total_height += height + gap
        return result

    def flow_table(
        self,
        rows: Sequence[Dict[str, Any]],
        columns: Sequence["Column"],
        x: float,
        y: float,
        max_width: float,
        style: TextStyle = TABLE_STYLE,
    ) -> FlowResult:
        return self.flow(format_table(rows, columns), x, y, max_width, style)


def flow(
    text: str, x: float, y: float, max_width: float, style: TextStyle
) -> FlowResult:
    """Flow text with default chunking and a fresh id sequence."""
    return TextFlow().flow(text, x, y, max_width, style)


@dataclass
class Column:
    """
    Table column definition.

    Attributes:
        key: Row dict key.
        label: Header text.
        width: Fixed character width; longer values are truncated.
        boolean: Render truthy values as Yes/No.
        default: Placeholder for missing values.
    """

    key: str
    label: str
    width: int
    boolean: bool = False
    default: str = "[unknown]"


def _is_missing(value: Any) -> bool:
    return value is None or value == ""


def _cell_text(row: Dict[str, Any], column: Column) -> str:
    value = row.get(column.key)
    if column.boolean:
        text = "Yes" if value else "No"
    elif _is_missing(value):
        text = column.default
    else:
        text = str(getattr(value, "value", value))
    return truncate(text, column.width).ljust(column.width)


def format_table(rows: Sequence[Dict[str, Any]], columns: Sequence[Column]) -> str:
    """
    Format rows as a monospace table.

    Header, a rule as wide as the header, then one padded line per row.
    Empty tables get a placeholder line; tables with missing values get a
    trailing note.
    """
    header = TABLE_COLUMN_SEPARATOR.join(
        truncate(column.label, column.width).ljust(column.width) for column in columns
    )
    lines = [header, TABLE_RULE_CHAR * len(header)]

    for row in rows:
        lines.append(
            TABLE_COLUMN_SEPARATOR.join(_cell_text(row, column) for column in columns)
        )

    if not rows:
        lines.append(TABLE_EMPTY_TEXT)

    placeholders = sum(
        1
        for row in rows
        for column in columns
        if not column.boolean and _is_missing(row.get(column.key))
    )
    if placeholders:
        lines.extend(["", TABLE_PLACEHOLDER_NOTE])

    return "\n".join(lines)
