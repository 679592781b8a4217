"""Annotated hex dump rendering.

Each annotation is dumped as one or more 16-byte rows::

    00000000  54 46 4d 58 2d 53 4f 4e  47 20                    |TFMX-SONG |       uint8[10] song.Header: L: 0x0A 10

All rows of a field share one perimeter color (offset, type and name);
bytes are colored by class, and bytes at natural alignment boundaries of the
field's innermost scalar are highlighted.
"""

import io
import logging

from rich.text import Text
from rich.console import Console

from hexlens.reader.cursor import ByteCursor
from hexlens.reader.annotations import Annotation, AnnotationStore
from hexlens.render.styles import DumpStyle, is_printable

logger = logging.getLogger(__name__)

ROW_WIDTH = 16
HALF_ROW = 8

# Innermost scalar sizes that get alignment highlighting
HIGHLIGHT_CADENCES = frozenset({2, 4, 8})


class DumpRenderer:
    """Replays an AnnotationStore against its byte source."""

    def __init__(self, style: DumpStyle | None = None) -> None:
        self.style = style or DumpStyle()

    def render(self, store: AnnotationStore, cursor: ByteCursor) -> str:
        """Render the dump as a string, with ANSI escapes when color is enabled."""
        text = self.render_text(store, cursor)
        if not self.style.color:
            return text.plain

        console = Console(
            file=io.StringIO(),
            force_terminal=True,
            color_system="standard",
            highlight=False,
        )
        with console.capture() as capture:
            console.print(text, end="", soft_wrap=True)
        return capture.get()

    def render_text(self, store: AnnotationStore, cursor: ByteCursor) -> Text:
        """Render the dump as styled rich text.

        Raises:
            ReadError: If an annotated range can no longer be read.
        """
        lines: list[Text] = []

        for index, ann in enumerate(store):
            perimeter = self.style.perimeter_color(index)
            cursor.seek(ann.offset)
            data = cursor.read_exact(ann.size)

            for row in range(0, ann.size, ROW_WIDTH):
                chunk = data[row : row + ROW_WIDTH]
                lines.append(self._render_row(ann, ann.offset + row, chunk, perimeter))

        logger.debug("Rendered %d row(s) for %d field(s)", len(lines), len(store))
        return Text("\n").join(lines)

    def _render_row(self, ann: Annotation, offset: int, chunk: bytes, perimeter: str) -> Text:
        cadence = ann.scalar_size if ann.scalar_size in HIGHLIGHT_CADENCES else None
        missing = ROW_WIDTH - len(chunk)

        line = Text(no_wrap=True)
        line.append(f"{offset:08x}", style=perimeter)
        line.append("  ")

        # Hex
        for i, b in enumerate(chunk):
            line.append(f"{b:02x}", style=self._byte_style(b, i, cadence))
            line.append(" ")
            if i == HALF_ROW - 1:
                line.append(" ")

        if missing > HALF_ROW:
            line.append(" ")
        line.append("   " * missing)

        # ASCII
        line.append(" ")
        line.append("|", style=self.style.frame)
        for i, b in enumerate(chunk):
            char = chr(b) if is_printable(b) else "."
            line.append(char, style=self._byte_style(b, i, cadence))
        line.append("|", style=self.style.frame)
        line.append(" ")
        line.append(" " * missing)

        # Field information
        line.append(f"{ann.field_type} ", style=perimeter)
        line.append(f"{ann.name}: ", style=perimeter)
        line.append(f"L: 0x{ann.size:02X} {ann.size}")
        if ann.value is not None:
            line.append(f" V: {format_value(ann)}")

        return line

    def _byte_style(self, b: int, index: int, cadence: int | None) -> str:
        style = self.style.byte_color(b)
        if cadence and index % cadence == 0:
            style = f"{style} {self.style.highlight}"
        return style


def format_value(ann: Annotation) -> str:
    """Hex and decimal form of a scalar value, hex padded to the scalar width."""
    value = ann.value
    if isinstance(value, float):
        return repr(value)
    width = ann.size * 2
    mask = (1 << (ann.size * 8)) - 1
    return f"0x{value & mask:0{width}x} {value}"


def row_count(size: int) -> int:
    """Number of dump rows for a field of size bytes."""
    return -(-size // ROW_WIDTH)
