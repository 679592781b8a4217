"""Presentation settings for annotated dumps."""

from dataclasses import field, dataclass
from collections.abc import Mapping

# Perimeter colors, one per dumped field, cycled
DEFAULT_PALETTE: tuple[str, ...] = ("cyan", "magenta", "green", "blue", "yellow")

DEFAULT_COLOR = "white"

# Printable ASCII range
PRINTABLE_MIN = 0x20  # space
PRINTABLE_MAX = 0x7E  # tilde

WHITESPACE = frozenset({0x09, 0x0A, 0x0B, 0x0C, 0x0D, 0x20})


def is_printable(b: int) -> bool:
    return PRINTABLE_MIN <= b <= PRINTABLE_MAX


def default_byte_colors() -> dict[int, str]:
    """Byte class colors: NUL, whitespace, digits, letters and non-printable bytes.

    Punctuation has no entry and falls back to the default color.
    """
    colors: dict[int, str] = {}
    for b in range(256):
        if b == 0x00:
            colors[b] = "bright_black"
        elif b in WHITESPACE:
            colors[b] = "yellow"
        elif 0x30 <= b <= 0x39:
            colors[b] = "bright_cyan"
        elif 0x41 <= b <= 0x5A or 0x61 <= b <= 0x7A:
            colors[b] = "bright_green"
        elif not is_printable(b):
            colors[b] = "red"
    return colors


@dataclass
class DumpStyle:
    """Colors and effects used by DumpRenderer."""

    palette: tuple[str, ...] = DEFAULT_PALETTE
    byte_colors: Mapping[int, str] = field(default_factory=default_byte_colors)
    default_color: str = DEFAULT_COLOR
    highlight: str = "underline"
    frame: str = "bold"
    color: bool = True

    def __post_init__(self) -> None:
        if not self.palette:
            raise ValueError("Palette must contain at least one color")
        self.palette = tuple(self.palette)

    def perimeter_color(self, index: int) -> str:
        """Color of the index-th dumped field (zero based)."""
        return self.palette[index % len(self.palette)]

    def byte_color(self, b: int) -> str:
        return self.byte_colors.get(b, self.default_color)

    @classmethod
    def plain(cls) -> "DumpStyle":
        """Style without any escape sequences."""
        return cls(color=False)
