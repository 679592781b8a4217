"""Annotated hex dump rendering."""

from hexlens.render.dump import DumpRenderer, format_value, row_count
from hexlens.render.styles import DEFAULT_PALETTE, DumpStyle, default_byte_colors

__all__ = [
    "DumpRenderer",
    "DumpStyle",
    "DEFAULT_PALETTE",
    "default_byte_colors",
    "format_value",
    "row_count",
]
