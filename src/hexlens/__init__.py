"""hexlens - annotated hex dumps of fixed-layout binary records."""

import logging

from hexlens.errors import (
    ReadError,
    HexlensError,
    OverlapError,
    IntrospectionError,
    UnsupportedTypeError,
)
from hexlens.layout import (
    BYTE,
    INT8,
    INT16,
    INT32,
    INT64,
    UINT8,
    UINT16,
    UINT32,
    UINT64,
    FLOAT32,
    FLOAT64,
    Kind,
    Array,
    ArrayType,
    ScalarType,
    StructType,
    record,
    layout_of,
    kind_path,
)
from hexlens.reader import (
    ByteOrder,
    Annotation,
    ByteCursor,
    AnnotationStore,
    AnnotatingReader,
)
from hexlens.render import DumpStyle, DumpRenderer

__version__ = "0.1.0"
__all__ = [
    "AnnotatingReader",
    "ByteCursor",
    "ByteOrder",
    "Annotation",
    "AnnotationStore",
    "DumpRenderer",
    "DumpStyle",
    "record",
    "layout_of",
    "kind_path",
    "Kind",
    "Array",
    "ArrayType",
    "ScalarType",
    "StructType",
    "BYTE",
    "INT8",
    "UINT8",
    "INT16",
    "UINT16",
    "INT32",
    "UINT32",
    "INT64",
    "UINT64",
    "FLOAT32",
    "FLOAT64",
    "HexlensError",
    "ReadError",
    "UnsupportedTypeError",
    "IntrospectionError",
    "OverlapError",
    "enable_logging",
]


def enable_logging(level: str | int = "WARNING") -> None:
    """Send hexlens logs to stderr through rich."""
    from rich.console import Console
    from rich.logging import RichHandler

    log = logging.getLogger("hexlens")
    log.setLevel(level)
    handler = RichHandler(console=Console(stderr=True), show_path=False)
    handler.setLevel(level)
    log.addHandler(handler)


def main() -> None:
    """Entry point for CLI."""
    from hexlens.cli import main as cli_main

    cli_main()
