"""Record layout declarations and shape classification."""

from hexlens.layout.types import (
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
    LayoutType,
    ScalarType,
    StructType,
    StructField,
    as_layout,
)
from hexlens.layout.record import record, is_record, layout_of
from hexlens.layout.shapes import kind_path, innermost, is_nested_array

__all__ = [
    "Kind",
    "ScalarType",
    "ArrayType",
    "StructType",
    "StructField",
    "LayoutType",
    "Array",
    "as_layout",
    "record",
    "is_record",
    "layout_of",
    "kind_path",
    "innermost",
    "is_nested_array",
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
]
