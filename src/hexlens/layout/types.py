"""Fixed-size layout types used to describe binary records."""

from enum import IntEnum, auto
from dataclasses import field, dataclass
from collections.abc import Callable


class Kind(IntEnum):
    """Shape kind of a layout type."""

    INT8 = auto()
    UINT8 = auto()
    INT16 = auto()
    UINT16 = auto()
    INT32 = auto()
    UINT32 = auto()
    INT64 = auto()
    UINT64 = auto()
    FLOAT32 = auto()
    FLOAT64 = auto()
    ARRAY = auto()
    STRUCT = auto()

    @property
    def is_scalar(self) -> bool:
        return self not in (Kind.ARRAY, Kind.STRUCT)


@dataclass(frozen=True)
class ScalarType:
    """Fixed-width integer or floating point scalar."""

    kind: Kind
    size: int  # bytes
    code: str  # struct format character
    signed: bool = False

    @property
    def format(self) -> str:
        return self.code

    @property
    def is_float(self) -> bool:
        return self.kind in (Kind.FLOAT32, Kind.FLOAT64)

    def zero(self) -> int | float:
        return 0.0 if self.is_float else 0

    def __str__(self) -> str:
        if self.is_float:
            return f"float{self.size * 8}"
        prefix = "" if self.signed else "u"
        return f"{prefix}int{self.size * 8}"


@dataclass(frozen=True)
class ArrayType:
    """Fixed-count homogeneous array."""

    element: "LayoutType"
    count: int

    def __post_init__(self) -> None:
        if self.count < 0:
            raise ValueError(f"Array count must not be negative: {self.count}")

    @property
    def size(self) -> int:
        return self.element.size * self.count

    @property
    def format(self) -> str:
        if isinstance(self.element, ScalarType):
            return f"{self.count}{self.element.code}"
        return self.element.format * self.count

    @property
    def is_bytes(self) -> bool:
        """Arrays of uint8 decode to ``bytes``."""
        return isinstance(self.element, ScalarType) and self.element.kind == Kind.UINT8

    def zero(self) -> bytes | list:
        if self.is_bytes:
            return bytes(self.count)
        return [self.element.zero() for _ in range(self.count)]

    def __str__(self) -> str:
        # Outermost count first, as in a C declaration: uint8[6][40]
        dims = []
        inner: LayoutType = self
        while isinstance(inner, ArrayType):
            dims.append(f"[{inner.count}]")
            inner = inner.element
        return f"{inner}{''.join(dims)}"


@dataclass(frozen=True)
class StructField:
    """Named field within a struct, at a byte offset relative to the struct."""

    name: str
    offset: int
    field_type: "LayoutType"

    @property
    def size(self) -> int:
        return self.field_type.size


@dataclass(frozen=True)
class StructType:
    """Packed aggregate of named fields in declaration order."""

    name: str
    fields: tuple[StructField, ...] = ()
    factory: Callable[[], object] | None = field(default=None, compare=False, repr=False)

    @property
    def size(self) -> int:
        return sum(f.size for f in self.fields)

    @property
    def format(self) -> str:
        return "".join(f.field_type.format for f in self.fields)

    def zero(self) -> object:
        if self.factory is None:
            return {f.name: f.field_type.zero() for f in self.fields}
        return self.factory()

    def field_at(self, offset: int) -> StructField | None:
        """Get field starting at a specific offset."""
        for f in self.fields:
            if f.offset == offset:
                return f
        return None

    def __str__(self) -> str:
        return self.name


# Type alias for all layout types
LayoutType = ScalarType | ArrayType | StructType


INT8 = ScalarType(Kind.INT8, 1, "b", signed=True)
UINT8 = ScalarType(Kind.UINT8, 1, "B")
INT16 = ScalarType(Kind.INT16, 2, "h", signed=True)
UINT16 = ScalarType(Kind.UINT16, 2, "H")
INT32 = ScalarType(Kind.INT32, 4, "i", signed=True)
UINT32 = ScalarType(Kind.UINT32, 4, "I")
INT64 = ScalarType(Kind.INT64, 8, "q", signed=True)
UINT64 = ScalarType(Kind.UINT64, 8, "Q")
FLOAT32 = ScalarType(Kind.FLOAT32, 4, "f", signed=True)
FLOAT64 = ScalarType(Kind.FLOAT64, 8, "d", signed=True)

BYTE = UINT8


def is_layout_type(obj: object) -> bool:
    return isinstance(obj, (ScalarType, ArrayType, StructType))


def as_layout(obj: object) -> LayoutType | None:
    """Return the layout type described by obj, or None.

    Accepts layout types themselves and record classes or instances carrying
    a ``__layout__`` attribute.
    """
    if is_layout_type(obj):
        return obj
    layout = getattr(obj, "__layout__", None)
    if isinstance(layout, StructType):
        return layout
    return None


def Array(element: "LayoutType | type", count: int) -> ArrayType:
    """Shorthand for ``ArrayType(element, count)``; element may be a record class."""
    resolved = as_layout(element)
    if resolved is None:
        raise TypeError(f"Not a layout type: {element!r}")
    return ArrayType(resolved, count)
