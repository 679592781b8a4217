"""Typed record reader that annotates every field it consumes."""

import io
import logging
import struct
from enum import Enum
from collections.abc import Iterator
from typing import TYPE_CHECKING, Any, BinaryIO

from hexlens.errors import ReadError, OverlapError, IntrospectionError, UnsupportedTypeError
from hexlens.layout.types import ArrayType, ScalarType, StructType, LayoutType
from hexlens.layout.record import is_record
from hexlens.layout.shapes import kind_path, is_nested_array
from hexlens.reader.cursor import ByteCursor
from hexlens.reader.annotations import Annotation, AnnotationStore

if TYPE_CHECKING:
    from hexlens.render.styles import DumpStyle

logger = logging.getLogger(__name__)


class ByteOrder(Enum):
    """Byte order applied to every multi-byte scalar of a reader."""

    LITTLE = "<"
    BIG = ">"

    @classmethod
    def parse(cls, name: str) -> "ByteOrder":
        """Parse 'little'/'le' or 'big'/'be'."""
        key = name.strip().lower()
        if key in ("little", "le", "<"):
            return cls.LITTLE
        if key in ("big", "be", ">"):
            return cls.BIG
        raise ValueError(f"Unknown byte order: {name!r}")


class AnnotatingReader:
    """Reads fixed-layout records from a byte source and annotates each field.

    Annotations from every ``marshal`` call accumulate in ``store``, so a
    single reader can walk a multi-record stream (a file header, then a
    trailing table, ...) and render one combined dump at the end.
    """

    def __init__(
        self,
        source: ByteCursor | BinaryIO | bytes,
        byte_order: ByteOrder = ByteOrder.LITTLE,
        style: "DumpStyle | None" = None,
    ) -> None:
        if isinstance(source, ByteCursor):
            self.cursor = source
        elif isinstance(source, (bytes, bytearray, memoryview)):
            self.cursor = ByteCursor.from_bytes(bytes(source))
        else:
            self.cursor = ByteCursor(source)

        self.byte_order = byte_order
        self.store = AnnotationStore()
        self.style = style

    def seek(self, offset: int, whence: int = io.SEEK_SET) -> int:
        return self.cursor.seek(offset, whence)

    def tell(self) -> int:
        return self.cursor.tell()

    def marshal(self, destination: Any, name_prefix: str = "") -> Any:
        """Read one record or array at the current offset and annotate it.

        Args:
            destination: A record instance (filled in place), a record class
                (instantiated), or an ``ArrayType`` for a bare array.
            name_prefix: Prefix for annotation names; bare arrays use it verbatim.

        Returns:
            The filled record, or the decoded array value.

        Raises:
            UnsupportedTypeError: Destination is neither a record nor an array.
            ReadError: Not enough bytes; the store is left untouched and the
                cursor returns to where the call started.
        """
        target, layout = self._normalize(destination)

        fmt = self.byte_order.value + layout.format
        if struct.calcsize(fmt) != layout.size:
            raise IntrospectionError(
                f"Layout {layout} packs to {struct.calcsize(fmt)} bytes, expected {layout.size}"
            )

        base = self.cursor.tell()
        logger.debug("Marshal %s as %r at %#x (%d bytes)", layout, name_prefix, base, layout.size)

        try:
            data = self.cursor.read_exact(layout.size)
            values = iter(struct.unpack(fmt, data))

            if isinstance(layout, StructType):
                field_values = [_build(f.field_type, values) for f in layout.fields]
                batch = self._annotate_fields(layout, field_values, base, name_prefix)
            else:
                result = _build(layout, values)
                batch = [] if layout.size == 0 else [_annotation(base, name_prefix, layout, result)]

            self.store.add_all(batch)
        except (ReadError, OverlapError, IntrospectionError):
            self.cursor.seek(base)
            raise
        logger.debug("Committed %d annotation(s) for %r", len(batch), name_prefix)

        if isinstance(layout, StructType):
            for f, value in zip(layout.fields, field_values):
                _assign(target, f.name, value)
            return target
        return result

    def _normalize(self, destination: Any) -> tuple[Any, LayoutType]:
        """Resolve the destination to a target object and its layout."""
        if is_record(destination):
            target = destination() if isinstance(destination, type) else destination
            return target, destination.__layout__
        if isinstance(destination, StructType):
            return destination.zero(), destination
        if isinstance(destination, ArrayType):
            return None, destination
        raise UnsupportedTypeError(destination)

    def _annotate_fields(
        self,
        layout: StructType,
        values: list[Any],
        base: int,
        prefix: str,
    ) -> list[Annotation]:
        batch: list[Annotation] = []
        offset = base

        for f, value in zip(layout.fields, values):
            if f.size == 0:
                logger.debug("Skipping empty field %s.%s", layout, f.name)
                continue

            path = kind_path(f.field_type)
            if is_nested_array(path):
                # One annotation per outer element
                inner = f.field_type.element
                for i in range(f.field_type.count):
                    batch.append(_annotation(offset, f"{prefix}.{f.name}[{i}]".strip(), inner, None))
                    offset += inner.size
            else:
                batch.append(_annotation(offset, f"{prefix}.{f.name}".strip(), f.field_type, value))
                offset += f.size

        consumed = base + layout.size
        if offset != consumed:
            raise IntrospectionError(
                f"Annotated up to {offset:#x} but consumed up to {consumed:#x} for {layout}"
            )
        return batch

    def dump(self) -> str:
        """Render all annotations collected so far; the cursor position is kept."""
        from hexlens.render.dump import DumpRenderer

        position = self.cursor.tell()
        try:
            return DumpRenderer(self.style).render(self.store, self.cursor)
        finally:
            self.cursor.seek(position)

    def export(self) -> list[dict[str, Any]]:
        """Annotation table without the visual dump."""
        return self.store.to_dicts()


def _annotation(offset: int, name: str, layout: LayoutType, value: Any) -> Annotation:
    return Annotation(
        offset=offset,
        name=name,
        size=layout.size,
        kind_path=kind_path(layout),
        field_type=layout,
        value=value if isinstance(layout, ScalarType) else None,
    )


def _build(layout: LayoutType, values: Iterator[Any]) -> Any:
    """Rebuild a nested value from a flat stream of unpacked scalars."""
    if isinstance(layout, ScalarType):
        return next(values)
    if isinstance(layout, ArrayType):
        if layout.is_bytes:
            return bytes(next(values) for _ in range(layout.count))
        return [_build(layout.element, values) for _ in range(layout.count)]
    if isinstance(layout, StructType):
        obj = layout.zero()
        for f in layout.fields:
            _assign(obj, f.name, _build(f.field_type, values))
        return obj
    raise IntrospectionError(f"Cannot decode shape: {layout!r}")


def _assign(target: Any, name: str, value: Any) -> None:
    if isinstance(target, dict):
        target[name] = value
    else:
        setattr(target, name, value)
