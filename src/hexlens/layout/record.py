"""Declarative record layouts.

A record is a dataclass whose annotations are layout types::

    @record
    class Header:
        magic: Array(UINT8, 4)
        version: UINT16
        count: UINT32

The decorator computes the packed ``StructType`` once and stores it as
``Header.__layout__``. Every field gets a zero default, so ``Header()`` is a
ready destination for ``AnnotatingReader.marshal``.

A record subclassing another record starts with the base record's fields.
"""

import inspect
from dataclasses import field, dataclass

from hexlens.errors import IntrospectionError
from hexlens.layout.types import StructType, StructField, LayoutType, as_layout


def record(cls: type | None = None, *, name: str | None = None):
    """Class decorator turning an annotated class into a record."""

    def wrap(cls: type) -> type:
        return _build_record(cls, name or cls.__name__)

    if cls is None:
        return wrap
    return wrap(cls)


def _build_record(cls: type, name: str) -> type:
    annotations = inspect.get_annotations(cls, eval_str=True)

    struct_fields = list(_inherited_fields(cls))
    offset = sum(f.size for f in struct_fields)
    inherited = {f.name for f in struct_fields}
    for field_name, annotation in annotations.items():
        if field_name in inherited:
            raise IntrospectionError(
                f"Field {cls.__name__}.{field_name} redefines an inherited field"
            )
        field_type = as_layout(annotation)
        if field_type is None:
            raise IntrospectionError(
                f"Field {cls.__name__}.{field_name} has no layout: {annotation!r}"
            )
        struct_fields.append(StructField(field_name, offset, field_type))
        offset += field_type.size

        setattr(cls, field_name, field(default_factory=field_type.zero))

    cls = dataclass(cls)
    cls.__layout__ = StructType(name, tuple(struct_fields), factory=cls)
    return cls


def _inherited_fields(cls: type) -> tuple[StructField, ...]:
    """Fields of the nearest record base, which already include its own bases."""
    bases = [b for b in cls.__mro__[1:] if isinstance(vars(b).get("__layout__"), StructType)]
    if not bases:
        return ()

    nearest = bases[0]
    for other in bases[1:]:
        if other not in nearest.__mro__:
            raise IntrospectionError(
                f"Record {cls.__name__} has unrelated record bases "
                f"{nearest.__name__} and {other.__name__}"
            )
    return nearest.__layout__.fields


def layout_of(obj: object) -> LayoutType | None:
    """Get the layout of a record class or instance, or of a layout type."""
    return as_layout(obj)


def is_record(obj: object) -> bool:
    """Check if obj is a record class or record instance."""
    return isinstance(getattr(obj, "__layout__", None), StructType)

