"""Shape classification of layout types."""

from hexlens.errors import IntrospectionError
from hexlens.layout.types import Kind, ArrayType, ScalarType, StructType, as_layout


def kind_path(shape: object) -> tuple[Kind, ...]:
    """Chain of kinds from the outermost container down to the innermost element.

    Arrays are homogeneous, so only the element type is followed:
    a 2-D array of uint16 yields ``(ARRAY, ARRAY, UINT16)``. Structs are
    not descended into.
    """
    layout = as_layout(shape)
    if layout is None:
        raise IntrospectionError(f"Cannot classify shape: {shape!r}")

    path: list[Kind] = []
    while isinstance(layout, ArrayType):
        path.append(Kind.ARRAY)
        layout = layout.element

    if isinstance(layout, StructType):
        path.append(Kind.STRUCT)
    elif isinstance(layout, ScalarType):
        path.append(layout.kind)
    else:
        raise IntrospectionError(f"Cannot classify array element: {layout!r}")

    return tuple(path)


def innermost(shape: object) -> object:
    """Innermost element layout of an array, or the layout itself."""
    layout = as_layout(shape)
    if layout is None:
        raise IntrospectionError(f"Cannot classify shape: {shape!r}")
    while isinstance(layout, ArrayType):
        layout = layout.element
    return layout


def is_nested_array(path: tuple[Kind, ...]) -> bool:
    """True for an array of arrays."""
    return len(path) >= 2 and path[0] == Kind.ARRAY and path[1] == Kind.ARRAY
