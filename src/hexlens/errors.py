"""Exception types raised by hexlens."""


class HexlensError(Exception):
    """Base class for all hexlens errors."""


class ReadError(HexlensError):
    """The byte source is exhausted, a seek is out of range, or I/O failed."""


class UnsupportedTypeError(HexlensError, TypeError):
    """A marshal destination is neither an aggregate nor an array."""

    def __init__(self, shape: object) -> None:
        self.shape = shape
        super().__init__(f"Not supported: {_describe(shape)}")


class IntrospectionError(HexlensError):
    """A shape could not be classified or walked."""


class OverlapError(HexlensError, ValueError):
    """An annotation would overlap bytes already claimed in the store."""


def _describe(shape: object) -> str:
    if isinstance(shape, type):
        return shape.__name__
    return f"{shape!r} ({type(shape).__name__})"
