"""Seekable byte source with bounded reads."""

import io
from typing import BinaryIO

from hexlens.errors import ReadError


class ByteCursor:
    """Wraps a seekable binary stream; tracks no state of its own."""

    def __init__(self, stream: BinaryIO) -> None:
        if not stream.seekable():
            raise ReadError("Byte source is not seekable")
        self._stream = stream

    @classmethod
    def from_bytes(cls, data: bytes) -> "ByteCursor":
        """Create a cursor over an in-memory byte string."""
        return cls(io.BytesIO(data))

    @property
    def size(self) -> int:
        """Total size of the source in bytes."""
        current = self.tell()
        try:
            end = self._stream.seek(0, io.SEEK_END)
            self._stream.seek(current, io.SEEK_SET)
        except (OSError, ValueError) as e:
            raise ReadError(f"Cannot determine source size: {e}") from e
        return end

    def seek(self, offset: int, whence: int = io.SEEK_SET) -> int:
        """Move to an offset and return the new absolute offset."""
        if whence == io.SEEK_SET:
            target = offset
        elif whence == io.SEEK_CUR:
            target = self.tell() + offset
        elif whence == io.SEEK_END:
            target = self.size + offset
        else:
            raise ReadError(f"Invalid whence: {whence}")

        if target < 0 or target > self.size:
            raise ReadError(f"Seek offset {target:#x} is out of bounds (size: {self.size:#x})")

        try:
            return self._stream.seek(target, io.SEEK_SET)
        except (OSError, ValueError) as e:
            raise ReadError(f"Seek to {target:#x} failed: {e}") from e

    def tell(self) -> int:
        """Current absolute offset."""
        try:
            return self._stream.tell()
        except (OSError, ValueError) as e:
            raise ReadError(f"Cannot determine current offset: {e}") from e

    def read_exact(self, size: int) -> bytes:
        """Read exactly ``size`` bytes from the current offset."""
        if size < 0:
            raise ReadError(f"Invalid read size: {size}")

        start = self.tell()
        try:
            data = self._stream.read(size)
        except (OSError, ValueError) as e:
            raise ReadError(f"Read of {size} bytes at {start:#x} failed: {e}") from e

        if len(data) != size:
            raise ReadError(
                f"Cannot read {size} bytes from offset {start:#x}; only {len(data)} available"
            )
        return data
