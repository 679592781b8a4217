"""Offset-indexed field annotations."""

import json
from dataclasses import dataclass
from collections.abc import Iterable, Iterator
from typing import Any

from hexlens.errors import OverlapError
from hexlens.layout.types import Kind, LayoutType, ScalarType
from hexlens.layout.shapes import innermost


@dataclass(frozen=True)
class Annotation:
    """Byte extent, name and shape of one marshaled field."""

    offset: int
    name: str
    size: int
    kind_path: tuple[Kind, ...]
    field_type: LayoutType
    value: int | float | None = None

    @property
    def end(self) -> int:
        return self.offset + self.size

    @property
    def innermost(self) -> Kind:
        return self.kind_path[-1]

    @property
    def scalar_size(self) -> int | None:
        """Byte width of the innermost scalar, if the field bottoms out in one."""
        inner = innermost(self.field_type)
        return inner.size if isinstance(inner, ScalarType) else None

    def overlaps(self, other: "Annotation") -> bool:
        return self.offset < other.end and other.offset < self.end

    def to_dict(self) -> dict[str, Any]:
        return {
            "offset": self.offset,
            "name": self.name,
            "size": self.size,
            "type": str(self.field_type),
            "kind_path": [k.name for k in self.kind_path],
            "value": self.value,
        }

    def __repr__(self) -> str:
        return f"Annotation({self.offset:#x}, {self.name!r}, size={self.size})"


class AnnotationStore:
    """Mapping of start offset to annotation, replayed in ascending offset."""

    def __init__(self) -> None:
        self._entries: dict[int, Annotation] = {}

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[Annotation]:
        return iter(self.values())

    def __contains__(self, offset: object) -> bool:
        return offset in self._entries

    def __getitem__(self, offset: int) -> Annotation:
        return self._entries[offset]

    def get(self, offset: int) -> Annotation | None:
        return self._entries.get(offset)

    def offsets(self) -> list[int]:
        return sorted(self._entries)

    def values(self) -> list[Annotation]:
        """All annotations sorted by start offset."""
        return [self._entries[k] for k in self.offsets()]

    def find(self, name: str) -> Annotation | None:
        """Get annotation by dotted name."""
        for ann in self._entries.values():
            if ann.name == name:
                return ann
        return None

    def at(self, offset: int) -> Annotation | None:
        """Get the annotation whose byte range contains offset."""
        for ann in self._entries.values():
            if ann.offset <= offset < ann.end:
                return ann
        return None

    def add(self, annotation: Annotation) -> None:
        self.add_all([annotation])

    def add_all(self, batch: Iterable[Annotation]) -> None:
        """Commit a batch of annotations, all or nothing.

        Raises:
            OverlapError: If any annotation shares bytes with an existing
                entry or with another annotation in the batch.
        """
        batch = sorted(batch, key=lambda a: a.offset)

        for prev, ann in zip(batch, batch[1:]):
            if prev.overlaps(ann) or prev.offset == ann.offset:
                raise OverlapError(f"Overlap detected: {prev!r} and {ann!r}")

        for ann in batch:
            if ann.offset < 0 or ann.size < 0:
                raise OverlapError(f"Invalid extent: {ann!r}")
            clash = self._entries.get(ann.offset) or self._overlapping(ann)
            if clash is not None:
                raise OverlapError(f"Overlap detected: {ann!r} and {clash!r}")

        for ann in batch:
            self._entries[ann.offset] = ann

    def _overlapping(self, ann: Annotation) -> Annotation | None:
        for existing in self._entries.values():
            if existing.overlaps(ann):
                return existing
        return None

    def clear(self) -> None:
        self._entries.clear()

    def extent(self) -> tuple[int, int] | None:
        """(first offset, end offset) of covered bytes, or None if empty."""
        if not self._entries:
            return None
        entries = self.values()
        return entries[0].offset, max(a.end for a in entries)

    def gaps(self) -> list[tuple[int, int]]:
        """Half-open byte ranges between the first and last entry not covered by any annotation."""
        result: list[tuple[int, int]] = []
        last_end: int | None = None
        for ann in self.values():
            if last_end is not None and ann.offset > last_end:
                result.append((last_end, ann.offset))
            last_end = ann.end if last_end is None else max(last_end, ann.end)
        return result

    def total_size(self) -> int:
        return sum(a.size for a in self._entries.values())

    def to_dicts(self) -> list[dict[str, Any]]:
        return [a.to_dict() for a in self.values()]

    def to_json(self, indent: int | None = 2) -> str:
        return json.dumps(self.to_dicts(), indent=indent)
