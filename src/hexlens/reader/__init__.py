"""Byte source, annotation store and the annotating record reader."""

from hexlens.reader.cursor import ByteCursor
from hexlens.reader.marshal import ByteOrder, AnnotatingReader
from hexlens.reader.annotations import Annotation, AnnotationStore

__all__ = [
    "ByteCursor",
    "ByteOrder",
    "Annotation",
    "AnnotationStore",
    "AnnotatingReader",
]
