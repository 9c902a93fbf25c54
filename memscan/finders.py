"""Typed value search over raw byte buffers.

A buffer is read as a run of fixed-width elements in native byte order,
starting at offset zero. A trailing partial element is never inspected.
Every search returns the byte offset of the first matching element,
or ``None`` when nothing matches.
"""

from __future__ import annotations

import struct
from enum import Enum
from typing import Callable, Iterator, Optional, Union

Number = Union[int, float]
Buffer = Union[bytes, bytearray, memoryview]


class ElementType(Enum):
    """The element types a buffer can be searched for."""

    U8 = "u8"
    U16 = "u16"
    U32 = "u32"
    U64 = "u64"
    F32 = "f32"
    F64 = "f64"

    def size(self) -> int:
        """Width of one element in bytes."""
        return _SIZES[self]

    @property
    def format(self) -> str:
        """The struct/memoryview format code for this element type."""
        return _FORMATS[self]

    @property
    def is_float(self) -> bool:
        return self in (ElementType.F32, ElementType.F64)

    def coerce(self, value: Number) -> Number:
        """Bring ``value`` into this type's domain, as the buffer would hold it.

        Integers must fit the unsigned range; floats are rounded to the
        element's precision.
        """
        if self.is_float:
            return struct.unpack("=" + self.format, struct.pack("=" + self.format, float(value)))[0]
        if isinstance(value, float):
            if not value.is_integer():
                raise ValueError(f"{value!r} is not an integer value for {self.value}")
            value = int(value)
        limit = 1 << (8 * self.size())
        if not 0 <= value < limit:
            raise ValueError(f"{value!r} is out of range for {self.value}")
        return value


_SIZES = {
    ElementType.U8: 1,
    ElementType.U16: 2,
    ElementType.U32: 4,
    ElementType.U64: 8,
    ElementType.F32: 4,
    ElementType.F64: 8,
}

_FORMATS = {
    ElementType.U8: "B",
    ElementType.U16: "H",
    ElementType.U32: "I",
    ElementType.U64: "Q",
    ElementType.F32: "f",
    ElementType.F64: "d",
}


def _elements(element_type: ElementType, haystack: Buffer) -> Iterator[Number]:
    """Yield every whole element of ``haystack`` in order."""
    raw = memoryview(haystack).cast("B")
    width = element_type.size()
    usable = len(raw) - len(raw) % width
    if usable == 0:
        return iter(())
    native = struct.calcsize(element_type.format) == width
    if native:
        return iter(raw[:usable].cast(element_type.format))
    return (item for (item,) in struct.iter_unpack("=" + element_type.format, raw[:usable]))


def _first_offset(
    element_type: ElementType,
    haystack: Buffer,
    predicate: Callable[[Number], bool],
) -> Optional[int]:
    width = element_type.size()
    for index, value in enumerate(_elements(element_type, haystack)):
        if predicate(value):
            return index * width
    return None


def find_next(element_type: ElementType, needle: Number, haystack: Buffer) -> Optional[int]:
    """Return the byte offset of the first element equal to ``needle``."""
    target = element_type.coerce(needle)
    return _first_offset(element_type, haystack, lambda value: value == target)


def find_inclusive_range(
    element_type: ElementType, lower: Number, upper: Number, haystack: Buffer
) -> Optional[int]:
    """Return the byte offset of the first element with ``lower <= value <= upper``."""
    low = element_type.coerce(lower)
    high = element_type.coerce(upper)
    return _first_offset(element_type, haystack, lambda value: low <= value <= high)


def find_exclusive_range(
    element_type: ElementType, lower: Number, upper: Number, haystack: Buffer
) -> Optional[int]:
    """Return the byte offset of the first element with ``lower < value < upper``."""
    low = element_type.coerce(lower)
    high = element_type.coerce(upper)
    return _first_offset(element_type, haystack, lambda value: low < value < high)