"""Iterators over every match of a typed value or range in a byte buffer."""

from __future__ import annotations

from typing import Iterator, Optional

from memscan.finders import (
    Buffer,
    ElementType,
    Number,
    find_exclusive_range,
    find_inclusive_range,
    find_next,
)


class _OffsetSearch:
    """Yields the byte offsets of successive matches in a buffer.

    Each match moves the position one element past it. A search that
    finds nothing rewinds to the start, so the same object can be run
    through again.
    """

    def __init__(self, element_type: ElementType, haystack: Buffer) -> None:
        self.element_type = element_type
        self.haystack = memoryview(haystack).cast("B")
        self._current = 0

    def _find(self, haystack: memoryview) -> Optional[int]:
        raise NotImplementedError

    def __iter__(self) -> Iterator[int]:
        return self

    def __next__(self) -> int:
        if self._current >= len(self.haystack):
            raise StopIteration
        found = self._find(self.haystack[self._current:])
        if found is None:
            self._current = 0
            raise StopIteration
        offset = self._current + found
        self._current = offset + self.element_type.size()
        return offset


class MemorySearch(_OffsetSearch):
    """Offsets of every element equal to ``needle``."""

    def __init__(self, element_type: ElementType, needle: Number, haystack: Buffer) -> None:
        super().__init__(element_type, haystack)
        self.needle = needle

    def _find(self, haystack: memoryview) -> Optional[int]:
        return find_next(self.element_type, self.needle, haystack)

    def __iter__(self) -> Iterator[int]:
        return self

    def __next__(self) -> int:
        return super().__next__()


class InclusiveRangeSearch(_OffsetSearch):
    """Offsets of every element with ``lower <= value <= upper``."""

    def __init__(
        self, element_type: ElementType, lower: Number, upper: Number, haystack: Buffer
    ) -> None:
        super().__init__(element_type, haystack)
        self.lower = lower
        self.upper = upper

    def _find(self, haystack: memoryview) -> Optional[int]:
        return find_inclusive_range(self.element_type, self.lower, self.upper, haystack)

    def __iter__(self) -> Iterator[int]:
        return self

    def __next__(self) -> int:
        return super().__next__()


class ExclusiveRangeSearch(_OffsetSearch):
    """Offsets of every element with ``lower < value < upper``."""

    def __init__(
        self, element_type: ElementType, lower: Number, upper: Number, haystack: Buffer
    ) -> None:
        super().__init__(element_type, haystack)
        self.lower = lower
        self.upper = upper

    def _find(self, haystack: memoryview) -> Optional[int]:
        return find_exclusive_range(self.element_type, self.lower, self.upper, haystack)

    def __iter__(self) -> Iterator[int]:
        return self

    def __next__(self) -> int:
        return super().__next__()