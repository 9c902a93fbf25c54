import struct

import pytest

from memscan.finders import ElementType
from memscan.search import ExclusiveRangeSearch, InclusiveRangeSearch, MemorySearch

ALL_TYPES = list(ElementType)
FLOAT_TYPES = [ElementType.F32, ElementType.F64]


def _pack(element_type, values):
    if element_type.is_float:
        values = [float(v) for v in values]
    return struct.pack("=" + element_type.format * len(values), *values)


def _counting(element_type):
    return _pack(element_type, range(100))


def _value(element_type, number):
    return float(number) if element_type.is_float else number


@pytest.mark.parametrize("element_type", ALL_TYPES)
@pytest.mark.parametrize("index", [0, 50, 99])
def test_first_match(element_type, index):
    search = MemorySearch(element_type, _value(element_type, index), _counting(element_type))
    assert next(search) == index * element_type.size()


@pytest.mark.parametrize("element_type", FLOAT_TYPES)
def test_nan_never_matches(element_type):
    search = MemorySearch(element_type, float("nan"), _counting(element_type))
    assert list(search) == []


@pytest.mark.parametrize("element_type", ALL_TYPES)
def test_iter_all_matches(element_type):
    width = element_type.size()
    values = [0] * 100
    for i in (0, 13, 25, 50, 99):
        values[i] = 1
    search = MemorySearch(element_type, _value(element_type, 1), _pack(element_type, values))
    assert list(search) == [0 * width, 13 * width, 25 * width, 50 * width, 99 * width]


@pytest.mark.parametrize("element_type", ALL_TYPES)
def test_inclusive_range_iter(element_type):
    width = element_type.size()
    search = InclusiveRangeSearch(
        element_type, _value(element_type, 30), _value(element_type, 40), _counting(element_type)
    )
    assert list(search) == [i * width for i in range(30, 41)]


@pytest.mark.parametrize("element_type", ALL_TYPES)
def test_exclusive_range_iter(element_type):
    width = element_type.size()
    search = ExclusiveRangeSearch(
        element_type, _value(element_type, 30), _value(element_type, 40), _counting(element_type)
    )
    assert list(search) == [i * width for i in range(31, 40)]


def test_empty_haystack_yields_nothing():
    assert list(MemorySearch(ElementType.U8, 0, b"")) == []


def test_search_rewinds_after_a_miss():
    search = ExclusiveRangeSearch(ElementType.U8, 30, 40, bytes(range(100)))
    first_pass = list(search)
    second_pass = list(search)
    assert first_pass == list(range(31, 40))
    assert second_pass == first_pass


def test_exhausted_at_end_stays_exhausted():
    haystack = bytes([0] * 99 + [1])
    search = MemorySearch(ElementType.U8, 1, haystack)
    assert list(search) == [99]
    with pytest.raises(StopIteration):
        next(search)


def test_iter_returns_self():
    search = MemorySearch(ElementType.U16, 1, _pack(ElementType.U16, [1, 1]))
    assert iter(search) is search
    assert list(search) == [0, 2]