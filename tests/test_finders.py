import math
import struct

import pytest

from memscan.finders import (
    ElementType,
    find_exclusive_range,
    find_inclusive_range,
    find_next,
)

CODES = {
    ElementType.U8: "B",
    ElementType.U16: "H",
    ElementType.U32: "I",
    ElementType.U64: "Q",
    ElementType.F32: "f",
    ElementType.F64: "d",
}

ALL_TYPES = list(CODES)


def counting_haystack(element_type, count=100):
    values = [float(i) if element_type in (ElementType.F32, ElementType.F64) else i for i in range(count)]
    return struct.pack(f"={count}{CODES[element_type]}", *values)


@pytest.mark.parametrize(
    "element_type,size",
    [
        (ElementType.U8, 1),
        (ElementType.U16, 2),
        (ElementType.U32, 4),
        (ElementType.U64, 8),
        (ElementType.F32, 4),
        (ElementType.F64, 8),
    ],
)
def test_sizes(element_type, size):
    assert element_type.size() == size


@pytest.mark.parametrize("element_type", ALL_TYPES)
def test_find_first_middle_last(element_type):
    haystack = counting_haystack(element_type)
    width = element_type.size()
    assert find_next(element_type, 0, haystack) == 0 * width
    assert find_next(element_type, 50, haystack) == 50 * width
    assert find_next(element_type, 99, haystack) == 99 * width


@pytest.mark.parametrize("element_type", ALL_TYPES)
def test_inclusive_range(element_type):
    haystack = counting_haystack(element_type)
    assert find_inclusive_range(element_type, 10, 20, haystack) == 10 * element_type.size()


@pytest.mark.parametrize("element_type", ALL_TYPES)
def test_exclusive_range(element_type):
    haystack = counting_haystack(element_type)
    assert find_exclusive_range(element_type, 10, 20, haystack) == 11 * element_type.size()


@pytest.mark.parametrize("element_type", [ElementType.F32, ElementType.F64])
def test_nan_never_matches(element_type):
    haystack = counting_haystack(element_type)
    assert find_next(element_type, math.nan, haystack) is None


@pytest.mark.parametrize("element_type", ALL_TYPES)
def test_missing_value(element_type):
    haystack = counting_haystack(element_type)
    assert find_next(element_type, 200, haystack) is None


@pytest.mark.parametrize("element_type", ALL_TYPES)
def test_empty_haystack(element_type):
    assert find_next(element_type, 0, b"") is None
    assert find_inclusive_range(element_type, 0, 10, b"") is None


def test_trailing_partial_element_ignored():
    haystack = struct.pack("=H", 0) + b"\x07"
    assert find_next(ElementType.U16, 7, haystack) is None
    assert find_next(ElementType.U16, 0, haystack) == 0


def test_only_aligned_offsets_match():
    # 0x0102 sits at byte offset 1, which is not a u16 boundary.
    haystack = bytes([0x00]) + struct.pack("=H", 0x0102) + bytes([0x00])
    assert find_next(ElementType.U16, 0x0102, haystack) is None


def test_negative_zero_equals_zero():
    haystack = struct.pack("=3d", 1.0, -0.0, 2.0)
    assert find_next(ElementType.F64, 0.0, haystack) == 8


def test_f32_needle_rounded_to_precision():
    haystack = struct.pack("=2f", 0.0, 0.1)
    assert find_next(ElementType.F32, 0.1, haystack) == 4


def test_empty_range_matches_nothing():
    haystack = counting_haystack(ElementType.U32)
    assert find_inclusive_range(ElementType.U32, 20, 10, haystack) is None
    assert find_exclusive_range(ElementType.U32, 10, 11, haystack) is None


def test_large_unsigned_values_compare_unsigned():
    haystack = struct.pack("=3B", 10, 200, 250)
    assert find_inclusive_range(ElementType.U8, 150, 255, haystack) == 1


def test_accepts_bytearray_and_memoryview():
    data = bytearray(counting_haystack(ElementType.U64))
    assert find_next(ElementType.U64, 42, data) == 42 * 8
    assert find_next(ElementType.U64, 42, memoryview(data)) == 42 * 8


@pytest.mark.parametrize("needle", [-1, 256])
def test_needle_out_of_range(needle):
    with pytest.raises(ValueError):
        find_next(ElementType.U8, needle, b"\x00\x01")


def test_non_integral_needle_for_integer_type():
    with pytest.raises(ValueError):
        find_next(ElementType.U32, 1.5, b"\x00" * 8)