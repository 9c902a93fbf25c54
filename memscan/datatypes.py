"""Value types that can be searched for, and values of those types."""

from __future__ import annotations

import math
import re
import struct
from dataclasses import dataclass
from decimal import Decimal
from enum import Enum
from typing import Iterator, Union

from memscan.errors import DataTypeParseError
from memscan.finders import Buffer, ElementType
from memscan.search import MemorySearch

Number = Union[int, float]

_INT_PATTERN = re.compile(r"\+?[0-9]+")
_FLOAT_PATTERN = re.compile(
    r"[+-]?(?:inf|infinity|nan|(?:[0-9]+(?:\.[0-9]*)?|\.[0-9]+)(?:[eE][+-]?[0-9]+)?)",
    re.IGNORECASE,
)


class Endianness(Enum):
    """Byte order used when comparing or decoding values."""

    LITTLE = "Little"
    BIG = "Big"
    NATIVE = "Native"

    @property
    def struct_prefix(self) -> str:
        return {"Little": "<", "Big": ">", "Native": "="}[self.value]


class DataType(Enum):
    """The value types a search can look for."""

    U8 = "U8"
    U16 = "U16"
    U32 = "U32"
    U64 = "U64"
    F32 = "F32"
    F64 = "F64"

    def __str__(self) -> str:
        return self.value

    @property
    def element_type(self) -> ElementType:
        return ElementType[self.name]

    @property
    def is_float(self) -> bool:
        return self in (DataType.F32, DataType.F64)

    def size(self) -> int:
        """Width of a value of this type in bytes."""
        return self.element_type.size()

    def parse(self, label: str) -> "WrappedValue":
        """Parse ``label`` as a value of this type."""
        if self.is_float:
            return WrappedValue(self, _parse_float(label, self))
        return WrappedValue(self, _parse_unsigned(label, self))

    def cast(self, buffer: Buffer, endianness: Endianness) -> "WrappedValue":
        """Decode a value of this type from the start of ``buffer``."""
        raw = bytes(buffer)
        size = self.size()
        if len(raw) < size:
            raise DataTypeParseError(f"Buffer too small for {self}")
        if size > 1 and len(raw) != size:
            raise DataTypeParseError("could not convert slice to array")
        fmt = endianness.struct_prefix + self.element_type.format
        (value,) = struct.unpack(fmt, raw[:size])
        return WrappedValue(self, value)


def _parse_unsigned(label: str, data_type: DataType) -> int:
    if not label:
        raise DataTypeParseError("cannot parse integer from empty string")
    if not _INT_PATTERN.fullmatch(label):
        raise DataTypeParseError("invalid digit found in string")
    value = int(label)
    if value >= 1 << (8 * data_type.size()):
        raise DataTypeParseError("number too large to fit in target type")
    return value


def _parse_float(label: str, data_type: DataType) -> float:
    if not label:
        raise DataTypeParseError("cannot parse float from empty string")
    if not _FLOAT_PATTERN.fullmatch(label):
        raise DataTypeParseError("invalid float literal")
    value = float(label)
    if data_type is DataType.F32:
        return _round_f32(value)
    return value


def _round_f32(value: float) -> float:
    try:
        return struct.unpack("=f", struct.pack("=f", value))[0]
    except OverflowError:
        return math.copysign(math.inf, value)


def _format_float(value: float, data_type: DataType) -> str:
    if math.isnan(value):
        return "NaN"
    if math.isinf(value):
        return "inf" if value > 0 else "-inf"
    text = repr(value)
    if data_type is DataType.F32:
        for digits in range(1, 10):
            candidate = f"{value:.{digits}g}"
            if _round_f32(float(candidate)) == value:
                text = candidate
                break
    return format(Decimal(text).normalize(), "f")


@dataclass(frozen=True)
class WrappedValue:
    """A value together with the data type it was parsed or read as."""

    kind: DataType
    value: Number

    def __post_init__(self) -> None:
        object.__setattr__(self, "value", self.kind.element_type.coerce(self.value))

    def data_type(self) -> DataType:
        """The data type of this value."""
        return self.kind

    def to_bytes(self, endianness: Endianness) -> bytes:
        """Encode the value in the given byte order."""
        fmt = endianness.struct_prefix + self.kind.element_type.format
        return struct.pack(fmt, self.value)

    def compare_to(self, buffer: Buffer, endianness: Endianness) -> bool:
        """Whether the start of ``buffer`` holds exactly this value's bytes."""
        raw = bytes(buffer)
        size = self.kind.size()
        if len(raw) < size:
            raise DataTypeParseError(f"Buffer too small for {self.kind}")
        return raw[:size] == self.to_bytes(endianness)

    def scan_memory(self, buffer: Buffer, endianness: Endianness) -> Iterator[int]:
        """Offsets of every occurrence of this value in ``buffer``.

        The buffer is always read in native byte order.
        """
        return MemorySearch(self.kind.element_type, self.value, buffer)

    def __str__(self) -> str:
        if self.kind.is_float:
            return _format_float(float(self.value), self.kind)
        return str(self.value)