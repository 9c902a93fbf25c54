"""Fill memory with reproducible random data and hold it, as a scan target."""

from __future__ import annotations

import argparse
import random
import re
import sys
import threading
from typing import Optional, Sequence, Union

DEFAULT_SEED = bytes([0xFF] * 32)
_UNITS = {"G": 1024 * 1024 * 1024, "M": 1024 * 1024, "K": 1024}
_CHUNK = 1024 * 1024
_DIGITS = re.compile(r"\+?[0-9]+")


def parse_size(text: str) -> int:
    """Parse a size such as ``1G``, ``512M`` or ``64K``.

    The last character is always taken as the unit; a character other
    than G, M or K means plain bytes.
    """
    text = text.strip()
    if not text:
        raise ValueError("empty size")
    unit, number = text[-1], text[:-1]
    if not _DIGITS.fullmatch(number):
        raise ValueError(f"invalid size: {text!r}")
    return int(number) * _UNITS.get(unit, 1)


def fill_random(size: int, seed: Union[bytes, int, None] = None) -> bytearray:
    """Return ``size`` bytes of random data, the same every time for one seed."""
    if size < 0:
        raise ValueError("size must not be negative")
    rng = random.Random(DEFAULT_SEED if seed is None else seed)
    memory = bytearray(size)
    for start in range(0, size, _CHUNK):
        length = min(_CHUNK, size - start)
        memory[start:start + length] = rng.getrandbits(length * 8).to_bytes(length, "little")
    return memory


def checksum(data: Union[bytes, bytearray, memoryview]) -> int:
    """Sum of all bytes, wrapping at 64 bits."""
    return sum(memoryview(data).cast("B")) % (1 << 64)


def _allocate_and_hold(index: int, size: int, stop: threading.Event) -> None:
    print(f"{index} Allocating {size} bytes", flush=True)
    print(f"{index} Filling memory with stable random data", flush=True)
    memory = fill_random(size)
    print(f"{index} Checksum: 0x{checksum(memory):X}", flush=True)
    stop.wait()
    del memory


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = argparse.ArgumentParser(
        prog="random-memory", description="Hold random data in memory until interrupted."
    )
    parser.add_argument("size", nargs="?", default="1G", help="bytes per thread, e.g. 1G")
    parser.add_argument("threads", nargs="?", default="8", help="number of threads")
    args = parser.parse_args(argv)

    try:
        size = parse_size(args.size)
        threads = int(args.threads.strip())
    except ValueError as error:
        print(f"Error: {error}", file=sys.stderr)
        return 2

    stop = threading.Event()
    for index in range(threads):
        threading.Thread(
            target=_allocate_and_hold, args=(index, size, stop), daemon=True
        ).start()
    try:
        while not stop.wait(0.1):
            pass
    except KeyboardInterrupt:
        stop.set()
    return 0


if __name__ == "__main__":
    sys.exit(main())