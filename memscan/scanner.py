"""Reading another process's memory and searching it for values."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, List, Sequence, Tuple, Union

from memscan.datatypes import DataType, Endianness, WrappedValue
from memscan.errors import AppError, PermissionDeniedError, ProcessNotFoundError
from memscan.processes import Process
from memscan.scope import SearchScope, read_maps
from memscan.settings import Settings

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]
Results = List[Tuple[int, List[int]]]


@dataclass(frozen=True)
class SearchRegion:
    """An address range of one process to be searched."""

    pid: int
    start: int
    end: int

    @property
    def size(self) -> int:
        return self.end - self.start

    @classmethod
    def load(
        cls,
        processes: Iterable[Process],
        search_scope: SearchScope,
        proc_root: PathLike = "/proc",
    ) -> List["SearchRegion"]:
        """The regions of ``processes`` that fall within ``search_scope``."""
        return [
            cls(pid=process.pid, start=memory_map.start, end=memory_map.end)
            for process in processes
            for memory_map in read_maps(process.pid, proc_root)
            if search_scope.is_in_scope(memory_map)
        ]


def read_memory(pid: int, address: int, size: int, proc_root: PathLike = "/proc") -> bytes:
    """Read up to ``size`` bytes at ``address`` in process ``pid``.

    Fewer bytes come back when the end of readable memory is reached.
    """
    path = Path(proc_root) / str(pid) / "mem"
    try:
        with open(path, "rb", buffering=0) as handle:
            chunks: List[bytes] = []
            remaining = size
            position = address
            while remaining > 0:
                try:
                    data = os.pread(handle.fileno(), remaining, position)
                except OSError:
                    if chunks:
                        break
                    raise
                if not data:
                    break
                chunks.append(data)
                remaining -= len(data)
                position += len(data)
            return b"".join(chunks)
    except FileNotFoundError:
        raise ProcessNotFoundError() from None
    except PermissionError:
        raise PermissionDeniedError() from None
    except OSError as exc:
        raise AppError.from_errno(exc.errno or 0) from exc


def search_sync(
    regions: Sequence[SearchRegion],
    data_type: DataType,
    text: str,
    settings: Settings,
    endianness: Endianness,
    proc_root: PathLike = "/proc",
) -> Results:
    """Search every region for ``text`` parsed as ``data_type``.

    Regions are read in chunks of the configured buffer size. Regions
    that cannot be read are logged and skipped.
    """
    step = settings.search_buffer_size
    if step <= 0:
        raise ValueError("search buffer size must be positive")
    wrapped_value = data_type.parse(text)

    results: Results = []
    for region in regions:
        pointers: List[int] = []
        for chunk_start in range(region.start, region.end, step):
            chunk_end = min(chunk_start + step, region.end)
            chunk_length = chunk_end - chunk_start
            logger.debug("Reading from %X to %X", chunk_start, chunk_end)
            try:
                data = read_memory(region.pid, chunk_start, chunk_length, proc_root)
            except AppError as error:
                logger.error("Failed to read memory for PID %d: %s", region.pid, error)
                continue
            if len(data) != chunk_length:
                logger.warning(
                    "Failed to read entire memory: %d vs. %d", len(data), chunk_length
                )
            pointers.extend(
                chunk_start + offset for offset in wrapped_value.scan_memory(data, endianness)
            )
        if pointers:
            results.append((region.pid, pointers))
    return results


def search_continue_sync(
    results: Sequence[Tuple[int, Sequence[int]]],
    data_type: DataType,
    text: str,
    settings: Settings,
    endianness: Endianness,
    proc_root: PathLike = "/proc",
) -> Results:
    """Keep only the earlier results whose memory now holds ``text``."""
    size = data_type.size()
    wrapped_value = data_type.parse(text)

    new_results: Results = []
    for pid, pointers in results:
        kept: List[int] = []
        for pointer in pointers:
            try:
                data = read_memory(pid, pointer, size, proc_root)
            except AppError as error:
                logger.error("Failed to read memory for PID %d: %s", pid, error)
                continue
            if len(data) != size:
                logger.warning("Failed to read entire memory: %d vs. %d", len(data), size)
                continue
            if wrapped_value.compare_to(data, endianness):
                kept.append(pointer)
        if kept:
            new_results.append((pid, kept))
    return new_results


def read_value(
    pid: int, pointer: int, data_type: DataType, proc_root: PathLike = "/proc"
) -> WrappedValue:
    """Read the value of ``data_type`` stored at ``pointer`` in process ``pid``."""
    size = data_type.size()
    data = read_memory(pid, pointer, size, proc_root)
    if len(data) != size:
        logger.warning("Failed to read entire memory: %d vs. %d", len(data), size)
    return data_type.cast(data, Endianness.NATIVE)