"""Memory-map entries of a process and the scopes that select them."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, Flag
from pathlib import Path
from typing import List, Union


class Permissions(Flag):
    """Access flags of a mapped region."""

    NONE = 0
    READ = 1
    WRITE = 2
    EXECUTE = 4
    SHARED = 8
    PRIVATE = 16

    @classmethod
    def parse(cls, text: str) -> "Permissions":
        """Parse a permission field such as ``rw-p``."""
        letters = {"r": cls.READ, "w": cls.WRITE, "x": cls.EXECUTE, "s": cls.SHARED, "p": cls.PRIVATE}
        result = cls.NONE
        for char in text:
            if char == "-":
                continue
            try:
                result |= letters[char]
            except KeyError:
                raise ValueError(f"invalid permission character {char!r} in {text!r}") from None
        return result


@dataclass(frozen=True)
class MemoryMap:
    """One line of a process's memory map."""

    start: int
    end: int
    perms: Permissions
    offset: int
    device: str
    inode: int
    pathname: str = ""

    @classmethod
    def parse(cls, line: str) -> "MemoryMap":
        """Parse one line in the format of ``/proc/<pid>/maps``."""
        parts = line.rstrip("\n").split(maxsplit=5)
        if len(parts) < 5:
            raise ValueError(f"malformed memory map line: {line!r}")
        address, perms, offset, device, inode = parts[:5]
        pathname = parts[5].strip() if len(parts) == 6 else ""
        start_text, sep, end_text = address.partition("-")
        if not sep:
            raise ValueError(f"malformed address range: {address!r}")
        try:
            return cls(
                start=int(start_text, 16),
                end=int(end_text, 16),
                perms=Permissions.parse(perms),
                offset=int(offset, 16),
                device=device,
                inode=int(inode),
                pathname=pathname,
            )
        except ValueError as exc:
            raise ValueError(f"malformed memory map line: {line!r}") from exc


def read_maps(pid: int, proc_root: Union[str, Path] = "/proc") -> List[MemoryMap]:
    """Read and parse the memory map of process ``pid``."""
    from memscan.errors import AppError, PermissionDeniedError, ProcessNotFoundError

    path = Path(proc_root) / str(pid) / "maps"
    try:
        text = path.read_text()
    except FileNotFoundError:
        raise ProcessNotFoundError() from None
    except PermissionError:
        raise PermissionDeniedError() from None
    except OSError as exc:
        raise AppError.from_errno(exc.errno or 0) from exc
    return [MemoryMap.parse(line) for line in text.splitlines() if line.strip()]


class SearchScope(Enum):
    """Which regions of a process are searched."""

    STACK = "Stack"
    HEAP = "Heap"
    BOTH = "Both"
    ALL = "All"

    def __str__(self) -> str:
        return _LABELS[self]

    def is_in_scope(self, memory_map: MemoryMap) -> bool:
        """Whether ``memory_map`` belongs to this scope."""
        if self is SearchScope.STACK:
            return memory_map.pathname == "[stack]"
        if self is SearchScope.HEAP:
            return memory_map.pathname == "[heap]"
        if self is SearchScope.BOTH:
            return memory_map.pathname in ("[heap]", "[stack]")
        return Permissions.READ in memory_map.perms


_LABELS = {
    SearchScope.STACK: "Stack",
    SearchScope.HEAP: "Heap",
    SearchScope.BOTH: "Stack & Heap",
    SearchScope.ALL: "All Writeable",
}