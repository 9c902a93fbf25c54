"""A scanning session over selected processes, and the command-line entry point."""

from __future__ import annotations

import argparse
import os
import subprocess
import sys
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Sequence, Tuple, Union

from memscan.datatypes import DataType, WrappedValue
from memscan.errors import AppError
from memscan.processes import Process, ProcessPicker
from memscan.scanner import (
    Results,
    SearchRegion,
    read_value,
    search_continue_sync,
    search_sync,
)
from memscan.scope import SearchScope
from memscan.settings import Settings

PathLike = Union[str, Path]
Address = Tuple[int, int]


class Session:
    """Search state: loaded regions, current results and tracked addresses."""

    def __init__(self, settings: Optional[Settings] = None, proc_root: PathLike = "/proc") -> None:
        self.settings = settings if settings is not None else Settings()
        self.proc_root = Path(proc_root)
        self.search_scope: SearchScope = self.settings.default_search_scope
        self.data_type: DataType = self.settings.default_data_type
        self.endianness = self.settings.default_endianness
        self.search_regions: List[SearchRegion] = []
        self.search_results: Results = []
        self.tracked_addresses: Dict[Address, WrappedValue] = {}

    def load_regions(self, processes: Iterable[Process]) -> List[SearchRegion]:
        """Load the regions of ``processes`` that fall within the current scope."""
        self.search_regions = SearchRegion.load(processes, self.search_scope, self.proc_root)
        return self.search_regions

    def search(self, text: str) -> Results:
        """Start a new search, or narrow the previous results if there are any."""
        if not self.search_results:
            results = search_sync(
                self.search_regions,
                self.data_type,
                text,
                self.settings,
                self.endianness,
                self.proc_root,
            )
        else:
            results = search_continue_sync(
                self.search_results,
                self.data_type,
                text,
                self.settings,
                self.endianness,
                self.proc_root,
            )
        self.search_results = results
        return results

    def clear(self) -> None:
        """Forget the current results so the next search starts afresh."""
        self.search_results.clear()

    def result_count(self) -> int:
        """Total number of addresses across all results."""
        return sum(len(pointers) for _, pointers in self.search_results)

    def toggle_tracked(self, pid: int, pointer: int) -> Optional[WrappedValue]:
        """Start or stop tracking an address; returns the value read when tracking starts."""
        key = (pid, pointer)
        if key in self.tracked_addresses:
            del self.tracked_addresses[key]
            return None
        value = read_value(pid, pointer, self.data_type, self.proc_root)
        self.tracked_addresses[key] = value
        return value

    def refresh(self) -> None:
        """Re-read every tracked address, dropping those that can no longer be read."""
        for key in list(self.tracked_addresses):
            pid, pointer = key
            try:
                self.tracked_addresses[key] = read_value(
                    pid, pointer, self.data_type, self.proc_root
                )
            except AppError:
                del self.tracked_addresses[key]

    def edit(self, pid: int, pointer: int, text: str) -> WrappedValue:
        """Replace the tracked value at an address with ``text`` parsed in its type."""
        key = (pid, pointer)
        current = self.tracked_addresses.get(key)
        data_type = current.data_type() if current is not None else self.data_type
        value = data_type.parse(text)
        self.tracked_addresses[key] = value
        return value


def escalate_if_needed() -> bool:
    """Make sure the scanner runs as root.

    Returns ``True`` when this process may carry on, ``False`` when it
    re-ran itself through pkexec and should stop.
    """
    uid, euid = os.getuid(), os.geteuid()
    if uid == 0 and euid == 0:
        print("Running as root")
        return True
    if euid == 0:
        print("Setuid to root")
        os.setuid(0)
        return True

    print("Not running as root")
    print("Attempting to run pkexec")
    command = [
        "pkexec",
        "env",
        *(f"{name}={value}" for name, value in os.environ.items()),
        sys.executable,
        "-m",
        "memscan.app",
        *sys.argv[1:],
    ]
    try:
        subprocess.run(command, check=False)
    except OSError as exc:
        raise RuntimeError("Failed to run pkexec") from exc
    return False


def _data_type(text: str) -> DataType:
    try:
        return DataType[text.upper()]
    except KeyError:
        raise argparse.ArgumentTypeError(f"unknown data type: {text!r}") from None


def _scope(text: str) -> SearchScope:
    try:
        return SearchScope[text.upper()]
    except KeyError:
        raise argparse.ArgumentTypeError(f"unknown search scope: {text!r}") from None


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="memscan", description="Search the memory of running processes for values."
    )
    parser.add_argument("pids", nargs="*", type=int, help="processes to scan")
    parser.add_argument(
        "-v",
        "--value",
        dest="values",
        action="append",
        default=[],
        help="value to search for; each further value narrows the results",
    )
    parser.add_argument("-t", "--type", type=_data_type, help="u8, u16, u32, u64, f32 or f64")
    parser.add_argument("-s", "--scope", type=_scope, help="stack, heap, both or all")
    parser.add_argument("--settings", type=Path, help="JSON settings file")
    parser.add_argument("--proc-root", default="/proc", help=argparse.SUPPRESS)
    parser.add_argument("--list", action="store_true", help="list running processes")
    parser.add_argument("--limit", type=int, default=10, help="addresses shown per process")
    parser.add_argument("--escalate", action="store_true", help="re-run as root via pkexec")
    return parser


def _print_results(session: Session, limit: int) -> None:
    print(f"Count: {session.result_count()}")
    more = False
    for pid, pointers in session.search_results:
        for pointer in pointers[:limit]:
            print(f"{pid}\t{pointer:x}")
        more = more or len(pointers) > limit
    if more:
        print("... and more")


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)

    if args.escalate and not escalate_if_needed():
        return 0

    settings = Settings.load(args.settings) if args.settings else Settings()
    session = Session(settings, args.proc_root)
    if args.type is not None:
        session.data_type = args.type
    if args.scope is not None:
        session.search_scope = args.scope

    try:
        picker = ProcessPicker(args.proc_root)
        if args.list:
            print("PID\tUID\tCMD")
            for process in reversed(picker.processes):
                print(f"{process.pid}\t{process.uid}\t{process.cmd}")
            return 0
        if not args.pids:
            parser.error("at least one PID is required")
        for pid in args.pids:
            picker.select(pid)
        regions = session.load_regions(picker.selected_processes())
        print(f"Search regions: {len(regions)}")
        for value in args.values:
            session.search(value)
        if args.values:
            _print_results(session, args.limit)
    except AppError as error:
        print(f"Error: {error}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())