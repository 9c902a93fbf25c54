"""Listing the running processes and choosing which to scan."""

from __future__ import annotations

import dataclasses
import os
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Union

from memscan.errors import ProcessNotFoundError


@dataclass
class Process:
    """A running process as listed under the proc filesystem."""

    pid: int
    uid: int
    cmd: str
    selected: bool = False


def _read_process(directory: Path) -> Optional[Process]:
    try:
        stat = directory.joinpath("stat").read_text()
    except OSError:
        return None
    open_paren = stat.find("(")
    close_paren = stat.rfind(")")
    if open_paren < 0 or close_paren < open_paren:
        return None
    try:
        uid = os.stat(directory).st_uid
    except OSError:
        uid = 0
    return Process(pid=int(directory.name), uid=uid, cmd=stat[open_paren + 1:close_paren])


def fetch_processes(proc_root: Union[str, Path] = "/proc") -> List[Process]:
    """Return every readable process under ``proc_root``, ordered by pid."""
    root = Path(proc_root)
    directories = sorted(
        (entry for entry in root.iterdir() if entry.name.isdigit() and entry.is_dir()),
        key=lambda entry: int(entry.name),
    )
    return [process for process in map(_read_process, directories) if process is not None]


class ProcessPicker:
    """The list of processes together with which of them are selected."""

    def __init__(self, proc_root: Union[str, Path] = "/proc") -> None:
        self.proc_root = Path(proc_root)
        self.processes: List[Process] = fetch_processes(self.proc_root)

    def refresh(self) -> None:
        """Reload the process list; selections are cleared."""
        self.processes = fetch_processes(self.proc_root)

    def select(self, pid: int, selected: bool = True) -> None:
        """Mark the process ``pid`` as selected or not."""
        for process in self.processes:
            if process.pid == pid:
                process.selected = selected
                return
        raise ProcessNotFoundError()

    def selected_processes(self) -> List[Process]:
        """Copies of the processes that are currently selected."""
        return [dataclasses.replace(process) for process in self.processes if process.selected]