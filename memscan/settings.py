"""User settings that persist between sessions."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Mapping, Union

from memscan.datatypes import DataType, Endianness
from memscan.scope import SearchScope

DEFAULT_SEARCH_BUFFER_SIZE = 128 * 1024 * 1024


@dataclass
class Settings:
    """Defaults for new searches and the size of each read."""

    default_search_scope: SearchScope = SearchScope.BOTH
    default_data_type: DataType = DataType.U64
    default_endianness: Endianness = Endianness.NATIVE
    search_buffer_size: int = DEFAULT_SEARCH_BUFFER_SIZE
    show_settings: bool = field(default=False, compare=False)

    def toggle(self) -> None:
        """Show or hide the settings view."""
        self.show_settings = not self.show_settings

    def to_dict(self) -> Dict[str, Any]:
        """The persisted fields as plain data."""
        return {
            "default_search_scope": self.default_search_scope.value,
            "default_data_type": self.default_data_type.value,
            "default_endianness": self.default_endianness.value,
            "search_buffer_size": self.search_buffer_size,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Settings":
        """Build settings from plain data; missing fields take their defaults."""
        settings = cls()
        if "default_search_scope" in data:
            settings.default_search_scope = SearchScope(data["default_search_scope"])
        if "default_data_type" in data:
            settings.default_data_type = DataType(data["default_data_type"])
        if "default_endianness" in data:
            settings.default_endianness = Endianness(data["default_endianness"])
        if "search_buffer_size" in data:
            size = data["search_buffer_size"]
            if isinstance(size, bool) or not isinstance(size, int) or size < 0:
                raise ValueError(f"invalid search buffer size: {size!r}")
            settings.search_buffer_size = size
        return settings

    @classmethod
    def load(cls, path: Union[str, Path]) -> "Settings":
        """Read settings from ``path``, falling back to defaults on any failure."""
        try:
            data = json.loads(Path(path).read_text())
            if not isinstance(data, dict):
                return cls()
            return cls.from_dict(data)
        except (OSError, ValueError):
            return cls()

    def save(self, path: Union[str, Path]) -> None:
        """Write the persisted fields to ``path`` as JSON."""
        target = Path(path)
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(json.dumps(self.to_dict(), indent=2))