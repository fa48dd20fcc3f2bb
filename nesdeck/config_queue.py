"""A bounded most-recent-first list of strings kept in an INI section."""

from __future__ import annotations

import logging
from collections import deque
from typing import Iterator

from nesdeck.ini import IniFile, IniStructure

logger = logging.getLogger(__name__)


class ConfigQueue:
    """Most recently pushed values first, at most ``size`` of them.

    The values live in the INI section ``name`` under the keys
    ``file1`` to ``file<size>``. Empty keys stand for unused slots.
    """

    def __init__(self, ini_file: IniFile, name: str = "recentfiles", size: int = 10) -> None:
        if not name or size <= 0:
            raise ValueError("Arguments were invalid!")
        self._ini_file = ini_file
        self._name = name
        self._size = size
        self._entries: deque[str] = deque()
        self._load()

    def _read(self) -> IniStructure | None:
        try:
            return self._ini_file.read()
        except OSError:
            return None

    def _load(self) -> None:
        data = self._read()
        if data is None or self._name not in data:
            self._save()
            return
        for value in data[self._name].items():
            _, text = value
            if not text:
                continue
            if len(self._entries) >= self._size:
                self._entries.popleft()
            self._entries.append(text)

    def _save(self) -> None:
        data = self._read() or IniStructure()
        section = data[self._name]
        entries = list(self._entries)
        for slot in range(1, self._size + 1):
            section[f"file{slot}"] = entries[slot - 1] if slot <= len(entries) else ""
        try:
            self._ini_file.write(data, pretty=True)
        except OSError:
            logger.error("Failed to write to config file!")

    def push(self, value: str, write_to_file: bool = True) -> None:
        """Put value at the front, moving it there if already present."""
        if not value:
            return
        if value in self._entries:
            self._entries.remove(value)
        elif len(self._entries) >= self._size:
            self._entries.pop()
        self._entries.appendleft(value)
        if write_to_file:
            self._save()

    def entries(self) -> tuple[str, ...]:
        """The values, most recent first."""
        return tuple(self._entries)

    def __iter__(self) -> Iterator[str]:
        return iter(tuple(self._entries))

    def __len__(self) -> int:
        return len(self._entries)