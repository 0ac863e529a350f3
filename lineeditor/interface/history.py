#!/usr/bin/env python3
# lineeditor/interface/history.py
from __future__ import annotations

"""
Bounded, duplicate-free input history persisted through prompt_toolkit.

The file is prompt_toolkit's FileHistory format ('# <timestamp>' header,
then '+'-prefixed lines per entry), so the same file can be handed to any
prompt_toolkit session. Blank entries are ignored on load.
"""

import logging
import os
from pathlib import Path
from typing import Iterable, Iterator, Union

from prompt_toolkit.history import FileHistory

logger = logging.getLogger(__name__)

class History:
    """
    Ordered history of accepted lines.

    - At most `max_size` entries; the oldest are dropped first.
    - Re-adding an existing line moves it to the most recent slot.
    """

    def __init__(self, max_size: int = 800, entries: Iterable[str] = ()) -> None:
        if max_size < 1:
            raise ValueError("history max_size must be >= 1")
        self.max_size = max_size
        self._entries: list[str] = []
        for line in entries:
            self.add(line)

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[str]:
        return iter(self._entries)

    def __contains__(self, line: object) -> bool:
        return line in self._entries

    @property
    def entries(self) -> list[str]:
        """Copy of the entries, oldest first."""
        return list(self._entries)

    def add(self, line: str) -> None:
        if line in self._entries:
            self._entries.remove(line)
        self._entries.append(line)
        overflow = len(self._entries) - self.max_size
        if overflow > 0:
            del self._entries[:overflow]

    def clear(self) -> None:
        self._entries.clear()

    def load(self, path: Union[str, os.PathLike[str]]) -> int:
        """
        Merge entries from `path` in front of the in-memory ones.
        Returns the number of entries read; a missing file reads as empty.
        """
        # load_history_strings() yields newest first.
        loaded = [
            line for line in reversed(list(FileHistory(str(path)).load_history_strings()))
            if line.strip()
        ]
        current = self._entries
        self._entries = []
        for line in [*loaded, *current]:
            self.add(line)
        logger.debug("loaded %d history entries from %s", len(loaded), path)
        return len(loaded)

    def save(self, path: Union[str, os.PathLike[str]]) -> None:
        """Replace the contents of `path` with the current entries. Raises OSError."""
        target = Path(path)
        target.write_text("", encoding="utf-8")
        store = FileHistory(str(target))
        for line in self._entries:
            store.store_string(line)
        logger.debug("saved %d history entries to %s", len(self._entries), target)
