"""In-memory cache for parsed Go file headers.

Headers do not depend on the build context, so one parse serves every
feature-version pass. Entries are keyed by path and invalidated when the
file's size or modification time changes. Nothing is persisted.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import TYPE_CHECKING, Dict, Optional

if TYPE_CHECKING:  # pragma: no cover
    from ..analyzers.gosource import GoFileHeader


@dataclass
class _Entry:
    size: int
    mtime_ns: int
    header: GoFileHeader


class SourceCache:
    """Stores parsed headers keyed by file path and stat signature."""

    def __init__(self) -> None:
        self._entries: Dict[str, _Entry] = {}
        self.hits = 0
        self.misses = 0

    def get(self, path: str, stat_result: os.stat_result) -> Optional[GoFileHeader]:
        entry = self._entries.get(path)
        if (
            entry is None
            or entry.size != stat_result.st_size
            or entry.mtime_ns != stat_result.st_mtime_ns
        ):
            self.misses += 1
            return None
        self.hits += 1
        return entry.header

    def store(self, path: str, stat_result: os.stat_result, header: GoFileHeader) -> None:
        self._entries[path] = _Entry(
            size=stat_result.st_size,
            mtime_ns=stat_result.st_mtime_ns,
            header=header,
        )

    def __len__(self) -> int:
        return len(self._entries)


__all__ = ["SourceCache"]
