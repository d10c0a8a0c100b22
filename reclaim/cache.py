"""Per-run memo tables for file metadata and partial checksums.

Entries are filled on first query and kept for the whole run. Nothing is
invalidated: the tree is assumed not to change underneath us except by
our own actions, and those only ever remove paths we have finished with.
"""
from __future__ import annotations

import os
import stat
from dataclasses import dataclass
from typing import Dict, Optional, Tuple

from .util import partial_checksum


@dataclass(frozen=True)
class FileStat:
    dev: int
    ino: int
    size: Optional[int] = None  # only recorded for regular files

    @property
    def identity(self) -> Tuple[int, int]:
        return (self.dev, self.ino)

    @property
    def is_regular(self) -> bool:
        return self.size is not None


class StatCache:
    def __init__(self) -> None:
        self._entries: Dict[str, FileStat] = {}

    def get(self, path: str) -> FileStat:
        """lstat() ``path`` once. Raises OSError when it cannot be queried."""
        cached = self._entries.get(path)
        if cached is not None:
            return cached
        st = os.lstat(path)
        size = st.st_size if stat.S_ISREG(st.st_mode) else None
        entry = FileStat(st.st_dev, st.st_ino, size)
        self._entries[path] = entry
        return entry

    def size(self, path: str) -> Optional[int]:
        try:
            return self.get(path).size
        except OSError:
            return None

    def __contains__(self, path: object) -> bool:
        return path in self._entries

    def __len__(self) -> int:
        return len(self._entries)


class ChecksumCache:
    def __init__(self, stats: StatCache, block_size: int = 32768, algorithm: str = "sha256") -> None:
        self._stats = stats
        self.block_size = block_size
        self.algorithm = algorithm
        self._entries: Dict[str, Optional[str]] = {}

    def get(self, path: str) -> Optional[str]:
        """Digest over the leading block of a regular file, ``None`` if not regular or unreadable."""
        if path in self._entries:
            return self._entries[path]
        digest: Optional[str] = None
        try:
            if self._stats.get(path).is_regular:
                digest = partial_checksum(path, self.block_size, self.algorithm)
        except OSError:
            digest = None
        self._entries[path] = digest
        return digest

    def __contains__(self, path: object) -> bool:
        return path in self._entries
