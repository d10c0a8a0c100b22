"""Standard output and diagnostic channels for a run."""
from __future__ import annotations

import sys
from dataclasses import asdict, dataclass
from typing import Callable, Dict, Optional, TextIO

LogCallback = Callable[[str], None]


@dataclass
class RunStats:
    source_files: int = 0
    sources_indexed: int = 0
    sources_folded: int = 0
    target_files: int = 0
    duplicates_found: int = 0
    files_removed: int = 0
    hard_links: int = 0
    symlinks: int = 0
    hard_link_fallbacks: int = 0
    bytes_reclaimed: int = 0
    broken_links_removed: int = 0
    empty_files_removed: int = 0
    empty_dirs_removed: int = 0
    warnings: int = 0

    def as_dict(self) -> Dict[str, int]:
        return asdict(self)


class Reporter:
    """Paths and action sentences go to ``out``; tagged diagnostics go to ``err``."""

    def __init__(
        self,
        out: Optional[TextIO] = None,
        err: Optional[TextIO] = None,
        log_cb: Optional[LogCallback] = None,
        stats: Optional[RunStats] = None,
    ) -> None:
        self.out = out
        self.err = err
        self.log_cb = log_cb
        self.stats = stats if stats is not None else RunStats()

    def _forward(self, message: str) -> None:
        if not self.log_cb:
            return
        try:
            self.log_cb(message)
        except Exception:
            pass

    def emit(self, message: str) -> None:
        print(message, file=self.out or sys.stdout)
        self._forward(message)

    def _diag(self, tag: str, message: str) -> None:
        line = f"[{tag}] {message}"
        print(line, file=self.err or sys.stderr)
        self._forward(line)

    def info(self, message: str) -> None:
        self._diag("INFO", message)

    def warn(self, message: str) -> None:
        self.stats.warnings += 1
        self._diag("WARN", message)

    def error(self, message: str) -> None:
        self._diag("ERROR", message)

    def summary(self, title: str = "RECLAIM SUMMARY") -> None:
        s = self.stats
        err = self.err or sys.stderr
        print("=" * 70, file=err)
        print(title, file=err)
        print("=" * 70, file=err)
        print(f"Source files seen:       {s.source_files:>10,}", file=err)
        print(f"Sources indexed:         {s.sources_indexed:>10,}", file=err)
        print(f"Source duplicates:       {s.sources_folded:>10,}", file=err)
        print(f"Target files seen:       {s.target_files:>10,}", file=err)
        print(f"Duplicates found:        {s.duplicates_found:>10,}", file=err)
        print(f"Files removed:           {s.files_removed:>10,}", file=err)
        print(f"Hard links created:      {s.hard_links:>10,}", file=err)
        print(f"Symlinks created:        {s.symlinks:>10,}", file=err)
        print(f"Hard-link fallbacks:     {s.hard_link_fallbacks:>10,}", file=err)
        print(f"Space reclaimed:         {s.bytes_reclaimed / (1024**2):>10.2f} MB", file=err)
        print(f"Broken links removed:    {s.broken_links_removed:>10,}", file=err)
        print(f"Empty files removed:     {s.empty_files_removed:>10,}", file=err)
        print(f"Empty dirs removed:      {s.empty_dirs_removed:>10,}", file=err)
        print(f"Warnings:                {s.warnings:>10,}", file=err)
        print("=" * 70, file=err)
