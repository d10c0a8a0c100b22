from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional, Set

from .cache import ChecksumCache, StatCache
from .config import ReclaimConfig
from .report import Reporter, RunStats


@dataclass
class RunContext:
    """Everything one invocation shares: settings, caches, output channels and counters."""

    cfg: ReclaimConfig = field(default_factory=ReclaimConfig)
    reporter: Optional[Reporter] = None
    stats: StatCache = field(default_factory=StatCache)
    checksums: Optional[ChecksumCache] = None
    # paths removed (or, under dry-run, that would be removed) so far
    reclaimed: Set[str] = field(default_factory=set)

    def __post_init__(self) -> None:
        if self.reporter is None:
            self.reporter = Reporter()
        if self.checksums is None:
            self.checksums = ChecksumCache(
                self.stats,
                block_size=self.cfg.compare.block_size,
                algorithm=self.cfg.compare.checksum,
            )

    @property
    def counters(self) -> RunStats:
        return self.reporter.stats

    @property
    def dry_run(self) -> bool:
        return self.cfg.dedupe.dry_run

    @property
    def verbose(self) -> bool:
        return self.cfg.dedupe.verbose
