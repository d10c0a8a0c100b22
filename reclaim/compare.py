"""Staged file comparison.

Each stage is a cheaper reject filter for the next one:

1. both paths must be regular files (lstat, so symlinks are rejected)
2. equal (device, inode) means the same file, never a duplicate
3. sizes must match
4. optionally, both files must live on the same device
5. partial checksums over the leading block must match
6. full byte-for-byte comparison

Stat and checksum lookups go through the run's caches, so repeated
comparisons against the same source are cheap.
"""
from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Optional

from .context import RunContext
from .util import same_content


class Outcome(enum.Enum):
    SAME = "same"
    DUPLICATE = "duplicate"
    NOT_DUPLICATE = "not-duplicate"
    ERROR = "error"


@dataclass(frozen=True)
class Comparison:
    outcome: Outcome
    reason: Optional[str] = None

    @property
    def is_match(self) -> bool:
        """True when ``b`` is already represented by ``a`` (same file or same content)."""
        return self.outcome in (Outcome.SAME, Outcome.DUPLICATE)

    @property
    def is_duplicate(self) -> bool:
        return self.outcome is Outcome.DUPLICATE


SIZES_DIFFER = "sizes differ"
CROSS_DEVICE = "cross-filesystem comparison skipped"
CHECKSUMS_DIFFER = "checksums differ"
CONTENTS_DIFFER = "contents differ"


class Comparator:
    def __init__(self, ctx: RunContext) -> None:
        self.ctx = ctx

    def identical(self, a: str, b: str) -> Comparison:
        stats = self.ctx.stats
        try:
            sa = stats.get(a)
            sb = stats.get(b)
        except OSError as e:
            return Comparison(Outcome.ERROR, f"cannot stat: {e}")
        for path, st in ((a, sa), (b, sb)):
            if not st.is_regular:
                return Comparison(Outcome.ERROR, f"{path} is not a regular file")

        if sa.identity == sb.identity:
            return Comparison(Outcome.SAME)
        if sa.size != sb.size:
            return Comparison(Outcome.NOT_DUPLICATE, SIZES_DIFFER)
        if self.ctx.cfg.dedupe.same_filesystem_only and sa.dev != sb.dev:
            return Comparison(Outcome.NOT_DUPLICATE, CROSS_DEVICE)

        checksums = self.ctx.checksums
        ca = checksums.get(a)
        cb = checksums.get(b)
        for path, digest in ((a, ca), (b, cb)):
            if digest is None:
                return Comparison(Outcome.ERROR, f"cannot read {path}")
        if ca != cb:
            return Comparison(Outcome.NOT_DUPLICATE, CHECKSUMS_DIFFER)

        try:
            equal = same_content(a, b, self.ctx.cfg.compare.block_size)
        except OSError as e:
            return Comparison(Outcome.ERROR, f"cannot compare {a} and {b}: {e}")
        if equal:
            return Comparison(Outcome.DUPLICATE)
        return Comparison(Outcome.NOT_DUPLICATE, CONTENTS_DIFFER)


def identical(ctx: RunContext, a: str, b: str) -> Comparison:
    return Comparator(ctx).identical(a, b)
