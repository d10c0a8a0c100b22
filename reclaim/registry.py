"""Size-bucketed index of source files, folded so no two entries are identical."""
from __future__ import annotations

from typing import Dict, Iterable, Iterator, List, Optional

from .compare import Comparator, Outcome
from .context import RunContext
from .walk import FILE, MISSING, SYMLINK, check_link, expand


class SourceRegistry:
    def __init__(self) -> None:
        self._buckets: Dict[int, List[str]] = {}

    def candidates(self, size: int) -> List[str]:
        return self._buckets.get(size, [])

    def add(self, size: int, path: str) -> None:
        self._buckets.setdefault(size, []).append(path)

    def sizes(self) -> List[int]:
        return sorted(self._buckets)

    def __iter__(self) -> Iterator[str]:
        for size in self.sizes():
            yield from self._buckets[size]

    def __len__(self) -> int:
        return sum(len(paths) for paths in self._buckets.values())


def register(ctx: RunContext, registry: SourceRegistry, comparator: Comparator, path: str) -> bool:
    """Index ``path`` unless an already registered source is the same file or has the same content."""
    size = ctx.stats.size(path)
    if size is None:
        return False
    for known in registry.candidates(size):
        result = comparator.identical(known, path)
        if result.is_match:
            ctx.counters.sources_folded += 1
            if ctx.verbose:
                kind = "same file as" if result.outcome is Outcome.SAME else "duplicate of"
                ctx.reporter.info(f"source {path} is {kind} {known}")
            return False
        if result.outcome is Outcome.ERROR:
            ctx.reporter.warn(result.reason or f"cannot compare {known} and {path}")
    registry.add(size, path)
    ctx.counters.sources_indexed += 1
    return True


def scan(ctx: RunContext, sources: Iterable[str], registry: Optional[SourceRegistry] = None) -> SourceRegistry:
    registry = registry if registry is not None else SourceRegistry()
    comparator = Comparator(ctx)
    for path, kind in expand(ctx, sources):
        if kind == SYMLINK:
            check_link(ctx, path)
        elif kind == FILE:
            ctx.counters.source_files += 1
            register(ctx, registry, comparator, path)
        elif kind == MISSING:
            ctx.reporter.warn(f"cannot read {path}")
    if ctx.verbose:
        ctx.reporter.info(f"indexed {len(registry)} source files across {len(registry.sizes())} sizes")
    return registry
