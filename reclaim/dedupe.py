"""Walk the targets and dispose of every file that duplicates a registered source."""
from __future__ import annotations

import os
from typing import Iterable, Optional

from .compare import Comparator, Outcome
from .context import RunContext
from .empties import remove_empties
from .registry import SourceRegistry, scan
from .report import RunStats
from .walk import DIRECTORY, FILE, MISSING, SYMLINK, check_link, classify, list_entries


class SymlinkVerificationError(RuntimeError):
    """A replacement symlink could not be created or does not resolve.

    The duplicate has already been deleted at that point, so the run stops.
    """


def _action(ctx: RunContext) -> str:
    d = ctx.cfg.dedupe
    if d.symlink_only:
        return "symlink"
    if d.hard_link_duplicates:
        return "link"
    return "remove"


def _announce(ctx: RunContext, target: str, source: str) -> None:
    if not ctx.verbose:
        ctx.reporter.emit(target)
        return
    action = _action(ctx)
    if ctx.dry_run:
        verb = {"remove": "would remove", "link": "would link", "symlink": "would symlink"}[action]
    else:
        verb = {"remove": "removing", "link": "linking", "symlink": "symlinking"}[action]
    tail = f"(duplicate of {source})" if action == "remove" else f"to {source}"
    ctx.reporter.emit(f"{verb} {target} {tail}")


def replace_with_link(ctx: RunContext, target: str, source: str) -> str:
    """Put a link to ``source`` where ``target`` used to be.

    Tries a hard link first when asked to, and falls back to a relative
    symlink if that fails. Returns ``"hardlink"`` or ``"symlink"``.
    """
    d = ctx.cfg.dedupe
    if d.hard_link_duplicates and not d.symlink_only:
        try:
            os.link(source, target)
            ctx.counters.hard_links += 1
            return "hardlink"
        except OSError as e:
            ctx.counters.hard_link_fallbacks += 1
            if ctx.verbose:
                ctx.reporter.info(f"cannot hard link {target} to {source} ({e}); using a symlink")

    relative = os.path.relpath(source, os.path.dirname(target) or os.curdir)
    try:
        os.symlink(relative, target)
    except OSError as e:
        raise SymlinkVerificationError(f"cannot symlink {target} -> {relative}: {e}") from e
    if not os.path.exists(target):
        raise SymlinkVerificationError(f"symlink {target} -> {relative} does not resolve")
    ctx.counters.symlinks += 1
    return "symlink"


def dispose(ctx: RunContext, target: str, source: str) -> None:
    ctx.counters.duplicates_found += 1
    _announce(ctx, target, source)
    if ctx.dry_run:
        ctx.reclaimed.add(target)
        return
    size = ctx.stats.size(target) or 0
    try:
        os.unlink(target)
    except OSError as e:
        ctx.reporter.warn(f"cannot remove {target}: {e}")
        return
    ctx.counters.files_removed += 1
    ctx.counters.bytes_reclaimed += size
    if ctx.cfg.dedupe.wants_link:
        replace_with_link(ctx, target, source)


def resolve_file(ctx: RunContext, registry: SourceRegistry, comparator: Comparator, path: str) -> Optional[str]:
    """Dispose of ``path`` against the first registered source it duplicates; return that source."""
    size = ctx.stats.size(path)
    if size is None:
        return None
    for source in registry.candidates(size):
        result = comparator.identical(source, path)
        if result.is_duplicate:
            dispose(ctx, path, source)
            return source
        if result.outcome is Outcome.ERROR:
            ctx.reporter.warn(result.reason or f"cannot compare {source} and {path}")
        elif ctx.verbose and result.reason:
            ctx.reporter.info(f"{path} kept: {result.reason} from {source}")
    return None


def _visit(ctx: RunContext, registry: SourceRegistry, comparator: Comparator, path: str) -> None:
    kind = classify(path)
    if kind == SYMLINK:
        # symlinks are never duplicate candidates
        check_link(ctx, path)
    elif kind == DIRECTORY:
        for entry in list_entries(ctx, path):
            _visit(ctx, registry, comparator, entry)
    elif kind == FILE:
        ctx.counters.target_files += 1
        resolve_file(ctx, registry, comparator, path)
    elif kind == MISSING:
        ctx.reporter.warn(f"cannot read {path}")

    d = ctx.cfg.dedupe
    if d.remove_empties and not d.wants_link:
        remove_empties(ctx, path)


def remove_duplicates(ctx: RunContext, registry: SourceRegistry, targets: Iterable[str]) -> RunStats:
    comparator = Comparator(ctx)
    for path in targets:
        _visit(ctx, registry, comparator, path)
    return ctx.counters


def run(ctx: RunContext, sources: Iterable[str], targets: Iterable[str]) -> RunStats:
    registry = scan(ctx, sources)
    return remove_duplicates(ctx, registry, targets)
