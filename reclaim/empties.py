"""Bottom-up removal of broken links, zero-length files and emptied directories."""
from __future__ import annotations

import os
from typing import List

from .context import RunContext
from .walk import DIRECTORY, FILE, MISSING, SYMLINK, classify, read_entries


def _announce(ctx: RunContext, what: str, path: str) -> None:
    if ctx.verbose:
        verb = "would remove" if ctx.dry_run else "removing"
        ctx.reporter.emit(f"{verb} {what} {path}")
    else:
        ctx.reporter.emit(path)


def _unlink(ctx: RunContext, what: str, path: str) -> bool:
    _announce(ctx, what, path)
    if not ctx.dry_run:
        try:
            os.unlink(path)
        except OSError as e:
            ctx.reporter.warn(f"cannot remove {path}: {e}")
            return False
    ctx.reclaimed.add(path)
    return True


def _is_empty_file(path: str) -> bool:
    try:
        return os.lstat(path).st_size == 0
    except OSError:
        return False


def remove_broken_link(ctx: RunContext, path: str) -> bool:
    """Remove ``path`` if it is a dangling symlink. Returns True when it is (or would be) gone."""
    if os.path.exists(path):
        return False
    if not _unlink(ctx, "broken link", path):
        return False
    ctx.counters.broken_links_removed += 1
    return True


def remove_empty_dir(ctx: RunContext, path: str) -> bool:
    entries = read_entries(ctx, path, label="possibly empty")
    if entries is None:
        return False

    only_empty = True
    empty_files: List[str] = []
    for entry in entries:
        if entry in ctx.reclaimed:
            continue
        kind = classify(entry)
        if kind in (SYMLINK, DIRECTORY):
            # children are reclaimed even when this directory stays
            if not remove_empties(ctx, entry):
                only_empty = False
        elif kind == FILE and _is_empty_file(entry):
            empty_files.append(entry)
        elif kind != MISSING:
            only_empty = False

    if not only_empty:
        return False

    for entry in empty_files:
        if not _unlink(ctx, "empty file", entry):
            return False
        ctx.counters.empty_files_removed += 1

    _announce(ctx, "empty directory", path)
    if not ctx.dry_run:
        try:
            os.rmdir(path)
        except OSError as e:
            ctx.reporter.warn(f"cannot remove directory {path}: {e}")
            return False
    ctx.reclaimed.add(path)
    ctx.counters.empty_dirs_removed += 1
    return True


def remove_empties(ctx: RunContext, path: str) -> bool:
    """Reclaim ``path``; True when nothing is left of it afterwards.

    Only symlinks and directories are acted on directly. Zero-length files are
    removed as part of an enclosing directory that turns out to hold nothing
    else; a lone file passed here is left alone.
    """
    if path in ctx.reclaimed:
        return True
    kind = classify(path)
    if kind == SYMLINK:
        return remove_broken_link(ctx, path)
    if kind == DIRECTORY:
        return remove_empty_dir(ctx, path)
    return kind == MISSING
