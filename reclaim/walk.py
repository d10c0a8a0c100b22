"""Directory enumeration with a fixed order: plain entries first, then subdirectories."""
from __future__ import annotations

import os
import stat
from typing import Iterable, Iterator, List, Optional, Tuple

from .context import RunContext

SYMLINK = "symlink"
DIRECTORY = "directory"
FILE = "file"
OTHER = "other"
MISSING = "missing"


def classify(path: str) -> str:
    """Kind of ``path`` without following a final symlink. Always a fresh lstat()."""
    try:
        mode = os.lstat(path).st_mode
    except OSError:
        return MISSING
    if stat.S_ISLNK(mode):
        return SYMLINK
    if stat.S_ISDIR(mode):
        return DIRECTORY
    if stat.S_ISREG(mode):
        return FILE
    return OTHER


def read_entries(ctx: RunContext, directory: str, label: Optional[str] = None) -> Optional[List[str]]:
    """Entries of ``directory``: non-directories sorted, then real subdirectories sorted.

    Symlinks to directories count as non-directories. An unreadable directory
    is reported and gives ``None``.
    """
    if label and ctx.verbose:
        ctx.reporter.info(f"examining {label} directory {directory}")
    files: List[str] = []
    subdirs: List[str] = []
    try:
        with os.scandir(directory) as it:
            for entry in it:
                try:
                    is_dir = entry.is_dir(follow_symlinks=False)
                except OSError:
                    is_dir = False
                (subdirs if is_dir else files).append(entry.path)
    except OSError as e:
        ctx.reporter.warn(f"cannot read directory {directory}: {e}")
        return None
    files.sort()
    subdirs.sort()
    return files + subdirs


def list_entries(ctx: RunContext, directory: str, label: Optional[str] = None) -> List[str]:
    return read_entries(ctx, directory, label) or []


def expand(ctx: RunContext, paths: Iterable[str]) -> Iterator[Tuple[str, str]]:
    """Depth-first ``(path, kind)`` over ``paths``; directories are yielded before their contents."""
    for path in paths:
        kind = classify(path)
        yield path, kind
        if kind == DIRECTORY:
            yield from expand(ctx, list_entries(ctx, path))


def check_link(ctx: RunContext, path: str) -> bool:
    """Follow a symlink only to confirm its target can be reached; warn if it cannot."""
    try:
        os.stat(path)
    except OSError as e:
        ctx.reporter.warn(f"cannot read {path}: {e}")
        return False
    return True
