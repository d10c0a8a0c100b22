"""CLI command for removing or linking duplicates of source files found under targets."""
from __future__ import annotations

import argparse
import sys
from argparse import _SubParsersAction
from typing import List, Optional, Sequence, Tuple

from pydantic import ValidationError

from ..dedupe import SymlinkVerificationError, run
from .common import CHECKSUMS, add_output_options, context_from_args, normalize_paths

USAGE = "%(prog)s [options] source... -- target..."


def _configure_parser(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("sources", nargs="+", metavar="source", help="Files or directories whose contents are kept")
    add_output_options(parser)
    parser.add_argument("-l", "--hard-link", action="store_true", default=None, help="Replace duplicates with hard links, falling back to symlinks")
    parser.add_argument("-s", "--symlink", action="store_true", default=None, help="Replace duplicates with relative symbolic links")
    parser.add_argument("-x", "--same-filesystem", action="store_true", default=None, help="Only compare files that live on the same filesystem")
    parser.add_argument("--keep-empties", action="store_false", dest="remove_empties", default=None, help="Do not remove broken links, empty files and emptied directories under the targets")
    parser.add_argument("--block-size", type=int, help="Bytes per read and per partial checksum (default 32768)")
    parser.add_argument("--checksum", choices=CHECKSUMS, help="Partial checksum algorithm (default sha256)")


def add_parser(subparsers: _SubParsersAction[argparse.ArgumentParser]) -> argparse.ArgumentParser:
    parser = subparsers.add_parser(
        "dedupe",
        usage=USAGE,
        help="Remove target files identical to a source file",
        description="Delete every target file whose content matches a source file, optionally leaving a link to the source.",
    )
    _configure_parser(parser)
    parser.set_defaults(handler=run_from_args, needs_targets=True)
    return parser


def build_parser(prog: Optional[str] = None) -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog=prog or "reclaim dedupe", usage=USAGE, description="Remove target files identical to a source file")
    _configure_parser(parser)
    return parser


def split_targets(argv: Sequence[str]) -> Tuple[List[str], Optional[List[str]]]:
    """Split ``argv`` at the first ``--``; targets are ``None`` if there is no separator."""
    argv = list(argv)
    if "--" not in argv:
        return argv, None
    idx = argv.index("--")
    return argv[:idx], argv[idx + 1 :]


def run_from_args(args: argparse.Namespace) -> int:
    try:
        ctx = context_from_args(args)
    except (FileNotFoundError, ValidationError) as e:
        print(f"[ERROR] {e}", file=sys.stderr)
        return 1

    try:
        run(ctx, normalize_paths(args.sources), normalize_paths(args.targets))
    except SymlinkVerificationError as e:
        ctx.reporter.error(str(e))
        return 1
    finally:
        if ctx.cfg.log.summary:
            ctx.reporter.summary()
    return 0


def run_cli(argv: Optional[Sequence[str]] = None) -> int:
    head, targets = split_targets(sys.argv[1:] if argv is None else argv)
    parser = build_parser()
    args = parser.parse_args(head)
    if not targets:
        parser.error("at least one target is required after '--'")
    args.targets = targets
    return run_from_args(args)


__all__ = ["add_parser", "build_parser", "run_cli", "run_from_args", "split_targets"]
