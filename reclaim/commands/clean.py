"""CLI command for clearing broken links, empty files and empty directories."""
from __future__ import annotations

import argparse
import sys
from argparse import _SubParsersAction
from typing import Optional, Sequence

from pydantic import ValidationError

from ..empties import remove_empties
from .common import add_output_options, context_from_args, normalize_paths


def _configure_parser(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("paths", nargs="+", metavar="path", help="Directories or symlinks to clean up")
    add_output_options(parser)


def add_parser(subparsers: _SubParsersAction[argparse.ArgumentParser]) -> argparse.ArgumentParser:
    parser = subparsers.add_parser(
        "clean",
        help="Remove broken links, empty files and empty directories",
        description="Prune broken symlinks, zero-length files and directories left with nothing else in them.",
    )
    _configure_parser(parser)
    parser.set_defaults(handler=run_from_args)
    return parser


def build_parser(prog: Optional[str] = None) -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog=prog or "reclaim clean", description="Remove broken links, empty files and empty directories")
    _configure_parser(parser)
    return parser


def run_from_args(args: argparse.Namespace) -> int:
    try:
        ctx = context_from_args(args)
    except (FileNotFoundError, ValidationError) as e:
        print(f"[ERROR] {e}", file=sys.stderr)
        return 1

    for path in normalize_paths(args.paths):
        remove_empties(ctx, path)
    if ctx.cfg.log.summary:
        ctx.reporter.summary()
    return 0


def run_cli(argv: Optional[Sequence[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(list(argv) if argv is not None else None)
    return run_from_args(args)


__all__ = ["add_parser", "build_parser", "run_cli", "run_from_args"]
