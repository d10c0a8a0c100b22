"""Unified command-line interface for reclaim."""
from __future__ import annotations

import argparse
import sys
from typing import Callable, Optional, Sequence

from . import __version__
from .commands import COMMAND_MODULES
from .commands.dedupe import split_targets


Handler = Callable[[argparse.Namespace], int]


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="reclaim",
        description="Remove files that duplicate a set of sources and clean up what is left behind",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    subparsers = parser.add_subparsers(dest="command", metavar="command")
    for module in COMMAND_MODULES:
        module.add_parser(subparsers)
    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    head, targets = split_targets(sys.argv[1:] if argv is None else argv)
    parser = build_parser()
    args = parser.parse_args(head)

    handler: Optional[Handler] = getattr(args, "handler", None)
    if handler is None:
        parser.print_help(sys.stderr)
        return 1
    if getattr(args, "needs_targets", False):
        if not targets:
            parser.error(f"{args.command}: at least one target is required after '--'")
        args.targets = targets
    elif targets is not None:
        args.paths = list(args.paths) + targets
    return handler(args)


if __name__ == "__main__":
    raise SystemExit(main())
