"""Options and context construction shared by the subcommands."""
from __future__ import annotations

import argparse
from pathlib import Path
from typing import Any, Dict, List, Sequence

from ..config import CHECKSUMS, apply_overrides, load_config
from ..context import RunContext
from ..report import Reporter
from ..util import normalize_path


def add_output_options(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--config", help="YAML configuration file (default: $RECLAIM_CONFIG if set)")
    parser.add_argument("-n", "--dry-run", action="store_true", default=None, help="Report what would be done without touching the filesystem")
    parser.add_argument("-v", "--verbose", action="store_true", default=None, help="Describe each action instead of printing bare paths")
    parser.add_argument("--summary", action="store_true", default=None, help="Print a run summary on stderr when done")


def overrides_from_args(args: argparse.Namespace) -> Dict[str, Dict[str, Any]]:
    return {
        "dedupe": {
            "dry_run": args.dry_run,
            "verbose": args.verbose,
            "hard_link_duplicates": getattr(args, "hard_link", None),
            "symlink_only": getattr(args, "symlink", None),
            "same_filesystem_only": getattr(args, "same_filesystem", None),
            "remove_empties": getattr(args, "remove_empties", None),
        },
        "compare": {
            "block_size": getattr(args, "block_size", None),
            "checksum": getattr(args, "checksum", None),
        },
        "log": {"summary": args.summary},
    }


def context_from_args(args: argparse.Namespace) -> RunContext:
    cfg = load_config(Path(args.config) if args.config else None)
    cfg = apply_overrides(cfg, overrides_from_args(args))
    return RunContext(cfg=cfg, reporter=Reporter())


def normalize_paths(paths: Sequence[str]) -> List[str]:
    return [normalize_path(p) for p in paths]


__all__ = ["CHECKSUMS", "add_output_options", "context_from_args", "normalize_paths", "overrides_from_args"]
