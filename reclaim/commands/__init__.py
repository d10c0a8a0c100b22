"""Command registration for the reclaim CLI."""
from __future__ import annotations

from typing import Iterable

from . import clean, dedupe

COMMAND_MODULES: Iterable = (dedupe, clean)

__all__ = ["COMMAND_MODULES"]
