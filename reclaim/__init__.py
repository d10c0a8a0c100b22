"""
reclaim - remove duplicates of source files from target trees

Builds a size-bucketed index of source files, then deletes (or replaces
with links) every target file whose bytes match a source, and prunes
the empty files, broken links and directories left behind.
"""

__version__ = "1.0.0"
__license__ = "MIT"

from .compare import Comparator, Comparison, Outcome
from .config import ReclaimConfig, load_config
from .context import RunContext
from .dedupe import SymlinkVerificationError, remove_duplicates, run
from .empties import remove_empties
from .registry import SourceRegistry, scan
from .walk import list_entries

__all__ = [
    "Comparator",
    "Comparison",
    "Outcome",
    "ReclaimConfig",
    "RunContext",
    "SourceRegistry",
    "SymlinkVerificationError",
    "list_entries",
    "load_config",
    "remove_duplicates",
    "remove_empties",
    "run",
    "scan",
]
