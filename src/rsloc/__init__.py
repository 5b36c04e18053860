"""rsloc — Rust-aware lines of code counter with test/code separation."""

from rsloc.diff.reconciler import ReconciliationError, reconcile
from rsloc.git.models import Hunk
from rsloc.scanner.engine import classify_file
from rsloc.stats.aggregator import aggregate, combine
from rsloc.stats.models import Context, LineType, Locs, LocsDiff, LocStats, LocStatsDiff

__version__ = "0.4.0"

__all__ = [
    "Context",
    "Hunk",
    "LineType",
    "LocStats",
    "LocStatsDiff",
    "Locs",
    "LocsDiff",
    "ReconciliationError",
    "__version__",
    "aggregate",
    "classify_file",
    "combine",
    "reconcile",
]
