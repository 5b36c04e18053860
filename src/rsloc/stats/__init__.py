"""Line-count models and aggregation."""

from rsloc.stats.aggregator import aggregate, combine, locs_for
from rsloc.stats.models import (
    CONTEXT_NAMES,
    CountResult,
    CrateDiffStats,
    CrateStats,
    Context,
    DiffResult,
    FailedFile,
    FileDiffStats,
    FileStats,
    LineType,
    Locs,
    LocsDiff,
    LocStats,
    LocStatsDiff,
    ModuleStats,
    parse_contexts,
)

__all__ = [
    "CONTEXT_NAMES",
    "Context",
    "CountResult",
    "CrateDiffStats",
    "CrateStats",
    "DiffResult",
    "FailedFile",
    "FileDiffStats",
    "FileStats",
    "LineType",
    "LocStats",
    "LocStatsDiff",
    "Locs",
    "LocsDiff",
    "ModuleStats",
    "aggregate",
    "combine",
    "locs_for",
    "parse_contexts",
]
