"""Line-count data models."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import AbstractSet, Dict, FrozenSet, Iterable, List, Optional


class Context(str, Enum):
    PRODUCTION = "production"
    TEST = "test"
    EXAMPLE = "example"


# Names accepted by ``--type`` and ``[count] types``.
CONTEXT_NAMES: Dict[str, Context] = {
    "code": Context.PRODUCTION,
    "tests": Context.TEST,
    "examples": Context.EXAMPLE,
}


def parse_contexts(names: Iterable[str]) -> FrozenSet[Context]:
    """Turn ``code``/``tests``/``examples`` names into contexts; empty means all.

    Raises ValueError on an unknown name.
    """
    selected = set()
    for name in names:
        key = name.strip().lower()
        if not key:
            continue
        if key not in CONTEXT_NAMES:
            raise ValueError(f"unknown context {name!r} (expected one of {', '.join(CONTEXT_NAMES)})")
        selected.add(CONTEXT_NAMES[key])
    return frozenset(selected or Context)


class LineType(str, Enum):
    CODE = "code"
    DOC = "doc"
    COMMENT = "comment"
    BLANK = "blank"


@dataclass(frozen=True)
class Locs:
    """Line counts for one context.

    ``all`` is derived at construction and always equals
    ``code + docs + comments + blanks``.
    """

    code: int = 0
    docs: int = 0
    comments: int = 0
    blanks: int = 0
    all: int = field(init=False, default=0)

    def __post_init__(self) -> None:
        object.__setattr__(self, "all", self.code + self.docs + self.comments + self.blanks)

    def count(self, line_type: LineType) -> int:
        return getattr(self, _LOCS_FIELD[line_type])

    def __add__(self, other: Locs) -> Locs:
        return Locs(
            code=self.code + other.code,
            docs=self.docs + other.docs,
            comments=self.comments + other.comments,
            blanks=self.blanks + other.blanks,
        )

    def to_dict(self) -> Dict[str, int]:
        return {
            "code": self.code,
            "docs": self.docs,
            "comments": self.comments,
            "blanks": self.blanks,
            "all": self.all,
        }


_LOCS_FIELD = {
    LineType.CODE: "code",
    LineType.DOC: "docs",
    LineType.COMMENT: "comments",
    LineType.BLANK: "blanks",
}


@dataclass(frozen=True)
class LocStats:
    """One :class:`Locs` per context."""

    production: Locs = field(default_factory=Locs)
    test: Locs = field(default_factory=Locs)
    example: Locs = field(default_factory=Locs)
    file_count: int = 0

    def get(self, context: Context) -> Locs:
        return getattr(self, context.value)

    @property
    def total(self) -> Locs:
        return self.production + self.test + self.example

    def only(self, contexts: AbstractSet[Context]) -> LocStats:
        """Copy with every context outside *contexts* zeroed."""
        return LocStats(
            production=self.production if Context.PRODUCTION in contexts else Locs(),
            test=self.test if Context.TEST in contexts else Locs(),
            example=self.example if Context.EXAMPLE in contexts else Locs(),
            file_count=self.file_count,
        )

    def __add__(self, other: LocStats) -> LocStats:
        return LocStats(
            production=self.production + other.production,
            test=self.test + other.test,
            example=self.example + other.example,
            file_count=self.file_count + other.file_count,
        )


@dataclass(frozen=True)
class LocsDiff:
    """Lines added and removed for one context."""

    added: Locs = field(default_factory=Locs)
    removed: Locs = field(default_factory=Locs)

    def net_code(self) -> int:
        return self.added.code - self.removed.code

    def net_docs(self) -> int:
        return self.added.docs - self.removed.docs

    def net_comments(self) -> int:
        return self.added.comments - self.removed.comments

    def net_blanks(self) -> int:
        return self.added.blanks - self.removed.blanks

    def net_all(self) -> int:
        return self.added.all - self.removed.all

    def __add__(self, other: LocsDiff) -> LocsDiff:
        return LocsDiff(added=self.added + other.added, removed=self.removed + other.removed)


@dataclass(frozen=True)
class LocStatsDiff:
    """One :class:`LocsDiff` per context."""

    production: LocsDiff = field(default_factory=LocsDiff)
    test: LocsDiff = field(default_factory=LocsDiff)
    example: LocsDiff = field(default_factory=LocsDiff)

    def get(self, context: Context) -> LocsDiff:
        return getattr(self, context.value)

    @property
    def total(self) -> LocsDiff:
        return self.production + self.test + self.example

    def only(self, contexts: AbstractSet[Context]) -> LocStatsDiff:
        return LocStatsDiff(
            production=self.production if Context.PRODUCTION in contexts else LocsDiff(),
            test=self.test if Context.TEST in contexts else LocsDiff(),
            example=self.example if Context.EXAMPLE in contexts else LocsDiff(),
        )

    def __add__(self, other: LocStatsDiff) -> LocStatsDiff:
        return LocStatsDiff(
            production=self.production + other.production,
            test=self.test + other.test,
            example=self.example + other.example,
        )


@dataclass(frozen=True)
class FailedFile:
    """A file that could not be classified."""

    path: str
    reason: str


@dataclass
class FileStats:
    path: str
    stats: LocStats


@dataclass
class CrateStats:
    name: str
    path: str
    stats: LocStats = field(default_factory=LocStats)
    files: List[FileStats] = field(default_factory=list)

    def add_file(self, file_stats: FileStats) -> None:
        self.stats = self.stats + file_stats.stats
        self.files.append(file_stats)


@dataclass
class ModuleStats:
    """The files making up one Rust module, e.g. ``foo.rs`` or ``foo/mod.rs`` for ``crate::foo``."""

    name: str  # e.g. "core", "core::parser"
    stats: LocStats = field(default_factory=LocStats)
    files: List[str] = field(default_factory=list)

    def add_file(self, file_stats: FileStats) -> None:
        self.stats = self.stats + file_stats.stats
        self.files.append(file_stats.path)


@dataclass
class CountResult:
    """Complete result of a count run."""

    root: str
    total: LocStats = field(default_factory=LocStats)
    files: List[FileStats] = field(default_factory=list)
    crates: List[CrateStats] = field(default_factory=list)
    modules: List[ModuleStats] = field(default_factory=list)
    failed: List[FailedFile] = field(default_factory=list)
    duration_ms: float = 0.0

    @property
    def file_count(self) -> int:
        return self.total.file_count


@dataclass
class FileDiffStats:
    path: str
    status: str  # 'added' | 'deleted' | 'modified' | 'renamed'
    diff: LocStatsDiff
    old_path: Optional[str] = None


@dataclass
class CrateDiffStats:
    name: str
    path: str
    diff: LocStatsDiff = field(default_factory=LocStatsDiff)
    files: List[FileDiffStats] = field(default_factory=list)

    def add_file(self, file_diff: FileDiffStats) -> None:
        self.diff = self.diff + file_diff.diff
        self.files.append(file_diff)


@dataclass
class DiffResult:
    """Complete result of a diff run between two revisions."""

    root: str
    from_ref: str
    to_ref: str
    total: LocStatsDiff = field(default_factory=LocStatsDiff)
    files: List[FileDiffStats] = field(default_factory=list)
    crates: List[CrateDiffStats] = field(default_factory=list)
    failed: List[FailedFile] = field(default_factory=list)
    unclassified_added: int = 0
    unclassified_removed: int = 0
    binary_files: List[str] = field(default_factory=list)
    duration_ms: float = 0.0
