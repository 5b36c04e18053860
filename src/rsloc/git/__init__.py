"""Git interface layer — adapter, diff parsing, models."""

from rsloc.git.adapter import (
    GitError,
    get_diff,
    get_repo_root,
    resolve_revision,
    show_file,
)
from rsloc.git.diff_parser import DiffParser
from rsloc.git.models import DiffFile, FileSkipped, FileStatus, Hunk

__all__ = [
    "DiffFile",
    "DiffParser",
    "FileSkipped",
    "FileStatus",
    "GitError",
    "Hunk",
    "get_diff",
    "get_repo_root",
    "resolve_revision",
    "show_file",
]
