"""Git subprocess wrapper — repo root, revision diffs, blob contents."""

from __future__ import annotations

import subprocess
from pathlib import Path
from typing import List, Optional

_DIFF_ARGS = ["--unified=0", "--no-color", "--no-ext-diff", "-M"]


class GitError(Exception):
    """Raised when git is unavailable or returns an unexpected error."""


def _run_git_bytes(args: List[str], cwd: Path, timeout: int = 30) -> bytes:
    """Run a git command and return raw stdout. Raises GitError on failure."""
    try:
        result = subprocess.run(
            ["git", "-c", "core.quotepath=false", *args],
            cwd=cwd,
            capture_output=True,
            timeout=timeout,
        )
    except FileNotFoundError:
        raise GitError("git is not installed or not on PATH")
    except subprocess.TimeoutExpired:
        raise GitError(f"git command timed out after {timeout}s: git {' '.join(args)}")

    if result.returncode != 0:
        stderr = result.stderr.decode("utf-8", errors="replace").strip()
        raise GitError(f"git error: {stderr or 'exit code ' + str(result.returncode)}")
    return result.stdout


def _run_git(args: List[str], cwd: Path, timeout: int = 30) -> str:
    """Run a git command and return stdout as text."""
    return _run_git_bytes(args, cwd, timeout).decode("utf-8", errors="replace")


def get_repo_root(cwd: Optional[Path] = None) -> Path:
    """Return the root of the git repository containing *cwd*."""
    cwd = cwd or Path.cwd()
    out = _run_git(["rev-parse", "--show-toplevel"], cwd=cwd)
    return Path(out.strip())


def resolve_revision(repo_root: Path, rev: str) -> str:
    """Resolve *rev* to a commit id. Raises GitError for unknown revisions."""
    try:
        out = _run_git(["rev-parse", "--verify", "--quiet", f"{rev}^{{commit}}"], cwd=repo_root)
    except GitError as exc:
        raise GitError(f"unknown revision: {rev}") from exc
    return out.strip()


def get_diff(
    repo_root: Path,
    base: str = "HEAD",
    head: Optional[str] = None,
    *,
    staged: bool = False,
    timeout: int = 60,
) -> str:
    """Return the zero-context unified diff between two states.

    - ``head`` given: commit *base* vs commit *head*
    - ``staged``: commit *base* vs the index
    - otherwise: commit *base* vs the working tree (tracked files only)
    """
    args = ["diff", *_DIFF_ARGS]
    if head is not None:
        args += [base, head]
    elif staged:
        args += ["--cached", base]
    else:
        args += [base]
    return _run_git(args, cwd=repo_root, timeout=timeout)


def show_file(repo_root: Path, rev: Optional[str], path: str) -> bytes:
    """Return the content of *path* at *rev*; ``rev=None`` reads the index."""
    object_name = f"{rev}:{path}" if rev is not None else f":{path}"
    return _run_git_bytes(["show", object_name], cwd=repo_root)
