"""Map a file path to the context its lines start in."""

from __future__ import annotations

from pathlib import Path, PurePath
from typing import Optional, Union

from rsloc.source.workspace import find_workspace_root
from rsloc.stats.models import Context


def context_for_path(path: Union[str, PurePath]) -> Context:
    """Return the base context for *path*.

    - any ``tests`` component, or a file named ``tests.rs`` → TEST
    - any ``examples`` component → EXAMPLE
    - everything else → PRODUCTION

    Components are checked from the root side; the first match wins.
    """
    for part in PurePath(path).parts:
        if part in ("tests", "tests.rs"):
            return Context.TEST
        if part == "examples":
            return Context.EXAMPLE
    return Context.PRODUCTION


def context_for_file(path: Path, workspace_root: Optional[Path] = None) -> Context:
    """Return the base context for a file on disk.

    The file is judged by its path inside the Cargo workspace that holds it,
    so ``crate/tests/common.rs`` is a test file whether a run starts at the
    workspace, at ``crate/tests`` or at the file itself. *workspace_root* is
    looked up when not given. Outside any Cargo project the path is judged as
    given.
    """
    absolute = path.resolve()
    if workspace_root is None:
        workspace_root = find_workspace_root(absolute.parent)
    if workspace_root is not None and workspace_root in absolute.parents:
        return context_for_path(absolute.relative_to(workspace_root))
    return context_for_path(path)
