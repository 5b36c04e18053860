"""Unified diff parser — collects the hunk headers of every file.

Yields one DiffFile (with its hunks) or FileSkipped per ``diff --git``
section. Hunk bodies are not needed: the reconciler re-reads both revisions
in full, so only the line-range headers are kept. Handles renames, new and
deleted files, binary markers, mode-only changes, submodule pointers, CRLF and
all hunk header variations.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Generator, List, Optional

from rsloc.git.models import DiffFile, FileSkipped, FileStatus, Hunk

# --- Regex patterns for diff parsing ---

_DIFF_HEADER_RE = re.compile(r"^diff --git a/(.*) b/(.*)$")
_HUNK_HEADER_RE = re.compile(
    r"^@@ -(\d+)(?:,(\d+))? \+(\d+)(?:,(\d+))? @@"
)
_BINARY_RE = re.compile(r"^Binary files .* and .* differ$")
_RENAME_FROM_RE = re.compile(r"^rename from (.+)$")
_RENAME_TO_RE = re.compile(r"^rename to (.+)$")
_FILE_HEADER_OLD = re.compile(r"^--- (?:a/(.+)|/dev/null)$")
_FILE_HEADER_NEW = re.compile(r"^\+\+\+ (?:b/(.+)|/dev/null)$")
_SIMILARITY_RE = re.compile(r"^(?:dis)?similarity index \d+%$")
_OLD_MODE_RE = re.compile(r"^old mode \d+$")
_NEW_MODE_RE = re.compile(r"^new mode \d+$")
_DELETED_FILE_RE = re.compile(r"^deleted file mode (\d+)$")
_NEW_FILE_RE = re.compile(r"^new file mode (\d+)$")
_INDEX_RE = re.compile(r"^index [0-9a-f]+\.\.[0-9a-f]+(?: (\d+))?$")
_SUBMODULE_MODE = "160000"


def _normalise(line: str) -> str:
    """Strip trailing CR (CRLF → LF)."""
    return line.rstrip("\r")


@dataclass
class _FileSection:
    path: str
    old_path: str
    is_rename: bool = False
    is_mode_change: bool = False
    is_new: bool = False
    is_deleted: bool = False
    is_binary: bool = False
    is_submodule: bool = False
    hunks: List[Hunk] = field(default_factory=list)

    def finish(self) -> DiffFile | FileSkipped:
        if self.is_submodule:
            return FileSkipped(path=self.path, reason="submodule")
        if self.is_binary:
            return FileSkipped(path=self.path, reason="binary")
        if self.is_mode_change and not self.hunks and not self.is_rename:
            return FileSkipped(path=self.path, reason="mode_only")

        if self.is_new:
            status = FileStatus.ADDED
        elif self.is_deleted:
            status = FileStatus.DELETED
        elif self.is_rename:
            status = FileStatus.RENAMED
        else:
            status = FileStatus.MODIFIED

        return DiffFile(
            path=self.path,
            old_path=self.old_path if self.is_rename else None,
            status=status,
            hunks=tuple(self.hunks),
        )


class DiffParser:
    """Parse unified diff text into per-file hunk lists.

    Usage::

        parser = DiffParser(diff_text)
        for item in parser.parse():
            if isinstance(item, FileSkipped):
                ...
            elif isinstance(item, DiffFile):
                ...
    """

    def __init__(self, diff_text: str) -> None:
        self._lines = [_normalise(line) for line in diff_text.split("\n")]

    def parse(self) -> Generator[DiffFile | FileSkipped, None, None]:
        """Yield a DiffFile or FileSkipped per file section, in diff order."""
        current: Optional[_FileSection] = None
        in_header = False

        for raw_line in self._lines:
            # --- diff --git header → new file section ---
            m = _DIFF_HEADER_RE.match(raw_line)
            if m:
                if current is not None:
                    yield current.finish()
                current = _FileSection(path=m.group(2), old_path=m.group(1))
                in_header = True
                continue

            if current is None:
                continue

            # --- Hunk header ---
            hm = _HUNK_HEADER_RE.match(raw_line)
            if hm:
                in_header = False
                current.hunks.append(
                    Hunk(
                        old_start=int(hm.group(1)),
                        old_len=int(hm.group(2)) if hm.group(2) is not None else 1,
                        new_start=int(hm.group(3)),
                        new_len=int(hm.group(4)) if hm.group(4) is not None else 1,
                    )
                )
                continue

            if not in_header:
                # Hunk body (+, -, context, "\ No newline at end of file")
                continue

            self._parse_sub_header(raw_line, current)

        if current is not None:
            yield current.finish()

    @staticmethod
    def _parse_sub_header(line: str, section: _FileSection) -> None:
        """Apply one extended header line (index, modes, renames, ---/+++)."""
        if (im := _INDEX_RE.match(line)):
            if im.group(1) == _SUBMODULE_MODE:
                section.is_submodule = True
        elif _SIMILARITY_RE.match(line):
            pass
        elif _OLD_MODE_RE.match(line) or _NEW_MODE_RE.match(line):
            section.is_mode_change = True
        elif (dm := _DELETED_FILE_RE.match(line)):
            section.is_deleted = True
            section.is_submodule = section.is_submodule or dm.group(1) == _SUBMODULE_MODE
        elif (nm := _NEW_FILE_RE.match(line)):
            section.is_new = True
            section.is_submodule = section.is_submodule or nm.group(1) == _SUBMODULE_MODE
        elif (rm := _RENAME_FROM_RE.match(line)):
            section.old_path = rm.group(1)
            section.is_rename = True
        elif (rt := _RENAME_TO_RE.match(line)):
            section.path = rt.group(1)
        elif _BINARY_RE.match(line):
            section.is_binary = True
        elif (om := _FILE_HEADER_OLD.match(line)):
            if om.group(1):
                section.old_path = om.group(1).rstrip("\t")
        elif (nw := _FILE_HEADER_NEW.match(line)):
            if nw.group(1):
                section.path = nw.group(1).rstrip("\t")
