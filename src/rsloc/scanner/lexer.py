"""Single-pass line scanner for Rust source.

Walks a file one physical line at a time with one character of lookahead and
tags every line as code, doc, comment or blank. State that outlives a line
(block comment depth, an open string literal, brace depth) is carried in a
:class:`ScanState` owned by exactly one :class:`Scanner`, so distinct files can
be scanned concurrently.

The scanner also reports structural events (test attributes, block open and
close, item end) for the context resolver. Attribute detection is textual:
``#[test]`` and ``#[cfg(test)]`` are recognised outside strings and comments,
nothing more. This is an approximation of Rust's item grammar, not a parser.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Dict, List, NamedTuple, Optional, Tuple

from rsloc.stats.models import LineType

_TEST_ATTRIBUTES = frozenset({"#[test]", "#[cfg(test)]"})


class LexMode(str, Enum):
    NORMAL = "normal"
    LINE_COMMENT = "line_comment"
    BLOCK_COMMENT = "block_comment"
    STRING = "string"
    RAW_STRING = "raw_string"


class EventKind(str, Enum):
    TEST_ATTR = "test_attr"
    BLOCK_OPEN = "block_open"
    BLOCK_CLOSE = "block_close"
    ITEM_END = "item_end"


class ScanEvent(NamedTuple):
    """A structural token seen outside strings and comments.

    ``depth`` is the brace depth the event happened at: the depth before the
    brace for ``BLOCK_OPEN``, the depth after it for ``BLOCK_CLOSE``.
    """

    kind: EventKind
    depth: int


@dataclass
class ScanState:
    """Lexer state carried from one line to the next."""

    mode: LexMode = LexMode.NORMAL
    comment_depth: int = 0
    in_doc_comment: bool = False
    raw_delimiter_len: int = 0
    brace_depth: int = 0
    paren_depth: int = 0  # ( and [ nesting inside the current block
    paren_stack: List[int] = field(default_factory=list)
    pending_test_attr: bool = False

    @property
    def string_mode(self) -> Optional[LexMode]:
        if self.mode in (LexMode.STRING, LexMode.RAW_STRING):
            return self.mode
        return None


@dataclass(frozen=True, slots=True)
class ScannedLine:
    line_no: int
    tag: LineType
    events: Tuple[ScanEvent, ...] = ()


@dataclass(slots=True)
class _LineFlags:
    has_code: bool = False
    has_doc: bool = False
    has_comment: bool = False
    events: List[ScanEvent] = field(default_factory=list)

    def tag(self) -> LineType:
        if self.has_code:
            return LineType.CODE
        if self.has_doc:
            return LineType.DOC
        if self.has_comment:
            return LineType.COMMENT
        return LineType.BLANK


def _is_ident(char: str) -> bool:
    return char.isalnum() or char == "_"


def split_lines(text: str) -> List[str]:
    """Split *text* into physical lines.

    Only ``\\n`` ends a line (a preceding ``\\r`` is dropped with it), a final
    line without a newline still counts, and a leading BOM is ignored.
    """
    if text.startswith("\ufeff"):
        text = text[1:]
    if not text:
        return []
    lines = text.split("\n")
    if lines[-1] == "":
        lines.pop()
    return [line[:-1] if line.endswith("\r") else line for line in lines]


class Scanner:
    """Tag lines one at a time, threading a :class:`ScanState` between them.

    Usage::

        scanner = Scanner()
        for line_no, line in enumerate(split_lines(text), start=1):
            scanned = scanner.scan_line(line_no, line)
    """

    def __init__(self) -> None:
        self.state = ScanState()
        self._steps: Dict[LexMode, Callable[[str, int, _LineFlags], int]] = {
            LexMode.NORMAL: self._step_normal,
            LexMode.LINE_COMMENT: self._step_line_comment,
            LexMode.BLOCK_COMMENT: self._step_block_comment,
            LexMode.STRING: self._step_string,
            LexMode.RAW_STRING: self._step_raw_string,
        }

    def scan_line(self, line_no: int, line: str) -> ScannedLine:
        flags = _LineFlags()
        idx = 0
        end = len(line)
        while idx < end:
            idx = self._steps[self.state.mode](line, idx, flags)

        # Line comments never outlive their line; everything else carries over.
        if self.state.mode is LexMode.LINE_COMMENT:
            self.state.mode = LexMode.NORMAL
        self.state.pending_test_attr = False

        return ScannedLine(line_no=line_no, tag=flags.tag(), events=tuple(flags.events))

    # ---- per-mode transitions ----

    def _step_normal(self, line: str, idx: int, flags: _LineFlags) -> int:
        char = line[idx]
        nxt = line[idx + 1] if idx + 1 < len(line) else ""
        state = self.state

        if char.isspace():
            return idx + 1

        if char == "/" and nxt == "/":
            third = line[idx + 2 : idx + 3]
            fourth = line[idx + 3 : idx + 4]
            if third == "!" or (third == "/" and fourth != "/"):
                flags.has_doc = True
            else:
                flags.has_comment = True
            state.mode = LexMode.LINE_COMMENT
            return idx + 2

        if char == "/" and nxt == "*":
            return self._open_block_comment(line, idx, flags)

        flags.has_code = True

        if char == '"':
            state.mode = LexMode.STRING
            return idx + 1

        if char == "r":
            after = self._open_raw_string(line, idx)
            if after is not None:
                return after

        if char == "'":
            return self._skip_char_literal(line, idx)

        if char == "#":
            after = self._match_test_attribute(line, idx)
            if after is not None:
                state.pending_test_attr = True
                flags.events.append(ScanEvent(EventKind.TEST_ATTR, state.brace_depth))
                return after

        if char == "{":
            flags.events.append(ScanEvent(EventKind.BLOCK_OPEN, state.brace_depth))
            state.brace_depth += 1
            state.paren_stack.append(state.paren_depth)
            state.paren_depth = 0
        elif char == "}":
            state.brace_depth = max(state.brace_depth - 1, 0)
            state.paren_depth = state.paren_stack.pop() if state.paren_stack else 0
            flags.events.append(ScanEvent(EventKind.BLOCK_CLOSE, state.brace_depth))
        elif char in "([":
            state.paren_depth += 1
        elif char in ")]":
            state.paren_depth = max(state.paren_depth - 1, 0)
        elif char == ";" and state.paren_depth == 0:
            flags.events.append(ScanEvent(EventKind.ITEM_END, state.brace_depth))

        return idx + 1

    def _step_line_comment(self, line: str, idx: int, flags: _LineFlags) -> int:
        return len(line)

    def _step_block_comment(self, line: str, idx: int, flags: _LineFlags) -> int:
        char = line[idx]
        nxt = line[idx + 1] if idx + 1 < len(line) else ""
        state = self.state

        if char == "/" and nxt == "*":
            state.comment_depth += 1
            self._mark_comment(flags)
            return idx + 2
        if char == "*" and nxt == "/":
            state.comment_depth -= 1
            self._mark_comment(flags)
            if state.comment_depth == 0:
                state.mode = LexMode.NORMAL
                state.in_doc_comment = False
            return idx + 2
        if not char.isspace():
            self._mark_comment(flags)
        return idx + 1

    def _step_string(self, line: str, idx: int, flags: _LineFlags) -> int:
        flags.has_code = True
        char = line[idx]
        if char == "\\":
            return idx + 2
        if char == '"':
            self.state.mode = LexMode.NORMAL
        return idx + 1

    def _step_raw_string(self, line: str, idx: int, flags: _LineFlags) -> int:
        flags.has_code = True
        if line[idx] == '"':
            hashes = self.state.raw_delimiter_len
            if line[idx + 1 : idx + 1 + hashes] == "#" * hashes:
                self.state.mode = LexMode.NORMAL
                self.state.raw_delimiter_len = 0
                return idx + 1 + hashes
        return idx + 1

    # ---- helpers ----

    def _mark_comment(self, flags: _LineFlags) -> None:
        if self.state.in_doc_comment:
            flags.has_doc = True
        else:
            flags.has_comment = True

    def _open_block_comment(self, line: str, idx: int, flags: _LineFlags) -> int:
        if line[idx : idx + 4] == "/**/":
            flags.has_comment = True
            return idx + 4

        third = line[idx + 2 : idx + 3]
        fourth = line[idx + 3 : idx + 4]
        is_doc = third == "!" or (third == "*" and fourth != "*")

        state = self.state
        state.mode = LexMode.BLOCK_COMMENT
        state.comment_depth = 1
        state.in_doc_comment = is_doc
        self._mark_comment(flags)
        return idx + 3 if is_doc else idx + 2

    def _open_raw_string(self, line: str, idx: int) -> Optional[int]:
        """Enter raw-string mode if ``r#*"`` starts at *idx*; return the next index."""
        if idx > 0 and _is_ident(line[idx - 1]):
            # `br"..."` / `cr"..."` are raw strings, `bar"` is not
            prefixed = line[idx - 1] in "bc" and (idx < 2 or not _is_ident(line[idx - 2]))
            if not prefixed:
                return None

        pos = idx + 1
        while pos < len(line) and line[pos] == "#":
            pos += 1
        if pos < len(line) and line[pos] == '"':
            self.state.mode = LexMode.RAW_STRING
            self.state.raw_delimiter_len = pos - idx - 1
            return pos + 1
        return None

    @staticmethod
    def _skip_char_literal(line: str, idx: int) -> int:
        """Step over a character literal so its content stays inert; lifetimes pass through."""
        if idx + 1 < len(line) and line[idx + 1] == "\\":
            close = line.find("'", idx + 3)
            return close + 1 if close != -1 else idx + 1
        if idx + 2 < len(line) and line[idx + 2] == "'":
            return idx + 3
        return idx + 1

    @staticmethod
    def _match_test_attribute(line: str, idx: int) -> Optional[int]:
        close = line.find("]", idx)
        if close == -1:
            return None
        candidate = "".join(line[idx : close + 1].split())
        if candidate in _TEST_ATTRIBUTES:
            return close + 1
        return None


def scan_lines(text: str) -> List[ScannedLine]:
    """Scan a whole file from a fresh state."""
    scanner = Scanner()
    return [
        scanner.scan_line(line_no, line)
        for line_no, line in enumerate(split_lines(text), start=1)
    ]
