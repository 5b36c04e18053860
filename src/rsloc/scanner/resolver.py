"""Context resolver — turn scanned lines into (context, line type) pairs.

Every line starts in the file's base context (from its path). A test
attribute arms a one-shot trigger; the next block that opens turns the held
lines and the whole block into test code, and the block's closing brace hands
control back to the base context on the following line::

    IDLE --TEST_ATTR--> ARMED --BLOCK_OPEN--> ACTIVE --BLOCK_CLOSE(<= open depth)--> IDLE
                          |
                          +--ITEM_END / enclosing BLOCK_CLOSE / EOF--> IDLE (dropped)

The trigger is dropped when the attributed item ends without a block, e.g.
``#[cfg(test)] use super::*;``. Further attributes in between keep it armed.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Iterable, List, NamedTuple, Optional, Tuple

from rsloc.scanner.lexer import EventKind, ScannedLine
from rsloc.stats.models import Context, LineType


class ClassifiedLine(NamedTuple):
    context: Context
    line_type: LineType


class ScopePhase(str, Enum):
    IDLE = "idle"
    ARMED = "armed"
    ACTIVE = "active"


@dataclass
class ScopeState:
    """Tagged-variant state for attribute-triggered test scoping."""

    phase: ScopePhase = ScopePhase.IDLE
    armed_depth: int = 0
    open_depth: Optional[int] = None
    # (index into the output, already inside a test scope on that line)
    held: List[Tuple[int, bool]] = field(default_factory=list)


class ContextResolver:
    """Assign a context to each scanned line of one file."""

    def __init__(self, base_context: Context) -> None:
        self.base_context = base_context
        self.scope = ScopeState()
        self._contexts: List[Optional[Context]] = []

    def feed(self, line: ScannedLine) -> None:
        scope = self.scope
        index = len(self._contexts)
        self._contexts.append(None)
        in_test = scope.phase is ScopePhase.ACTIVE

        for event in line.events:
            if scope.phase is ScopePhase.IDLE:
                if event.kind is EventKind.TEST_ATTR:
                    scope.phase = ScopePhase.ARMED
                    scope.armed_depth = event.depth
            elif scope.phase is ScopePhase.ARMED:
                if event.kind is EventKind.BLOCK_OPEN:
                    scope.phase = ScopePhase.ACTIVE
                    scope.open_depth = event.depth
                    self._release(Context.TEST)
                    in_test = True
                elif event.kind is EventKind.ITEM_END and event.depth == scope.armed_depth:
                    self._drop()
                elif event.kind is EventKind.BLOCK_CLOSE and event.depth < scope.armed_depth:
                    self._drop()
            elif event.kind is EventKind.BLOCK_CLOSE and scope.open_depth is not None:
                if event.depth <= scope.open_depth:
                    scope.phase = ScopePhase.IDLE
                    scope.open_depth = None

        if scope.phase is ScopePhase.ARMED:
            scope.held.append((index, in_test))
        else:
            self._contexts[index] = Context.TEST if in_test else self.base_context

    def finish(self) -> List[Context]:
        """Close the file: an armed trigger that never fired is dropped."""
        if self.scope.phase is ScopePhase.ARMED:
            self._drop()
        return [ctx if ctx is not None else self.base_context for ctx in self._contexts]

    def _release(self, context: Context) -> None:
        for index, in_test in self.scope.held:
            self._contexts[index] = Context.TEST if in_test else context
        self.scope.held.clear()

    def _drop(self) -> None:
        self._release(self.base_context)
        self.scope.phase = ScopePhase.IDLE


def resolve(lines: Iterable[ScannedLine], base_context: Context) -> List[ClassifiedLine]:
    """Resolve the final context of every scanned line."""
    scanned = list(lines)
    if base_context is Context.TEST:
        return [ClassifiedLine(Context.TEST, line.tag) for line in scanned]

    resolver = ContextResolver(base_context)
    for line in scanned:
        resolver.feed(line)
    contexts = resolver.finish()
    return [ClassifiedLine(ctx, line.tag) for ctx, line in zip(contexts, scanned)]
