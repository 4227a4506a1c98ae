"""
Base builder class for the Viand manifest builder.

Holds the manifest under construction and the context stack, and provides
the stack discipline shared by all builder mixins.
"""

import logging
from collections.abc import Iterable
from typing import Protocol, TypeVar, runtime_checkable

from .. import ir
from ..lexer import Token
from .frames import Frame, RootFrame

logger = logging.getLogger(__name__)

F = TypeVar("F", bound=Frame)


@runtime_checkable
class BuilderProtocol(Protocol):
    """
    Protocol defining the interface available to builder mixins.

    Lets type checkers see BaseBuilder state and helpers from inside the
    mixins once they are combined in ManifestBuilder.
    """

    stack: list[Frame]
    reports: list[str]
    view: list[ir.ViewNode]
    element_refs: list[str]
    slots: list[str]

    @property
    def top(self) -> Frame: ...
    def push(self, frame: Frame) -> None: ...
    def nearest(self, frame_type: type[F]) -> F | None: ...
    def register_ref(self, name: str) -> None: ...
    def register_slot(self, name: str) -> None: ...
    def drop(self, token: Token, reason: str) -> None: ...


class BaseBuilder:
    """
    Base builder with manifest state and context-stack utilities.

    The stack always holds at least the root frame, whose children are the
    manifest's view forest. Lists are mutated while building and frozen into
    a ``ComponentManifest`` by ``finish``.
    """

    def __init__(self, tokens: Iterable[Token], lexer_diagnostics: Iterable[str] = ()):
        """
        Initialize builder.

        Args:
            tokens: Depth-annotated tokens from the hierarchy builder
            lexer_diagnostics: Diagnostics to carry into the reports
        """
        self.tokens = list(tokens)
        self.reports: list[str] = list(lexer_diagnostics)

        self.name = "Component"
        self.is_singleton = False
        self.imports: list[ir.Import] = []
        self.props: list[ir.Declaration] = []
        self.state: list[ir.Declaration] = []
        self.derived: list[ir.Derived] = []
        self.functions: list[ir.FunctionNode] = []
        self.lifecycle_body: list[ir.LogicItem] = []
        self.watchers: list[ir.Watcher] = []
        self.element_refs: list[str] = []
        self.slots: list[str] = []
        self.style_rules: list[ir.StyleRule] = []
        self.view: list[ir.ViewNode] = []
        self.tests: list[ir.PersonaBlock] = []
        self.heads: list[ir.HeadSpec] = []

        self.stack: list[Frame] = [RootFrame(depth=-1, children=self.view)]

    @property
    def top(self) -> Frame:
        """The innermost open frame."""
        return self.stack[-1]

    def push(self, frame: Frame) -> None:
        self.stack.append(frame)

    def close_frames(self, depth: int) -> None:
        """
        Close every frame opened at ``depth`` or deeper.

        A line at the same depth as an open block is its sibling, so the
        block ends before the line is handled. The root frame is never
        closed here.
        """
        while len(self.stack) > 1 and self.stack[-1].depth >= depth:
            self.stack.pop().close()

    def close_all(self) -> None:
        self.close_frames(-1)

    def nearest(self, frame_type: type[F]) -> F | None:
        """Find the innermost open frame of a given type."""
        for frame in reversed(self.stack):
            if isinstance(frame, frame_type):
                return frame
        return None

    def register_ref(self, name: str) -> None:
        if name not in self.element_refs:
            self.element_refs.append(name)

    def register_slot(self, name: str) -> None:
        if name not in self.slots:
            self.slots.append(name)

    def drop(self, token: Token, reason: str) -> None:
        """Skip a line the lenient grammar has no place for."""
        logger.debug("Line %s: dropped %s (%s)", token.line_number, token.text, reason)
