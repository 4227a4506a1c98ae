"""
Context-stack frames for the manifest builder.

Each open block in the source is one frame. A frame records the depth of
the line that opened it and where its content goes. Nodes that own
children are placed in their parent's list as soon as they are opened, so
source order is kept, and replaced with a copy holding the collected
children when the frame closes. IR models stay frozen throughout.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from .. import ir
from .siblings import parse_head


@dataclass(kw_only=True)
class Frame:
    """
    Base frame.

    Attributes:
        depth: Depth of the opening line; lines at this depth or shallower
            close the frame
        line: Source line of the opening line
    """

    depth: int
    line: int = 0

    def close(self) -> None:
        """Publish collected content. Called once, when the frame is popped."""


# =============================================================================
# View frames
# =============================================================================


@dataclass(kw_only=True)
class ViewFrame(Frame):
    """A frame collecting view nodes into ``children``."""

    children: list[ir.ViewNode] = field(default_factory=list)


@dataclass(kw_only=True)
class RootFrame(ViewFrame):
    """Bottom of the stack. Its children are the manifest's view forest."""


@dataclass(kw_only=True)
class ViewRootFrame(ViewFrame):
    """A ``view:`` block. Shares the manifest's view forest with the root."""


@dataclass(kw_only=True)
class NodeFrame(ViewFrame):
    """
    Children of an element, fragment, ``each`` or ``if`` node.

    The node itself sits at ``sink[index]``.
    """

    sink: list[ir.ViewNode]
    index: int

    def close(self) -> None:
        node = self.sink[self.index]
        self.sink[self.index] = node.model_copy(update={"children": list(self.children)})


@dataclass(kw_only=True)
class ElseFrame(ViewFrame):
    """
    An ``else`` or ``else if`` branch.

    On close the branch is appended to the alternate chain of the ``if``
    node at ``sink[index]``.
    """

    sink: list[ir.ViewNode]
    index: int
    condition: str | None = None

    def close(self) -> None:
        head = self.sink[self.index]
        branch = ir.IfNode(condition=self.condition, children=list(self.children), line=self.line)
        if isinstance(head, ir.IfNode):
            self.sink[self.index] = head.with_alternate(branch)


@dataclass(kw_only=True)
class MatchFrame(Frame):
    """A ``match`` block collecting ``case`` and ``default`` branches."""

    sink: list[ir.ViewNode]
    index: int
    cases: list[ir.MatchBranch] = field(default_factory=list)
    default: ir.MatchBranch | None = None

    def close(self) -> None:
        node = self.sink[self.index]
        self.sink[self.index] = node.model_copy(
            update={"cases": list(self.cases), "default": self.default}
        )


@dataclass(kw_only=True)
class BranchFrame(ViewFrame):
    """A ``case`` (or ``default``, when condition is None) inside a match."""

    match: MatchFrame
    condition: str | None = None

    def close(self) -> None:
        branch = ir.MatchBranch(
            condition=self.condition, children=list(self.children), line=self.line
        )
        if self.condition is None:
            self.match.default = branch
        else:
            self.match.cases.append(branch)


# =============================================================================
# Logic frames
# =============================================================================


@dataclass(kw_only=True)
class LogicFrame(Frame):
    """A frame collecting logic lines, assertions and nested blocks."""

    body: list[ir.LogicItem] = field(default_factory=list)


@dataclass(kw_only=True)
class FunctionFrame(LogicFrame):
    sink: list[ir.FunctionNode]
    index: int

    def close(self) -> None:
        fn = self.sink[self.index]
        self.sink[self.index] = fn.model_copy(update={"body": list(self.body)})


@dataclass(kw_only=True)
class LogicBlockFrame(LogicFrame):
    """An ``if``/``else`` block nested in logic."""

    sink: list[ir.LogicItem]
    index: int

    def close(self) -> None:
        block = self.sink[self.index]
        self.sink[self.index] = block.model_copy(update={"body": list(self.body)})


@dataclass(kw_only=True)
class LifecycleFrame(LogicFrame):
    """An ``on mount:`` block. ``body`` is the manifest's lifecycle list."""


@dataclass(kw_only=True)
class WatchFrame(LogicFrame):
    sink: list[ir.Watcher]
    index: int

    def close(self) -> None:
        watcher = self.sink[self.index]
        self.sink[self.index] = watcher.model_copy(update={"body": list(self.body)})


@dataclass(kw_only=True)
class PersonaFrame(LogicFrame):
    """An ``@logic``, ``@ui`` or ``@integration`` test body."""

    sink: list[ir.PersonaBlock]
    index: int

    def close(self) -> None:
        block = self.sink[self.index]
        self.sink[self.index] = block.model_copy(update={"body": list(self.body)})


# =============================================================================
# Other blocks
# =============================================================================


@dataclass(kw_only=True)
class SuiteFrame(Frame):
    """A ``test NAME:`` block grouping personas."""

    name: str | None = None


@dataclass(kw_only=True)
class StyleFrame(Frame):
    """A ``style:`` block."""


@dataclass(kw_only=True)
class StyleRuleFrame(Frame):
    sink: list[ir.StyleRule]
    index: int
    declarations: list[str] = field(default_factory=list)

    def close(self) -> None:
        rule = self.sink[self.index]
        self.sink[self.index] = rule.model_copy(update={"declarations": list(self.declarations)})


@dataclass(kw_only=True)
class HeadFrame(Frame):
    """
    A ``head:`` block.

    Lines are re-indented relative to the block and parsed with the head
    grammar on close.
    """

    sink: list[ir.HeadSpec]
    lines: list[str] = field(default_factory=list)

    def close(self) -> None:
        self.sink.append(parse_head("\n".join(self.lines)))
