"""
View tree types for the Viand IR.

The ``view:`` block of a component compiles to an ordered forest of view
nodes. Nesting, attribute splitting and control-flow chaining are fully
resolved here so that backends never re-parse markup syntax.

Example source and the resulting forest::

    view:
        each $row in $rows:
            li.row: $row.title
        if $loading:
            p: "Loading"
        else:
            Table(data: $rows)

    EachNode(list_expr="rows", item_binding="row", children=[
        ElementNode(tag="li", attributes={"class": "row"}, children=[
            TextNode(content="$row.title", mode=EXPRESSION)])])
    IfNode(condition="$loading", children=[...],
           alternate=IfNode(condition=None, children=[ElementNode(tag="Table", ...)]))

Variable references keep their ``$`` sigil. Rewriting them is a backend
concern.
"""

from __future__ import annotations

from collections.abc import Iterator
from enum import Enum
from typing import Annotated, Literal

from pydantic import BaseModel, ConfigDict, Field

# Prefix marking an attribute value as an event-handler reference.
HANDLER_SENTINEL = "__VIAND_CALL__"


def handler_call(value: str) -> str | None:
    """
    Return the call expression of a handler reference, or None.

    ``name()`` calls with no arguments; a bare ``name`` receives the event
    arguments unchanged.
    """
    if value.startswith(HANDLER_SENTINEL):
        return value[len(HANDLER_SENTINEL) :]
    return None


class TextMode(str, Enum):
    """How a text node's content should be treated by a backend."""

    LITERAL = "literal"  # Plain text, quotes already removed
    INTERPOLATED = "interpolated"  # Text containing $name references
    EXPRESSION = "expression"  # Unquoted expression, evaluated as-is


class TextNode(BaseModel):
    """A run of text inside markup."""

    kind: Literal["text"] = "text"
    content: str
    mode: TextMode = TextMode.LITERAL
    line: int = 0

    model_config = ConfigDict(frozen=True)


class ElementNode(BaseModel):
    """
    A markup element or component reference.

    Attributes:
        tag: Element tag; capitalised tags are component references
        attributes: Attribute name to raw value text, in source order.
            Event handlers are stored as ``on<event>`` keys whose values
            start with ``HANDLER_SENTINEL``; ``bind:x``, ``class:x`` and
            ``style:x`` keys keep their prefix.
        ref: Name bound with ``#ref`` syntax
        children: Nested view nodes
    """

    kind: Literal["element"] = "element"
    tag: str
    attributes: dict[str, str] = Field(default_factory=dict)
    ref: str | None = None
    children: list[ViewNode] = Field(default_factory=list)
    line: int = 0

    model_config = ConfigDict(frozen=True)

    @property
    def is_component(self) -> bool:
        """Check if the tag references another component."""
        return self.tag[:1].isupper()

    @property
    def handlers(self) -> dict[str, str]:
        """Map of attribute key to handler call expression."""
        return {
            key: call
            for key, value in self.attributes.items()
            if (call := handler_call(value)) is not None
        }


class FragmentNode(BaseModel):
    """A group of sibling nodes rendered without a wrapping element."""

    kind: Literal["fragment"] = "fragment"
    children: list[ViewNode] = Field(default_factory=list)
    line: int = 0

    model_config = ConfigDict(frozen=True)


class EachNode(BaseModel):
    """
    A list iteration: ``each $item in $list:``.

    Attributes:
        list_expr: Iterated expression with the leading sigil removed
        item_binding: Loop variable name
    """

    kind: Literal["each"] = "each"
    list_expr: str
    item_binding: str
    children: list[ViewNode] = Field(default_factory=list)
    line: int = 0

    model_config = ConfigDict(frozen=True)


class IfNode(BaseModel):
    """
    A conditional branch.

    ``else if`` and ``else`` lines extend a singly linked ``alternate``
    chain on the first ``if``. An ``else`` branch has no condition.
    """

    kind: Literal["if"] = "if"
    condition: str | None
    children: list[ViewNode] = Field(default_factory=list)
    alternate: IfNode | None = None
    line: int = 0

    model_config = ConfigDict(frozen=True)

    @property
    def is_else(self) -> bool:
        """Check if this branch is an unconditional ``else``."""
        return self.condition is None

    def branches(self) -> Iterator[IfNode]:
        """Iterate this branch and every alternate, in order."""
        branch: IfNode | None = self
        while branch is not None:
            yield branch
            branch = branch.alternate

    def with_alternate(self, alternate: IfNode) -> IfNode:
        """Return a copy with ``alternate`` attached at the end of the chain."""
        if self.alternate is None:
            return self.model_copy(update={"alternate": alternate})
        return self.model_copy(update={"alternate": self.alternate.with_alternate(alternate)})


class MatchBranch(BaseModel):
    """One ``case`` of a match, or its ``default`` when condition is None."""

    condition: str | None = None
    children: list[ViewNode] = Field(default_factory=list)
    line: int = 0

    model_config = ConfigDict(frozen=True)


class MatchNode(BaseModel):
    """A ``match`` over a subject expression."""

    kind: Literal["match"] = "match"
    subject: str
    cases: list[MatchBranch] = Field(default_factory=list)
    default: MatchBranch | None = None
    line: int = 0

    model_config = ConfigDict(frozen=True)


class SlotNode(BaseModel):
    """A named insertion point for content passed in by a parent."""

    kind: Literal["slot"] = "slot"
    name: str = "children"
    line: int = 0

    model_config = ConfigDict(frozen=True)


ViewNode = Annotated[
    TextNode | ElementNode | FragmentNode | EachNode | IfNode | MatchNode | SlotNode,
    Field(discriminator="kind"),
]


def child_lists(node: ViewNode) -> Iterator[list[ViewNode]]:
    """Yield every child list held by a node, including branch bodies."""
    if isinstance(node, (ElementNode, FragmentNode, EachNode)):
        yield node.children
    elif isinstance(node, IfNode):
        for branch in node.branches():
            yield branch.children
    elif isinstance(node, MatchNode):
        for case in node.cases:
            yield case.children
        if node.default is not None:
            yield node.default.children


def walk(nodes: list[ViewNode]) -> Iterator[ViewNode]:
    """Depth-first pre-order traversal of a view forest."""
    for node in nodes:
        yield node
        for children in child_lists(node):
            yield from walk(children)


ElementNode.model_rebuild()
FragmentNode.model_rebuild()
EachNode.model_rebuild()
IfNode.model_rebuild()
MatchBranch.model_rebuild()
MatchNode.model_rebuild()
