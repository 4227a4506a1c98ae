"""
View handling for the Viand manifest builder.

Handles control flow (``each``, ``if``/``else``, ``match``/``case``/
``default``), markup lines and free-form text inside view frames. Markup
syntax is fully resolved here: backends receive split attributes, bound
refs and linked if/else chains.
"""

import re

from .. import ir
from ..lexer import Token, TokenCategory
from ..markup import classify_text, parse_markup, split_inline
from .frames import BranchFrame, ElseFrame, Frame, MatchFrame, NodeFrame, ViewFrame

_EACH = re.compile(r"^each\s+\$?([A-Za-z_]\w*)\s+in\s+(.+)$")
_IF = re.compile(r"^if\s+(.+)$")
_ELSE = re.compile(r"^else(?:\s+if\s+(.+)|\s*)$")
_MATCH = re.compile(r"^match\s+(.+)$")
_CASE = re.compile(r"^case\s+(.+)$")
_DEFAULT = re.compile(r"^default\s*$")
_SLOT_LINE = re.compile(r"^slot\b")


def _inline_children(inline: str | None, line: int) -> list[ir.ViewNode]:
    """A one-line body written after a header's colon, as a text child."""
    if inline is None:
        return []
    content, mode = classify_text(inline)
    return [ir.TextNode(content=content, mode=mode, line=line)]


class ViewMixin:
    """Mixin providing view-tree handling."""

    def handle_view_line(self, token: Token, frame: Frame) -> None:
        """Dispatch a line inside a view frame or a ``match`` block."""
        if token.category is TokenCategory.CONTROL_FLOW:
            self._handle_control_flow(token, frame)
        elif isinstance(frame, MatchFrame):
            self.drop(token, "expected case or default inside match")
        elif token.category is TokenCategory.ELEMENT or _SLOT_LINE.match(token.text):
            self._handle_markup(token, frame)
        elif token.depth > 0:
            content, mode = classify_text(token.text, prose=True)
            frame.children.append(ir.TextNode(content=content, mode=mode, line=token.line_number))
        else:
            self.drop(token, "text outside any block")

    # =========================================================================
    # Control flow
    # =========================================================================

    def _handle_control_flow(self, token: Token, frame: Frame) -> None:
        header, inline = split_inline(token.text)
        line = token.line_number

        if isinstance(frame, MatchFrame):
            case = _CASE.match(header)
            if case:
                self._open_branch(token, frame, case.group(1).strip(), inline)
            elif _DEFAULT.match(header):
                self._open_branch(token, frame, None, inline)
            else:
                self.drop(token, "expected case or default inside match")
            return

        each = _EACH.match(header)
        if each:
            list_expr = each.group(2).strip().removeprefix("$")
            self._open_node(
                token,
                frame,
                ir.EachNode(list_expr=list_expr, item_binding=each.group(1), line=line),
                inline,
            )
            return

        condition = _IF.match(header)
        if condition:
            node = ir.IfNode(condition=condition.group(1).strip(), line=line)
            self._open_node(token, frame, node, inline)
            return

        subject = _MATCH.match(header)
        if subject:
            frame.children.append(ir.MatchNode(subject=subject.group(1).strip(), line=line))
            self.push(
                MatchFrame(
                    depth=token.depth,
                    line=line,
                    sink=frame.children,
                    index=len(frame.children) - 1,
                )
            )
            return

        alternate = _ELSE.match(header)
        if alternate:
            self._open_else(token, frame, alternate.group(1), inline)
            return

        self.drop(token, "misplaced or malformed control flow")

    def _open_node(
        self,
        token: Token,
        frame: ViewFrame,
        node: ir.EachNode | ir.IfNode | ir.ElementNode | ir.FragmentNode,
        inline: str | None,
    ) -> None:
        """Append a node that owns children and open a frame for them."""
        children = _inline_children(inline, token.line_number)
        frame.children.append(node.model_copy(update={"children": children}))
        self.push(
            NodeFrame(
                depth=token.depth,
                line=token.line_number,
                children=list(children),
                sink=frame.children,
                index=len(frame.children) - 1,
            )
        )

    def _open_else(
        self, token: Token, frame: ViewFrame, condition: str | None, inline: str | None
    ) -> None:
        previous = frame.children[-1] if frame.children else None
        if not isinstance(previous, ir.IfNode):
            self.drop(token, "else without a preceding if")
            return
        self.push(
            ElseFrame(
                depth=token.depth,
                line=token.line_number,
                children=_inline_children(inline, token.line_number),
                sink=frame.children,
                index=len(frame.children) - 1,
                condition=condition.strip() if condition else None,
            )
        )

    def _open_branch(
        self, token: Token, frame: MatchFrame, condition: str | None, inline: str | None
    ) -> None:
        self.push(
            BranchFrame(
                depth=token.depth,
                line=token.line_number,
                children=_inline_children(inline, token.line_number),
                match=frame,
                condition=condition,
            )
        )

    # =========================================================================
    # Markup
    # =========================================================================

    def _handle_markup(self, token: Token, frame: ViewFrame) -> None:
        markup = parse_markup(token.text)
        line = token.line_number

        if markup.slot is not None:
            self.register_slot(markup.slot)
            frame.children.append(ir.SlotNode(name=markup.slot, line=line))
            return

        node: ir.ElementNode | ir.FragmentNode
        if markup.tag == "fragment" and not markup.attributes and markup.ref is None:
            node = ir.FragmentNode(line=line)
        else:
            node = ir.ElementNode(
                tag=markup.tag, attributes=markup.attributes, ref=markup.ref, line=line
            )
            if markup.ref:
                self.register_ref(markup.ref)

        if markup.opens_block:
            self._open_node(token, frame, node, None)
        else:
            children = _inline_children(markup.inline, line)
            frame.children.append(node.model_copy(update={"children": children}))
