"""
Logic block handling for the Viand manifest builder.

Handles the block openers (functions, ``on mount``, ``on change``, ``test``
and test personas) and the lines nested inside logic bodies. Logic is not
parsed as an expression language: lines are kept verbatim, only ``if`` and
``else`` headers nest and ``must`` lines become assertions.
"""

import re

from .. import ir
from ..lexer import Token, TokenCategory
from ..markup import find_split_colon, split_top_level, unquote
from .frames import (
    FunctionFrame,
    HeadFrame,
    LifecycleFrame,
    LogicBlockFrame,
    LogicFrame,
    PersonaFrame,
    StyleFrame,
    SuiteFrame,
    ViewRootFrame,
    WatchFrame,
)

_FUNCTION = re.compile(r"^fn\s+([A-Za-z_]\w*)\s*\((.*)\)")
_WATCH = re.compile(r"^on\s+change\s+")
_TEST = re.compile(r"^test\b\s*(.*?)\s*:?\s*$")
_PERSONA = re.compile(r"^@(logic|ui|integration)\b")
_LOGIC_BLOCK = re.compile(r"^(?:if\s|else\b)")

BLOCK_OPENERS = frozenset(
    {
        TokenCategory.FUNCTION_DECLARATION,
        TokenCategory.LIFECYCLE_BLOCK,
        TokenCategory.WATCH_BLOCK,
        TokenCategory.STYLE_ROOT,
        TokenCategory.HEAD_ROOT,
        TokenCategory.TEST_ROOT,
        TokenCategory.TEST_PERSONA,
        TokenCategory.VIEW_ROOT,
    }
)


def _inline_body(text: str, line: int) -> list[ir.LogicItem]:
    """Logic written after a block header's colon, as a one-line body."""
    idx = find_split_colon(text)
    if idx == -1:
        return []
    rest = text[idx + 1 :].strip()
    return [ir.LogicLine(text=rest, line=line)] if rest else []


class LogicMixin:
    """Mixin providing block-opener and logic-body handling."""

    def open_block(self, token: Token) -> None:
        """Push the frame for a block-opening line."""
        category = token.category
        depth = token.depth
        line = token.line_number

        if category is TokenCategory.VIEW_ROOT:
            self.push(ViewRootFrame(depth=depth, line=line, children=self.view))

        elif category is TokenCategory.STYLE_ROOT:
            self.push(StyleFrame(depth=depth, line=line))

        elif category is TokenCategory.HEAD_ROOT:
            self.push(HeadFrame(depth=depth, line=line, sink=self.heads))

        elif category is TokenCategory.FUNCTION_DECLARATION:
            self._open_function(token)

        elif category is TokenCategory.LIFECYCLE_BLOCK:
            self.lifecycle_body.extend(_inline_body(token.text, line))
            self.push(LifecycleFrame(depth=depth, line=line, body=self.lifecycle_body))

        elif category is TokenCategory.WATCH_BLOCK:
            self._open_watcher(token)

        elif category is TokenCategory.TEST_ROOT:
            match = _TEST.match(token.text)
            name = unquote(match.group(1)) if match else ""
            self.push(SuiteFrame(depth=depth, line=line, name=name or None))

        elif category is TokenCategory.TEST_PERSONA:
            self._open_persona(token)

    def _open_function(self, token: Token) -> None:
        match = _FUNCTION.match(token.text)
        if not match:
            self.drop(token, "malformed function header")
            return
        params = [p.strip() for p in split_top_level(match.group(2), ",") if p.strip()]
        self.functions.append(
            ir.FunctionNode(name=match.group(1), params=params, line=token.line_number)
        )
        self.push(
            FunctionFrame(
                depth=token.depth,
                line=token.line_number,
                sink=self.functions,
                index=len(self.functions) - 1,
            )
        )

    def _open_watcher(self, token: Token) -> None:
        text = token.text
        header = _WATCH.match(text)
        colon = find_split_colon(text)
        end = colon if colon != -1 else len(text)
        dependency = text[header.end() : end].strip() if header else ""
        if not dependency:
            self.drop(token, "watcher without dependency")
            return
        self.watchers.append(
            ir.Watcher(
                dependency_expr=dependency,
                body=_inline_body(text, token.line_number),
                line=token.line_number,
            )
        )
        self.push(
            WatchFrame(
                depth=token.depth,
                line=token.line_number,
                body=list(self.watchers[-1].body),
                sink=self.watchers,
                index=len(self.watchers) - 1,
            )
        )

    def _open_persona(self, token: Token) -> None:
        match = _PERSONA.match(token.text)
        if not match:
            self.drop(token, "unknown test persona")
            return
        suite = self.nearest(SuiteFrame)
        self.tests.append(
            ir.PersonaBlock(
                persona=ir.Persona(match.group(1)),
                suite=suite.name if suite else None,
                line=token.line_number,
            )
        )
        self.push(
            PersonaFrame(
                depth=token.depth,
                line=token.line_number,
                sink=self.tests,
                index=len(self.tests) - 1,
            )
        )

    def handle_logic_line(self, token: Token, frame: LogicFrame) -> None:
        """
        Append one line to a logic body.

        State-looking lines are kept verbatim here rather than declared:
        ``$count += 1`` inside a function is a statement, not a new state.
        """
        text = token.text
        line = token.line_number

        if token.category is TokenCategory.CONTROL_FLOW and _LOGIC_BLOCK.match(text):
            frame.body.append(ir.LogicBlock(header=text, line=line))
            self.push(
                LogicBlockFrame(
                    depth=token.depth,
                    line=line,
                    sink=frame.body,
                    index=len(frame.body) - 1,
                )
            )
        elif token.category is TokenCategory.ASSERTION:
            expression = text.removeprefix("must").strip()
            frame.body.append(ir.Assertion(expression=expression, line=line))
        else:
            frame.body.append(ir.LogicLine(text=text, line=line))
