"""
Indentation-to-hierarchy transform.

Turns raw indentation widths into a small nesting depth using an indent
stack, Python-style. Unlike a Python tokenizer, a dedent that lands between
two previously pushed widths is not an error: the stack is popped until its
top is no wider than the line, and the depth is whatever remains. Authors
may therefore mix indentation sizes as long as relative nesting is
monotonic.
"""

import logging
from collections.abc import Iterable
from dataclasses import replace

from .lexer import DEFAULT_INDENT_UNIT, Token

logger = logging.getLogger(__name__)


def assign_depths(tokens: Iterable[Token]) -> list[Token]:
    """
    Assign a nesting depth to every token.

    Args:
        tokens: Tokens in source order

    Returns:
        New tokens carrying ``depth = len(stack) - 1``
    """
    stack = [0]
    result: list[Token] = []

    for token in tokens:
        width = token.raw_indent_width
        if width > stack[-1]:
            stack.append(width)
        elif width < stack[-1]:
            while stack[-1] > width:
                stack.pop()
            if stack[-1] != width:
                logger.debug(
                    "Line %s: dedent to width %s matches no open block (nearest %s)",
                    token.line_number,
                    width,
                    stack[-1],
                )
        result.append(replace(token, depth=len(stack) - 1))

    return result


def canonical_indent(tokens: Iterable[Token], unit: int = DEFAULT_INDENT_UNIT) -> list[Token]:
    """
    Re-derive raw indentation from depth as ``depth * unit``.

    Running ``assign_depths`` on the result reproduces the same depths.
    """
    return [replace(token, raw_indent_width=token.depth * unit) for token in tokens]
