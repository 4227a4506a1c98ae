"""
Head block handling for the Viand manifest builder.

A ``head:`` block is written in the head-metadata grammar shared with the
head sibling file. Its lines are collected with their nesting re-expressed
relative to the block and parsed when the block closes.
"""

from ..lexer import Token
from .frames import HeadFrame

_INDENT = "    "


class HeadMixin:
    """Mixin providing ``head:`` block handling."""

    def handle_head_line(self, token: Token, frame: HeadFrame) -> None:
        level = max(0, token.depth - frame.depth - 1)
        frame.lines.append(_INDENT * level + token.text)
