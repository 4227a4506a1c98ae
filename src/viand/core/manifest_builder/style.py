"""
Style block handling for the Viand manifest builder.

Inside ``style:`` a line ending in ``:`` opens a rule for the selector before
the colon; any other line is a raw declaration of the innermost rule.
Declarations are not split into property and value.
"""

from .. import ir
from ..lexer import Token
from .frames import StyleFrame, StyleRuleFrame


class StyleMixin:
    """Mixin providing style rule handling."""

    def handle_style_line(self, token: Token, frame: StyleFrame | StyleRuleFrame) -> None:
        text = token.text
        if text.endswith(":"):
            selector = text[:-1].strip()
            self.style_rules.append(ir.StyleRule(selector=selector, line=token.line_number))
            self.push(
                StyleRuleFrame(
                    depth=token.depth,
                    line=token.line_number,
                    sink=self.style_rules,
                    index=len(self.style_rules) - 1,
                )
            )
        elif isinstance(frame, StyleRuleFrame):
            frame.declarations.append(text)
        else:
            self.drop(token, "declaration outside a style rule")
