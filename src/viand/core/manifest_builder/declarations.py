"""
Declaration handling for the Viand manifest builder.

Handles component/memory headers, imports, props, state and derived values.
Every declaration is one line; a line that does not fit its pattern is
dropped without a report so that half-typed code never breaks the build.
"""

import logging
import re

from .. import ir
from ..lexer import Token, TokenCategory

logger = logging.getLogger(__name__)

_COMPONENT = re.compile(r"^component\s+([A-Za-z_]\w*)")
_MEMORY = re.compile(r"^memory\s+([A-Za-z_]\w*)")
_IMPORT_FROM = re.compile(r"""^use\s+(.+?)\s+from\s+["'](.*?)["']""")
_IMPORT = re.compile(r"^use\s+([A-Za-z_]\w*)\s*$")
_PROP = re.compile(
    r'^@prop\s+"?(?P<id>[A-Za-z_]\w*)"?\s*'
    r"(?::\s*(?P<type>[^=]+?))?\s*"
    r"(?:=\s*(?P<value>.*?))?\s*$"
)
_STATE = re.compile(
    r"^\$(?P<id>[A-Za-z_]\w*)\s*"
    r"(?::\s*(?P<type>[^=]+?))?\s*"
    r"(?:=\s*(?P<value>.*?))?\s*$"
)
_DERIVED = re.compile(r"^sync\s+\$([A-Za-z_]\w*)\s*=\s*(.+?)\s*$")

DECLARATION_CATEGORIES = frozenset(
    {
        TokenCategory.COMPONENT_DECLARATION,
        TokenCategory.MEMORY_DECLARATION,
        TokenCategory.IMPORT_DECLARATION,
        TokenCategory.PROP_DECLARATION,
        TokenCategory.STATE_DECLARATION,
        TokenCategory.DERIVED_DECLARATION,
    }
)


def _declaration(match: re.Match[str], line: int) -> ir.Declaration:
    declared_type = (match.group("type") or "").strip() or "any"
    value = match.group("value")
    return ir.Declaration(
        id=match.group("id"),
        declared_type=declared_type,
        default_value=value if value else None,
        line=line,
    )


class DeclarationMixin:
    """Mixin providing one-line declaration handling."""

    def handle_declaration(self, token: Token) -> None:
        """Record a declaration line, or drop it if it is malformed."""
        category = token.category
        text = token.text

        if category is TokenCategory.COMPONENT_DECLARATION:
            match = _COMPONENT.match(text)
            if match:
                self.name = match.group(1)
                return

        elif category is TokenCategory.MEMORY_DECLARATION:
            match = _MEMORY.match(text)
            if match:
                self.name = match.group(1)
                self.is_singleton = True
                return

        elif category is TokenCategory.IMPORT_DECLARATION:
            imported = self._parse_import(text)
            if imported:
                self.imports.append(imported)
                return

        elif category is TokenCategory.PROP_DECLARATION:
            match = _PROP.match(text)
            if match:
                self.props.append(_declaration(match, token.line_number))
                return

        elif category is TokenCategory.STATE_DECLARATION:
            match = _STATE.match(text)
            if match:
                self.state.append(_declaration(match, token.line_number))
                return

        elif category is TokenCategory.DERIVED_DECLARATION:
            match = _DERIVED.match(text)
            if match:
                self.derived.append(
                    ir.Derived(id=match.group(1), expr=match.group(2), line=token.line_number)
                )
                return

        self.drop(token, f"malformed {category.value}")

    def _parse_import(self, text: str) -> ir.Import | None:
        """
        Parse a ``use`` line.

        ``use router`` imports a standard module as ``viand:router``;
        ``use { Card } from "./card.viand"`` imports a binding from a path.
        """
        match = _IMPORT_FROM.match(text)
        if match:
            name = match.group(1).strip().removeprefix("{").removesuffix("}").strip()
            return ir.Import(name=name, path=match.group(2))
        match = _IMPORT.match(text)
        if match:
            return ir.Import(name=match.group(1), path=f"viand:{match.group(1)}")
        return None
