"""
Viand Intermediate Representation (IR) types.

The component manifest and every type reachable from it, re-exported from
one place so that backends can write ``from viand.core import ir``.
"""

# Data access (sibling files)
from .endpoints import (
    ApiEndpoint,
    SqlQuery,
)

# Document metadata
from .head import (
    HeadLink,
    HeadSpec,
)

# Logic bodies
from .logic import (
    Assertion,
    FunctionNode,
    LogicBlock,
    LogicItem,
    LogicLine,
    Persona,
    PersonaBlock,
    Watcher,
)

# Manifest
from .manifest import (
    ComponentManifest,
    Declaration,
    Derived,
    Import,
    StyleRule,
)

# View tree
from .view import (
    HANDLER_SENTINEL,
    EachNode,
    ElementNode,
    FragmentNode,
    IfNode,
    MatchBranch,
    MatchNode,
    SlotNode,
    TextMode,
    TextNode,
    ViewNode,
    child_lists,
    handler_call,
    walk,
)

__all__ = [
    # Data access
    "ApiEndpoint",
    "SqlQuery",
    # Head
    "HeadLink",
    "HeadSpec",
    # Logic
    "Assertion",
    "FunctionNode",
    "LogicBlock",
    "LogicItem",
    "LogicLine",
    "Persona",
    "PersonaBlock",
    "Watcher",
    # Manifest
    "ComponentManifest",
    "Declaration",
    "Derived",
    "Import",
    "StyleRule",
    # View
    "HANDLER_SENTINEL",
    "EachNode",
    "ElementNode",
    "FragmentNode",
    "IfNode",
    "MatchBranch",
    "MatchNode",
    "SlotNode",
    "TextMode",
    "TextNode",
    "ViewNode",
    "child_lists",
    "handler_call",
    "walk",
]
