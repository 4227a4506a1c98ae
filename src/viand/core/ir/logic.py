"""
Logic types for the Viand IR.

Function bodies, lifecycle hooks, watchers and test personas all share one
body shape: a list of opaque logic lines, ``must`` assertions and nested
``if`` blocks. Lines are carried verbatim, sigils included.
"""

from __future__ import annotations

import re
from enum import Enum
from typing import Annotated, Literal

from pydantic import BaseModel, ConfigDict, Field

_BLOCK_HEADER = re.compile(r"^(else\s+if|if|else)\b(.*)$", re.DOTALL)


class LogicLine(BaseModel):
    """One verbatim line of logic."""

    kind: Literal["line"] = "line"
    text: str
    line: int = 0

    model_config = ConfigDict(frozen=True)


class Assertion(BaseModel):
    """A test ``must`` statement with the keyword removed."""

    kind: Literal["assertion"] = "assertion"
    expression: str
    line: int = 0

    model_config = ConfigDict(frozen=True)


class LogicBlock(BaseModel):
    """
    A nested block headed by an ``if``, ``else if`` or ``else`` line.

    Attributes:
        header: The heading line, verbatim (``if $count > 3:``)
        body: Lines nested under the header
    """

    kind: Literal["block"] = "block"
    header: str
    body: list[LogicItem] = Field(default_factory=list)
    line: int = 0

    model_config = ConfigDict(frozen=True)

    @property
    def keyword(self) -> str:
        """``if``, ``else if`` or ``else``."""
        match = _BLOCK_HEADER.match(self.header.strip())
        return " ".join(match.group(1).split()) if match else ""

    @property
    def condition(self) -> str | None:
        """The header without its keyword and trailing colon; None for ``else``."""
        match = _BLOCK_HEADER.match(self.header.strip())
        if match is None:
            return None
        rest = match.group(2).strip().removesuffix(":").strip()
        return rest or None


LogicItem = Annotated[LogicLine | Assertion | LogicBlock, Field(discriminator="kind")]


class FunctionNode(BaseModel):
    """A ``fn name(params):`` declaration."""

    name: str
    params: list[str] = Field(default_factory=list)
    body: list[LogicItem] = Field(default_factory=list)
    line: int = 0

    model_config = ConfigDict(frozen=True)


class Watcher(BaseModel):
    """An ``on change DEP:`` effect."""

    dependency_expr: str
    body: list[LogicItem] = Field(default_factory=list)
    line: int = 0

    model_config = ConfigDict(frozen=True)


class Persona(str, Enum):
    """Test grouping declared with ``@logic``, ``@ui`` or ``@integration``."""

    LOGIC = "logic"
    UI = "ui"
    INTEGRATION = "integration"


class PersonaBlock(BaseModel):
    """
    The body of one test persona.

    Attributes:
        persona: Which harness the body targets
        suite: Name given on the enclosing ``test NAME:`` line, if any
    """

    persona: Persona
    suite: str | None = None
    body: list[LogicItem] = Field(default_factory=list)
    line: int = 0

    model_config = ConfigDict(frozen=True)

    @property
    def assertions(self) -> list[Assertion]:
        """All assertions in the body, nested blocks included."""
        return list(_assertions(self.body))


def _assertions(body: list[LogicItem]):
    for item in body:
        if isinstance(item, Assertion):
            yield item
        elif isinstance(item, LogicBlock):
            yield from _assertions(item.body)


LogicBlock.model_rebuild()
FunctionNode.model_rebuild()
Watcher.model_rebuild()
PersonaBlock.model_rebuild()
