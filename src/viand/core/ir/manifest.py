"""
The component manifest: the single IR value handed to every backend.

One manifest is produced per compiled unit from a component source plus
its optional sibling texts. It is frozen once built; backends read it and
never mutate it.
"""

from __future__ import annotations

from collections.abc import Iterator

from pydantic import BaseModel, ConfigDict, Field

from .endpoints import ApiEndpoint, SqlQuery
from .head import HeadSpec
from .logic import FunctionNode, LogicItem, PersonaBlock, Watcher
from .view import ViewNode, walk


class Import(BaseModel):
    """A ``use`` declaration."""

    name: str
    path: str

    model_config = ConfigDict(frozen=True)

    @property
    def is_stdlib(self) -> bool:
        """Check if the import names a built-in ``viand:`` module."""
        return self.path.startswith("viand:")


class Declaration(BaseModel):
    """
    A prop or state declaration.

    Attributes:
        id: Name without the sigil or ``@prop`` keyword
        declared_type: Type annotation text, ``any`` when absent
        default_value: Default value expression text, None when absent
        line: Source line
    """

    id: str
    declared_type: str = "any"
    default_value: str | None = None
    line: int = 0

    model_config = ConfigDict(frozen=True)


class Derived(BaseModel):
    """A ``sync $name = expr`` reactive value."""

    id: str
    expr: str
    line: int = 0

    model_config = ConfigDict(frozen=True)


class StyleRule(BaseModel):
    """
    A style rule: a selector and its raw declaration lines.

    Declarations are not split into property and value.
    """

    selector: str
    declarations: list[str] = Field(default_factory=list)
    line: int = 0

    model_config = ConfigDict(frozen=True)


class ComponentManifest(BaseModel):
    """
    Complete IR for one component or singleton memory module.

    List fields preserve declaration order. ``element_refs`` and ``slots``
    hold each name once, in first-seen order.
    """

    name: str = "Component"
    is_singleton: bool = False
    imports: list[Import] = Field(default_factory=list)
    props: list[Declaration] = Field(default_factory=list)
    state: list[Declaration] = Field(default_factory=list)
    derived: list[Derived] = Field(default_factory=list)
    functions: list[FunctionNode] = Field(default_factory=list)
    lifecycle_body: list[LogicItem] = Field(default_factory=list)
    watchers: list[Watcher] = Field(default_factory=list)
    element_refs: list[str] = Field(default_factory=list)
    slots: list[str] = Field(default_factory=list)
    style_rules: list[StyleRule] = Field(default_factory=list)
    view: list[ViewNode] = Field(default_factory=list)
    tests: list[PersonaBlock] = Field(default_factory=list)
    sql_queries: list[SqlQuery] = Field(default_factory=list)
    api_endpoints: list[ApiEndpoint] = Field(default_factory=list)
    localization: dict[str, dict[str, str]] = Field(default_factory=dict)
    head: HeadSpec = Field(default_factory=HeadSpec)

    model_config = ConfigDict(frozen=True)

    def get_state(self, state_id: str) -> Declaration | None:
        """Get the last state declaration with this id."""
        for decl in reversed(self.state):
            if decl.id == state_id:
                return decl
        return None

    def get_prop(self, prop_id: str) -> Declaration | None:
        """Get the last prop declaration with this id."""
        for decl in reversed(self.props):
            if decl.id == prop_id:
                return decl
        return None

    def get_function(self, name: str) -> FunctionNode | None:
        for fn in self.functions:
            if fn.name == name:
                return fn
        return None

    def iter_view(self) -> Iterator[ViewNode]:
        """Depth-first traversal of every view node."""
        return walk(self.view)

    @property
    def locales(self) -> list[str]:
        """Every locale used in the localization table, sorted."""
        return sorted({locale for entries in self.localization.values() for locale in entries})


ComponentManifest.model_rebuild()
