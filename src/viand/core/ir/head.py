"""
Document metadata types for the Viand IR.

Filled from a ``head:`` block in the component and from the head sibling
file. Both use the same shape::

    title: "Dashboard"
    meta:
        description: "Live numbers"
    og:
        image: /cover.png
    link:
        stylesheet: /app.css
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class HeadLink(BaseModel):
    """A ``<link>`` entry."""

    rel: str
    href: str

    model_config = ConfigDict(frozen=True)


class HeadSpec(BaseModel):
    """
    Document metadata.

    Attributes:
        fields: Top-level ``key: value`` pairs (``title`` and friends)
        sections: Named groups such as ``meta``, ``og`` and ``twitter``
        links: Entries from the ``link`` section, in order
    """

    fields: dict[str, str] = Field(default_factory=dict)
    sections: dict[str, dict[str, str]] = Field(default_factory=dict)
    links: list[HeadLink] = Field(default_factory=list)

    model_config = ConfigDict(frozen=True)

    @property
    def title(self) -> str | None:
        return self.fields.get("title")

    @property
    def is_empty(self) -> bool:
        return not (self.fields or self.sections or self.links)

    def merged_with(self, other: HeadSpec) -> HeadSpec:
        """Return a copy where entries from ``other`` win on conflicts."""
        sections = {name: dict(values) for name, values in self.sections.items()}
        for name, values in other.sections.items():
            sections.setdefault(name, {}).update(values)
        return HeadSpec(
            fields={**self.fields, **other.fields},
            sections=sections,
            links=[*self.links, *other.links],
        )
