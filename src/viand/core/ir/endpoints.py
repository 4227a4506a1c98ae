"""
Data-access types for the Viand IR.

These are populated from sibling files next to a component, not from the
component source itself:

    -- label: latestPosts
    -- route: GET /api/posts/latest
    SELECT * FROM posts ORDER BY created_at DESC LIMIT 5;

    -- label: weather
    GET https://api.example.com/weather
    headers:
        Accept: application/json
    query:
        city: $city
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class SqlQuery(BaseModel):
    """
    A labelled statement from the query sibling file.

    Attributes:
        label: Name the component calls the query by
        statement: Statement text, trimmed
        method: HTTP method of the bound route, if one was declared
        path: Route path, if one was declared
    """

    label: str
    statement: str
    method: str | None = None
    path: str | None = None

    model_config = ConfigDict(frozen=True)

    @property
    def is_read(self) -> bool:
        """Check if the statement only reads data."""
        return self.statement.lstrip().upper().startswith(("SELECT", "WITH"))


class ApiEndpoint(BaseModel):
    """A labelled HTTP call from the endpoint sibling file."""

    label: str
    method: str = "GET"
    path: str = "/"
    headers: dict[str, str] = Field(default_factory=dict)
    query: dict[str, str] = Field(default_factory=dict)
    body: str | None = None
    mock: str | None = None

    model_config = ConfigDict(frozen=True)
