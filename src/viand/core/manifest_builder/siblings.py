"""
Parsers for the sibling files of a component.

A component may ship up to four small companion texts next to its source:

- a query file of labelled SQL statements
- an endpoint file of labelled HTTP calls
- a localization table
- a head-metadata file

Each grammar is line-oriented and parsed independently of the component's
indentation rules. Like the main parser they never raise: lines they do not
understand are skipped.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

from .. import ir
from ..markup import unquote

_LABEL = re.compile(r"--\s*label:\s*(\w+)", re.IGNORECASE)
_ROUTE = re.compile(r"^\s*--\s*route:\s*([A-Za-z]+)\s+(\S+)", re.IGNORECASE)
_HTTP_LINE = re.compile(r"^(GET|POST|PUT|DELETE|PATCH|HEAD|OPTIONS)\s+(.+)$", re.IGNORECASE)
_API_SECTIONS = ("headers", "query", "body", "mock")


@dataclass(frozen=True)
class SiblingSources:
    """
    Texts of the optional sibling files. Empty strings mean "absent".
    """

    sql: str = ""
    api: str = ""
    localization: str = ""
    head: str = ""


def _indent_of(line: str) -> int:
    return len(line) - len(line.lstrip())


def _split_pair(text: str) -> tuple[str, str] | None:
    """Split ``key: value`` at the first colon; None without a colon."""
    key, sep, value = text.partition(":")
    if not sep:
        return None
    return key.strip(), value.strip()


# =============================================================================
# SQL
# =============================================================================


def parse_sql(text: str) -> list[ir.SqlQuery]:
    """
    Parse a query file.

    Format::

        -- label: latestPosts
        -- route: GET /api/posts/latest
        SELECT * FROM posts
        ORDER BY created_at DESC;

    Lines before the first label are ignored. A label whose statement is
    empty produces no query.
    """
    queries: list[ir.SqlQuery] = []
    label: str | None = None
    route: tuple[str, str] | None = None
    lines: list[str] = []

    def flush() -> None:
        statement = "\n".join(lines).strip()
        if label and statement:
            method, path = route if route else (None, None)
            queries.append(ir.SqlQuery(label=label, statement=statement, method=method, path=path))

    for line in text.split("\n"):
        line = line.rstrip("\r")
        label_match = _LABEL.search(line)
        if label_match:
            flush()
            label = label_match.group(1)
            route = None
            lines = []
            continue
        if label is None:
            continue
        route_match = _ROUTE.match(line)
        if route_match:
            route = (route_match.group(1).upper(), route_match.group(2))
            continue
        lines.append(line)

    flush()
    return queries


# =============================================================================
# HTTP endpoints
# =============================================================================


@dataclass
class _EndpointDraft:
    label: str
    method: str = "GET"
    path: str = "/"
    section: str | None = None

    def __post_init__(self) -> None:
        self.headers: dict[str, str] = {}
        self.query: dict[str, str] = {}
        self.body: list[str] = []
        self.mock: list[str] = []

    def build(self) -> ir.ApiEndpoint:
        return ir.ApiEndpoint(
            label=self.label,
            method=self.method,
            path=self.path,
            headers=self.headers,
            query=self.query,
            body="\n".join(self.body) or None,
            mock="\n".join(self.mock) or None,
        )


def parse_api(text: str) -> list[ir.ApiEndpoint]:
    """
    Parse an endpoint file.

    Format::

        -- label: weather
        GET https://api.example.com/weather
        headers:
            Accept: application/json
        query:
            city: $city
        mock:
            {"temp": 21}

    An endpoint defaults to ``GET /`` until a method line is seen.
    """
    endpoints: list[ir.ApiEndpoint] = []
    current: _EndpointDraft | None = None

    for line in text.split("\n"):
        line = line.rstrip("\r")
        trimmed = line.strip()
        if not trimmed:
            continue

        label_match = _LABEL.search(line)
        if label_match:
            if current:
                endpoints.append(current.build())
            current = _EndpointDraft(label=label_match.group(1))
            continue
        if current is None:
            continue

        section = trimmed.removesuffix(":").strip()
        if trimmed.endswith(":") and section in _API_SECTIONS:
            current.section = section
            continue

        if _indent_of(line) > 0:
            if current.section == "mock":
                current.mock.append(trimmed)
            elif current.section == "body":
                current.body.append(trimmed)
            elif current.section in ("headers", "query"):
                pair = _split_pair(trimmed)
                if pair:
                    target = current.headers if current.section == "headers" else current.query
                    target[pair[0]] = pair[1]
            continue

        http_match = _HTTP_LINE.match(trimmed)
        if http_match:
            current.method = http_match.group(1).upper()
            current.path = http_match.group(2).strip()
            current.section = None

    if current:
        endpoints.append(current.build())
    return endpoints


# =============================================================================
# Localization
# =============================================================================


def parse_localization(text: str) -> dict[str, dict[str, str]]:
    """
    Parse a localization table.

    Format::

        greeting:
            en: "Hello"
            fr: "Bonjour"

    Unindented lines name a key; indented ``locale: text`` lines give its
    translations. Lines starting with ``#`` are comments.
    """
    table: dict[str, dict[str, str]] = {}
    current_key: str | None = None

    for line in text.split("\n"):
        line = line.rstrip("\r")
        trimmed = line.strip()
        if not trimmed or trimmed.startswith("#"):
            continue
        key, _, value = trimmed.partition(":")
        key = key.strip()
        if _indent_of(line) == 0:
            current_key = key
            table[current_key] = {}
        elif current_key is not None:
            table[current_key][key] = unquote(value)

    return table


# =============================================================================
# Head metadata
# =============================================================================


def parse_head(text: str) -> ir.HeadSpec:
    """
    Parse head metadata.

    Format::

        title: "Dashboard"
        meta:
            description: "Live numbers"
        link:
            stylesheet: /app.css

    Unindented ``key: value`` lines are fields; an unindented ``name:`` opens
    a section whose indented pairs belong to it. Pairs in the ``link``
    section are ``rel: href``.
    """
    fields: dict[str, str] = {}
    sections: dict[str, dict[str, str]] = {}
    links: list[ir.HeadLink] = []
    section: str | None = None

    for line in text.split("\n"):
        line = line.rstrip("\r")
        trimmed = line.strip()
        if not trimmed or trimmed.startswith("#"):
            continue
        pair = _split_pair(trimmed)
        if pair is None:
            continue
        key, value = pair

        if _indent_of(line) == 0:
            if value:
                fields[key] = unquote(value)
                section = None
            else:
                section = key
            continue

        if section is None:
            continue
        if section == "link":
            links.append(ir.HeadLink(rel=key, href=unquote(value)))
        else:
            sections.setdefault(section, {})[key] = unquote(value)

    return ir.HeadSpec(fields=fields, sections=sections, links=links)
