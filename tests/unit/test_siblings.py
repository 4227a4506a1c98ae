"""Tests for sibling-file parsers (SQL, API, localization, head)."""

from viand.core import ir
from viand.core.manifest_builder.siblings import (
    parse_api,
    parse_head,
    parse_localization,
    parse_sql,
)


class TestSqlParsing:
    """Tests for the labelled query file."""

    SOURCE = """\
-- queries for the blog
-- label: latestPosts
-- route: get /api/posts
SELECT * FROM posts
ORDER BY id;

-- label: empty

-- LABEL: addPost
INSERT INTO posts (title) VALUES (?);
"""

    def test_queries(self):
        queries = parse_sql(self.SOURCE)

        assert [q.label for q in queries] == ["latestPosts", "addPost"]
        latest, add = queries
        assert latest.statement == "SELECT * FROM posts\nORDER BY id;"
        assert (latest.method, latest.path) == ("GET", "/api/posts")
        assert latest.is_read
        assert (add.method, add.path) == (None, None)
        assert not add.is_read

    def test_no_labels(self):
        assert parse_sql("SELECT 1;") == []


class TestApiParsing:
    """Tests for the endpoint file."""

    SOURCE = """\
-- label: weather
GET https://api.example.com/weather
headers:
    Accept: application/json
query:
    city: $city
mock:
    {"temp": 21}

-- label: createUser
post /users
body:
    {"name": $name}
-- label: ping
"""

    def test_endpoints(self):
        weather, create, ping = parse_api(self.SOURCE)

        assert weather == ir.ApiEndpoint(
            label="weather",
            method="GET",
            path="https://api.example.com/weather",
            headers={"Accept": "application/json"},
            query={"city": "$city"},
            mock='{"temp": 21}',
        )
        assert (create.method, create.path) == ("POST", "/users")
        assert create.body == '{"name": $name}'
        assert ping == ir.ApiEndpoint(label="ping")

    def test_lines_before_first_label_ignored(self):
        assert parse_api("GET /nowhere\n") == []


class TestLocalizationParsing:
    """Tests for the localization table."""

    def test_table(self):
        table = parse_localization(
            """\
# greetings
greeting:
    en: "Hello"
    fr: 'Bonjour'
farewell:
    en: Bye
"""
        )

        assert table == {
            "greeting": {"en": "Hello", "fr": "Bonjour"},
            "farewell": {"en": "Bye"},
        }

    def test_locale_before_key_ignored(self):
        assert parse_localization("    en: orphan\nkey:\n") == {"key": {}}


class TestHeadParsing:
    """Tests for head metadata."""

    def test_fields_sections_links(self):
        head = parse_head(
            """\
title: "Dashboard"
meta:
    description: "Live numbers"
twitter:
    card: summary
link:
    icon: /favicon.ico
    stylesheet: "/app.css"
"""
        )

        assert head.fields == {"title": "Dashboard"}
        assert head.sections == {
            "meta": {"description": "Live numbers"},
            "twitter": {"card": "summary"},
        }
        assert head.links == [
            ir.HeadLink(rel="icon", href="/favicon.ico"),
            ir.HeadLink(rel="stylesheet", href="/app.css"),
        ]

    def test_field_closes_section(self):
        head = parse_head("meta:\n    a: 1\nlang: en\n    b: 2\n")

        assert head.sections == {"meta": {"a": "1"}}
        assert head.fields == {"lang": "en"}
