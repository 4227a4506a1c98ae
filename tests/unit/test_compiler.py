"""Tests for the compile pipeline, validation, configuration and errors."""

from importlib.metadata import PackageNotFoundError
from pathlib import Path

import pytest

from viand import CompileError, ConfigError, __version__, compile_component
from viand import _version
from viand.core import ir
from viand.core.config import CompilerConfig, find_config, load_config
from viand.core.errors import (
    ErrorContext,
    diagnostic_line,
    format_diagnostic,
    make_compile_error,
)
from viand.core.manifest_builder import SiblingSources
from viand.core.validator import validate_manifest

DUPLICATE_SOURCE = """\
component A:
    $a = 1
    $a = 2
    @prop p
    @prop p
"""


class TestCompileComponent:
    """Tests for compile_component()."""

    def test_clean_compile(self, counter_source):
        result = compile_component(counter_source)

        assert result.ok
        assert result.manifest.name == "Counter"
        assert result.file == "<memory>"

    def test_siblings_passed_through(self, counter_source):
        siblings = SiblingSources(sql="-- label: all\nSELECT 1;\n")
        result = compile_component(counter_source, siblings)

        assert result.manifest.sql_queries == [ir.SqlQuery(label="all", statement="SELECT 1;")]

    def test_reports_are_advisory_by_default(self):
        result = compile_component('view:\n  p: "x"\n')

        assert not result.ok
        assert result.reports == [
            "Line 2: Indentation Error (used 2 spaces, must be multiple of 4)"
        ]
        assert result.manifest.view[0].tag == "p"

    def test_strict_raises(self):
        config = CompilerConfig(strict=True)

        with pytest.raises(CompileError) as exc_info:
            compile_component('view:\n  p: "x"\n', file="app.viand", config=config)

        error = exc_info.value
        assert len(error.reports) == 1
        assert error.context.line == 2
        assert "Compilation failed with 1 diagnostic" in str(error)
        assert "app.viand:2:1" in str(error)

    def test_strict_passes_clean_source(self, counter_source):
        result = compile_component(counter_source, config=CompilerConfig(strict=True))
        assert result.ok

    def test_duplicate_reports(self):
        result = compile_component(DUPLICATE_SOURCE)

        assert result.reports == [
            "Line 3: Duplicate state 'a' (first declared on line 2)",
            "Line 5: Duplicate prop 'p' (first declared on line 4)",
        ]
        assert len(result.manifest.state) == 2

    def test_duplicate_reports_disabled(self):
        config = CompilerConfig(warn_duplicates=False)
        assert compile_component(DUPLICATE_SOURCE, config=config).ok

    def test_known_tags_from_config(self):
        source = "view:\n    dialog\n"

        plain = compile_component(source).manifest.view[0]
        configured = compile_component(
            source, config=CompilerConfig(known_tags=["dialog"])
        ).manifest.view[0]

        assert isinstance(plain, ir.TextNode)
        assert isinstance(configured, ir.ElementNode)
        assert configured.tag == "dialog"

    def test_indent_unit_from_config(self):
        result = compile_component('view:\n  p: "x"\n', config=CompilerConfig(indent_unit=2))
        assert result.ok


class TestValidator:
    """Tests for advisory manifest checks."""

    def test_sorted_by_line(self):
        manifest = ir.ComponentManifest(
            state=[
                ir.Declaration(id="x", line=1),
                ir.Declaration(id="x", line=9),
            ],
            functions=[
                ir.FunctionNode(name="go", line=2),
                ir.FunctionNode(name="go", line=4),
            ],
        )

        assert validate_manifest(manifest) == [
            "Line 4: Duplicate function 'go' (first declared on line 2)",
            "Line 9: Duplicate state 'x' (first declared on line 1)",
        ]

    def test_clean_manifest(self):
        assert validate_manifest(ir.ComponentManifest()) == []


class TestConfig:
    """Tests for viand.toml loading."""

    def test_full_table(self, write_config):
        path = write_config(
            """
[compiler]
indent_unit = 2
strict = true
known_tags = ["dialog", "x-card"]
warn_duplicates = false
"""
        )
        config = load_config(path)

        assert config == CompilerConfig(
            indent_unit=2, strict=True, known_tags=["dialog", "x-card"], warn_duplicates=False
        )
        assert "dialog" in config.tags
        assert "div" in config.tags

    def test_defaults(self, write_config):
        assert load_config(write_config("[other]\nkey = 1\n")) == CompilerConfig()

    @pytest.mark.parametrize(
        "content",
        [
            "[compiler\n",
            "[compiler]\nstrict = 'yes'\n",
            "[compiler]\nindent_unit = 0\n",
            "[compiler]\nindent_unit = true\n",
            "[compiler]\nknown_tags = [1, 2]\n",
            "compiler = 3\n",
        ],
    )
    def test_invalid(self, write_config, content):
        with pytest.raises(ConfigError):
            load_config(write_config(content))

    def test_missing_file(self, tmp_path):
        with pytest.raises(ConfigError) as exc_info:
            load_config(tmp_path / "viand.toml")
        assert exc_info.value.context.file == tmp_path / "viand.toml"

    def test_find_config_walks_up(self, tmp_path: Path, write_config):
        path = write_config("[compiler]\n")
        nested = tmp_path / "src" / "components"
        nested.mkdir(parents=True)
        component = nested / "counter.viand"
        component.write_text("component Counter\n", encoding="utf-8")

        assert find_config(nested) == path.resolve()
        assert find_config(component) == path.resolve()


class TestErrors:
    """Tests for diagnostic helpers and error formatting."""

    def test_diagnostic_round_trip(self):
        report = format_diagnostic(12, "Something odd")

        assert report == "Line 12: Something odd"
        assert diagnostic_line(report) == 12
        assert diagnostic_line("no location") is None

    def test_compile_error_snippet(self):
        source = "view:\n   p\n"
        error = make_compile_error(["Line 2: bad"], "a.viand", source)

        assert error.context.snippet == "   p"
        assert str(error).splitlines() == [
            "a.viand:2:1",
            "   2 |    p",
            "Compilation failed with 1 diagnostic",
            "  Line 2: bad",
        ]

    def test_plural_and_no_location(self):
        error = make_compile_error(["first", "second"], "a.viand")

        assert error.message == "Compilation failed with 2 diagnostics"
        assert error.context.line == 0

    def test_context_without_line(self):
        assert ErrorContext(file="x.viand").format() == "x.viand"


def test_version_is_set():
    assert __version__ != ""


def test_version_without_installed_distribution(monkeypatch):
    def missing(name):
        raise PackageNotFoundError(name)

    monkeypatch.setattr(_version, "version", missing)
    assert _version.get_version() == "0.0.0"
