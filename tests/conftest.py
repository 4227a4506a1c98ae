"""Shared pytest fixtures for Viand tests."""

from collections.abc import Callable
from pathlib import Path

import pytest

from viand.core import ir
from viand.core.hierarchy import assign_depths
from viand.core.lexer import tokenize
from viand.core.manifest_builder import SiblingSources, build_manifest

COUNTER_SOURCE = """\
component Counter:
    $count = 0
    view:
        button -> click(): "Add"
"""

BuildFn = Callable[..., ir.ComponentManifest]


def _build_with_reports(
    source: str, siblings: SiblingSources | None = None
) -> tuple[ir.ComponentManifest, list[str]]:
    tokens, diagnostics = tokenize(source)
    return build_manifest(assign_depths(tokens), diagnostics, siblings)


@pytest.fixture
def counter_source() -> str:
    """Return the smallest complete component."""
    return COUNTER_SOURCE


@pytest.fixture
def build() -> BuildFn:
    """Return a helper running lexer, hierarchy and manifest builder."""

    def _build(source: str, siblings: SiblingSources | None = None) -> ir.ComponentManifest:
        manifest, _ = _build_with_reports(source, siblings)
        return manifest

    return _build


@pytest.fixture
def build_with_reports() -> Callable[..., tuple[ir.ComponentManifest, list[str]]]:
    """Return a helper like ``build`` that also returns the reports."""
    return _build_with_reports


@pytest.fixture
def write_config(tmp_path: Path) -> Callable[[str], Path]:
    """Return a helper writing ``viand.toml`` into a temporary directory."""

    def _write(content: str) -> Path:
        path = tmp_path / "viand.toml"
        path.write_text(content, encoding="utf-8")
        return path

    return _write
