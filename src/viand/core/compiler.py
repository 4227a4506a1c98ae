"""
Front-end pipeline entry point.

Runs lexer, hierarchy builder, manifest builder and advisory validation
over one component and applies the caller's policy to the collected
reports: advisory by default, fatal under ``strict``.
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path

from . import ir
from .config import CompilerConfig
from .errors import make_compile_error
from .hierarchy import assign_depths
from .lexer import tokenize
from .manifest_builder import SiblingSources, build_manifest
from .validator import validate_manifest

logger = logging.getLogger(__name__)


@dataclass
class CompileResult:
    """
    Output of one compilation.

    Attributes:
        manifest: The component manifest
        reports: Lexer diagnostics followed by validation reports, each in
            ``Line <n>: <message>`` form
        file: Identifier of the compiled unit
    """

    manifest: ir.ComponentManifest
    reports: list[str] = field(default_factory=list)
    file: Path | str = "<memory>"

    @property
    def ok(self) -> bool:
        """Check if the compilation produced no reports."""
        return not self.reports


def compile_component(
    source: str,
    siblings: SiblingSources | None = None,
    *,
    file: Path | str = "<memory>",
    config: CompilerConfig | None = None,
) -> CompileResult:
    """
    Compile one component source into its manifest.

    Args:
        source: Component source text
        siblings: Optional sibling-file texts (SQL, API, localization, head)
        file: Identifier used in error messages
        config: Compiler configuration; defaults apply when omitted

    Returns:
        CompileResult with the manifest and all reports

    Raises:
        CompileError: If ``config.strict`` is set and any report exists
    """
    config = config or CompilerConfig()

    tokens, diagnostics = tokenize(
        source,
        indent_unit=config.indent_unit,
        known_tags=config.tags,
    )
    manifest, reports = build_manifest(assign_depths(tokens), diagnostics, siblings)
    reports.extend(validate_manifest(manifest, warn_duplicates=config.warn_duplicates))

    logger.info(
        "Compiled %s (%s): %s tokens, %s reports",
        file,
        manifest.name,
        len(tokens),
        len(reports),
    )
    for report in reports:
        logger.warning("%s: %s", file, report)

    if config.strict and reports:
        raise make_compile_error(reports, file, source)

    return CompileResult(manifest=manifest, reports=reports, file=file)
