"""
Advisory checks over a built ComponentManifest.

The builder keeps every declaration it reads, duplicates included, so that
consumers see declarations in source order and the last one wins. The
checks here report such duplicates; whether a report is fatal is decided
by the caller (see ``viand.core.compiler``).
"""

from collections.abc import Callable, Iterable
from typing import Any

from . import ir
from .errors import diagnostic_line, format_diagnostic


def _duplicates(kind: str, items: Iterable[Any], key: Callable[[Any], str]) -> list[str]:
    """Report every repeat of an id with the line of its first declaration."""
    first_seen: dict[str, int] = {}
    reports = []
    for item in items:
        name = key(item)
        if name in first_seen:
            reports.append(
                format_diagnostic(
                    item.line,
                    f"Duplicate {kind} '{name}' (first declared on line {first_seen[name]})",
                )
            )
        else:
            first_seen[name] = item.line
    return reports


def validate_declarations(manifest: ir.ComponentManifest) -> list[str]:
    """
    Check declarations for repeated names.

    Checks:
    - No prop is declared twice
    - No state is declared twice
    - No derived value is declared twice
    - No function is declared twice

    Returns:
        List of reports in ``Line <n>: <message>`` form
    """
    reports = []
    reports.extend(_duplicates("prop", manifest.props, lambda d: d.id))
    reports.extend(_duplicates("state", manifest.state, lambda d: d.id))
    reports.extend(_duplicates("derived value", manifest.derived, lambda d: d.id))
    reports.extend(_duplicates("function", manifest.functions, lambda f: f.name))
    return reports


def validate_manifest(manifest: ir.ComponentManifest, *, warn_duplicates: bool = True) -> list[str]:
    """
    Run all advisory checks.

    Args:
        manifest: Manifest to check
        warn_duplicates: Report repeated declarations

    Returns:
        Reports sorted by line
    """
    reports: list[str] = []
    if warn_duplicates:
        reports.extend(validate_declarations(manifest))
    return sorted(reports, key=lambda report: diagnostic_line(report) or 0)
