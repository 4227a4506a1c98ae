"""
Error types and diagnostic helpers for the Viand front-end.

The lexer, hierarchy builder and manifest builder never raise: problems in
source text are reported as ``"Line <n>: <message>"`` strings. Exceptions
are reserved for caller policy (strict compilation) and configuration.
"""

import re
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

_DIAGNOSTIC_LINE = re.compile(r"^Line (\d+):")


class ViandError(Exception):
    """Base exception for all Viand errors."""

    def __init__(self, message: str, context: Optional["ErrorContext"] = None):
        self.message = message
        self.context = context
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        """Format error message with context if available."""
        if self.context:
            return f"{self.context.format()}\n{self.message}"
        return self.message


class CompileError(ViandError):
    """
    Raised when a strict compilation produced diagnostics.

    Attributes:
        reports: The diagnostics that made the compilation fail
    """

    def __init__(
        self,
        message: str,
        reports: list[str],
        context: Optional["ErrorContext"] = None,
    ):
        self.reports = list(reports)
        super().__init__(message, context)

    def _format_message(self) -> str:
        base = super()._format_message()
        if not self.reports:
            return base
        return base + "\n" + "\n".join(f"  {r}" for r in self.reports)


class ConfigError(ViandError):
    """
    Raised when a ``viand.toml`` file cannot be read or holds invalid values.
    """

    pass


@dataclass
class ErrorContext:
    """
    Source location attached to an error.

    Attributes:
        file: Identifier of the compiled unit (a path or ``<memory>``)
        line: Line number (1-indexed)
        column: Column number (1-indexed)
        snippet: Optional source line shown under the location
    """

    file: Path | str
    line: int = 0
    column: int = 0
    snippet: str | None = None

    def format(self) -> str:
        """
        Format as ``file:line:column`` followed by the snippet, if any.
        """
        location = str(self.file)
        if self.line:
            location += f":{self.line}"
            if self.column:
                location += f":{self.column}"
        if self.snippet:
            return f"{location}\n{self.line:4d} | {self.snippet}"
        return location


def format_diagnostic(line: int, message: str) -> str:
    """Render a diagnostic in the ``Line <n>: <message>`` form."""
    return f"Line {line}: {message}"


def diagnostic_line(report: str) -> int | None:
    """
    Extract the 1-indexed line number from a diagnostic string.

    Returns:
        The line number, or None when the report carries no location
    """
    match = _DIAGNOSTIC_LINE.match(report)
    if match is None:
        return None
    return int(match.group(1))


def make_compile_error(
    reports: list[str],
    file: Path | str,
    source: str | None = None,
) -> CompileError:
    """
    Helper to create a CompileError pointing at the first reported line.

    Args:
        reports: Diagnostics produced by the pipeline
        file: Identifier of the compiled unit
        source: Optional source text, used to attach a snippet

    Returns:
        CompileError with context attached
    """
    line = diagnostic_line(reports[0]) if reports else None
    snippet = None
    if source is not None and line is not None:
        lines = source.split("\n")
        if 0 < line <= len(lines):
            snippet = lines[line - 1]
    context = ErrorContext(file=file, line=line or 0, column=1 if line else 0, snippet=snippet)
    count = len(reports)
    noun = "diagnostic" if count == 1 else "diagnostics"
    return CompileError(f"Compilation failed with {count} {noun}", reports, context)
