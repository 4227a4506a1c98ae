"""
Viand - compiler front-end for indentation-sensitive UI components.

Turns Viand component source (state, derived values, handlers, control
flow and markup) into a ComponentManifest that code-generating backends
consume.
"""

from __future__ import annotations

from ._version import get_version

# Re-export commonly used types for convenience
from .core import ir
from .core.compiler import CompileResult, compile_component
from .core.errors import CompileError, ConfigError, ViandError

__version__ = get_version()

__all__ = [
    "__version__",
    "ir",
    "compile_component",
    "CompileResult",
    "ViandError",
    "CompileError",
    "ConfigError",
]
