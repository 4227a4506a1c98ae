"""Core Viand functionality: lexer, hierarchy, manifest builder, IR, validation, configuration."""

from . import ir
from .compiler import CompileResult, compile_component
from .config import CompilerConfig, find_config, load_config
from .errors import CompileError, ConfigError, ErrorContext, ViandError
from .formatter import format_source
from .hierarchy import assign_depths, canonical_indent
from .lexer import CATEGORY_RULES, KNOWN_TAGS, CategoryRule, Token, TokenCategory, tokenize
from .manifest_builder import SiblingSources, build_manifest
from .validator import validate_manifest

__all__ = [
    "ir",
    # Pipeline
    "tokenize",
    "assign_depths",
    "canonical_indent",
    "build_manifest",
    "validate_manifest",
    "compile_component",
    "CompileResult",
    "SiblingSources",
    # Lexer data
    "CATEGORY_RULES",
    "KNOWN_TAGS",
    "CategoryRule",
    "Token",
    "TokenCategory",
    # Tooling
    "format_source",
    "CompilerConfig",
    "load_config",
    "find_config",
    # Errors
    "ViandError",
    "CompileError",
    "ConfigError",
    "ErrorContext",
]
