import logging
import tomllib
from dataclasses import dataclass, field
from pathlib import Path

from .errors import ConfigError, ErrorContext
from .lexer import DEFAULT_INDENT_UNIT, KNOWN_TAGS

logger = logging.getLogger(__name__)

CONFIG_FILENAME = "viand.toml"


@dataclass
class CompilerConfig:
    """Compiler configuration from the ``[compiler]`` table."""

    indent_unit: int = DEFAULT_INDENT_UNIT  # Indentation widths must be a multiple of this
    strict: bool = False  # Any report aborts compilation with CompileError
    known_tags: list[str] = field(default_factory=list)  # Extra tags treated as markup
    warn_duplicates: bool = True  # Report repeated prop/state/function names

    @property
    def tags(self) -> frozenset[str]:
        """Built-in known tags plus the configured extras."""
        return KNOWN_TAGS | frozenset(self.known_tags)


def _expect(value: object, kind: type, key: str, path: Path) -> None:
    # bool is a subclass of int
    if not isinstance(value, kind) or (kind is int and isinstance(value, bool)):
        raise ConfigError(
            f"'compiler.{key}' must be of type {kind.__name__}, got {type(value).__name__}",
            ErrorContext(file=path),
        )


def load_config(path: Path) -> CompilerConfig:
    """
    Load a ``viand.toml`` file.

    Args:
        path: Path to the file

    Returns:
        CompilerConfig with defaults for absent keys

    Raises:
        ConfigError: If the file cannot be read, is not valid TOML, or holds
            values of the wrong type
    """
    try:
        data = tomllib.loads(path.read_text(encoding="utf-8"))
    except OSError as e:
        raise ConfigError(f"Cannot read config: {e}", ErrorContext(file=path)) from e
    except tomllib.TOMLDecodeError as e:
        raise ConfigError(f"Invalid TOML: {e}", ErrorContext(file=path)) from e

    compiler = data.get("compiler", {})
    if not isinstance(compiler, dict):
        raise ConfigError("'compiler' must be a table", ErrorContext(file=path))

    indent_unit = compiler.get("indent_unit", DEFAULT_INDENT_UNIT)
    strict = compiler.get("strict", False)
    known_tags = compiler.get("known_tags", [])
    warn_duplicates = compiler.get("warn_duplicates", True)

    _expect(indent_unit, int, "indent_unit", path)
    _expect(strict, bool, "strict", path)
    _expect(known_tags, list, "known_tags", path)
    _expect(warn_duplicates, bool, "warn_duplicates", path)
    if indent_unit <= 0:
        raise ConfigError(
            f"'compiler.indent_unit' must be positive, got {indent_unit}",
            ErrorContext(file=path),
        )
    if not all(isinstance(tag, str) for tag in known_tags):
        raise ConfigError("'compiler.known_tags' must be a list of strings", ErrorContext(file=path))

    config = CompilerConfig(
        indent_unit=indent_unit,
        strict=strict,
        known_tags=list(known_tags),
        warn_duplicates=warn_duplicates,
    )
    logger.debug("Loaded %s: %s", path, config)
    return config


def find_config(start: Path) -> Path | None:
    """
    Find the nearest ``viand.toml`` in ``start`` or one of its parents.

    Args:
        start: File or directory to search from

    Returns:
        Path to the config file, or None if there is none
    """
    start = start.resolve()
    directory = start if start.is_dir() else start.parent
    for candidate in (directory, *directory.parents):
        path = candidate / CONFIG_FILENAME
        if path.is_file():
            return path
    return None
