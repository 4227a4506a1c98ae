"""
Canonical source formatter.

Re-emits Viand source with every line indented at ``depth * indent_unit``
and event arrows spaced as ``a -> b``. Blank lines are removed. Comment
lines are kept and indented like the code line that follows them.
"""

from .hierarchy import assign_depths, canonical_indent
from .lexer import DEFAULT_INDENT_UNIT, Token, tokenize
from .markup import split_top_level


def _format_line(token: Token) -> str:
    code = " -> ".join(part.strip() for part in split_top_level(token.text, "->")).strip()
    comment = token.raw_text.strip()[len(token.text) :].strip()
    return f"{code} {comment}" if comment else code


def format_source(text: str, *, indent_unit: int = DEFAULT_INDENT_UNIT) -> str:
    """
    Format Viand source.

    Args:
        text: Source text
        indent_unit: Spaces per nesting level

    Returns:
        Formatted source ending in a single newline, or an empty string
        for a source with no lines
    """
    tokens, _ = tokenize(text, indent_unit=indent_unit)
    by_line = {
        token.line_number: token
        for token in canonical_indent(assign_depths(tokens), indent_unit)
    }

    out: list[str] = []
    pending_comments: list[str] = []
    for number, line in enumerate(text.split("\n"), start=1):
        token = by_line.get(number)
        if token is None:
            stripped = line.strip()
            if stripped:
                pending_comments.append(stripped)
            continue
        indent = " " * token.raw_indent_width
        out.extend(indent + comment for comment in pending_comments)
        pending_comments.clear()
        out.append(indent + _format_line(token))
    out.extend(pending_comments)

    return "\n".join(out) + "\n" if out else ""
