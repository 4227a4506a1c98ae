"""
Lexer for the Viand component language.

Viand is line-oriented: every non-blank source line becomes exactly one
token whose category is decided from line-local cues alone. Nesting is not
resolved here; the lexer only measures the raw indentation width and the
hierarchy builder (``viand.core.hierarchy``) turns widths into depths.

Classification is first-match-wins over ``CATEGORY_RULES``. The table is
plain data passed into the lexer, so callers may supply an extended copy
without touching module state.
"""

import re
from collections.abc import Callable, Iterable
from dataclasses import dataclass
from enum import Enum

from .errors import format_diagnostic

DEFAULT_INDENT_UNIT = 4


class TokenCategory(Enum):
    """Lexical category of one Viand source line."""

    COMPONENT_DECLARATION = "component-declaration"
    MEMORY_DECLARATION = "memory-declaration"
    IMPORT_DECLARATION = "import-declaration"
    PROP_DECLARATION = "prop-declaration"
    STATE_DECLARATION = "state-declaration"
    DERIVED_DECLARATION = "derived-declaration"
    FUNCTION_DECLARATION = "function-declaration"
    LIFECYCLE_BLOCK = "lifecycle-block"
    WATCH_BLOCK = "watch-block"
    STYLE_ROOT = "style-root"
    HEAD_ROOT = "head-root"
    TEST_ROOT = "test-root"
    TEST_PERSONA = "test-persona"
    VIEW_ROOT = "view-root"
    CONTROL_FLOW = "control-flow"
    ELEMENT = "element"
    ASSERTION = "assertion"
    EXPRESSION = "expression"


# Tags recognised as markup even without ``:``, ``(`` or ``#`` on the line.
KNOWN_TAGS: frozenset[str] = frozenset(
    {
        "div",
        "span",
        "p",
        "h1",
        "h2",
        "h3",
        "h4",
        "h5",
        "h6",
        "ul",
        "ol",
        "li",
        "button",
        "input",
        "canvas",
        "img",
        "a",
        "nav",
        "footer",
        "main",
        "section",
        "article",
        "header",
    }
)

_FIRST_WORD_SPLIT = re.compile(r"[ .(#]")
_CONTROL_FLOW = re.compile(r"^(?:each|if|match|case)\s|^(?:else|default)\b")

Predicate = Callable[[str, frozenset[str]], bool]


@dataclass(frozen=True)
class CategoryRule:
    """
    One entry of the ordered classification table.

    Attributes:
        category: Category assigned when the predicate matches
        matches: Predicate over (trimmed text, known tag set)
        description: Short human-readable form of the predicate
    """

    category: TokenCategory
    matches: Predicate
    description: str


def _prefix(pattern: str) -> Predicate:
    compiled = re.compile(pattern)
    return lambda text, _tags: compiled.match(text) is not None


def _is_control_flow(text: str, _tags: frozenset[str]) -> bool:
    return _CONTROL_FLOW.match(text) is not None


def _is_quoted_text(text: str, _tags: frozenset[str]) -> bool:
    return text[:1] in ('"', "'")


def is_markup(text: str, known_tags: frozenset[str] = KNOWN_TAGS) -> bool:
    """
    Shape test for markup lines.

    A line is markup when it contains ``:``, ``(`` or ``#`` anywhere, when its
    first word is a known tag, or when its first word is capitalised (a
    component reference).
    """
    if ":" in text or "(" in text or "#" in text:
        return True
    first_word = _FIRST_WORD_SPLIT.split(text, maxsplit=1)[0]
    if first_word in known_tags:
        return True
    return first_word[:1].isupper()


def _always(_text: str, _tags: frozenset[str]) -> bool:
    return True


# Order matters: ``$`` lines must be tested before markup because they often
# contain ``:`` (type annotations) or ``(`` (call defaults).
CATEGORY_RULES: tuple[CategoryRule, ...] = (
    CategoryRule(TokenCategory.COMPONENT_DECLARATION, _prefix(r"component\b"), "component"),
    CategoryRule(TokenCategory.MEMORY_DECLARATION, _prefix(r"memory\b"), "memory"),
    CategoryRule(TokenCategory.VIEW_ROOT, _prefix(r"view:"), "view:"),
    CategoryRule(TokenCategory.STYLE_ROOT, _prefix(r"style:"), "style:"),
    CategoryRule(TokenCategory.HEAD_ROOT, _prefix(r"head:"), "head:"),
    CategoryRule(TokenCategory.TEST_ROOT, _prefix(r"test\b"), "test"),
    CategoryRule(TokenCategory.ASSERTION, _prefix(r"must\s"), "must "),
    CategoryRule(
        TokenCategory.TEST_PERSONA, _prefix(r"@(?:logic|ui|integration)\b"), "@logic/@ui/@integration"
    ),
    CategoryRule(TokenCategory.STATE_DECLARATION, _prefix(r"\$"), "$"),
    CategoryRule(TokenCategory.PROP_DECLARATION, _prefix(r"@prop\b"), "@prop"),
    CategoryRule(TokenCategory.DERIVED_DECLARATION, _prefix(r"sync\s"), "sync "),
    CategoryRule(TokenCategory.IMPORT_DECLARATION, _prefix(r"use\s"), "use "),
    CategoryRule(TokenCategory.FUNCTION_DECLARATION, _prefix(r"fn\s"), "fn "),
    CategoryRule(TokenCategory.LIFECYCLE_BLOCK, _prefix(r"on\s+mount\b"), "on mount"),
    CategoryRule(TokenCategory.WATCH_BLOCK, _prefix(r"on\s+change\s"), "on change "),
    CategoryRule(TokenCategory.CONTROL_FLOW, _is_control_flow, "each/if/else/match/case/default"),
    CategoryRule(TokenCategory.EXPRESSION, _is_quoted_text, "quoted text"),
    CategoryRule(TokenCategory.ELEMENT, is_markup, "markup shape"),
    CategoryRule(TokenCategory.EXPRESSION, _always, "fallback"),
)


@dataclass(frozen=True)
class Token:
    """
    One classified source line.

    Attributes:
        line_number: Line number (1-indexed)
        raw_indent_width: Count of leading whitespace characters
        category: Lexical category
        text: Comment-stripped, trimmed content
        raw_text: The original line, for diagnostics
        depth: Normalized nesting level (set by ``assign_depths``)
    """

    line_number: int
    raw_indent_width: int
    category: TokenCategory
    text: str
    raw_text: str
    depth: int = 0

    def __repr__(self) -> str:
        return (
            f"Token({self.category.value}, {self.text!r}, "
            f"line={self.line_number}, indent={self.raw_indent_width}, depth={self.depth})"
        )


def strip_line_comment(line: str) -> str:
    """
    Remove a trailing ``//`` comment, ignoring ``//`` inside quoted strings.

    A quote that is never closed (the apostrophe in ``Don't``) does not
    start a string: scanning resumes right after it.
    """
    start = 0
    while True:
        quote: str | None = None
        opened_at = -1
        i = start
        while i < len(line):
            ch = line[i]
            if quote:
                if ch == "\\":
                    i += 2
                    continue
                if ch == quote:
                    quote = None
            elif ch in ('"', "'"):
                quote = ch
                opened_at = i
            elif ch == "/" and line.startswith("//", i):
                return line[:i]
            i += 1
        if quote is None:
            return line
        start = opened_at + 1


def classify(
    text: str,
    known_tags: frozenset[str] = KNOWN_TAGS,
    rules: Iterable[CategoryRule] = CATEGORY_RULES,
) -> TokenCategory:
    """
    Classify trimmed line text against the ordered rule table.

    Args:
        text: Comment-stripped, trimmed line content
        known_tags: Tag names treated as markup
        rules: Ordered classification rules; the first match wins

    Returns:
        The category of the first matching rule, EXPRESSION if none match
    """
    for rule in rules:
        if rule.matches(text, known_tags):
            return rule.category
    return TokenCategory.EXPRESSION


class Lexer:
    """
    Lexer for Viand source.

    Produces one token per meaningful line together with advisory
    indentation diagnostics. Holds no state beyond its configuration, so a
    single instance may tokenize any number of sources.
    """

    def __init__(
        self,
        indent_unit: int = DEFAULT_INDENT_UNIT,
        known_tags: Iterable[str] = KNOWN_TAGS,
        rules: Iterable[CategoryRule] = CATEGORY_RULES,
    ):
        """
        Initialize lexer.

        Args:
            indent_unit: Indentation widths must be a multiple of this
            known_tags: Tag names treated as markup
            rules: Ordered classification rules
        """
        self.indent_unit = indent_unit if indent_unit > 0 else DEFAULT_INDENT_UNIT
        self.known_tags = frozenset(known_tags)
        self.rules = tuple(rules)

    def tokenize(self, text: str) -> tuple[list[Token], list[str]]:
        """
        Tokenize source text.

        Returns:
            Tuple of (tokens, diagnostics)
        """
        tokens: list[Token] = []
        diagnostics: list[str] = []

        for index, line in enumerate(text.split("\n")):
            line_number = index + 1
            line = line.rstrip("\r")

            trimmed = line.strip()
            if not trimmed or trimmed.startswith("#"):
                continue

            content = strip_line_comment(line).strip()
            if not content:
                continue

            indent = len(line) - len(line.lstrip())
            if indent % self.indent_unit != 0:
                diagnostics.append(
                    format_diagnostic(
                        line_number,
                        f"Indentation Error (used {indent} spaces, "
                        f"must be multiple of {self.indent_unit})",
                    )
                )

            tokens.append(
                Token(
                    line_number=line_number,
                    raw_indent_width=indent,
                    category=classify(content, self.known_tags, self.rules),
                    text=content,
                    raw_text=line,
                )
            )

        return tokens, diagnostics


def tokenize(
    text: str,
    *,
    indent_unit: int = DEFAULT_INDENT_UNIT,
    known_tags: Iterable[str] = KNOWN_TAGS,
    rules: Iterable[CategoryRule] = CATEGORY_RULES,
) -> tuple[list[Token], list[str]]:
    """
    Convenience function to tokenize Viand source.

    Args:
        text: Source text
        indent_unit: Indentation unit checked for diagnostics
        known_tags: Tag names treated as markup
        rules: Ordered classification rules

    Returns:
        Tuple of (tokens, diagnostics); depths are all zero until
        ``assign_depths`` runs
    """
    return Lexer(indent_unit, known_tags, rules).tokenize(text)
