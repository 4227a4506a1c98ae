"""
Property-based tests using Hypothesis.

These tests verify invariants of the front-end across a wide range of
inputs: the lenient grammar never raises, depths are stable under
canonical re-indentation, and formatting is idempotent.
"""

from hypothesis import given, settings
from hypothesis import strategies as st

from viand import compile_component
from viand.core import ir
from viand.core.formatter import format_source
from viand.core.hierarchy import assign_depths, canonical_indent
from viand.core.lexer import Token, TokenCategory, tokenize
from viand.core.markup import split_top_level

# Lines that look like Viand, to reach deeper into the builder than random text.
SNIPPETS = [
    "component Demo:",
    "memory Store",
    "use router",
    '@prop title: string = "x"',
    "$count = 0",
    "sync $double = $count * 2",
    "fn go(a, b):",
    "$count += 1",
    "on mount:",
    "on change $count: log()",
    "view:",
    "style:",
    ".card:",
    "padding: 4px",
    "head:",
    'title: "Demo"',
    "meta:",
    "test demo:",
    "@logic:",
    "@ui:",
    "must $count == 1",
    "each $row in $rows:",
    "if $count > 1:",
    "else if $ok:",
    "else:",
    "match $m:",
    'case 1: "one"',
    "default:",
    'div.card#main(title: "a: b"):',
    'button -> go(): "Go"',
    "slot header",
    "fragment:",
    "Card(title: $t)",
    "total is $count",
    "stray words",
    "",
]

snippet_sources = st.lists(
    st.tuples(st.integers(min_value=0, max_value=4), st.sampled_from(SNIPPETS)),
    max_size=30,
).map(lambda lines: "\n".join(" " * (4 * level) + text for level, text in lines))


def _tokens(widths: list[int]) -> list[Token]:
    return [
        Token(
            line_number=i + 1,
            raw_indent_width=width,
            category=TokenCategory.EXPRESSION,
            text="x",
            raw_text=" " * width + "x",
        )
        for i, width in enumerate(widths)
    ]


# =============================================================================
# Hierarchy Property Tests
# =============================================================================


class TestHierarchyProperties:
    """Property-based tests for depth assignment."""

    @given(st.lists(st.integers(min_value=0, max_value=40), max_size=50))
    @settings(max_examples=200)
    def test_depth_grows_by_at_most_one(self, widths: list[int]) -> None:
        """Invariant: a line is never more than one level deeper than the previous one."""
        depths = [token.depth for token in assign_depths(_tokens(widths))]

        previous = 0
        for depth in depths:
            assert 0 <= depth <= previous + 1
            previous = depth

    @given(
        st.lists(st.integers(min_value=0, max_value=40), max_size=50),
        st.integers(min_value=1, max_value=8),
    )
    @settings(max_examples=200)
    def test_canonical_indent_preserves_depths(self, widths: list[int], unit: int) -> None:
        """Invariant: re-indenting at depth * unit reproduces the same depths."""
        first = assign_depths(_tokens(widths))
        second = assign_depths(canonical_indent(first, unit))

        assert [t.depth for t in second] == [t.depth for t in first]


# =============================================================================
# Builder Property Tests
# =============================================================================


class TestBuilderProperties:
    """Property-based tests for the lenient grammar."""

    @given(st.text(max_size=500))
    @settings(max_examples=200)
    def test_compile_never_raises_on_arbitrary_text(self, text: str) -> None:
        """Invariant: any text compiles to a manifest without raising."""
        result = compile_component(text)
        assert isinstance(result.manifest, ir.ComponentManifest)

    @given(snippet_sources)
    @settings(max_examples=300)
    def test_compile_never_raises_on_viand_like_text(self, source: str) -> None:
        """Invariant: any arrangement of valid-looking lines compiles."""
        result = compile_component(source)

        # Refs and slots are registered once each
        assert len(set(result.manifest.element_refs)) == len(result.manifest.element_refs)
        assert len(set(result.manifest.slots)) == len(result.manifest.slots)

    @given(snippet_sources)
    @settings(max_examples=100)
    def test_one_token_per_meaningful_line(self, source: str) -> None:
        """Invariant: every non-blank line yields exactly one token."""
        tokens, _ = tokenize(source)
        expected = [n for n, line in enumerate(source.split("\n"), start=1) if line.strip()]

        assert [t.line_number for t in tokens] == expected


# =============================================================================
# Splitting and Formatting Property Tests
# =============================================================================


class TestFormattingProperties:
    """Property-based tests for top-level splitting and the formatter."""

    @given(st.text(alphabet="ab,()'\" ", max_size=60))
    @settings(max_examples=200)
    def test_split_top_level_rejoins(self, text: str) -> None:
        """Invariant: splitting on commas and joining back is lossless."""
        assert ",".join(split_top_level(text)) == text

    @given(st.text(alphabet="abp:$-> ()\"#/\n", max_size=200))
    @settings(max_examples=300)
    def test_format_is_idempotent(self, text: str) -> None:
        """Invariant: formatting formatted source changes nothing."""
        once = format_source(text)
        assert format_source(once) == once

    @given(snippet_sources)
    @settings(max_examples=100)
    def test_format_preserves_manifest(self, source: str) -> None:
        """Invariant: canonical source builds the same manifest, line numbers aside."""
        before = compile_component(source).manifest
        after = compile_component(format_source(source)).manifest

        assert after.name == before.name
        assert [s.id for s in after.state] == [s.id for s in before.state]
        assert [f.name for f in after.functions] == [f.name for f in before.functions]
        assert len(after.view) == len(before.view)
