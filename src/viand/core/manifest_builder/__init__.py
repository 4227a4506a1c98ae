"""
Viand Manifest Builder Package.

Turns a depth-annotated token stream into a ComponentManifest. The builder
is built from mixins that split the handling by construct type, composed
over a base class that owns the context stack.

The main exports are:
- ManifestBuilder: The complete builder class
- build_manifest: Convenience function returning (manifest, reports)

Usage:
    from viand.core.lexer import tokenize
    from viand.core.hierarchy import assign_depths
    from viand.core.manifest_builder import build_manifest

    tokens, diagnostics = tokenize(source)
    manifest, reports = build_manifest(assign_depths(tokens), diagnostics)
"""

import logging
from collections.abc import Iterable

from .. import ir
from ..lexer import Token
from .base import BaseBuilder, BuilderProtocol
from .declarations import DECLARATION_CATEGORIES, DeclarationMixin
from .frames import (
    Frame,
    HeadFrame,
    LogicFrame,
    MatchFrame,
    StyleFrame,
    StyleRuleFrame,
    ViewFrame,
)
from .head import HeadMixin
from .logic import BLOCK_OPENERS, LogicMixin
from .siblings import (
    SiblingSources,
    parse_api,
    parse_head,
    parse_localization,
    parse_sql,
)
from .style import StyleMixin
from .view import ViewMixin

logger = logging.getLogger(__name__)


class ManifestBuilder(
    BaseBuilder,
    DeclarationMixin,
    LogicMixin,
    StyleMixin,
    HeadMixin,
    ViewMixin,
):
    """
    Complete Viand manifest builder.

    Each token first closes every frame opened at its depth or deeper, then
    is dispatched on the innermost remaining frame and its own category:

    - LogicMixin bodies take every line verbatim (``$x += 1`` is a
      statement there, not a declaration)
    - HeadMixin blocks take every line in the head grammar
    - DeclarationMixin handles one-line declarations anywhere else
    - LogicMixin opens function, lifecycle, watcher, style, head, test and
      view blocks
    - StyleMixin handles selectors and declarations inside ``style:``
    - ViewMixin handles control flow, markup and text in view frames

    Anything left over is dropped with a debug record; the builder never
    raises on source text.
    """

    def build(self, siblings: SiblingSources | None = None) -> ir.ComponentManifest:
        """
        Consume every token and return the finished manifest.

        Args:
            siblings: Optional sibling-file texts

        Returns:
            The frozen ComponentManifest
        """
        for token in self.tokens:
            self.close_frames(token.depth)
            self.dispatch(token, self.top)
        self.close_all()
        return self.finish(siblings or SiblingSources())

    def dispatch(self, token: Token, frame: Frame) -> None:
        """Route one token to the handler for the current context."""
        if isinstance(frame, LogicFrame):
            self.handle_logic_line(token, frame)
        elif isinstance(frame, HeadFrame):
            self.handle_head_line(token, frame)
        elif token.category in DECLARATION_CATEGORIES:
            self.handle_declaration(token)
        elif token.category in BLOCK_OPENERS:
            self.open_block(token)
        elif isinstance(frame, (StyleFrame, StyleRuleFrame)):
            self.handle_style_line(token, frame)
        elif isinstance(frame, (ViewFrame, MatchFrame)):
            self.handle_view_line(token, frame)
        else:
            self.drop(token, f"{token.category.value} has no place here")

    def finish(self, siblings: SiblingSources) -> ir.ComponentManifest:
        """Freeze collected state and sibling-file content into a manifest."""
        head = ir.HeadSpec()
        for block in self.heads:
            head = head.merged_with(block)
        if siblings.head:
            head = head.merged_with(parse_head(siblings.head))

        return ir.ComponentManifest(
            name=self.name,
            is_singleton=self.is_singleton,
            imports=self.imports,
            props=self.props,
            state=self.state,
            derived=self.derived,
            functions=self.functions,
            lifecycle_body=self.lifecycle_body,
            watchers=self.watchers,
            element_refs=self.element_refs,
            slots=self.slots,
            style_rules=self.style_rules,
            view=self.view,
            tests=self.tests,
            sql_queries=parse_sql(siblings.sql) if siblings.sql else [],
            api_endpoints=parse_api(siblings.api) if siblings.api else [],
            localization=parse_localization(siblings.localization) if siblings.localization else {},
            head=head,
        )


def build_manifest(
    tokens: Iterable[Token],
    lexer_diagnostics: Iterable[str] = (),
    siblings: SiblingSources | None = None,
) -> tuple[ir.ComponentManifest, list[str]]:
    """
    Build a manifest from depth-annotated tokens.

    Args:
        tokens: Tokens with depths assigned by ``assign_depths``
        lexer_diagnostics: Diagnostics from the lexer, carried into reports
        siblings: Optional sibling-file texts

    Returns:
        Tuple of (manifest, reports)
    """
    builder = ManifestBuilder(tokens, lexer_diagnostics)
    manifest = builder.build(siblings)
    logger.debug(
        "Built manifest %s: %s state, %s functions, %s root view nodes",
        manifest.name,
        len(manifest.state),
        len(manifest.functions),
        len(manifest.view),
    )
    return manifest, builder.reports


__all__ = [
    "BaseBuilder",
    "BuilderProtocol",
    "ManifestBuilder",
    "SiblingSources",
    "build_manifest",
    "parse_api",
    "parse_head",
    "parse_localization",
    "parse_sql",
]
