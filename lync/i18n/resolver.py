"""
Language-block resolution.

Normalizes a possibly multi-language document into single-language content
for a requested target code:

  • no language blocks   → legacy mode: translate the whole document unless it
                           has no prose or is already in the target language
  • target block present → selection: unwrap it, drop every other block
  • target block absent  → fallback: translate the first block, drop the rest

Translation failures never fail the compilation; the original content is
kept and a warning is recorded.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, Literal, Optional, Sequence

from ..diagnostics import Diagnostics
from ..llm.translator import TranslationResult, Translator
from ..markdown.nodes import BlockNode, Container, Node, Root, children_of
from ..markdown.parser import parse_markdown
from ..markdown.serializer import serialize
from ..markdown.visit import index_of, walk
from .detect import DEFAULT_THRESHOLD, collect_prose, detect, has_prose
from .tags import block_lang, same_lang

logger = logging.getLogger(__name__)

Outcome = Literal[
    "legacy-aggregator",
    "legacy-already-target",
    "legacy-translated",
    "legacy-untranslated",
    "selected",
    "fallback-translated",
    "fallback-original",
]


@dataclass(frozen=True)
class BlockSite:
    """A top-level language block and where it sits."""
    block: Container
    lang: str
    parent: Node
    index: int


def scan_blocks(root: Root) -> List[BlockSite]:
    """
    Language blocks in document order, not nested inside another one.

    Blocks nested inside a language block travel with their enclosing block.
    """
    sites: List[BlockSite] = []
    for node, ancestors in walk(root):
        lang = block_lang(node)
        if lang is None:
            continue
        if any(block_lang(a) is not None for a in ancestors):
            continue
        parent = ancestors[-1]
        sites.append(BlockSite(
            block=node,  # type: ignore[arg-type]
            lang=lang,
            parent=parent,
            index=index_of(children_of(parent) or [], node),
        ))
    return sites


def _apply(sites: Sequence[BlockSite], keep: Optional[BlockSite], content: Sequence[BlockNode]) -> None:
    """
    Replace `keep` with `content` and delete every other site.

    Applied last-to-first so the recorded indices of earlier sites
    stay valid while later ones are spliced.
    """
    for site in reversed(sites):
        kids = children_of(site.parent)
        assert kids is not None and kids[site.index] is site.block
        replacement = list(content) if site is keep else []
        kids[site.index:site.index + 1] = replacement


def _log_usage(result: TranslationResult) -> None:
    if result.usage is None:
        return
    u = result.usage
    logger.info("Tokens used: %d prompt + %d completion = %d total", u.input_tokens, u.output_tokens, u.total)


class LanguageBlockResolver:

    def __init__(self, translator: Translator, diagnostics: Diagnostics, *, threshold: float = DEFAULT_THRESHOLD):
        self.translator = translator
        self.diagnostics = diagnostics
        self.threshold = threshold

    async def resolve(self, root: Root, target: str, source: str = "") -> Outcome:
        """
        Rewrite `root` in place for `target`.

        Args:
            root: Parsed document (frontmatter already stripped)
            target: Requested language code, compared case-insensitively
            source: File name used in log messages and diagnostics

        Returns:
            Which path was taken
        """
        sites = scan_blocks(root)
        if not sites:
            return await self._legacy(root, target, source)

        chosen = next((s for s in sites if same_lang(s.lang, target)), None)
        if chosen is not None:
            logger.info("Using existing '%s' block for %s", target, source)
            _apply(sites, chosen, chosen.block.children)
            return "selected"

        return await self._fallback(sites, target, source)

    async def _fallback(self, sites: List[BlockSite], target: str, source: str) -> Outcome:
        fallback = sites[0]
        logger.info(
            "Target language '%s' not found in blocks of %s. Translating fallback '%s' block...",
            target, source, fallback.lang,
        )
        text = serialize(Root(children=list(fallback.block.children)))
        result = await self.translator.translate(text, target)
        if result is None:
            self.diagnostics.warn(
                logger, "translation-failed",
                f"Translation to '{target}' failed. Using fallback language block '{fallback.lang}' as-is.",
                file=source or None,
            )
            _apply(sites, fallback, fallback.block.children)
            return "fallback-original"

        _log_usage(result)
        _apply(sites, fallback, parse_markdown(result.text).children)
        return "fallback-translated"

    async def _legacy(self, root: Root, target: str, source: str) -> Outcome:
        chunks = collect_prose(root)
        if not has_prose(chunks):
            logger.info("Aggregator detected (no translatable prose). Skipping translation for '%s'.", target)
            return "legacy-aggregator"

        found = detect(" ".join(chunks))
        if found is not None and found.confidence > self.threshold and found.matches(target):
            logger.info(
                "Detected source is already '%s' (score: %.0f%%). Skipping translation.",
                target, found.confidence * 100,
            )
            return "legacy-already-target"

        logger.info("Legacy module detected. Translating the entire content of %s to '%s'...", source, target)
        result = await self.translator.translate(serialize(root), target)
        if result is None:
            self.diagnostics.warn(
                logger, "translation-failed",
                f"Translation of legacy module to '{target}' failed. Proceeding with original content.",
                file=source or None,
            )
            return "legacy-untranslated"

        _log_usage(result)
        root.children[:] = parse_markdown(result.text).children
        return "legacy-translated"


__all__ = ["Outcome", "BlockSite", "scan_blocks", "LanguageBlockResolver"]
