"""
Compilation orchestrator.

    cycle check → read → parse → strip frontmatter → language blocks
    → imports (links, then inline expansions compiled recursively)
    → serialize

Writing results and fanning out over target languages belong to callers.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional

from .deps.lock import DependencyLookup
from .diagnostics import Diagnostics
from .errors import CircularImportError
from .i18n.resolver import LanguageBlockResolver
from .imports.resolver import ImportResolver
from .llm.translator import LLMTranslator, Translator
from .markdown import parse_markdown, serialize, strip_frontmatter

logger = logging.getLogger(__name__)


@dataclass
class CallStack:
    """
    Files currently being compiled in one top-level request, outermost first.

    Ordered so cycle reports show the full import chain.
    """
    _entries: Dict[str, None] = field(default_factory=dict)

    def __contains__(self, key: str) -> bool:
        return key in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def push(self, key: str) -> None:
        self._entries[key] = None

    def pop(self, key: str) -> None:
        self._entries.pop(key, None)

    def chain(self) -> List[str]:
        return list(self._entries)


class Compiler:
    """
    Compiles lync modules.

    Owns the diagnostics of its runs; the dependency lookup is read-only.
    One instance may compile many files sequentially.
    """

    def __init__(
            self,
            lookup: DependencyLookup,
            *,
            translator: Optional[Translator] = None,
            diagnostics: Optional[Diagnostics] = None,
    ):
        self.lookup = lookup
        self.diagnostics = diagnostics if diagnostics is not None else Diagnostics()
        self.translator: Translator = translator if translator is not None else LLMTranslator()
        self.languages = LanguageBlockResolver(self.translator, self.diagnostics)
        self.imports = ImportResolver(lookup, self.diagnostics)

    @classmethod
    def for_project(cls, root: Path, *, translator: Optional[Translator] = None) -> Compiler:
        """Compiler over the lock file of the project at root."""
        return cls(DependencyLookup.load(root), translator=translator)

    async def compile_file(
            self,
            path: Path,
            out_path: Optional[Path] = None,
            call_stack: Optional[CallStack] = None,
            target_lang: Optional[str] = None,
    ) -> str:
        """
        Compile one file to markdown text.

        Args:
            path: Source file
            out_path: Where the result will be written; reference imports are
                made relative to its directory (project root when None)
            call_stack: In-flight files of the current request; a fresh one
                is created for top-level calls
            target_lang: Language to normalize language blocks to

        Raises:
            CircularImportError: path is already being compiled
            UnresolvedAliasError: an import alias is not locked
            MissingImportFileError: an inline import target is not on disk
        """
        stack = call_stack if call_stack is not None else CallStack()
        key = str(Path(path).resolve())
        if key in stack:
            raise CircularImportError(chain=stack.chain(), path=key)

        stack.push(key)
        try:
            source = Path(key)
            logger.debug("Compiling %s (lang=%s, depth=%d)", source, target_lang, len(stack))
            tree = parse_markdown(source.read_text(encoding="utf-8"))
            strip_frontmatter(tree)

            if target_lang:
                await self.languages.resolve(tree, target_lang, key)

            async def compile_sub(sub: Path) -> str:
                return await self.compile_file(sub, out_path, stack, target_lang)

            await self.imports.resolve(tree, source, out_path, stack.chain(), compile_sub)
        finally:
            stack.pop(key)

        return serialize(tree)


__all__ = ["CallStack", "Compiler"]
