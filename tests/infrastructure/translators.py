"""
Translator stubs: no network, every call is recorded.
"""

from __future__ import annotations

from typing import Callable, Dict, List, Optional, Tuple

from lync.llm.client import TokenUsage
from lync.llm.translator import TranslationResult


class StubTranslator:
    """
    Returns canned translations.

    `reply` is either a fixed string or a function (text, lang) -> str.
    """

    def __init__(self, reply: str | Callable[[str, str], str] = "", *, usage: Optional[TokenUsage] = None):
        self.reply = reply
        self.usage = usage
        self.calls: List[Tuple[str, str]] = []

    async def translate(self, text: str, lang: str) -> Optional[TranslationResult]:
        self.calls.append((text, lang))
        out = self.reply(text, lang) if callable(self.reply) else self.reply
        return TranslationResult(text=out, usage=self.usage)


class FailingTranslator:
    """Every translation fails (service down, no API key, ...)."""

    def __init__(self) -> None:
        self.calls: List[Tuple[str, str]] = []

    async def translate(self, text: str, lang: str) -> Optional[TranslationResult]:
        self.calls.append((text, lang))
        return None


class DictTranslator(StubTranslator):
    """Looks the text up by language; unknown languages fail."""

    def __init__(self, by_lang: Dict[str, str]):
        super().__init__()
        self.by_lang = by_lang

    async def translate(self, text: str, lang: str) -> Optional[TranslationResult]:
        self.calls.append((text, lang))
        if lang not in self.by_lang:
            return None
        return TranslationResult(text=self.by_lang[lang])


__all__ = ["StubTranslator", "FailingTranslator", "DictTranslator"]
