from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import Optional, Protocol

import requests

from ..errors import LyncUserError
from .client import ChatClient, LLMSettings, TokenUsage, resolve_llm_settings

logger = logging.getLogger(__name__)

TRANSLATE_SYSTEM_PROMPT = """You are an expert AI localization engine specifically designed for translating Markdown prompt templates.
Your task is to translate the provided Markdown text into the target language: {lang}.

### STRICT RULES:
1. Translate ONLY the natural language instructions and prose.
2. DO NOT translate any Lync import directives (e.g., `[Link](lync:some-alias "@import:inline")`). They must remain exactly as they are.
3. DO NOT translate any code blocks, variable placeholders (e.g., `{{{{variable}}}}`, `${{variable}}`), or JSON structures unless explicitly asked in the prose.
4. Maintain the exact same Markdown formatting, heading levels, lists, and spacing.
5. Do not add any conversational preamble or postscript (like "Here is the translation:"). Output ONLY the translated Markdown."""


@dataclass(frozen=True)
class TranslationResult:
    text: str
    usage: Optional[TokenUsage] = None


class Translator(Protocol):
    """
    Async translation service seen by the compiler.

    Returns None on any failure; callers fall back to untranslated content.
    """

    async def translate(self, text: str, lang: str) -> Optional[TranslationResult]:
        ...


class LLMTranslator:
    """Translator backed by an OpenAI-compatible chat model. No retries."""

    def __init__(self, model: Optional[str] = None, *, settings: Optional[LLMSettings] = None,
                 session: Optional[requests.Session] = None):
        self._model = model
        self._settings = settings
        self._session = session
        self._client: Optional[ChatClient] = None

    def _get_client(self) -> ChatClient:
        if self._client is None:
            settings = self._settings or resolve_llm_settings(self._model)
            self._client = ChatClient(settings, session=self._session)
        return self._client

    async def translate(self, text: str, lang: str) -> Optional[TranslationResult]:
        logger.info("Translating content to %s...", lang)
        try:
            client = self._get_client()
            result = await asyncio.to_thread(
                client.complete,
                text,
                system=TRANSLATE_SYSTEM_PROMPT.format(lang=lang),
                temperature=0.1,
            )
        except (LyncUserError, requests.RequestException, ValueError) as e:
            logger.error("Error calling LLM: %s", e)
            return None
        return TranslationResult(text=result.text.strip(), usage=result.usage)


__all__ = ["TRANSLATE_SYSTEM_PROMPT", "TranslationResult", "Translator", "LLMTranslator"]
