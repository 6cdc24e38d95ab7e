from .client import ChatClient, LLMSettings, TokenUsage, resolve_llm_settings
from .translator import LLMTranslator, TranslationResult, Translator
from .verify import VerificationCache, Verifier

__all__ = [
    "ChatClient",
    "LLMSettings",
    "TokenUsage",
    "resolve_llm_settings",
    "LLMTranslator",
    "TranslationResult",
    "Translator",
    "VerificationCache",
    "Verifier",
]
