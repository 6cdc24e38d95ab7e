"""
Minimal OpenAI-compatible chat/completions client.

Settings priority:
  1. environment (LYNC_LLM_API_KEY / OPENAI_API_KEY, LYNC_LLM_BASE_URL, LYNC_LLM_MODEL)
  2. .lyncrc (local over global)
  3. defaults (model gpt-4o, OpenAI endpoint)
An explicit model override (e.g. `--model`) beats all of them.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from typing import Any, Dict, List, Mapping, Optional

import requests

from ..config import RcConfig, load_rc
from ..errors import ConfigError

logger = logging.getLogger(__name__)

DEFAULT_MODEL = "gpt-4o"
DEFAULT_BASE_URL = "https://api.openai.com/v1"
DEFAULT_TIMEOUT = 120.0


@dataclass(frozen=True)
class TokenUsage:
    input_tokens: int = 0
    output_tokens: int = 0
    total_tokens: Optional[int] = None

    @property
    def total(self) -> int:
        return self.total_tokens if self.total_tokens is not None else self.input_tokens + self.output_tokens


@dataclass(frozen=True)
class ChatResult:
    text: str
    usage: Optional[TokenUsage] = None


@dataclass(frozen=True)
class LLMSettings:
    api_key: Optional[str]
    base_url: Optional[str]
    model: str


def resolve_llm_settings(
        model_override: Optional[str] = None,
        *,
        rc: Optional[RcConfig] = None,
        env: Optional[Mapping[str, str]] = None,
) -> LLMSettings:
    env = os.environ if env is None else env
    llm = (rc if rc is not None else load_rc()).llm
    return LLMSettings(
        api_key=env.get("LYNC_LLM_API_KEY") or env.get("OPENAI_API_KEY") or llm.api_key,
        base_url=env.get("LYNC_LLM_BASE_URL") or llm.base_url,
        model=model_override or env.get("LYNC_LLM_MODEL") or llm.model or DEFAULT_MODEL,
    )


def _usage(raw: Any) -> Optional[TokenUsage]:
    if not isinstance(raw, dict):
        return None
    return TokenUsage(
        input_tokens=int(raw.get("prompt_tokens") or 0),
        output_tokens=int(raw.get("completion_tokens") or 0),
        total_tokens=raw.get("total_tokens"),
    )


class ChatClient:
    """Blocking client; async callers wrap `complete` in asyncio.to_thread."""

    def __init__(self, settings: LLMSettings, *, session: Optional[requests.Session] = None,
                 timeout: float = DEFAULT_TIMEOUT):
        if not settings.api_key:
            raise ConfigError(
                "LLM API Key is missing. Please set LYNC_LLM_API_KEY or OPENAI_API_KEY "
                "in your environment, or configure `llm.apiKey` in .lyncrc."
            )
        self.settings = settings
        self.session = session or requests.Session()
        self.timeout = timeout

    @property
    def endpoint(self) -> str:
        return (self.settings.base_url or DEFAULT_BASE_URL).rstrip("/") + "/chat/completions"

    def complete(self, prompt: str, *, system: Optional[str] = None,
                 temperature: Optional[float] = None) -> ChatResult:
        messages: List[Dict[str, str]] = []
        if system:
            messages.append({"role": "system", "content": system})
        messages.append({"role": "user", "content": prompt})

        payload: Dict[str, Any] = {"model": self.settings.model, "messages": messages}
        if temperature is not None:
            payload["temperature"] = temperature

        logger.debug("POST %s (model=%s)", self.endpoint, self.settings.model)
        resp = self.session.post(
            self.endpoint,
            json=payload,
            headers={"Authorization": f"Bearer {self.settings.api_key}"},
            timeout=self.timeout,
        )
        resp.raise_for_status()
        body = resp.json()
        try:
            text = body["choices"][0]["message"]["content"] or ""
        except (KeyError, IndexError, TypeError) as e:
            raise ValueError(f"Unexpected chat/completions response: {body!r}") from e
        return ChatResult(text=text, usage=_usage(body.get("usage")))


__all__ = [
    "DEFAULT_MODEL",
    "TokenUsage",
    "ChatResult",
    "LLMSettings",
    "resolve_llm_settings",
    "ChatClient",
]
