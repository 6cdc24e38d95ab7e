"""
In-memory stand-in for requests.Session.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional, Tuple

import requests


class FakeResponse:

    def __init__(self, status_code: int = 200, text: str = "", *, json_body: Any = None,
                 headers: Optional[Dict[str, str]] = None, reason: str = "OK"):
        self.status_code = status_code
        self.text = text
        self.reason = reason
        self.headers = headers if headers is not None else {"content-type": "text/plain; charset=utf-8"}
        self.encoding: Optional[str] = None
        self._json = json_body

    @property
    def ok(self) -> bool:
        return 200 <= self.status_code < 300

    def json(self) -> Any:
        return self._json

    def raise_for_status(self) -> None:
        if not self.ok:
            raise requests.HTTPError(f"{self.status_code} {self.reason}")


class FakeSession:
    """
    GET serves `pages` (url → text, missing url → 404); POST answers with
    queued responses. All requests are recorded.
    """

    def __init__(self, pages: Optional[Dict[str, str]] = None, *, post_replies: Optional[List[FakeResponse]] = None):
        self.pages = dict(pages or {})
        self.post_replies = list(post_replies or [])
        self.gets: List[str] = []
        self.posts: List[Tuple[str, Dict[str, Any], Dict[str, str]]] = []

    def get(self, url: str, timeout: float = 0) -> FakeResponse:
        self.gets.append(url)
        if url not in self.pages:
            return FakeResponse(404, "", reason="Not Found")
        return FakeResponse(200, self.pages[url])

    def post(self, url: str, json: Dict[str, Any], headers: Dict[str, str], timeout: float = 0) -> FakeResponse:
        self.posts.append((url, json, headers))
        if not self.post_replies:
            raise requests.ConnectionError("no reply queued")
        return self.post_replies.pop(0)


def chat_reply(text: str, *, prompt_tokens: int = 10, completion_tokens: int = 5) -> FakeResponse:
    return FakeResponse(200, json_body={
        "choices": [{"message": {"role": "assistant", "content": text}}],
        "usage": {
            "prompt_tokens": prompt_tokens,
            "completion_tokens": completion_tokens,
            "total_tokens": prompt_tokens + completion_tokens,
        },
    })


__all__ = ["FakeResponse", "FakeSession", "chat_reply"]
