from __future__ import annotations

import hashlib
import logging
from typing import Optional

import requests

from ..errors import FetchError

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 30.0


def fetch_markdown(url: str, *, session: Optional[requests.Session] = None, timeout: float = DEFAULT_TIMEOUT) -> str:
    """
    Fetch remote markdown. Fail fast: no retries.

    Raises:
        FetchError: transport error or non-2xx response
    """
    http = session or requests.Session()
    logger.debug("GET %s", url)
    try:
        resp = http.get(url, timeout=timeout)
    except requests.RequestException as e:
        raise FetchError(f"Failed to fetch {url}: {e}") from e
    if not resp.ok:
        raise FetchError(f"Failed to fetch {url}: {resp.status_code} {resp.reason}")
    # text/* without charset would otherwise decode as ISO-8859-1
    if "charset" not in resp.headers.get("content-type", "").lower():
        resp.encoding = "utf-8"
    return resp.text


def compute_hash(content: str) -> str:
    """SHA-256 hex digest of the UTF-8 encoded content."""
    return hashlib.sha256(content.encode("utf-8")).hexdigest()


__all__ = ["fetch_markdown", "compute_hash", "DEFAULT_TIMEOUT"]
