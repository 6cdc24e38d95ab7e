"""
Alias inference for new dependencies and sealed modules.

Aliases come from the last meaningful path segment: generic names such as
`readme`, `prompt` or `main` are skipped while walking towards the root.
"""

from __future__ import annotations

import re
from typing import List, Optional, Sequence
from urllib.parse import unquote, urlparse

from ..config import Manifest

GENERIC_NAMES = frozenset({
    # structure & git hosting
    "readme", "index", "main", "default", "master", "refs", "heads", "tree", "blob",
    "base", "about", "info", "doc", "docs",
    "src", "lib", "pkg", "bin", "scripts", "dist", "build",
    # prompt specific
    "prompt", "prompts", "system", "user", "assistant", "template", "instructions", "rules",
    # config
    "config", "settings",
})

_UNSAFE = re.compile(r"[^a-z0-9_-]")


def _stem(name: str) -> str:
    """File name without any extension (`guide.zh-CN.md` → `guide`)."""
    return name.split(".")[0] or name


def normalize_alias(name: str) -> str:
    return _UNSAFE.sub("-", name.lower())


def alias_from_segments(segments: Sequence[str]) -> Optional[str]:
    """
    Last non-generic segment; the file stem when every segment is generic.

    Only the last segment (the file) has its extension stripped.
    """
    parts: List[str] = [s for s in segments if s]
    if not parts:
        return None
    for i in range(len(parts) - 1, -1, -1):
        segment = _stem(parts[i]) if i == len(parts) - 1 else parts[i]
        if segment.lower() not in GENERIC_NAMES:
            return segment
    return _stem(parts[-1])


def alias_from_url(url: str) -> str:
    """
    >>> alias_from_url("https://raw.githubusercontent.com/acme/reviewer/main/README.md")
    'reviewer'
    >>> alias_from_url("https://example.com/")
    'unnamed-dep'
    """
    try:
        path = urlparse(url).path
    except ValueError:
        return "unnamed-dep"
    segments = [unquote(s) for s in path.split("/")]
    return alias_from_segments(segments) or "unnamed-dep"


def unique_alias(manifest: Manifest, alias: str, url: str) -> str:
    """
    Resolve collisions with already declared aliases.

    An alias already pointing at the same url is reused; otherwise
    `-1`, `-2`, ... suffixes are tried.
    """
    candidate = alias
    counter = 1
    while candidate in manifest.dependencies:
        existing_url, _ = manifest.declaration(candidate)
        if existing_url == url:
            break
        candidate = f"{alias}-{counter}"
        counter += 1
    return candidate


__all__ = [
    "GENERIC_NAMES",
    "normalize_alias",
    "alias_from_segments",
    "alias_from_url",
    "unique_alias",
]
