"""
Seal plain markdown files into lync modules.

Sealing injects `lync: {alias, version}` frontmatter, wraps the body in a
`<!-- lang:xx -->` block (explicit or detected language) and renames the
file to `<name>.lync.md`.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Callable, List, Optional, Sequence

from .config.paths import SOURCE_SUFFIX
from .deps.alias import alias_from_segments, normalize_alias
from .i18n.detect import detect_language
from .markdown import read_frontmatter, render_frontmatter

logger = logging.getLogger(__name__)

MODULE_VERSION = "1.0.0"


def expand_patterns(root: Path, patterns: Sequence[str]) -> List[Path]:
    """Files matching any of the glob patterns (relative to root), de-duplicated."""
    seen: List[Path] = []
    for pattern in patterns:
        p = Path(pattern)
        matches = ([p] if p.exists() else []) if p.is_absolute() else sorted(root.glob(pattern))
        for m in matches:
            m = m.resolve()
            if m.is_file() and m not in seen:
                seen.append(m)
    return seen


def infer_module_alias(path: Path) -> str:
    segments = path.relative_to(path.anchor).parts
    found = alias_from_segments(segments)
    return normalize_alias(found) if found else "unnamed-module"


def wrap_lang(body: str, lang: str) -> str:
    return f"\n<!-- lang:{lang} -->\n{body.strip()}\n<!-- /lang -->\n"


def seal_file(
        path: Path,
        *,
        alias: Optional[str] = None,
        lang: Optional[str] = None,
        detect: Callable[[str], Optional[str]] = detect_language,
) -> Optional[Path]:
    """
    Seal one file in place (renamed to `<name>.lync.md`).

    Returns:
        Path of the sealed module, or None when the file already carries
        lync frontmatter.
    """
    raw = path.read_text(encoding="utf-8")
    data, body = read_frontmatter(raw)
    if data and "lync" in data:
        logger.warning("File '%s' already contains Lync frontmatter.", path.name)
        return None

    alias = alias or infer_module_alias(path)
    meta = dict(data or {})
    meta["lync"] = {"alias": alias, "version": MODULE_VERSION}

    if "<!-- lang:" not in body:
        code = lang or detect(body)
        if code:
            body = wrap_lang(body, code)
            logger.info("Auto-wrapped content in '%s' block.", code)

    target = path.with_name(path.name.split(".")[0] + SOURCE_SUFFIX)
    target.write_text(render_frontmatter(meta, body), encoding="utf-8")

    if target != path:
        path.unlink()
        logger.info("Sealed module! Renamed to '%s' and injected frontmatter (alias: '%s').", target.name, alias)
    else:
        logger.info("Sealed module! Injected frontmatter into '%s' (alias: '%s').", path.name, alias)
    return target


def seal_files(root: Path, patterns: Sequence[str], *, alias: Optional[str] = None,
               lang: Optional[str] = None) -> List[Path]:
    """
    Seal every file matching patterns.

    Raises:
        ValueError: no pattern given or nothing matched
    """
    if not patterns:
        raise ValueError("Please specify at least one file or pattern to seal.")
    files = expand_patterns(root, patterns)
    if not files:
        raise ValueError("No files matched the given patterns.")
    sealed: List[Path] = []
    for f in files:
        result = seal_file(f, alias=alias, lang=lang)
        if result is not None:
            sealed.append(result)
    return sealed


__all__ = ["MODULE_VERSION", "expand_patterns", "infer_module_alias", "wrap_lang", "seal_file", "seal_files"]
