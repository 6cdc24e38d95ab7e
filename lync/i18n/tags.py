from __future__ import annotations

import re
from pathlib import Path
from typing import List, Optional

from ..markdown.nodes import Container, Node
from ..markdown.parser import parse_markdown
from ..markdown.visit import walk

# zh, en, zh-CN, pt_BR; three-letter names (tip, faq) are not bare codes
_LANG_CODE = re.compile(r"^[A-Za-z]{2}(?:[-_][A-Za-z0-9]{2,8})*$")


def block_lang(node: Node) -> Optional[str]:
    """
    Language code of a language-tagged container, None for other nodes.

    Recognized forms:
      • `:::lang=zh-CN`
      • `:::lang{id=en}` / `:::lang{lang=en}` / `:::lang{en}`
      • `:::ja` (bare language code)
      • `<!-- lang:xx -->` … `<!-- /lang -->` (folded by the parser)
    """
    if not isinstance(node, Container):
        return None
    name = node.name
    if name.startswith("lang="):
        return name[len("lang="):] or None
    if name == "lang":
        attrs = node.attributes
        code = attrs.get("id") or attrs.get("lang") or next(iter(attrs), "")
        return code or None
    if _LANG_CODE.match(name):
        return name
    return None


def same_lang(a: str, b: str) -> bool:
    return a.lower() == b.lower()


def language_blocks(root: Node) -> List[Container]:
    """Language-tagged containers in document order (outer before inner)."""
    return [n for n, _ in walk(root) if block_lang(n) is not None]  # type: ignore[misc]


def extract_target_langs(path: Path) -> List[str]:
    """
    Unique language codes declared in a file, in document order.
    Codes differing only in case count once; the first spelling wins.

    Used by builds to fan out one output per language. Missing file → [].
    """
    if not path.is_file():
        return []
    root = parse_markdown(path.read_text(encoding="utf-8"))
    langs: List[str] = []
    for block in language_blocks(root):
        code = block_lang(block)
        if code and not any(same_lang(code, seen) for seen in langs):
            langs.append(code)
    return langs


__all__ = ["block_lang", "same_lang", "language_blocks", "extract_target_langs"]
