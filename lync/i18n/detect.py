"""
Language identification for untagged (legacy) modules.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple

from langdetect import DetectorFactory, detect_langs
from langdetect.lang_detect_exception import LangDetectException

from ..markdown.nodes import Link, Node, Text
from ..markdown.visit import walk

logger = logging.getLogger(__name__)

# deterministic results across runs
DetectorFactory.seed = 0

DEFAULT_THRESHOLD = 0.4
SAMPLE_CHARS = 5000

# detector code → target codes it satisfies (first one is canonical)
LANG_TARGETS: Dict[str, Tuple[str, ...]] = {
    "zh-cn": ("zh", "zh-cn", "zh-tw", "zh-hk"),
    "zh-tw": ("zh", "zh-cn", "zh-tw", "zh-hk"),
    "en": ("en", "en-us", "en-gb"),
    "ja": ("ja",),
    "es": ("es",),
    "fr": ("fr",),
    "de": ("de",),
    "ru": ("ru",),
    "ko": ("ko",),
    "it": ("it",),
    "pt": ("pt", "pt-br"),
}

# Latin letters, digits, CJK ideographs, kana, hangul
_PROSE_CHAR = re.compile(r"[a-zA-Z0-9\u4e00-\u9fa5\u3040-\u30ff\uac00-\ud7a3]")


@dataclass(frozen=True)
class Detection:
    code: str           # detector code, e.g. "en", "zh-cn"
    confidence: float

    def matches(self, target: str) -> bool:
        return target.lower() in LANG_TARGETS.get(self.code, ())


def collect_prose(root: Node) -> List[str]:
    """Text values outside of links (link labels are structure, not prose)."""
    out: List[str] = []
    for node, ancestors in walk(root):
        if isinstance(node, Text) and not any(isinstance(a, Link) for a in ancestors):
            if node.value:
                out.append(node.value)
    return out


def has_prose(chunks: List[str]) -> bool:
    return any(_PROSE_CHAR.search(c) for c in chunks)


def detect(text: str) -> Optional[Detection]:
    """Top guess for the first SAMPLE_CHARS characters; None when undecidable."""
    sample = text[:SAMPLE_CHARS]
    if not _PROSE_CHAR.search(sample):
        return None
    try:
        guesses = detect_langs(sample)
    except LangDetectException as e:
        logger.debug("Language detection failed: %s", e)
        return None
    if not guesses:
        return None
    top = guesses[0]
    return Detection(code=top.lang, confidence=float(top.prob))


def detect_language(text: str, threshold: float = DEFAULT_THRESHOLD) -> Optional[str]:
    """
    Canonical target code (`en`, `zh`, ...) of the text when the detector is
    confident enough, otherwise None.
    """
    found = detect(text)
    if found is None or found.confidence <= threshold:
        return None
    targets = LANG_TARGETS.get(found.code)
    return targets[0] if targets else None


__all__ = [
    "DEFAULT_THRESHOLD",
    "LANG_TARGETS",
    "Detection",
    "collect_prose",
    "has_prose",
    "detect",
    "detect_language",
]
