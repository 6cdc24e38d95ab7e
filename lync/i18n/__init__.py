from .detect import detect_language
from .resolver import LanguageBlockResolver, scan_blocks
from .tags import block_lang, extract_target_langs

__all__ = ["detect_language", "LanguageBlockResolver", "scan_blocks", "block_lang", "extract_target_langs"]
