import asyncio
import logging
from pathlib import Path

from lync.diagnostics import Diagnostics
from lync.i18n import LanguageBlockResolver, extract_target_langs, scan_blocks
from lync.i18n.tags import block_lang
from lync.llm.client import TokenUsage
from lync.markdown import parse_markdown, serialize

from tests.infrastructure import (
    FailingTranslator,
    StubTranslator,
    compile_sync,
    make_compiler,
    write,
)

BILINGUAL = ":::lang=en\nHello\n:::\n\n:::lang=zh\n你好\n:::\n"

ENGLISH_PROSE = (
    "This document explains how the review assistant should read a pull request, "
    "summarize the intent of the change and point out risky areas. Keep the tone "
    "friendly and concise, and always explain the reasoning behind every remark.\n"
)

CHINESE_PROSE = "这是一个用于代码审查的提示模板。请仔细阅读每一个改动，并用简洁友好的语气给出建议。\n"


def _resolve(text: str, target: str, translator):
    root = parse_markdown(text)
    resolver = LanguageBlockResolver(translator, Diagnostics())
    outcome = asyncio.run(resolver.resolve(root, target, "doc.md"))
    return outcome, serialize(root), resolver.diagnostics


def test_selects_matching_block(project: Path):
    src = write(project / "m.md", BILINGUAL)
    translator = StubTranslator("unused")

    out = compile_sync(make_compiler(project, translator), src, lang="zh")

    assert out == "你好\n"
    assert translator.calls == []


def test_selection_is_case_insensitive():
    outcome, out, _ = _resolve(":::lang=zh-CN\n你好\n:::\n\n:::lang=en\nHi\n:::\n", "zh-cn", FailingTranslator())
    assert outcome == "selected"
    assert out == "你好\n"


def test_fallback_translates_first_block_once(project: Path):
    src = write(project / "m.md", BILINGUAL)
    translator = StubTranslator("Bonjour")

    out = compile_sync(make_compiler(project, translator), src, lang="fr")

    assert out == "Bonjour\n"
    assert translator.calls == [("Hello\n", "fr")]


def test_failed_fallback_keeps_original_block(project: Path):
    src = write(project / "m.md", BILINGUAL)
    compiler = make_compiler(project)

    out = compile_sync(compiler, src, lang="fr")

    assert out == "Hello\n"
    failures = compiler.diagnostics.of("translation-failed")
    assert len(failures) == 1
    assert "'en'" in failures[0].message


def test_duplicate_blocks_first_match_wins():
    text = ":::lang=en\nFirst\n:::\n\n:::lang=en\nSecond\n:::\n"
    outcome, out, _ = _resolve(text, "en", FailingTranslator())
    assert outcome == "selected"
    assert out == "First\n"


def test_surrounding_content_is_kept():
    text = "# Title\n\n:::lang=en\nHi\n:::\n\n:::lang=zh\n你好\n:::\n\nFooter\n"
    _, out, _ = _resolve(text, "zh", FailingTranslator())
    assert out == "# Title\n\n你好\n\nFooter\n"


def test_comment_marker_blocks():
    text = "<!-- lang:en -->\nHello\n<!-- /lang -->\n\n<!-- lang:ja -->\nこんにちは\n<!-- /lang -->\n"
    outcome, out, _ = _resolve(text, "ja", FailingTranslator())
    assert outcome == "selected"
    assert out == "こんにちは\n"


def test_attribute_and_bare_forms():
    text = ":::lang{id=en}\nHello\n:::\n\n:::ja\nこんにちは\n:::\n"
    _, out, _ = _resolve(text, "ja", FailingTranslator())
    assert out == "こんにちは\n"
    _, out, _ = _resolve(text, "en", FailingTranslator())
    assert out == "Hello\n"


def test_non_language_containers_are_not_blocks():
    root = parse_markdown(":::note\nKeep me\n:::\n")
    assert scan_blocks(root) == []
    assert block_lang(root.children[0]) is None


def test_nested_blocks_travel_with_their_parent():
    text = ":::lang=en\nOuter\n\n:::ja\nInner\n:::\n:::\n"
    root = parse_markdown(text)
    assert [s.lang for s in scan_blocks(root)] == ["en"]

    _, out, _ = _resolve(text, "en", FailingTranslator())
    assert out == "Outer\n\n:::ja\nInner\n:::\n"

    translator = StubTranslator("Traduit")
    outcome, out, _ = _resolve(text, "ja", translator)
    assert outcome == "fallback-translated"
    assert translator.calls == [("Outer\n\n:::ja\nInner\n:::\n", "ja")]
    assert out == "Traduit\n"


def test_blocks_inside_other_containers_are_found():
    text = "- item\n\n  :::lang=en\n  Hi\n  :::\n\n  :::lang=de\n  Hallo\n  :::\n"
    _, out, _ = _resolve(text, "de", FailingTranslator())
    assert "Hallo" in out
    assert "Hi" not in out
    assert ":::" not in out


def test_legacy_aggregator_is_not_translated():
    translator = StubTranslator("never")
    outcome, out, _ = _resolve("- [A](./a.md)\n- [B](./b.md)\n", "fr", translator)
    assert outcome == "legacy-aggregator"
    assert translator.calls == []
    assert out == "- [A](./a.md)\n- [B](./b.md)\n"


def test_legacy_already_in_target_language():
    translator = StubTranslator("never")
    outcome, out, _ = _resolve(ENGLISH_PROSE, "en", translator)
    assert outcome == "legacy-already-target"
    assert translator.calls == []
    assert out == ENGLISH_PROSE


def test_legacy_module_is_translated_whole(caplog):
    caplog.set_level(logging.INFO, logger="lync")
    translator = StubTranslator("# Review\n\nRead every change.", usage=TokenUsage(12, 8))

    outcome, out, _ = _resolve(CHINESE_PROSE, "en", translator)

    assert outcome == "legacy-translated"
    assert translator.calls == [(CHINESE_PROSE, "en")]
    assert out == "# Review\n\nRead every change.\n"
    assert "Tokens used: 12 prompt + 8 completion = 20 total" in caplog.text


def test_legacy_translation_failure_keeps_original():
    outcome, out, diagnostics = _resolve(CHINESE_PROSE, "en", FailingTranslator())
    assert outcome == "legacy-untranslated"
    assert out == CHINESE_PROSE
    assert len(diagnostics.of("translation-failed")) == 1


def test_extract_target_langs(tmp_path: Path):
    p = write(
        tmp_path / "m.md",
        ":::lang=en\nA\n:::\n\n<!-- lang:zh-CN -->\nB\n<!-- /lang -->\n\n:::lang=en\nC\n:::\n",
    )
    assert extract_target_langs(p) == ["en", "zh-CN"]
    assert extract_target_langs(tmp_path / "missing.md") == []


def test_admonitions_are_kept_when_selecting(project: Path):
    text = ":::lang=en\nHi\n:::\n\n:::tip\nKeep this tip\n:::\n"
    _, out, _ = _resolve(text, "en", FailingTranslator())
    assert out == "Hi\n\n:::tip\nKeep this tip\n:::\n"

    p = write(project / "p.md", text)
    assert extract_target_langs(p) == ["en"]


def test_extract_target_langs_ignores_case(tmp_path: Path):
    p = write(tmp_path / "m.md", ":::lang=EN\nA\n:::\n\n:::lang=en\nB\n:::\n\n:::zh-cn\nC\n:::\n")
    assert extract_target_langs(p) == ["EN", "zh-cn"]
