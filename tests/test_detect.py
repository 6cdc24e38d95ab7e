from lync.i18n.detect import Detection, collect_prose, detect, detect_language, has_prose
from lync.markdown import parse_markdown

ENGLISH = (
    "Read the pull request carefully and describe what changed, why it changed, "
    "and which parts deserve a closer look from a human reviewer."
)
CHINESE = "请仔细阅读这个合并请求，说明改动的内容和原因，并指出需要人工重点审查的部分。"


def test_detect_language_canonical_codes():
    assert detect_language(ENGLISH) == "en"
    assert detect_language(CHINESE) == "zh"


def test_detect_without_prose():
    assert detect("--- *** ---") is None
    assert detect_language("") is None


def test_detection_matches_regional_targets():
    zh = Detection(code="zh-cn", confidence=0.99)
    assert zh.matches("zh") and zh.matches("ZH-TW")
    assert not zh.matches("ja")
    assert not Detection(code="xx", confidence=1.0).matches("xx")


def test_collect_prose_skips_link_labels():
    root = parse_markdown("- [Guide](./g.md)\n- [Rules](./r.md)\n")
    assert collect_prose(root) == []
    assert not has_prose(collect_prose(root))

    root = parse_markdown("See [Guide](./g.md) first.\n")
    assert collect_prose(root) == ["See ", " first."]
    assert has_prose(collect_prose(root))


def test_has_prose_ignores_punctuation_only():
    assert not has_prose(["---", " * ", "()"])
    assert has_prose(["こんにちは"])
