from pathlib import Path

from lync.diagnostics import Diagnostics
from lync.imports import collect_imports, relative_url, strip_link_directive
from lync.markdown import parse_markdown

from tests.infrastructure import compile_sync, lock_modules, make_compiler, write


def test_reference_link_relative_to_output_dir(project: Path):
    lock_modules(project, {"guide": "# Guide\n"})
    src = write(project / "main.lync.md", 'See [Guide](lync:guide "@import:link").\n')

    out = compile_sync(make_compiler(project), src, project / "dist" / "main.md")

    assert out == "See [Guide](../.lync/guide.md).\n"


def test_reference_link_without_output_is_relative_to_project_root(project: Path):
    lock_modules(project, {"guide": "# Guide\n"})
    src = write(project / "docs" / "main.lync.md", '[Guide](lync:guide "@import:link")\n')

    out = compile_sync(make_compiler(project), src)

    assert out == "[Guide](./.lync/guide.md)\n"


def test_reference_link_keeps_human_title(project: Path):
    lock_modules(project, {"guide": "# Guide\n"})
    src = write(project / "main.lync.md", '[Guide](lync:guide "@import:link Read this first")\n')

    out = compile_sync(make_compiler(project), src)

    assert out == '[Guide](./.lync/guide.md "Read this first")\n'


def test_reference_link_to_explicit_destination(project: Path):
    lock_modules(project, {"guide": "# Guide\n"}, dests={"guide": "vendor/guide.md"})
    src = write(project / "main.lync.md", '[Guide](lync:guide "@import:link")\n')

    out = compile_sync(make_compiler(project), src, project / "out" / "main.md")

    assert out == "[Guide](../vendor/guide.md)\n"


def test_relative_reference_and_inline(project: Path):
    write(project / "parts" / "intro.md", "Intro text.\n")
    src = write(
        project / "main.lync.md",
        '[Intro](./parts/intro.md "@import:link")\n'
        "\n"
        '[i](./parts/intro.md "@import:inline")\n',
    )

    out = compile_sync(make_compiler(project), src, project / "dist" / "main.md")

    assert out == "[Intro](../parts/intro.md)\n\nIntro text.\n"


def test_inline_import_replaces_list_item_paragraph(project: Path):
    lock_modules(project, {"greet": "# Hello\n\nWorld!\n"})
    src = write(project / "main.lync.md", '- [G](lync:greet "@import:inline")\n- other\n')

    out = compile_sync(make_compiler(project), src)

    assert out == "- # Hello\n\n  World!\n- other\n"


def test_inline_import_with_surrounding_text_is_spliced(project: Path):
    lock_modules(project, {"snippet": "**bold** text\n"})
    src = write(project / "main.lync.md", 'Before [G](lync:snippet "@import:inline") after.\n')

    out = compile_sync(make_compiler(project), src)

    assert out.startswith("Before")
    assert "**bold** text" in out
    assert out.rstrip().endswith("after.")
    assert "lync:snippet" not in out


def test_sibling_inline_imports_keep_document_order(project: Path):
    lock_modules(project, {"a": "A1\n\nA2\n", "b": "B\n"})
    src = write(
        project / "main.lync.md",
        "# Top\n"
        "\n"
        '[A](lync:a "@import:inline")\n'
        "\n"
        "middle\n"
        "\n"
        '[B](lync:b "@import:inline")\n',
    )

    out = compile_sync(make_compiler(project), src)

    assert out == "# Top\n\nA1\n\nA2\n\nmiddle\n\nB\n"


def test_unrecognized_directive_is_reported_and_kept(project: Path):
    src = write(project / "main.lync.md", '[X](lync:x "@import:foo")\n')
    compiler = make_compiler(project)

    out = compile_sync(compiler, src)

    assert out == '[X](lync:x "@import:foo")\n'
    found = compiler.diagnostics.of("unrecognized-directive")
    assert len(found) == 1
    assert "lync:x" in found[0].message


def test_non_import_links_are_untouched(project: Path):
    text = (
        '[web](https://example.com/a.md "@import:inline")\n'
        "\n"
        "[plain](./notes.md)\n"
    )
    src = write(project / "main.lync.md", text)
    compiler = make_compiler(project)

    assert compile_sync(compiler, src) == text
    assert compiler.diagnostics.items == []


def test_collect_imports_records_positions():
    tree = parse_markdown(
        '[A](lync:a "@import:inline")\n'
        "\n"
        'x [B](lync:b "@import:inline") y\n'
        "\n"
        '[C](lync:c "@import:link")\n'
    )
    links, inlines = collect_imports(tree, Diagnostics())

    assert [l.url for l in links] == ["lync:c"]
    assert [s.link.url for s in inlines] == ["lync:a", "lync:b"]
    first, second = inlines
    assert first.replaces_paragraph and first.parent_index == 0
    assert not second.replaces_paragraph and second.link_index == 1


def test_relative_url_and_title_helpers(tmp_path: Path):
    assert relative_url(tmp_path / "a" / "b.md", tmp_path) == "./a/b.md"
    assert relative_url(tmp_path / "b.md", tmp_path / "x" / "y") == "../../b.md"
    assert strip_link_directive("@import:link") is None
    assert strip_link_directive("Docs @import:link") == "Docs"
    assert strip_link_directive(None) is None
