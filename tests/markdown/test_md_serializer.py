from lync.markdown import parse_markdown, serialize
from lync.markdown.nodes import (
    Container,
    Frontmatter,
    Heading,
    Link,
    ListBlock,
    ListItem,
    Paragraph,
    Root,
    Text,
)


DOC = (
    "# Title\n"
    "\n"
    'Intro with [link](https://x.y "T").\n'
    "\n"
    "- a\n"
    "- b\n"
    "\n"
    "1. one\n"
    "2. two\n"
    "\n"
    "> quote\n"
    "\n"
    "```py\n"
    "code\n"
    "```\n"
    "\n"
    ":::lang=en\n"
    "Hello\n"
    ":::\n"
    "\n"
    "***\n"
)


def test_structure_survives_reparse():
    assert serialize(parse_markdown(DOC)) == DOC


def test_empty_tree_serializes_to_empty_string():
    assert serialize(Root()) == ""


def test_link_title_is_escaped():
    para = Paragraph(children=[Link(url="./a.md", title='say "hi"', children=[Text("a")])])
    out = serialize(Root(children=[para]))
    assert out == '[a](./a.md "say \\"hi\\"")\n'
    assert parse_markdown(out).children[0].children[0].title == 'say "hi"'


def test_url_with_spaces_uses_angle_brackets():
    para = Paragraph(children=[Link(url="./my doc.md", children=[Text("d")])])
    assert serialize(Root(children=[para])) == "[d](<./my doc.md>)\n"


def test_adjacent_lists_alternate_markers():
    def bullet(text):
        return ListBlock(children=[ListItem(children=[Paragraph(children=[Text(text)])])])

    out = serialize(Root(children=[bullet("a"), bullet("b")]))
    assert out == "- a\n\n* b\n"
    again = parse_markdown(out)
    assert len(again.children) == 2


def test_comment_container_keeps_comment_syntax():
    out = serialize(parse_markdown("<!-- lang:en -->\nHello\n<!-- /lang -->\n"))
    assert out == "<!-- lang:en -->\nHello\n<!-- /lang -->\n"


def test_nested_containers_get_longer_fences():
    inner = Container(name="lang=en", children=[Paragraph(children=[Text("x")])])
    outer = Container(name="note", children=[inner])
    assert serialize(Root(children=[outer])) == "::::note\n:::lang=en\nx\n:::\n::::\n"


def test_container_attributes():
    node = Container(name="lang", attributes={"id": "zh", "title": "Chinese text"})
    assert serialize(Root(children=[node])) == ':::lang{#zh title="Chinese text"}\n:::\n'


def test_block_spliced_into_paragraph_stays_on_own_lines():
    para = Paragraph(children=[
        Text("See "),
        Heading(level=1, children=[Text("H")]),
        Text(" end"),
    ])
    out = serialize(Root(children=[para]))
    assert "\n# H\n" in out


def test_code_fence_grows_past_inner_backticks():
    out = serialize(parse_markdown("````\n```\ninner\n```\n````\n"))
    assert out == "````\n```\ninner\n```\n````\n"


def test_frontmatter_node():
    assert serialize(Root(children=[Frontmatter(value="a: 1")])) == "---\na: 1\n---\n"
