from __future__ import annotations

import re
from typing import Dict, List, Optional, Sequence

from .nodes import (
    BlockQuote,
    Code,
    Container,
    Frontmatter,
    Heading,
    Html,
    Link,
    ListBlock,
    ListItem,
    Node,
    Paragraph,
    Root,
    Text,
    ThematicBreak,
)

_NEEDS_ANGLE = re.compile(r"[\s()<>]")
_BARE_ATTR = re.compile(r"^[A-Za-z0-9_\-:]+$")


def _indent(text: str, first: str, rest: str) -> str:
    out: List[str] = []
    for n, ln in enumerate(text.split("\n")):
        prefix = first if n == 0 else rest
        out.append(prefix + ln if ln else prefix.rstrip())
    return "\n".join(out)


def _container_depth(node: Node) -> int:
    """Nesting depth of containers strictly inside node."""
    best = 0
    for child in getattr(node, "children", None) or []:
        if isinstance(child, Container):
            best = max(best, 1 + _container_depth(child))
        else:
            best = max(best, _container_depth(child))
    return best


def _attrs(attrs: Dict[str, str]) -> str:
    if not attrs:
        return ""
    parts: List[str] = []
    for k, v in attrs.items():
        if v == "":
            parts.append(k)
        elif k == "id" and _BARE_ATTR.match(v):
            parts.append(f"#{v}")
        else:
            parts.append(f'{k}="{v}"')
    return "{" + " ".join(parts) + "}"


class _Serializer:

    def inline(self, nodes: Sequence[Node]) -> str:
        out: List[str] = []
        after_block = False
        for n in nodes:
            if isinstance(n, (Text, Link)):
                if after_block:
                    out.append("\n")
                out.append(n.value if isinstance(n, Text) else self.link(n))
                after_block = False
            else:
                # block content spliced into a paragraph; kept on its own lines
                if out and not out[-1].endswith("\n"):
                    out.append("\n")
                out.append(self.block(n))
                after_block = True
        return "".join(out)

    def link(self, n: Link) -> str:
        url = f"<{n.url}>" if _NEEDS_ANGLE.search(n.url) else n.url
        title = ""
        if n.title:
            escaped = n.title.replace("\\", "\\\\").replace('"', '\\"')
            title = f' "{escaped}"'
        return f"[{self.inline(n.children)}]({url}{title})"

    def blocks(self, nodes: Sequence[Node], *, tight: bool = False) -> str:
        parts: List[str] = []
        prev: Optional[Node] = None
        for n in nodes:
            alt = (
                isinstance(n, ListBlock) and isinstance(prev, ListBlock)
                and n.ordered == prev.ordered and n.marker == prev.marker
            )
            text = self.block(n, alternate=alt)
            if not text:
                continue
            if parts:
                parts.append("\n" if tight and isinstance(n, ListBlock) else "\n\n")
            parts.append(text)
            prev = n
        return "".join(parts)

    def block(self, n: Node, *, alternate: bool = False) -> str:
        if isinstance(n, Frontmatter):
            return f"---\n{n.value}\n---" if n.value else "---\n---"
        if isinstance(n, Heading):
            title = self.inline(n.children).replace("\n", " ")
            return ("#" * n.level + " " + title).rstrip()
        if isinstance(n, Paragraph):
            return self.inline(n.children)
        if isinstance(n, Code):
            return self.code(n)
        if isinstance(n, Html):
            return n.value
        if isinstance(n, ThematicBreak):
            return "***"
        if isinstance(n, BlockQuote):
            return _indent(self.blocks(n.children), "> ", "> ")
        if isinstance(n, ListBlock):
            return self.list(n, alternate=alternate)
        if isinstance(n, ListItem):
            return self.blocks(n.children)
        if isinstance(n, Container):
            return self.container(n)
        if isinstance(n, (Text, Link)):
            return self.inline([n])
        if isinstance(n, Root):
            return self.blocks(n.children)
        raise TypeError(f"Unknown node: {type(n).__name__}")

    def code(self, n: Code) -> str:
        if not n.fence:
            return _indent(n.value, "    ", "    ")
        fence = n.fence
        while fence in n.value:
            fence += fence[0]
        return f"{fence}{n.info}\n{n.value}\n{fence}" if n.value else f"{fence}{n.info}\n{fence}"

    def list(self, n: ListBlock, *, alternate: bool = False) -> str:
        if n.ordered:
            delim = n.marker
            if alternate:
                delim = ")" if delim == "." else "."
        else:
            bullet = n.marker
            if alternate:
                bullet = "*" if bullet == "-" else "-"
        items: List[str] = []
        for idx, item in enumerate(n.children):
            marker = f"{n.start + idx}{delim}" if n.ordered else bullet
            body = self.blocks(item.children, tight=not n.spread)
            pad = " " * (len(marker) + 1)
            items.append(_indent(body, marker + " ", pad) if body else marker)
        return ("\n\n" if n.spread else "\n").join(items)

    def container(self, n: Container) -> str:
        body = self.blocks(n.children)
        if n.syntax == "comment":
            lang = n.attributes.get("lang", n.name)
            inner = f"{body}\n" if body else ""
            return f"<!-- lang:{lang} -->\n{inner}<!-- /lang -->"
        fence = ":" * (3 + _container_depth(n))
        inner = f"{body}\n" if body else ""
        return f"{fence}{n.name}{_attrs(n.attributes)}\n{inner}{fence}"


def serialize(node: Node) -> str:
    """
    Render a tree back to markdown.

    Structure is preserved (container syntax, link syntax, heading levels,
    list markers), not bytes. Non-empty output ends with a newline.
    """
    s = _Serializer()
    text = s.blocks(node.children) if isinstance(node, Root) else s.block(node)
    return text + "\n" if text else ""


__all__ = ["serialize"]
