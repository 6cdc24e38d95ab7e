"""
Markdown document tree.

A closed set of node kinds. Containers own an ordered list of children;
the tree is mutated in place by the rewrite passes and serialized once.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Literal, Optional, Union

IMPORT_INLINE = "@import:inline"
IMPORT_LINK = "@import:link"

Directive = Literal["inline", "link", ""]


# ---------- inline ----------

@dataclass(eq=False)
class Text:
    """Raw inline markdown (emphasis, code spans, images are kept verbatim)."""
    value: str


@dataclass(eq=False)
class Link:
    url: str
    title: Optional[str] = None
    children: List[InlineNode] = field(default_factory=list)

    @property
    def directive(self) -> Directive:
        t = self.title or ""
        if IMPORT_INLINE in t:
            return "inline"
        if IMPORT_LINK in t:
            return "link"
        return ""


InlineNode = Union[Text, Link]


# ---------- blocks ----------

@dataclass(eq=False)
class Frontmatter:
    value: str                              # raw YAML between the fences
    data: Dict[str, Any] = field(default_factory=dict)


@dataclass(eq=False)
class Heading:
    level: int                              # 1..6
    children: List[InlineNode] = field(default_factory=list)


@dataclass(eq=False)
class Paragraph:
    children: List[InlineNode] = field(default_factory=list)


@dataclass(eq=False)
class Code:
    value: str
    info: str = ""
    fence: str = "```"                      # "" for indented code


@dataclass(eq=False)
class Html:
    value: str


@dataclass(eq=False)
class ThematicBreak:
    pass


@dataclass(eq=False)
class BlockQuote:
    children: List[BlockNode] = field(default_factory=list)


@dataclass(eq=False)
class ListItem:
    children: List[BlockNode] = field(default_factory=list)


@dataclass(eq=False)
class ListBlock:
    ordered: bool = False
    start: int = 1
    marker: str = "-"                       # "-", "*", "+" or "." / ")" for ordered
    spread: bool = False                    # blank lines between items
    children: List[ListItem] = field(default_factory=list)


ContainerSyntax = Literal["directive", "comment"]


@dataclass(eq=False)
class Container:
    """
    Fenced container region.

    `:::name{k=v}` … `:::` for directives; `<!-- lang:xx -->` … `<!-- /lang -->`
    comment markers are folded into a container with syntax="comment".
    """
    name: str
    attributes: Dict[str, str] = field(default_factory=dict)
    children: List[BlockNode] = field(default_factory=list)
    syntax: ContainerSyntax = "directive"


BlockNode = Union[
    Frontmatter, Heading, Paragraph, Code, Html, ThematicBreak,
    BlockQuote, ListBlock, Container,
]


@dataclass(eq=False)
class Root:
    children: List[BlockNode] = field(default_factory=list)


Node = Union[Root, BlockNode, ListItem, InlineNode]


def children_of(node: Node) -> Optional[list]:
    """Owned children list of a parent node, None for leaves."""
    return getattr(node, "children", None)


__all__ = [
    "IMPORT_INLINE",
    "IMPORT_LINK",
    "Directive",
    "Text",
    "Link",
    "InlineNode",
    "Frontmatter",
    "Heading",
    "Paragraph",
    "Code",
    "Html",
    "ThematicBreak",
    "BlockQuote",
    "ListItem",
    "ListBlock",
    "Container",
    "ContainerSyntax",
    "BlockNode",
    "Root",
    "Node",
    "children_of",
]
