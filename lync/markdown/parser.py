from __future__ import annotations

import re
from typing import Dict, List, NamedTuple, Optional, Tuple

from .frontmatter import load_frontmatter_data
from .inline import parse_inline
from .nodes import (
    BlockNode,
    BlockQuote,
    Code,
    Container,
    Frontmatter,
    Heading,
    Html,
    ListBlock,
    ListItem,
    Paragraph,
    Root,
    ThematicBreak,
)

_ATX = re.compile(r"^ {0,3}(?P<marks>#{1,6})(?:[ \t]+(?P<title>.*?))?(?:[ \t]+#+)?[ \t]*$")
_SETEXT_U = re.compile(r"^ {0,3}=+[ \t]*$")
_SETEXT_L = re.compile(r"^ {0,3}-+[ \t]*$")
_FENCE = re.compile(r"^(?P<indent> {0,3})(?P<fence>`{3,}|~{3,})[ \t]*(?P<info>[^`]*?)[ \t]*$")
_THEMATIC = re.compile(r"^ {0,3}(?:(?:\*[ \t]*){3,}|(?:-[ \t]*){3,}|(?:_[ \t]*){3,})$")
_QUOTE = re.compile(r"^ {0,3}> ?")
_BULLET = re.compile(r"^(?P<indent> {0,3})(?P<marker>[-*+])(?P<space>[ \t]+|$)")
_ORDERED = re.compile(r"^(?P<indent> {0,3})(?P<num>\d{1,9})(?P<delim>[.)])(?P<space>[ \t]+|$)")
_HTML_OPEN = re.compile(r"^ {0,3}(?:<!--|</?[A-Za-z][A-Za-z0-9-]*(?:[\s/>]|$))")
_INDENTED = re.compile(r"^(?: {4}|\t)")
_FRONTMATTER_LINE = re.compile(r"^---[ \t]*$")

# :::name, :::lang=zh-CN, :::lang{id=en}
_DIRECTIVE_OPEN = re.compile(
    r"^ {0,3}(?P<colons>:{3,})[ \t]*(?P<name>[A-Za-z][A-Za-z0-9_\-=.]*)[ \t]*(?:\{(?P<attrs>[^}]*)\})?[ \t]*$"
)
_DIRECTIVE_CLOSE = re.compile(r"^ {0,3}(?P<colons>:{3,})[ \t]*$")
# <!-- lang:xx --> ... <!-- /lang -->
_LANG_COMMENT_OPEN = re.compile(r"^ {0,3}<!--\s*lang:\s*(?P<lang>[A-Za-z0-9_\-]+)\s*-->[ \t]*$")
_LANG_COMMENT_CLOSE = re.compile(r"^ {0,3}<!--\s*/lang\s*-->[ \t]*$")

_ATTR = re.compile(r"""(?P<key>[#.]?[A-Za-z0-9_\-:]+)(?:=(?:"(?P<dq>[^"]*)"|'(?P<sq>[^']*)'|(?P<bare>[^\s"']+)))?""")


def parse_attributes(raw: Optional[str]) -> Dict[str, str]:
    """
    Parse `{...}` directive attributes.

    `#x` → id=x, `.x` → class=x (space-joined), `k=v` / `k="v"`, bare `k` → "".
    """
    attrs: Dict[str, str] = {}
    if not raw:
        return attrs
    for m in _ATTR.finditer(raw):
        key = m.group("key")
        value = next((v for v in (m.group("dq"), m.group("sq"), m.group("bare")) if v is not None), "")
        if key.startswith("#"):
            attrs["id"] = key[1:]
        elif key.startswith("."):
            attrs["class"] = f"{attrs['class']} {key[1:]}" if "class" in attrs else key[1:]
        else:
            attrs[key] = value
    return attrs


def _is_blank(ln: str) -> bool:
    return not ln.strip()


def _indent_width(ln: str) -> int:
    w = 0
    for c in ln:
        if c == " ":
            w += 1
        elif c == "\t":
            w += 4 - (w % 4)
        else:
            break
    return w


def _dedent(ln: str, n: int) -> str:
    """Remove up to n columns of leading indentation."""
    i = 0
    w = 0
    while i < len(ln) and w < n:
        if ln[i] == " ":
            w += 1
        elif ln[i] == "\t":
            w += 4 - (w % 4)
        else:
            break
        i += 1
    return ln[i:]


class _Marker(NamedTuple):
    ordered: bool
    marker: str             # bullet char or ordered delimiter
    start: int
    content_indent: int     # column where item content starts
    first: str              # content of the marker line

    def same_list(self, other: _Marker) -> bool:
        return self.ordered == other.ordered and self.marker == other.marker


def _list_marker(ln: str) -> Optional[_Marker]:
    if _THEMATIC.match(ln):
        return None
    m = _BULLET.match(ln)
    if m:
        ordered, marker, start = False, m.group("marker"), 1
    else:
        m = _ORDERED.match(ln)
        if not m:
            return None
        ordered, marker, start = True, m.group("delim"), int(m.group("num"))
    space = m.group("space")
    head = m.end() - len(space)
    width = len(space.expandtabs(4))
    if not space or width > 4:
        # empty item or indented code right after the marker
        return _Marker(ordered, marker, start, head + 1, ln[head + 1:] if space else "")
    return _Marker(ordered, marker, start, head + width, ln[m.end():])


def _scan_fence_end(lines: List[str], i: int, fence: str) -> int:
    """i is the opening fence line. Returns index of the closing fence line (or len(lines))."""
    close = re.compile(rf"^ {{0,3}}{re.escape(fence[0])}{{{len(fence)},}}[ \t]*$")
    j = i + 1
    while j < len(lines) and not close.match(lines[j]):
        j += 1
    return j


def _scan_region_end(lines: List[str], i: int, is_open, is_close) -> Optional[int]:
    """
    Find the line closing the region opened at i, balancing nested opens
    and skipping fenced code. None when unclosed.
    """
    depth = 1
    j = i + 1
    n = len(lines)
    while j < n:
        fm = _FENCE.match(lines[j])
        if fm:
            j = _scan_fence_end(lines, j, fm.group("fence")) + 1
            continue
        if is_open(lines[j]):
            depth += 1
        elif is_close(lines[j]):
            depth -= 1
            if depth == 0:
                return j
        j += 1
    return None


def _starts_block(ln: str) -> bool:
    """Line interrupts a paragraph."""
    if _ATX.match(ln) or _FENCE.match(ln) or _QUOTE.match(ln) or _THEMATIC.match(ln):
        return True
    if _DIRECTIVE_OPEN.match(ln) or _DIRECTIVE_CLOSE.match(ln) or _HTML_OPEN.match(ln):
        return True
    lm = _list_marker(ln)
    if lm is not None:
        # only non-empty bullets and lists starting at 1 interrupt a paragraph
        return (not lm.ordered or lm.start == 1) and bool(lm.first.strip())
    return False


class _BlockParser:
    """
    Line-oriented block parser.

    Recurses into containers, block quotes and list items on dedented
    line slices.
    """

    def __init__(self, lines: List[str]):
        self.lines = lines
        self.i = 0

    def parse(self) -> List[BlockNode]:
        out: List[BlockNode] = []
        lines = self.lines
        while self.i < len(lines):
            ln = lines[self.i]
            if _is_blank(ln):
                self.i += 1
                continue
            node = (
                self._fenced_code(ln)
                or self._directive(ln)
                or self._lang_comment(ln)
                or self._atx(ln)
                or self._thematic(ln)
                or self._quote(ln)
                or self._list(ln)
                or self._html(ln)
                or self._indented_code(ln)
                or self._paragraph()
            )
            out.append(node)
        return out

    # ---- leaf blocks ----

    def _fenced_code(self, ln: str) -> Optional[Code]:
        m = _FENCE.match(ln)
        if not m:
            return None
        fence = m.group("fence")
        indent = len(m.group("indent"))
        end = _scan_fence_end(self.lines, self.i, fence)
        body = [_dedent(x, indent) for x in self.lines[self.i + 1:end]]
        self.i = min(end + 1, len(self.lines))
        return Code(value="\n".join(body), info=m.group("info").strip(), fence=fence)

    def _indented_code(self, ln: str) -> Optional[Code]:
        if not _INDENTED.match(ln):
            return None
        body: List[str] = []
        j = self.i
        while j < len(self.lines) and (_INDENTED.match(self.lines[j]) or _is_blank(self.lines[j])):
            body.append(_dedent(self.lines[j], 4))
            j += 1
        while body and _is_blank(body[-1]):
            body.pop()
            j -= 1
        self.i = j
        return Code(value="\n".join(body), fence="")

    def _atx(self, ln: str) -> Optional[Heading]:
        m = _ATX.match(ln)
        if not m:
            return None
        self.i += 1
        title = (m.group("title") or "").strip()
        return Heading(level=len(m.group("marks")), children=parse_inline(title))

    def _thematic(self, ln: str) -> Optional[ThematicBreak]:
        if not _THEMATIC.match(ln):
            return None
        self.i += 1
        return ThematicBreak()

    def _html(self, ln: str) -> Optional[Html]:
        if not _HTML_OPEN.match(ln):
            return None
        j = self.i
        if ln.lstrip().startswith("<!--"):
            while j < len(self.lines) and "-->" not in self.lines[j]:
                j += 1
            j = min(j + 1, len(self.lines))
        else:
            while j < len(self.lines) and not _is_blank(self.lines[j]):
                j += 1
        value = "\n".join(self.lines[self.i:j])
        self.i = j
        return Html(value=value)

    def _paragraph(self) -> BlockNode:
        buf = [self.lines[self.i].strip()]
        j = self.i + 1
        while j < len(self.lines):
            ln = self.lines[j]
            if _is_blank(ln):
                break
            if _SETEXT_U.match(ln) or _SETEXT_L.match(ln):
                self.i = j + 1
                level = 1 if _SETEXT_U.match(ln) else 2
                return Heading(level=level, children=parse_inline("\n".join(buf)))
            if _starts_block(ln):
                break
            buf.append(ln.strip())
            j += 1
        self.i = j
        return Paragraph(children=parse_inline("\n".join(buf)))

    # ---- container blocks ----

    def _directive(self, ln: str) -> Optional[Container]:
        m = _DIRECTIVE_OPEN.match(ln)
        if not m:
            return None
        end = _scan_region_end(self.lines, self.i, _DIRECTIVE_OPEN.match, _DIRECTIVE_CLOSE.match)
        stop = end if end is not None else len(self.lines)
        body = self.lines[self.i + 1:stop]
        self.i = stop + 1
        return Container(
            name=m.group("name"),
            attributes=parse_attributes(m.group("attrs")),
            children=_BlockParser(body).parse(),
        )

    def _lang_comment(self, ln: str) -> Optional[Container]:
        m = _LANG_COMMENT_OPEN.match(ln)
        if not m:
            return None
        end = _scan_region_end(self.lines, self.i, _LANG_COMMENT_OPEN.match, _LANG_COMMENT_CLOSE.match)
        if end is None:
            # unpaired marker stays a plain comment
            return None
        body = self.lines[self.i + 1:end]
        self.i = end + 1
        return Container(
            name="lang",
            attributes={"lang": m.group("lang")},
            children=_BlockParser(body).parse(),
            syntax="comment",
        )

    def _quote(self, ln: str) -> Optional[BlockQuote]:
        if not _QUOTE.match(ln):
            return None
        body: List[str] = []
        j = self.i
        while j < len(self.lines):
            cur = self.lines[j]
            qm = _QUOTE.match(cur)
            if qm:
                body.append(cur[qm.end():])
            elif not _is_blank(cur) and body and not _is_blank(body[-1]) and not _starts_block(cur):
                body.append(cur)            # lazy continuation
            else:
                break
            j += 1
        self.i = j
        return BlockQuote(children=_BlockParser(body).parse())

    def _list(self, ln: str) -> Optional[ListBlock]:
        first = _list_marker(ln)
        if first is None:
            return None
        block = ListBlock(ordered=first.ordered, start=first.start, marker=first.marker)
        lines = self.lines
        j = self.i
        saw_gap = False
        while j < len(lines):
            lm = _list_marker(lines[j])
            if lm is None or not lm.same_list(first):
                break
            content_indent = lm.content_indent
            item_lines = [lm.first]
            j += 1
            while j < len(lines):
                cur = lines[j]
                if _is_blank(cur):
                    # blank lines belong to the item only if indented content follows
                    k = j
                    while k < len(lines) and _is_blank(lines[k]):
                        k += 1
                    if k < len(lines) and _indent_width(lines[k]) >= content_indent:
                        item_lines.extend("" for _ in range(j, k))
                        j = k
                        continue
                    break
                if _indent_width(cur) >= content_indent:
                    item_lines.append(_dedent(cur, content_indent))
                elif not _is_blank(item_lines[-1]) and not _starts_block(cur) and _list_marker(cur) is None:
                    item_lines.append(cur.strip())  # lazy continuation
                else:
                    break
                j += 1
            block.children.append(ListItem(children=_BlockParser(item_lines).parse()))
            # blank lines between items make the list loose
            k = j
            while k < len(lines) and _is_blank(lines[k]):
                k += 1
            if k > j and k < len(lines):
                nxt = _list_marker(lines[k])
                if nxt is not None and nxt.same_list(first):
                    saw_gap = True
                    j = k
                    continue
            if k > j:
                break
        block.spread = saw_gap
        self.i = j
        return block


def _scan_frontmatter(lines: List[str]) -> Optional[Tuple[Frontmatter, int]]:
    """
    YAML front matter, only if it starts on the first line.
    A closed block that is not a valid YAML mapping is still front matter,
    it just carries no data.
    """
    if not lines or not _FRONTMATTER_LINE.match(lines[0]):
        return None
    for j in range(1, len(lines)):
        if _FRONTMATTER_LINE.match(lines[j]):
            raw = "\n".join(lines[1:j])
            data = load_frontmatter_data(raw)
            return Frontmatter(value=raw, data=data or {}), j + 1
    return None


def parse_markdown(text: str) -> Root:
    """
    Parse markdown into a document tree:
      • YAML front matter
      • ATX / setext headings, paragraphs, lists, block quotes
      • fenced and indented code, HTML blocks, thematic breaks
      • `:::name{attrs}` container directives and `<!-- lang:xx -->` regions
      • inline links
    """
    lines = text.splitlines()
    children: List[BlockNode] = []
    fm = _scan_frontmatter(lines)
    if fm is not None:
        node, end = fm
        children.append(node)
        lines = lines[end:]
    children.extend(_BlockParser(lines).parse())
    return Root(children=children)


__all__ = ["parse_markdown", "parse_attributes"]
