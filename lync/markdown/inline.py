from __future__ import annotations

import re
from typing import List, Optional, Tuple

from .nodes import InlineNode, Link, Text

# destination: <...> or a run without whitespace/parens imbalance
_DEST_ANGLE = re.compile(r"<([^<>\n]*)>")
_DEST_BARE = re.compile(r"[^\s()<>]*(?:\([^\s()]*\)[^\s()<>]*)*")
_TITLE = re.compile(
    r"""[ \t\n]+(?:"((?:[^"\\]|\\.)*)"|'((?:[^'\\]|\\.)*)'|\(((?:[^()\\]|\\.)*)\))""",
    re.DOTALL,
)
_SPACES = re.compile(r"[ \t\n]*")
_UNESCAPE = re.compile(r"\\([\\\"'()])")


def _scan_code_span(text: str, i: int) -> int:
    """Index right after the code span opened at i, or i + len(run) if unclosed."""
    n = len(text)
    j = i
    while j < n and text[j] == "`":
        j += 1
    run = text[i:j]
    close = text.find(run, j)
    while close != -1:
        end = close + len(run)
        # closing run must be exactly as long
        if (end >= n or text[end] != "`") and text[close - 1] != "`":
            return end
        close = text.find(run, end)
    return j


def _scan_label(text: str, i: int) -> Optional[int]:
    """i points at '['. Returns index of the matching ']' or None."""
    depth = 0
    j = i
    n = len(text)
    while j < n:
        c = text[j]
        if c == "\\":
            j += 2
            continue
        if c == "`":
            j = _scan_code_span(text, j)
            continue
        if c == "[":
            depth += 1
        elif c == "]":
            depth -= 1
            if depth == 0:
                return j
        j += 1
    return None


def _scan_destination(text: str, i: int) -> Optional[Tuple[str, Optional[str], int]]:
    """
    i points right after '('. Returns (url, title, index after ')') or None.
    """
    m = _SPACES.match(text, i)
    j = m.end()
    am = _DEST_ANGLE.match(text, j)
    if am:
        url = am.group(1)
        j = am.end()
    else:
        bm = _DEST_BARE.match(text, j)
        url = bm.group(0)
        j = bm.end()
    title: Optional[str] = None
    tm = _TITLE.match(text, j)
    if tm:
        raw = next((g for g in tm.groups() if g is not None), "")
        title = _UNESCAPE.sub(r"\1", raw)
        j = tm.end()
    j = _SPACES.match(text, j).end()
    if j < len(text) and text[j] == ")":
        return url, title, j + 1
    return None


def parse_inline(text: str) -> List[InlineNode]:
    """
    Splits inline markdown into Text runs and Link nodes.

    Only inline links are structural; code spans, images and everything
    else stay verbatim inside Text.
    """
    out: List[InlineNode] = []
    buf: List[str] = []
    i = 0
    n = len(text)

    def flush() -> None:
        if buf:
            out.append(Text("".join(buf)))
            buf.clear()

    while i < n:
        c = text[i]
        if c == "\\" and i + 1 < n:
            buf.append(text[i:i + 2])
            i += 2
            continue
        if c == "`":
            j = _scan_code_span(text, i)
            buf.append(text[i:j])
            i = j
            continue
        if c == "[":
            is_image = i > 0 and text[i - 1] == "!" and (i < 2 or text[i - 2] != "\\")
            close = _scan_label(text, i)
            if close is not None and close + 1 < n and text[close + 1] == "(":
                dest = _scan_destination(text, close + 2)
                if dest is not None:
                    url, title, end = dest
                    if is_image:
                        buf.append(text[i:end])
                    else:
                        flush()
                        label = text[i + 1:close]
                        out.append(Link(url=url, title=title, children=[Text(label)] if label else []))
                    i = end
                    continue
        buf.append(c)
        i += 1

    flush()
    return out


__all__ = ["parse_inline"]
