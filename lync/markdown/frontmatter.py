"""
YAML frontmatter handling.

Frontmatter is metadata for the package manager (declared alias, version)
and is never part of compiled output.
"""

from __future__ import annotations

import io
import re
from typing import Any, Dict, Optional, Tuple

from ruamel.yaml import YAML
from ruamel.yaml.error import YAMLError

from .nodes import Frontmatter, Root

_yaml = YAML(typ="safe")

_yaml_rt = YAML(typ="rt")
_yaml_rt.indent(mapping=2, sequence=4, offset=2)
_yaml_rt.width = 1000000

# Pattern for YAML frontmatter: starts with ---, ends with ---
_FRONTMATTER_PATTERN = re.compile(
    r'\A---[ \t]*\n(.*?)^---[ \t]*$\n?',
    re.DOTALL | re.MULTILINE
)


def load_frontmatter_data(raw: str) -> Optional[Dict[str, Any]]:
    """
    Parse the YAML between frontmatter fences.

    Returns:
        The mapping (empty for an empty block), or None when the block is
        malformed: a YAML error or a non-mapping document.
    """
    try:
        data = _yaml.load(raw)
    except YAMLError:
        return None
    if data is None:
        return {}
    if not isinstance(data, dict):
        return None
    return dict(data)


def read_frontmatter(text: str) -> Tuple[Optional[Dict[str, Any]], str]:
    """
    Split raw markdown into (frontmatter data, body).

    Args:
        text: Full markdown text

    Returns:
        Tuple of (data, remaining_text); data is None when the text has no
        valid frontmatter, in which case remaining_text is the input.

    Examples:
        >>> data, body = read_frontmatter("---\\nlync:\\n  alias: greet\\n---\\n# Hi\\n")
        >>> data["lync"]["alias"]
        'greet'
        >>> body
        '# Hi\\n'
    """
    if not text.startswith("---"):
        return None, text
    match = _FRONTMATTER_PATTERN.match(text)
    if not match:
        return None, text
    data = load_frontmatter_data(match.group(1))
    if data is None:
        return None, text
    return data, text[match.end():]


def render_frontmatter(data: Dict[str, Any], body: str) -> str:
    """Prepend a `---` fenced YAML block to body."""
    buf = io.StringIO()
    _yaml_rt.dump(data, buf)
    head = buf.getvalue()
    if not body.startswith("\n"):
        body = "\n" + body
    return f"---\n{head}---\n{body}"


def strip_frontmatter(root: Root) -> int:
    """
    Remove top-level frontmatter nodes in place.

    Idempotent; returns the number of removed nodes.
    """
    before = len(root.children)
    root.children[:] = [n for n in root.children if not isinstance(n, Frontmatter)]
    return before - len(root.children)


__all__ = [
    "load_frontmatter_data",
    "read_frontmatter",
    "render_frontmatter",
    "strip_frontmatter",
]
