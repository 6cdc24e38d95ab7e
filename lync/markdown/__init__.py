from .frontmatter import read_frontmatter, render_frontmatter, strip_frontmatter
from .parser import parse_markdown
from .serializer import serialize

__all__ = [
    "parse_markdown",
    "serialize",
    "strip_frontmatter",
    "read_frontmatter",
    "render_frontmatter",
]
