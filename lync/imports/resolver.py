"""
Import resolution.

Links whose target is an alias (`lync:<alias>`) or a relative path
(`./`, `../`) and whose title carries an import directive are rewritten:

    [Guide](lync:guide "@import:link")    → [Guide](./.lync/guide.md)
    [G](lync:greet "@import:inline")      → compiled content of greet

Work is done in two phases. A read-only walk collects every import with its
position (link, parent, grandparent and their indices); mutations are then
applied: all reference rewrites first, then inline expansions from the last
one to the first so recorded indices stay valid.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Awaitable, Callable, List, Optional, Tuple

from ..config.paths import ALIAS_SCHEME
from ..deps.lock import DependencyLookup
from ..diagnostics import Diagnostics
from ..errors import MissingImportFileError, UnresolvedAliasError
from ..markdown.nodes import IMPORT_LINK, Link, Node, Paragraph, Root, Text, children_of
from ..markdown.parser import parse_markdown
from ..markdown.visit import index_of, walk

logger = logging.getLogger(__name__)

# path → compiled markdown of that file (same call stack, out path and language)
CompileCallback = Callable[[Path], Awaitable[str]]


def is_alias(url: str) -> bool:
    return url.startswith(ALIAS_SCHEME)


def is_relative(url: str) -> bool:
    return url.startswith("./") or url.startswith("../")


def alias_name(url: str) -> str:
    return url[len(ALIAS_SCHEME):]


@dataclass(frozen=True)
class InlineSite:
    """An `@import:inline` link and its surroundings at collection time."""
    link: Link
    parent: Node
    link_index: int
    grandparent: Optional[Node]
    parent_index: int
    # link is the only meaningful content of its paragraph
    replaces_paragraph: bool


def _is_sole_content(paragraph: Paragraph, link: Link) -> bool:
    meaningful = [
        c for c in paragraph.children
        if not (isinstance(c, Text) and not c.value.strip())
    ]
    return len(meaningful) == 1 and meaningful[0] is link


def collect_imports(tree: Root, diagnostics: Diagnostics, source: str = "") -> Tuple[List[Link], List[InlineSite]]:
    """
    Read-only pass: reference imports and inline imports in document order.

    An alias link with an unknown directive is reported and left as is.
    """
    links: List[Link] = []
    inlines: List[InlineSite] = []
    for node, ancestors in walk(tree):
        if not isinstance(node, Link):
            continue
        url = node.url
        if not (is_alias(url) or is_relative(url)):
            continue

        directive = node.directive
        if directive == "link":
            links.append(node)
        elif directive == "inline":
            parent = ancestors[-1]
            grandparent = ancestors[-2] if len(ancestors) > 1 else None
            replaces = (
                isinstance(parent, Paragraph)
                and grandparent is not None
                and _is_sole_content(parent, node)
            )
            inlines.append(InlineSite(
                link=node,
                parent=parent,
                link_index=index_of(children_of(parent) or [], node),
                grandparent=grandparent,
                parent_index=index_of(children_of(grandparent) or [], parent) if grandparent is not None else -1,
                replaces_paragraph=replaces,
            ))
        elif is_alias(url):
            diagnostics.warn(
                logger, "unrecognized-directive",
                f"Unrecognized directive for alias '{url}': {node.title or ''}",
                file=source or None,
            )
    return links, inlines


def relative_url(target: Path, base_dir: Path) -> str:
    """
    Forward-slash path of target relative to base_dir, always starting with
    `./` or `../`.

    >>> relative_url(Path("/p/.lync/guide.md"), Path("/p/dist"))
    '../.lync/guide.md'
    >>> relative_url(Path("/p/.lync/guide.md"), Path("/p"))
    './.lync/guide.md'
    """
    rel = os.path.relpath(target, base_dir).replace(os.sep, "/")
    if not is_relative(rel):
        rel = "./" + rel
    return rel


def strip_link_directive(title: Optional[str]) -> Optional[str]:
    """Remove the `@import:link` token, keeping any human text; None when nothing is left."""
    if not title:
        return None
    rest = title.replace(IMPORT_LINK, "", 1).strip()
    return rest or None


class ImportResolver:

    def __init__(self, lookup: DependencyLookup, diagnostics: Diagnostics):
        self.lookup = lookup
        self.diagnostics = diagnostics

    @property
    def project_root(self) -> Path:
        return self.lookup.root

    def target_of(self, link: Link, source: Path, chain: List[str]) -> Tuple[str, Path]:
        """
        (display name, absolute path) of an import target.

        Raises:
            UnresolvedAliasError: alias is not in the lock file
        """
        if is_alias(link.url):
            alias = alias_name(link.url)
            dep = self.lookup.resolve(alias)
            if dep is None:
                raise UnresolvedAliasError(chain=list(chain), alias=alias)
            return alias, dep.local_path
        return link.url, (source.parent / link.url).resolve()

    def rewrite_link(self, link: Link, source: Path, out_path: Optional[Path], chain: List[str]) -> None:
        """Point a reference import at the local copy, relative to the output location."""
        _, target = self.target_of(link, source, chain)
        base_dir = out_path.parent if out_path is not None else self.project_root
        link.url = relative_url(target, base_dir)
        link.title = strip_link_directive(link.title)

    async def expand_inline(self, site: InlineSite, source: Path, chain: List[str],
                            compile_sub: CompileCallback) -> None:
        name, target = self.target_of(site.link, source, chain)
        if not target.is_file():
            raise MissingImportFileError(chain=list(chain), name=name, path=str(target))

        expanded = await compile_sub(target)
        blocks = parse_markdown(expanded).children

        if site.replaces_paragraph:
            kids = children_of(site.grandparent)
            assert kids is not None and kids[site.parent_index] is site.parent
            kids[site.parent_index:site.parent_index + 1] = blocks
        else:
            # inline splice; block content inside a paragraph is kept as is
            kids = children_of(site.parent)
            assert kids is not None and kids[site.link_index] is site.link
            kids[site.link_index:site.link_index + 1] = blocks

    async def resolve(self, tree: Root, source: Path, out_path: Optional[Path], chain: List[str],
                      compile_sub: CompileCallback) -> None:
        """
        Rewrite reference imports, then expand inline imports last-to-first.

        Args:
            tree: Document being compiled (mutated in place)
            source: Absolute path of the document
            out_path: Where the compiled document will be written, if known
            chain: Files currently being compiled, outermost first
            compile_sub: Compiles an inline import target recursively
        """
        links, inlines = collect_imports(tree, self.diagnostics, str(source))
        for link in links:
            self.rewrite_link(link, source, out_path, chain)
        for site in reversed(inlines):
            await self.expand_inline(site, source, chain, compile_sub)


__all__ = [
    "CompileCallback",
    "InlineSite",
    "collect_imports",
    "relative_url",
    "strip_link_directive",
    "ImportResolver",
    "is_alias",
    "is_relative",
]
