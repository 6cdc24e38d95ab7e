from __future__ import annotations

from typing import Iterator, List, Sequence, Tuple, Type, TypeVar

from .nodes import Node, children_of

N = TypeVar("N")

Ancestors = Tuple[Node, ...]


def walk(node: Node, ancestors: Ancestors = ()) -> Iterator[Tuple[Node, Ancestors]]:
    """
    Pre-order traversal yielding (node, ancestors), root first.

    Read-only: callers collect matches and mutate afterwards.
    """
    yield node, ancestors
    kids = children_of(node)
    if kids:
        path = ancestors + (node,)
        for child in kids:
            yield from walk(child, path)


def find_all(node: Node, kind: Type[N]) -> List[Tuple[N, Ancestors]]:
    return [(n, a) for n, a in walk(node) if isinstance(n, kind)]  # type: ignore[misc]


def index_of(items: Sequence[object], target: object) -> int:
    """Identity-based index; -1 when absent."""
    for i, item in enumerate(items):
        if item is target:
            return i
    return -1


__all__ = ["Ancestors", "walk", "find_all", "index_of"]
