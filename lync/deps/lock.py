"""
Read-only view of lync-lock.yaml used by the compiler.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from ..config import LockFile, load_lockfile
from ..config.paths import dependency_path


@dataclass(frozen=True)
class ResolvedDependency:
    alias: str
    url: str
    local_path: Path
    content_hash: str


class DependencyLookup:
    """
    alias → locked dependency record.

    Paths are resolved against the project root: the explicit `dest`
    when the lock declares one, otherwise `.lync/<alias>.md`.
    """

    def __init__(self, root: Path, lock: LockFile):
        self.root = root.resolve()
        self.lock = lock

    @classmethod
    def load(cls, root: Path) -> DependencyLookup:
        return cls(root, load_lockfile(root))

    def resolve(self, alias: str) -> Optional[ResolvedDependency]:
        dep = self.lock.dependencies.get(alias)
        if dep is None:
            return None
        return ResolvedDependency(
            alias=alias,
            url=dep.url,
            local_path=dependency_path(self.root, alias, dep.dest),
            content_hash=dep.hash,
        )


__all__ = ["ResolvedDependency", "DependencyLookup"]
