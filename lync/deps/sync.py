"""
Dependency synchronization: lync.yaml → .lync/ files + lync-lock.yaml.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import List, Optional

import requests

from ..config import (
    DependencySpec,
    LockDependency,
    LockFile,
    load_lockfile,
    load_manifest,
    save_lockfile,
    save_manifest,
)
from ..config.paths import dependency_path
from ..errors import FetchError
from ..markdown import read_frontmatter
from .alias import alias_from_url, unique_alias
from .network import compute_hash, fetch_markdown

logger = logging.getLogger(__name__)


@dataclass
class SyncReport:
    fetched: List[str] = field(default_factory=list)
    up_to_date: List[str] = field(default_factory=list)
    skipped: List[str] = field(default_factory=list)
    failed: List[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.failed


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def _needs_fetch(alias: str, url: str, target: Path, locked: Optional[LockDependency]) -> bool:
    if locked is None or locked.url != url or not target.is_file():
        return True
    current = compute_hash(target.read_text(encoding="utf-8"))
    if current != locked.hash:
        logger.warning("Hash mismatch for '%s'. File may have been locally modified. Re-fetching.", alias)
        return True
    return False


def sync_dependencies(root: Path, *, session: Optional[requests.Session] = None) -> SyncReport:
    """
    Fetch every declared dependency whose lock entry is missing or stale.

    A dependency is re-fetched when it is not locked, its url changed, its
    local file is missing, or the file hash differs from the lock. One
    failing alias does not stop the others; the lock file is rewritten only
    when something was fetched.
    """
    manifest = load_manifest(root)
    lock = load_lockfile(root)
    report = SyncReport()

    if not manifest.dependencies:
        logger.info("No dependencies found in lync.yaml")
        return report

    http = session or requests.Session()
    for alias in manifest.dependencies:
        url, dest = manifest.declaration(alias)
        if not url:
            logger.warning("Alias '%s' has no URL specified. Skipping.", alias)
            report.skipped.append(alias)
            continue

        target = dependency_path(root, alias, dest)
        if not _needs_fetch(alias, url, target, lock.dependencies.get(alias)):
            logger.info("'%s' is up to date.", alias)
            report.up_to_date.append(alias)
            continue

        logger.info("Fetching '%s' from %s...", alias, url)
        try:
            content = fetch_markdown(url, session=http)
        except FetchError as e:
            logger.error("Failed to sync '%s': %s", alias, e)
            report.failed.append(alias)
            continue

        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(content, encoding="utf-8")
        lock.dependencies[alias] = LockDependency(
            url=url,
            dest=dest,
            hash=compute_hash(content),
            fetched_at=_now_iso(),
        )
        report.fetched.append(alias)
        logger.info("'%s' updated successfully.", alias)

    if report.fetched:
        save_lockfile(root, lock)
        logger.info("lync-lock.yaml updated.")
    return report


def _declared_alias(content: str) -> Optional[str]:
    data, _ = read_frontmatter(content)
    meta = (data or {}).get("lync")
    if isinstance(meta, dict) and meta.get("alias"):
        return str(meta["alias"])
    return None


def add_dependency(
        root: Path,
        url: str,
        *,
        alias: Optional[str] = None,
        dest: Optional[str] = None,
        session: Optional[requests.Session] = None,
) -> str:
    """
    Declare a dependency in lync.yaml and sync.

    Alias priority: explicit → `lync.alias` in the remote frontmatter →
    inferred from the url. Returns the alias actually stored.
    """
    http = session or requests.Session()
    manifest = load_manifest(root)

    if not alias:
        logger.info("Fetching %s to inspect metadata...", url)
        try:
            alias = _declared_alias(fetch_markdown(url, session=http))
        except FetchError as e:
            logger.debug("Metadata inspection failed: %s", e)
        if alias:
            logger.info("Discovered declared alias from frontmatter: '%s'", alias)
    if not alias:
        alias = alias_from_url(url)

    final = unique_alias(manifest, alias, url)
    manifest.dependencies[final] = DependencySpec(url=url, dest=dest) if dest else url
    save_manifest(root, manifest)
    logger.info("Added alias '%s' pointing to %s", final, url)

    sync_dependencies(root, session=http)
    return final


def update_dependencies(
        root: Path,
        alias: Optional[str] = None,
        *,
        session: Optional[requests.Session] = None,
) -> SyncReport:
    """Drop lock entries (one alias or all) and sync again."""
    lock = load_lockfile(root)
    if alias:
        if lock.dependencies.pop(alias, None) is not None:
            logger.info("Cleared lock cache for '%s'.", alias)
        else:
            logger.warning("Alias '%s' not found in lockfile.", alias)
    else:
        lock = LockFile(version=lock.version)
        logger.info("Cleared locked cache for all dependencies.")
    save_lockfile(root, lock)
    return sync_dependencies(root, session=session)


__all__ = ["SyncReport", "sync_dependencies", "add_dependency", "update_dependencies"]
