from __future__ import annotations

from pathlib import Path

# Single source of truth for workspace file layout.
MANIFEST_FILE = "lync.yaml"
LOCK_FILE = "lync-lock.yaml"
BUILD_FILE = "lync-build.yaml"
RC_FILE = ".lyncrc"
MODULES_DIR = ".lync"

ALIAS_SCHEME = "lync:"
SOURCE_SUFFIX = ".lync.md"


def manifest_path(root: Path) -> Path:
    """Path to the dependency manifest lync.yaml."""
    return root / MANIFEST_FILE


def lock_path(root: Path) -> Path:
    """Path to the lock file lync-lock.yaml."""
    return root / LOCK_FILE


def build_path(root: Path) -> Path:
    """Path to the workspace build configuration lync-build.yaml."""
    return root / BUILD_FILE


def default_module_path(root: Path, alias: str) -> Path:
    """Where a dependency lands when it declares no explicit dest: .lync/<alias>.md."""
    return (root / MODULES_DIR / f"{alias}.md").resolve()


def dependency_path(root: Path, alias: str, dest: str | None) -> Path:
    """Absolute local path of a dependency (explicit dest wins)."""
    if dest:
        return (root / dest).resolve()
    return default_module_path(root, alias)


__all__ = [
    "MANIFEST_FILE",
    "LOCK_FILE",
    "BUILD_FILE",
    "RC_FILE",
    "MODULES_DIR",
    "ALIAS_SCHEME",
    "SOURCE_SUFFIX",
    "manifest_path",
    "lock_path",
    "build_path",
    "default_module_path",
    "dependency_path",
]
