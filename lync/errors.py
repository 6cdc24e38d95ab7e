"""
Exceptions raised by lync.

All expected errors that should be displayed to the user
as clean messages (without stack traces) must inherit from LyncUserError.

Programming errors and bugs should NOT inherit from LyncUserError:
they will propagate with full tracebacks.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List


class LyncUserError(Exception):
    """
    Base class for all user-facing errors in lync.

    These errors indicate problems that the user can fix:
    configuration issues, unresolved aliases, missing files, etc.
    """
    pass


class ConfigError(LyncUserError):
    """Invalid or unreadable YAML configuration (lync.yaml, lock, build, rc)."""
    pass


class FetchError(LyncUserError):
    """Remote markdown could not be fetched."""
    pass


def _format_chain(chain: List[str]) -> str:
    return "".join(f"\n  -> {p}" for p in chain)


@dataclass
class CompileError(LyncUserError):
    """
    Fatal compilation error.

    Aborts the current file and every file above it in the import chain.
    `chain` is the ordered list of files that were being compiled.
    """
    chain: List[str] = field(default_factory=list)

    def __str__(self) -> str:
        return f"Compilation failed{_format_chain(self.chain)}"


@dataclass
class CircularImportError(CompileError):
    """A file imports itself, directly or through other files."""
    path: str = ""

    def __str__(self) -> str:
        return f"Circular dependency detected:{_format_chain(self.chain)}\n  -> {self.path} (Loop!)"


@dataclass
class UnresolvedAliasError(CompileError):
    """Alias is not present in lync-lock.yaml."""
    alias: str = ""

    def __str__(self) -> str:
        return (
            f"Unresolved alias '{self.alias}'. Please run 'lync add' or 'lync sync'."
            f"{_format_chain(self.chain)}"
        )


@dataclass
class MissingImportFileError(CompileError):
    """Alias resolved, but the physical file is not on disk."""
    name: str = ""
    path: str = ""

    def __str__(self) -> str:
        return (
            f"Missing physical file for '{self.name}' ({self.path}). Cannot import inline."
            f"{_format_chain(self.chain)}"
        )


__all__ = [
    "LyncUserError",
    "ConfigError",
    "FetchError",
    "CompileError",
    "CircularImportError",
    "UnresolvedAliasError",
    "MissingImportFileError",
]
