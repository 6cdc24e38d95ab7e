from .compiler import CallStack, Compiler
from .errors import (
    CircularImportError,
    CompileError,
    LyncUserError,
    MissingImportFileError,
    UnresolvedAliasError,
)
from .version import tool_version

__all__ = [
    "CallStack",
    "Compiler",
    "CompileError",
    "CircularImportError",
    "LyncUserError",
    "MissingImportFileError",
    "UnresolvedAliasError",
    "tool_version",
]
