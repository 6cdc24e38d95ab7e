"""
Shared test infrastructure for lync.

Modules:
- file_utils: creating files and directories
- translators: translator stubs (no network)
- project_builders: lock files, modules and compilers for temp projects
- http_utils: in-memory requests.Session
"""

from .file_utils import read, write, write_text_file
from .http_utils import FakeResponse, FakeSession, chat_reply
from .project_builders import compile_sync, lock_alias_only, lock_modules, make_compiler, write_build_config
from .translators import DictTranslator, FailingTranslator, StubTranslator

__all__ = [
    # File utilities
    "read", "write", "write_text_file",

    # HTTP
    "FakeResponse", "FakeSession", "chat_reply",

    # Projects
    "compile_sync", "lock_alias_only", "lock_modules", "make_compiler", "write_build_config",

    # Translators
    "DictTranslator", "FailingTranslator", "StubTranslator",
]
