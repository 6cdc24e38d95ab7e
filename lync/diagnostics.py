from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import List, Literal, Optional

WarningCode = Literal[
    "unrecognized-directive",
    "translation-failed",
]


@dataclass(frozen=True)
class Diagnostic:
    code: WarningCode
    message: str
    file: Optional[str] = None

    def __str__(self) -> str:
        where = f" ({self.file})" if self.file else ""
        return f"{self.message}{where}"


@dataclass
class Diagnostics:
    """
    Non-fatal warnings collected during compilation.

    Every warning is also logged through the given logger so the CLI shows
    it immediately; tests inspect `items`.
    """
    items: List[Diagnostic] = field(default_factory=list)

    def warn(self, logger: logging.Logger, code: WarningCode, message: str, *, file: Optional[str] = None) -> None:
        diag = Diagnostic(code=code, message=message, file=file)
        self.items.append(diag)
        logger.warning("%s", diag)

    def of(self, code: WarningCode) -> List[Diagnostic]:
        return [d for d in self.items if d.code == code]

    def clear(self) -> None:
        self.items.clear()


__all__ = ["WarningCode", "Diagnostic", "Diagnostics"]
