from __future__ import annotations

from importlib import metadata


def tool_version() -> str:
    """
    Version of the installed distribution.
    Independent of other modules (avoids import cycles).
    """
    try:
        return metadata.version("lync-cli")
    except metadata.PackageNotFoundError:
        return "0.0.0"


__all__ = ["tool_version"]
