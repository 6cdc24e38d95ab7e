from __future__ import annotations

import logging
from importlib import resources
from pathlib import Path
from typing import Dict

from .config.paths import BUILD_FILE, build_path

logger = logging.getLogger(__name__)

# Resources live under the lync._skeletons package
_SKELETONS_PKG = "lync._skeletons"


def default_build_config() -> str:
    """Commented starter lync-build.yaml shipped with the package."""
    return (resources.files(_SKELETONS_PKG) / BUILD_FILE).read_text(encoding="utf-8")


def init_build_config(*, root: Path, force: bool = False) -> Dict:
    """
    Write the starter lync-build.yaml into root.

    An existing file is kept unless force is set.
    Returns a dict with fields: ok, created, path.
    """
    target = build_path(root.resolve())
    if target.exists() and not force:
        logger.warning("%s already exists in %s.", BUILD_FILE, target.parent)
        return {"ok": False, "created": False, "path": str(target)}
    target.write_text(default_build_config(), encoding="utf-8")
    logger.info("Successfully created %s!", BUILD_FILE)
    return {"ok": True, "created": True, "path": str(target)}


# ---------------- CLI glue ---------------- #

def add_cli(subparsers) -> None:
    """Register the `init` subcommand; the handler is bound via set_defaults(func=...)."""
    sp = subparsers.add_parser("init", help="Initialize a default lync-build.yaml configuration file")
    sp.add_argument("--force", action="store_true", help="overwrite an existing lync-build.yaml")
    sp.set_defaults(func=_run_cli, cmd="init")


def _run_cli(ns) -> int:
    """Handler of `lync init`."""
    init_build_config(root=Path.cwd(), force=bool(getattr(ns, "force", False)))
    return 0


__all__ = ["default_build_config", "init_build_config", "add_cli"]
