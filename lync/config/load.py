from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Dict, Optional, Type, TypeVar

from pydantic import BaseModel, ValidationError

from ..errors import ConfigError
from .model import BuildConfig, LockFile, Manifest, RcConfig
from .paths import RC_FILE, build_path, lock_path, manifest_path
from .yaml_io import dump_yaml, read_yaml_map

logger = logging.getLogger(__name__)

M = TypeVar("M", bound=BaseModel)


def _validate(model: Type[M], raw: Dict[str, Any], path: Path) -> M:
    try:
        return model.model_validate(raw)
    except ValidationError as e:
        raise ConfigError(f"Invalid {path.name}: {e}") from e


def _dump(model: BaseModel) -> Dict[str, Any]:
    return model.model_dump(mode="json", by_alias=True, exclude_none=True)


def load_manifest(root: Path) -> Manifest:
    """lync.yaml; missing file → no dependencies."""
    path = manifest_path(root)
    return _validate(Manifest, read_yaml_map(path), path)


def save_manifest(root: Path, manifest: Manifest) -> None:
    dump_yaml(manifest_path(root), _dump(manifest))


def load_lockfile(root: Path) -> LockFile:
    """lync-lock.yaml; missing file → version 1 with no dependencies."""
    path = lock_path(root)
    return _validate(LockFile, read_yaml_map(path), path)


def save_lockfile(root: Path, lock: LockFile) -> None:
    dump_yaml(lock_path(root), _dump(lock))


def load_build_config(root: Path) -> BuildConfig:
    """lync-build.yaml; missing file → defaults (outDir ./dist, baseDir .)."""
    path = build_path(root)
    return _validate(BuildConfig, read_yaml_map(path), path)


def _read_rc(path: Path) -> Dict[str, Any]:
    try:
        return read_yaml_map(path)
    except ConfigError as e:
        logger.warning("Failed to parse %s: %s", path, e)
        return {}


def load_rc(cwd: Optional[Path] = None, home: Optional[Path] = None) -> RcConfig:
    """
    Cascaded .lyncrc: global ~/.lyncrc, then local ./.lyncrc on top.

    The `llm` mapping is merged key by key; unreadable files are skipped
    with a warning.
    """
    cwd = cwd or Path.cwd()
    home = home or Path.home()

    merged: Dict[str, Any] = {}
    for path in (home / RC_FILE, cwd / RC_FILE):
        raw = _read_rc(path)
        if not raw:
            continue
        llm = {**(merged.get("llm") or {}), **(raw.get("llm") or {})}
        merged = {**merged, **raw, "llm": llm}

    try:
        return RcConfig.model_validate(merged)
    except ValidationError as e:
        logger.warning("Ignoring invalid %s: %s", RC_FILE, e)
        return RcConfig()


__all__ = [
    "load_manifest",
    "save_manifest",
    "load_lockfile",
    "save_lockfile",
    "load_build_config",
    "load_rc",
]
