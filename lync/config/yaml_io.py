from __future__ import annotations

from pathlib import Path
from typing import Any, Dict

from ruamel.yaml import YAML
from ruamel.yaml.error import YAMLError

from ..errors import ConfigError

_yaml = YAML(typ="safe")

_YAML_RT = YAML(typ="rt")
_YAML_RT.indent(mapping=2, sequence=4, offset=2)
# keep long URLs on one line
_YAML_RT.width = 1000000


def read_yaml_map(path: Path) -> Dict[str, Any]:
    """
    Read a YAML mapping. Missing or empty file → {}.

    Raises:
        ConfigError: on YAML syntax errors or a non-mapping document
    """
    if not path.is_file():
        return {}
    try:
        raw = _yaml.load(path.read_text(encoding="utf-8")) or {}
    except YAMLError as e:
        raise ConfigError(f"Failed to parse {path}: {e}") from e
    if not isinstance(raw, dict):
        raise ConfigError(f"YAML must be a mapping: {path}")
    return raw


def dump_yaml(path: Path, data: Dict[str, Any]) -> None:
    """Write YAML atomically (tmp file + replace)."""
    path.parent.mkdir(parents=True, exist_ok=True)
    tmp = path.with_suffix(path.suffix + ".tmp-rt")
    with tmp.open("w", encoding="utf-8") as f:
        _YAML_RT.dump(data, f)
    tmp.replace(path)


__all__ = ["read_yaml_map", "dump_yaml"]
