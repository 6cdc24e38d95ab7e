from pathlib import Path

from lync.config import load_build_config
from lync.scaffold import default_build_config, init_build_config

from tests.infrastructure import read, write


def test_default_config_is_loadable(project: Path):
    res = init_build_config(root=project)

    assert res == {"ok": True, "created": True, "path": str(project / "lync-build.yaml")}
    cfg = load_build_config(project)
    assert cfg.includes == ["**/*.lync.md"]
    assert cfg.effective_out_dir() == "./dist"
    assert cfg.base_dir == "."
    assert cfg.target_langs == []


def test_existing_config_is_kept(project: Path):
    write(project / "lync-build.yaml", "baseDir: src\n")

    res = init_build_config(root=project)

    assert res["ok"] is False and res["created"] is False
    assert read(project / "lync-build.yaml") == "baseDir: src\n"


def test_force_overwrites(project: Path):
    write(project / "lync-build.yaml", "baseDir: src\n")

    res = init_build_config(root=project, force=True)

    assert res["created"] is True
    assert read(project / "lync-build.yaml") == default_build_config()
