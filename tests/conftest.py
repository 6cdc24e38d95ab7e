from pathlib import Path

import pytest


@pytest.fixture
def project(tmp_path: Path, monkeypatch) -> Path:
    """Empty project root used as the working directory."""
    root = tmp_path / "proj"
    root.mkdir()
    monkeypatch.chdir(root)
    return root.resolve()


@pytest.fixture(autouse=True)
def _isolated_llm_env(monkeypatch, tmp_path: Path):
    # no real credentials or ~/.lyncrc leak into tests
    for var in ("LYNC_LLM_API_KEY", "OPENAI_API_KEY", "LYNC_LLM_BASE_URL", "LYNC_LLM_MODEL", "LYNC_DEBUG"):
        monkeypatch.delenv(var, raising=False)
    home = tmp_path / "home"
    home.mkdir()
    monkeypatch.setenv("HOME", str(home))
    monkeypatch.setattr(Path, "home", classmethod(lambda cls: home))
