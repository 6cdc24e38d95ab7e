from pathlib import Path

import pytest

from lync.config import (
    DependencySpec,
    Manifest,
    load_build_config,
    load_lockfile,
    load_manifest,
    load_rc,
    save_manifest,
)
from lync.errors import ConfigError

from tests.infrastructure import read, write, write_build_config, write_text_file


def test_missing_files_give_defaults(project: Path):
    assert load_manifest(project).dependencies == {}
    lock = load_lockfile(project)
    assert lock.version == 1 and lock.dependencies == {}
    cfg = load_build_config(project)
    assert cfg.effective_out_dir() == "./dist"
    assert cfg.base_dir == "."
    assert cfg.includes == []
    assert not cfg.output.flat and not cfg.output.in_place


def test_manifest_short_and_long_forms(project: Path):
    write_text_file(project / "lync.yaml", """
        dependencies:
          guide: https://example.com/guide.md
          rules:
            url: https://example.com/rules.md
            dest: vendor/rules.md
    """)

    m = load_manifest(project)

    assert m.declaration("guide") == ("https://example.com/guide.md", None)
    assert m.declaration("rules") == ("https://example.com/rules.md", "vendor/rules.md")
    assert m.declaration("nope") == (None, None)


def test_manifest_save_keeps_short_form(project: Path):
    m = Manifest(dependencies={
        "guide": "https://example.com/guide.md",
        "rules": DependencySpec(url="https://example.com/rules.md", dest="vendor/rules.md"),
    })
    save_manifest(project, m)

    text = read(project / "lync.yaml")
    assert "guide: https://example.com/guide.md" in text
    assert "dest: vendor/rules.md" in text
    assert load_manifest(project).declaration("rules")[1] == "vendor/rules.md"
    assert not (project / "lync.yaml.tmp-rt").exists()


def test_build_config_aliases(project: Path):
    write_build_config(project, """
        includes:
          - "src/**/*.lync.md"
        output:
          dir: ./out
          flat: true
        baseDir: src
        targetLangs: [en, zh-CN]
        routing:
          - match: "src/agents/*.lync.md"
            dest: ./agents/
    """)

    cfg = load_build_config(project)

    assert cfg.includes == ["src/**/*.lync.md"]
    assert cfg.effective_out_dir() == "./out"
    assert cfg.output.flat
    assert cfg.base_dir == "src"
    assert cfg.target_langs == ["en", "zh-CN"]
    assert cfg.routing[0].dest == "./agents/"


def test_out_dir_beats_output_dir(project: Path):
    write_build_config(project, """
        outDir: ./legacy
        output:
          dir: ./out
    """)
    assert load_build_config(project).effective_out_dir() == "./legacy"


def test_invalid_yaml_raises_config_error(project: Path):
    write(project / "lync.yaml", "dependencies: [unclosed\n")
    with pytest.raises(ConfigError):
        load_manifest(project)


def test_non_mapping_raises_config_error(project: Path):
    write(project / "lync-build.yaml", "- a\n- b\n")
    with pytest.raises(ConfigError):
        load_build_config(project)


def test_invalid_schema_raises_config_error(project: Path):
    write(project / "lync-lock.yaml", "version: 1\ndependencies:\n  guide:\n    url: https://x/a.md\n")
    with pytest.raises(ConfigError, match="lync-lock.yaml"):
        load_lockfile(project)


def test_rc_local_overrides_global_per_key(project: Path, tmp_path: Path):
    home = tmp_path / "home"
    write_text_file(home / ".lyncrc", """
        llm:
          model: global-model
          apiKey: global-key
          baseURL: https://global.example/v1
    """)
    write_text_file(project / ".lyncrc", """
        llm:
          model: local-model
    """)

    rc = load_rc(project, home)

    assert rc.llm.model == "local-model"
    assert rc.llm.api_key == "global-key"
    assert rc.llm.base_url == "https://global.example/v1"


def test_rc_parse_failure_is_skipped(project: Path, tmp_path: Path, caplog):
    home = tmp_path / "home"
    write(home / ".lyncrc", "llm: [broken\n")
    write_text_file(project / ".lyncrc", """
        llm:
          model: local-model
    """)

    rc = load_rc(project, home)

    assert rc.llm.model == "local-model"
    assert "Failed to parse" in caplog.text


def test_rc_defaults_to_cwd_and_home(project: Path, tmp_path: Path):
    write_text_file(tmp_path / "home" / ".lyncrc", """
        llm:
          apiKey: from-home
    """)
    assert load_rc().llm.api_key == "from-home"
