"""
Workspace build driven by lync-build.yaml.

For every entry file matching `includes` (default `**/*.src.md`,
`**/*.lync.md`) the destination is planned from `output` / `baseDir` /
`routing`, the file is compiled once per target language and written.
A failing entry is reported and the build moves on to the next one.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional, Sequence

import pathspec

from .compiler import Compiler
from .diagnostics import Diagnostic
from .config import BuildConfig, load_build_config
from .errors import LyncUserError
from .i18n.tags import extract_target_langs
from .llm.verify import Verifier

logger = logging.getLogger(__name__)

DEFAULT_INCLUDES = ["**/*.src.md", "**/*.lync.md"]
DEFAULT_IGNORES = ["node_modules/", ".lync/", "dist/", ".git/"]

_SOURCE_SUFFIXES = (".lync.md", ".src.md")


@dataclass
class BuildOverrides:
    """Command line values that win over lync-build.yaml."""
    out_dir: Optional[str] = None
    base_dir: Optional[str] = None
    target_langs: Optional[List[str]] = None


@dataclass
class BuildResult:
    source: Path
    dest: Path
    lang: Optional[str] = None
    error: Optional[str] = None
    verified: Optional[bool] = None
    warnings: List[Diagnostic] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return self.error is None and self.verified is not False


@dataclass
class BuildSummary:
    results: List[BuildResult] = field(default_factory=list)

    @property
    def failed(self) -> List[BuildResult]:
        return [r for r in self.results if not r.ok]

    @property
    def ok(self) -> bool:
        return not self.failed


def compiled_name(name: str) -> str:
    """`prompt.lync.md` / `prompt.src.md` → `prompt.md`; other names unchanged."""
    for suffix in _SOURCE_SUFFIXES:
        if name.endswith(suffix):
            return name[: -len(suffix)] + ".md"
    return name


def lang_variant(dest: Path, lang: Optional[str]) -> Path:
    """`out/prompt.md` → `out/prompt.<lang>.md`."""
    if not lang:
        return dest
    name = dest.name
    stem = name[:-3] if name.endswith(".md") else name
    return dest.with_name(f"{stem}.{lang}.md")


def discover_entries(root: Path, includes: Sequence[str]) -> List[Path]:
    """Entry files (relative to root) matching includes, minus default ignores; sorted."""
    include_spec = pathspec.PathSpec.from_lines("gitwildmatch", includes or DEFAULT_INCLUDES)
    ignore_spec = pathspec.PathSpec.from_lines("gitwildmatch", DEFAULT_IGNORES)
    found: List[Path] = []
    for p in root.rglob("*"):
        if not p.is_file():
            continue
        rel = p.relative_to(root).as_posix()
        if ignore_spec.match_file(rel) or not include_spec.match_file(rel):
            continue
        found.append(Path(rel))
    return sorted(found, key=lambda r: r.as_posix())


def plan_destination(root: Path, rel: Path, cfg: BuildConfig, overrides: Optional[BuildOverrides] = None) -> Path:
    """
    Output path of an entry (before the language suffix).

    Priority: first matching routing rule → inPlace → flat → mirrored
    layout under outDir with baseDir stripped.
    """
    ov = overrides or BuildOverrides()
    name = compiled_name(rel.name)
    rel_posix = rel.as_posix()

    for rule in cfg.routing:
        if pathspec.PathSpec.from_lines("gitwildmatch", [rule.match]).match_file(rel_posix):
            dest = (root / rule.dest).resolve()
            # no extension → directory
            return dest / name if not dest.suffix else dest

    if cfg.output.in_place:
        return (root / rel).resolve().with_name(name)

    out_dir = (root / (ov.out_dir or cfg.effective_out_dir())).resolve()
    if cfg.output.flat:
        return out_dir / name

    base = (root / (ov.base_dir or cfg.base_dir)).resolve()
    source = (root / rel).resolve()
    try:
        under_base = source.relative_to(base)
    except ValueError:
        under_base = rel
    return out_dir / under_base.parent / name


def _languages(source: Path, cfg: BuildConfig, overrides: Optional[BuildOverrides]) -> List[Optional[str]]:
    if overrides and overrides.target_langs:
        return list(overrides.target_langs)
    if cfg.target_langs:
        return list(cfg.target_langs)
    found = extract_target_langs(source)
    return list(found) if found else [None]


async def build_file(
        compiler: Compiler,
        root: Path,
        source: Path,
        dest: Path,
        langs: Sequence[Optional[str]],
        *,
        verifier: Optional[Verifier] = None,
) -> List[BuildResult]:
    """
    Compile one entry for every language and write the outputs.

    Errors of this entry are captured in the results, not raised.
    """
    results: List[BuildResult] = []
    display = _display(root, source)
    for lang in langs:
        current = lang_variant(dest, lang)
        result = BuildResult(source=source, dest=current, lang=lang)
        results.append(result)
        tag = f" [{lang}]" if lang else ""
        logger.info("Compiling %s%s -> %s", display, tag, _display(root, current))
        compiler.diagnostics.clear()
        try:
            content = await compiler.compile_file(source, current, target_lang=lang)
            current.parent.mkdir(parents=True, exist_ok=True)
            current.write_text(content, encoding="utf-8")
        except (LyncUserError, OSError, ValueError) as e:
            result.warnings = list(compiler.diagnostics.items)
            result.error = str(e)
            logger.error("Failed to compile %s%s: %s", display, tag, e)
            # an entry stops at its first failure
            break
        result.warnings = list(compiler.diagnostics.items)
        if verifier is not None:
            result.verified = await verifier.verify(content)
    return results


async def run_workspace_build(
        root: Path,
        compiler: Compiler,
        *,
        overrides: Optional[BuildOverrides] = None,
        verifier: Optional[Verifier] = None,
) -> BuildSummary:
    cfg = load_build_config(root)
    summary = BuildSummary()

    entries = discover_entries(root, cfg.includes)
    if not entries:
        logger.info("No source files found matching patterns: %s", ", ".join(cfg.includes or DEFAULT_INCLUDES))
        return summary

    for rel in entries:
        source = (root / rel).resolve()
        dest = plan_destination(root, rel, cfg, overrides)
        summary.results.extend(
            await build_file(compiler, root, source, dest, _languages(source, cfg, overrides), verifier=verifier)
        )

    logger.info("Build finished: %d output(s), %d failed", len(summary.results), len(summary.failed))
    return summary


def entry_destination(root: Path, entry: Path, cfg: BuildConfig, overrides: Optional[BuildOverrides] = None) -> Path:
    """
    Output path for a single-entry build.

    With an out dir (command line or config) the compiled name lands there;
    otherwise next to the source, never overwriting it.
    """
    ov = overrides or BuildOverrides()
    out_dir = ov.out_dir or cfg.out_dir or cfg.output.dir
    name = compiled_name(entry.name)
    if out_dir:
        return (root / out_dir).resolve() / name
    dest = entry.with_name(name)
    if dest == entry:
        dest = entry.with_name(f"{entry.stem}.compiled.md")
    return dest


async def run_entry_build(
        root: Path,
        entry: Path,
        compiler: Compiler,
        *,
        overrides: Optional[BuildOverrides] = None,
        verifier: Optional[Verifier] = None,
) -> BuildSummary:
    """
    Build a single entry file.

    Raises:
        LyncUserError: entry file does not exist
    """
    source = (root / entry).resolve()
    if not source.is_file():
        raise LyncUserError(f"Entry file not found: {source}")
    cfg = load_build_config(root)
    dest = entry_destination(root, source, cfg, overrides)
    results = await build_file(compiler, root, source, dest, _languages(source, cfg, overrides), verifier=verifier)
    return BuildSummary(results=results)


def _display(root: Path, p: Path) -> str:
    try:
        return p.relative_to(root.resolve()).as_posix()
    except ValueError:
        return str(p)


__all__ = [
    "DEFAULT_INCLUDES",
    "BuildOverrides",
    "BuildResult",
    "BuildSummary",
    "compiled_name",
    "lang_variant",
    "discover_entries",
    "plan_destination",
    "entry_destination",
    "build_file",
    "run_workspace_build",
    "run_entry_build",
]
