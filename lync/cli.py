from __future__ import annotations

import argparse
import asyncio
import logging
import os
import sys
from pathlib import Path
from typing import List, Optional

from .build import BuildOverrides, BuildSummary, run_entry_build, run_workspace_build
from .compiler import Compiler
from .deps import add_dependency, sync_dependencies, update_dependencies
from .errors import LyncUserError
from .llm import LLMTranslator, Verifier
from .seal import seal_files
from .version import tool_version

logger = logging.getLogger(__name__)

_handler: Optional[logging.Handler] = None


def _configure_logging(verbose: bool) -> None:
    """One stderr handler on the `lync` logger; DEBUG with --verbose or LYNC_DEBUG."""
    global _handler
    log = logging.getLogger("lync")
    if _handler is not None:
        log.removeHandler(_handler)
    level = logging.DEBUG if verbose or os.environ.get("LYNC_DEBUG") else logging.INFO
    log.setLevel(level)
    _handler = logging.StreamHandler()
    _handler.setFormatter(logging.Formatter("[%(levelname)s] %(message)s"))
    log.addHandler(_handler)


def _build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="lync",
        description="A decentralized markdown package manager and compiler.",
        add_help=True,
    )
    p.add_argument("-v", "--version", action="version", version=f"%(prog)s {tool_version()}")
    p.add_argument("--verbose", action="store_true", help="debug logging")
    sub = p.add_subparsers(dest="cmd", required=True)

    sp_add = sub.add_parser("add", help="Add a remote dependency")
    sp_add.add_argument("url")
    sp_add.add_argument("--alias", help="explicitly set the alias name")
    sp_add.add_argument("--dest", help="explicitly set local destination path")

    sp_seal = sub.add_parser(
        "seal",
        help="Convert standard markdown files into Lync modules by injecting frontmatter. Supports wildcards.",
    )
    sp_seal.add_argument("patterns", nargs="*")
    sp_seal.add_argument("--alias", help="explicitly set the alias name (only recommended for single files)")
    sp_seal.add_argument("--lang", help="wrap content in a specific i18n block (e.g. ja, zh-CN)")

    sub.add_parser("sync", aliases=["install"], help="Sync all dependencies from lync.yaml")

    sp_update = sub.add_parser("update", help="Force update dependencies, ignoring lockfile cache")
    sp_update.add_argument("alias", nargs="?")

    sp_build = sub.add_parser(
        "build",
        help="Compile a specific file or run workspace build via lync-build.yaml",
    )
    sp_build.add_argument("entry", nargs="?")
    sp_build.add_argument("-o", "--out-dir", help="output directory (single file and workspace)")
    sp_build.add_argument("--base-dir", help="base directory stripped from workspace output paths")
    sp_build.add_argument("--target-langs", help="comma-separated list of target languages")
    sp_build.add_argument("--verify", action="store_true", help="semantic LLM lint of the compiled markdown")
    sp_build.add_argument("--model", help="LLM model for translation and verification (default: gpt-4o)")

    # Registration of external subcommands
    from .scaffold import add_cli as _add_scaffold_cli
    _add_scaffold_cli(sub)

    return p


def _parse_langs(raw: Optional[str]) -> Optional[List[str]]:
    """Comma-separated language list; None when empty."""
    if not raw:
        return None
    langs = [s.strip() for s in raw.split(",") if s.strip()]
    return langs or None


def _run_build(ns: argparse.Namespace, root: Path) -> int:
    overrides = BuildOverrides(
        out_dir=ns.out_dir,
        base_dir=ns.base_dir,
        target_langs=_parse_langs(ns.target_langs),
    )
    compiler = Compiler.for_project(root, translator=LLMTranslator(ns.model))
    verifier = Verifier(ns.model) if ns.verify else None

    summary: BuildSummary
    if ns.entry:
        summary = asyncio.run(run_entry_build(root, Path(ns.entry), compiler, overrides=overrides, verifier=verifier))
    else:
        summary = asyncio.run(run_workspace_build(root, compiler, overrides=overrides, verifier=verifier))
    return 0 if summary.ok else 1


def main(argv: list[str] | None = None) -> int:
    ns = _build_parser().parse_args(argv)
    _configure_logging(bool(ns.verbose))
    root = Path.cwd().resolve()

    try:
        # Unified hook for external subcommands: subparser.set_defaults(func=...)
        if hasattr(ns, "func") and callable(getattr(ns, "func")):
            rc = ns.func(ns)
            return int(rc) if isinstance(rc, int) else 0

        if ns.cmd == "add":
            add_dependency(root, ns.url, alias=ns.alias, dest=ns.dest)
            return 0

        if ns.cmd == "seal":
            seal_files(root, ns.patterns, alias=ns.alias, lang=ns.lang)
            return 0

        if ns.cmd in ("sync", "install"):
            return 0 if sync_dependencies(root).ok else 1

        if ns.cmd == "update":
            return 0 if update_dependencies(root, ns.alias).ok else 1

        if ns.cmd == "build":
            return _run_build(ns, root)

    except LyncUserError as e:
        sys.stderr.write(str(e).rstrip() + "\n")
        return 2
    except ValueError as e:
        sys.stderr.write(str(e).rstrip() + "\n")
        return 2

    return 2


if __name__ == "__main__":
    raise SystemExit(main())
