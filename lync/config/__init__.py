from .load import (
    load_build_config,
    load_lockfile,
    load_manifest,
    load_rc,
    save_lockfile,
    save_manifest,
)
from .model import (
    BuildConfig,
    DependencySpec,
    LLMConfig,
    LockDependency,
    LockFile,
    Manifest,
    OutputCfg,
    RcConfig,
    RoutingRule,
)

__all__ = [
    "load_build_config",
    "load_lockfile",
    "load_manifest",
    "load_rc",
    "save_lockfile",
    "save_manifest",
    "BuildConfig",
    "DependencySpec",
    "LLMConfig",
    "LockDependency",
    "LockFile",
    "Manifest",
    "OutputCfg",
    "RcConfig",
    "RoutingRule",
]
