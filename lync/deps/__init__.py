from .lock import DependencyLookup, ResolvedDependency
from .network import compute_hash, fetch_markdown
from .sync import SyncReport, add_dependency, sync_dependencies, update_dependencies

__all__ = [
    "DependencyLookup",
    "ResolvedDependency",
    "compute_hash",
    "fetch_markdown",
    "SyncReport",
    "add_dependency",
    "sync_dependencies",
    "update_dependencies",
]
