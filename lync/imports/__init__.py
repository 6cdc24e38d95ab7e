from .resolver import ImportResolver, collect_imports, relative_url, strip_link_directive

__all__ = ["ImportResolver", "collect_imports", "relative_url", "strip_link_directive"]
