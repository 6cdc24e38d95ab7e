"""
Typed models of the workspace YAML files.
"""

from __future__ import annotations

from typing import Dict, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field


class _Model(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")


# ---- lync.yaml ----

class DependencySpec(_Model):
    url: Optional[str] = None
    dest: Optional[str] = None


DependencyDeclaration = Union[str, DependencySpec]


class Manifest(_Model):
    dependencies: Dict[str, DependencyDeclaration] = Field(default_factory=dict)

    def declaration(self, alias: str) -> tuple[Optional[str], Optional[str]]:
        """(url, dest) of an alias; (None, None) when not declared."""
        decl = self.dependencies.get(alias)
        if decl is None:
            return None, None
        if isinstance(decl, str):
            return decl, None
        return decl.url, decl.dest


# ---- lync-lock.yaml ----

class LockDependency(_Model):
    url: str
    dest: Optional[str] = None
    version: Optional[str] = None
    hash: str
    fetched_at: str = Field(alias="fetchedAt")


class LockFile(_Model):
    version: int = 1
    dependencies: Dict[str, LockDependency] = Field(default_factory=dict)


# ---- lync-build.yaml ----

class RoutingRule(_Model):
    match: str
    dest: str


class OutputCfg(_Model):
    dir: Optional[str] = None
    flat: bool = False
    in_place: bool = Field(default=False, alias="inPlace")


class BuildConfig(_Model):
    includes: List[str] = Field(default_factory=list)
    out_dir: Optional[str] = Field(default=None, alias="outDir")
    output: OutputCfg = Field(default_factory=OutputCfg)
    base_dir: str = Field(default=".", alias="baseDir")
    target_langs: List[str] = Field(default_factory=list, alias="targetLangs")
    routing: List[RoutingRule] = Field(default_factory=list)

    def effective_out_dir(self) -> str:
        return self.out_dir or self.output.dir or "./dist"


# ---- .lyncrc ----

class LLMConfig(_Model):
    provider: Optional[str] = None
    model: Optional[str] = None
    api_key: Optional[str] = Field(default=None, alias="apiKey")
    base_url: Optional[str] = Field(default=None, alias="baseURL")


class RcConfig(_Model):
    llm: LLMConfig = Field(default_factory=LLMConfig)


__all__ = [
    "DependencySpec",
    "DependencyDeclaration",
    "Manifest",
    "LockDependency",
    "LockFile",
    "RoutingRule",
    "OutputCfg",
    "BuildConfig",
    "LLMConfig",
    "RcConfig",
]
