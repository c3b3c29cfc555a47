"""Data models for the plugin converter engine."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

from cdv2spm.engines.dependency_resolver.models import PodDependency


@dataclass(frozen=True)
class PluginMetadata:
    """What plugin.xml tells us about an iOS plugin."""

    plugin_id: str
    dependencies: tuple[PodDependency, ...]
    has_podspec: bool
    original_xml: str

    @property
    def package_name(self) -> str:
        return self.plugin_id or "UnknownPlugin"

    @property
    def has_dependencies(self) -> bool:
        return bool(self.dependencies)


@dataclass(frozen=True)
class ConversionOptions:
    force: bool = False
    dry_run: bool = False
    verbose: bool = False
    no_gitignore: bool = False
    backup: bool = False
    auto_resolve: bool = False
    remove_podspec: bool = False
    input_path: str | None = None
    timeout: float | None = None  # per-dependency resolution timeout (seconds)


ResultKind = Literal["success", "skipped", "error"]


@dataclass(frozen=True)
class ConversionResult:
    kind: ResultKind
    message: str

    @classmethod
    def success(cls, message: str) -> ConversionResult:
        return cls("success", message)

    @classmethod
    def skipped(cls, message: str) -> ConversionResult:
        return cls("skipped", message)

    @classmethod
    def error(cls, message: str) -> ConversionResult:
        return cls("error", message)

    @property
    def is_success(self) -> bool:
        return self.kind == "success"
