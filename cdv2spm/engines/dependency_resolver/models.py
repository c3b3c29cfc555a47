"""Data models for the dependency resolver engine.

Every record here is immutable: created once per conversion run, passed
through the pipeline, and discarded after the Package.swift is rendered.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Literal, Union

# ── CocoaPods side ───────────────────────────────────────────────────────


@dataclass(frozen=True)
class PodDependency:
    """A ``<pod name spec>`` entry from plugin.xml."""

    name: str
    spec: str = ""

    @property
    def description(self) -> str:
        return f"{self.name} ({self.spec})"


@dataclass(frozen=True)
class GitSource:
    url: str
    tag: str | None = None
    branch: str | None = None

    @property
    def description(self) -> str:
        desc = f"Git: {self.url}"
        if self.tag is not None:
            desc += f" (tag: {self.tag})"
        if self.branch is not None:
            desc += f" (branch: {self.branch})"
        return desc


@dataclass(frozen=True)
class HttpSource:
    url: str

    @property
    def description(self) -> str:
        return f"HTTP: {self.url}"


@dataclass(frozen=True)
class LocalSource:
    path: str

    @property
    def description(self) -> str:
        return f"Local: {self.path}"


@dataclass(frozen=True)
class UnknownSource:
    @property
    def description(self) -> str:
        return "Unknown source type"


PodSource = Union[GitSource, HttpSource, LocalSource, UnknownSource]


@dataclass(frozen=True)
class PodSpecInfo:
    """The parts of a ``pod spec cat`` record the resolver cares about."""

    name: str
    version: str
    source: PodSource
    homepage: str | None = None
    vendored_frameworks: str | None = None  # e.g. "Foo.xcframework"

    @property
    def ships_xcframework(self) -> bool:
        return bool(self.vendored_frameworks) and self.vendored_frameworks.endswith(".xcframework")


# ── Swift Package Manager side ───────────────────────────────────────────

RequirementKind = Literal[
    "exact", "from", "up_to_next_major", "up_to_next_minor", "branch", "tag"
]


@dataclass(frozen=True)
class SPMRequirement:
    """A version requirement as written in Package.swift."""

    kind: RequirementKind
    value: str

    @classmethod
    def exact(cls, version: str) -> SPMRequirement:
        return cls("exact", version)

    @classmethod
    def from_version(cls, version: str) -> SPMRequirement:
        return cls("from", version)

    @classmethod
    def up_to_next_major(cls, version: str) -> SPMRequirement:
        return cls("up_to_next_major", version)

    @classmethod
    def up_to_next_minor(cls, version: str) -> SPMRequirement:
        return cls("up_to_next_minor", version)

    @classmethod
    def branch(cls, name: str) -> SPMRequirement:
        return cls("branch", name)

    @classmethod
    def tag(cls, name: str) -> SPMRequirement:
        return cls("tag", name)

    @property
    def description(self) -> str:
        """The requirement argument of a ``.package(url:, ...)`` call."""
        if self.kind == "from":
            return f'from: "{self.value}"'
        if self.kind == "up_to_next_major":
            return f'.upToNextMajor(from: "{self.value}")'
        if self.kind == "up_to_next_minor":
            return f'.upToNextMinor(from: "{self.value}")'
        if self.kind == "branch":
            return f'branch: "{self.value}"'
        # exact and tag both pin a single version
        return f'exact: "{self.value}"'


@dataclass(frozen=True)
class SPMDependency:
    url: str
    requirement: SPMRequirement
    product_name: str | None = None

    @property
    def package_name(self) -> str:
        """Package identity SPM derives from the URL (last path component)."""
        last = self.url.rstrip("/").rsplit("/", 1)[-1]
        if last.endswith(".git"):
            last = last[:-4]
        return last or "UnknownPackage"


ProductType = Literal["library", "executable"]


@dataclass(frozen=True)
class SPMProduct:
    name: str
    type: ProductType
    targets: tuple[str, ...] = ()


@dataclass(frozen=True)
class SPMTarget:
    name: str
    dependencies: tuple[str, ...] = ()


@dataclass(frozen=True)
class SPMPackageInfo:
    """What could be scraped out of a remote Package.swift."""

    name: str
    dependencies: tuple[SPMDependency, ...] = ()
    products: tuple[SPMProduct, ...] = ()
    targets: tuple[SPMTarget, ...] = ()

    @property
    def library_products(self) -> list[SPMProduct]:
        return [p for p in self.products if p.type == "library"]


# ── Resolution outcome ───────────────────────────────────────────────────

StatusKind = Literal[
    "resolved",
    "pod_spec_not_found",
    "no_git_source",
    "no_package_swift",
    "package_swift_not_accessible",
    "not_a_library",
    "timeout",
    "error",
    "http_source_found",
    "xcframework_found",
    "requires_manual_integration",
]


@dataclass(frozen=True)
class ResolutionStatus:
    """Terminal classification of one dependency's resolution attempt.

    Payload fields are only meaningful for the kinds that carry them:
    ``message`` for ``error``, ``git_url`` for ``http_source_found`` and
    ``xcframework_found``, ``download_url`` for ``xcframework_found`` and
    ``reason`` for ``requires_manual_integration``.
    """

    kind: StatusKind
    message: str | None = None
    git_url: str | None = None
    download_url: str | None = None
    reason: str | None = None

    @classmethod
    def resolved(cls) -> ResolutionStatus:
        return cls("resolved")

    @classmethod
    def pod_spec_not_found(cls) -> ResolutionStatus:
        return cls("pod_spec_not_found")

    @classmethod
    def no_git_source(cls) -> ResolutionStatus:
        return cls("no_git_source")

    @classmethod
    def no_package_swift(cls) -> ResolutionStatus:
        return cls("no_package_swift")

    @classmethod
    def package_swift_not_accessible(cls) -> ResolutionStatus:
        return cls("package_swift_not_accessible")

    @classmethod
    def not_a_library(cls) -> ResolutionStatus:
        return cls("not_a_library")

    @classmethod
    def timeout(cls) -> ResolutionStatus:
        return cls("timeout")

    @classmethod
    def error(cls, message: str) -> ResolutionStatus:
        return cls("error", message=message)

    @classmethod
    def http_source_found(cls, git_url: str | None = None) -> ResolutionStatus:
        return cls("http_source_found", git_url=git_url)

    @classmethod
    def xcframework_found(cls, download_url: str, git_url: str | None = None) -> ResolutionStatus:
        return cls("xcframework_found", git_url=git_url, download_url=download_url)

    @classmethod
    def requires_manual_integration(cls, reason: str) -> ResolutionStatus:
        return cls("requires_manual_integration", reason=reason)

    @property
    def is_success(self) -> bool:
        return self.kind == "resolved"

    @property
    def description(self) -> str:
        kind = self.kind
        if kind == "resolved":
            return "Successfully resolved"
        if kind == "pod_spec_not_found":
            return "Pod spec not found"
        if kind == "no_git_source":
            return "No Git source URL"
        if kind == "no_package_swift":
            return "No Package.swift found"
        if kind == "package_swift_not_accessible":
            return "Package.swift not accessible"
        if kind == "not_a_library":
            return "Not a library package"
        if kind == "timeout":
            return "Resolution timed out"
        if kind == "error":
            return f"Error: {self.message}"
        if kind == "http_source_found":
            if self.git_url:
                return f"HTTP source found, Git repository inferred: {self.git_url}"
            return "HTTP source found, no Git repository could be inferred"
        if kind == "xcframework_found":
            desc = f"XCFramework found at: {self.download_url}"
            if self.git_url:
                desc += f", Git repository: {self.git_url}"
            return desc
        if kind == "requires_manual_integration":
            return f"Requires manual integration: {self.reason}"
        raise ValueError(f"unknown resolution status: {kind!r}")


@dataclass(frozen=True)
class ResolvedDependency:
    """Pipeline output for one pod: a usable SPM dependency or the reason there is none.

    ``spm_dependency`` is set if and only if the status is ``resolved``.
    """

    original_pod: PodDependency
    status: ResolutionStatus
    spm_dependency: SPMDependency | None = field(default=None)

    def __post_init__(self) -> None:
        if (self.spm_dependency is not None) != self.status.is_success:
            raise ValueError(
                f"spm_dependency must be set exactly when status is resolved "
                f"(status={self.status.kind}, pod={self.original_pod.name})"
            )

    @classmethod
    def success(cls, pod: PodDependency, dependency: SPMDependency) -> ResolvedDependency:
        return cls(original_pod=pod, status=ResolutionStatus.resolved(), spm_dependency=dependency)

    @classmethod
    def failure(cls, pod: PodDependency, status: ResolutionStatus) -> ResolvedDependency:
        return cls(original_pod=pod, status=status)

    @property
    def is_resolved(self) -> bool:
        return self.status.is_success and self.spm_dependency is not None
