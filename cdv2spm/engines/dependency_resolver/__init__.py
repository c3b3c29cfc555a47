"""Dependency resolver engine: map CocoaPods dependencies to Swift packages."""

from cdv2spm.engines.dependency_resolver.constraint import translate
from cdv2spm.engines.dependency_resolver.models import (
    PodDependency,
    PodSpecInfo,
    ResolutionStatus,
    ResolvedDependency,
    SPMDependency,
    SPMPackageInfo,
    SPMRequirement,
)
from cdv2spm.engines.dependency_resolver.resolver import DependencyResolver

__all__ = [
    "DependencyResolver",
    "PodDependency",
    "PodSpecInfo",
    "ResolutionStatus",
    "ResolvedDependency",
    "SPMDependency",
    "SPMPackageInfo",
    "SPMRequirement",
    "translate",
]
