"""Render Package.swift for a converted Cordova plugin."""

from __future__ import annotations

from collections.abc import Sequence

from cdv2spm.engines.dependency_resolver.models import PodDependency, ResolvedDependency
from cdv2spm.engines.plugin_converter.models import PluginMetadata

_PKG_INDENT = " " * 8
_TARGET_DEP_INDENT = " " * 16

_CORDOVA_PACKAGE = f'{_PKG_INDENT}.package(url: "https://github.com/apache/cordova-ios.git", branch: "master")'
_CORDOVA_PRODUCT = f'{_TARGET_DEP_INDENT}.product(name: "Cordova", package: "cordova-ios")'

_REQUIRED_MARKERS = (
    "swift-tools-version",
    "import PackageDescription",
    "let package = Package(",
    "name:",
    "targets:",
)

_TEMPLATE = """\
// swift-tools-version:5.9
import PackageDescription

let package = Package(
    name: "{name}",
    platforms: [.iOS(.v14)],
    products: [
        .library(
            name: "{name}",
            targets: ["{name}"])
    ],
    dependencies: [
{package_dependencies}
    ],
    targets: [
        .target(
            name: "{name}",
            dependencies: [
{target_dependencies}
            ],
{target_path}
    ]
)
"""


def generate_package_swift(
    metadata: PluginMetadata,
    *,
    source_path: str = "src/ios",
    public_headers_path: str = "",
    resolved: Sequence[ResolvedDependency] | None = None,
) -> str:
    """Build Package.swift text for *metadata*.

    Without *resolved* every pod becomes a TODO placeholder. With it,
    resolved pods become real package/product references and the rest
    become placeholders annotated with why they could not be resolved.
    """
    package_deps = [_CORDOVA_PACKAGE]
    target_deps = [_CORDOVA_PRODUCT]

    if resolved is None:
        for pod in metadata.dependencies:
            package_deps.append(_todo_package(pod))
            target_deps.append(_todo_target(pod))
    else:
        for item in resolved:
            spm = item.spm_dependency
            if item.is_resolved and spm is not None:
                package_deps.append(f'{_PKG_INDENT}.package(url: "{spm.url}", {spm.requirement.description})')
                product = spm.product_name or item.original_pod.name
                target_deps.append(
                    f'{_TARGET_DEP_INDENT}.product(name: "{product}", package: "{spm.package_name}")'
                )
            else:
                package_deps.append(_todo_package(item.original_pod, item.status.description))
                target_deps.append(_todo_target(item.original_pod))

    return _TEMPLATE.format(
        name=metadata.package_name,
        package_dependencies=",\n".join(package_deps),
        target_dependencies=",\n".join(target_deps),
        target_path=_target_path(source_path, public_headers_path),
    )


def validate_package_swift(content: str) -> bool:
    """Cheap sanity check that *content* looks like a package manifest."""
    return all(marker in content for marker in _REQUIRED_MARKERS)


def _todo_package(pod: PodDependency, reason: str | None = None) -> str:
    line = f"{_PKG_INDENT}// TODO: Convert CocoaPods dependency: {pod.description}"
    return f"{line} ({reason})" if reason else line


def _todo_target(pod: PodDependency) -> str:
    return f"{_TARGET_DEP_INDENT}// TODO: Add Swift Package equivalent for: {pod.description}"


def _target_path(source_path: str, public_headers_path: str) -> str:
    if not public_headers_path:
        return f'            path: "{source_path}")'
    return f'            path: "{source_path}",\n            publicHeadersPath: "{public_headers_path}")'
