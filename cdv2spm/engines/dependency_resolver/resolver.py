"""DependencyResolver: map CocoaPods dependencies onto Swift packages.

Per dependency: podspec lookup -> source classification -> Package.swift
existence check -> fetch -> scrape -> requirement translation. Every path
ends in a :class:`ResolvedDependency`; nothing raises out of
:meth:`DependencyResolver.resolve_all`.
"""

from __future__ import annotations

import asyncio
import os
from collections.abc import Sequence

import structlog

from cdv2spm.core.forge import infer_git_url, version_tag_from_spec
from cdv2spm.engines.dependency_resolver.constraint import translate
from cdv2spm.engines.dependency_resolver.manifest import PackageManifestParser
from cdv2spm.engines.dependency_resolver.models import (
    GitSource,
    HttpSource,
    LocalSource,
    PodDependency,
    PodSpecInfo,
    ResolutionStatus,
    ResolvedDependency,
    SPMDependency,
)
from cdv2spm.engines.dependency_resolver.pod_spec import PodSpecClient
from cdv2spm.engines.dependency_resolver.remote import GitRepositoryChecker

log = structlog.get_logger("cdv2spm.resolver")

DEFAULT_TIMEOUT = 30.0
DEFAULT_REF = "main"


def default_timeout() -> float:
    return float(os.environ.get("CDV2SPM_RESOLVE_TIMEOUT", DEFAULT_TIMEOUT))


class DependencyResolver:
    """Resolve a batch of pods concurrently, each bounded by its own timeout."""

    def __init__(
        self,
        pod_specs: PodSpecClient | None = None,
        git_checker: GitRepositoryChecker | None = None,
        manifest_parser: PackageManifestParser | None = None,
    ) -> None:
        self._pod_specs = pod_specs or PodSpecClient()
        self._git_checker = git_checker or GitRepositoryChecker()
        self._manifest_parser = manifest_parser or PackageManifestParser()

    async def close(self) -> None:
        await self._git_checker.close()

    async def __aenter__(self) -> DependencyResolver:
        return self

    async def __aexit__(self, *exc: object) -> None:
        await self.close()

    # ── public ─────────────────────────────────────────────────────────────

    async def resolve_all(
        self,
        dependencies: Sequence[PodDependency],
        timeout: float | None = None,
    ) -> list[ResolvedDependency]:
        """Resolve every dependency concurrently; one result per input.

        No concurrency cap: a plugin declares a handful of pods at most.
        A slow or failing dependency never affects its siblings.
        """
        if timeout is None:
            timeout = default_timeout()
        log.info("resolver.start", count=len(dependencies), timeout=timeout)

        results = list(await asyncio.gather(*(self.resolve(d, timeout) for d in dependencies)))

        log.info(
            "resolver.done",
            resolved=sum(1 for r in results if r.is_resolved),
            total=len(dependencies),
        )
        return results

    async def resolve(self, dependency: PodDependency, timeout: float | None = None) -> ResolvedDependency:
        """Resolve one dependency, racing the pipeline against *timeout*.

        When the timer wins the pipeline task is cancelled, which kills any
        in-flight subprocess and aborts any pending HTTP request.
        """
        if timeout is None:
            timeout = default_timeout()
        try:
            return await asyncio.wait_for(self._resolve_safely(dependency), timeout=timeout)
        except asyncio.TimeoutError:
            log.warning("resolver.timeout", pod=dependency.name, timeout=timeout)
            return ResolvedDependency.failure(dependency, ResolutionStatus.timeout())

    # ── pipeline ───────────────────────────────────────────────────────────

    async def _resolve_safely(self, dependency: PodDependency) -> ResolvedDependency:
        try:
            result = await self._resolve(dependency)
        except Exception as exc:
            log.error("resolver.failed", pod=dependency.name, error=str(exc), exc_info=True)
            return ResolvedDependency.failure(dependency, ResolutionStatus.error(str(exc)))
        log.debug("resolver.result", pod=dependency.name, status=result.status.kind)
        return result

    async def _resolve(self, dependency: PodDependency) -> ResolvedDependency:
        log.debug("resolver.resolving", pod=dependency.name, spec=dependency.spec)

        info = await self._pod_specs.resolve(dependency)
        if info is None:
            return ResolvedDependency.failure(dependency, ResolutionStatus.pod_spec_not_found())

        source = info.source
        if isinstance(source, GitSource):
            return await self._resolve_git(dependency, source.url, source.tag, source.branch)
        if isinstance(source, HttpSource):
            return await self._resolve_http(dependency, info, source)
        if isinstance(source, LocalSource):
            return ResolvedDependency.failure(
                dependency, ResolutionStatus.requires_manual_integration(source.path)
            )
        return ResolvedDependency.failure(dependency, ResolutionStatus.no_git_source())

    async def _resolve_git(
        self,
        dependency: PodDependency,
        url: str,
        tag: str | None,
        branch: str | None,
    ) -> ResolvedDependency:
        ref = tag or branch or DEFAULT_REF

        if not await self._git_checker.has_package_swift(url, ref):
            return ResolvedDependency.failure(dependency, ResolutionStatus.no_package_swift())

        content = await self._git_checker.fetch_package_swift(url, ref)
        if content is None:
            return ResolvedDependency.failure(
                dependency, ResolutionStatus.package_swift_not_accessible()
            )

        if not self._manifest_parser.is_library(content):
            return ResolvedDependency.failure(dependency, ResolutionStatus.not_a_library())
        package = self._manifest_parser.parse(content)

        libraries = package.library_products
        product_name = libraries[0].name if libraries else (package.name or dependency.name)

        spm = SPMDependency(
            url=url,
            requirement=translate(dependency.spec, tag),
            product_name=product_name,
        )
        log.info("resolver.resolved", pod=dependency.name, url=url, product=product_name)
        return ResolvedDependency.success(dependency, spm)

    async def _resolve_http(
        self,
        dependency: PodDependency,
        info: PodSpecInfo,
        source: HttpSource,
    ) -> ResolvedDependency:
        git_url = infer_git_url(source.url, info.homepage)

        if git_url is None:
            if info.ships_xcframework:
                status = ResolutionStatus.xcframework_found(download_url=source.url)
            else:
                status = ResolutionStatus.http_source_found()
            return ResolvedDependency.failure(dependency, status)

        log.debug("resolver.inferred_git_url", pod=dependency.name, http=source.url, git=git_url)
        attempt = await self._resolve_git(
            dependency, git_url, version_tag_from_spec(dependency.spec), None
        )
        if attempt.is_resolved:
            return attempt
        if info.ships_xcframework:
            return ResolvedDependency.failure(
                dependency,
                ResolutionStatus.xcframework_found(download_url=source.url, git_url=git_url),
            )
        return attempt
