"""CordovaToSPMConverter: drive one plugin.xml -> Package.swift conversion.

Steps:
    1. Locate and parse plugin.xml
    2. Report plugin id and CocoaPods dependencies
    3. Optionally resolve dependencies to Swift packages
    4. Generate, validate and write Package.swift
    5. Rewrite plugin.xml for SPM
    6. Add conditional Cordova imports to Swift sources
    7. Optionally update .gitignore
    8. Print a summary with any remaining manual steps
"""

from __future__ import annotations

from pathlib import Path

import click
import structlog

from cdv2spm.engines.dependency_resolver import DependencyResolver, ResolvedDependency
from cdv2spm.engines.plugin_converter.filesystem import FileSystemManager, GitignoreManager
from cdv2spm.engines.plugin_converter.models import (
    ConversionOptions,
    ConversionResult,
    PluginMetadata,
)
from cdv2spm.engines.plugin_converter.package_generator import (
    generate_package_swift,
    validate_package_swift,
)
from cdv2spm.engines.plugin_converter.plugin_xml import parse_plugin_xml, update_plugin_xml
from cdv2spm.engines.plugin_converter.swift_imports import SOURCE_DIR, SwiftImportManager
from cdv2spm.exceptions import FileOperationError, PluginXMLError, PluginXMLNotFoundError

log = structlog.get_logger("cdv2spm.converter")

_SEPARATOR = "=" * 60


class CordovaToSPMConverter:
    def __init__(
        self,
        options: ConversionOptions,
        resolver: DependencyResolver | None = None,
    ) -> None:
        self.options = options
        self._resolver = resolver
        self._files = FileSystemManager(dry_run=options.dry_run)
        self._gitignore = GitignoreManager(self._files)
        self._imports = SwiftImportManager(self._files)

    async def convert(self) -> bool:
        """Run the conversion. Returns False if it could not be completed."""
        _info("Starting Cordova plugin to Swift Package Manager conversion")
        xml_path = self._files.resolve_plugin_xml_path(self.options.input_path)
        _info(f"Using plugin.xml at: {xml_path}")
        plugin_dir = xml_path.parent

        try:
            if not self._files.exists(xml_path):
                raise PluginXMLNotFoundError(str(xml_path))
            metadata = parse_plugin_xml(xml_path)
            self._report_plugin(metadata)

            package_result, resolved = await self._write_package_swift(metadata, plugin_dir)
            self._update_plugin_xml(metadata, xml_path)
            self._imports.add_cordova_imports(plugin_dir)
            if not self.options.no_gitignore:
                self._update_gitignore(plugin_dir)
        except PluginXMLError as exc:
            log.debug("converter.plugin_xml_failed", error=str(exc))
            _error(f"XML parsing failed: {exc}")
            return False
        except FileOperationError as exc:
            log.debug("converter.file_failed", error=str(exc))
            _error(f"File operation failed: {exc}")
            return False

        self._summary(metadata, package_result, resolved)
        return True

    # ── steps ──────────────────────────────────────────────────────────────

    def _report_plugin(self, metadata: PluginMetadata) -> None:
        _info(f"Plugin ID: {metadata.plugin_id}")
        if not metadata.has_dependencies:
            _warn("No CocoaPods dependencies found")
            return
        _info(f"Found {len(metadata.dependencies)} CocoaPods dependencies:")
        for dep in metadata.dependencies:
            _info(f"  - {dep.description}")

    async def _write_package_swift(
        self, metadata: PluginMetadata, plugin_dir: Path
    ) -> tuple[ConversionResult, list[ResolvedDependency] | None]:
        package_path = plugin_dir / "Package.swift"

        if self._files.exists(package_path):
            if not self._confirm(
                f"Package.swift already exists at {package_path}. Overwrite?", default=False
            ):
                _info("Skipping Package.swift generation")
                return ConversionResult.skipped("User chose not to overwrite existing Package.swift"), None
            backup = self._files.create_backup_if_needed(package_path, self.options.backup)
            if backup is not None:
                _info(f"Created backup: {backup}")

        resolved: list[ResolvedDependency] | None = None
        if self.options.auto_resolve and metadata.has_dependencies:
            _info("Attempting automatic dependency resolution...")
            resolved = await self._resolve(metadata)
            self._report_resolution(resolved)

        content = generate_package_swift(
            metadata,
            source_path=SOURCE_DIR.as_posix(),
            public_headers_path=self._files.find_public_headers_path(plugin_dir / SOURCE_DIR),
            resolved=resolved,
        )
        if not validate_package_swift(content):
            raise FileOperationError("write", str(package_path), "generated Package.swift is invalid")

        self._files.write_file(package_path, content)
        if self.options.dry_run:
            return ConversionResult.success(f"[DRY-RUN] Package.swift would be generated at {package_path}"), resolved
        return ConversionResult.success(f"Package.swift generated at {package_path}"), resolved

    async def _resolve(self, metadata: PluginMetadata) -> list[ResolvedDependency]:
        if self._resolver is not None:
            return await self._resolver.resolve_all(metadata.dependencies, timeout=self.options.timeout)
        async with DependencyResolver() as resolver:
            return await resolver.resolve_all(metadata.dependencies, timeout=self.options.timeout)

    def _report_resolution(self, resolved: list[ResolvedDependency]) -> None:
        count = sum(1 for r in resolved if r.is_resolved)
        if count == 0:
            _warn("Could not automatically resolve any dependencies")
            for item in resolved:
                log.debug("converter.unresolved", pod=item.original_pod.name, status=item.status.description)
            return

        _success(f"Successfully resolved {count} out of {len(resolved)} dependencies:")
        for item in resolved:
            if item.is_resolved and item.spm_dependency is not None:
                _info(f"  ✅ {item.original_pod.name} → {item.spm_dependency.url}")
            else:
                _warn(f"  ❌ {item.original_pod.name}: {item.status.description}")

    def _update_plugin_xml(self, metadata: PluginMetadata, xml_path: Path) -> None:
        _info('Adding package="swift" attribute to iOS platform')
        if self.options.remove_podspec and metadata.has_podspec:
            _info("Removing <podspec> blocks from plugin.xml")
            message = 'Updated plugin.xml (added package="swift", removed podspec)'
        elif metadata.has_podspec:
            _info('Adding nospm="true" attribute to <pod> elements in plugin.xml')
            message = 'Updated plugin.xml (added package="swift" and nospm="true" to pod elements)'
        else:
            message = 'Updated plugin.xml (added package="swift" to iOS platform)'

        backup = self._files.create_backup_if_needed(xml_path, self.options.backup)
        if backup is not None:
            _info(f"Created backup: {backup}")

        updated = update_plugin_xml(
            metadata,
            remove_podspec=self.options.remove_podspec,
            add_nospm=metadata.has_podspec,
        )
        self._files.write_file(xml_path, updated, create_parents=False)

        if self.options.dry_run:
            _info("[DRY-RUN] plugin.xml would be updated")
        else:
            _success(message)

    def _update_gitignore(self, plugin_dir: Path) -> None:
        if not self._confirm("Update .gitignore with Swift Package Manager build artifacts?", default=True):
            _info("Skipping .gitignore update")
            return
        result = self._gitignore.update(plugin_dir, backup=self.options.backup)
        if result.kind == "success":
            _success(result.message)
        elif result.kind == "skipped":
            _info(result.message)
        else:
            _warn(result.message)

    def _summary(
        self,
        metadata: PluginMetadata,
        package_result: ConversionResult,
        resolved: list[ResolvedDependency] | None,
    ) -> None:
        if self.options.dry_run:
            _info("Dry run completed - no files were modified")
            return

        if package_result.is_success:
            _success("Package.swift conversion completed!")

        if not metadata.has_dependencies:
            _success("Conversion completed! Your Package.swift is ready to use.")
            return

        if resolved is None:
            _important(
                "Manual steps required:\n"
                "CocoaPods dependencies were added as comments in Package.swift.\n"
                "Convert them manually to Swift Package Manager equivalents.\n"
                "Tip: Use --auto-resolve flag to attempt automatic conversion."
            )
            return

        count = sum(1 for r in resolved if r.is_resolved)
        if count == len(resolved):
            _success("Conversion completed! All dependencies were automatically resolved.")
            _info("Your Package.swift is ready to use.")
        elif count > 0:
            _important(
                "Manual steps required:\n"
                f"{count} out of {len(resolved)} dependencies were automatically resolved.\n"
                "The remaining unresolved dependencies were added as comments in Package.swift.\n"
                "Please convert them manually to Swift Package Manager equivalents."
            )
        else:
            _important(
                "Manual steps required:\n"
                "CocoaPods dependencies could not be automatically resolved.\n"
                "They were added as comments in Package.swift.\n"
                "Please convert them manually to Swift Package Manager equivalents."
            )

    def _confirm(self, question: str, *, default: bool) -> bool:
        if self.options.force:
            log.debug("converter.auto_confirm", question=question)
            return True
        return click.confirm(question, default=default)


# ── output ─────────────────────────────────────────────────────────────────


def _info(message: str) -> None:
    click.secho(message, fg="cyan")


def _warn(message: str) -> None:
    click.secho(message, fg="yellow")


def _error(message: str) -> None:
    click.secho(message, fg="red", err=True)


def _success(message: str) -> None:
    click.secho(message, fg="green")


def _important(message: str) -> None:
    click.echo(_SEPARATOR)
    click.echo(f"[IMPORTANT] {message}")
    click.echo(_SEPARATOR)
