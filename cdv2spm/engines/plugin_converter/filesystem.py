"""File operations used by the converter, with dry-run and backup support."""

from __future__ import annotations

from collections import Counter
from pathlib import Path

import structlog

from cdv2spm.engines.plugin_converter.models import ConversionResult
from cdv2spm.exceptions import FileOperationError

log = structlog.get_logger("cdv2spm.converter")

BACKUP_SUFFIX = ".backup"
DEFAULT_PLUGIN_XML = "plugin.xml"


class FileSystemManager:
    """Read/write files; in dry-run mode writes are logged and skipped."""

    def __init__(self, dry_run: bool = False) -> None:
        self.dry_run = dry_run

    def exists(self, path: str | Path) -> bool:
        return Path(path).exists()

    def read_file(self, path: str | Path) -> str:
        try:
            content = Path(path).read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            raise FileOperationError("read", str(path), exc) from exc
        log.debug("fs.read", path=str(path))
        return content

    def write_file(self, path: str | Path, content: str, *, create_parents: bool = True) -> None:
        path = Path(path)
        if self.dry_run:
            log.info("fs.dry_run_write", path=str(path))
            return
        try:
            if create_parents:
                path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(content, encoding="utf-8")
        except OSError as exc:
            raise FileOperationError("write", str(path), exc) from exc
        log.debug("fs.write", path=str(path), size=len(content))

    def create_backup(self, path: str | Path) -> Path:
        """Copy *path* to ``<path>.backup`` and return the backup path.

        A missing source is not an error; the backup path is still returned.
        """
        path = Path(path)
        backup = path.with_name(path.name + BACKUP_SUFFIX)
        if self.dry_run:
            log.info("fs.dry_run_backup", path=str(backup))
            return backup
        if path.exists():
            self.write_file(backup, self.read_file(path), create_parents=False)
            log.debug("fs.backup", path=str(backup))
        return backup

    def create_backup_if_needed(self, path: str | Path, should_backup: bool) -> Path | None:
        if not should_backup:
            return None
        return self.create_backup(path)

    @staticmethod
    def resolve_plugin_xml_path(input_path: str | None = None) -> Path:
        """Absolute path to plugin.xml; defaults to ``./plugin.xml``."""
        if not input_path:
            return Path.cwd() / DEFAULT_PLUGIN_XML
        path = Path(input_path)
        return path if path.is_absolute() else Path.cwd() / path

    def find_public_headers_path(self, source_dir: str | Path) -> str:
        """Directory holding the most ``.h`` files, relative to *source_dir*.

        Returns ``"."`` when that is *source_dir* itself and ``""`` when the
        directory is missing or has no headers.
        """
        source_dir = Path(source_dir)
        if not source_dir.is_dir():
            log.debug("fs.no_source_dir", path=str(source_dir))
            return ""

        counts = Counter(header.parent for header in sorted(source_dir.rglob("*.h")))
        if not counts:
            log.debug("fs.no_headers", path=str(source_dir))
            return ""

        most_common, _ = counts.most_common(1)[0]
        relative = most_common.relative_to(source_dir).as_posix()
        log.debug("fs.headers_found", count=sum(counts.values()), path=relative)
        return relative or "."


class GitignoreManager:
    """Keep the SwiftPM build artefacts out of version control."""

    COMMENT = "# Swift Package Manager"
    ENTRIES = (".build/", ".swiftpm/", "Package.resolved")

    def __init__(self, files: FileSystemManager) -> None:
        self._files = files

    def update(self, directory: str | Path, backup: bool = False) -> ConversionResult:
        path = Path(directory) / ".gitignore"
        try:
            current = self._files.read_file(path) if self._files.exists(path) else ""
            lines = [line.strip() for line in current.splitlines() if line.strip()]

            missing = [entry for entry in self.ENTRIES if entry not in lines]
            if not missing:
                return ConversionResult.skipped(".gitignore already contains required entries")

            addition = list(missing)
            if self.COMMENT not in lines:
                addition.insert(0, self.COMMENT)
                if current:
                    addition.insert(0, "")
            if current and not current.endswith("\n"):
                current += "\n"
            log.debug("gitignore.adding", entries=missing)

            self._files.create_backup_if_needed(path, backup)
            self._files.write_file(path, current + "\n".join(addition) + "\n")
        except FileOperationError as exc:
            log.warning("gitignore.failed", path=str(path), error=str(exc))
            return ConversionResult.error(f"Failed to update .gitignore: {exc}")

        return ConversionResult.success("Updated .gitignore with Swift Package Manager entries")
