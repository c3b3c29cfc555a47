"""Add a conditional ``import Cordova`` to plugin Swift sources.

Once a plugin builds as a Swift package, Cordova types are no longer visible
through the bridging header, so any Swift file that uses them needs an
explicit import guarded by ``#if canImport(Cordova)``.
"""

from __future__ import annotations

from pathlib import Path

import structlog

from cdv2spm.engines.plugin_converter.filesystem import FileSystemManager
from cdv2spm.exceptions import FileOperationError

log = structlog.get_logger("cdv2spm.converter")

SOURCE_DIR = Path("src") / "ios"

IMPORT_BLOCK = ["#if canImport(Cordova)", "import Cordova", "#endif", ""]

CORDOVA_SYMBOLS = (
    "CDVPlugin",
    "CDVCommandDelegate",
    "CDVPluginResult",
    "CDVInvokedUrlCommand",
    "CDVViewController",
    "CDVWebViewEngine",
    "CDVUserAgentUtil",
    "CDVAvailability",
    "CDVTimer",
    "CDVLocalStorage",
    "CDVHandlersFactory",
    "CDVConfigParser",
    "CDVAppDelegate",
    "CDVCommandQueue",
    "CDVConnection",
    "CDVDevice",
    "CDVFile",
    "CDVGlobalization",
    "CDVInAppBrowser",
    "CDVLocation",
    "CDVNotification",
    "CDVSound",
    "CDVSplashScreen",
    "CDVURLProtocol",
    "CDVWhitelist",
)


class SwiftImportManager:
    def __init__(self, files: FileSystemManager) -> None:
        self._files = files

    def add_cordova_imports(self, plugin_dir: str | Path) -> bool:
        """Patch every Swift file under ``<plugin_dir>/src/ios``.

        Returns False if any file could not be read or written. A plugin
        without a ``src/ios`` directory has nothing to patch and succeeds.
        """
        source_dir = Path(plugin_dir) / SOURCE_DIR
        if not source_dir.is_dir():
            log.debug("swift_imports.no_source_dir", path=str(source_dir))
            return True

        files = sorted(source_dir.rglob("*.swift"))
        failed = 0
        for path in files:
            try:
                self._process(path)
            except FileOperationError as exc:
                failed += 1
                log.error("swift_imports.failed", file=path.name, error=str(exc))

        log.info("swift_imports.done", files=len(files), failed=failed)
        return failed == 0

    def _process(self, path: Path) -> None:
        content = self._files.read_file(path)
        if has_cordova_import(content):
            log.debug("swift_imports.already_imported", file=path.name)
            return
        if not needs_cordova_import(content):
            log.debug("swift_imports.not_needed", file=path.name)
            return
        self._files.write_file(path, insert_cordova_import(content), create_parents=False)
        log.debug("swift_imports.added", file=path.name)


def has_cordova_import(content: str) -> bool:
    for line in content.splitlines():
        stripped = line.strip()
        if stripped == "import Cordova" or "#if canImport(Cordova)" in stripped:
            return True
    return False


def needs_cordova_import(content: str) -> bool:
    return any(symbol in content for symbol in CORDOVA_SYMBOLS)


def insert_cordova_import(content: str) -> str:
    """Insert the guarded import before the first ``import`` line.

    Files with no imports get it after their leading comment block.
    """
    lines = content.split("\n")

    for index, line in enumerate(lines):
        if line.strip().startswith("import "):
            return "\n".join(lines[:index] + IMPORT_BLOCK + lines[index:])

    insert_at = 0
    for index, line in enumerate(lines):
        stripped = line.strip()
        if stripped and not stripped.startswith(("//", "/*", "*")):
            insert_at = index
            break
    return "\n".join(lines[:insert_at] + IMPORT_BLOCK + lines[insert_at:])
