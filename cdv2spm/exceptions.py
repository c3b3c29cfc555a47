"""Custom exceptions for cdv2spm."""


class Cdv2SpmError(Exception):
    """Base exception for all cdv2spm errors."""


# ── plugin.xml ──────────────────────────────────────────────────────────


class PluginXMLError(Cdv2SpmError):
    """Raised when a plugin.xml descriptor cannot be read."""


class PluginXMLNotFoundError(PluginXMLError):
    """Raised when the plugin.xml file does not exist."""

    def __init__(self, path: str):
        self.path = path
        super().__init__(f"Plugin XML file not found at: {path}")


class InvalidPluginXMLError(PluginXMLError):
    """Raised when plugin.xml is not well-formed XML."""

    def __init__(self, reason: str):
        self.reason = reason
        super().__init__(f"Invalid XML content: {reason}")


class MissingPluginIdError(PluginXMLError):
    """Raised when the root <plugin> element has no id attribute."""

    def __init__(self) -> None:
        super().__init__("Plugin XML is missing required 'id' attribute")


# ── file system ─────────────────────────────────────────────────────────


class FileOperationError(Cdv2SpmError):
    """Raised when reading, writing or backing up a file fails."""

    def __init__(self, operation: str, path: str, cause: Exception | str | None = None):
        self.operation = operation
        self.path = path
        self.cause = cause
        message = f"Failed to {operation} {path}"
        if cause is not None:
            message += f": {cause}"
        super().__init__(message)


# ── pod spec lookup ─────────────────────────────────────────────────────


class PodSpecError(Cdv2SpmError):
    """Base exception for ``pod spec cat`` lookups."""


class PodSpecCommandFailedError(PodSpecError):
    """Raised when the pod command cannot be run or exits non-zero."""

    def __init__(self, message: str):
        super().__init__(f"Pod spec command failed: {message}")


class PodSpecInvalidOutputError(PodSpecError):
    """Raised when the pod command output is not decodable text."""

    def __init__(self, message: str):
        super().__init__(f"Invalid pod spec output: {message}")


class PodSpecInvalidJSONError(PodSpecError):
    """Raised when the pod command output is not a JSON object."""

    def __init__(self, message: str):
        super().__init__(f"Invalid pod spec JSON: {message}")
