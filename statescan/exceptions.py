"""Exceptions raised by the state scanner.

Most detection problems never surface as exceptions: missing files are
empty results and malformed manifests become parser error strings. These
types cover the few cases a caller (or the orchestrator) has to handle.
"""


class StateScanError(Exception):
    """Base class for scanner errors."""


class NotApplicableError(StateScanError):
    """A platform analyzer was asked to analyze a project it does not apply to."""

    def __init__(self, platform: str, reason: str = ""):
        self.platform = platform
        self.reason = reason
        message = f"Not a {platform} project"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)


class RegistryError(StateScanError):
    """A registry extension file could not be loaded or validated."""


class ScanTimeoutError(StateScanError):
    """The whole scan exceeded its time budget and was discarded."""

    def __init__(self, root: str, timeout: float):
        self.root = root
        self.timeout = timeout
        super().__init__(f"Scan of {root} exceeded {timeout:.1f}s and was discarded")
