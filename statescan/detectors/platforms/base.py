"""Base class for platform analyzers."""

from pathlib import Path
from typing import Any

from statescan.fs import ProjectFS
from statescan.models import ProjectIdentity


class PlatformAnalyzer:
    """Protocol for platform analyzers.

    Each analyzer fills the ``PlatformContext`` field named by ``platform``.
    """

    platform: str = ""

    def applies(self, identity: ProjectIdentity | None) -> bool:
        """Cheap pre-check from the identity. ``analyze`` makes the real decision."""
        return True

    async def analyze(self, root: str | Path | ProjectFS) -> Any:
        """Return the platform record, or raise NotApplicableError."""
        raise NotImplementedError
