"""Platform-specific analyzers.

New platforms add a ``PlatformAnalyzer`` subclass here and a field on
``PlatformContext``; the orchestrator runs every entry of
``PLATFORM_ANALYZERS`` independently.
"""

from statescan.detectors.platforms.base import PlatformAnalyzer
from statescan.detectors.platforms.vscode import VSCodeAnalyzer

PLATFORM_ANALYZERS: tuple[type[PlatformAnalyzer], ...] = (VSCodeAnalyzer,)

__all__ = ["PLATFORM_ANALYZERS", "PlatformAnalyzer", "VSCodeAnalyzer"]
