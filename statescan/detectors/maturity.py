"""Maturity classification from manifest version and changelog presence."""

import logging
import re
from pathlib import Path

from statescan.fs import ProjectFS, as_fs
from statescan.parsers.node import read_package_json
from statescan.parsers.python import PythonParser
from statescan.registries import DEFAULT_REGISTRIES, Registries

logger = logging.getLogger(__name__)

_SEMVER_RE = re.compile(r"^(\d+)\.(\d+)\.(\d+)")


class MaturityDetector:
    """Map a version string and changelog presence to a maturity level.

    | version        | no changelog       | changelog  |
    |----------------|--------------------|------------|
    | 0.0.x          | prototype          | prototype  |
    | 0.y.x (y > 0)  | active-development | beta       |
    | >= 1.0.0       | stable             | production |
    | unparseable    | unknown            | unknown    |
    """

    def __init__(self, registries: Registries = DEFAULT_REGISTRIES):
        self.registries = registries

    @staticmethod
    def classify(version: str | None, has_changelog: bool) -> str:
        match = _SEMVER_RE.match((version or "").strip().lstrip("v"))
        if not match:
            return "unknown"
        major, minor = int(match.group(1)), int(match.group(2))
        if major == 0 and minor == 0:
            return "prototype"
        if major == 0:
            return "beta" if has_changelog else "active-development"
        return "production" if has_changelog else "stable"

    async def has_changelog(self, root: str | Path | ProjectFS) -> bool:
        return await as_fs(root).exists_any(self.registries.changelog_files)

    async def read_version(self, root: str | Path | ProjectFS) -> str | None:
        """Manifest version: package.json first (missing field is "0.0.0"), then Python metadata."""
        fs = as_fs(root)
        package = await read_package_json(fs)
        if package is not None:
            version = package.get("version")
            return version if isinstance(version, str) else "0.0.0"
        python_info = await PythonParser(self.registries).parse_project(fs)
        if python_info is not None:
            return python_info.version
        return None

    async def detect(self, root: str | Path | ProjectFS) -> str:
        fs = as_fs(root)
        version = await self.read_version(fs)
        if version is None:
            return "unknown"
        level = self.classify(version, await self.has_changelog(fs))
        logger.debug(f"Maturity of {fs.root}: {level} (version {version})")
        return level
