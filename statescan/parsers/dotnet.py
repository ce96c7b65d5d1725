""".NET project parser (.csproj / .fsproj).

MSBuild files are read with regular expressions; only a handful of
elements are needed and a malformed file should still yield what it can.
"""

import logging
import re
from dataclasses import dataclass, field
from pathlib import Path, PurePosixPath
from typing import Any

from statescan.fs import ProjectFS, as_fs
from statescan.parsers.base import ParserResult, first_seen, format_dependency

logger = logging.getLogger(__name__)

PROJECT_EXTENSIONS = (".csproj", ".fsproj")
DEFAULT_SEARCH_DEPTH = 3

_PROJECT_RE = re.compile(r"<Project\b([^>]*)>", re.IGNORECASE)
_SDK_RE = re.compile(r"""\bSdk\s*=\s*["']([^"']+)["']""")
_TARGET_FRAMEWORK_RE = re.compile(r"<TargetFramework>\s*(.*?)\s*</TargetFramework>", re.DOTALL)
_TARGET_FRAMEWORKS_RE = re.compile(r"<TargetFrameworks>\s*(.*?)\s*</TargetFrameworks>", re.DOTALL)
_PACKAGE_REF_RE = re.compile(
    r"<PackageReference\b(?P<attrs>[^>]*?)(?:/>|>(?P<body>.*?)</PackageReference>)",
    re.DOTALL,
)
_INCLUDE_RE = re.compile(r"""\b(?:Include|Update)\s*=\s*["']([^"']+)["']""")
_VERSION_ATTR_RE = re.compile(r"""\bVersion\s*=\s*["']([^"']+)["']""")
_VERSION_ELEM_RE = re.compile(r"<Version>\s*(.*?)\s*</Version>", re.DOTALL)

WEB_MARKERS = ("Microsoft.AspNetCore", "Microsoft.NET.Sdk.Web", "Microsoft.NET.Sdk.BlazorWebAssembly")
TEST_PACKAGE_MARKERS = ("xunit", "mstest", "nunit")


@dataclass
class PackageReference:
    name: str
    version: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {"name": self.name, "version": self.version}


@dataclass
class DotNetProjectInfo:
    path: str
    target_framework: str | None = None
    target_frameworks: list[str] = field(default_factory=list)
    sdk: str | None = None
    packages: list[PackageReference] = field(default_factory=list)
    is_test_project: bool = False
    is_web_project: bool = False

    @property
    def name(self) -> str:
        return PurePosixPath(self.path).stem

    def to_dict(self) -> dict[str, Any]:
        return {
            "path": self.path,
            "name": self.name,
            "target_framework": self.target_framework,
            "target_frameworks": self.target_frameworks,
            "sdk": self.sdk,
            "packages": [p.to_dict() for p in self.packages],
            "is_test_project": self.is_test_project,
            "is_web_project": self.is_web_project,
        }


class DotNetParser:
    """Find and parse every .NET project file under a root."""

    def __init__(self, max_depth: int = DEFAULT_SEARCH_DEPTH):
        self.max_depth = max_depth

    async def parse_projects(self, root: str | Path | ProjectFS) -> ParserResult[list[DotNetProjectInfo]]:
        fs = as_fs(root)
        result: ParserResult[list[DotNetProjectInfo]] = ParserResult(data=[])

        project_files = await fs.walk(max_depth=self.max_depth, extensions=PROJECT_EXTENSIONS)
        for path in project_files:
            try:
                text = await fs.read_text(path)
            except OSError as e:
                result.add_error(f"Failed to read {path}: {e}")
                continue
            if text is None:
                continue
            project = self.parse_project_file(path, text, result)
            if project is not None:
                result.data.append(project)

        if project_files:
            logger.debug(
                f"Parsed {len(result.data)}/{len(project_files)} .NET projects in {fs.root}"
            )
        return result

    def parse_project_file(
        self, path: str, text: str, result: ParserResult | None = None,
    ) -> DotNetProjectInfo | None:
        """Extract project details from MSBuild XML text.

        Returns None (and records an error) when the text has no <Project>
        element.
        """
        result = result if result is not None else ParserResult()
        project_match = _PROJECT_RE.search(text)
        if not project_match:
            result.add_error(f"{path}: no <Project> element found")
            return None

        info = DotNetProjectInfo(path=path)

        sdk_match = _SDK_RE.search(project_match.group(1))
        if sdk_match:
            info.sdk = sdk_match.group(1)

        tf_match = _TARGET_FRAMEWORK_RE.search(text)
        if tf_match and tf_match.group(1):
            info.target_framework = tf_match.group(1)

        tfs_match = _TARGET_FRAMEWORKS_RE.search(text)
        if tfs_match:
            info.target_frameworks = [tf.strip() for tf in tfs_match.group(1).split(";") if tf.strip()]

        for ref in _PACKAGE_REF_RE.finditer(text):
            attrs = ref.group("attrs")
            include = _INCLUDE_RE.search(attrs)
            if not include:
                result.add_error(f"{path}: PackageReference without Include attribute")
                continue
            version = _VERSION_ATTR_RE.search(attrs)
            if not version and ref.group("body"):
                version = _VERSION_ELEM_RE.search(ref.group("body"))
            info.packages.append(PackageReference(include.group(1), version.group(1) if version else None))

        file_name = PurePosixPath(path).name.lower()
        package_names = " ".join(p.name.lower() for p in info.packages)
        info.is_test_project = (
            "test" in file_name
            or "spec" in file_name
            or any(marker in package_names for marker in TEST_PACKAGE_MARKERS)
        )
        info.is_web_project = any(marker in text for marker in WEB_MARKERS)
        return info

    def get_framework_versions(self, projects: list[DotNetProjectInfo]) -> list[str]:
        """Target frameworks across projects, first-seen order."""
        versions: list[str] = []
        for project in projects:
            if project.target_framework:
                versions.append(project.target_framework)
            versions.extend(project.target_frameworks)
        return first_seen(versions)

    def get_important_dependencies(self, projects: list[DotNetProjectInfo], limit: int | None = None) -> list[str]:
        """Package references as ``name major.x``, one entry per package name."""
        seen: set[str] = set()
        formatted = []
        for project in projects:
            for package in project.packages:
                key = package.name.lower()
                if key in seen:
                    continue
                seen.add(key)
                formatted.append(format_dependency(package.name, package.version))
        return first_seen(formatted, limit)
