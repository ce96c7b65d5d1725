"""Project identity: type, domain, primary language and maturity."""

import asyncio
import logging
from pathlib import Path
from typing import Any

from statescan.detectors.maturity import MaturityDetector
from statescan.fs import ProjectFS, as_fs
from statescan.models import ProjectIdentity
from statescan.parsers.node import read_package_json
from statescan.parsers.python import PythonParser, PythonProjectInfo
from statescan.registries import DEFAULT_REGISTRIES, Registries

logger = logging.getLogger(__name__)


def _dict(value: Any) -> dict:
    return value if isinstance(value, dict) else {}


class ProjectIdentityDetector:
    def __init__(self, registries: Registries = DEFAULT_REGISTRIES):
        self.registries = registries
        self.maturity = MaturityDetector(registries)

    async def detect(self, root: str | Path | ProjectFS) -> ProjectIdentity:
        fs = as_fs(root)
        package, python_info = await asyncio.gather(
            read_package_json(fs),
            PythonParser(self.registries).parse_project(fs),
        )

        project_type, primary_language, maturity_level = await asyncio.gather(
            self.detect_project_type(fs, package),
            self.detect_primary_language(fs, package),
            self._detect_maturity(fs, package, python_info),
        )
        identity = ProjectIdentity(
            project_type=project_type,
            domain=self.detect_domain(package, python_info),
            primary_language=primary_language,
            maturity_level=maturity_level,
        )
        logger.debug(f"Identity of {fs.root}: {identity.project_type}/{identity.primary_language}")
        return identity

    async def detect_project_type(self, fs: ProjectFS, package: dict[str, Any] | None) -> str:
        """First matching rule wins; the order is the priority."""
        if package is None:
            for candidates, project_type in self.registries.fallback_project_types:
                if await fs.exists_any(candidates):
                    return project_type
            return "unknown"

        if "vscode" in _dict(package.get("engines")):
            return "vscode-extension"
        if package.get("bin"):
            return "cli-tool"

        production = _dict(package.get("dependencies"))
        if any(dep in production for dep in self.registries.web_app_dependencies):
            return "web-app"
        if await fs.is_file("index.html"):
            return "web-app"
        if any(dep in production for dep in self.registries.api_server_dependencies):
            return "api-server"
        if package.get("main") and not package.get("private"):
            return "library"
        return "application"

    def detect_domain(self, package: dict[str, Any] | None, python_info: PythonProjectInfo | None) -> str:
        keywords: list[str] = []
        if package is not None and isinstance(package.get("keywords"), list):
            keywords = [k for k in package["keywords"] if isinstance(k, str)]
        if not keywords and python_info is not None:
            keywords = python_info.keywords
        lowered = {k.lower() for k in keywords}

        for domain, domain_keywords in self.registries.domain_keywords:
            if lowered & domain_keywords:
                return domain
        return "general"

    async def detect_primary_language(self, fs: ProjectFS, package: dict[str, Any] | None) -> str:
        if await fs.is_file("tsconfig.json"):
            return "TypeScript"
        if package is not None:
            deps = {**_dict(package.get("devDependencies")), **_dict(package.get("dependencies"))}
            if "typescript" in deps:
                return "TypeScript"
            if package.get("type") == "module" or deps:
                return "JavaScript"
        for candidates, language in self.registries.primary_language_markers:
            if await fs.exists_any(candidates):
                return language
        return "JavaScript"

    async def _detect_maturity(
        self, fs: ProjectFS, package: dict[str, Any] | None, python_info: PythonProjectInfo | None,
    ) -> str:
        if package is not None:
            version = package.get("version")
            version = version if isinstance(version, str) else "0.0.0"
        elif python_info is not None and python_info.version:
            version = python_info.version
        else:
            return "unknown"
        return self.maturity.classify(version, await self.maturity.has_changelog(fs))
