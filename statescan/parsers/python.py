"""Python project parser.

Reads, in order: pyproject.toml (PEP 621 ``[project]`` and Poetry tables),
setup.py, requirements.txt, requirements-dev.txt, runtime.txt and
.python-version. Earlier sources win for scalar fields; dependency lists
accumulate.
"""

import logging
import re
import tomllib
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from statescan.fs import ProjectFS, as_fs
from statescan.parsers.base import ParserResult, first_seen, format_dependency
from statescan.registries import DEFAULT_REGISTRIES, Registries, matches_any, normalize_package_name

logger = logging.getLogger(__name__)

PYPROJECT = "pyproject.toml"
SETUP_PY = "setup.py"
REQUIREMENTS = ("requirements.txt",)
DEV_REQUIREMENTS = ("requirements-dev.txt", "dev-requirements.txt", "requirements/dev.txt")
RUNTIME_TXT = "runtime.txt"
PYTHON_VERSION_FILE = ".python-version"

# Optional-dependency groups that count as development-time
DEV_GROUPS = frozenset({"dev", "develop", "development", "test", "tests", "testing", "lint", "linting", "typing"})

_REQUIREMENT_RE = re.compile(
    r"""^(?P<name>[A-Za-z0-9](?:[A-Za-z0-9._-]*[A-Za-z0-9])?)   # project name
        \s*(?:\[[^\]]*\])?                                      # extras
        \s*(?:
            @\s*\S+                                             # direct reference
          | \(?\s*(?P<spec>(?:===|==|>=|<=|~=|!=|>|<)[^;]*?)\s*\)?  # version specifier
        )?
        \s*(?:;.*)?$                                            # environment marker
    """,
    re.VERBOSE,
)

_SETUP_FIELD_RE = r"""\b{field}\s*=\s*["']([^"']+)["']"""
_SETUP_LIST_RE = re.compile(r"install_requires\s*=\s*\[(.*?)\]", re.DOTALL)
_QUOTED_RE = re.compile(r"""["']([^"']+)["']""")
_RUNTIME_RE = re.compile(r"^python-(\S+)", re.MULTILINE)


@dataclass
class PythonDependency:
    name: str
    version: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {"name": self.name, "version": self.version}


@dataclass
class PythonProjectInfo:
    """Aggregated Python project metadata."""

    name: str | None = None
    version: str | None = None
    description: str | None = None
    keywords: list[str] = field(default_factory=list)
    requires_python: str | None = None
    dependencies: list[PythonDependency] = field(default_factory=list)
    dev_dependencies: list[PythonDependency] = field(default_factory=list)
    build_system: str | None = None
    build_backend: str | None = None
    frameworks: list[str] = field(default_factory=list)
    testing_frameworks: list[str] = field(default_factory=list)
    sources: list[str] = field(default_factory=list)

    @property
    def found(self) -> bool:
        return bool(self.sources)

    def dependency_names(self) -> list[str]:
        return first_seen(
            normalize_package_name(dep.name)
            for dep in [*self.dependencies, *self.dev_dependencies]
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "version": self.version,
            "description": self.description,
            "keywords": self.keywords,
            "requires_python": self.requires_python,
            "dependencies": [d.to_dict() for d in self.dependencies],
            "dev_dependencies": [d.to_dict() for d in self.dev_dependencies],
            "build_system": self.build_system,
            "build_backend": self.build_backend,
            "frameworks": self.frameworks,
            "testing_frameworks": self.testing_frameworks,
            "sources": self.sources,
        }


def parse_requirement(line: str) -> PythonDependency | None:
    """Parse one PEP 508 requirement string. Returns None if it does not parse."""
    match = _REQUIREMENT_RE.match(line.strip())
    if not match:
        return None
    spec = match.group("spec")
    return PythonDependency(name=match.group("name"), version=spec.replace(" ", "") if spec else None)


class PythonParser:
    """Parse Python project manifests into a PythonProjectInfo."""

    def __init__(self, registries: Registries = DEFAULT_REGISTRIES):
        self.registries = registries

    async def parse_projects(self, root: str | Path | ProjectFS) -> ParserResult[PythonProjectInfo]:
        fs = as_fs(root)
        info = PythonProjectInfo()
        result: ParserResult[PythonProjectInfo] = ParserResult(data=info)

        text = await self._read(fs, PYPROJECT, result)
        if text is not None:
            info.sources.append(PYPROJECT)
            self._parse_pyproject(text, info, result)

        text = await self._read(fs, SETUP_PY, result)
        if text is not None:
            info.sources.append(SETUP_PY)
            self._parse_setup_py(text, info)

        for filename in REQUIREMENTS:
            text = await self._read(fs, filename, result)
            if text is not None:
                info.sources.append(filename)
                info.dependencies.extend(self._parse_requirements(text, filename, result))

        for filename in DEV_REQUIREMENTS:
            text = await self._read(fs, filename, result)
            if text is not None:
                info.sources.append(filename)
                info.dev_dependencies.extend(self._parse_requirements(text, filename, result))

        text = await self._read(fs, RUNTIME_TXT, result)
        if text is not None:
            info.sources.append(RUNTIME_TXT)
            match = _RUNTIME_RE.search(text)
            if match:
                info.requires_python = info.requires_python or match.group(1)
            else:
                result.add_error(f"{RUNTIME_TXT}: expected 'python-X.Y'")

        text = await self._read(fs, PYTHON_VERSION_FILE, result)
        if text is not None and text.strip():
            info.sources.append(PYTHON_VERSION_FILE)
            info.requires_python = info.requires_python or text.strip().splitlines()[0]

        names = info.dependency_names()
        info.frameworks = self.registries.match_labels(self.registries.python_frameworks, names)
        info.testing_frameworks = self.registries.match_labels(self.registries.python_testing, names)

        if result.errors:
            logger.debug(f"Python manifests in {fs.root} parsed with {len(result.errors)} errors")
        return result

    async def parse_project(self, root: str | Path | ProjectFS) -> PythonProjectInfo | None:
        """Like ``parse_projects`` but returns None when no Python manifest exists."""
        result = await self.parse_projects(root)
        return result.data if result.data and result.data.found else None

    # =========================================================================
    # Sources
    # =========================================================================

    async def _read(self, fs: ProjectFS, path: str, result: ParserResult) -> str | None:
        try:
            return await fs.read_text(path)
        except OSError as e:
            result.add_error(f"Failed to read {path}: {e}")
            return None

    def _parse_pyproject(self, text: str, info: PythonProjectInfo, result: ParserResult) -> None:
        try:
            data = tomllib.loads(text)
        except tomllib.TOMLDecodeError as e:
            result.add_error(f"Failed to parse {PYPROJECT}: {e}")
            return

        project = data.get("project", {})
        if not isinstance(project, dict):
            result.add_error(f"{PYPROJECT}: [project] is not a table")
        tool = data.get("tool", {})
        if not isinstance(tool, dict):
            result.add_error(f"{PYPROJECT}: [tool] is not a table")
            tool = {}
        poetry = tool.get("poetry", {})
        for table in (project, poetry):
            if not isinstance(table, dict):
                continue
            info.name = info.name or _str_or_none(table.get("name"))
            info.version = info.version or _str_or_none(table.get("version"))
            info.description = info.description or _str_or_none(table.get("description"))
            if not info.keywords and isinstance(table.get("keywords"), list):
                info.keywords = [k for k in table["keywords"] if isinstance(k, str)]

        if isinstance(project, dict):
            info.requires_python = _str_or_none(project.get("requires-python"))
            info.dependencies.extend(
                self._parse_requirement_list(project.get("dependencies", []), "project.dependencies", result)
            )
            optional = project.get("optional-dependencies", {})
            if isinstance(optional, dict):
                for group, requirements in optional.items():
                    if group.lower() in DEV_GROUPS:
                        info.dev_dependencies.extend(
                            self._parse_requirement_list(
                                requirements, f"project.optional-dependencies.{group}", result
                            )
                        )

        # PEP 735 dependency groups
        groups = data.get("dependency-groups", {})
        if isinstance(groups, dict):
            for group, requirements in groups.items():
                if group.lower() in DEV_GROUPS:
                    info.dev_dependencies.extend(
                        self._parse_requirement_list(requirements, f"dependency-groups.{group}", result)
                    )

        if isinstance(poetry, dict):
            for name, spec in _poetry_table(poetry.get("dependencies")).items():
                if name.lower() == "python":
                    info.requires_python = info.requires_python or _poetry_version(spec)
                else:
                    info.dependencies.append(PythonDependency(name, _poetry_version(spec)))
            dev_tables = [poetry.get("dev-dependencies")]
            poetry_groups = poetry.get("group", {})
            if isinstance(poetry_groups, dict):
                dev_tables += [
                    body.get("dependencies") for group, body in poetry_groups.items()
                    if group.lower() in DEV_GROUPS and isinstance(body, dict)
                ]
            for table in dev_tables:
                for name, spec in _poetry_table(table).items():
                    info.dev_dependencies.append(PythonDependency(name, _poetry_version(spec)))

        build = data.get("build-system", {})
        if isinstance(build, dict):
            requires = build.get("requires", [])
            if not isinstance(requires, list):
                result.add_error(f"{PYPROJECT}: build-system.requires is not an array")
                requires = []
            requires = [r for r in requires if isinstance(r, str)]
            if requires:
                info.build_system = ", ".join(requires)
            info.build_backend = _str_or_none(build.get("build-backend"))

    def _parse_setup_py(self, text: str, info: PythonProjectInfo) -> None:
        for attr, setup_field in (("name", "name"), ("version", "version"),
                                  ("description", "description"), ("requires_python", "python_requires")):
            if getattr(info, attr):
                continue
            match = re.search(_SETUP_FIELD_RE.format(field=setup_field), text)
            if match:
                setattr(info, attr, match.group(1))

        match = _SETUP_LIST_RE.search(text)
        if match:
            for requirement in _QUOTED_RE.findall(match.group(1)):
                dep = parse_requirement(requirement)
                if dep:
                    info.dependencies.append(dep)

    def _parse_requirement_list(self, requirements: Any, source: str, result: ParserResult) -> list[PythonDependency]:
        if not isinstance(requirements, list):
            result.add_error(f"{PYPROJECT}: {source} is not an array")
            return []
        deps = []
        for index, requirement in enumerate(requirements):
            if not isinstance(requirement, str):
                # PEP 735 include-group tables and the like
                continue
            dep = parse_requirement(requirement)
            if dep is None:
                result.add_error(f"{PYPROJECT}: {source}[{index}]: cannot parse {requirement!r}")
            else:
                deps.append(dep)
        return deps

    def _parse_requirements(self, text: str, filename: str, result: ParserResult) -> list[PythonDependency]:
        deps = []
        for lineno, raw in enumerate(text.splitlines(), start=1):
            line = raw.split(" #", 1)[0].strip()
            if not line or line.startswith("#"):
                continue
            # pip options (-r, -e, -c, --index-url, ...)
            if line.startswith("-"):
                continue
            dep = parse_requirement(line)
            if dep is None:
                result.add_error(f"{filename}:{lineno}: cannot parse {line!r}")
            else:
                deps.append(dep)
        return deps

    # =========================================================================
    # Queries
    # =========================================================================

    def get_runtime_versions(self, info: PythonProjectInfo) -> list[str]:
        """Python constraint ("python >=3.11") followed by frameworks with versions."""
        versions = []
        if info.requires_python:
            versions.append(f"python {info.requires_python}")
        deps = [*info.dependencies, *info.dev_dependencies]
        for framework in info.frameworks:
            name_patterns = self.registries.python_frameworks.get(framework, ())
            version = next(
                (d.version for d in deps if matches_any(normalize_package_name(d.name), name_patterns)),
                None,
            )
            versions.append(format_dependency(framework, version))
        return first_seen(versions)

    def get_important_dependencies(self, info: PythonProjectInfo, limit: int | None = None) -> list[str]:
        """Format dependencies as ``name major.x``, production first, one entry per name."""
        seen: set[str] = set()
        formatted = []
        for dep in [*info.dependencies, *info.dev_dependencies]:
            key = normalize_package_name(dep.name)
            if key in seen:
                continue
            seen.add(key)
            formatted.append(format_dependency(dep.name, dep.version))
        return first_seen(formatted, limit)


def _str_or_none(value: Any) -> str | None:
    return value if isinstance(value, str) and value else None


def _poetry_table(value: Any) -> dict[str, Any]:
    return value if isinstance(value, dict) else {}


def _poetry_version(spec: Any) -> str | None:
    """Poetry dependency specs are either "^1.2" or {version = "^1.2", ...}."""
    if isinstance(spec, dict):
        spec = spec.get("version")
    if not isinstance(spec, str) or spec.strip() in ("", "*"):
        return None
    return spec.strip()
