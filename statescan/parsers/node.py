"""package.json parser."""

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from statescan.fs import ProjectFS, as_fs
from statescan.parsers.base import ParserResult, first_seen, format_dependency
from statescan.registries import DEFAULT_REGISTRIES, Registries, matches_any

logger = logging.getLogger(__name__)

PACKAGE_JSON = "package.json"


@dataclass
class NodeProjectInfo:
    """Normalized view of a package.json."""

    name: str | None = None
    version: str | None = None
    description: str | None = None
    keywords: list[str] = field(default_factory=list)
    engines: dict[str, str] = field(default_factory=dict)
    dependencies: dict[str, str] = field(default_factory=dict)
    dev_dependencies: dict[str, str] = field(default_factory=dict)
    frameworks: list[str] = field(default_factory=list)
    cloud_sdks: list[str] = field(default_factory=list)
    testing_frameworks: list[str] = field(default_factory=list)

    def all_dependencies(self) -> dict[str, str]:
        """Production then development dependencies; production wins on overlap."""
        merged = dict(self.dependencies)
        for name, version in self.dev_dependencies.items():
            merged.setdefault(name, version)
        return merged

    def dependency_names(self) -> list[str]:
        return list(dict.fromkeys([*self.dependencies, *self.dev_dependencies]))

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "version": self.version,
            "description": self.description,
            "keywords": self.keywords,
            "engines": self.engines,
            "dependencies": self.dependencies,
            "dev_dependencies": self.dev_dependencies,
            "frameworks": self.frameworks,
            "cloud_sdks": self.cloud_sdks,
            "testing_frameworks": self.testing_frameworks,
        }


async def read_package_json(fs: ProjectFS) -> dict[str, Any] | None:
    """Read package.json as a dict.

    Returns None when the file is missing, unreadable, invalid JSON or not
    a JSON object.
    """
    try:
        data = await fs.read_json(PACKAGE_JSON)
    except (OSError, json.JSONDecodeError) as e:
        logger.debug(f"Could not read {PACKAGE_JSON} in {fs.root}: {e}")
        return None
    return data if isinstance(data, dict) else None


def _string_map(value: Any, section: str, errors: list[str]) -> dict[str, str]:
    if value is None:
        return {}
    if not isinstance(value, dict):
        errors.append(f"{PACKAGE_JSON}: '{section}' is not an object")
        return {}
    result: dict[str, str] = {}
    for name, version in value.items():
        if isinstance(version, str):
            result[name] = version
        else:
            errors.append(f"{PACKAGE_JSON}: {section}.{name} has non-string version {version!r}")
    return result


def _string_list(value: Any) -> list[str]:
    if not isinstance(value, list):
        return []
    return [item for item in value if isinstance(item, str)]


class NodeParser:
    """Parse package.json into a NodeProjectInfo."""

    def __init__(self, registries: Registries = DEFAULT_REGISTRIES):
        self.registries = registries

    async def parse(self, root: str | Path | ProjectFS) -> ParserResult[NodeProjectInfo]:
        """Parse package.json.

        A missing manifest is a successful, empty result (``data`` is None).
        Invalid JSON or malformed sections are reported in ``errors``.
        """
        fs = as_fs(root)
        result: ParserResult[NodeProjectInfo] = ParserResult()
        try:
            raw = await fs.read_json(PACKAGE_JSON)
        except json.JSONDecodeError as e:
            result.add_error(f"Failed to parse {PACKAGE_JSON}: {e}")
            return result
        except OSError as e:
            result.add_error(f"Failed to read {PACKAGE_JSON}: {e}")
            return result

        if raw is None:
            return result
        if not isinstance(raw, dict):
            result.add_error(f"{PACKAGE_JSON}: top-level value is not an object")
            return result

        errors: list[str] = []
        info = NodeProjectInfo(
            name=raw.get("name") if isinstance(raw.get("name"), str) else None,
            version=raw.get("version") if isinstance(raw.get("version"), str) else None,
            description=raw.get("description") if isinstance(raw.get("description"), str) else None,
            keywords=_string_list(raw.get("keywords")),
            engines=_string_map(raw.get("engines"), "engines", errors),
            dependencies=_string_map(raw.get("dependencies"), "dependencies", errors),
            dev_dependencies=_string_map(raw.get("devDependencies"), "devDependencies", errors),
        )

        names = info.dependency_names()
        info.frameworks = self.registries.match_labels(self.registries.node_frameworks, names)
        info.cloud_sdks = self.registries.match_labels(self.registries.cloud_sdks, names)
        info.testing_frameworks = self.registries.match_labels(self.registries.node_testing, names)

        result.data = info
        for error in errors:
            result.add_error(error)
        if errors:
            logger.debug(f"{PACKAGE_JSON} in {fs.root} parsed with {len(errors)} errors")
        return result

    async def parse_project(self, root: str | Path | ProjectFS) -> NodeProjectInfo | None:
        """Parse package.json, returning None when it is missing or unusable."""
        result = await self.parse(root)
        return result.data

    def get_runtime_versions(self, info: NodeProjectInfo) -> list[str]:
        """Engine constraints ("node >=18") followed by detected frameworks with versions."""
        versions = [f"{engine} {constraint}" for engine, constraint in info.engines.items()]
        deps = info.all_dependencies()
        for framework in info.frameworks:
            name_patterns = self.registries.node_frameworks.get(framework, ())
            version = next(
                (v for name, v in deps.items() if matches_any(name, name_patterns)),
                None,
            )
            versions.append(format_dependency(framework, version))
        return first_seen(versions)

    def get_important_dependencies(self, info: NodeProjectInfo, limit: int | None = None) -> list[str]:
        """Format dependencies as ``name major.x``, production first."""
        formatted = [format_dependency(name, version) for name, version in info.all_dependencies().items()]
        return first_seen(formatted, limit)
