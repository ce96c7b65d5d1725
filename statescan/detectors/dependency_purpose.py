"""Group declared dependencies by what they are used for."""

import asyncio
import logging
from pathlib import Path

from statescan.fs import ProjectFS, as_fs
from statescan.models import DependencyInfo, EnhancedDependencies, empty_purpose_buckets
from statescan.parsers.node import read_package_json
from statescan.parsers.python import PythonParser
from statescan.registries import DEFAULT_REGISTRIES, Registries, normalize_package_name

logger = logging.getLogger(__name__)


class DependencyPurposeMapper:
    """Map Node and Python dependencies onto purpose buckets.

    A name declared both for production and for development counts as
    production: it can be on the critical path and is never dev-only.
    """

    def __init__(self, registries: Registries = DEFAULT_REGISTRIES):
        self.registries = registries

    async def map(self, root: str | Path | ProjectFS) -> EnhancedDependencies:
        fs = as_fs(root)
        package, python_info = await asyncio.gather(
            read_package_json(fs),
            PythonParser(self.registries).parse_project(fs),
        )
        if package is None and python_info is None:
            return EnhancedDependencies()

        production: list[tuple[str, str]] = []
        development: list[tuple[str, str]] = []
        if package is not None:
            production.extend(_declared(package.get("dependencies")))
            development.extend(_declared(package.get("devDependencies")))
        if python_info is not None:
            production.extend((d.name, d.version or "") for d in python_info.dependencies)
            development.extend((d.name, d.version or "") for d in python_info.dev_dependencies)

        return self.classify(production, development)

    def classify(
        self, production: list[tuple[str, str]], development: list[tuple[str, str]],
    ) -> EnhancedDependencies:
        """Build EnhancedDependencies from (name, version) declarations."""
        production_keys = {normalize_package_name(name) for name, _ in production}

        by_purpose = empty_purpose_buckets()
        critical_path: list[str] = []
        dev_only: list[str] = []
        seen: set[str] = set()

        for name, version in [*production, *development]:
            key = normalize_package_name(name)
            if key in seen:
                continue
            seen.add(key)

            is_production = key in production_keys
            if not is_production:
                dev_only.append(name)

            purpose = self.registries.purpose_of(name)
            if purpose is None:
                continue
            by_purpose[purpose.category].append(
                DependencyInfo(name=name, version=version, purpose=purpose.purpose, critical=purpose.critical)
            )
            if purpose.critical and is_production:
                critical_path.append(name)

        logger.debug(
            f"Mapped {sum(len(deps) for deps in by_purpose.values())} known dependencies "
            f"({len(critical_path)} critical, {len(dev_only)} dev-only)"
        )
        return EnhancedDependencies(by_purpose=by_purpose, critical_path=critical_path, dev_only=dev_only)


def _declared(section) -> list[tuple[str, str]]:
    if not isinstance(section, dict):
        return []
    return [(name, version if isinstance(version, str) else "") for name, version in section.items()]
