"""Parsed manifests shared by the basic stack detectors within one scan."""

from dataclasses import dataclass, field

from statescan.parsers.ci import CIWorkflowInfo
from statescan.parsers.dotnet import DotNetProjectInfo
from statescan.parsers.node import NodeProjectInfo
from statescan.parsers.python import PythonProjectInfo
from statescan.registries import normalize_package_name


@dataclass
class Manifests:
    """Parser outputs for one root. A missing ecosystem is None / empty."""

    node: NodeProjectInfo | None = None
    python: PythonProjectInfo | None = None
    dotnet: list[DotNetProjectInfo] = field(default_factory=list)
    workflows: list[CIWorkflowInfo] = field(default_factory=list)

    def dependency_names(self) -> set[str]:
        """Lowercase Node names and normalized Python names, production and dev."""
        names: set[str] = set()
        if self.node is not None:
            names.update(name.lower() for name in self.node.dependency_names())
        if self.python is not None:
            names.update(self.python.dependency_names())
        return names

    def python_dependency_names(self) -> list[str]:
        if self.python is None:
            return []
        return [normalize_package_name(dep.name) for dep in [*self.python.dependencies, *self.python.dev_dependencies]]
