"""Manifest parsers. Each returns a ParserResult and never raises on bad input."""

from statescan.parsers.base import ParserResult, format_dependency, format_major
from statescan.parsers.ci import CIParser, CIWorkflowInfo
from statescan.parsers.dotnet import DotNetParser, DotNetProjectInfo, PackageReference
from statescan.parsers.node import NodeParser, NodeProjectInfo, read_package_json
from statescan.parsers.python import PythonDependency, PythonParser, PythonProjectInfo, parse_requirement

__all__ = [
    "CIParser",
    "CIWorkflowInfo",
    "DotNetParser",
    "DotNetProjectInfo",
    "NodeParser",
    "NodeProjectInfo",
    "PackageReference",
    "ParserResult",
    "PythonDependency",
    "PythonParser",
    "PythonProjectInfo",
    "format_dependency",
    "format_major",
    "parse_requirement",
    "read_package_json",
]
