"""Flat technology-stack report: languages, frameworks, tooling, layout, docs."""

import asyncio
import logging

from statescan.detectors.manifests import Manifests
from statescan.fs import ProjectFS
from statescan.parsers.ci import CIParser
from statescan.parsers.dotnet import DotNetParser
from statescan.parsers.python import PythonParser
from statescan.registries import DEFAULT_REGISTRIES, Registries

logger = logging.getLogger(__name__)

# Subdirectories listed in the src/ architecture note
SRC_NOTE_LIMIT = 5


class StackDetector:
    """Each ``detect_*`` method returns an unsorted list; the scanner dedups."""

    def __init__(self, registries: Registries = DEFAULT_REGISTRIES, dependency_limit: int | None = None):
        self.registries = registries
        self.dependency_limit = dependency_limit
        self.python_parser = PythonParser(registries)
        self.dotnet_parser = DotNetParser()
        self.ci_parser = CIParser()

    async def _labels(self, fs: ProjectFS, table) -> list[str]:
        """Labels of a (candidates, label) table whose candidates exist, in table order."""
        found = await asyncio.gather(*(fs.exists_any(candidates) for candidates, _ in table))
        return [label for (_, label), ok in zip(table, found) if ok]

    # =========================================================================
    # Technology stack
    # =========================================================================

    async def detect_languages(self, fs: ProjectFS, manifests: Manifests) -> list[str]:
        languages: list[str] = []

        if manifests.dotnet:
            versions = self.dotnet_parser.get_framework_versions(manifests.dotnet)
            if versions:
                languages.extend(f"C# ({v})" for v in versions)
            else:
                languages.append("C#")

        if manifests.python is not None:
            requires = manifests.python.requires_python
            languages.append(f"Python {requires}" if requires else "Python")

        if manifests.node is not None:
            node_engine = manifests.node.engines.get("node")
            languages.append(f"JavaScript/TypeScript ({node_engine})" if node_engine else "JavaScript/TypeScript")
        elif await fs.is_file("package.json"):
            # Unparseable package.json still marks a JavaScript project
            languages.append("JavaScript/TypeScript")

        languages.extend(await self._labels(fs, self.registries.language_markers))
        return languages

    async def detect_frameworks(self, fs: ProjectFS, manifests: Manifests) -> list[str]:
        frameworks: list[str] = []

        for project in manifests.dotnet:
            if project.is_web_project:
                frameworks.append("ASP.NET Core")
            if project.is_test_project:
                frameworks.append("xUnit (testing)")
            if project.target_framework:
                frameworks.append(f".NET {project.target_framework}")

        if manifests.node is not None:
            frameworks.append("Node.js")
            frameworks.extend(manifests.node.frameworks)
            frameworks.extend(manifests.node.cloud_sdks)

        if manifests.python is not None:
            frameworks.append("Python")
            frameworks.extend(manifests.python.frameworks)
            frameworks.extend(manifests.python.testing_frameworks)
            frameworks.extend(
                self.registries.match_labels(self.registries.cloud_sdks, manifests.python_dependency_names())
            )

        markers = self.registries.framework_markers
        found = await fs.existing(path for path, _ in markers)
        frameworks.extend(label for path, label in markers if path in found)
        return frameworks

    def detect_dependencies(self, manifests: Manifests) -> list[str]:
        """Important Python and .NET dependencies as ``name major.x``."""
        dependencies: list[str] = []
        if manifests.python is not None:
            dependencies.extend(self.python_parser.get_important_dependencies(manifests.python, self.dependency_limit))
        if manifests.dotnet:
            dependencies.extend(self.dotnet_parser.get_important_dependencies(manifests.dotnet, self.dependency_limit))
        return dependencies

    # =========================================================================
    # Development environment
    # =========================================================================

    async def detect_build_tools(self, fs: ProjectFS, manifests: Manifests) -> list[str]:
        build_tools: list[str] = []

        if manifests.dotnet:
            versions = self.dotnet_parser.get_framework_versions(manifests.dotnet)
            build_tools.append(f".NET SDK {versions[0]}" if versions else ".NET SDK")

        if manifests.python is not None and manifests.python.build_system:
            build_tools.append(f"Python Build: {manifests.python.build_system}")

        build_tools.extend(f"{workflow.type} ({workflow.name})" for workflow in manifests.workflows)
        build_tools.extend(f"CI runtime: {v}" for v in self.ci_parser.get_runtime_versions(manifests.workflows))
        build_tools.extend(await self._labels(fs, self.registries.build_tool_files))
        return build_tools

    async def detect_testing(self, fs: ProjectFS, manifests: Manifests) -> list[str]:
        testing: list[str] = []
        if manifests.node is not None:
            testing.extend(manifests.node.testing_frameworks)
        if manifests.python is not None:
            testing.extend(manifests.python.testing_frameworks)
        if any(project.is_test_project for project in manifests.dotnet):
            testing.append("xUnit framework")
        testing.extend(await self._labels(fs, self.registries.testing_files))
        return testing

    async def detect_code_quality(self, fs: ProjectFS, manifests: Manifests) -> list[str]:
        return await self._labels(fs, self.registries.code_quality_files)

    async def detect_development_tools(self, fs: ProjectFS, manifests: Manifests) -> list[str]:
        tools = await self._labels(fs, self.registries.development_tool_files)
        if manifests.python is not None and manifests.python.build_backend:
            tools.append(f"Python build backend: {manifests.python.build_backend}")
        return tools

    # =========================================================================
    # Project structure
    # =========================================================================

    async def detect_architecture(self, fs: ProjectFS, manifests: Manifests) -> list[str]:
        notes: list[str] = []
        source_dir = self.registries.source_dir

        if len(await fs.existing_dirs([f"{source_dir}/providers", f"{source_dir}/commands"])) == 2:
            notes.append("VS Code extension architecture (providers + commands)")

        if await fs.is_dir(source_dir):
            subdirs = [d for d in await fs.list_dir(source_dir, dirs_only=True) if not d.startswith(".")]
            if subdirs:
                listed = ", ".join(subdirs[:SRC_NOTE_LIMIT])
                more = "..." if len(subdirs) > SRC_NOTE_LIMIT else ""
                notes.append(f"{source_dir}/ structure with {len(subdirs)} subdirectories ({listed}{more})")
            else:
                notes.append(f"{source_dir}/ structure (flat)")

        dir_notes = self.registries.architecture_notes
        present = await fs.existing_dirs(path for path, _ in dir_notes)
        notes.extend(note for path, note in dir_notes if path in present)

        file_notes = self.registries.architecture_file_notes
        present = await fs.existing(path for path, _ in file_notes)
        notes.extend(note for path, note in file_notes if path in present)
        return notes

    async def detect_configuration(self, fs: ProjectFS, manifests: Manifests) -> list[str]:
        return await fs.existing(self.registries.configuration_files)

    async def detect_documentation(self, fs: ProjectFS, manifests: Manifests) -> list[str]:
        docs = await fs.existing(self.registries.documentation_files)
        doc_dirs = self.registries.documentation_dirs
        present = await fs.existing_dirs(path for path, _ in doc_dirs)
        docs.extend(label for path, label in doc_dirs if path in present)
        docs.extend(await self._labels(fs, self.registries.api_documentation_files))
        return docs
