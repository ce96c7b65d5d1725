"""Tests for agent guidance synthesis."""

import dataclasses

from statescan.guidance import DEFAULT_APPROACH, DEFAULT_RULES, AgentGuidanceGenerator
from statescan.models import (
    DependencyInfo,
    EnhancedArchitecture,
    EnhancedDependencies,
    EnhancedProjectState,
    PlatformContext,
    ProjectCapabilities,
    ProjectIdentity,
    VSCodeContext,
    VSCodeContributes,
    empty_purpose_buckets,
)


def vscode_state() -> EnhancedProjectState:
    by_purpose = empty_purpose_buckets()
    by_purpose["testing"] = [DependencyInfo(name="mocha", version="10", purpose="Test runner")]
    return EnhancedProjectState(
        identity=ProjectIdentity(project_type="vscode-extension", maturity_level="production"),
        capabilities=ProjectCapabilities(primary_features=["Tree view"]),
        architecture=EnhancedArchitecture(entry_points=["src/extension.ts"]),
        dependencies=EnhancedDependencies(
            by_purpose=by_purpose,
            critical_path=["vscode", "gray-matter", "yaml", "axios"],
        ),
        platform_context=PlatformContext(
            vscode=VSCodeContext(contributes=VSCodeContributes(views=2)),
        ),
    )


class TestAgentGuidanceGenerator:
    """Tests for guidance rules."""

    def test_empty_state(self):
        """Guidance is produced even when every section is missing."""
        guidance = AgentGuidanceGenerator().generate(None)
        assert guidance.suggested_approach == DEFAULT_APPROACH
        assert guidance.critical_files == ["package.json"]
        assert guidance.common_tasks == []
        assert guidance.watch_outs == []

        assert AgentGuidanceGenerator().generate(EnhancedProjectState()) == guidance

    def test_vscode_extension(self):
        guidance = AgentGuidanceGenerator().generate(vscode_state())

        assert guidance.suggested_approach.startswith("This is a VS Code extension.")
        assert guidance.critical_files == [
            "package.json",
            "src/extension.ts",
            "src/providers/**/*.ts",
            "package.json (contributes section)",
            "test/**/*.test.ts",
        ]
        assert guidance.common_tasks == [
            "Adding new commands",
            "Enhancing tree view functionality",
            "Adding configuration options",
            "Implementing context menus",
            "Writing tests",
            "Enhancing existing features",
        ]
        assert guidance.watch_outs[0] == "Dispose resources properly in deactivate()"
        assert "This is a production project - maintain backwards compatibility" in guidance.watch_outs
        assert (
            "Critical dependencies: vscode, gray-matter, yaml - changes may break core functionality"
            in guidance.watch_outs
        )
        assert guidance.watch_outs[-1] == "Sanitize user inputs before displaying in UI"

    def test_rules_are_additive(self):
        """A production API server gets both the type and the maturity watch-outs."""
        state = EnhancedProjectState(identity=ProjectIdentity(project_type="api-server", maturity_level="mature"))
        guidance = AgentGuidanceGenerator().generate(state)
        assert guidance.watch_outs == [
            "Validate all user inputs",
            "Implement proper error handling",
            "Secure sensitive endpoints",
            "Rate limit API calls",
            "This is a production project - maintain backwards compatibility",
            "Breaking changes require major version bump",
            "Update CHANGELOG for all changes",
        ]

    def test_prototype_warning(self):
        state = EnhancedProjectState(identity=ProjectIdentity(project_type="library", maturity_level="prototype"))
        guidance = AgentGuidanceGenerator().generate(state)
        assert guidance.watch_outs == ["This is a prototype - major refactoring may be needed"]
        assert guidance.common_tasks[0] == "Adding new API methods"

    def test_python_project_adds_pyproject(self):
        state = EnhancedProjectState(
            identity=ProjectIdentity(project_type="python-package", primary_language="Python"),
            architecture=EnhancedArchitecture(entry_points=["main.py"]),
        )
        guidance = AgentGuidanceGenerator().generate(state)
        assert guidance.critical_files == ["package.json", "pyproject.toml", "main.py"]

    def test_custom_rules(self):
        rules = dataclasses.replace(DEFAULT_RULES, default_approach="Be careful.")
        guidance = AgentGuidanceGenerator(rules).generate(None)
        assert guidance.suggested_approach == "Be careful."
