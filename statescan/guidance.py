"""Agent guidance synthesized from the enhanced detector outputs.

Pure function of its input: no filesystem access. Rule tables keyed by
project type and maturity level are applied in turn and their outputs
appended, so a production API server collects both the API-server and the
production watch-outs.
"""

import logging
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Mapping

from statescan.models import AgentGuidance, EnhancedProjectState

logger = logging.getLogger(__name__)

DEFAULT_APPROACH = (
    "Standard application development practices apply. "
    "Follow the existing code style and architecture patterns."
)

APPROACHES = {
    "vscode-extension": (
        "This is a VS Code extension. Modifications should maintain VS Code API compatibility, "
        "properly dispose resources, and follow extension development best practices. "
        "Use vscode.workspace.fs for file operations and register all disposables."
    ),
    "web-app": (
        "This is a web application. Consider component reusability, state management patterns, "
        "and browser compatibility. Ensure proper error boundaries and accessibility compliance."
    ),
    "library": (
        "This is a library. Maintain backwards compatibility, consider API stability, and ensure "
        "comprehensive testing. Document all public APIs thoroughly and follow semantic versioning."
    ),
    "cli-tool": (
        "This is a CLI tool. Focus on clear error messages, proper exit codes, and good help "
        "documentation. Handle input validation and provide meaningful feedback."
    ),
    "api-server": (
        "This is an API server. Follow REST/GraphQL best practices, implement proper error handling, "
        "validate inputs, and ensure secure authentication. Use middleware for cross-cutting concerns."
    ),
}

TASKS = {
    "vscode-extension": (
        "Adding new commands",
        "Enhancing tree view functionality",
        "Adding configuration options",
        "Implementing context menus",
    ),
    "web-app": (
        "Adding new components",
        "Implementing new routes/pages",
        "Updating styles and themes",
        "Adding state management",
    ),
    "api-server": (
        "Adding new API endpoints",
        "Implementing middleware",
        "Adding authentication/authorization",
        "Database migrations",
    ),
    "library": (
        "Adding new API methods",
        "Writing documentation",
        "Adding examples",
        "Performance optimization",
    ),
}

TYPE_WATCH_OUTS = {
    "vscode-extension": (
        "Dispose resources properly in deactivate()",
        "Use vscode.workspace.fs for file operations",
        "Test with various workspace configurations",
        "Register all commands in package.json",
        "Avoid blocking the main thread",
    ),
    "web-app": (
        "Ensure proper error boundaries",
        "Consider accessibility (a11y) requirements",
        "Test on multiple browsers",
        "Optimize bundle size",
    ),
    "api-server": (
        "Validate all user inputs",
        "Implement proper error handling",
        "Secure sensitive endpoints",
        "Rate limit API calls",
    ),
}

_PRODUCTION_WATCH_OUTS = (
    "This is a production project - maintain backwards compatibility",
    "Breaking changes require major version bump",
    "Update CHANGELOG for all changes",
)

MATURITY_WATCH_OUTS = {
    "production": _PRODUCTION_WATCH_OUTS,
    "mature": _PRODUCTION_WATCH_OUTS,
    "prototype": ("This is a prototype - major refactoring may be needed",),
}

VSCODE_SECURITY_WATCH_OUTS = (
    "Be cautious with workspace.fs.readFile - validate paths to prevent directory traversal",
    "Sanitize user inputs before displaying in UI",
)

# Critical dependencies named in the warning
CRITICAL_DEPENDENCY_WARNING_LIMIT = 3


def _freeze(table: Mapping) -> Mapping:
    return MappingProxyType(dict(table))


@dataclass(frozen=True)
class GuidanceRules:
    """Rule tables for AgentGuidanceGenerator. Replace fields to customize."""

    approaches: Mapping[str, str] = field(default_factory=lambda: _freeze(APPROACHES))
    default_approach: str = DEFAULT_APPROACH
    tasks: Mapping[str, tuple[str, ...]] = field(default_factory=lambda: _freeze(TASKS))
    type_watch_outs: Mapping[str, tuple[str, ...]] = field(default_factory=lambda: _freeze(TYPE_WATCH_OUTS))
    maturity_watch_outs: Mapping[str, tuple[str, ...]] = field(default_factory=lambda: _freeze(MATURITY_WATCH_OUTS))
    vscode_watch_outs: tuple[str, ...] = VSCODE_SECURITY_WATCH_OUTS
    critical_dependency_limit: int = CRITICAL_DEPENDENCY_WARNING_LIMIT


DEFAULT_RULES = GuidanceRules()


class AgentGuidanceGenerator:
    def __init__(self, rules: GuidanceRules = DEFAULT_RULES):
        self.rules = rules

    def generate(self, state: EnhancedProjectState | None) -> AgentGuidance:
        """Build guidance. Any section of ``state`` (or ``state`` itself) may be None."""
        state = state or EnhancedProjectState()
        guidance = AgentGuidance(
            suggested_approach=self.suggested_approach(state),
            critical_files=self.critical_files(state),
            common_tasks=self.common_tasks(state),
            watch_outs=self.watch_outs(state),
        )
        logger.debug(
            f"Guidance for {_project_type(state)}: {len(guidance.critical_files)} critical files, "
            f"{len(guidance.watch_outs)} watch-outs"
        )
        return guidance

    def suggested_approach(self, state: EnhancedProjectState) -> str:
        return self.rules.approaches.get(_project_type(state), self.rules.default_approach)

    def critical_files(self, state: EnhancedProjectState) -> list[str]:
        files = ["package.json"]
        if state.identity is not None and state.identity.primary_language == "Python":
            files.append("pyproject.toml")

        if state.architecture is not None:
            files.extend(state.architecture.entry_points)

        vscode = state.platform_context.vscode if state.platform_context is not None else None
        if vscode is not None:
            files.append("src/extension.ts")
            if vscode.contributes.views > 0:
                files.append("src/providers/**/*.ts")

        if _project_type(state) == "vscode-extension":
            files.append("package.json (contributes section)")

        if _has_testing_dependencies(state):
            files.append("test/**/*.test.ts")

        # Entry points can repeat platform files
        return list(dict.fromkeys(files))

    def common_tasks(self, state: EnhancedProjectState) -> list[str]:
        tasks = list(self.rules.tasks.get(_project_type(state), ()))
        if _has_testing_dependencies(state):
            tasks.append("Writing tests")
        if state.capabilities is not None and state.capabilities.primary_features:
            tasks.append("Enhancing existing features")
        return tasks

    def watch_outs(self, state: EnhancedProjectState) -> list[str]:
        maturity = state.identity.maturity_level if state.identity is not None else "unknown"

        warnings = list(self.rules.type_watch_outs.get(_project_type(state), ()))
        warnings.extend(self.rules.maturity_watch_outs.get(maturity, ()))

        if state.dependencies is not None and state.dependencies.critical_path:
            critical = ", ".join(state.dependencies.critical_path[: self.rules.critical_dependency_limit])
            warnings.append(f"Critical dependencies: {critical} - changes may break core functionality")

        if state.platform_context is not None and state.platform_context.vscode is not None:
            warnings.extend(self.rules.vscode_watch_outs)
        return warnings


def _project_type(state: EnhancedProjectState) -> str:
    return state.identity.project_type if state.identity is not None else "unknown"


def _has_testing_dependencies(state: EnhancedProjectState) -> bool:
    return state.dependencies is not None and bool(state.dependencies.by_purpose.get("testing"))
