"""Result models - the JSON-serializable project profile.

Every record is a frozen pydantic model. Field names are snake_case in
Python and camelCase in the exported JSON (``to_dict`` /
``model_dump_json(by_alias=True)``), which is what UI consumers read.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

# Dependency purpose buckets, in export order
PURPOSE_CATEGORIES = (
    "parsing",
    "testing",
    "build",
    "platform",
    "code-quality",
    "utility",
    "http",
    "framework",
)

MATURITY_LEVELS = (
    "prototype",
    "active-development",
    "beta",
    "stable",
    "production",
    "mature",
    "unknown",
)


class StateModel(BaseModel):
    """Base for all result records."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
    )

    def to_dict(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True)


# =============================================================================
# Enhanced records
# =============================================================================


class DependencyInfo(StateModel):
    """A recognized dependency and what it is for."""

    name: str
    version: str = ""
    purpose: str = ""
    critical: bool = False


def empty_purpose_buckets() -> dict[str, list[DependencyInfo]]:
    return {category: [] for category in PURPOSE_CATEGORIES}


class EnhancedDependencies(StateModel):
    """Dependencies grouped by purpose.

    ``critical_path`` holds registry-critical names declared for production;
    ``dev_only`` holds names declared only for development.
    """

    by_purpose: dict[str, list[DependencyInfo]] = Field(default_factory=empty_purpose_buckets)
    critical_path: list[str] = Field(default_factory=list)
    dev_only: list[str] = Field(default_factory=list)

    def all_dependencies(self) -> list[DependencyInfo]:
        """Flatten the buckets in category order."""
        return [dep for category in self.by_purpose.values() for dep in category]


class ProjectIdentity(StateModel):
    project_type: str = "unknown"
    domain: str = "general"
    primary_language: str = "JavaScript"
    maturity_level: str = "unknown"


class ProjectCapabilities(StateModel):
    description: str = "No description available"
    primary_features: list[str] = Field(default_factory=list)
    data_formats: list[str] = Field(default_factory=list)


class EnhancedArchitecture(StateModel):
    """Architecture summary. ``style`` and ``organization`` always have a value."""

    style: str = "simple"
    organization: str = "flat"
    patterns: list[str] = Field(default_factory=list)
    entry_points: list[str] = Field(default_factory=list)


class VSCodeContributes(StateModel):
    commands: int = 0
    views: int = 0
    configuration: bool = False
    menus: bool = False
    languages: int = 0
    themes: int = 0


class VSCodeContext(StateModel):
    """VS Code extension details derived from the ``contributes`` section."""

    extension_type: str = "extension"
    category: str = "Other"
    min_version: str = "unknown"
    activation: list[str] = Field(default_factory=list)
    contributes: VSCodeContributes = Field(default_factory=VSCodeContributes)
    capabilities: list[str] = Field(default_factory=list)


class PlatformContext(StateModel):
    """Platform-specific sub-records. A field is None when the platform does not apply."""

    vscode: VSCodeContext | None = None

    def is_empty(self) -> bool:
        return all(getattr(self, name) is None for name in type(self).model_fields)


class AgentGuidance(StateModel):
    suggested_approach: str = ""
    critical_files: list[str] = Field(default_factory=list)
    common_tasks: list[str] = Field(default_factory=list)
    watch_outs: list[str] = Field(default_factory=list)


class EnhancedProjectState(StateModel):
    """Composite of the enhanced detector outputs.

    Every field is independently optional: a detector that failed or did
    not apply leaves its field as None.
    """

    identity: ProjectIdentity | None = None
    capabilities: ProjectCapabilities | None = None
    architecture: EnhancedArchitecture | None = None
    dependencies: EnhancedDependencies | None = None
    platform_context: PlatformContext | None = None
    agent_guidance: AgentGuidance | None = None


# =============================================================================
# Infrastructure / security / API / deployment / metrics
# =============================================================================


class InfrastructureInfo(StateModel):
    databases: list[str] = Field(default_factory=list)
    cache: list[str] = Field(default_factory=list)
    queues: list[str] = Field(default_factory=list)
    storage: list[str] = Field(default_factory=list)
    messaging: list[str] = Field(default_factory=list)

    def has_content(self) -> bool:
        return any((self.databases, self.cache, self.queues, self.storage, self.messaging))


class SecurityInfo(StateModel):
    auth_frameworks: list[str] = Field(default_factory=list)
    encryption: list[str] = Field(default_factory=list)
    vulnerability_scanning: list[str] = Field(default_factory=list)
    secrets_management: list[str] = Field(default_factory=list)

    def has_content(self) -> bool:
        return any((self.auth_frameworks, self.encryption, self.vulnerability_scanning, self.secrets_management))


class APIInfo(StateModel):
    type: list[str] = Field(default_factory=list)
    documentation: list[str] = Field(default_factory=list)
    authentication: list[str] = Field(default_factory=list)
    versioning: list[str] = Field(default_factory=list)

    def has_content(self) -> bool:
        return any((self.type, self.documentation, self.authentication, self.versioning))


class DeploymentInfo(StateModel):
    environments: list[str] = Field(default_factory=list)
    platforms: list[str] = Field(default_factory=list)
    orchestration: list[str] = Field(default_factory=list)

    def has_content(self) -> bool:
        return any((self.environments, self.platforms, self.orchestration))


class ProjectMetrics(StateModel):
    estimated_size: str = "small"  # small, medium, large
    complexity: str = "low"  # low, medium, high
    files_analyzed: int = 0
    last_analyzed: str = ""


# =============================================================================
# Top-level state
# =============================================================================


class ProjectState(StateModel):
    """Flat stack report plus optional detail sections.

    List fields are sorted and de-duplicated. An empty or unreadable root
    produces a ProjectState with every list empty and no optional section.
    """

    # Technology stack
    languages: list[str] = Field(default_factory=list)
    frameworks: list[str] = Field(default_factory=list)
    dependencies: list[str] = Field(default_factory=list)

    # Development environment
    build_tools: list[str] = Field(default_factory=list)
    testing: list[str] = Field(default_factory=list)
    code_quality: list[str] = Field(default_factory=list)
    development_tools: list[str] = Field(default_factory=list)

    # Project structure
    architecture: list[str] = Field(default_factory=list)
    configuration: list[str] = Field(default_factory=list)
    documentation: list[str] = Field(default_factory=list)

    # Detail sections, present only when they have content
    infrastructure: InfrastructureInfo | None = None
    security: SecurityInfo | None = None
    api: APIInfo | None = None
    deployment: DeploymentInfo | None = None
    project_metrics: ProjectMetrics | None = None

    # Enhanced detection
    identity: ProjectIdentity | None = None
    capabilities: ProjectCapabilities | None = None
    enhanced_architecture: EnhancedArchitecture | None = None
    enhanced_dependencies: EnhancedDependencies | None = None
    platform_context: PlatformContext | None = None
    agent_guidance: AgentGuidance | None = None

    def to_dict(self, exclude_none: bool = True) -> dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_none=exclude_none)

    def enhanced(self) -> EnhancedProjectState:
        """Return the enhanced sections as an EnhancedProjectState."""
        return EnhancedProjectState(
            identity=self.identity,
            capabilities=self.capabilities,
            architecture=self.enhanced_architecture,
            dependencies=self.enhanced_dependencies,
            platform_context=self.platform_context,
            agent_guidance=self.agent_guidance,
        )
