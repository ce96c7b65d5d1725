"""Immutable pattern registries.

``Registries`` bundles every table the parsers and detectors consult. It is
built once (``DEFAULT_REGISTRIES`` from the compiled-in tables, or
``load_registries`` for a YAML extension) and passed to each detector's
constructor, so tests can substitute their own tables.
"""

import fnmatch
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Iterable, Mapping

from statescan.fs import DEFAULT_IGNORED_DIRS
from statescan.registries import patterns
from statescan.registries.dependencies import DEPENDENCY_PURPOSES

NameTable = Mapping[str, tuple[str, ...]]
FileTable = tuple[tuple[tuple[str, ...], str], ...]


@dataclass(frozen=True)
class DependencyPurpose:
    category: str
    purpose: str
    critical: bool = False


@dataclass(frozen=True)
class OrganizationRule:
    subdirs: tuple[str, ...]
    style: str
    organization: str
    min_matches: int = 2


@dataclass(frozen=True)
class PatternSignature:
    """A design-pattern signature.

    Matches when a source file name starts with one of ``file_prefixes``,
    a source file sits under a directory named in ``within_dirs``, or one of
    ``dirs`` exists relative to the project root.
    """

    key: str
    label: str
    file_prefixes: tuple[str, ...] = ()
    within_dirs: tuple[str, ...] = ()
    dirs: tuple[str, ...] = ()


def normalize_package_name(name: str) -> str:
    """Lowercase and fold ``_``/``.`` to ``-`` (PEP 503 style)."""
    return name.strip().lower().replace("_", "-").replace(".", "-")


def matches_any(name: str, name_patterns: Iterable[str]) -> bool:
    lowered = name.lower()
    return any(fnmatch.fnmatchcase(lowered, pattern.lower()) for pattern in name_patterns)


def freeze_table(table: Mapping[str, Iterable[str]]) -> NameTable:
    return MappingProxyType({key: tuple(values) for key, values in table.items()})


@dataclass(frozen=True)
class Registries:
    """Read-only lookup tables. Create variants with ``dataclasses.replace``."""

    dependency_purposes: Mapping[str, DependencyPurpose]

    # Package name patterns
    node_frameworks: NameTable = field(default_factory=lambda: freeze_table(patterns.NODE_FRAMEWORK_PATTERNS))
    python_frameworks: NameTable = field(default_factory=lambda: freeze_table(patterns.PYTHON_FRAMEWORK_PATTERNS))
    cloud_sdks: NameTable = field(default_factory=lambda: freeze_table(patterns.CLOUD_SDK_PATTERNS))
    node_testing: NameTable = field(default_factory=lambda: freeze_table(patterns.NODE_TESTING_PATTERNS))
    python_testing: NameTable = field(default_factory=lambda: freeze_table(patterns.PYTHON_TESTING_PATTERNS))

    # Stack report file markers
    language_markers: FileTable = patterns.LANGUAGE_MARKERS
    framework_markers: tuple[tuple[str, str], ...] = patterns.FRAMEWORK_MARKERS
    build_tool_files: FileTable = patterns.BUILD_TOOL_FILES
    testing_files: FileTable = patterns.TESTING_FILES
    code_quality_files: FileTable = patterns.CODE_QUALITY_FILES
    development_tool_files: FileTable = patterns.DEVELOPMENT_TOOL_FILES
    configuration_files: tuple[str, ...] = patterns.CONFIGURATION_FILES
    documentation_files: tuple[str, ...] = patterns.DOCUMENTATION_FILES
    documentation_dirs: tuple[tuple[str, str], ...] = patterns.DOCUMENTATION_DIRS
    api_documentation_files: FileTable = patterns.API_DOCUMENTATION_FILES
    architecture_notes: tuple[tuple[str, str], ...] = patterns.ARCHITECTURE_NOTES
    architecture_file_notes: tuple[tuple[str, str], ...] = patterns.ARCHITECTURE_FILE_NOTES

    # Identity
    fallback_project_types: FileTable = patterns.FALLBACK_PROJECT_TYPES
    primary_language_markers: FileTable = patterns.PRIMARY_LANGUAGE_MARKERS
    web_app_dependencies: tuple[str, ...] = patterns.WEB_APP_DEPENDENCIES
    api_server_dependencies: tuple[str, ...] = patterns.API_SERVER_DEPENDENCIES
    domain_keywords: tuple[tuple[str, frozenset[str]], ...] = patterns.DOMAIN_KEYWORDS
    changelog_files: tuple[str, ...] = patterns.CHANGELOG_FILES

    # Capabilities
    readme_files: tuple[str, ...] = patterns.README_FILES
    data_formats: tuple[tuple[str, tuple[str, ...]], ...] = patterns.DATA_FORMATS

    # Architecture
    source_dir: str = patterns.SOURCE_DIR
    organization_rules: tuple[OrganizationRule, ...] = tuple(
        OrganizationRule(subdirs, style, organization)
        for subdirs, style, organization in patterns.ORGANIZATION_RULES
    )
    pattern_signatures: tuple[PatternSignature, ...] = tuple(
        PatternSignature(key, label, prefixes, within, dirs)
        for key, label, prefixes, within, dirs in patterns.PATTERN_SIGNATURES
    )
    provider_details: tuple[tuple[str, str], ...] = patterns.PROVIDER_DETAILS
    command_handler_threshold: int = patterns.COMMAND_HANDLER_THRESHOLD
    entry_points: tuple[str, ...] = patterns.ENTRY_POINTS
    source_extensions: tuple[str, ...] = patterns.SOURCE_EXTENSIONS
    metric_extensions: tuple[str, ...] = patterns.METRIC_EXTENSIONS
    ignored_dirs: tuple[str, ...] = tuple(sorted(DEFAULT_IGNORED_DIRS))

    # Infrastructure / security / API / deployment
    databases: NameTable = field(default_factory=lambda: freeze_table(patterns.DATABASE_PATTERNS))
    orms: NameTable = field(default_factory=lambda: freeze_table(patterns.ORM_PATTERNS))
    caches: NameTable = field(default_factory=lambda: freeze_table(patterns.CACHE_PATTERNS))
    queues: NameTable = field(default_factory=lambda: freeze_table(patterns.QUEUE_PATTERNS))
    messaging: NameTable = field(default_factory=lambda: freeze_table(patterns.MESSAGING_PATTERNS))
    storage: NameTable = field(default_factory=lambda: freeze_table(patterns.STORAGE_PATTERNS))
    compose_services: tuple[tuple[tuple[str, ...], str, str], ...] = patterns.COMPOSE_SERVICES
    env_markers: tuple[tuple[tuple[str, ...], str, str], ...] = patterns.ENV_MARKERS
    env_files: tuple[str, ...] = patterns.ENV_FILES
    auth: NameTable = field(default_factory=lambda: freeze_table(patterns.AUTH_PATTERNS))
    encryption: NameTable = field(default_factory=lambda: freeze_table(patterns.ENCRYPTION_PATTERNS))
    vulnerability_scanning: NameTable = field(
        default_factory=lambda: freeze_table(patterns.VULNERABILITY_SCANNING_PATTERNS)
    )
    vulnerability_scanning_files: FileTable = patterns.VULNERABILITY_SCANNING_FILES
    secrets: NameTable = field(default_factory=lambda: freeze_table(patterns.SECRETS_PATTERNS))
    api_types: NameTable = field(default_factory=lambda: freeze_table(patterns.API_TYPE_PATTERNS))
    api_docs: NameTable = field(default_factory=lambda: freeze_table(patterns.API_DOC_PATTERNS))
    api_doc_files: FileTable = patterns.API_DOC_FILES
    graphql_schema_files: tuple[str, ...] = patterns.GRAPHQL_SCHEMA_FILES
    api_versioning_dirs: tuple[tuple[str, str], ...] = patterns.API_VERSIONING_DIRS
    orchestration: NameTable = field(default_factory=lambda: freeze_table(patterns.ORCHESTRATION_PATTERNS))
    orchestration_files: FileTable = patterns.ORCHESTRATION_FILES
    deployment_platforms: NameTable = field(
        default_factory=lambda: freeze_table(patterns.DEPLOYMENT_PLATFORM_PATTERNS)
    )
    deployment_platform_files: FileTable = patterns.DEPLOYMENT_PLATFORM_FILES
    environment_files: tuple[tuple[str, str], ...] = patterns.ENVIRONMENT_FILES

    def purpose_of(self, name: str) -> DependencyPurpose | None:
        """Look up a dependency by exact lowercase name, then by normalized name."""
        lowered = name.strip().lower()
        purpose = self.dependency_purposes.get(lowered)
        if purpose is None:
            purpose = self.dependency_purposes.get(normalize_package_name(name))
        return purpose

    def match_labels(self, table: NameTable, names: Iterable[str]) -> list[str]:
        """Return table labels whose patterns match any of ``names``, in table order."""
        names = [n.lower() for n in names]
        return [
            label
            for label, name_patterns in table.items()
            if any(matches_any(name, name_patterns) for name in names)
        ]


def build_dependency_purposes(
    rows: Mapping[str, tuple[str, str, bool]],
) -> Mapping[str, DependencyPurpose]:
    return MappingProxyType({
        name.lower(): DependencyPurpose(category, purpose, critical)
        for name, (category, purpose, critical) in rows.items()
    })


DEFAULT_REGISTRIES = Registries(dependency_purposes=build_dependency_purposes(DEPENDENCY_PURPOSES))

__all__ = [
    "DEFAULT_REGISTRIES",
    "DependencyPurpose",
    "OrganizationRule",
    "PatternSignature",
    "Registries",
    "build_dependency_purposes",
    "matches_any",
    "normalize_package_name",
]
