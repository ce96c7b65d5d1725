"""Extend the default registries from a YAML file.

Example::

    dependency_purposes:
      zod: {category: utility, purpose: Schema validation, critical: true}
    domain_keywords:
      ml-tools: [machine-learning, ml, pytorch]
    data_formats:
      Parquet: [pyarrow, fastparquet]
    entry_points: [src/cli.ts]
    changelog_files: [NEWS.md]

Rows are appended after the built-in rows, so existing first-match-wins
orderings are preserved. Dependency purposes with an existing name replace
the built-in row.
"""

import dataclasses
import logging
from pathlib import Path
from types import MappingProxyType

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from statescan.exceptions import RegistryError
from statescan.models import PURPOSE_CATEGORIES
from statescan.registries import DEFAULT_REGISTRIES, DependencyPurpose, Registries, freeze_table

logger = logging.getLogger(__name__)


class PurposeRow(BaseModel):
    model_config = ConfigDict(extra="forbid")

    category: str
    purpose: str
    critical: bool = False

    @field_validator("category")
    @classmethod
    def validate_category(cls, v: str) -> str:
        if v not in PURPOSE_CATEGORIES:
            raise ValueError(f"category must be one of {', '.join(PURPOSE_CATEGORIES)}")
        return v


class RegistryExtension(BaseModel):
    """Schema of a registry extension file."""

    model_config = ConfigDict(extra="forbid")

    dependency_purposes: dict[str, PurposeRow] = Field(default_factory=dict)
    node_frameworks: dict[str, list[str]] = Field(default_factory=dict)
    python_frameworks: dict[str, list[str]] = Field(default_factory=dict)
    domain_keywords: dict[str, list[str]] = Field(default_factory=dict)
    data_formats: dict[str, list[str]] = Field(default_factory=dict)
    entry_points: list[str] = Field(default_factory=list)
    changelog_files: list[str] = Field(default_factory=list)
    configuration_files: list[str] = Field(default_factory=list)
    documentation_files: list[str] = Field(default_factory=list)
    ignored_dirs: list[str] = Field(default_factory=list)


def _append_unique(existing: tuple[str, ...], extra: list[str]) -> tuple[str, ...]:
    return existing + tuple(item for item in extra if item not in existing)


def _merge_table(existing, extra: dict[str, list[str]]):
    merged = {label: list(values) for label, values in existing.items()}
    for label, values in extra.items():
        merged.setdefault(label, [])
        merged[label].extend(v for v in values if v not in merged[label])
    return freeze_table(merged)


def apply_extension(base: Registries, extension: RegistryExtension) -> Registries:
    """Return a new Registries with the extension rows merged in."""
    purposes = dict(base.dependency_purposes)
    for name, row in extension.dependency_purposes.items():
        purposes[name.lower()] = DependencyPurpose(row.category, row.purpose, row.critical)

    domain_keywords = list(base.domain_keywords)
    known_domains = {domain for domain, _ in domain_keywords}
    for domain, keywords in extension.domain_keywords.items():
        lowered = frozenset(k.lower() for k in keywords)
        if domain in known_domains:
            domain_keywords = [
                (d, kws | lowered) if d == domain else (d, kws)
                for d, kws in domain_keywords
            ]
        else:
            domain_keywords.append((domain, lowered))

    data_formats = [(fmt, libs) for fmt, libs in base.data_formats]
    known_formats = {fmt for fmt, _ in data_formats}
    for fmt, libs in extension.data_formats.items():
        if fmt in known_formats:
            data_formats = [
                (f, _append_unique(existing, libs)) if f == fmt else (f, existing)
                for f, existing in data_formats
            ]
        else:
            data_formats.append((fmt, tuple(libs)))

    return dataclasses.replace(
        base,
        dependency_purposes=MappingProxyType(purposes),
        node_frameworks=_merge_table(base.node_frameworks, extension.node_frameworks),
        python_frameworks=_merge_table(base.python_frameworks, extension.python_frameworks),
        domain_keywords=tuple(domain_keywords),
        data_formats=tuple(data_formats),
        entry_points=_append_unique(base.entry_points, extension.entry_points),
        changelog_files=_append_unique(base.changelog_files, extension.changelog_files),
        configuration_files=_append_unique(base.configuration_files, extension.configuration_files),
        documentation_files=_append_unique(base.documentation_files, extension.documentation_files),
        ignored_dirs=_append_unique(base.ignored_dirs, extension.ignored_dirs),
    )


def load_registries(path: str | Path, base: Registries = DEFAULT_REGISTRIES) -> Registries:
    """Load a YAML extension file and merge it into ``base``.

    Raises:
        RegistryError: The file is missing, is not valid YAML, or does not
            match the extension schema.
    """
    path = Path(path).expanduser()
    try:
        with open(path, encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise RegistryError(f"Invalid YAML in {path}: {e}") from e
    except OSError as e:
        raise RegistryError(f"Could not read registry file {path}: {e}") from e

    if data is None:
        logger.info(f"Registry file {path} is empty, using defaults")
        return base
    if not isinstance(data, dict):
        raise RegistryError(f"Registry file {path} must be a YAML mapping")

    try:
        extension = RegistryExtension.model_validate(data)
    except ValidationError as e:
        raise RegistryError(f"Invalid registry file {path}: {e}") from e

    logger.info(
        f"Loaded registry extension from {path}: "
        f"{len(extension.dependency_purposes)} dependency purposes, "
        f"{len(extension.domain_keywords)} domains, {len(extension.data_formats)} data formats"
    )
    return apply_extension(base, extension)
