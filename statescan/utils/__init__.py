"""Shared helpers."""

from statescan.utils.dedup import (
    deduplicate_array,
    deduplicate_by,
    deduplicate_dependencies,
    merge_and_deduplicate,
    normalize_dependency_name,
)

__all__ = [
    "deduplicate_array",
    "deduplicate_by",
    "deduplicate_dependencies",
    "merge_and_deduplicate",
    "normalize_dependency_name",
]
