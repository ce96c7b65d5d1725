"""Deduplication helpers for detection results.

Several detectors can report the same technology, sometimes with a
different casing or version suffix. These functions collapse such
variants before results are exported.
"""

import re
from typing import Callable, Iterable, TypeVar

T = TypeVar("T")

# Version separator in "name@1.2.3"; a leading "@" (npm scope) is part of the name
_NPM_VERSION_RE = re.compile(r"(?<=.)@.*$")


def deduplicate_array(items: Iterable[str]) -> list[str]:
    """Remove exact duplicates and sort.

    Comparison is case-sensitive: "React" and "react" are both kept.
    Use deduplicate_dependencies or deduplicate_by for case-insensitive
    collapsing.
    """
    return sorted(set(items))


def normalize_dependency_name(dep: str) -> str:
    """Reduce "name (version)", "name@version" or "name" to a lowercase name.

    Examples:
        "React (18.2.0)" -> "react"
        "react@18.2.0" -> "react"
        "@types/node@20.1.0" -> "@types/node"
    """
    name = dep.split("(")[0].strip()
    name = _NPM_VERSION_RE.sub("", name).strip()
    return name.lower()


def deduplicate_dependencies(deps: Iterable[str]) -> list[str]:
    """Deduplicate dependency strings by case-insensitive name.

    The first occurrence of each name is kept; the survivors are sorted.
    """
    seen: set[str] = set()
    result: list[str] = []

    for dep in deps:
        key = normalize_dependency_name(dep)
        if key not in seen:
            seen.add(key)
            result.append(dep)

    return sorted(result)


def merge_and_deduplicate(*collections: Iterable[str]) -> list[str]:
    """Merge several collections and apply deduplicate_array."""
    merged: list[str] = []
    for collection in collections:
        merged.extend(collection)
    return deduplicate_array(merged)


def deduplicate_by(items: Iterable[T], key_fn: Callable[[T], str]) -> list[T]:
    """Deduplicate records by a case-insensitive key.

    Keeps the first occurrence and the original relative order.
    """
    seen: set[str] = set()
    result: list[T] = []

    for item in items:
        key = key_fn(item).lower()
        if key not in seen:
            seen.add(key)
            result.append(item)

    return result
