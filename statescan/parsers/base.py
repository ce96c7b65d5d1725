"""Shared pieces for the manifest parsers."""

import re
from dataclasses import dataclass, field
from typing import Any, Generic, Iterable, TypeVar

T = TypeVar("T")

_MAJOR_RE = re.compile(r"(\d+)(?:\.|$)")
_RANGE_PREFIX = "^~>=<!v= "


@dataclass
class ParserResult(Generic[T]):
    """Uniform envelope returned by multi-manifest parsers.

    ``success`` is False when any error was recorded, but ``data`` still
    holds whatever could be extracted.
    """

    success: bool = True
    data: T | None = None
    errors: list[str] = field(default_factory=list)

    def add_error(self, message: str) -> None:
        self.errors.append(message)
        self.success = False

    def to_dict(self) -> dict[str, Any]:
        data = self.data
        if isinstance(data, list):
            data = [item.to_dict() if hasattr(item, "to_dict") else item for item in data]
        elif hasattr(data, "to_dict"):
            data = data.to_dict()
        return {"success": self.success, "data": data, "errors": list(self.errors)}


def format_major(version: str) -> str:
    """Reduce a version constraint to its major series.

    "^4.18.2" -> "4.x", ">=3.11" -> "3.x", "v20" -> "20.x". Anything without
    a leading number ("latest", "*", "workspace:*") is returned unchanged.
    """
    stripped = version.strip().lstrip(_RANGE_PREFIX)
    match = _MAJOR_RE.match(stripped)
    if match:
        return f"{match.group(1)}.x"
    return version


def format_dependency(name: str, version: str | None) -> str:
    return f"{name} {format_major(version)}" if version else name


def first_seen(items: Iterable[str], limit: int | None = None) -> list[str]:
    """Keep the first occurrence of each string, preserving order."""
    seen: set[str] = set()
    result: list[str] = []
    for item in items:
        if item in seen:
            continue
        seen.add(item)
        result.append(item)
        if limit is not None and len(result) >= limit:
            break
    return result
