"""Capability extraction from the manifest description and the README."""

import asyncio
import logging
import re
from pathlib import Path

from statescan.fs import ProjectFS, as_fs
from statescan.models import ProjectCapabilities
from statescan.parsers.node import read_package_json
from statescan.parsers.python import PythonParser, PythonProjectInfo
from statescan.registries import DEFAULT_REGISTRIES, Registries, normalize_package_name

logger = logging.getLogger(__name__)

NO_DESCRIPTION = "No description available"

_FEATURES_HEADING_RE = re.compile(r"^##?\s+(Features|Capabilities|What it does|Key Features)", re.IGNORECASE)
_SECTION_RE = re.compile(r"^##\s+")
_BULLET_RE = re.compile(r"^[-*+]\s+(.+)$")
_NUMBERED_RE = re.compile(r"^\d+\.\s+(.+)$")
_LINK_RE = re.compile(r"\[([^\]]+)\]\([^)]+\)")
_IMAGE_RE = re.compile(r"!\[[^\]]*\]\([^)]*\)")
_EMPHASIS_RE = re.compile(r"[*_`]")
_HTML_TAG_RE = re.compile(r"<[^>]+>")


def strip_markdown(text: str) -> str:
    """Drop images, unwrap links, and remove emphasis/code markers."""
    text = _IMAGE_RE.sub("", text)
    text = _LINK_RE.sub(r"\1", text)
    text = _HTML_TAG_RE.sub("", text)
    return _EMPHASIS_RE.sub("", text).strip()


def _is_badge_line(line: str) -> bool:
    return line.startswith(("[![", "![", "<")) or not _IMAGE_RE.sub("", line).strip(" |")


def first_paragraph(readme: str) -> str:
    """First prose paragraph of a README, skipping the title and badge lines."""
    paragraph: list[str] = []
    for raw in readme.splitlines():
        line = raw.strip()
        if line and set(line) <= {"=", "-"} and len(paragraph) == 1:
            # Setext title underline: the collected line was the title
            paragraph = []
            continue
        if line.startswith(("#", "---", "***")) or (line and set(line) <= {"=", "-"}):
            if paragraph:
                break
            continue
        if not line:
            if paragraph:
                break
            continue
        if not paragraph and _is_badge_line(line):
            continue
        paragraph.append(line)
    return strip_markdown(" ".join(paragraph))


def extract_features(readme: str, max_features: int = 5) -> list[str]:
    """Bullet items under the first Features-like heading, markdown stripped."""
    features: list[str] = []
    in_section = False
    for raw in readme.splitlines():
        line = raw.strip()
        if not in_section:
            in_section = bool(_FEATURES_HEADING_RE.match(line))
            continue
        if _SECTION_RE.match(line):
            break
        match = _BULLET_RE.match(line) or _NUMBERED_RE.match(line)
        if not match:
            continue
        feature = strip_markdown(match.group(1))
        if feature:
            features.append(feature)
        if len(features) >= max_features:
            break
    return features


class CapabilityExtractor:
    def __init__(
        self,
        registries: Registries = DEFAULT_REGISTRIES,
        description_max_chars: int = 200,
        max_features: int = 5,
    ):
        self.registries = registries
        self.description_max_chars = description_max_chars
        self.max_features = max_features

    async def extract(self, root: str | Path | ProjectFS) -> ProjectCapabilities:
        fs = as_fs(root)
        package, python_info, readme = await asyncio.gather(
            read_package_json(fs),
            PythonParser(self.registries).parse_project(fs),
            self.read_readme(fs),
        )

        return ProjectCapabilities(
            description=self._description(package, python_info, readme),
            primary_features=extract_features(readme, self.max_features) if readme else [],
            data_formats=self._data_formats(package, python_info),
        )

    async def read_readme(self, fs: ProjectFS) -> str | None:
        for name in self.registries.readme_files:
            try:
                text = await fs.read_text(name)
            except OSError as e:
                logger.debug(f"Could not read {name} in {fs.root}: {e}")
                continue
            if text is not None:
                return text
        return None

    def _description(self, package: dict | None, python_info: PythonProjectInfo | None, readme: str | None) -> str:
        if package is not None:
            description = package.get("description")
            if isinstance(description, str) and description.strip():
                return description.strip()
        if python_info is not None and python_info.description and python_info.description.strip():
            return python_info.description.strip()
        if readme:
            paragraph = first_paragraph(readme)
            if paragraph:
                return paragraph[: self.description_max_chars]
        return NO_DESCRIPTION

    def _data_formats(self, package: dict | None, python_info: PythonProjectInfo | None) -> list[str]:
        names: set[str] = set()
        if package is not None:
            for section in ("dependencies", "devDependencies"):
                deps = package.get(section)
                if isinstance(deps, dict):
                    names.update(name.lower() for name in deps)
        if python_info is not None:
            names.update(python_info.dependency_names())

        formats = ["JSON"]
        for data_format, libraries in self.registries.data_formats:
            if any(lib.lower() in names or normalize_package_name(lib) in names for lib in libraries):
                formats.append(data_format)
        return formats
