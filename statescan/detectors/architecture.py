"""Architecture detection: source organization, design patterns, entry points."""

import asyncio
import logging
from pathlib import Path, PurePosixPath

from statescan.fs import ProjectFS, as_fs
from statescan.models import EnhancedArchitecture
from statescan.registries import DEFAULT_REGISTRIES, PatternSignature, Registries

logger = logging.getLogger(__name__)

FALLBACK_ORGANIZATION = ("modular", "src-based")
NO_SOURCE_ORGANIZATION = ("simple", "flat")


class ArchitectureDetector:
    """Detect how a project's source tree is organized.

    Organization rules and pattern signatures are checked in registry order;
    the first organization rule with enough subdirectories present wins.
    Pattern detection walks the source files once and matches every
    signature against that single listing.
    """

    def __init__(self, registries: Registries = DEFAULT_REGISTRIES, max_files: int = 5000):
        self.registries = registries
        self.max_files = max_files

    async def detect(self, root: str | Path | ProjectFS) -> EnhancedArchitecture:
        fs = as_fs(root)
        (style, organization), patterns, entry_points = await asyncio.gather(
            self.analyze_structure(fs),
            self.detect_patterns(fs),
            self.find_entry_points(fs),
        )
        return EnhancedArchitecture(
            style=style,
            organization=organization,
            patterns=patterns,
            entry_points=entry_points,
        )

    async def analyze_structure(self, fs: ProjectFS) -> tuple[str, str]:
        """Return (style, organization)."""
        source_dir = self.registries.source_dir
        if not await fs.is_dir(source_dir):
            return NO_SOURCE_ORGANIZATION

        for rule in self.registries.organization_rules:
            present = await fs.existing_dirs(f"{source_dir}/{subdir}" for subdir in rule.subdirs)
            if len(present) >= rule.min_matches:
                return rule.style, rule.organization
        return FALLBACK_ORGANIZATION

    async def detect_patterns(self, fs: ProjectFS) -> list[str]:
        source_files = await fs.walk(max_files=self.max_files, extensions=self.registries.source_extensions)
        paths = [PurePosixPath(p) for p in source_files]

        patterns: list[str] = []
        for signature in self.registries.pattern_signatures:
            if not await self._matches(fs, signature, paths):
                continue
            if signature.key == "provider":
                patterns.append(f"{signature.label}{self._provider_details(paths)}")
            elif signature.key == "command":
                patterns.append(f"{signature.label}{self._command_details(paths)}")
            else:
                patterns.append(signature.label)

        return list(dict.fromkeys(patterns))

    async def find_entry_points(self, fs: ProjectFS) -> list[str]:
        candidates = self.registries.entry_points
        found = await asyncio.gather(*(fs.is_file(c) for c in candidates))
        return [c for c, ok in zip(candidates, found) if ok]

    async def _matches(self, fs: ProjectFS, signature: PatternSignature, paths: list[PurePosixPath]) -> bool:
        for path in paths:
            name = path.name.lower()
            if any(name.startswith(prefix) for prefix in signature.file_prefixes):
                return True
            if any(d in path.parent.parts for d in signature.within_dirs):
                return True
        if signature.dirs:
            return bool(await fs.existing_dirs(signature.dirs))
        return False

    def _provider_details(self, paths: list[PurePosixPath]) -> str:
        details = [
            detail for prefix, detail in self.registries.provider_details
            if any(p.name.lower().startswith(prefix) for p in paths)
        ]
        if details:
            return f" (for {', '.join(details)})"
        return " (data/service providers)"

    def _command_details(self, paths: list[PurePosixPath]) -> str:
        command_files = [p for p in paths if "commands" in p.parent.parts]
        if len(command_files) > self.registries.command_handler_threshold:
            return " (encapsulated operations with multiple command handlers)"
        return " (encapsulated operations)"
