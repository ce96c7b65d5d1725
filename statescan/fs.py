"""Read-only, asyncio-friendly access to a project directory.

Detectors never touch ``Path`` directly. Every stat/read goes through
``ProjectFS`` so that it runs in a worker thread and missing files come back
as ``False``/``None`` instead of exceptions.
"""

import asyncio
import fnmatch
import json
import logging
import os
from pathlib import Path
from typing import Any, Iterable

logger = logging.getLogger(__name__)

# Directories never worth descending into
DEFAULT_IGNORED_DIRS = frozenset({
    "node_modules", ".git", "__pycache__", ".venv", "venv",
    "dist", "build", "out", ".next", "coverage", ".pytest_cache",
    ".mypy_cache", ".ruff_cache", "target", ".idea", ".vs", ".vscode-test",
    "vendor", "bower_components", ".tox", "bin", "obj", "packages",
})


class ProjectFS:
    """Read-only view of a project root.

    Paths passed to the methods are relative to the root and use ``/``.
    """

    def __init__(self, root: str | Path, ignored_dirs: Iterable[str] = DEFAULT_IGNORED_DIRS):
        self.root = Path(root).expanduser()
        self.ignored_dirs = frozenset(ignored_dirs)

    def _resolve(self, relative_path: str) -> Path:
        return self.root / relative_path.strip("/") if relative_path else self.root

    # =========================================================================
    # Existence checks
    # =========================================================================

    async def exists(self, relative_path: str) -> bool:
        """Check if a file or directory exists. Wildcards match at one level."""
        if any(ch in relative_path for ch in "*?["):
            return bool(await self.glob(relative_path, limit=1))
        return await asyncio.to_thread(self._resolve(relative_path).exists)

    async def is_dir(self, relative_path: str) -> bool:
        return await asyncio.to_thread(self._resolve(relative_path).is_dir)

    async def is_file(self, relative_path: str) -> bool:
        return await asyncio.to_thread(self._resolve(relative_path).is_file)

    async def existing(self, candidates: Iterable[str]) -> list[str]:
        """Return the candidates that exist, in candidate order.

        All checks run concurrently; ``gather`` keeps submission order so the
        result order never depends on which stat finished first.
        """
        candidates = list(candidates)
        found = await asyncio.gather(*(self.exists(c) for c in candidates))
        return [c for c, ok in zip(candidates, found) if ok]

    async def existing_dirs(self, candidates: Iterable[str]) -> list[str]:
        """Return the candidates that are directories, in candidate order."""
        candidates = list(candidates)
        found = await asyncio.gather(*(self.is_dir(c) for c in candidates))
        return [c for c, ok in zip(candidates, found) if ok]

    async def exists_any(self, candidates: Iterable[str]) -> bool:
        return bool(await self.existing(candidates))

    # =========================================================================
    # Reads
    # =========================================================================

    async def read_text(self, relative_path: str) -> str | None:
        """Read a UTF-8 text file.

        Returns:
            File content, or None if the file does not exist.

        Raises:
            OSError: The file exists but could not be read.
        """
        path = self._resolve(relative_path)

        def _read() -> str | None:
            if not path.is_file():
                return None
            return path.read_text(encoding="utf-8", errors="replace")

        return await asyncio.to_thread(_read)

    async def read_json(self, relative_path: str) -> Any:
        """Read and decode a JSON file.

        Returns:
            Decoded value, or None if the file does not exist.

        Raises:
            json.JSONDecodeError: The file is not valid JSON.
            OSError: The file exists but could not be read.
        """
        text = await self.read_text(relative_path)
        if text is None:
            return None
        return json.loads(text)

    # =========================================================================
    # Listing
    # =========================================================================

    async def list_dir(self, relative_path: str = "", dirs_only: bool = False) -> list[str]:
        """List entry names of a directory, sorted. Missing directory -> []."""
        path = self._resolve(relative_path)

        def _list() -> list[str]:
            try:
                entries = sorted(path.iterdir(), key=lambda p: p.name)
            except OSError:
                return []
            if dirs_only:
                return [e.name for e in entries if e.is_dir()]
            return [e.name for e in entries]

        return await asyncio.to_thread(_list)

    async def glob(self, pattern: str, limit: int | None = None) -> list[str]:
        """Match a single-level pattern such as ``*.csproj`` or ``src/*.ts``."""
        parent, _, name_pattern = pattern.rpartition("/")
        names = await self.list_dir(parent)
        matches = [
            f"{parent}/{name}" if parent else name
            for name in names
            if fnmatch.fnmatch(name, name_pattern)
        ]
        return matches[:limit] if limit is not None else matches

    async def walk(
        self,
        max_depth: int = 8,
        max_files: int = 5000,
        extensions: Iterable[str] | None = None,
    ) -> list[str]:
        """Collect relative file paths under the root, skipping ignored dirs.

        Args:
            max_depth: Directory depth limit (root files are depth 0)
            max_files: Stop after this many files
            extensions: Optional suffix filter such as {".py", ".ts"}

        Returns:
            Sorted relative POSIX paths.
        """
        suffixes = {e.lower() for e in extensions} if extensions else None
        ignored = self.ignored_dirs
        root = self.root

        def _walk() -> list[str]:
            files: list[str] = []
            for current, dirnames, filenames in os.walk(root):
                rel_dir = Path(current).relative_to(root)
                depth = len(rel_dir.parts)
                dirnames[:] = sorted(
                    d for d in dirnames
                    if d not in ignored and not d.endswith(".egg-info")
                )
                if depth >= max_depth:
                    dirnames[:] = []
                for filename in sorted(filenames):
                    if suffixes is not None and Path(filename).suffix.lower() not in suffixes:
                        continue
                    files.append((rel_dir / filename).as_posix())
                    if len(files) >= max_files:
                        logger.debug(f"Walk of {root} stopped at {max_files} files")
                        return files
            return files

        return sorted(await asyncio.to_thread(_walk))


def as_fs(root: str | Path | ProjectFS) -> ProjectFS:
    """Accept a path or an existing ProjectFS."""
    return root if isinstance(root, ProjectFS) else ProjectFS(root)
