"""VS Code extension analyzer."""

import logging
from pathlib import Path
from typing import Any

from statescan.detectors.platforms.base import PlatformAnalyzer
from statescan.exceptions import NotApplicableError
from statescan.fs import ProjectFS, as_fs
from statescan.models import ProjectIdentity, VSCodeContext, VSCodeContributes
from statescan.parsers.node import read_package_json

logger = logging.getLogger(__name__)

# (contributes key, capability), in report order
CONTRIBUTION_CAPABILITIES = (
    ("commands", "Provides custom commands"),
    ("views", "Adds custom views to sidebar"),
    ("viewsContainers", "Adds custom view containers"),
    ("configuration", "User-configurable settings"),
    ("languages", "Language support"),
    ("debuggers", "Debugging support"),
    ("snippets", "Code snippets"),
    ("themes", "Themes"),
    ("iconThemes", "Icon themes"),
    ("grammars", "Syntax highlighting"),
    ("keybindings", "Custom keybindings"),
    ("menus", "Context menus"),
)

# Keys that count when merely declared, even if empty
PRESENCE_KEYS = frozenset({"viewsContainers", "configuration", "menus"})


def _declared(value: Any) -> bool:
    return value is not None and value is not False


def _count(value: Any) -> int:
    return len(value) if isinstance(value, (list, dict)) else 0


def _first_category(categories: Any) -> str:
    first = categories[0] if isinstance(categories, list) and categories else None
    return first if isinstance(first, str) and first else "Other"


class VSCodeAnalyzer(PlatformAnalyzer):
    platform = "vscode"

    def applies(self, identity: ProjectIdentity | None) -> bool:
        # No identity (its detector failed): let analyze() check the manifest
        return identity is None or identity.project_type == "vscode-extension"

    async def analyze(self, root: str | Path | ProjectFS) -> VSCodeContext:
        fs = as_fs(root)
        package = await read_package_json(fs)
        engines = package.get("engines") if package else None
        min_version = engines.get("vscode") if isinstance(engines, dict) else None
        if not isinstance(min_version, str) or not min_version:
            raise NotApplicableError(self.platform, "package.json has no engines.vscode")

        contributes = package.get("contributes")
        contributes = contributes if isinstance(contributes, dict) else {}
        categories = package.get("categories")
        activation = package.get("activationEvents")

        context = VSCodeContext(
            extension_type=self.categorize(contributes),
            category=_first_category(categories),
            min_version=min_version,
            activation=[e for e in activation if isinstance(e, str)] if isinstance(activation, list) else [],
            contributes=VSCodeContributes(
                commands=_count(contributes.get("commands")),
                views=self.count_views(contributes.get("views")),
                configuration=_declared(contributes.get("configuration")),
                menus=_declared(contributes.get("menus")),
                languages=_count(contributes.get("languages")),
                themes=_count(contributes.get("themes")),
            ),
            capabilities=self.infer_capabilities(contributes),
        )
        logger.debug(f"VS Code extension in {fs.root}: {context.extension_type}")
        return context

    @staticmethod
    def categorize(contributes: dict[str, Any]) -> str:
        """Sub-type, first match wins."""
        has = {key: _declared(value) for key, value in contributes.items()}
        if has.get("languages") or has.get("grammars"):
            return "language-support"
        if has.get("themes") or has.get("iconThemes"):
            return "theme"
        if has.get("debuggers"):
            return "debugger"
        if has.get("snippets") and not has.get("commands") and not has.get("views"):
            return "snippets"
        if has.get("views") or has.get("commands"):
            return "productivity"
        return "extension"

    @staticmethod
    def infer_capabilities(contributes: dict[str, Any]) -> list[str]:
        capabilities = []
        for key, capability in CONTRIBUTION_CAPABILITIES:
            value = contributes.get(key)
            if key in PRESENCE_KEYS:
                if _declared(value):
                    capabilities.append(capability)
            elif _count(value) > 0:
                capabilities.append(capability)
        return capabilities

    @staticmethod
    def count_views(views: Any) -> int:
        """Views are grouped by container; count across all containers."""
        if not isinstance(views, dict):
            return 0
        return sum(len(container) for container in views.values() if isinstance(container, list))
