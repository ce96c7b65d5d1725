"""Tests for the scan orchestrator."""

import asyncio
import logging

import pytest

from statescan.config import Settings
from statescan.detectors import InfrastructureDetector, ProjectIdentityDetector
from statescan.exceptions import ScanTimeoutError
from statescan.models import EnhancedProjectState, ProjectState
from statescan.scanner import StateScanner, scan_project

LIST_FIELDS = (
    "languages", "frameworks", "dependencies", "build_tools", "testing",
    "code_quality", "development_tools", "architecture", "configuration", "documentation",
)

VSCODE_EXTENSION = {
    "name": "md-tree",
    "version": "1.2.0",
    "description": "Browse markdown files as a tree",
    "engines": {"vscode": "^1.80.0"},
    "contributes": {"commands": [{"command": "mdTree.refresh"}], "views": {"explorer": [{"id": "mdTree"}]}},
    "dependencies": {"gray-matter": "^4.0.3"},
    "devDependencies": {"@types/vscode": "^1.80.0", "mocha": "^10.0.0", "typescript": "^5.0.0"},
}


class TestScanState:
    """End-to-end scans."""

    @pytest.mark.asyncio
    async def test_empty_directory(self, tmp_path):
        state = await StateScanner(tmp_path).scan_state()

        for name in LIST_FIELDS:
            assert getattr(state, name) == [], name
        assert state.infrastructure is None
        assert state.security is None
        assert state.api is None
        assert state.deployment is None
        assert state.identity.project_type == "unknown"
        assert state.platform_context is None
        assert state.agent_guidance.critical_files == ["package.json"]

    @pytest.mark.asyncio
    async def test_missing_root_returns_empty_state(self, tmp_path, caplog):
        missing = tmp_path / "does-not-exist"
        with caplog.at_level(logging.ERROR, logger="statescan.scanner"):
            state = await StateScanner(missing).scan_state()
        assert state == ProjectState()
        assert "not an accessible directory" in caplog.text

        assert await StateScanner(missing).scan_enhanced_state() == EnhancedProjectState()

    @pytest.mark.asyncio
    async def test_unstatable_root_returns_empty_state(self, tmp_path):
        too_long = tmp_path / ("a" * 300)
        assert await StateScanner(too_long).scan_state() == ProjectState()
        assert await StateScanner(too_long).scan_enhanced_state() == EnhancedProjectState()

    @pytest.mark.asyncio
    async def test_express_and_jest(self, make_project):
        root = make_project({"package.json": {
            "dependencies": {"express": "4.0.0"},
            "devDependencies": {"jest": "29.0.0"},
        }})

        state = await StateScanner(root).scan_state()

        deps = state.enhanced_dependencies
        assert [d.name for d in deps.by_purpose["framework"]] == ["express"]
        assert [d.name for d in deps.by_purpose["testing"]] == ["jest"]
        assert deps.critical_path == ["express"]
        assert deps.dev_only == ["jest"]
        assert state.dependencies == ["express (4.0.0)", "jest (29.0.0)"]
        assert state.identity.project_type == "api-server"
        assert "Express" in state.frameworks
        assert state.api.type == ["REST API"]

    @pytest.mark.asyncio
    async def test_changelog_and_release_version(self, make_project):
        root = make_project({"package.json": {"version": "2.1.0"}, "CHANGELOG.md": "# 2.1.0\n"})
        state = await StateScanner(root).scan_state()
        assert state.identity.maturity_level == "production"
        assert "CHANGELOG.md" in state.documentation

    @pytest.mark.asyncio
    async def test_vscode_extension(self, make_project):
        root = make_project({
            "package.json": VSCODE_EXTENSION,
            "tsconfig.json": "{}",
            "src/extension.ts": "",
            "src/providers/treeDataProvider.ts": "",
            "src/commands/refresh.ts": "",
        })

        state = await StateScanner(root).scan_state()

        assert state.identity.project_type == "vscode-extension"
        assert state.identity.primary_language == "TypeScript"
        assert state.capabilities.description == "Browse markdown files as a tree"
        assert "YAML" in state.capabilities.data_formats
        assert state.platform_context.vscode.contributes.views == 1
        assert state.enhanced_architecture.entry_points == ["src/extension.ts"]
        assert state.enhanced_dependencies.critical_path == ["gray-matter"]
        assert "VS Code extension architecture (providers + commands)" in state.architecture
        assert "Critical dependencies: gray-matter - changes may break core functionality" in (
            state.agent_guidance.watch_outs
        )
        assert state.enhanced() == await StateScanner(root).scan_enhanced_state()

    @pytest.mark.asyncio
    async def test_python_dependencies_merged(self, make_project):
        root = make_project({"requirements.txt": "requests>=2.31\nNewPkg==1.0\n"})
        state = await StateScanner(root).scan_state()
        # Known packages use the enhanced "name (version)" form; others come from the parser
        assert state.dependencies == ["NewPkg 1.x", "requests (>=2.31)"]

    @pytest.mark.asyncio
    async def test_unversioned_dependency_has_no_empty_parens(self, make_project):
        root = make_project({"requirements.txt": "requests\n"})
        state = await StateScanner(root).scan_state()
        assert state.dependencies == ["requests"]

    @pytest.mark.asyncio
    async def test_lists_sorted_and_unique(self, make_project):
        root = make_project({
            "package.json": {"dependencies": {"react": "18", "react-dom": "18"}},
            "Dockerfile": "",
            "tests/": None,
        })
        state = await StateScanner(root).scan_state()
        for name in LIST_FIELDS:
            values = getattr(state, name)
            assert values == sorted(set(values)), name

    @pytest.mark.asyncio
    async def test_to_dict_uses_camel_case(self, make_project):
        root = make_project({"package.json": {"version": "0.1.0"}})
        data = (await StateScanner(root).scan_state()).to_dict()
        assert "buildTools" in data
        assert "projectMetrics" in data
        assert data["identity"]["maturityLevel"] == "active-development"
        assert "infrastructure" not in data


class TestFailureIsolation:
    """A failing detector leaves only its own field empty."""

    @pytest.mark.asyncio
    async def test_identity_failure(self, make_project, monkeypatch, caplog):
        root = make_project({"package.json": {"dependencies": {"express": "4.0.0"}}})

        async def boom(self, root):
            raise RuntimeError("identity exploded")

        monkeypatch.setattr(ProjectIdentityDetector, "detect", boom)

        with caplog.at_level(logging.WARNING, logger="statescan.scanner"):
            state = await StateScanner(root).scan_state()

        assert state.identity is None
        assert state.capabilities is not None
        assert state.enhanced_dependencies.critical_path == ["express"]
        assert state.agent_guidance is not None
        assert "Node.js" in state.frameworks
        record = next(r for r in caplog.records if "identity exploded" in r.getMessage())
        assert record.detector == "identity"

    @pytest.mark.asyncio
    async def test_infrastructure_failure(self, make_project, monkeypatch):
        root = make_project({"package.json": {"dependencies": {"pg": "8"}}})

        async def boom(self, fs, manifests):
            raise ValueError("bad table")

        monkeypatch.setattr(InfrastructureDetector, "detect_infrastructure", boom)

        state = await StateScanner(root).scan_state()

        assert state.infrastructure is None
        assert state.languages == ["JavaScript/TypeScript"]


class TestScanProject:
    """Tests for the timeout wrapper."""

    @pytest.mark.asyncio
    async def test_returns_state(self, tmp_path):
        state = await scan_project(tmp_path, timeout=10)
        assert isinstance(state, ProjectState)

        enhanced = await scan_project(tmp_path, timeout=10, enhanced=True)
        assert isinstance(enhanced, EnhancedProjectState)

    @pytest.mark.asyncio
    async def test_timeout(self, tmp_path, monkeypatch):
        async def slow(self):
            await asyncio.sleep(5)
            return ProjectState()

        monkeypatch.setattr(StateScanner, "scan_state", slow)

        with pytest.raises(ScanTimeoutError) as exc_info:
            await scan_project(tmp_path, timeout=0.05)
        assert exc_info.value.timeout == 0.05

    @pytest.mark.asyncio
    async def test_default_timeout_from_settings(self, tmp_path, monkeypatch):
        async def slow(self):
            await asyncio.sleep(5)
            return ProjectState()

        monkeypatch.setattr(StateScanner, "scan_state", slow)

        settings = Settings(scan_timeout=0.05)
        with pytest.raises(ScanTimeoutError):
            await scan_project(tmp_path, settings=settings)
