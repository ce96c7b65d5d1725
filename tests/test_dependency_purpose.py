"""Tests for dependency purpose mapping."""

import pytest

from statescan.detectors import DependencyPurposeMapper
from statescan.models import PURPOSE_CATEGORIES


class TestDependencyPurposeMapper:
    """Tests for purpose buckets, critical path and dev-only lists."""

    @pytest.mark.asyncio
    async def test_express_and_jest(self, make_project):
        root = make_project({"package.json": {
            "dependencies": {"express": "4.0.0"},
            "devDependencies": {"jest": "29.0.0"},
        }})

        deps = await DependencyPurposeMapper().map(root)

        assert [d.name for d in deps.by_purpose["framework"]] == ["express"]
        assert [d.name for d in deps.by_purpose["testing"]] == ["jest"]
        assert deps.by_purpose["framework"][0].version == "4.0.0"
        assert deps.by_purpose["framework"][0].critical is True
        assert deps.critical_path == ["express"]
        assert deps.dev_only == ["jest"]

    @pytest.mark.asyncio
    async def test_no_manifest(self, tmp_path):
        deps = await DependencyPurposeMapper().map(tmp_path)
        assert list(deps.by_purpose) == list(PURPOSE_CATEGORIES)
        assert all(bucket == [] for bucket in deps.by_purpose.values())
        assert deps.critical_path == []
        assert deps.dev_only == []

    @pytest.mark.asyncio
    async def test_python_dependencies(self, make_project):
        root = make_project({
            "requirements.txt": "requests>=2.31\nPyYAML\n",
            "requirements-dev.txt": "pytest\nleft-pad-py\n",
        })

        deps = await DependencyPurposeMapper().map(root)

        assert [d.name for d in deps.by_purpose["http"]] == ["requests"]
        assert [d.name for d in deps.by_purpose["parsing"]] == ["PyYAML"]
        assert deps.critical_path == ["requests", "PyYAML"]
        # Unknown dev packages are still dev-only
        assert deps.dev_only == ["pytest", "left-pad-py"]

    def test_production_declaration_is_authoritative(self):
        """A name in both sections is production: critical, never dev-only."""
        deps = DependencyPurposeMapper().classify(
            production=[("typescript", "5.0.0")],
            development=[("typescript", "5.1.0"), ("eslint", "8.0.0")],
        )
        assert deps.critical_path == ["typescript"]
        assert deps.dev_only == ["eslint"]
        assert [d.version for d in deps.by_purpose["build"]] == ["5.0.0"]

    def test_each_name_in_one_bucket(self):
        deps = DependencyPurposeMapper().classify(
            production=[("react", "18"), ("React", "18")],
            development=[],
        )
        names = [d.name for d in deps.all_dependencies()]
        assert names == ["react"]

    def test_dev_critical_dependency_not_on_critical_path(self):
        deps = DependencyPurposeMapper().classify(production=[], development=[("@types/vscode", "1.80")])
        assert deps.by_purpose["platform"][0].critical is True
        assert deps.critical_path == []
        assert deps.dev_only == ["@types/vscode"]
