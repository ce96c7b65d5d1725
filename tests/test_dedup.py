"""Tests for deduplication helpers."""

from statescan.utils import (
    deduplicate_array,
    deduplicate_by,
    deduplicate_dependencies,
    merge_and_deduplicate,
    normalize_dependency_name,
)


class TestDeduplicateArray:
    """Tests for exact-match deduplication."""

    def test_removes_duplicates_and_sorts(self):
        assert deduplicate_array(["b", "a", "b", "c", "a"]) == ["a", "b", "c"]

    def test_is_case_sensitive(self):
        """React and react are different strings."""
        assert deduplicate_array(["react", "React"]) == ["React", "react"]

    def test_empty(self):
        assert deduplicate_array([]) == []

    def test_idempotent(self):
        items = ["Vite", "ESLint", "Vite", "Babel"]
        once = deduplicate_array(items)
        assert deduplicate_array(once) == once


class TestNormalizeDependencyName:
    """Tests for dependency name normalization."""

    def test_parenthesized_version(self):
        assert normalize_dependency_name("React (18.2.0)") == "react"

    def test_at_version(self):
        assert normalize_dependency_name("react@18.2.0") == "react"

    def test_scoped_package_keeps_scope(self):
        assert normalize_dependency_name("@types/node@20.1.0") == "@types/node"
        assert normalize_dependency_name("@types/node") == "@types/node"

    def test_plain_name(self):
        assert normalize_dependency_name("  Express ") == "express"


class TestDeduplicateDependencies:
    """Tests for case-insensitive dependency deduplication."""

    def test_first_occurrence_wins(self):
        result = deduplicate_dependencies(["React (18.2.0)", "react (17.0.0)", "vue (3.0.0)"])
        assert result == ["React (18.2.0)", "vue (3.0.0)"]

    def test_mixed_formats_collapse(self):
        result = deduplicate_dependencies(["lodash@4.17.21", "lodash (4.17.21)"])
        assert result == ["lodash@4.17.21"]

    def test_output_sorted(self):
        assert deduplicate_dependencies(["zod (3.0.0)", "axios (1.0.0)"]) == ["axios (1.0.0)", "zod (3.0.0)"]


class TestMergeAndDeduplicate:
    def test_merges_collections(self):
        assert merge_and_deduplicate(["a", "b"], ("b", "c"), []) == ["a", "b", "c"]


class TestDeduplicateBy:
    """Tests for keyed record deduplication."""

    def test_keeps_first_and_order(self):
        records = [{"name": "Jest"}, {"name": "Mocha"}, {"name": "jest"}]
        result = deduplicate_by(records, lambda r: r["name"])
        assert result == [{"name": "Jest"}, {"name": "Mocha"}]
