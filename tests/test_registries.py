"""Tests for registries and the YAML extension loader."""

import dataclasses

import pytest

from statescan.exceptions import RegistryError
from statescan.registries import DEFAULT_REGISTRIES, matches_any, normalize_package_name
from statescan.registries.loader import load_registries


class TestRegistries:
    """Tests for the built-in tables."""

    def test_purpose_lookup_is_case_insensitive(self):
        purpose = DEFAULT_REGISTRIES.purpose_of("Express")
        assert purpose.category == "framework"
        assert purpose.critical is True

    def test_purpose_lookup_normalizes_python_names(self):
        assert DEFAULT_REGISTRIES.purpose_of("PyYAML").category == "parsing"
        assert DEFAULT_REGISTRIES.purpose_of("ruamel.yaml").category == "parsing"

    def test_unknown_dependency(self):
        assert DEFAULT_REGISTRIES.purpose_of("left-pad") is None

    def test_normalize_package_name(self):
        assert normalize_package_name("Foo_Bar.baz") == "foo-bar-baz"

    def test_matches_any_patterns(self):
        assert matches_any("@angular/core", ("@angular/*",))
        assert matches_any("react-dom", ("*react*",))
        assert not matches_any("preact-router", ("react",))

    def test_match_labels_in_table_order(self):
        labels = DEFAULT_REGISTRIES.match_labels(DEFAULT_REGISTRIES.node_frameworks, ["express", "react"])
        assert labels == ["React", "Express"]

    def test_registries_are_immutable(self):
        with pytest.raises(dataclasses.FrozenInstanceError):
            DEFAULT_REGISTRIES.source_dir = "lib"
        with pytest.raises(TypeError):
            DEFAULT_REGISTRIES.dependency_purposes["zod"] = None


class TestLoadRegistries:
    """Tests for registry extension files."""

    def test_extension_rows_are_merged(self, tmp_path):
        path = tmp_path / "extra.yml"
        path.write_text(
            "dependency_purposes:\n"
            "  zod: {category: utility, purpose: Schema validation, critical: true}\n"
            "domain_keywords:\n"
            "  ml-tools: [machine-learning, PyTorch]\n"
            "data_formats:\n"
            "  Parquet: [pyarrow]\n"
            "entry_points: [src/cli.ts]\n"
        )

        registries = load_registries(path)

        zod = registries.purpose_of("zod")
        assert (zod.category, zod.purpose, zod.critical) == ("utility", "Schema validation", True)
        assert registries.domain_keywords[-1] == ("ml-tools", frozenset({"machine-learning", "pytorch"}))
        assert registries.data_formats[-1] == ("Parquet", ("pyarrow",))
        assert registries.entry_points[-1] == "src/cli.ts"
        # Defaults untouched
        assert DEFAULT_REGISTRIES.purpose_of("zod") is None

    def test_empty_file_returns_base(self, tmp_path):
        path = tmp_path / "empty.yml"
        path.write_text("")
        assert load_registries(path) is DEFAULT_REGISTRIES

    def test_missing_file(self, tmp_path):
        with pytest.raises(RegistryError, match="Could not read"):
            load_registries(tmp_path / "nope.yml")

    def test_invalid_yaml(self, tmp_path):
        path = tmp_path / "bad.yml"
        path.write_text("dependency_purposes: [unclosed\n")
        with pytest.raises(RegistryError, match="Invalid YAML"):
            load_registries(path)

    def test_unknown_category_rejected(self, tmp_path):
        path = tmp_path / "bad.yml"
        path.write_text("dependency_purposes:\n  zod: {category: magic, purpose: x}\n")
        with pytest.raises(RegistryError, match="Invalid registry file"):
            load_registries(path)

    def test_unknown_key_rejected(self, tmp_path):
        path = tmp_path / "bad.yml"
        path.write_text("not_a_table: []\n")
        with pytest.raises(RegistryError):
            load_registries(path)

    def test_non_mapping_rejected(self, tmp_path):
        path = tmp_path / "list.yml"
        path.write_text("- a\n- b\n")
        with pytest.raises(RegistryError, match="must be a YAML mapping"):
            load_registries(path)
