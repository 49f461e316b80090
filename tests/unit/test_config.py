# tests/unit/test_config.py
"""
Tests for mcdelta.config (schema + layered loader).
"""

import pytest
from pydantic import ValidationError as PydanticValidationError

from mcdelta.config.loader import deep_merge, load_config, load_config_dict, load_yaml
from mcdelta.config.schema import MAX_RECORD_BYTES, MIB, ComparisonConfig, McDeltaConfig
from mcdelta.exceptions import ConfigNotFoundError, ConfigParseError, ConfigValidationError


class TestDeepMerge:
    """Tests for deep_merge."""

    def test_nested_merge(self):
        assert deep_merge({"a": 1, "b": {"c": 2, "d": 3}}, {"b": {"c": 10}}) == {
            "a": 1,
            "b": {"c": 10, "d": 3},
        }

    def test_lists_replaced(self):
        assert deep_merge({"x": [1, 2]}, {"x": [3]}) == {"x": [3]}

    def test_base_not_mutated(self):
        base = {"b": {"c": 1}}
        deep_merge(base, {"b": {"c": 2}})
        assert base == {"b": {"c": 1}}


class TestSchema:
    """Tests for the pydantic schema."""

    def test_defaults(self):
        config = McDeltaConfig()

        assert config.comparison.chunk_size == MIB
        assert config.comparison.large_file_threshold == 10 * MIB
        assert config.comparison.state_max_age_hours == 24.0
        assert config.analysis.max_attempts == 3
        assert config.analysis.backoff_seconds == 1.0

    def test_extensions_normalized(self):
        config = ComparisonConfig(text_extensions=["JAVA", ".Txt", " md ", ""])

        assert config.text_extensions == [".java", ".txt", ".md"]

    @pytest.mark.parametrize("field", ["chunk_size", "large_file_threshold"])
    def test_sizes_fit_record_header(self, field):
        """Sizes above the 32-bit record header limit are rejected."""
        assert ComparisonConfig(**{field: MAX_RECORD_BYTES})

        with pytest.raises(PydanticValidationError):
            ComparisonConfig(**{field: MAX_RECORD_BYTES + 1})

    def test_unknown_key_rejected(self):
        with pytest.raises(PydanticValidationError):
            McDeltaConfig(comparison={"chunk_sz": 1})


class TestLoader:
    """Tests for the layered loader."""

    def test_package_defaults(self, workspace):
        config = load_config()

        assert config.comparison.large_file_threshold == 10 * MIB
        assert ".java" in config.comparison.text_extensions

    def test_workspace_override(self, workspace):
        (workspace / "config.yaml").write_text("comparison:\n  chunk_size: 4096\n")

        config = load_config()

        assert config.comparison.chunk_size == 4096
        assert config.comparison.large_file_threshold == 10 * MIB

    def test_explicit_path(self, workspace, tmp_path):
        custom = tmp_path / "custom.yaml"
        custom.write_text("analysis:\n  max_attempts: 7\n")

        assert load_config(custom).analysis.max_attempts == 7

    def test_explicit_missing_path(self, workspace, tmp_path):
        with pytest.raises(ConfigNotFoundError):
            load_config(tmp_path / "missing.yaml")

    def test_invalid_yaml(self, tmp_path):
        bad = tmp_path / "bad.yaml"
        bad.write_text("comparison: [unclosed\n")

        with pytest.raises(ConfigParseError):
            load_yaml(bad)

    def test_non_mapping_root(self, tmp_path):
        bad = tmp_path / "list.yaml"
        bad.write_text("- a\n- b\n")

        with pytest.raises(ConfigParseError):
            load_yaml(bad)

    def test_schema_violation(self, workspace, tmp_path):
        bad = tmp_path / "bad.yaml"
        bad.write_text("analysis:\n  max_attempts: 0\n")

        with pytest.raises(ConfigValidationError):
            load_config(bad)

    def test_dict_without_validation(self, workspace):
        data = load_config_dict()

        assert data["log_level"] == "INFO"
        assert "comparison" in data
