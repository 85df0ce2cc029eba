# =============================================================================
# test_config.py - Compiler Configuration Tests
# =============================================================================
# Tests for policy defaults, validation and environment overrides.
# =============================================================================

import pytest

from inkasm.config import CompilerConfig
from inkasm.cli.inkasm import build_config


class TestCompilerConfig:
    """Test the policy dataclass."""

    def test_defaults(self):
        config = CompilerConfig()
        assert config.unclassified == "truncate"
        assert config.duplicate_labels == "overwrite"
        assert config.truncate_on_unclassified
        assert config.overwrite_duplicate_labels

    def test_strict(self):
        config = CompilerConfig.strict()
        assert not config.truncate_on_unclassified
        assert not config.overwrite_duplicate_labels

    def test_policy_case_is_normalized(self):
        config = CompilerConfig(unclassified="ERROR", duplicate_labels="Overwrite")
        assert config.unclassified == "error"
        assert config.duplicate_labels == "overwrite"

    def test_invalid_unclassified_policy(self):
        with pytest.raises(ValueError) as exc_info:
            CompilerConfig(unclassified="ignore")
        assert "truncate, error" in str(exc_info.value)

    def test_invalid_duplicate_policy(self):
        with pytest.raises(ValueError):
            CompilerConfig(duplicate_labels="first")


class TestFromEnv:
    """Test environment variable overrides."""

    def test_no_variables(self, monkeypatch):
        monkeypatch.delenv("INKASM_UNCLASSIFIED", raising=False)
        monkeypatch.delenv("INKASM_DUPLICATE_LABELS", raising=False)
        assert CompilerConfig.from_env() == CompilerConfig()

    def test_variables_apply(self, monkeypatch):
        monkeypatch.setenv("INKASM_UNCLASSIFIED", "error")
        monkeypatch.setenv("INKASM_DUPLICATE_LABELS", "error")
        assert CompilerConfig.from_env() == CompilerConfig.strict()

    def test_empty_variable_is_ignored(self, monkeypatch):
        monkeypatch.setenv("INKASM_UNCLASSIFIED", "")
        monkeypatch.delenv("INKASM_DUPLICATE_LABELS", raising=False)
        assert CompilerConfig.from_env().unclassified == "truncate"

    def test_invalid_variable(self, monkeypatch):
        monkeypatch.setenv("INKASM_UNCLASSIFIED", "skip")
        with pytest.raises(ValueError):
            CompilerConfig.from_env()


class TestBuildConfig:
    """Test how command-line options combine with the environment."""

    def test_options_override_environment(self, monkeypatch):
        monkeypatch.setenv("INKASM_UNCLASSIFIED", "error")
        monkeypatch.delenv("INKASM_DUPLICATE_LABELS", raising=False)
        config = build_config(False, "truncate", None)
        assert config.unclassified == "truncate"

    def test_strict_ignores_environment(self, monkeypatch):
        monkeypatch.setenv("INKASM_UNCLASSIFIED", "truncate")
        config = build_config(True, None, None)
        assert config == CompilerConfig.strict()

    def test_option_overrides_strict(self, monkeypatch):
        monkeypatch.delenv("INKASM_UNCLASSIFIED", raising=False)
        config = build_config(True, None, "overwrite")
        assert config.unclassified == "error"
        assert config.duplicate_labels == "overwrite"
