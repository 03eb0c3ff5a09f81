"""Tests for configuration loading and validation."""

import pytest

from resume_builder.config import (
    AppConfig,
    Severity,
    has_errors,
    load_config,
    load_raw_config,
    resolve_api_key_value,
    validate_config,
)


def _write(path, text):
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text, encoding="utf-8")
    return path


class TestLoadConfig:
    def test_local_overlays_base(self, tmp_path, monkeypatch):
        _write(tmp_path / "config" / "config.yaml", "provider: openai\nmodel: gpt-4o-mini\nmax_tokens: 4000\n")
        _write(tmp_path / "config" / "config.local.yaml", "model: deepseek-chat\nprovider: deepseek\n")
        monkeypatch.chdir(tmp_path)

        raw = load_raw_config("config/config.local.yaml")
        assert raw == {"provider": "deepseek", "model": "deepseek-chat", "max_tokens": 4000}

    def test_explicit_path_is_loaded_as_is(self, tmp_path):
        path = _write(tmp_path / "custom.yaml", "layout_format: compact\nunknown_key: 1\n")
        config = load_config(str(path))
        assert config.layout_format == "compact"
        assert config.provider == "openai"

    def test_missing_explicit_path(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_config(str(tmp_path / "nope.yaml"))

    def test_non_mapping_is_rejected(self, tmp_path):
        path = _write(tmp_path / "list.yaml", "- a\n- b\n")
        with pytest.raises(ValueError, match="mapping"):
            load_raw_config(str(path))

    def test_from_dict_ignores_unknown_keys(self):
        config = AppConfig.from_dict({"model": "m", "web": {"port": 1}})
        assert config.model == "m"


class TestResolveApiKey:
    def test_environment_wins(self, monkeypatch):
        monkeypatch.setenv("OPENAI_API_KEY", "from-env")
        assert resolve_api_key_value("openai", "literal") == "from-env"

    def test_placeholder(self, monkeypatch):
        monkeypatch.setenv("MY_KEY", "secret")
        assert resolve_api_key_value("openai", "${MY_KEY}") == "secret"
        assert resolve_api_key_value("openai", "${UNSET_KEY_FOR_TESTS}") == ""

    def test_literal(self):
        assert resolve_api_key_value("openai", "sk-123") == "sk-123"


class TestValidateConfig:
    def test_defaults_only_warn_about_missing_key(self):
        issues = validate_config({})
        assert [(i.field, i.severity) for i in issues] == [("api_key", Severity.WARNING)]
        assert not has_errors(issues)

    def test_errors(self):
        issues = validate_config(
            {
                "provider": "nope",
                "api_key": "k",
                "temperature": 5,
                "max_tokens": 0,
                "layout_format": "fancy",
                "model": "",
            }
        )
        fields = {i.field for i in issues if i.severity is Severity.ERROR}
        assert fields == {"provider", "temperature", "max_tokens", "layout_format", "model"}
        assert has_errors(issues)

    def test_unknown_log_level_is_a_warning(self):
        issues = validate_config({"api_key": "k", "log_level": "chatty"})
        assert [(i.field, i.severity) for i in issues] == [("log_level", Severity.WARNING)]
