# tests/test_config.py
"""Tests for CLI configuration loading."""

import os
from pathlib import Path
from unittest.mock import patch

import pytest

from toyclaw.config import (
    DEFAULT_EMBEDDING_MODEL,
    DEFAULT_INDEX_DIR,
    DEFAULT_LLM_MODEL,
    ConfigError,
    ToyclawConfig,
    build_settings,
    check_embedding_credentials,
    find_config_file,
    get_settings_from_env,
    get_toyclaw,
    get_toyclaw_config,
    is_local_model,
    load_config,
    load_env_file,
    validate_config,
)
from toyclaw.settings import Settings


def write_file(path: Path, text: str) -> Path:
    path.write_text(text, encoding="utf-8")
    return path


class TestLoadEnvFile:
    def test_loads_values(self, clean_env, monkeypatch):
        for name in ("TOYCLAW_TEST_KEY", "TOYCLAW_QUOTED"):
            monkeypatch.setenv(name, "placeholder")
            monkeypatch.delenv(name)
        env_file = write_file(
            clean_env / ".env", "# comment\nTOYCLAW_TEST_KEY=abc\nTOYCLAW_QUOTED=\"x y\"\n"
        )

        load_env_file(env_file)

        assert os.environ["TOYCLAW_TEST_KEY"] == "abc"
        assert os.environ["TOYCLAW_QUOTED"] == "x y"

    def test_does_not_override(self, clean_env, monkeypatch):
        monkeypatch.setenv("TOYCLAW_TEST_KEY", "original")
        load_env_file(write_file(clean_env / ".env", "TOYCLAW_TEST_KEY=new\n"))
        assert os.environ["TOYCLAW_TEST_KEY"] == "original"

    def test_missing_file(self, clean_env):
        load_env_file(clean_env / "missing.env")


class TestConfigFile:
    def test_find_in_parent(self, clean_env):
        config = write_file(clean_env / "toyclaw.yaml", "index_dir: idx\n")
        nested = clean_env / "a" / "b"
        nested.mkdir(parents=True)
        assert find_config_file(nested) == config

    def test_load_config(self, clean_env):
        path = write_file(clean_env / "toyclaw.yaml", "settings:\n  default_top_k: 4\n")
        assert load_config(path) == {"settings": {"default_top_k": 4}}

    def test_empty_file(self, clean_env):
        assert load_config(write_file(clean_env / "toyclaw.yaml", "")) == {}

    def test_non_mapping(self, clean_env):
        with pytest.raises(ValueError):
            load_config(write_file(clean_env / "toyclaw.yaml", "- a\n- b\n"))

    def test_validate_config_warnings(self):
        warnings = validate_config({"index_dir": "x", "bogus": 1, "settings": {"top": 1}})
        assert warnings == [
            "Unknown config keys in config: bogus",
            "Unknown settings keys in config: top",
        ]


class TestBuildSettings:
    def test_yaml_settings(self):
        settings = build_settings({"settings": {"default_top_k": 4}}, env_settings={})
        assert settings.default_top_k == 4

    def test_env_beats_yaml(self):
        settings = build_settings(
            {"settings": {"default_top_k": 4}}, env_settings={"default_top_k": "7"}
        )
        assert settings.default_top_k == 7

    def test_rate_limit_profile(self):
        settings = build_settings(
            {"settings": {"rate_limit_profile": "conservative", "default_top_k": 3}},
            env_settings={},
        )
        assert settings.embedding_batch_size == 10
        assert settings.default_top_k == 3

    def test_reads_environment(self, clean_env, monkeypatch):
        monkeypatch.setenv("TOYCLAW_PROVIDER_TIMEOUT", "12.5")
        assert get_settings_from_env() == {"provider_timeout": "12.5"}
        assert build_settings().provider_timeout == 12.5


class TestGetToyclawConfig:
    def test_defaults(self, clean_env):
        config = get_toyclaw_config()
        assert isinstance(config, ToyclawConfig)
        assert config.llm_model == DEFAULT_LLM_MODEL
        assert config.embedding_model == DEFAULT_EMBEDDING_MODEL
        assert config.index_dir == DEFAULT_INDEX_DIR
        assert config.settings == Settings()

    def test_precedence(self, clean_env, monkeypatch):
        write_file(
            clean_env / "toyclaw.yaml", "index_dir: from-yaml\nllm_model: openai/gpt-5-mini\n"
        )
        monkeypatch.setenv("TOYCLAW_LLM_MODEL", "anthropic/claude-sonnet-4-5")

        config = get_toyclaw_config(index_dir="from-arg")

        assert config.index_dir == "from-arg"
        assert config.llm_model == "anthropic/claude-sonnet-4-5"

    def test_warns_about_unknown_keys(self, clean_env, caplog):
        write_file(
            clean_env / "toyclaw.yaml",
            "bogus_key: 1\nsettings:\n  typo_top_k: 3\n  default_top_k: 4\n",
        )

        with caplog.at_level("WARNING", logger="toyclaw.config"):
            config = get_toyclaw_config()

        assert isinstance(config, ToyclawConfig)
        assert config.settings.default_top_k == 4
        assert "Unknown config keys in" in caplog.text
        assert "bogus_key" in caplog.text
        assert "typo_top_k" in caplog.text

    def test_no_warnings_for_known_keys(self, clean_env, caplog):
        write_file(clean_env / "toyclaw.yaml", "index_dir: idx\nsettings:\n  default_top_k: 4\n")

        with caplog.at_level("WARNING", logger="toyclaw.config"):
            get_toyclaw_config()

        assert caplog.text == ""

    def test_gemini_key_fallback(self, clean_env, monkeypatch):
        monkeypatch.setenv("GEMINI_API_KEY", "gem-key")
        config = get_toyclaw_config()
        assert config.llm_api_key == "gem-key"
        assert config.embedding_api_key == "gem-key"

    def test_explicit_keys(self, clean_env, monkeypatch):
        monkeypatch.setenv("TOYCLAW_EMBEDDING_MODEL", "openai/text-embedding-3-small")
        monkeypatch.setenv("TOYCLAW_EMBEDDING_API_KEY", "sk-embed")
        monkeypatch.setenv("GEMINI_API_KEY", "gem-key")
        config = get_toyclaw_config()
        assert config.embedding_api_key == "sk-embed"
        assert config.llm_api_key == "gem-key"

    def test_invalid_settings(self, clean_env):
        write_file(clean_env / "toyclaw.yaml", "settings:\n  default_top_k: 0\n")
        result = get_toyclaw_config()
        assert isinstance(result, ConfigError)
        assert "Invalid settings" in result.message

    def test_unreadable_yaml(self, clean_env):
        write_file(clean_env / "toyclaw.yaml", "settings: [unclosed\n")
        result = get_toyclaw_config()
        assert isinstance(result, ConfigError)
        assert "Cannot read config file" in result.message

    def test_get_toyclaw(self, clean_env):
        app = get_toyclaw(index_dir="idx", data_dir=str(clean_env / "data"))
        assert str(app.index_dir) == "idx"
        assert (clean_env / "data" / "analyses.db").exists()


class TestCredentials:
    def make_config(self, **overrides):
        values = dict(
            llm_model=DEFAULT_LLM_MODEL,
            embedding_model=DEFAULT_EMBEDDING_MODEL,
            index_dir="idx",
            docs_dir="docs",
            data_dir="data",
            settings=Settings(),
        )
        values.update(overrides)
        return ToyclawConfig(**values)

    def test_explicit_key(self):
        assert check_embedding_credentials(self.make_config(embedding_api_key="k")) is None

    def test_local_model(self):
        config = self.make_config(embedding_model="ollama/nomic-embed-text")
        assert check_embedding_credentials(config) is None

    @patch("toyclaw.config.litellm.validate_environment")
    def test_missing_key(self, mock_validate):
        mock_validate.return_value = {
            "keys_in_environment": False,
            "missing_keys": ["GEMINI_API_KEY"],
        }

        error = check_embedding_credentials(self.make_config())

        assert isinstance(error, ConfigError)
        assert "GEMINI_API_KEY" in error.suggestion

    @patch("toyclaw.config.litellm.validate_environment")
    def test_key_in_environment(self, mock_validate):
        mock_validate.return_value = {"keys_in_environment": True, "missing_keys": []}
        assert check_embedding_credentials(self.make_config()) is None


@pytest.mark.parametrize(
    "model,expected",
    [
        ("ollama/nomic-embed-text", True),
        ("gemini/gemini-embedding-001", False),
        ("openai/text-embedding-3-small", False),
    ],
)
def test_is_local_model(model, expected):
    assert is_local_model(model) is expected
