"""Tests for config loading."""

import pytest

from tone_picker.config import AppConfig, LLMConfig, ServerConfig, StorageConfig, load_config


class TestConfig:
    def test_defaults(self):
        config = AppConfig()
        assert config.llm.model == "claude-haiku-4-5-20251001"
        assert config.llm.timeout == 30
        assert config.server.port == 5000
        assert config.server.cors_origins == ("*",)

    def test_load_config_defaults(self, tmp_path, monkeypatch):
        """Loading from non-existent path returns defaults."""
        monkeypatch.delenv("TONE_PICKER_ENV", raising=False)
        config = load_config(tmp_path / "nonexistent.yaml")
        assert config.llm.max_tokens == 1000
        assert config.server.environment == "production"

    def test_load_config_from_yaml(self, tmp_path, monkeypatch):
        monkeypatch.delenv("TONE_PICKER_ENV", raising=False)
        yaml_path = tmp_path / "config.yaml"
        yaml_path.write_text(
            "llm:\n  model: test-model\n"
            "server:\n  port: 8080\n  cors_origins:\n    - http://localhost:3000\n"
        )
        config = load_config(yaml_path)
        assert config.llm.model == "test-model"
        assert config.server.port == 8080
        assert config.server.cors_origins == ("http://localhost:3000",)
        # Defaults for unspecified
        assert config.llm.temperature == 0.7
        assert config.storage.db_path == "~/.tone-picker/state.db"

    def test_env_overrides_environment(self, tmp_path, monkeypatch):
        yaml_path = tmp_path / "config.yaml"
        yaml_path.write_text("server:\n  environment: production\n")
        monkeypatch.setenv("TONE_PICKER_ENV", "development")
        config = load_config(yaml_path)
        assert config.server.environment == "development"
        assert config.server.is_development is True

    def test_empty_yaml(self, tmp_path, monkeypatch):
        monkeypatch.delenv("TONE_PICKER_ENV", raising=False)
        yaml_path = tmp_path / "config.yaml"
        yaml_path.write_text("")
        assert load_config(yaml_path) == AppConfig()

    def test_storage_resolved_paths(self):
        storage = StorageConfig(db_path="~/state.db", usage_db_path="~/usage.db")
        assert "~" not in str(storage.resolved_db_path)
        assert "~" not in str(storage.resolved_usage_db_path)

    def test_frozen_config(self):
        config = LLMConfig()
        with pytest.raises(AttributeError):
            config.model = "changed"


class TestConfigValidation:
    def test_llm_timeout_too_small(self):
        with pytest.raises(ValueError, match="timeout"):
            LLMConfig(timeout=0)

    @pytest.mark.parametrize("temperature", [-0.1, 1.5])
    def test_llm_temperature_out_of_range(self, temperature):
        with pytest.raises(ValueError, match="temperature"):
            LLMConfig(temperature=temperature)

    def test_llm_max_tokens_positive(self):
        with pytest.raises(ValueError, match="max_tokens"):
            LLMConfig(max_tokens=0)

    @pytest.mark.parametrize("port", [0, 70000])
    def test_server_port_out_of_range(self, port):
        with pytest.raises(ValueError, match="port"):
            ServerConfig(port=port)

    def test_invalid_yaml_value_raises(self, tmp_path):
        yaml_path = tmp_path / "config.yaml"
        yaml_path.write_text("llm:\n  temperature: 3\n")
        with pytest.raises(ValueError):
            load_config(yaml_path)

    def test_development_is_case_insensitive(self):
        assert ServerConfig(environment="Development").is_development is True
        assert ServerConfig().is_development is False
