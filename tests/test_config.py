"""Tests for environment configuration."""

import pytest

from kontent_migrator.config import DEFAULT_MANAGEMENT_URL, KontentConfig
from kontent_migrator.errors import ConfigurationError


class TestKontentConfig:

    def test_from_env(self, monkeypatch):
        monkeypatch.setenv("KONTENT_ENVIRONMENT_ID", "env-1")
        monkeypatch.setenv("KONTENT_MANAGEMENT_API_KEY", "mapi")
        monkeypatch.setenv("KONTENT_ITEM_DELAY", "0.5")
        monkeypatch.delenv("KONTENT_LANGUAGE", raising=False)

        config = KontentConfig.from_env()

        assert config.environment_id == "env-1"
        assert config.management_api_key == "mapi"
        assert config.item_delay == 0.5
        assert config.language == "default"
        assert config.management_url == DEFAULT_MANAGEMENT_URL

    def test_project_id_fallback(self, monkeypatch):
        monkeypatch.delenv("KONTENT_ENVIRONMENT_ID", raising=False)
        monkeypatch.setenv("KONTENT_PROJECT_ID", "legacy")
        assert KontentConfig.from_env().environment_id == "legacy"

    def test_to_dict_has_no_keys(self):
        config = KontentConfig(environment_id="env", management_api_key="secret", preview_api_key="p")
        data = config.to_dict()
        assert "secret" not in data.values()
        assert "management_api_key" not in data
        assert KontentConfig.from_dict(data).environment_id == "env"

    def test_status(self):
        assert KontentConfig(environment_id="env").status() == {
            "has_environment_id": True,
            "has_management_api_key": False,
            "has_preview_api_key": False,
            "is_configured": False,
        }

    def test_validate(self):
        with pytest.raises(ConfigurationError, match="KONTENT_ENVIRONMENT_ID, KONTENT_MANAGEMENT_API_KEY"):
            KontentConfig().validate()
        KontentConfig(environment_id="env", management_api_key="key").validate()
