"""Unit tests for config."""

import os
from unittest.mock import patch

import pytest

from visionary.core import config as config_module
from visionary.core.config import (
    DEFAULT_GEMINI_BASE_URL,
    DEFAULT_GENERATION_TIMEOUT,
    DEFAULT_IMAGE_MODEL,
    Config,
    get_config,
    set_config,
)
from visionary.utils.exceptions import ConfigurationError


@pytest.mark.unit
class TestConfig:
    def test_validate_raises_when_no_api_key(self):
        c = Config(gemini_api_key="")
        with pytest.raises(ConfigurationError) as exc_info:
            c.validate()
        assert "API key" in str(exc_info.value)

    def test_validate_sets_validated(self):
        c = Config(gemini_api_key="key")
        assert not c.is_valid()
        c.validate()
        assert c.is_valid()

    def test_validate_rejects_bad_timeout(self):
        with pytest.raises(ConfigurationError):
            Config(gemini_api_key="key", generation_timeout=0).validate()

    def test_validate_rejects_bad_base_url(self):
        with pytest.raises(ConfigurationError):
            Config(gemini_api_key="key", gemini_base_url="ftp://x").validate()

    def test_validate_rejects_empty_model(self):
        with pytest.raises(ConfigurationError):
            Config(gemini_api_key="key", default_image_model="").validate()

    def test_set_api_key_strips_and_invalidates(self):
        c = Config(gemini_api_key="key")
        c.validate()
        c.set_api_key("  other  ")
        assert c.gemini_api_key == "other"
        assert not c.is_valid()

    def test_set_api_key_empty(self):
        with pytest.raises(ConfigurationError):
            Config().set_api_key("   ")

    def test_set_image_model(self):
        c = Config()
        c.set_image_model("gemini-3-pro-image-preview")
        assert c.default_image_model == "gemini-3-pro-image-preview"
        with pytest.raises(ConfigurationError):
            c.set_image_model("")

    def test_repr_hides_api_key(self):
        assert "secret-key" not in repr(Config(gemini_api_key="secret-key"))


@pytest.mark.unit
class TestConfigFromEnv:
    def test_defaults(self):
        with patch.dict(os.environ, {}, clear=True):
            c = Config.from_env()
        assert c.gemini_api_key == ""
        assert c.gemini_base_url == DEFAULT_GEMINI_BASE_URL
        assert c.default_image_model == DEFAULT_IMAGE_MODEL
        assert c.generation_timeout == DEFAULT_GENERATION_TIMEOUT
        assert c.debug_api is False

    def test_reads_variables(self):
        env = {
            "GEMINI_API_KEY": "gk",
            "VISIONARY_BASE_URL": "http://localhost:9000/v1beta",
            "VISIONARY_DEFAULT_MODEL": "gemini-3-pro-image-preview",
            "VISIONARY_GENERATION_TIMEOUT": "30",
            "VISIONARY_DEBUG_API": "yes",
        }
        with patch.dict(os.environ, env, clear=True):
            c = Config.from_env()
        assert c.gemini_api_key == "gk"
        assert c.gemini_base_url == "http://localhost:9000/v1beta"
        assert c.default_image_model == "gemini-3-pro-image-preview"
        assert c.generation_timeout == 30
        assert c.debug_api is True

    def test_google_api_key_fallback(self):
        with patch.dict(os.environ, {"GOOGLE_API_KEY": "g2"}, clear=True):
            assert Config.from_env().gemini_api_key == "g2"

    def test_gemini_key_wins(self):
        with patch.dict(os.environ, {"GOOGLE_API_KEY": "g2", "GEMINI_API_KEY": "g1"}, clear=True):
            assert Config.from_env().gemini_api_key == "g1"

    def test_bad_timeout(self):
        with patch.dict(os.environ, {"VISIONARY_GENERATION_TIMEOUT": "soon"}, clear=True):
            with pytest.raises(ConfigurationError):
                Config.from_env()


@pytest.mark.unit
class TestGlobalConfig:
    def test_set_and_get(self):
        saved = config_module._global_config
        try:
            c = Config(gemini_api_key="k")
            set_config(c)
            assert get_config() is c
        finally:
            config_module._global_config = saved

    def test_get_creates_from_env(self):
        saved = config_module._global_config
        try:
            config_module._global_config = None
            with patch.dict(os.environ, {"GEMINI_API_KEY": "envkey"}, clear=True):
                assert get_config().gemini_api_key == "envkey"
        finally:
            config_module._global_config = saved
