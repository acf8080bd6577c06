"""Tests for environment-driven settings."""

from unittest.mock import patch

import pytest
from pydantic import ValidationError

from santa_api.settings import Settings


class TestSettings:
    """Tests for Settings validation."""

    def test_loads_from_environment(self, test_env):
        with patch.dict("os.environ", test_env, clear=True):
            settings = Settings(_env_file=None)

        assert settings.jwt_algorithm == "HS256"
        assert settings.default_event_id == "default"
        assert settings.smtp_port == 587
        assert settings.smtp_use_tls is True
        assert settings.cors_allow_origins == ["*"]

    def test_empty_strings_leave_optional_backends_unconfigured(self, mock_settings):
        assert not mock_settings.domain_db_connection_string
        assert not mock_settings.smtp_host

    def test_missing_jwt_secret(self, test_env):
        env = {k: v for k, v in test_env.items() if k != "JWT_SECRET"}
        with patch.dict("os.environ", env, clear=True):
            with pytest.raises(ValidationError):
                Settings(_env_file=None)

    def test_blank_jwt_secret(self, test_env):
        with patch.dict("os.environ", {**test_env, "JWT_SECRET": "   "}, clear=True):
            with pytest.raises(ValidationError, match="jwt_secret must not be empty"):
                Settings(_env_file=None)

    def test_short_aes_key(self, test_env):
        with patch.dict("os.environ", {**test_env, "AES_KEY_BASE64": "c2hvcnQ="}, clear=True):
            with pytest.raises(ValidationError, match="aes_key_base64"):
                Settings(_env_file=None)

    def test_bad_aes_iv(self, test_env):
        with patch.dict("os.environ", {**test_env, "AES_IV_BASE64": "@@@"}, clear=True):
            with pytest.raises(ValidationError, match="aes_iv_base64"):
                Settings(_env_file=None)

    def test_cors_origins_json_list(self, test_env):
        env = {**test_env, "CORS_ALLOW_ORIGINS": '["https://santa.example.com"]'}
        with patch.dict("os.environ", env, clear=True):
            settings = Settings(_env_file=None)
        assert settings.cors_allow_origins == ["https://santa.example.com"]

    def test_case_insensitive_names(self, test_env):
        env = {k.lower(): v for k, v in test_env.items()}
        with patch.dict("os.environ", {**env, "smtp_host": "smtp.example.com"}, clear=True):
            settings = Settings(_env_file=None)
        assert settings.smtp_host == "smtp.example.com"
