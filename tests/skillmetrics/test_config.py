"""Tests for configuration management."""

import json
import os
import tempfile

from skillmetrics.config import EmailConfig, Settings


class TestEmailConfig:
    """Tests for email configuration."""

    def test_email_config_defaults(self):
        """Email is off by default."""
        config = EmailConfig()
        assert config.enabled is False
        assert config.port == 587
        assert config.password_env == "EMAIL_PASS"
        assert config.use_tls is True
        assert config.default_hr_email is None

    def test_email_config_from_file(self):
        """Test loading email config from file."""
        with tempfile.NamedTemporaryFile(mode="w", suffix=".json", delete=False) as f:
            config_data = {
                "enabled": True,
                "host": "smtp.test",
                "port": 2525,
                "username": "mailer",
                "use_tls": False,
                "default_hr_email": "hr@test.com",
            }
            json.dump(config_data, f)
            temp_path = f.name

        try:
            config = EmailConfig.from_file(temp_path)
            assert config.enabled is True
            assert config.host == "smtp.test"
            assert config.port == 2525
            assert config.username == "mailer"
            assert config.use_tls is False
            assert config.default_hr_email == "hr@test.com"
        finally:
            os.unlink(temp_path)

    def test_email_config_missing_file(self, tmp_path):
        """A missing file falls back to the disabled defaults."""
        config = EmailConfig.from_file(str(tmp_path / "missing.json"))
        assert config.enabled is False

    def test_get_password(self, monkeypatch):
        monkeypatch.setenv("SMTP_SECRET", "hunter2")
        config = EmailConfig(password_env="SMTP_SECRET")
        assert config.get_password() == "hunter2"

    def test_get_password_missing(self, monkeypatch):
        monkeypatch.delenv("EMAIL_PASS", raising=False)
        assert EmailConfig().get_password() is None

    def test_env_prefix(self, monkeypatch):
        """Environment overrides use the EMAIL_ prefix."""
        monkeypatch.setenv("EMAIL_HOST", "mail.internal")
        monkeypatch.setenv("HOST", "ignored")
        assert EmailConfig().host == "mail.internal"


class TestSettings:
    """Tests for application settings."""

    def test_settings_defaults(self):
        """Test settings with default values."""
        settings = Settings(_env_file=None)
        assert settings.database_url == "sqlite:///./skillmetrics.db"
        assert settings.allowed_email_domain is None
        assert settings.certification_expiry_warning_days == 30
        assert settings.log_level == "INFO"

    def test_settings_from_env(self, monkeypatch):
        """Test loading settings from environment variables."""
        monkeypatch.setenv("DATABASE_URL", "sqlite:///./test.db")
        monkeypatch.setenv("SESSION_SECRET", "s3cret")
        monkeypatch.setenv("LOG_LEVEL", "debug")
        monkeypatch.setenv("ALLOWED_EMAIL_DOMAIN", "@Example.COM")

        settings = Settings(_env_file=None)
        assert settings.database_url == "sqlite:///./test.db"
        assert settings.session_secret == "s3cret"
        assert settings.log_level == "DEBUG"
        assert settings.allowed_email_domain == "example.com"

    def test_empty_domain_means_unrestricted(self, monkeypatch):
        monkeypatch.setenv("ALLOWED_EMAIL_DOMAIN", "")
        assert Settings(_env_file=None).allowed_email_domain is None
