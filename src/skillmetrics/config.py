"""Configuration management for the application."""

import json
import os
from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class EmailConfig(BaseSettings):
    """Outbound email (SMTP) configuration."""

    model_config = SettingsConfigDict(env_prefix="EMAIL_")

    enabled: bool = False
    host: str = "localhost"
    port: int = 587
    username: str | None = None
    password_env: str = "EMAIL_PASS"
    use_tls: bool = True
    from_address: str = "skillmetrics@localhost"
    default_hr_email: str | None = None
    default_finance_email: str | None = None
    timeout_seconds: int = 10

    @classmethod
    def from_file(cls, filepath: str = "config/email.json") -> "EmailConfig":
        """
        Load email configuration from JSON file.

        A missing file yields the defaults, which leave email disabled.

        Args:
            filepath: Path to the configuration file

        Returns:
            EmailConfig instance
        """
        if not Path(filepath).exists():
            return cls()
        with open(filepath, "r") as f:
            data = json.load(f)
        return cls(**data)

    def get_password(self) -> str | None:
        """
        Get the SMTP password from the environment variable named by ``password_env``.

        Returns:
            Password string, or None when the variable is not set
        """
        return os.getenv(self.password_env) or None


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # Database
    database_url: str = Field(default="sqlite:///./skillmetrics.db")
    sql_echo: bool = Field(default=False)

    # Sessions
    session_secret: str = Field(default="skillmetrics-dev-secret")
    session_max_age: int = Field(default=60 * 60 * 24)
    https_only_cookies: bool = Field(default=False)

    # Frontend
    cors_origins: list[str] = Field(default=["http://localhost:3000"])

    # Registration
    allowed_email_domain: str | None = Field(default=None)

    # Initial admin account created by init_db
    admin_email: str | None = Field(default=None)
    admin_password: str | None = Field(default=None)

    # Logging
    log_level: str = Field(default="INFO")

    # Analytics
    certification_expiry_warning_days: int = Field(default=30)

    @field_validator("log_level")
    @classmethod
    def normalize_log_level(cls, value: str) -> str:
        """Upper-case the log level so ``info`` and ``INFO`` both work."""
        return value.upper()

    @field_validator("allowed_email_domain")
    @classmethod
    def strip_domain_prefix(cls, value: str | None) -> str | None:
        """Accept ``@example.com`` as well as ``example.com``."""
        if value:
            return value.lstrip("@").lower()
        return None


# Global settings instance
settings = Settings()

# Load configurations
email_config = EmailConfig.from_file()
