"""Settings for the Secret Santa API."""

from typing import List
from typing import Optional

from pydantic import field_validator
from pydantic_settings import BaseSettings
from pydantic_settings import SettingsConfigDict

from santa_api.workflow.crypto import IV_LENGTH
from santa_api.workflow.crypto import KEY_LENGTH
from santa_api.workflow.crypto import decode_key_material


class Settings(BaseSettings):
    """
    Settings for the Secret Santa API.

    [pydantic.BaseSettings](https://docs.pydantic.dev/latest/concepts/pydantic_settings/) reads
    and validates configuration values from a variety of sources.

    This class automatically reads from:
    1. Environment variables (production)
    2. .env file (local development)

    Environment variable names are treated case-insensitively, but the canonical
    names used in this project are lowercase (jwt_secret, aes_key_base64, aes_iv_base64).
    """

    # Authentication
    jwt_secret: str
    """Shared secret used to verify HS256 bearer tokens issued by the identity provider (required)."""

    jwt_algorithm: str = "HS256"
    """Signature algorithm accepted on bearer tokens."""

    # At-rest encryption
    aes_key_base64: str
    """Base64-encoded 32-byte AES-256 key for wish and address encryption (required)."""

    aes_iv_base64: str
    """Base64-encoded 16-byte CBC initialization vector (required)."""

    # Domain database
    domain_db_connection_string: Optional[str] = None
    """PostgreSQL connection string. When unset an in-memory store is used (data lost on restart)."""

    default_event_id: str = "default"
    """Event id used for mappings, wishes and addresses when none is given."""

    # Notification Settings (SMTP)
    smtp_host: Optional[str] = None
    """SMTP server hostname. When unset santa emails are only logged."""

    smtp_port: int = 587
    """SMTP server port (default: 587 for STARTTLS)."""

    smtp_username: Optional[str] = None
    """SMTP authentication username."""

    smtp_password: Optional[str] = None
    """SMTP authentication password."""

    smtp_use_tls: bool = True
    """Issue STARTTLS before authenticating."""

    notification_from_email: str = "secret-santa-noreply@example.com"
    """From email address for santa notifications."""

    # HTTP
    cors_allow_origins: List[str] = ["*"]
    """Origins allowed by the CORS middleware (JSON list in the environment)."""

    log_level: str = "DEBUG"
    """Minimum level written to the stdout log sink."""

    model_config = SettingsConfigDict(
        case_sensitive=False,
        env_file=".env",  # Load from .env file if it exists (local development)
        env_file_encoding="utf-8",
        extra="ignore",  # Ignore extra environment variables not defined in the model
        validate_default=True,
    )

    @field_validator("aes_key_base64")
    @classmethod
    def _check_aes_key(cls, value: str) -> str:
        decode_key_material(value, KEY_LENGTH, "aes_key_base64")
        return value

    @field_validator("aes_iv_base64")
    @classmethod
    def _check_aes_iv(cls, value: str) -> str:
        decode_key_material(value, IV_LENGTH, "aes_iv_base64")
        return value

    @field_validator("jwt_secret")
    @classmethod
    def _check_jwt_secret(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("jwt_secret must not be empty")
        return value
