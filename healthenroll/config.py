"""
Application configuration settings loaded from environment variables.
Uses pydantic_settings for validation and type conversion.

A ``Settings`` instance is built once at startup and handed to ``create_app``;
routes receive it through the ``get_settings`` dependency instead of reading
module-level state.
"""
from typing import List, Optional

from fastapi import Request
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Application settings class with environment variable validation.

    Attributes:
        database_url: SQLAlchemy connection string
        secret_key: Secret key for JWT token encoding
        algorithm: Algorithm used for JWT encoding (typically HS256)
        access_token_expire_minutes: Access token lifetime in minutes

        # Credential lifecycle
        verification_token_expire_hours: Lifetime of email verification tokens
        password_reset_token_expire_hours: Lifetime of password reset tokens

        # Email settings
        mail_username: SMTP server username
        mail_password: SMTP server password
        mail_from: Sender email address
        mail_from_name: Display name of the sender
        mail_port: SMTP server port
        mail_server: SMTP server hostname
        mail_starttls: Whether to use STARTTLS
        mail_ssl_tls: Whether to use SSL/TLS
        use_credentials: Whether to use credentials for SMTP
        validate_certs: Whether to validate certificates
        mail_suppress_send: Build messages but never open an SMTP connection

        # Frontend settings
        frontend_url: URL of the frontend application, used in email links
        cors_origins: Origins allowed to call the API from a browser

        # Bootstrap admin settings (optional)
        bootstrap_admin_email: Optional admin email for first admin creation
        bootstrap_admin_password: Optional admin password for first admin creation
    """
    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False, extra="ignore")

    # Database settings
    database_url: str = "sqlite:///./health_programs.db"

    # JWT settings
    secret_key: str = "change-me"
    algorithm: str = "HS256"
    access_token_expire_minutes: int = 24 * 60

    # Credential lifecycle
    verification_token_expire_hours: int = 12
    password_reset_token_expire_hours: int = 1

    # Email settings
    mail_username: str = ""
    mail_password: str = ""
    mail_from: str = "noreply@healthprograms.org"
    mail_from_name: str = "Health Programs"
    mail_port: int = 587
    mail_server: str = "localhost"
    mail_starttls: bool = True
    mail_ssl_tls: bool = False
    use_credentials: bool = True
    validate_certs: bool = True
    mail_suppress_send: bool = False

    # Frontend settings
    frontend_url: str = "http://localhost:5173"
    cors_origins: List[str] = ["http://localhost:5173", "http://localhost:3000"]

    # Bootstrap admin settings (optional - only used for first admin creation)
    bootstrap_admin_email: Optional[str] = None
    bootstrap_admin_password: Optional[str] = None

    log_level: str = "INFO"


def get_settings(request: Request) -> Settings:
    """Dependency returning the settings the application was created with."""
    return request.app.state.settings
