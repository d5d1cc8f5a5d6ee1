"""Application configuration settings."""

from __future__ import annotations

from functools import lru_cache

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

ENV_FILE = ".env"
ENV_FILE_ENCODING = "utf-8"


class Settings(BaseSettings):
    """Application configuration values loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=ENV_FILE, env_file_encoding=ENV_FILE_ENCODING, extra="ignore"
    )

    database_url: str = Field(
        default="sqlite:///./tourguide.db",
        description="Database connection URL used by SQLAlchemy to connect to the DB",
        min_length=1,
    )
    app_timezone: str = Field(
        default="America/Santo_Domingo",
        description="IANA timezone name (or UTC offset) used for timestamps",
    )
    log_level: str = Field(default="INFO", description="Root logging level")
    cors_allow_origins: list[str] = Field(
        default_factory=lambda: ["http://localhost:3005"],
        description="Origins allowed to call the API from a browser",
    )

    sendgrid_api_key: str | None = Field(
        default=None,
        description="SendGrid API key used by the primary email channel",
    )
    sendgrid_sender: str | None = Field(
        default=None,
        description="Email address that will appear as the sender of transactional messages",
        min_length=3,
    )

    smtp_host: str | None = Field(
        default=None, description="SMTP host used by the secondary email channel"
    )
    smtp_port: int = Field(default=587, gt=0)
    smtp_user: str | None = None
    smtp_password: str | None = None
    smtp_use_tls: bool = True
    smtp_timeout_seconds: float = Field(default=10.0, gt=0)

    mail_from_name: str = Field(default="QR Tour Guide")
    mail_reply_to: str = Field(
        default="info@qrtourguidehistory.com",
        description="Mailbox customers reply to",
    )
    operator_email: str = Field(
        default="info@qrtourguidehistory.com",
        description="Back-office mailbox that receives new reservation notices",
    )

    dashboard_deadline_seconds: float = Field(
        default=15.0,
        gt=0,
        description="Maximum time the dashboard waits for its data sources",
    )
    poller_max_retries: int = Field(default=3, ge=0)
    poller_retry_delay_seconds: float = Field(default=3.0, ge=0)
    poller_interval_seconds: float = Field(default=30.0, gt=0)
    emergency_seed_enabled: bool = Field(
        default=True,
        description="Seed the in-memory feed with the system status entries",
    )

    @model_validator(mode="after")
    def _validate_sendgrid_pair(self) -> "Settings":
        if bool(self.sendgrid_api_key) ^ bool(self.sendgrid_sender):
            raise ValueError(
                "SENDGRID_API_KEY and SENDGRID_SENDER must both be provided to enable email"
            )
        if self.sendgrid_sender and "@" not in self.sendgrid_sender:
            raise ValueError("SENDGRID_SENDER must be a valid email address")
        return self

    @property
    def default_sender(self) -> str:
        """Address used in the ``From`` header when a message sets none."""

        return self.sendgrid_sender or self.smtp_user or self.mail_reply_to


@lru_cache
def get_settings() -> Settings:
    """Return cached application settings instance."""

    return Settings()


def reset_settings_cache() -> None:
    """Clear the settings cache to force reloading from the environment."""

    get_settings.cache_clear()


__all__ = ["Settings", "get_settings", "reset_settings_cache"]
