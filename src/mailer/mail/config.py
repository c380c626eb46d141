"""
Mail transport configuration.

Sender identity and transport credentials, read once at process start.
"""

from enum import Enum

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from mailer.mail.interface import Sender


class TransportType(str, Enum):
    """Supported mail transport types."""

    SMTP = "smtp"
    MOCK = "mock"


class MailConfig(BaseSettings):
    """Mail transport configuration from environment."""

    model_config = SettingsConfigDict(
        env_prefix="MAIL_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Transport selection
    transport_type: TransportType = Field(default=TransportType.SMTP)

    # Sender identity
    sender_address: str = Field(default="noreply@example.com", min_length=1)
    sender_name: str = Field(default="")

    # SMTP credentials
    smtp_host: str = Field(default="localhost")
    smtp_port: int = Field(default=587, ge=1, le=65535)
    smtp_username: str = Field(default="")
    smtp_password: str = Field(default="")
    smtp_use_tls: bool = Field(
        default=False,
        description="Implicit TLS on connect (usually port 465).",
    )
    smtp_start_tls: bool | None = Field(
        default=None,
        description="Force STARTTLS on/off. Unset upgrades when the server offers it.",
    )

    timeout_seconds: float = Field(default=30.0, gt=0, le=300)
    max_message_bytes: int = Field(
        default=0,
        ge=0,
        description="Reject encoded messages above this size. 0 disables the check.",
    )

    @model_validator(mode="after")
    def check_tls_mode(self) -> "MailConfig":
        """Implicit TLS and STARTTLS are mutually exclusive."""
        if self.smtp_use_tls and self.smtp_start_tls:
            raise ValueError("smtp_use_tls and smtp_start_tls cannot both be enabled")
        return self

    @property
    def sender(self) -> Sender:
        return Sender(address=self.sender_address, name=self.sender_name or None)

    @property
    def has_credentials(self) -> bool:
        return bool(self.smtp_username and self.smtp_password)


def get_mail_config() -> MailConfig:
    return MailConfig()
