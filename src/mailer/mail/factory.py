"""
Mail transport factory.

Single source of truth for configuration:
- use MailConfig (Pydantic Settings) which loads from OS env + .env
- never read raw os.getenv("MAIL_*") here
"""

from __future__ import annotations

import logging
from functools import lru_cache

from mailer.mail.adapters.mock import MockTransport
from mailer.mail.adapters.smtp import SMTPTransport
from mailer.mail.builder import MessageBuilder
from mailer.mail.config import MailConfig, TransportType
from mailer.mail.config import get_mail_config as _load_mail_config
from mailer.mail.interface import MessageTransport, Sender

logger = logging.getLogger(__name__)


def _mask(s: str, keep: int = 3) -> str:
    if not s:
        return ""
    if len(s) <= keep:
        return "*" * len(s)
    return f"{s[:keep]}***"


@lru_cache(maxsize=1)
def get_mail_config() -> MailConfig:
    """Return cached MailConfig loaded from OS env + .env."""
    return _load_mail_config()


def create_mail_transport(cfg: MailConfig) -> MessageTransport:
    """Build a transport for the configured transport type."""
    if cfg.transport_type == TransportType.SMTP:
        return SMTPTransport(cfg)

    if cfg.transport_type == TransportType.MOCK:
        return MockTransport()

    raise ValueError(f"Unsupported mail transport_type: {cfg.transport_type}")


@lru_cache(maxsize=1)
def get_mail_transport() -> MessageTransport:
    """Create and cache the process-wide mail transport."""
    cfg = get_mail_config()

    logger.info(
        "Mail config resolved",
        extra={
            "transport_type": getattr(cfg.transport_type, "value", str(cfg.transport_type)),
            "sender_address": cfg.sender_address,
            "smtp_host": cfg.smtp_host,
            "smtp_port": cfg.smtp_port,
            "smtp_username": _mask(cfg.smtp_username),
            "smtp_password_set": bool(cfg.smtp_password),
            "smtp_use_tls": cfg.smtp_use_tls,
            "timeout_seconds": cfg.timeout_seconds,
        },
    )

    return create_mail_transport(cfg)


def get_sender() -> Sender:
    return get_mail_config().sender


def new_message_builder() -> MessageBuilder:
    """Fresh builder bound to the shared sender and transport."""
    return MessageBuilder(sender=get_sender(), transport=get_mail_transport())


def reset_mail_factory() -> None:
    """Drop cached config and transport (tests, config reload)."""
    get_mail_config.cache_clear()
    get_mail_transport.cache_clear()
