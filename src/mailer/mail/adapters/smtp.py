"""
SMTP mail transport.

Uses aiosmtplib for the network exchange; the handshake, TLS and
authentication are entirely the library's concern.
"""

from __future__ import annotations

import logging
from email.message import EmailMessage
from email.utils import formatdate, make_msgid

import aiosmtplib

from mailer.mail.config import MailConfig, get_mail_config
from mailer.mail.interface import (
    DispatchFailure,
    DispatchResult,
    DispatchSuccess,
    ErrorKind,
    Message,
    MessageTransport,
)

logger = logging.getLogger(__name__)

# Reply codes servers use for oversized messages
SIZE_EXCEEDED_CODES = {552}


def build_email_message(message: Message) -> EmailMessage:
    """Render a Message as a MIME message.

    Text and HTML together become multipart/alternative with text first.
    """
    email = EmailMessage()
    email["From"] = message.sender.formatted
    email["To"] = ", ".join(message.recipients)
    email["Subject"] = message.subject
    email["Date"] = formatdate(localtime=True)
    domain = message.sender.address.rpartition("@")[2] or None
    email["Message-ID"] = make_msgid(domain=domain)

    if message.text is not None:
        email.set_content(message.text)
        if message.html is not None:
            email.add_alternative(message.html, subtype="html")
    elif message.html is not None:
        email.set_content(message.html, subtype="html")

    return email


def classify_smtp_error(exc: BaseException) -> ErrorKind:
    """Map an aiosmtplib/socket exception to an ErrorKind."""
    if isinstance(exc, aiosmtplib.SMTPAuthenticationError):
        return ErrorKind.AUTH_REJECTED
    if isinstance(exc, (aiosmtplib.SMTPRecipientsRefused, aiosmtplib.SMTPRecipientRefused)):
        return ErrorKind.RECIPIENT_REJECTED
    if isinstance(exc, (aiosmtplib.SMTPTimeoutError, TimeoutError)):
        return ErrorKind.TIMEOUT
    if isinstance(exc, (aiosmtplib.SMTPConnectError, aiosmtplib.SMTPServerDisconnected)):
        return ErrorKind.NETWORK_UNREACHABLE
    if isinstance(exc, aiosmtplib.SMTPResponseException):
        if exc.code in SIZE_EXCEEDED_CODES:
            return ErrorKind.PAYLOAD_TOO_LARGE
        if exc.code == 554 and "size" in (exc.message or "").lower():
            return ErrorKind.PAYLOAD_TOO_LARGE
        return ErrorKind.PROTOCOL_ERROR
    if isinstance(exc, aiosmtplib.SMTPException):
        return ErrorKind.PROTOCOL_ERROR
    if isinstance(exc, OSError):
        return ErrorKind.NETWORK_UNREACHABLE
    return ErrorKind.UNKNOWN


class SMTPTransport(MessageTransport):
    """SMTP transport backed by aiosmtplib.

    One connection per send; the transport itself holds only configuration,
    so concurrent sends from different builders do not interfere.
    """

    def __init__(self, config: MailConfig | None = None) -> None:
        self._config = config or get_mail_config()

    def _connection_kwargs(self) -> dict:
        cfg = self._config
        kwargs: dict = {
            "hostname": cfg.smtp_host,
            "port": cfg.smtp_port,
            "use_tls": cfg.smtp_use_tls,
            "start_tls": cfg.smtp_start_tls,
            "timeout": cfg.timeout_seconds,
        }
        if cfg.has_credentials:
            kwargs["username"] = cfg.smtp_username
            kwargs["password"] = cfg.smtp_password
        return kwargs

    async def send(self, message: Message) -> DispatchResult:
        try:
            email = build_email_message(message)
        except ValueError as e:
            # e.g. CR/LF in a header value
            logger.warning("Message could not be rendered", extra={"error": str(e)})
            return DispatchFailure(cause=ErrorKind.PROTOCOL_ERROR, detail=str(e))

        limit = self._config.max_message_bytes
        if limit:
            size = len(email.as_bytes())
            if size > limit:
                logger.warning(
                    "Message exceeds size limit",
                    extra={"size_bytes": size, "limit_bytes": limit},
                )
                return DispatchFailure(
                    cause=ErrorKind.PAYLOAD_TOO_LARGE,
                    detail=f"Message is {size} bytes, limit is {limit}",
                )

        logger.info(
            "Sending mail via SMTP",
            extra={
                "smtp_host": self._config.smtp_host,
                "smtp_port": self._config.smtp_port,
                "recipients_count": len(message.recipients),
                "message_id": email["Message-ID"],
            },
        )

        try:
            errors, response = await aiosmtplib.send(
                email,
                sender=message.sender.address,
                recipients=list(message.recipients),
                **self._connection_kwargs(),
            )
        except (aiosmtplib.SMTPException, OSError) as e:
            kind = classify_smtp_error(e)
            logger.error(
                "SMTP send failed",
                extra={"cause": kind.value, "error": str(e), "smtp_host": self._config.smtp_host},
            )
            return DispatchFailure(cause=kind, detail=str(e) or type(e).__name__)

        if errors:
            refused = ", ".join(f"{rcpt} ({reply.code} {reply.message})" for rcpt, reply in errors.items())
            logger.warning("SMTP server refused some recipients", extra={"refused": list(errors)})
            return DispatchFailure(
                cause=ErrorKind.RECIPIENT_REJECTED,
                detail=f"Refused: {refused}; server response: {response}",
            )

        return DispatchSuccess(provider_response=response)

    async def health_check(self) -> bool:
        kwargs = self._connection_kwargs()
        kwargs.pop("username", None)
        kwargs.pop("password", None)
        try:
            client = aiosmtplib.SMTP(**kwargs)
            async with client:
                await client.noop()
            return True
        except (aiosmtplib.SMTPException, OSError) as e:
            logger.warning("SMTP health check failed", extra={"error": str(e)})
            return False
