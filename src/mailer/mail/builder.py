"""
Message builder.

Accumulates message fields, validates them and dispatches an immutable
snapshot through the injected transport. A builder is single-use: after
dispatch every setter and dispatch call raises InvalidStateError.
"""

from __future__ import annotations

from collections.abc import Sequence
from enum import Enum

import anyio
import email_validator
from email_validator import EmailNotValidError, validate_email

from mailer.mail.interface import (
    DispatchFailure,
    DispatchResult,
    ErrorKind,
    Message,
    MessageTransport,
    Sender,
    TransportError,
)
from mailer.shared.exceptions import InvalidStateError, ValidationError
from mailer.shared.logging import get_logger

logger = get_logger(__name__)

# Local relays are valid SMTP targets; *.test is covered by test_environment.
LOCAL_RELAY_DOMAINS = ("localhost", "local")
for _name in LOCAL_RELAY_DOMAINS:
    if _name in email_validator.SPECIAL_USE_DOMAIN_NAMES:
        email_validator.SPECIAL_USE_DOMAIN_NAMES.remove(_name)


class BuilderState(str, Enum):
    """Builder lifecycle states."""

    COMPOSING = "composing"
    DISPATCHED = "dispatched"


def _normalize_recipients(value: str | Sequence[str] | None) -> tuple[str, ...]:
    if value is None:
        return ()
    if isinstance(value, str):
        return (value,)
    return tuple(value)


def _validate_address(address: str) -> None:
    if not isinstance(address, str) or not address.strip():
        raise ValidationError("Recipient address must not be empty")
    # Syntax only, no DNS.
    try:
        validate_email(
            address.strip(),
            check_deliverability=False,
            test_environment=True,
            globally_deliverable=False,
        )
    except EmailNotValidError as e:
        raise ValidationError(f"Invalid recipient address: {address!r}") from e


class MessageBuilder:
    """Builds and dispatches a single outbound message."""

    def __init__(self, sender: Sender, transport: MessageTransport) -> None:
        self._sender = sender
        self._transport = transport
        self._state = BuilderState.COMPOSING
        self._result: DispatchResult | None = None

        self._recipients: tuple[str, ...] = ()
        self._subject: str = ""
        self._text: str | None = None
        self._html: str | None = None

    @property
    def state(self) -> BuilderState:
        return self._state

    @property
    def result(self) -> DispatchResult | None:
        """Outcome of dispatch, None until dispatched."""
        return self._result

    def _ensure_composing(self) -> None:
        if self._state is not BuilderState.COMPOSING:
            raise InvalidStateError("Message builder was already dispatched")

    def set_recipient(self, address_or_list: str | Sequence[str]) -> MessageBuilder:
        """Replace the recipients. Format is checked on dispatch."""
        self._ensure_composing()
        self._recipients = _normalize_recipients(address_or_list)
        return self

    def set_subject(self, text: str) -> MessageBuilder:
        self._ensure_composing()
        self._subject = text
        return self

    def set_text(self, text: str) -> MessageBuilder:
        self._ensure_composing()
        self._text = text
        return self

    def set_html(self, markup: str) -> MessageBuilder:
        self._ensure_composing()
        self._html = markup
        return self

    def _validate(self) -> None:
        if not self._recipients:
            raise ValidationError("At least one recipient is required")
        for address in self._recipients:
            _validate_address(address)
        if self._text is None and self._html is None:
            raise ValidationError("Either a text or an HTML body is required")

    def _snapshot(self) -> Message:
        """Validate the current fields and return an immutable Message."""
        self._validate()
        return Message(
            sender=self._sender,
            recipients=tuple(address.strip() for address in self._recipients),
            subject=self._subject,
            text=self._text,
            html=self._html,
        )

    async def dispatch(self) -> DispatchResult:
        """Validate, snapshot and hand the message to the transport.

        Raises:
            InvalidStateError: The builder was already dispatched.
            ValidationError: Recipient or body missing/invalid. The transport
                is not invoked and the builder stays composing.

        Returns:
            DispatchSuccess or DispatchFailure. Transport failures never raise.
        """
        self._ensure_composing()
        message = self._snapshot()
        self._state = BuilderState.DISPATCHED

        # Once handed to the transport the send is not cancellable.
        with anyio.CancelScope(shield=True):
            result = await self._send(message)

        self._result = result
        if result.ok:
            logger.info(
                "Mail dispatched",
                extra={
                    "recipients_count": len(message.recipients),
                    "provider_response": result.provider_response,
                },
            )
        else:
            logger.warning(
                "Mail dispatch failed",
                extra={
                    "recipients_count": len(message.recipients),
                    "cause": result.cause.value,
                    "detail": result.detail,
                },
            )
        return result

    async def _send(self, message: Message) -> DispatchResult:
        try:
            return await self._transport.send(message)
        except TransportError as e:
            return e.to_failure()
        except Exception as e:
            logger.exception(
                "Unexpected transport error",
                extra={"transport": type(self._transport).__name__},
            )
            return DispatchFailure(cause=ErrorKind.UNKNOWN, detail=str(e) or type(e).__name__)


__all__ = ["BuilderState", "MessageBuilder"]
