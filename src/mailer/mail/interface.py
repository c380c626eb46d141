"""
Mail transport interface definition.

- Message, Sender value objects handed to transports
- DispatchResult tagged variant (DispatchSuccess | DispatchFailure)
- MessageTransport interface defines the async send method
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from email.utils import formataddr
from enum import Enum
from typing import Any, Literal, Union


class ErrorKind(str, Enum):
    """Causes a transport can report for a failed send."""

    AUTH_REJECTED = "auth_rejected"
    NETWORK_UNREACHABLE = "network_unreachable"
    RECIPIENT_REJECTED = "recipient_rejected"
    PAYLOAD_TOO_LARGE = "payload_too_large"
    TIMEOUT = "timeout"
    PROTOCOL_ERROR = "protocol_error"
    UNKNOWN = "unknown"


@dataclass(frozen=True)
class Sender:
    """Sender address with an optional display name."""

    address: str
    name: str | None = None

    def __post_init__(self) -> None:
        if not self.address or not self.address.strip():
            raise ValueError("Sender address must not be empty")

    @property
    def formatted(self) -> str:
        """Header form, e.g. ``Support <support@example.com>``."""
        if self.name:
            return formataddr((self.name, self.address))
        return self.address


@dataclass(frozen=True)
class Message:
    """Immutable message snapshot passed to a transport."""

    sender: Sender
    recipients: tuple[str, ...]
    subject: str = ""
    text: str | None = None
    html: str | None = None

    @property
    def is_multipart(self) -> bool:
        return self.text is not None and self.html is not None


@dataclass(frozen=True)
class DispatchSuccess:
    """Transport accepted the message."""

    provider_response: str
    ok: Literal[True] = field(default=True, init=False)


@dataclass(frozen=True)
class DispatchFailure:
    """Transport could not deliver the message."""

    cause: ErrorKind
    detail: str
    ok: Literal[False] = field(default=False, init=False)


DispatchResult = Union[DispatchSuccess, DispatchFailure]


class TransportError(Exception):
    """Failure raised by a transport; converted to DispatchFailure on dispatch."""

    def __init__(
        self,
        message: str,
        kind: ErrorKind = ErrorKind.UNKNOWN,
        provider_response: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message)
        self.kind = kind
        self.provider_response = provider_response or {}

    def to_failure(self) -> DispatchFailure:
        return DispatchFailure(cause=self.kind, detail=str(self))


class MessageTransport(ABC):
    """Abstract interface for mail transports.

    Implementations can use SMTP, an HTTP API, or an in-memory recorder.
    A transport instance is shared process-wide and must not mutate the
    messages it receives.
    """

    @abstractmethod
    async def send(self, message: Message) -> DispatchResult:
        """Attempt delivery of a message.

        Args:
            message: The message snapshot to deliver.

        Returns:
            DispatchSuccess with the provider response, or DispatchFailure.
            Implementations may instead raise TransportError.
        """
        ...

    @abstractmethod
    async def health_check(self) -> bool:
        """Check whether the transport endpoint is reachable."""
        ...
