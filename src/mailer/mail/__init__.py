"""
Mail package.

Keep package import side-effects to a minimum to avoid circular imports.
Do not import factory/adapters/router here.
"""

from mailer.mail.builder import BuilderState, MessageBuilder
from mailer.mail.interface import (
    DispatchFailure,
    DispatchResult,
    DispatchSuccess,
    ErrorKind,
    Message,
    MessageTransport,
    Sender,
    TransportError,
)

__all__ = [
    "BuilderState",
    "DispatchFailure",
    "DispatchResult",
    "DispatchSuccess",
    "ErrorKind",
    "Message",
    "MessageBuilder",
    "MessageTransport",
    "Sender",
    "TransportError",
]
