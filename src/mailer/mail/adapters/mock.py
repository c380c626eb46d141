"""
Mock mail transport for testing and local development.

- Records every message it receives
- Injectable in place of the SMTP transport
"""

import logging

from mailer.mail.interface import (
    DispatchFailure,
    DispatchResult,
    DispatchSuccess,
    ErrorKind,
    Message,
    MessageTransport,
)

logger = logging.getLogger(__name__)


class MockTransport(MessageTransport):
    """In-memory mail transport."""

    def __init__(self, response: str = "250 OK") -> None:
        self._messages: list[Message] = []
        self._default_response = response
        self._response = response
        self._should_fail: bool = False
        self._fail_kind: ErrorKind = ErrorKind.UNKNOWN
        self._fail_detail: str = "Mock failure"
        self._healthy: bool = True

    def reset(self) -> None:
        self._messages.clear()
        self._response = self._default_response
        self._should_fail = False
        self._fail_kind = ErrorKind.UNKNOWN
        self._fail_detail = "Mock failure"
        self._healthy = True

    def configure_failure(
        self,
        should_fail: bool = True,
        kind: ErrorKind = ErrorKind.UNKNOWN,
        detail: str = "Mock failure",
    ) -> None:
        self._should_fail = should_fail
        self._fail_kind = kind
        self._fail_detail = detail

    def configure_response(self, response: str) -> None:
        self._response = response

    def configure_health(self, healthy: bool) -> None:
        self._healthy = healthy

    @property
    def messages(self) -> list[Message]:
        return self._messages.copy()

    @property
    def send_count(self) -> int:
        return len(self._messages)

    @property
    def last_message(self) -> Message | None:
        return self._messages[-1] if self._messages else None

    async def send(self, message: Message) -> DispatchResult:
        self._messages.append(message)

        if self._should_fail:
            logger.info(
                "Mock send failed",
                extra={"cause": self._fail_kind.value, "recipients": list(message.recipients)},
            )
            return DispatchFailure(cause=self._fail_kind, detail=self._fail_detail)

        logger.info(
            "Mock send accepted",
            extra={"recipients": list(message.recipients), "subject": message.subject},
        )
        return DispatchSuccess(provider_response=self._response)

    async def health_check(self) -> bool:
        return self._healthy
