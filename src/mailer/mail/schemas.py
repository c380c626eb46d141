"""
Pydantic schemas for the mail HTTP routes.
"""

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

from mailer.mail.interface import DispatchResult, ErrorKind


class SendMailRequest(BaseModel):
    """Inbound mail request; each field maps to one builder setter."""

    model_config = ConfigDict(extra="ignore")

    receiver_id: str | list[str] | None = Field(
        default=None,
        description="Recipient address or list of addresses",
    )
    subject: str | None = Field(default=None, description="Subject line")
    text: str | None = Field(default=None, description="Plain-text body")
    html: str | None = Field(default=None, description="HTML body")


class SendHtmlRequest(SendMailRequest):
    """Mail request that must carry an HTML body."""

    html: str = Field(..., description="HTML body")


class SendMailResponse(BaseModel):
    """Outcome of a dispatch as reported to the HTTP caller."""

    status: Literal["sent", "failed"]
    provider_response: str | None = None
    cause: ErrorKind | None = None
    detail: str | None = None

    @classmethod
    def from_result(cls, result: DispatchResult) -> "SendMailResponse":
        if result.ok:
            return cls(status="sent", provider_response=result.provider_response)
        return cls(status="failed", cause=result.cause, detail=result.detail)


class MailHealthResponse(BaseModel):
    status: Literal["healthy", "unhealthy"]
