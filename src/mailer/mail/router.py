"""
FastAPI router for mail endpoints.

Routes hold no business logic: the request body is applied to a fresh
MessageBuilder and dispatched through the shared transport.
"""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse

from mailer.config import Settings, get_settings
from mailer.mail.builder import MessageBuilder
from mailer.mail.factory import get_mail_transport, new_message_builder
from mailer.mail.interface import MessageTransport
from mailer.mail.request_adapter import apply_request
from mailer.mail.schemas import (
    MailHealthResponse,
    SendHtmlRequest,
    SendMailRequest,
    SendMailResponse,
)
from mailer.shared.logging import get_logger

logger = get_logger(__name__)

router = APIRouter(prefix="/api/mail", tags=["mail"])


def get_message_builder() -> MessageBuilder:
    """Dependency for a per-request message builder."""
    return new_message_builder()


def get_transport() -> MessageTransport:
    """Dependency for the shared mail transport."""
    return get_mail_transport()


async def _dispatch(
    payload: SendMailRequest,
    builder: MessageBuilder,
    settings: Settings,
) -> JSONResponse:
    result = await apply_request(builder, payload).dispatch()
    body = SendMailResponse.from_result(result)

    status_code = status.HTTP_200_OK
    if not result.ok:
        logger.error(
            "Mail not delivered",
            extra={"cause": result.cause.value, "detail": result.detail},
        )
        if settings.surface_transport_failures:
            status_code = status.HTTP_502_BAD_GATEWAY

    return JSONResponse(status_code=status_code, content=body.model_dump(mode="json", exclude_none=True))


@router.post(
    "/send",
    response_model=SendMailResponse,
    summary="Send a mail",
    description="Compose a mail from receiver_id, subject, text and html and dispatch it.",
)
async def send_mail(
    payload: SendMailRequest,
    builder: Annotated[MessageBuilder, Depends(get_message_builder)],
    settings: Annotated[Settings, Depends(get_settings)],
) -> JSONResponse:
    return await _dispatch(payload, builder, settings)


@router.post(
    "/send-html",
    response_model=SendMailResponse,
    summary="Send an HTML mail",
    description="Same as /send, but the request must carry an html body.",
)
async def send_html_mail(
    payload: SendHtmlRequest,
    builder: Annotated[MessageBuilder, Depends(get_message_builder)],
    settings: Annotated[Settings, Depends(get_settings)],
) -> JSONResponse:
    return await _dispatch(payload, builder, settings)


@router.get("/health", response_model=MailHealthResponse)
async def mail_health(
    transport: Annotated[MessageTransport, Depends(get_transport)],
) -> MailHealthResponse:
    healthy = await transport.health_check()
    return MailHealthResponse(status="healthy" if healthy else "unhealthy")
