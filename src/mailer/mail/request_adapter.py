"""
Request-to-message adapter.

Maps an inbound request onto MessageBuilder setters, one field to one
setter, with no transformation. Fields left as None are not set.
"""

from mailer.mail.builder import MessageBuilder
from mailer.mail.schemas import SendMailRequest


def apply_request(builder: MessageBuilder, request: SendMailRequest) -> MessageBuilder:
    if request.receiver_id is not None:
        builder.set_recipient(request.receiver_id)
    if request.subject is not None:
        builder.set_subject(request.subject)
    if request.text is not None:
        builder.set_text(request.text)
    if request.html is not None:
        builder.set_html(request.html)
    return builder
