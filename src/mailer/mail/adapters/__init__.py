"""
Concrete mail transports.
"""

from mailer.mail.adapters.mock import MockTransport
from mailer.mail.adapters.smtp import SMTPTransport

__all__ = ["MockTransport", "SMTPTransport"]
