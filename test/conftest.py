"""
Pytest configuration and fixtures for mailer tests.
"""

import os
import sys

import pytest

# Add src to path for imports
sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", "src"))

from mailer.mail.adapters.mock import MockTransport  # noqa: E402
from mailer.mail.builder import MessageBuilder  # noqa: E402
from mailer.mail.factory import reset_mail_factory  # noqa: E402
from mailer.mail.interface import Sender  # noqa: E402


@pytest.fixture(autouse=True)
def reset_env():
    """Reset environment variables and cached mail factory between tests."""
    original_env = os.environ.copy()
    reset_mail_factory()
    yield
    os.environ.clear()
    os.environ.update(original_env)
    reset_mail_factory()


@pytest.fixture
def sender() -> Sender:
    return Sender(address="noreply@example.com", name="Mailer")


@pytest.fixture
def mock_transport() -> MockTransport:
    return MockTransport()


@pytest.fixture
def builder(sender: Sender, mock_transport: MockTransport) -> MessageBuilder:
    return MessageBuilder(sender=sender, transport=mock_transport)
