"""
Tests for the mail HTTP routes.
"""

import pytest
from fastapi import status
from fastapi.testclient import TestClient
from httpx import ASGITransport, AsyncClient

from mailer.config import Settings, get_settings
from mailer.mail.adapters.mock import MockTransport
from mailer.mail.builder import MessageBuilder
from mailer.mail.interface import ErrorKind, Sender
from mailer.mail.router import get_message_builder, get_transport
from mailer.main import create_app


@pytest.fixture
def transport() -> MockTransport:
    return MockTransport()


@pytest.fixture
def app(transport: MockTransport):
    app = create_app()
    sender = Sender(address="noreply@example.com", name="Mailer")
    app.dependency_overrides[get_message_builder] = lambda: MessageBuilder(sender, transport)
    app.dependency_overrides[get_transport] = lambda: transport
    yield app
    app.dependency_overrides.clear()


@pytest.fixture
def client(app) -> TestClient:
    return TestClient(app)


class TestSendMail:
    def test_send_text(self, client: TestClient, transport: MockTransport) -> None:
        resp = client.post(
            "/api/mail/send",
            json={"receiver_id": "a@x.com", "subject": "Hello", "text": "hi"},
        )

        assert resp.status_code == status.HTTP_200_OK
        assert resp.json() == {"status": "sent", "provider_response": "250 OK"}
        sent = transport.last_message
        assert sent.recipients == ("a@x.com",)
        assert sent.subject == "Hello"
        assert sent.text == "hi"
        assert sent.html is None

    def test_send_to_many(self, client: TestClient, transport: MockTransport) -> None:
        resp = client.post(
            "/api/mail/send",
            json={"receiver_id": ["a@x.com", "b@x.com"], "text": "hi"},
        )

        assert resp.status_code == status.HTTP_200_OK
        assert transport.last_message.recipients == ("a@x.com", "b@x.com")

    def test_missing_receiver_is_bad_request(self, client: TestClient, transport: MockTransport) -> None:
        resp = client.post("/api/mail/send", json={"text": "hi"})

        assert resp.status_code == status.HTTP_400_BAD_REQUEST
        assert resp.json()["detail"]["code"] == "VALIDATION_ERROR"
        assert transport.send_count == 0

    def test_missing_body_is_bad_request(self, client: TestClient, transport: MockTransport) -> None:
        resp = client.post("/api/mail/send", json={"receiver_id": "a@x.com", "subject": "empty"})

        assert resp.status_code == status.HTTP_400_BAD_REQUEST
        assert transport.send_count == 0

    def test_transport_failure_reported_in_body(self, client: TestClient, transport: MockTransport) -> None:
        transport.configure_failure(kind=ErrorKind.AUTH_REJECTED, detail="535 bad credentials")

        resp = client.post("/api/mail/send", json={"receiver_id": "a@x.com", "text": "hi"})

        assert resp.status_code == status.HTTP_200_OK
        assert resp.json() == {
            "status": "failed",
            "cause": "auth_rejected",
            "detail": "535 bad credentials",
        }

    def test_transport_failure_surfaced_when_enabled(
        self, app, client: TestClient, transport: MockTransport
    ) -> None:
        app.dependency_overrides[get_settings] = lambda: Settings(surface_transport_failures=True)
        transport.configure_failure(kind=ErrorKind.NETWORK_UNREACHABLE, detail="no route")

        resp = client.post("/api/mail/send", json={"receiver_id": "a@x.com", "text": "hi"})

        assert resp.status_code == status.HTTP_502_BAD_GATEWAY
        assert resp.json()["cause"] == "network_unreachable"

    def test_reused_builder_is_conflict(self, app, client: TestClient, transport: MockTransport) -> None:
        shared = MessageBuilder(Sender(address="noreply@example.com"), transport)
        app.dependency_overrides[get_message_builder] = lambda: shared

        first = client.post("/api/mail/send", json={"receiver_id": "a@x.com", "text": "hi"})
        second = client.post("/api/mail/send", json={"receiver_id": "b@x.com", "text": "hi"})

        assert first.status_code == status.HTTP_200_OK
        assert second.status_code == status.HTTP_409_CONFLICT
        assert second.json()["detail"]["code"] == "INVALID_STATE"
        assert transport.send_count == 1


class TestSendHtmlMail:
    def test_send_html(self, client: TestClient, transport: MockTransport) -> None:
        resp = client.post(
            "/api/mail/send-html",
            json={"receiver_id": "a@x.com", "subject": "Hi", "html": "<b>hi</b>"},
        )

        assert resp.status_code == status.HTTP_200_OK
        assert transport.last_message.html == "<b>hi</b>"

    def test_html_required(self, client: TestClient, transport: MockTransport) -> None:
        resp = client.post("/api/mail/send-html", json={"receiver_id": "a@x.com", "text": "hi"})

        assert resp.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY
        detail = resp.json()["detail"]
        assert detail["code"] == "VALIDATION_ERROR"
        assert any(err["field"].endswith("html") for err in detail["errors"])
        assert transport.send_count == 0


class TestHealth:
    def test_app_health(self, client: TestClient) -> None:
        resp = client.get("/health")
        assert resp.json() == {"status": "healthy"}

    def test_mail_health(self, client: TestClient, transport: MockTransport) -> None:
        assert client.get("/api/mail/health").json() == {"status": "healthy"}
        transport.configure_health(False)
        assert client.get("/api/mail/health").json() == {"status": "unhealthy"}


class TestCorrelationId:
    def test_request_id_echoed(self, client: TestClient) -> None:
        resp = client.get("/health", headers={"X-Request-ID": "req-123"})
        assert resp.headers["X-Request-ID"] == "req-123"

    def test_request_id_generated(self, client: TestClient) -> None:
        resp = client.get("/health")
        assert resp.headers["X-Request-ID"]


class TestAsyncClient:
    @pytest.mark.asyncio
    async def test_send_via_async_client(self, app, transport: MockTransport) -> None:
        async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
            resp = await ac.post(
                "/api/mail/send",
                json={"receiver_id": "a@x.com", "html": "<b>hi</b>"},
            )

        assert resp.status_code == status.HTTP_200_OK
        assert resp.json()["status"] == "sent"
        assert transport.send_count == 1
