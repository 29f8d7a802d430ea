from __future__ import annotations

import smtplib
from collections.abc import Callable, Iterator
from typing import Any

import httpx
import pytest

from phone_insight.config import Settings, get_settings


class FakeSMTP:
    """Stand-in for smtplib.SMTP that records what would have been sent."""

    instances: list[FakeSMTP] = []
    fail_with: Exception | None = None

    def __init__(self, host: str, port: int) -> None:
        if FakeSMTP.fail_with is not None:
            raise FakeSMTP.fail_with
        self.host = host
        self.port = port
        self.started_tls = False
        self.logged_in_as: tuple[str, str] | None = None
        self.sent: list[Any] = []
        FakeSMTP.instances.append(self)

    def __enter__(self) -> FakeSMTP:
        return self

    def __exit__(self, *exc_info: object) -> None:
        return None

    def starttls(self) -> None:
        self.started_tls = True

    def login(self, user: str, password: str) -> None:
        self.logged_in_as = (user, password)

    def send_message(self, message: Any) -> None:
        message.as_bytes()
        self.sent.append(message)


@pytest.fixture
def settings() -> Settings:
    return Settings(
        nexmo_api_key="test-key",
        nexmo_api_secret="test-secret",
        public_base_url=None,
        sender_email="insights@example.com",
        smtp_host="mail.example.com",
        smtp_port="2525",
        smtp_username=None,
        smtp_password=None,
        smtp_starttls=False,
    )


@pytest.fixture
def fake_smtp(monkeypatch: pytest.MonkeyPatch) -> Iterator[type[FakeSMTP]]:
    FakeSMTP.instances = []
    FakeSMTP.fail_with = None
    monkeypatch.setattr(smtplib, "SMTP", FakeSMTP)
    yield FakeSMTP
    FakeSMTP.instances = []
    FakeSMTP.fail_with = None


@pytest.fixture
def recorded_requests() -> list[httpx.Request]:
    return []


@pytest.fixture
def make_http_client(
    recorded_requests: list[httpx.Request],
) -> Callable[..., httpx.Client]:
    """Build an httpx.Client whose transport records requests instead of sending them."""

    def _make(body: str = '{"request_id": "abc-123", "status": 0}') -> httpx.Client:
        def handler(request: httpx.Request) -> httpx.Response:
            recorded_requests.append(request)
            return httpx.Response(200, text=body)

        return httpx.Client(transport=httpx.MockTransport(handler))

    return _make


@pytest.fixture(autouse=True)
def clear_settings_cache() -> Iterator[None]:
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()
