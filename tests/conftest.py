import threading
from datetime import datetime, timedelta, timezone

import pytest
from fastapi.testclient import TestClient

from reviewlink.application.notifications import NotificationDispatcher
from reviewlink.application.redirects import RedirectResolver
from reviewlink.application.short_links import ShortLinkService
from reviewlink.domain.models import Channel, DeliveryResult
from reviewlink.domain.ports import DuplicateShortCodeError, LinkStore, MessageSender, TextGenerator
from reviewlink.infrastructure.config import (
    LLMSettings,
    Settings,
    ShortLinkSettings,
    TwilioSettings,
    WhatsAppSettings,
)
from reviewlink.infrastructure.llm import ReviewGenerator
from reviewlink.infrastructure.persistence import Database
from reviewlink.web.app import create_app
from reviewlink.web.services import Services

APP_URL = "https://reviews.test"
BUSINESS_NUMBER = "+91 98765-43210"


class InMemoryLinkStore(LinkStore):
    def __init__(self):
        self.links = {}
        self._lock = threading.Lock()

    def get(self, short_code):
        return self.links.get(short_code)

    def insert(self, link):
        with self._lock:
            if link.short_code in self.links:
                raise DuplicateShortCodeError(link.short_code)
            self.links[link.short_code] = link

    def increment_clicks(self, short_code):
        with self._lock:
            if short_code in self.links:
                self.links[short_code].clicks += 1

    def delete_expired(self, now, created_before):
        doomed = [
            code for code, link in self.links.items()
            if (link.expires_at is not None and link.expires_at <= now) or link.created_at < created_before
        ]
        for code in doomed:
            del self.links[code]
        return len(doomed)


class FakeSender(MessageSender):
    """Records every send and answers with a fixed result (or raises)."""

    def __init__(self, channel, result=None, error=None):
        self.channel = channel
        self.result = result or DeliveryResult(success=True, message_id=f"{channel.value}-1")
        self.error = error
        self.sent = []

    def is_configured(self):
        return True

    def send(self, phone, text):
        self.sent.append((phone, text))
        if self.error:
            raise self.error
        return self.result

    def status(self):
        return {"configured": True, "message": f"fake {self.channel.value}"}


class FakeTextGenerator(TextGenerator):
    def __init__(self, text="A lovely experience.", error=None):
        self.text = text
        self.error = error
        self.prompts = []

    def is_configured(self):
        return True

    def generate(self, prompt):
        self.prompts.append(prompt)
        if self.error:
            raise self.error
        return self.text


class FakeClock:
    def __init__(self, now=None):
        self.now = now or datetime(2026, 1, 15, 12, 0, tzinfo=timezone.utc)

    def __call__(self):
        return self.now

    def advance(self, **kwargs):
        self.now += timedelta(**kwargs)


def sequence_generator(*codes):
    """Code generator returning `codes` in order (the last one repeats)."""
    remaining = list(codes)
    calls = []

    def generate(length):
        calls.append(length)
        return remaining.pop(0) if len(remaining) > 1 else remaining[0]

    generate.calls = calls
    return generate


@pytest.fixture
def settings(tmp_path):
    return Settings(
        twilio=TwilioSettings(
            account_sid="AC" + "0" * 32,
            auth_token="a" * 32,
            sms_number="+15557654321",
            whatsapp_number="+14155238886",
        ),
        whatsapp=WhatsAppSettings(provider="twilio", access_token="", phone_number_id="", business_number=BUSINESS_NUMBER),
        llm=LLMSettings(api_key="test-key"),
        short_links=ShortLinkSettings(base_url=APP_URL, expires_in_hours=168, retention_days=30),
        database_file=tmp_path / "reviews.db",
    )


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def link_store():
    return InMemoryLinkStore()


@pytest.fixture
def short_links(link_store, clock):
    return ShortLinkService(link_store, base_url=APP_URL, clock=clock)


@pytest.fixture
def sms_sender():
    return FakeSender(Channel.SMS)


@pytest.fixture
def whatsapp_sender():
    return FakeSender(Channel.WHATSAPP)


@pytest.fixture
def text_generator():
    return FakeTextGenerator()


@pytest.fixture
def database(settings):
    db = Database(settings.database_file)
    db.init()
    return db


@pytest.fixture
def services(settings, database, short_links, sms_sender, whatsapp_sender, text_generator):
    return Services(
        settings=settings,
        database=database,
        short_links=short_links,
        redirects=RedirectResolver(short_links, business_number=BUSINESS_NUMBER),
        sms_sender=sms_sender,
        whatsapp_sender=whatsapp_sender,
        dispatcher=NotificationDispatcher(
            short_links, sms_sender, whatsapp_sender,
            app_url=APP_URL, business_number=BUSINESS_NUMBER,
        ),
        review_generator=ReviewGenerator(text_generator),
    )


@pytest.fixture
def client(services):
    with TestClient(create_app(services)) as test_client:
        yield test_client
