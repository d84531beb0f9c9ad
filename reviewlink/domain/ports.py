"""
Ports - Interfaces to External Collaborators
============================================

The core only talks to the outside world through these three interfaces:

    LinkStore      - persists short links (SQLite in production)
    MessageSender  - delivers a text message to a phone number (Twilio, Cloud API)
    TextGenerator  - turns a prompt into free text (Gemini)

Tests swap them for in-memory fakes.
"""

from abc import ABC, abstractmethod
from datetime import datetime
from typing import Optional

from .models import Channel, DeliveryResult, ShortLink


class DuplicateShortCodeError(Exception):
    """Raised by a LinkStore when the short code is already taken."""
    pass


class LinkStore(ABC):
    """Persistence for short links."""

    @abstractmethod
    def get(self, short_code: str) -> Optional[ShortLink]:
        """Return the link for `short_code`, or None."""
        ...

    @abstractmethod
    def insert(self, link: ShortLink) -> None:
        """Store a new link. Raises DuplicateShortCodeError if the code exists."""
        ...

    @abstractmethod
    def increment_clicks(self, short_code: str) -> None:
        """Add one to the click counter without a read-modify-write."""
        ...

    @abstractmethod
    def delete_expired(self, now: datetime, created_before: datetime) -> int:
        """Delete links expired at `now` or created before `created_before`."""
        ...


class MessageSender(ABC):
    """
    Outbound messaging backend for one channel.
    Implementations never raise for delivery problems; they return a failed
    DeliveryResult instead.
    """

    channel: Channel

    @abstractmethod
    def is_configured(self) -> bool:
        """True if credentials needed to send are present."""
        ...

    @abstractmethod
    def send(self, phone: str, text: str) -> DeliveryResult:
        """Send `text` to `phone`."""
        ...

    @abstractmethod
    def status(self) -> dict:
        """Configuration status for the status endpoint."""
        ...


class TextGenerator(ABC):
    """Generative text backend."""

    @abstractmethod
    def is_configured(self) -> bool:
        ...

    @abstractmethod
    def generate(self, prompt: str) -> str:
        """Return generated text. Raises on failure."""
        ...
