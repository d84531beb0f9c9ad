"""
Settings Module - Centralized Configuration Management
=======================================================

ARCHITECTURAL DECISION:
- All configuration is loaded from environment variables (no hardcoded secrets)
- Settings are immutable dataclasses for safety and clarity
- Built once at startup and passed into each collaborator's constructor,
  so tests can hand in a Settings object of their own

EXTENSIBILITY:
- To add an SMS provider: add a provider-specific settings group
- To switch LLM provider: change LLMSettings api_url / model
"""

import os
from dataclasses import dataclass, field
from functools import lru_cache
from pathlib import Path

from dotenv import load_dotenv

# Load .env file if present (development convenience)
load_dotenv()


def _env_int(name: str, default: int) -> int:
    value = os.getenv(name, "").strip()
    if not value:
        return default
    try:
        return int(value)
    except ValueError:
        return default


@dataclass(frozen=True)
class TwilioSettings:
    """Twilio credentials shared by SMS and WhatsApp senders."""

    account_sid: str = field(default_factory=lambda: os.getenv("TWILIO_ACCOUNT_SID", ""))
    auth_token: str = field(default_factory=lambda: os.getenv("TWILIO_AUTH_TOKEN", ""))

    # Sender numbers, e.g. +1234567890 (sandbox WhatsApp: +14155238886)
    sms_number: str = field(default_factory=lambda: os.getenv("TWILIO_SMS_NUMBER", ""))
    whatsapp_number: str = field(default_factory=lambda: os.getenv("TWILIO_WHATSAPP_NUMBER", ""))

    api_url: str = "https://api.twilio.com/2010-04-01"
    timeout_seconds: int = 15


@dataclass(frozen=True)
class WhatsAppSettings:
    """WhatsApp delivery and deep-link settings."""

    # "twilio" or "cloud_api" (Meta WhatsApp Business Cloud API)
    provider: str = field(default_factory=lambda: os.getenv("WHATSAPP_PROVIDER", "twilio").strip().lower())

    # Cloud API credentials
    access_token: str = field(default_factory=lambda: os.getenv("WHATSAPP_ACCESS_TOKEN", ""))
    phone_number_id: str = field(default_factory=lambda: os.getenv("WHATSAPP_PHONE_NUMBER_ID", ""))
    api_url: str = "https://graph.facebook.com/v17.0"
    timeout_seconds: int = 15

    # Redirects open this chat when set, e.g. +919876543210
    business_number: str = field(default_factory=lambda: os.getenv("BUSINESS_WHATSAPP_NUMBER", ""))


@dataclass(frozen=True)
class LLMSettings:
    """Google Gemini settings for review generation."""

    api_key: str = field(default_factory=lambda: os.getenv("GOOGLE_API_KEY", ""))
    api_url: str = "https://generativelanguage.googleapis.com/v1beta"
    model: str = field(default_factory=lambda: os.getenv("GEMINI_MODEL", "gemini-2.5-flash"))
    timeout_seconds: int = 30


@dataclass(frozen=True)
class ShortLinkSettings:
    """Short-link generation, expiry and cleanup."""

    base_url: str = field(
        default_factory=lambda: os.getenv("APP_URL", "http://localhost:8000").rstrip("/")
    )
    code_length: int = 6
    max_attempts: int = 5
    min_code_length: int = 4

    # 168 hours = 7 days
    expires_in_hours: int = field(default_factory=lambda: _env_int("SHORT_LINK_TTL_HOURS", 168))
    retention_days: int = field(default_factory=lambda: _env_int("SHORT_LINK_RETENTION_DAYS", 30))


@dataclass(frozen=True)
class SmsSettings:
    """SMS body shaping."""

    max_length: int = 320
    smart_encoding: bool = True


@dataclass(frozen=True)
class Settings:
    """
    Root settings container - Single source of truth for all configuration.

    Usage:
        from reviewlink.infrastructure.config import get_settings
        settings = get_settings()
        print(settings.twilio.account_sid)
    """

    # Sub-settings groups
    twilio: TwilioSettings = field(default_factory=TwilioSettings)
    whatsapp: WhatsAppSettings = field(default_factory=WhatsAppSettings)
    llm: LLMSettings = field(default_factory=LLMSettings)
    short_links: ShortLinkSettings = field(default_factory=ShortLinkSettings)
    sms: SmsSettings = field(default_factory=SmsSettings)

    # File paths
    database_file: Path = field(
        default_factory=lambda: Path(os.getenv("DATABASE_FILE", "reviewlink.db"))
    )

    def validate(self) -> list[str]:
        """
        Validate settings and return list of warnings/errors.
        Returns empty list if all settings are valid.
        """
        issues = []

        if not self.twilio.account_sid or not self.twilio.auth_token:
            issues.append(
                "WARNING: TWILIO_ACCOUNT_SID / TWILIO_AUTH_TOKEN not set. "
                "SMS and Twilio WhatsApp delivery will fail."
            )
        elif not self.twilio.account_sid.startswith("AC"):
            issues.append("WARNING: TWILIO_ACCOUNT_SID should start with 'AC'.")

        if not self.twilio.sms_number:
            issues.append("WARNING: TWILIO_SMS_NUMBER not set. SMS delivery will fail.")

        if self.whatsapp.provider not in ("twilio", "cloud_api"):
            issues.append(
                f"WARNING: Unknown WHATSAPP_PROVIDER '{self.whatsapp.provider}'. "
                "Falling back to Twilio."
            )
        elif self.whatsapp.provider == "cloud_api" and not (
            self.whatsapp.access_token and self.whatsapp.phone_number_id
        ):
            issues.append(
                "WARNING: WHATSAPP_ACCESS_TOKEN / WHATSAPP_PHONE_NUMBER_ID not set "
                "for the Cloud API provider."
            )

        if not self.whatsapp.business_number:
            issues.append(
                "WARNING: BUSINESS_WHATSAPP_NUMBER not set. "
                "Redirects will open WhatsApp without a specific chat."
            )

        if not self.llm.api_key:
            issues.append("WARNING: GOOGLE_API_KEY not set. Review generation is disabled.")

        if "localhost" in self.short_links.base_url:
            issues.append(
                f"WARNING: APP_URL is {self.short_links.base_url}. "
                "Short links in SMS will not open on customer phones."
            )

        return issues


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """
    Get singleton Settings instance.
    Cached to ensure consistent settings throughout application lifecycle.
    """
    return Settings()
