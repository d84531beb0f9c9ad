from .settings import (
    LLMSettings,
    Settings,
    ShortLinkSettings,
    SmsSettings,
    TwilioSettings,
    WhatsAppSettings,
    get_settings,
)

__all__ = [
    "LLMSettings",
    "Settings",
    "ShortLinkSettings",
    "SmsSettings",
    "TwilioSettings",
    "WhatsAppSettings",
    "get_settings",
]
