"""
WhatsApp Deep Links
===================

Builds `https://wa.me/...` links that open WhatsApp with a pre-filled message.

    https://wa.me/+919876543210?text=Great%20service   (opens that chat)
    https://wa.me/?text=Great%20service                (user picks the chat)
"""

import re
from typing import Optional
from urllib.parse import quote

WHATSAPP_DEEP_LINK_BASE = "https://wa.me"

# Characters encodeURIComponent leaves untouched (besides letters and digits)
_URI_COMPONENT_SAFE = "-_.!~*'()"

_NON_PHONE_CHARS = re.compile(r"[^\d+]")


def encode_uri_component(text: str) -> str:
    """Percent-encode `text` the way browsers encode a URI component."""
    return quote(text, safe=_URI_COMPONENT_SAFE)


def clean_phone_number(number: Optional[str]) -> str:
    """Strip everything except digits and '+' from a phone number."""
    if not number:
        return ""
    return _NON_PHONE_CHARS.sub("", number)


def build_whatsapp_link(
    text: str,
    phone_number: Optional[str] = None,
    base_url: str = WHATSAPP_DEEP_LINK_BASE,
) -> str:
    """
    Deep link that pre-fills `text`.

    When `phone_number` is given (and still non-empty after cleaning) the
    link targets that chat; otherwise WhatsApp lets the user choose.
    """
    encoded_text = encode_uri_component(text)
    clean_number = clean_phone_number(phone_number)

    if clean_number:
        return f"{base_url}/{clean_number}?text={encoded_text}"
    return f"{base_url}/?text={encoded_text}"
