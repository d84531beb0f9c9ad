"""
SMS Encoding - GSM-7 / UCS-2 Detection and Segment Counting
===========================================================

SMS carriers bill per segment, and the segment size depends on the
character repertoire of the whole message:

    GSM-7 (7-bit default alphabet):  160 chars single, 153 per segment
    UCS-2 (16-bit):                   70 chars single,  67 per segment

A single character outside the GSM-7 alphabet (emoji, curly quote,
em dash, most non-Latin scripts) switches the WHOLE message to UCS-2.

PIPELINE (see prepare_sms_body):
    1. apply_smart_encoding  - swap common non-GSM characters for GSM ones
    2. truncate_message      - bound the length, keep the trailing link
    3. calculate_segments    - report encoding and segment count

Smart encoding runs first so substitutions get the chance to bring the
message back into GSM-7 before anything is cut.
"""

import math
import re
from dataclasses import dataclass
from enum import Enum
from typing import Tuple


class SmsEncoding(Enum):
    """Character encoding an SMS will be sent with."""
    GSM7 = "GSM-7"
    UCS2 = "UCS-2"


@dataclass(frozen=True)
class EncodingLimits:
    """Per-encoding character budgets."""
    single: int
    segment: int
    max: int


GSM7_LIMITS = EncodingLimits(single=160, segment=153, max=1600)
UCS2_LIMITS = EncodingLimits(single=70, segment=67, max=700)

# Recommended upper bound for deliverability (Twilio guidance)
RECOMMENDED_MAX_LENGTH = 320

# GSM 03.38 basic character set (the extension table is not included)
GSM7_CHARACTERS = frozenset(
    "@£$¥èéùìòÇ\nØø\rÅåΔ_ΦΓΛΩΠΨΣΘΞ\x1bÆæßÉ !\"#¤%&'()*+,-./0123456789:;<=>?"
    "¡ABCDEFGHIJKLMNOPQRSTUVWXYZÄÖÑÜ§¿abcdefghijklmnopqrstuvwxyzäöñüà"
)

_SMART_REPLACEMENTS = str.maketrans({
    "\u201C": '"',  # left double quote
    "\u201D": '"',  # right double quote
    "\u2018": "'",  # left single quote
    "\u2019": "'",  # right single quote / apostrophe
    "\u2013": "-",  # en dash
    "\u2014": "-",  # em dash
    "\u2026": "...",  # ellipsis
    "\u2022": "-",  # bullet
    "\u2023": "-",  # triangular bullet
    "\u00A0": " ",  # non-breaking space
})

_EMOJI_PATTERN = re.compile(
    "["
    "\U0001F600-\U0001F64F"  # emoticons
    "\U0001F300-\U0001F5FF"  # symbols & pictographs
    "\U0001F680-\U0001F6FF"  # transport & map
    "\U0001F1E0-\U0001F1FF"  # flags
    "\u2600-\u26FF"          # misc symbols
    "\u2700-\u27BF"          # dingbats
    "\uFE0F"                 # emoji variation selector
    "\u200D"                 # zero-width joiner
    "]"
)

_TRAILING_URL_PATTERN = re.compile(r"(https?://\S+)$")

ELLIPSIS_BEFORE_URL = "...\n"
ELLIPSIS = "..."


@dataclass(frozen=True)
class SegmentInfo:
    """Segment count and encoding for a message body."""
    segments: int
    encoding: SmsEncoding

    def to_dict(self) -> dict:
        return {"segments": self.segments, "encoding": self.encoding.value}


def is_gsm7_character(char: str) -> bool:
    """True if `char` is a single character of the GSM-7 basic alphabet."""
    return len(char) == 1 and char in GSM7_CHARACTERS


def requires_ucs2(text: str) -> bool:
    """True if any character in `text` forces UCS-2 encoding."""
    return any(not is_gsm7_character(char) for char in text)


def sms_length(text: str) -> int:
    """
    Length in UTF-16 code units, the unit SMS budgets are counted in.
    Characters outside the BMP (most emoji) count as two.
    """
    return len(text.encode("utf-16-le")) // 2


def _cut(text: str, max_units: int) -> str:
    """Longest prefix of `text` that fits in `max_units` UTF-16 units."""
    used = 0
    for index, char in enumerate(text):
        used += 2 if ord(char) > 0xFFFF else 1
        if used > max_units:
            return text[:index]
    return text


def calculate_segments(text: str) -> SegmentInfo:
    """Number of SMS segments `text` will be billed as."""
    length = sms_length(text)

    if requires_ucs2(text):
        encoding, limits = SmsEncoding.UCS2, UCS2_LIMITS
    else:
        encoding, limits = SmsEncoding.GSM7, GSM7_LIMITS

    if length <= limits.single:
        segments = 1
    else:
        segments = math.ceil(length / limits.segment)

    return SegmentInfo(segments=segments, encoding=encoding)


def apply_smart_encoding(text: str) -> str:
    """
    Replace common non-GSM characters with GSM-7 equivalents.

    Curly quotes become straight quotes, dashes become hyphens, the
    ellipsis character becomes three dots, bullets become hyphens,
    non-breaking spaces become spaces and common emoji are dropped.

    Idempotent: apply_smart_encoding(apply_smart_encoding(t)) == apply_smart_encoding(t)
    """
    text = text.translate(_SMART_REPLACEMENTS)
    text = _EMOJI_PATTERN.sub("", text)
    return text.strip()


def truncate_message(text: str, max_length: int = RECOMMENDED_MAX_LENGTH) -> str:
    """
    Cut `text` down to `max_length` UTF-16 units.

    A trailing http(s) URL is kept verbatim: the text before it is cut and
    "...\\n" is placed between the two. Without a trailing URL the text is
    hard-cut and "..." appended.
    """
    if sms_length(text) <= max_length:
        return text

    url_match = _TRAILING_URL_PATTERN.search(text)
    if url_match:
        url = url_match.group(1)
        remaining = max_length - sms_length(url) - 5
        if remaining <= 0:
            # The link is the payload; never drop it
            return url
        truncated = _cut(text, remaining).strip()
        return truncated + ELLIPSIS_BEFORE_URL + url

    return _cut(text, max_length - 3).strip() + ELLIPSIS


def prepare_sms_body(
    text: str,
    smart_encode: bool = True,
    max_length: int = RECOMMENDED_MAX_LENGTH,
) -> Tuple[str, SegmentInfo]:
    """Run the full pipeline and return (body, segment info)."""
    body = apply_smart_encoding(text) if smart_encode else text
    body = truncate_message(body, max_length)
    return body, calculate_segments(body)


def limits_summary() -> dict:
    """Character budgets, as reported by the status endpoint."""
    return {
        "gsm7": {"single": GSM7_LIMITS.single, "segment": GSM7_LIMITS.segment, "max": GSM7_LIMITS.max},
        "ucs2": {"single": UCS2_LIMITS.single, "segment": UCS2_LIMITS.segment, "max": UCS2_LIMITS.max},
        "recommended": RECOMMENDED_MAX_LENGTH,
    }
