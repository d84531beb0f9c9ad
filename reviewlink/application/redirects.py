"""
Redirect Resolver
=================

Turns `/r/<code>` into a WhatsApp deep link carrying the stored review text.

    INVALID    code shorter than the minimum length   -> 400
    NOT_FOUND  unknown or expired code                -> 404
    FOUND      deep link built                        -> 302 to `location`
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from ..domain.deep_links import build_whatsapp_link, clean_phone_number
from .short_links import ShortLinkService

logger = logging.getLogger(__name__)

MIN_CODE_LENGTH = 4


class RedirectState(Enum):
    INVALID = "invalid"
    NOT_FOUND = "not_found"
    FOUND = "found"


@dataclass(frozen=True)
class RedirectOutcome:
    state: RedirectState
    location: Optional[str] = None


class RedirectResolver:
    """
    USAGE:
        resolver = RedirectResolver(short_links, business_number="+919876543210")
        outcome = resolver.resolve("a3f9k2")
        if outcome.state is RedirectState.FOUND:
            redirect(outcome.location)
    """

    def __init__(
        self,
        short_links: ShortLinkService,
        business_number: Optional[str] = None,
        min_code_length: int = MIN_CODE_LENGTH,
    ):
        self._short_links = short_links
        self._business_number = clean_phone_number(business_number)
        self._min_code_length = min_code_length

        if not self._business_number:
            logger.warning("BUSINESS_WHATSAPP_NUMBER not configured, redirects use the generic link")

    def resolve(self, code: Optional[str]) -> RedirectOutcome:
        if not code or len(code) < self._min_code_length:
            logger.info(f"Invalid short code: {code!r}")
            return RedirectOutcome(RedirectState.INVALID)

        link = self._short_links.resolve(code)
        if link is None:
            return RedirectOutcome(RedirectState.NOT_FOUND)

        location = build_whatsapp_link(link.review_text, self._business_number)
        logger.info(
            f"Redirecting {code} for {link.customer_name} "
            f"({len(link.review_text)} chars of review text)"
        )
        return RedirectOutcome(RedirectState.FOUND, location)

    def direct_link(self, text: str) -> str:
        """Generic deep link for `text`; nothing is stored or looked up."""
        return build_whatsapp_link(text)
