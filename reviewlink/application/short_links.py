"""
Short-Link Service
==================

Stores the full review text under a short random code so an SMS only needs
to carry `APP_URL/r/<code>`.

    service = ShortLinkService(store, base_url="https://reviews.example.com")
    code = service.create("Great service...", "Asha", shop_name="SKS Jewellery")
    service.short_url(code)     # https://reviews.example.com/r/a3f9k2
    service.resolve(code)       # ResolvedLink(...), clicks + 1

Codes are checked against the store before insert; the store's unique key
on short_code covers the race between check and insert, and both count as a
collision that triggers a retry.
"""

import logging
from datetime import datetime, timedelta
from typing import Callable, Optional

from ..domain.models import ResolvedLink, ShortLink, utc_now
from ..domain.ports import DuplicateShortCodeError, LinkStore
from ..domain.short_codes import SHORT_CODE_LENGTH, generate_short_code

logger = logging.getLogger(__name__)

DEFAULT_EXPIRES_IN_HOURS = 168
DEFAULT_MAX_ATTEMPTS = 5
DEFAULT_RETENTION_DAYS = 30


class ShortLinkError(Exception):
    """Base exception for short-link errors."""
    pass


class GenerationExhaustedError(ShortLinkError):
    """Every candidate code collided with an existing one."""
    pass


class ShortLinkService:
    """Create, resolve and clean up short links."""

    def __init__(
        self,
        store: LinkStore,
        base_url: str = "http://localhost:8000",
        code_generator: Callable[[int], str] = generate_short_code,
        clock: Callable[[], datetime] = utc_now,
        code_length: int = SHORT_CODE_LENGTH,
        max_attempts: int = DEFAULT_MAX_ATTEMPTS,
    ):
        self._store = store
        self._base_url = base_url.rstrip("/")
        self._generate_code = code_generator
        self._now = clock
        self._code_length = code_length
        self._max_attempts = max_attempts

    def create(
        self,
        review_text: str,
        customer_name: str,
        shop_name: Optional[str] = None,
        product_name: Optional[str] = None,
        expires_in_hours: int = DEFAULT_EXPIRES_IN_HOURS,
    ) -> str:
        """
        Store `review_text` under a fresh code and return the code.

        Raises:
            ValueError: if review_text is empty.
            GenerationExhaustedError: if every attempt collided.
        """
        if not review_text:
            raise ValueError("review_text must not be empty")

        for attempt in range(1, self._max_attempts + 1):
            short_code = self._generate_code(self._code_length)

            if self._store.get(short_code) is not None:
                logger.warning(f"Short code collision on attempt {attempt}: {short_code}")
                continue

            created_at = self._now()
            link = ShortLink(
                short_code=short_code,
                review_text=review_text,
                customer_name=customer_name,
                shop_name=shop_name or None,
                product_name=product_name or None,
                created_at=created_at,
                expires_at=created_at + timedelta(hours=expires_in_hours),
                clicks=0,
            )

            try:
                self._store.insert(link)
            except DuplicateShortCodeError:
                logger.warning(f"Short code taken during insert on attempt {attempt}: {short_code}")
                continue

            logger.info(f"Created short link {short_code} for {customer_name}")
            return short_code

        raise GenerationExhaustedError(
            f"Failed to generate unique short code after {self._max_attempts} attempts"
        )

    def resolve(self, short_code: str) -> Optional[ResolvedLink]:
        """
        Look up a code and count the click.

        Missing and expired codes both return None. Store failures are
        logged and also return None.
        """
        try:
            link = self._store.get(short_code)

            if link is None:
                logger.info(f"Short code not found: {short_code}")
                return None

            if link.is_expired(self._now()):
                logger.info(f"Short code expired: {short_code}")
                return None

            self._store.increment_clicks(short_code)

        except Exception as e:
            logger.exception(f"Error fetching short link {short_code}: {e}")
            return None

        return ResolvedLink(
            review_text=link.review_text,
            customer_name=link.customer_name,
            shop_name=link.shop_name,
            product_name=link.product_name,
        )

    def short_url(self, short_code: str) -> str:
        return f"{self._base_url}/r/{short_code}"

    def cleanup_expired(self, older_than_days: int = DEFAULT_RETENTION_DAYS) -> int:
        """Delete expired links and links older than `older_than_days`."""
        now = self._now()
        try:
            return self._store.delete_expired(now, now - timedelta(days=older_than_days))
        except Exception as e:
            logger.exception(f"Error cleaning up short links: {e}")
            return 0
