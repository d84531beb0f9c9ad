"""
Notification Dispatch - Review Link Delivery
============================================

Sends the review link to a customer over the requested channels:

    SMS       short body with a short link (falls back to a non-stored
              /api/wa-redirect URL when the short link cannot be created),
              then smart encoding + truncation
    WhatsApp  full review text plus a deep link; no length budget

Channels are sent concurrently and each failure is contained: an exception
from one sender becomes a failed DeliveryResult for that channel only.

STATUS:
    SENT    at least one requested channel succeeded
    FAILED  every requested channel failed
    PENDING nothing was attempted
"""

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from typing import Callable, Dict, Optional

from ..domain.deep_links import build_whatsapp_link, encode_uri_component
from ..domain.models import Channel, DeliveryResult, ReviewStatus
from ..domain.ports import MessageSender
from ..domain.sms_encoding import RECOMMENDED_MAX_LENGTH, SmsEncoding, prepare_sms_body, sms_length
from .short_links import DEFAULT_EXPIRES_IN_HOURS, ShortLinkService

logger = logging.getLogger(__name__)

# ── Message Templates ──────────────────────────────────────────────
# SMS stays GSM-7 and well under 160 chars for typical names
SMS_TEMPLATE = "Hi {name}, thanks for choosing {shop}. Please share your review: {link} Thank you!"
# Used when the body is too long: truncation only preserves a trailing link
SMS_TEMPLATE_LINK_LAST = "Hi {name}, thanks for choosing {shop}. Please share your review: {link}"
WHATSAPP_TEMPLATE = (
    "Hi {name}! \U0001F44B\n\n"
    "Thank you for choosing {shop} for {product}.\n\n"
    "{review}\n\n"
    "Tap here to complete your review:\n{link}\n\n"
    "Thank you for your feedback! \U0001F64F"
)

DEFAULT_SHOP_NAME = "our business"
DEFAULT_PRODUCT_NAME = "your purchase"


@dataclass(frozen=True)
class ReviewMessage:
    """Everything the senders need about one review."""
    phone_number: str
    customer_name: str
    review_text: str
    shop_name: Optional[str] = None
    product_name: Optional[str] = None


@dataclass
class DispatchOutcome:
    status: ReviewStatus
    results: Dict[Channel, DeliveryResult] = field(default_factory=dict)

    def results_dict(self) -> Dict[str, dict]:
        return {channel.value: result.to_dict() for channel, result in self.results.items()}


def aggregate_status(results: Dict[Channel, DeliveryResult]) -> ReviewStatus:
    """Overall status from the per-channel results of the requested channels."""
    if not results:
        return ReviewStatus.PENDING
    if any(result.success for result in results.values()):
        return ReviewStatus.SENT
    return ReviewStatus.FAILED


class NotificationDispatcher:
    """
    USAGE:
        dispatcher = NotificationDispatcher(short_links, sms_sender, whatsapp_sender,
                                            app_url="https://reviews.example.com")
        outcome = dispatcher.dispatch(message, send_sms=True, send_whatsapp=False)
        outcome.status  # ReviewStatus.SENT / FAILED
    """

    def __init__(
        self,
        short_links: ShortLinkService,
        sms_sender: MessageSender,
        whatsapp_sender: MessageSender,
        app_url: str,
        business_number: Optional[str] = None,
        sms_max_length: int = RECOMMENDED_MAX_LENGTH,
        smart_encoding: bool = True,
        link_expires_in_hours: int = DEFAULT_EXPIRES_IN_HOURS,
    ):
        self._short_links = short_links
        self._sms_sender = sms_sender
        self._whatsapp_sender = whatsapp_sender
        self._app_url = app_url.rstrip("/")
        self._business_number = business_number
        self._sms_max_length = sms_max_length
        self._smart_encoding = smart_encoding
        self._link_expires_in_hours = link_expires_in_hours

    # ── Message composition ────────────────────────────────────────

    def review_link(self, message: ReviewMessage) -> str:
        """Short link for the review, or a direct redirect URL if storing fails."""
        try:
            short_code = self._short_links.create(
                message.review_text,
                message.customer_name,
                message.shop_name,
                message.product_name,
                expires_in_hours=self._link_expires_in_hours,
            )
            return self._short_links.short_url(short_code)
        except Exception as e:
            logger.error(f"Failed to create short link, using direct redirect URL: {e}")
            return f"{self._app_url}/api/wa-redirect?text={encode_uri_component(message.review_text)}"

    def compose_sms(self, message: ReviewMessage) -> str:
        fields = {
            "name": message.customer_name,
            "shop": message.shop_name or DEFAULT_SHOP_NAME,
            "link": self.review_link(message),
        }
        body = SMS_TEMPLATE.format(**fields)
        if sms_length(body) > self._sms_max_length:
            body = SMS_TEMPLATE_LINK_LAST.format(**fields)
        body, info = prepare_sms_body(body, self._smart_encoding, self._sms_max_length)

        logger.info(f"SMS body: {sms_length(body)} units, encoding {info.encoding.value}, {info.segments} segment(s)")
        if info.encoding is SmsEncoding.UCS2:
            logger.warning(
                f"SMS contains non-GSM-7 characters; limited to 70 chars per message "
                f"({info.segments} segment(s))"
            )
        return body

    def compose_whatsapp(self, message: ReviewMessage) -> str:
        return WHATSAPP_TEMPLATE.format(
            name=message.customer_name,
            shop=message.shop_name or DEFAULT_SHOP_NAME,
            product=message.product_name or DEFAULT_PRODUCT_NAME,
            review=message.review_text,
            link=build_whatsapp_link(message.review_text, self._business_number),
        )

    # ── Delivery ───────────────────────────────────────────────────

    def send_sms(self, message: ReviewMessage) -> DeliveryResult:
        body = self.compose_sms(message)
        return self._sms_sender.send(message.phone_number, body)

    def send_whatsapp(self, message: ReviewMessage) -> DeliveryResult:
        body = self.compose_whatsapp(message)
        return self._whatsapp_sender.send(message.phone_number, body)

    def dispatch(self, message: ReviewMessage, send_sms: bool, send_whatsapp: bool) -> DispatchOutcome:
        """
        Send over every requested channel and aggregate the outcome.

        Raises:
            ValueError: if no channel is requested.
        """
        if not send_sms and not send_whatsapp:
            raise ValueError("Select at least one notification method (SMS or WhatsApp)")

        jobs: Dict[Channel, Callable[[ReviewMessage], DeliveryResult]] = {}
        if send_sms:
            jobs[Channel.SMS] = self.send_sms
        if send_whatsapp:
            jobs[Channel.WHATSAPP] = self.send_whatsapp

        with ThreadPoolExecutor(max_workers=len(jobs)) as executor:
            futures = {channel: executor.submit(job, message) for channel, job in jobs.items()}
            results = {channel: self._collect(channel, future) for channel, future in futures.items()}

        status = aggregate_status(results)
        logger.info(
            f"Dispatch for {message.customer_name}: {status.value} "
            + ", ".join(f"{channel.value}={result.success}" for channel, result in results.items())
        )
        return DispatchOutcome(status=status, results=results)

    def _collect(self, channel: Channel, future) -> DeliveryResult:
        try:
            return future.result()
        except Exception as e:
            logger.exception(f"{channel.value} sending error: {e}")
            return DeliveryResult.failure(f"Failed to send {'SMS' if channel is Channel.SMS else 'WhatsApp'}")
