"""
Messaging Providers - SMS and WhatsApp Delivery
===============================================

Implementations of the MessageSender port:

    TwilioSmsSender         - SMS through Twilio (Smart Encoding enabled)
    TwilioWhatsAppSender    - WhatsApp through Twilio (sandbox or approved number)
    CloudAPIWhatsAppSender  - WhatsApp Business Cloud API (Meta Graph API)

USAGE:
    sender = TwilioSmsSender(settings.twilio)
    result = sender.send("+15551234567", "Hello!")
    if not result.success:
        print(result.error)

    # WhatsApp backend chosen by WHATSAPP_PROVIDER
    whatsapp = build_whatsapp_sender(settings)

Senders never raise for delivery problems: missing credentials, API errors
and timeouts all come back as DeliveryResult(success=False, ...).
"""

import logging
import re
from typing import Optional

import requests

from ...domain.models import Channel, DeliveryResult
from ...domain.ports import MessageSender
from ..config import Settings, TwilioSettings, WhatsAppSettings
from .twilio_client import TwilioClient, TwilioError

logger = logging.getLogger(__name__)

WHATSAPP_PREFIX = "whatsapp:"


def _strip_whatsapp_prefix(phone: str) -> str:
    return phone[len(WHATSAPP_PREFIX):] if phone.startswith(WHATSAPP_PREFIX) else phone


def _with_whatsapp_prefix(phone: str) -> str:
    return phone if phone.startswith(WHATSAPP_PREFIX) else f"{WHATSAPP_PREFIX}{phone}"


class TwilioSmsSender(MessageSender):
    """
    Plain SMS via Twilio.
    The body is expected to be prepared already (smart encoding, truncation);
    Twilio Smart Encoding is requested as a second line of defence.
    """

    channel = Channel.SMS

    def __init__(self, settings: TwilioSettings, client: Optional[TwilioClient] = None):
        self._settings = settings
        self._client = client or TwilioClient(settings)

    def is_configured(self) -> bool:
        return bool(self._settings.account_sid and self._settings.auth_token and self._settings.sms_number)

    def _configuration_error(self) -> Optional[DeliveryResult]:
        """Return a failed result if credentials are missing or malformed."""
        if not self._settings.account_sid or not self._settings.auth_token:
            logger.error("Twilio SMS: missing TWILIO_ACCOUNT_SID / TWILIO_AUTH_TOKEN")
            return DeliveryResult.failure(
                "Missing Twilio credentials",
                message="Twilio is not configured. Please add credentials to .env file."
            )

        if not self._settings.account_sid.startswith("AC"):
            logger.error("Twilio SMS: Account SID must start with 'AC'")
            return DeliveryResult.failure(
                "Invalid Account SID format",
                message="Account SID must start with 'AC'"
            )

        if not self._settings.sms_number:
            logger.error("Twilio SMS: missing TWILIO_SMS_NUMBER")
            return DeliveryResult.failure(
                "Missing Twilio SMS number",
                message="TWILIO_SMS_NUMBER is not configured. Please add it to .env file."
            )

        return None

    def send(self, phone: str, text: str) -> DeliveryResult:
        error = self._configuration_error()
        if error:
            return error

        to_number = _strip_whatsapp_prefix(phone)
        logger.info(f"Sending SMS to {to_number} ({len(text)} chars)")

        try:
            message = self._client.create_message(
                to=to_number,
                from_=self._settings.sms_number,
                body=text,
                smart_encoded=True
            )
        except TwilioError as e:
            logger.error(f"Twilio SMS error: {e} (code={e.code}, status={e.status})")
            return DeliveryResult.failure(str(e), details=e.details())
        except requests.Timeout:
            logger.warning("Twilio SMS request timed out")
            return DeliveryResult.failure("SMS request timed out")
        except requests.RequestException as e:
            logger.warning(f"Twilio SMS network error: {e}")
            return DeliveryResult.failure("Failed to send SMS message")

        segments = int(message.get("num_segments") or 1)
        logger.info(f"SMS sent: {message.get('sid')} ({segments} segment(s))")
        return DeliveryResult(success=True, message_id=message.get("sid"), segments=segments)

    def status(self) -> dict:
        if not self._settings.account_sid or not self._settings.auth_token:
            return {
                "configured": False,
                "message": "Twilio credentials not configured",
                "instructions": [
                    "1. Sign up at https://www.twilio.com/try-twilio",
                    "2. Get Account SID and Auth Token from Console",
                    "3. Add them to your .env file",
                ],
            }

        if not self._settings.sms_number:
            return {
                "configured": False,
                "message": "Twilio SMS number not configured",
                "instructions": [
                    "1. Go to Twilio Console > Phone Numbers > Manage > Buy a number",
                    "2. Purchase a phone number with SMS capability",
                    "3. Add TWILIO_SMS_NUMBER=+1234567890 to .env",
                ],
            }

        return {"configured": True, "message": "Twilio SMS is configured"}


class TwilioWhatsAppSender(MessageSender):
    """WhatsApp messages via Twilio (numbers get the `whatsapp:` prefix)."""

    channel = Channel.WHATSAPP

    def __init__(self, settings: TwilioSettings, client: Optional[TwilioClient] = None):
        self._settings = settings
        self._client = client or TwilioClient(settings)

    def is_configured(self) -> bool:
        return bool(
            self._settings.account_sid and self._settings.auth_token and self._settings.whatsapp_number
        )

    def send(self, phone: str, text: str) -> DeliveryResult:
        if not self.is_configured():
            logger.warning(
                "Twilio WhatsApp credentials missing. Required: "
                "TWILIO_ACCOUNT_SID, TWILIO_AUTH_TOKEN, TWILIO_WHATSAPP_NUMBER"
            )
            return DeliveryResult.failure(
                "Missing Twilio credentials",
                message="Twilio is not configured. Please add credentials to .env file."
            )

        try:
            message = self._client.create_message(
                to=_with_whatsapp_prefix(phone),
                from_=_with_whatsapp_prefix(self._settings.whatsapp_number),
                body=text
            )
        except TwilioError as e:
            logger.error(f"Twilio WhatsApp error: {e} (code={e.code}, status={e.status})")
            return DeliveryResult.failure(str(e), details=e.details())
        except requests.Timeout:
            logger.warning("Twilio WhatsApp request timed out")
            return DeliveryResult.failure("WhatsApp request timed out")
        except requests.RequestException as e:
            logger.warning(f"Twilio WhatsApp network error: {e}")
            return DeliveryResult.failure("Failed to send WhatsApp message")

        logger.info(f"Twilio WhatsApp message sent: {message.get('sid')}")
        return DeliveryResult(success=True, message_id=message.get("sid"))

    def status(self) -> dict:
        if not self._settings.account_sid or not self._settings.auth_token:
            return {
                "configured": False,
                "message": "Twilio credentials not configured",
                "instructions": [
                    "1. Sign up at https://www.twilio.com/try-twilio",
                    "2. Get Account SID and Auth Token from Console",
                    "3. Add them to your .env file",
                ],
            }

        if not self._settings.whatsapp_number:
            return {
                "configured": False,
                "message": "Twilio WhatsApp number not configured",
                "instructions": [
                    "1. Go to Twilio Console > Messaging > Try it out > Send a WhatsApp message",
                    "2. Join the sandbox by sending 'join <code>' to +14155238886",
                    "3. Add TWILIO_WHATSAPP_NUMBER=+14155238886 to .env",
                ],
            }

        return {"configured": True, "message": "Twilio WhatsApp is configured"}


class CloudAPIWhatsAppSender(MessageSender):
    """
    WhatsApp Business Cloud API provider.

    Configuration needed:
        - access_token: WhatsApp Business API token
        - phone_number_id: registered WhatsApp phone number ID
        - api_url: Graph API endpoint (default: Meta Cloud API v17.0)

    Sends a plain text message:
        POST {api_url}/{phone_number_id}/messages
        {"messaging_product": "whatsapp", "to": phone, "type": "text", "text": {"body": text}}
    """

    channel = Channel.WHATSAPP

    def __init__(self, settings: WhatsAppSettings):
        self._access_token = settings.access_token
        self._phone_number_id = settings.phone_number_id
        self._api_url = settings.api_url.rstrip("/")
        self._timeout = settings.timeout_seconds

    def is_configured(self) -> bool:
        return bool(self._access_token and self._phone_number_id)

    def send(self, phone: str, text: str) -> DeliveryResult:
        if not self.is_configured():
            logger.warning(
                "WhatsApp credentials missing. Please set WHATSAPP_ACCESS_TOKEN "
                "and WHATSAPP_PHONE_NUMBER_ID in your .env file"
            )
            return DeliveryResult.failure(
                "Missing credentials",
                message="WhatsApp is not configured. Please add your credentials to .env file."
            )

        # Cloud API expects the number in international format without '+'
        recipient = re.sub(r"\D", "", _strip_whatsapp_prefix(phone))

        try:
            response = requests.post(
                f"{self._api_url}/{self._phone_number_id}/messages",
                headers={
                    "Authorization": f"Bearer {self._access_token}",
                    "Content-Type": "application/json",
                },
                json={
                    "messaging_product": "whatsapp",
                    "to": recipient,
                    "type": "text",
                    "text": {"body": text},
                },
                timeout=self._timeout
            )
        except requests.Timeout:
            logger.warning("WhatsApp Cloud API timeout")
            return DeliveryResult.failure("WhatsApp request timed out")
        except requests.RequestException as e:
            logger.warning(f"WhatsApp Cloud API network error: {e}")
            return DeliveryResult.failure(
                "Network error",
                message="Failed to send WhatsApp message. Please check your internet connection."
            )

        try:
            data = response.json()
        except ValueError:
            data = {}

        if not response.ok:
            logger.error(f"WhatsApp API Error: {data}")
            return DeliveryResult.failure("WhatsApp API connection failed", details=data or None)

        messages = data.get("messages") or [{}]
        return DeliveryResult(
            success=True,
            message_id=messages[0].get("id"),
            message="WhatsApp message sent successfully!"
        )

    def status(self) -> dict:
        if not self.is_configured():
            return {
                "configured": False,
                "message": "WhatsApp Cloud API not configured",
                "instructions": [
                    "1. Create an app at https://developers.facebook.com with WhatsApp enabled",
                    "2. Add WHATSAPP_ACCESS_TOKEN and WHATSAPP_PHONE_NUMBER_ID to .env",
                ],
            }
        return {"configured": True, "message": "WhatsApp Cloud API is configured"}


def build_whatsapp_sender(settings: Settings, client: Optional[TwilioClient] = None) -> MessageSender:
    """Pick the WhatsApp backend named by WHATSAPP_PROVIDER (Twilio by default)."""
    if settings.whatsapp.provider == "cloud_api":
        return CloudAPIWhatsAppSender(settings.whatsapp)
    return TwilioWhatsAppSender(settings.twilio, client=client)
