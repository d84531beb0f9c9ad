"""
Twilio Client - Programmable Messaging REST API
===============================================

Thin wrapper over `POST /Accounts/{sid}/Messages.json`, shared by the SMS
and WhatsApp senders. Uses plain `requests` with HTTP basic auth.
"""

import logging
from typing import Any, Dict, Optional

import requests

from ..config import TwilioSettings

logger = logging.getLogger(__name__)

# Twilio error code for bad account SID / auth token pairs
AUTHENTICATION_ERROR_CODE = 20003


class TwilioError(Exception):
    """Raised when Twilio rejects a request."""

    def __init__(self, message: str, code: Optional[int] = None, status: Optional[int] = None):
        super().__init__(message)
        self.code = code
        self.status = status

    def details(self) -> Optional[Dict[str, Any]]:
        if self.code is None and self.status is None:
            return None
        return {"code": self.code, "status": self.status}


class TwilioClient:
    """
    Minimal Twilio messaging client.

    USAGE:
        client = TwilioClient(settings.twilio)
        message = client.create_message(to="+15551234567", from_="+15557654321", body="Hi!")
        print(message["sid"], message["num_segments"])
    """

    def __init__(self, settings: TwilioSettings):
        self._account_sid = settings.account_sid
        self._auth_token = settings.auth_token
        self._api_url = settings.api_url.rstrip("/")
        self._timeout = settings.timeout_seconds

    @property
    def messages_url(self) -> str:
        return f"{self._api_url}/Accounts/{self._account_sid}/Messages.json"

    def create_message(
        self,
        to: str,
        from_: str,
        body: str,
        smart_encoded: bool = False,
    ) -> Dict[str, Any]:
        """
        Send one message.

        Returns:
            Twilio message resource (dict with at least `sid`).

        Raises:
            TwilioError: on an API error response.
            requests.RequestException: on network failure / timeout.
        """
        data = {"To": to, "From": from_, "Body": body}
        if smart_encoded:
            data["SmartEncoded"] = "true"

        response = requests.post(
            self.messages_url,
            data=data,
            auth=(self._account_sid, self._auth_token),
            timeout=self._timeout
        )

        if not response.ok:
            raise self._error_from_response(response)

        return response.json()

    def _error_from_response(self, response: requests.Response) -> TwilioError:
        """Build a TwilioError from an API error body."""
        try:
            payload = response.json()
        except ValueError:
            payload = {}

        message = payload.get("message") or f"Twilio API error (HTTP {response.status_code})"
        code = payload.get("code")
        status = payload.get("status", response.status_code)

        if code == AUTHENTICATION_ERROR_CODE:
            logger.error(
                "Twilio authentication failed. Check that TWILIO_ACCOUNT_SID "
                "(starts with 'AC', 34 chars) and TWILIO_AUTH_TOKEN (32 chars) match."
            )

        return TwilioError(message, code=code, status=status)
