from .messaging_provider import (
    CloudAPIWhatsAppSender,
    TwilioSmsSender,
    TwilioWhatsAppSender,
    build_whatsapp_sender,
)
from .twilio_client import TwilioClient, TwilioError

__all__ = [
    "CloudAPIWhatsAppSender",
    "TwilioClient",
    "TwilioError",
    "TwilioSmsSender",
    "TwilioWhatsAppSender",
    "build_whatsapp_sender",
]
