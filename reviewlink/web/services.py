"""
Service Wiring
==============

Builds every collaborator once from a Settings object. The web app keeps the
result on `app.state.services`; tests build their own Services with fakes.
"""

import logging
from dataclasses import dataclass

from ..application.notifications import NotificationDispatcher
from ..application.redirects import RedirectResolver
from ..application.short_links import ShortLinkService
from ..domain.ports import MessageSender
from ..infrastructure.config import Settings
from ..infrastructure.llm import GeminiTextGenerator, ReviewGenerator
from ..infrastructure.messaging import TwilioClient, TwilioSmsSender, build_whatsapp_sender
from ..infrastructure.persistence import Database, SQLiteLinkStore

logger = logging.getLogger(__name__)


@dataclass
class Services:
    settings: Settings
    database: Database
    short_links: ShortLinkService
    redirects: RedirectResolver
    sms_sender: MessageSender
    whatsapp_sender: MessageSender
    dispatcher: NotificationDispatcher
    review_generator: ReviewGenerator


def build_services(settings: Settings) -> Services:
    """Create the database, senders and use-case services."""
    database = Database(settings.database_file)
    database.init()

    short_links = ShortLinkService(
        SQLiteLinkStore(database),
        base_url=settings.short_links.base_url,
        code_length=settings.short_links.code_length,
        max_attempts=settings.short_links.max_attempts,
    )

    twilio_client = TwilioClient(settings.twilio)
    sms_sender = TwilioSmsSender(settings.twilio, client=twilio_client)
    whatsapp_sender = build_whatsapp_sender(settings, client=twilio_client)

    dispatcher = NotificationDispatcher(
        short_links,
        sms_sender,
        whatsapp_sender,
        app_url=settings.short_links.base_url,
        business_number=settings.whatsapp.business_number,
        sms_max_length=settings.sms.max_length,
        smart_encoding=settings.sms.smart_encoding,
        link_expires_in_hours=settings.short_links.expires_in_hours,
    )

    logger.info(f"Services ready (WhatsApp provider: {settings.whatsapp.provider})")

    return Services(
        settings=settings,
        database=database,
        short_links=short_links,
        redirects=RedirectResolver(
            short_links,
            business_number=settings.whatsapp.business_number,
            min_code_length=settings.short_links.min_code_length,
        ),
        sms_sender=sms_sender,
        whatsapp_sender=whatsapp_sender,
        dispatcher=dispatcher,
        review_generator=ReviewGenerator(GeminiTextGenerator(settings.llm)),
    )
