# Review Link - Review Delivery over SMS and WhatsApp
# ===================================================
# Collects review submissions, stores them, and delivers a link to the
# customer by SMS (short link) and/or WhatsApp.
#
# ARCHITECTURE LAYERS:
# - Web:            FastAPI routes and request schemas
# - Application:    Use cases and orchestration (short links, redirects, dispatch)
# - Domain:         Pure logic and ports (SMS encoding, short codes, deep links)
# - Infrastructure: External services (SQLite, Twilio, WhatsApp Cloud API, Gemini)
#
# Infrastructure components can be swapped behind the domain ports
# (LinkStore, MessageSender, TextGenerator) without touching the core.

__version__ = "1.0.0"
