# Infrastructure Layer
# ====================
# Contains all external service integrations:
# - messaging/: Twilio SMS / WhatsApp and WhatsApp Cloud API senders
# - llm/: Google Gemini review generation
# - persistence/: SQLite review records and short-link store
# - config/: Environment and settings management
#
# This layer can be replaced entirely without affecting domain/application layers.
