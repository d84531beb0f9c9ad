# Domain Layer
# ============
# Pure logic with no I/O:
# - short_codes: random short-code generation
# - sms_encoding: GSM-7 / UCS-2 detection, segment counting, smart encoding
# - deep_links: WhatsApp deep-link construction
# - models: records and value objects shared across layers
# - ports: interfaces implemented by the infrastructure layer
