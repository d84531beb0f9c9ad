# Application Layer
# =================
# Use cases that orchestrate domain logic and ports:
# - short_links: create / resolve / clean up short links
# - redirects: map a short code to a WhatsApp deep link
# - notifications: compose and dispatch SMS / WhatsApp messages
