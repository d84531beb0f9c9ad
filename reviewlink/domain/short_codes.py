"""
Short Codes - Random Identifiers for Short Links
================================================

Codes are 6 characters from [a-z0-9] by default: 36^6 (~2.1 billion)
combinations, so the link in an SMS stays as short as `host/r/a3f9k2`.

Uniqueness is NOT guaranteed here; the short-link service checks the store
and retries on collision.
"""

import secrets
import string

SHORT_CODE_LENGTH = 6
SHORT_CODE_ALPHABET = string.ascii_lowercase + string.digits


def generate_short_code(length: int = SHORT_CODE_LENGTH, alphabet: str = SHORT_CODE_ALPHABET) -> str:
    """Return `length` characters drawn uniformly at random from `alphabet`."""
    if length < 1:
        raise ValueError("Short code length must be positive")
    return "".join(secrets.choice(alphabet) for _ in range(length))
