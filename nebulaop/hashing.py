"""Short content hashes."""

import hashlib


def hash_text(text: str) -> str:
    """Return the first 16 hex digits of the SHA-512 digest of ``text``."""
    return hashlib.sha512(text.encode("utf-8")).hexdigest()[:16]