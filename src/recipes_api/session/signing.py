"""HMAC-SHA256 cookie signing.

A signed cookie value is ``base64(HMAC(key, value)) + value``. The digest is
always 44 characters of standard base64, which is how the two parts are
told apart when verifying.
"""

from __future__ import annotations

import base64
import binascii
import hashlib
import hmac


BASE64_DIGEST_LEN = 44


class CookieSigner:
    def __init__(self, key: bytes) -> None:
        if not key:
            msg = "Cookie signing key must not be empty"
            raise ValueError(msg)
        self._key = key

    def _digest(self, value: str) -> bytes:
        return hmac.new(self._key, value.encode(), hashlib.sha256).digest()

    def sign(self, value: str) -> str:
        return base64.b64encode(self._digest(value)).decode() + value

    def verify(self, signed_value: str) -> str | None:
        """Return the original value, or None if the signature does not match."""
        if len(signed_value) < BASE64_DIGEST_LEN:
            return None

        digest_str, value = (
            signed_value[:BASE64_DIGEST_LEN],
            signed_value[BASE64_DIGEST_LEN:],
        )
        try:
            digest = base64.b64decode(digest_str, validate=True)
        except (binascii.Error, ValueError):
            return None

        if not hmac.compare_digest(digest, self._digest(value)):
            return None
        return value
