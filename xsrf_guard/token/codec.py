"""Canonical payload, signature and transport encoding for tokens."""

from __future__ import annotations

import base64
import binascii
import hmac
from hashlib import sha256
from typing import Optional, Tuple

DELIMITER = ":"


def build_payload(issued_at: int | str, context_url: Optional[str], user_data: Optional[str]) -> str:
    """Join the bound fields; absent fields keep their slot as empty strings."""
    return DELIMITER.join([str(issued_at), context_url or "", user_data or ""])


def sign(secret_key: bytes, payload: str) -> str:
    """Return the lowercase hex HMAC-SHA256 of ``payload``."""
    return hmac.new(secret_key, payload.encode("utf-8"), sha256).hexdigest()


def encode_token(signature: str, issued_at: int) -> str:
    raw = f"{signature}{DELIMITER}{issued_at}".encode("ascii")
    return base64.b64encode(raw).decode("ascii")


def decode_token(value: str | bytes) -> Optional[bytes]:
    """Strictly base64-decode a supplied token, or return None."""
    try:
        return base64.b64decode(value, validate=True)
    except (binascii.Error, ValueError):
        return None


def split_token(decoded: bytes) -> Optional[Tuple[bytes, str]]:
    """Split decoded token bytes into ``(signature, timestamp)``.

    Only the first delimiter separates the parts. The timestamp must be plain
    ASCII decimal digits.
    """
    signature, sep, timestamp = decoded.partition(DELIMITER.encode("ascii"))
    if not sep or not timestamp.isdigit():
        return None
    return signature, timestamp.decode("ascii")
