"""Per-link signing keys."""

import base64
import binascii
import secrets

from .errors import AuthenticationFailure

KEY_BYTES = 32


def generate_key() -> bytes:
    """Return a fresh random HS256 signing key."""
    return secrets.token_bytes(KEY_BYTES)


def encode_key(raw: bytes) -> str:
    """
    Encode a raw key as unpadded URL-safe base64.

    Example:
        >>> encode_key(bytes(32))
        'AAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAA'
    """
    return base64.urlsafe_b64encode(raw).rstrip(b"=").decode("ascii")


def decode_key(encoded: str) -> bytes:
    """
    Decode a key produced by ``encode_key``.

    Raises:
        AuthenticationFailure: If the value is not URL-safe base64 or does not
            decode to a key of the expected length.
    """
    # Add padding for proper base64 decoding
    padding = 4 - (len(encoded) % 4)
    if padding != 4:
        encoded += "=" * padding

    try:
        raw = base64.b64decode(encoded, altchars=b"-_", validate=True)
    except (binascii.Error, ValueError):
        raise AuthenticationFailure() from None

    if len(raw) != KEY_BYTES:
        raise AuthenticationFailure()
    return raw
