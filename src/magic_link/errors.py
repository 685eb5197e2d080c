"""Exceptions raised by the magic link strategy."""


class MagicLinkError(Exception):
    """Base class for all magic link errors."""


class MalformedRequest(MagicLinkError):
    """Exactly one of ``token``/``key`` was present in the request URL."""

    def __init__(self, missing: str):
        self.missing = missing
        super().__init__(f"Attempted to validate, but missing {missing} in URL.")


class EncodingError(MagicLinkError):
    """The issuance request body could not be decoded as form data."""


class AuthenticationFailure(MagicLinkError):
    """
    The token could not be verified.

    Raised for every verification problem (bad signature, wrong key, expired,
    issued in the future, malformed token) with the same message.
    """

    def __init__(self):
        super().__init__("Invalid or expired magic link")
