"""HS256 magic link token signing and verification.

Tokens are compact JWTs whose payload is exactly the submitted form fields plus
``iat`` and ``exp``. Each token is signed with its own random key, so a token
on its own proves nothing.
"""

import logging
import time
from typing import Mapping, Optional

import jwt

from .errors import AuthenticationFailure, EncodingError
from .types import DEFAULT_CLOCK_TOLERANCE, FormPayload

logger = logging.getLogger(__name__)

ALGORITHM = "HS256"
TIMING_CLAIMS = ("iat", "exp")


def sign_token(
    form: Mapping[str, str],
    key: bytes,
    expires_in: int,
    now: Optional[float] = None,
) -> str:
    """
    Sign a token over the form fields.

    Args:
        form: Decoded form fields (string keys and values)
        key: Raw signing key
        expires_in: Seconds until the token expires
        now: Current UNIX time (defaults to ``time.time()``)

    Returns:
        Compact JWT string

    Raises:
        EncodingError: If a form field name collides with a timing claim
    """
    reserved = [name for name in TIMING_CLAIMS if name in form]
    if reserved:
        raise EncodingError(
            f"Form field(s) {', '.join(reserved)} collide with token claims"
        )

    issued_at = int(time.time() if now is None else now)
    payload = dict(form)
    payload["iat"] = issued_at
    payload["exp"] = issued_at + expires_in

    return jwt.encode(
        payload, key, algorithm=ALGORITHM, headers={"typ": "JWT"}
    )


def verify_token(
    token: str,
    key: bytes,
    max_age: int,
    now: Optional[float] = None,
    clock_tolerance: int = DEFAULT_CLOCK_TOLERANCE,
) -> FormPayload:
    """
    Verify a token and return the form fields it was issued for.

    Checks:
    - Token structure and HS256 signature
    - ``iat`` and ``exp`` present and integral
    - Not expired (``exp`` plus ``clock_tolerance``)
    - Not issued in the future (``iat`` minus ``clock_tolerance``)
    - Token age no greater than ``max_age`` plus ``clock_tolerance``

    Every failure raises the same ``AuthenticationFailure``; the specific
    reason is only logged at DEBUG level.
    """
    try:
        payload = jwt.decode(
            token,
            key,
            algorithms=[ALGORITHM],
            # Timing claims are checked below against the injected clock
            options={
                "require": list(TIMING_CLAIMS),
                "verify_exp": False,
                "verify_iat": False,
                "verify_nbf": False,
                "verify_aud": False,
            },
        )
    except jwt.PyJWTError as e:
        logger.debug("Magic link token rejected: %s", type(e).__name__)
        raise AuthenticationFailure() from None

    reason = _check_claims(payload, max_age, now, clock_tolerance)
    if reason:
        logger.debug("Magic link token rejected: %s", reason)
        raise AuthenticationFailure()

    return {
        name: value for name, value in payload.items() if name not in TIMING_CLAIMS
    }


def _check_claims(
    payload: dict,
    max_age: int,
    now: Optional[float],
    clock_tolerance: int,
) -> Optional[str]:
    """Return why the payload is unacceptable, or None if it is valid."""
    iat = payload.get("iat")
    exp = payload.get("exp")
    for claim in (iat, exp):
        if isinstance(claim, bool) or not isinstance(claim, int):
            return "non-integer timing claim"

    current = time.time() if now is None else now
    if current > exp + clock_tolerance:
        return "expired"
    if current < iat - clock_tolerance:
        return "issued in the future"
    if current - iat - clock_tolerance > max_age:
        return "too old"

    for name, value in payload.items():
        if name not in TIMING_CLAIMS and not isinstance(value, str):
            return "non-string form field"

    return None
