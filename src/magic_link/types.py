"""Type definitions for magic link authentication."""

from dataclasses import dataclass, field
from typing import Dict, Union

DEFAULT_EXPIRES_IN = 300  # 5 minutes
DEFAULT_CLOCK_TOLERANCE = 10

FormPayload = Dict[str, str]


@dataclass(frozen=True)
class StrategyOptions:
    """Options for ``MagicLinkStrategy``."""

    expires_in: int = DEFAULT_EXPIRES_IN  # seconds until a token expires
    clock_tolerance: int = DEFAULT_CLOCK_TOLERANCE  # allowed clock skew (seconds)

    def __post_init__(self):
        if self.expires_in <= 0:
            raise ValueError("'expires_in' must be a positive number of seconds")
        if self.clock_tolerance < 0:
            raise ValueError("'clock_tolerance' must not be negative")


@dataclass(frozen=True)
class GenerationOutcome:
    """
    Passed to the verify callback when a new token was issued.

    The callback must store ``key`` server-side and send a link carrying
    ``token`` to the user. ``key`` must never reach the client.
    """

    form: FormPayload
    token: str
    key: str = field(repr=False)


@dataclass(frozen=True)
class ValidationOutcome:
    """Passed to the verify callback when a returning token was verified."""

    form: FormPayload
    token: str


VerifyOutcome = Union[GenerationOutcome, ValidationOutcome]
