"""Magic link authentication - stateless, passwordless sign-in links."""

__version__ = "0.1.0"

from magic_link.errors import (
    AuthenticationFailure,
    EncodingError,
    MagicLinkError,
    MalformedRequest,
)
from magic_link.forms import FormRequest
from magic_link.links import attach_key, build_magic_link
from magic_link.strategy import MagicLinkStrategy
from magic_link.types import (
    GenerationOutcome,
    StrategyOptions,
    ValidationOutcome,
    VerifyOutcome,
)

__all__ = [
    "MagicLinkStrategy",
    "StrategyOptions",
    "GenerationOutcome",
    "ValidationOutcome",
    "VerifyOutcome",
    "FormRequest",
    "build_magic_link",
    "attach_key",
    "MagicLinkError",
    "MalformedRequest",
    "EncodingError",
    "AuthenticationFailure",
    "__version__",
]
