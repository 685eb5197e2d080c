"""MagicLinkStrategy - stateless passwordless authentication via magic links."""

import inspect
import logging
import time
from typing import Any, Awaitable, Callable, Optional, Union

from .errors import MalformedRequest
from .forms import RequestLike, query_param, read_form
from .keys import decode_key, encode_key, generate_key
from .tokens import sign_token, verify_token
from .types import GenerationOutcome, StrategyOptions, ValidationOutcome, VerifyOutcome

logger = logging.getLogger(__name__)

VerifyFunction = Callable[[VerifyOutcome], Union[Awaitable[Any], Any]]


class MagicLinkStrategy:
    """
    Issues and verifies magic link tokens.

    A request without ``token`` and ``key`` query parameters issues a new
    token over the submitted form. A request carrying both verifies the token.
    In both cases the result is handed to the ``verify`` callback, whose return
    value is returned from ``authenticate``.

    The caller owns all state: in the generation branch it stores ``key``
    server-side and sends a link carrying ``token``; in the validation branch
    it re-attaches the stored ``key`` before calling ``authenticate`` again,
    and discards the key afterwards if links should be single-use.

    Example:
        >>> async def verify(outcome):
        ...     if isinstance(outcome, GenerationOutcome):
        ...         session["magic_key"] = outcome.key
        ...         await send_email(outcome.form["email"], outcome.token)
        ...         return None
        ...     session.pop("magic_key", None)
        ...     return await users.get_or_create(outcome.form["email"])
        >>>
        >>> strategy = MagicLinkStrategy(StrategyOptions(expires_in=600), verify)
        >>> user = await strategy.authenticate(request)
    """

    name = "magic-link"

    def __init__(
        self,
        options: Optional[StrategyOptions] = None,
        verify: Optional[VerifyFunction] = None,
        clock: Callable[[], float] = time.time,
    ):
        """
        Initialize the strategy.

        Args:
            options: Token lifetime and clock tolerance (defaults: 300s / 10s)
            verify: Callback receiving a ``GenerationOutcome`` or
                    ``ValidationOutcome``. May be sync or async.
            clock: Source of the current UNIX time
        """
        if verify is None:
            raise ValueError("A 'verify' callback must be provided")
        self.options = options or StrategyOptions()
        self.verify = verify
        self.clock = clock

    async def authenticate(self, request: RequestLike) -> Any:
        """
        Issue or verify a magic link token, depending on the request URL.

        Returns:
            Whatever the ``verify`` callback returns

        Raises:
            MalformedRequest: If only one of ``token``/``key`` is present
            EncodingError: If an issuance body is not form data
            AuthenticationFailure: If the token does not verify
        """
        token = query_param(request.url, "token")
        key = query_param(request.url, "key")

        if token and not key:
            raise MalformedRequest("key")
        if key and not token:
            raise MalformedRequest("token")

        if token and key:
            outcome: VerifyOutcome = self._validate(token, key)
        else:
            outcome = await self._generate(request)

        return await self._call_verify(outcome)

    async def _generate(self, request: RequestLike) -> GenerationOutcome:
        form = await read_form(request)
        key = generate_key()
        token = sign_token(form, key, self.options.expires_in, now=self.clock())
        logger.debug("Issued magic link token for fields %s", sorted(form))
        return GenerationOutcome(form=form, token=token, key=encode_key(key))

    def _validate(self, token: str, key: str) -> ValidationOutcome:
        form = verify_token(
            token,
            decode_key(key),
            max_age=self.options.expires_in,
            now=self.clock(),
            clock_tolerance=self.options.clock_tolerance,
        )
        logger.debug("Verified magic link token")
        return ValidationOutcome(form=form, token=token)

    async def _call_verify(self, outcome: VerifyOutcome) -> Any:
        result = self.verify(outcome)
        if inspect.isawaitable(result):
            result = await result
        return result
