"""FastAPI dependency for magic link authentication."""

import inspect
from typing import Any, Awaitable, Callable, Optional, Union

try:
    from fastapi import HTTPException, Request
except ImportError:
    raise ImportError(
        "FastAPI is not installed. Install it with: pip install 'magic-link-strategy[fastapi]'"
    )

from .errors import AuthenticationFailure, EncodingError, MalformedRequest
from .forms import query_param
from .links import attach_key
from .strategy import MagicLinkStrategy, VerifyFunction
from .types import StrategyOptions

KeyLoader = Callable[[Request], Union[Awaitable[Optional[str]], Optional[str]]]


class _KeyedRequest:
    """Request view whose URL carries the server-side key."""

    def __init__(self, request: Request, url: str):
        self._request = request
        self.url = url
        self.headers = request.headers

    async def form(self):
        return await self._request.form()


class MagicLinkAuth:
    """
    FastAPI dependency running a ``MagicLinkStrategy`` on the current request.

    ``load_key`` recovers the key stored during issuance (e.g. from a cookie
    session). It is called only for requests carrying ``token`` without
    ``key``, and its result is appended to the URL before verification so
    the key never has to appear in the link itself.

    Usage:
        from magic_link.fastapi import MagicLinkAuth

        magic = MagicLinkAuth(
            MagicLinkStrategy(verify=verify),
            load_key=lambda request: request.session.pop("magic_key", None),
        )

        @app.post('/login')
        async def login(sent = Depends(magic)):
            return {"sent": True}

        @app.get('/magic')
        async def redeem(user = Depends(magic)):
            return {"user": user.id}
    """

    def __init__(
        self,
        strategy: MagicLinkStrategy,
        load_key: Optional[KeyLoader] = None,
        auto_error: bool = True,
    ):
        """
        Args:
            strategy: Strategy to run
            load_key: Returns the stored key for a redeemed link, or None
            auto_error: If True, raise HTTPException on strategy errors.
                        If False, return None instead.
        """
        self.strategy = strategy
        self.load_key = load_key
        self.auto_error = auto_error

    async def __call__(self, request: Request) -> Optional[Any]:
        """
        Run the strategy on the request.

        Errors raised by the verify callback are not translated.

        Raises:
            HTTPException: 400 for a malformed request or body,
                           401 for a token that does not verify
        """
        try:
            target = await self._with_stored_key(request)
            return await self.strategy.authenticate(target)
        except (MalformedRequest, EncodingError) as e:
            if self.auto_error:
                raise HTTPException(status_code=400, detail=str(e))
            return None
        except AuthenticationFailure as e:
            if self.auto_error:
                raise HTTPException(status_code=401, detail=str(e))
            return None

    async def _with_stored_key(self, request: Request):
        if self.load_key is None:
            return request
        if not query_param(request.url, "token") or query_param(request.url, "key"):
            return request

        key = self.load_key(request)
        if inspect.isawaitable(key):
            key = await key
        if not key:
            # Left to the strategy, which reports the missing key
            return request
        return _KeyedRequest(request, attach_key(str(request.url), key))


# Convenience function for route-level authentication
def magic_link_dependency(
    verify: VerifyFunction,
    load_key: Optional[KeyLoader] = None,
    expires_in: int = 300,
    auto_error: bool = True,
) -> MagicLinkAuth:
    """
    Create a FastAPI dependency from a verify callback.

    Args:
        verify: Verify callback (see ``MagicLinkStrategy``)
        load_key: Returns the stored key for a redeemed link
        expires_in: Seconds until issued tokens expire (default: 300)
        auto_error: Raise HTTPException on strategy errors

    Returns:
        MagicLinkAuth instance for use with Depends()

    Example:
        magic = magic_link_dependency(verify, load_key=load_key_from_session)

        @app.get('/magic')
        async def redeem(user = Depends(magic)):
            return {"email": user.email}
    """
    strategy = MagicLinkStrategy(StrategyOptions(expires_in=expires_in), verify)
    return MagicLinkAuth(strategy, load_key=load_key, auto_error=auto_error)
