"""Request adapters and form decoding."""

from dataclasses import dataclass, field
from typing import Any, Mapping, Optional, Protocol

import httpx

from .errors import EncodingError
from .types import FormPayload

FORM_CONTENT_TYPES = ("application/x-www-form-urlencoded", "multipart/form-data")


class RequestLike(Protocol):
    """
    What ``MagicLinkStrategy.authenticate`` needs from a request.

    Starlette/FastAPI ``Request`` objects satisfy this protocol as-is.
    """

    url: Any  # str() must give the absolute request URL

    async def form(self) -> Mapping[str, Any]: ...


@dataclass
class FormRequest:
    """
    Framework-free request for calling the strategy directly.

    Example:
        >>> request = FormRequest(
        ...     url="https://example.com/login",
        ...     body=b"email=user%40example.com",
        ... )
    """

    url: str
    body: bytes = b""
    content_type: str = "application/x-www-form-urlencoded"
    headers: dict = field(init=False, repr=False)

    def __post_init__(self):
        self.headers = {"content-type": self.content_type}

    async def form(self) -> httpx.QueryParams:
        """Decode a URL-encoded body."""
        if _media_type(self.content_type) != "application/x-www-form-urlencoded":
            raise EncodingError(f"Unsupported content type: {self.content_type!r}")
        try:
            text = self.body.decode("utf-8")
        except UnicodeDecodeError:
            raise EncodingError("Request body is not valid UTF-8") from None
        return httpx.QueryParams(text)


async def read_form(request: RequestLike) -> FormPayload:
    """
    Read the request body as a plain ``{field: value}`` mapping.

    Repeated fields keep their last value.

    Raises:
        EncodingError: If the body is not form data or holds non-text values
            (e.g. file uploads)
    """
    headers = getattr(request, "headers", None)
    if headers is not None:
        content_type = headers.get("content-type")
        if not content_type or _media_type(content_type) not in FORM_CONTENT_TYPES:
            raise EncodingError(f"Unsupported content type: {content_type!r}")

    try:
        form = await request.form()
    except EncodingError:
        raise
    except Exception as e:
        raise EncodingError(f"Request body is not form data: {e}") from e

    if hasattr(form, "multi_items"):
        items = form.multi_items()
    else:
        items = form.items()

    decoded: FormPayload = {}
    for name, value in items:
        if not isinstance(value, str):
            raise EncodingError(f"Form field {name!r} is not a text value")
        decoded[name] = value
    return decoded


def query_param(url: Any, name: str) -> Optional[str]:
    """Return a query parameter from the URL, treating empty values as absent."""
    value = httpx.URL(str(url)).params.get(name)
    return value or None


def _media_type(content_type: str) -> str:
    return content_type.split(";", 1)[0].strip().lower()
