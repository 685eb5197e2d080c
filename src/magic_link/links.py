"""Helpers for building the URLs around a magic link.

The link sent to the user carries only ``token``. The signing key stays on the
server and is appended again right before the redeemed request is handed back
to the strategy.
"""

import httpx


def build_magic_link(callback_url: str, token: str) -> str:
    """
    Build the link sent to the user.

    Args:
        callback_url: URL that will call ``MagicLinkStrategy.authenticate``
        token: Token from ``GenerationOutcome.token``

    Returns:
        ``callback_url`` with ``token`` set as a query parameter

    Example:
        >>> build_magic_link("https://example.com/magic?next=%2Fhome", "eyJ...")
        'https://example.com/magic?next=%2Fhome&token=eyJ...'
    """
    url = httpx.URL(callback_url)
    if "key" in url.params:
        raise ValueError("The magic link must not carry a 'key' parameter")
    return str(url.copy_set_param("token", token))


def attach_key(url: str, key: str) -> str:
    """
    Append the stored signing key to a redeemed magic link.

    Args:
        url: URL of the incoming request (carrying ``token``)
        key: Key recovered from server-side storage

    Returns:
        URL to pass to the strategy for verification
    """
    parsed = httpx.URL(url)
    if "key" in parsed.params:
        raise ValueError("URL already carries a 'key' parameter")
    return str(parsed.copy_add_param("key", key))
