"""Tests for request adapters and form decoding."""

import pytest

from magic_link.errors import EncodingError
from magic_link.forms import FormRequest, query_param, read_form


class MappingRequest:
    """Request whose form() returns a plain dict and exposes no headers."""

    url = "https://example.com/login"

    def __init__(self, form):
        self._form = form

    async def form(self):
        return self._form


class BrokenRequest:
    url = "https://example.com/login"

    async def form(self):
        raise RuntimeError("stream consumed")


@pytest.mark.asyncio
async def test_read_form_urlencoded():
    """Test decoding a URL-encoded body."""
    request = FormRequest(
        url="https://example.com/login",
        body=b"email=user%40example.com&redirectTo=%2Fhome",
    )
    assert await read_form(request) == {
        "email": "user@example.com",
        "redirectTo": "/home",
    }


@pytest.mark.asyncio
async def test_read_form_content_type_parameters():
    """Test that charset parameters on the content type are ignored."""
    request = FormRequest(
        url="https://example.com/login",
        body=b"email=a%40b.com",
        content_type="application/x-www-form-urlencoded; charset=UTF-8",
    )
    assert await read_form(request) == {"email": "a@b.com"}


@pytest.mark.asyncio
async def test_read_form_last_value_wins():
    """Test that repeated fields keep their last value."""
    request = FormRequest(url="https://example.com/", body=b"email=a&email=b")
    assert await read_form(request) == {"email": "b"}


@pytest.mark.asyncio
async def test_read_form_empty_body():
    """Test that an empty body is an empty form."""
    request = FormRequest(url="https://example.com/")
    assert await read_form(request) == {}


@pytest.mark.asyncio
async def test_read_form_rejects_json():
    """Test that non-form content types are refused."""
    request = FormRequest(
        url="https://example.com/",
        body=b'{"email": "a@b.com"}',
        content_type="application/json",
    )
    with pytest.raises(EncodingError):
        await read_form(request)


@pytest.mark.asyncio
async def test_read_form_rejects_invalid_utf8():
    """Test that undecodable bytes are refused."""
    request = FormRequest(url="https://example.com/", body=b"email=\xff\xfe")
    with pytest.raises(EncodingError):
        await read_form(request)


@pytest.mark.asyncio
async def test_read_form_plain_mapping():
    """Test requests whose form() returns a plain mapping."""
    assert await read_form(MappingRequest({"phone": "+15550100"})) == {
        "phone": "+15550100"
    }


@pytest.mark.asyncio
async def test_read_form_rejects_non_text_values():
    """Test that file uploads and other non-text values are refused."""
    with pytest.raises(EncodingError):
        await read_form(MappingRequest({"avatar": object()}))


@pytest.mark.asyncio
async def test_read_form_wraps_decoding_errors():
    """Test that failures inside form() surface as EncodingError."""
    with pytest.raises(EncodingError) as exc_info:
        await read_form(BrokenRequest())
    assert isinstance(exc_info.value.__cause__, RuntimeError)


def test_query_param():
    """Test reading query parameters."""
    url = "https://example.com/magic?token=abc&key=def"
    assert query_param(url, "token") == "abc"
    assert query_param(url, "key") == "def"
    assert query_param(url, "missing") is None


def test_query_param_empty_is_absent():
    """Test that an empty parameter counts as absent."""
    assert query_param("https://example.com/magic?token=&key=", "token") is None
