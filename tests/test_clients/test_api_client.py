"""Tests for ToneApiClient (HTTP client for the tone picker server)."""

from __future__ import annotations

import json

import httpx
import pytest

from tone_picker.clients.api_client import ToneApiClient
from tone_picker.errors import (
    AuthError,
    ProviderTimeoutError,
    RateLimitError,
    ToneValidationError,
    UnclassifiedError,
    UpstreamInvalidResponseError,
    ValidationKind,
)


def _client(handler) -> ToneApiClient:
    return ToneApiClient(base_url="http://test/api", transport=httpx.MockTransport(handler))


class TestAdjust:
    async def test_posts_camel_case_body(self):
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["path"] = request.url.path
            seen["body"] = json.loads(request.content)
            return httpx.Response(200, json={"adjustedText": "Good day."})

        async with _client(handler) as client:
            result = await client.adjust("Hello there", 1, 0)

        assert result == "Good day."
        assert seen["path"] == "/api/adjust-tone"
        assert seen["body"] == {"text": "Hello there", "formalityLevel": 1, "friendlinessLevel": 0}

    async def test_trims_adjusted_text(self):
        async with _client(lambda r: httpx.Response(200, json={"adjustedText": "  Hi!\n"})) as client:
            assert await client.adjust("Hello there", -1, 1) == "Hi!"

    async def test_missing_adjusted_text(self):
        async with _client(lambda r: httpx.Response(200, json={})) as client:
            with pytest.raises(UpstreamInvalidResponseError):
                await client.adjust("Hello there", 0, 1)

    @pytest.mark.parametrize(
        "status, error_cls",
        [
            (401, AuthError),
            (429, RateLimitError),
            (502, UpstreamInvalidResponseError),
            (504, ProviderTimeoutError),
            (500, UnclassifiedError),
        ],
    )
    async def test_error_status_mapping(self, status, error_cls):
        handler = lambda r: httpx.Response(status, json={"error": "server says no"})  # noqa: E731
        async with _client(handler) as client:
            with pytest.raises(error_cls) as excinfo:
                await client.adjust("Hello there", 1, 1)

        assert excinfo.value.message == "server says no"

    async def test_validation_error_keeps_kind(self):
        body = {"error": "Text must be at least 3 characters long", "kind": "TooShort"}
        async with _client(lambda r: httpx.Response(400, json=body)) as client:
            with pytest.raises(ToneValidationError) as excinfo:
                await client.adjust("Hi", 1, 0)

        assert excinfo.value.kind == ValidationKind.TOO_SHORT

    async def test_non_json_error_body(self):
        async with _client(lambda r: httpx.Response(503, text="<html>down</html>")) as client:
            with pytest.raises(UnclassifiedError):
                await client.adjust("Hello there", 1, 0)

    async def test_timeout(self):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ReadTimeout("timed out", request=request)

        async with _client(handler) as client:
            with pytest.raises(ProviderTimeoutError):
                await client.adjust("Hello there", 1, 0)

    @pytest.mark.parametrize(
        "exc_cls", [httpx.ReadError, httpx.RemoteProtocolError]
    )
    async def test_connection_reset_is_timeout(self, exc_cls):
        def handler(request: httpx.Request) -> httpx.Response:
            raise exc_cls("Connection reset by peer", request=request)

        async with _client(handler) as client:
            with pytest.raises(ProviderTimeoutError):
                await client.adjust("Hello there", 1, 0)

    async def test_network_error(self):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("refused", request=request)

        async with _client(handler) as client:
            with pytest.raises(UnclassifiedError) as excinfo:
                await client.adjust("Hello there", 1, 0)

        assert excinfo.value.message == "Network error - please check your connection"


class TestHealthAndCache:
    async def test_health(self):
        body = {"status": "OK", "timestamp": "2026-01-01T00:00:00.000Z"}
        async with _client(lambda r: httpx.Response(200, json=body)) as client:
            assert await client.check_health() == body

    async def test_health_failure(self):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("refused", request=request)

        async with _client(handler) as client:
            with pytest.raises(UnclassifiedError) as excinfo:
                await client.check_health()

        assert excinfo.value.message == "Backend server is not responding"

    async def test_clear_cache(self):
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["method"] = request.method
            seen["path"] = request.url.path
            return httpx.Response(200, json={"message": "Cache cleared successfully"})

        async with _client(handler) as client:
            assert await client.clear_cache() == "Cache cleared successfully"

        assert seen == {"method": "POST", "path": "/api/cache/clear"}
