"""HTTP client for a running tone picker server.

Implements the same ``adjust`` contract as ``ToneAdjuster`` so an
orchestrator can run against a remote server instead of calling the LLM
directly. Error responses are mapped back onto the tone error taxonomy.
"""

from __future__ import annotations

import logging

import httpx

from tone_picker.errors import ProviderTimeoutError, ToneError, UnclassifiedError, error_for_status
from tone_picker.pipeline.tone_adjuster import clean_output

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "http://localhost:5000/api"
DEFAULT_TIMEOUT = 30.0


class ToneApiClient:
    """Async client for ``/api/adjust-tone``, ``/api/health`` and ``/api/cache/clear``."""

    def __init__(
        self,
        base_url: str = DEFAULT_BASE_URL,
        timeout: float = DEFAULT_TIMEOUT,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.client = httpx.AsyncClient(base_url=base_url, timeout=timeout, transport=transport)

    async def __aenter__(self) -> ToneApiClient:
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self.client.aclose()

    async def _request(self, method: str, path: str, **kwargs) -> dict:
        logger.debug("Making %s request to %s", method, path)
        try:
            response = await self.client.request(method, path, **kwargs)
        except (httpx.TimeoutException, httpx.ReadError, httpx.RemoteProtocolError) as exc:
            # a dropped connection counts as a timeout
            raise ProviderTimeoutError(detail=str(exc)) from exc
        except httpx.RequestError as exc:
            raise UnclassifiedError(
                "Network error - please check your connection", detail=str(exc)
            ) from exc

        try:
            data = response.json()
        except ValueError:
            data = {}
        if not isinstance(data, dict):
            data = {}

        if response.is_error:
            logger.error("API error %d: %s", response.status_code, data or response.text)
            raise error_for_status(response.status_code, data.get("error"), data.get("kind"))
        return data

    async def adjust(self, text: str, formality_level: float, friendliness_level: float) -> str:
        data = await self._request(
            "POST",
            "/adjust-tone",
            json={
                "text": text,
                "formalityLevel": formality_level,
                "friendlinessLevel": friendliness_level,
            },
        )
        return clean_output(data.get("adjustedText"))

    async def check_health(self) -> dict:
        try:
            return await self._request("GET", "/health")
        except ToneError as exc:
            raise UnclassifiedError("Backend server is not responding", detail=exc.detail) from exc

    async def clear_cache(self) -> str:
        data = await self._request("POST", "/cache/clear")
        return data.get("message", "")
