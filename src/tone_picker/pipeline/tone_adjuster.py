"""Tone adjustment agent: turns a tone request into a rewrite prompt for the LLM."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import Protocol

import anthropic

from tone_picker.clients.llm_client import DEFAULT_MODEL, LLMClient
from tone_picker.errors import (
    AuthError,
    ProviderTimeoutError,
    RateLimitError,
    ToneError,
    UnclassifiedError,
    UpstreamInvalidResponseError,
)

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 30.0

PROMPT_TEMPLATE = """\
Please rewrite the following text to have a {formality} tone and a {friendliness} approach. \
Keep the core meaning and information intact, but adjust the style and tone accordingly. \
Only return the rewritten text, nothing else.

Original text: "{text}"

Rewritten text:"""

_AUTH_KEYWORDS = ("api key", "401", "authentication")
_RATE_LIMIT_KEYWORDS = ("rate limit", "429")
_TIMEOUT_KEYWORDS = ("timeout", "timed out", "econnreset", "connection reset")
_INVALID_KEYWORDS = ("invalid response", "empty response")


class ToneProvider(Protocol):
    """Anything that can rewrite text to a target tone."""

    async def adjust(self, text: str, formality_level: float, friendliness_level: float) -> str:
        ...


@dataclass
class Adjustment:
    """A rewritten text plus the usage of the call that produced it."""

    text: str
    model: str
    input_tokens: int = 0
    output_tokens: int = 0


def _describe(level: float, negative: str, positive: str) -> str:
    if level < 0:
        return negative
    if level == 0:
        return "neutral"
    return positive


def describe_formality(level: float) -> str:
    return _describe(level, "very casual and informal", "very formal and professional")


def describe_friendliness(level: float) -> str:
    return _describe(level, "cold and distant", "warm and friendly")


def build_prompt(text: str, formality_level: float, friendliness_level: float) -> str:
    return PROMPT_TEMPLATE.format(
        formality=describe_formality(formality_level),
        friendliness=describe_friendliness(friendliness_level),
        text=text,
    )


def clean_output(raw: object) -> str:
    """Trim provider output; reject anything that is not non-empty text."""
    if not isinstance(raw, str):
        raise UpstreamInvalidResponseError(detail="Invalid response from AI service")
    text = raw.strip()
    if not text:
        raise UpstreamInvalidResponseError(detail="AI service returned empty response")
    return text


def _matches(message: str, keywords: tuple[str, ...]) -> bool:
    return any(k in message for k in keywords)


def _classify_typed(exc: BaseException, status: int | None) -> type[ToneError] | None:
    if isinstance(exc, (anthropic.AuthenticationError, anthropic.PermissionDeniedError)) or status == 401:
        return AuthError
    if isinstance(exc, anthropic.RateLimitError) or status == 429:
        return RateLimitError
    if (
        isinstance(exc, (anthropic.APIConnectionError, asyncio.TimeoutError, ConnectionResetError))
        or status in (408, 504)
    ):
        return ProviderTimeoutError
    if status == 502:
        return UpstreamInvalidResponseError
    return None


def _classify_message(message: str) -> type[ToneError] | None:
    if _matches(message, _AUTH_KEYWORDS):
        return AuthError
    if _matches(message, _RATE_LIMIT_KEYWORDS):
        return RateLimitError
    if _matches(message, _TIMEOUT_KEYWORDS):
        return ProviderTimeoutError
    if _matches(message, _INVALID_KEYWORDS):
        return UpstreamInvalidResponseError
    return None


def classify_provider_error(exc: BaseException) -> ToneError:
    """Map a provider or network failure onto the tone error taxonomy.

    Precedence: authentication, rate limit, timeout/reset, invalid response,
    then unclassified. Typed SDK errors and status codes are checked first;
    message keywords are consulted only when neither identifies the failure.
    """
    if isinstance(exc, ToneError):
        return exc

    detail = str(exc) or type(exc).__name__
    error_cls = (
        _classify_typed(exc, getattr(exc, "status_code", None))
        or _classify_message(str(exc).lower())
        or UnclassifiedError
    )
    return error_cls(detail=detail)


class ToneAdjuster:
    """Rewrite text to a target formality/friendliness via the LLM."""

    def __init__(
        self,
        llm: LLMClient,
        model: str = DEFAULT_MODEL,
        *,
        timeout: float = DEFAULT_TIMEOUT,
        temperature: float = 0.7,
        max_tokens: int = 1000,
    ):
        self.llm = llm
        self.model = model
        self.timeout = timeout
        self.temperature = temperature
        self.max_tokens = max_tokens

    async def adjust(self, text: str, formality_level: float, friendliness_level: float) -> str:
        adjustment = await self.adjust_with_usage(text, formality_level, friendliness_level)
        return adjustment.text

    async def adjust_with_usage(
        self, text: str, formality_level: float, friendliness_level: float
    ) -> Adjustment:
        """Call the provider once, bounded by ``timeout``.

        Raises a ToneError subclass on any failure. Cancellation propagates
        unchanged.
        """
        prompt = build_prompt(text, formality_level, friendliness_level)
        try:
            response = await asyncio.wait_for(
                self.llm.generate(
                    prompt=prompt,
                    model=self.model,
                    temperature=self.temperature,
                    max_tokens=self.max_tokens,
                ),
                timeout=self.timeout,
            )
        except Exception as exc:
            error = classify_provider_error(exc)
            logger.warning(
                "Tone adjustment failed (%s): %s", type(error).__name__, error.detail
            )
            raise error from exc

        return Adjustment(
            text=clean_output(response.text),
            model=self.model,
            input_tokens=response.input_tokens,
            output_tokens=response.output_tokens,
        )
