"""Error taxonomy for tone adjustment.

Every failure surfaced to a caller is a ``ToneError`` subclass carrying the
HTTP status it maps to and a single human-readable message.
"""

from __future__ import annotations

from enum import Enum


class ToneError(Exception):
    """Base class for all tone adjustment failures."""

    status_code: int = 500
    default_message: str = "Failed to adjust tone. Please try again."

    def __init__(self, message: str | None = None, *, detail: str | None = None):
        self.message = message or self.default_message
        self.detail = detail  # raw provider/network message, never shown in production
        super().__init__(self.message)


class ValidationKind(str, Enum):
    EMPTY = "Empty"
    TOO_SHORT = "TooShort"
    TOO_LONG = "TooLong"
    OUT_OF_RANGE = "OutOfRange"
    NOT_NUMERIC = "NotNumeric"


class ToneValidationError(ToneError):
    """Input rejected locally; never reaches the provider."""

    status_code = 400

    def __init__(self, kind: ValidationKind, message: str):
        self.kind = kind
        super().__init__(message)


class AuthError(ToneError):
    status_code = 401
    default_message = "API authentication failed. Please check configuration."


class RateLimitError(ToneError):
    status_code = 429
    default_message = "Service rate limit exceeded. Please wait a moment before trying again."


class ProviderTimeoutError(ToneError):
    status_code = 504
    default_message = "Service timeout. Please try again."


class UpstreamInvalidResponseError(ToneError):
    status_code = 502
    default_message = "Invalid response from AI service. Please try again."


class UnclassifiedError(ToneError):
    status_code = 500


_STATUS_TO_ERROR: dict[int, type[ToneError]] = {
    401: AuthError,
    429: RateLimitError,
    502: UpstreamInvalidResponseError,
    504: ProviderTimeoutError,
}


def error_for_status(
    status_code: int, message: str | None = None, kind: str | None = None
) -> ToneError:
    """Rebuild a ToneError from an HTTP status returned by the tone server."""
    if status_code == 400:
        try:
            validation_kind = ValidationKind(kind)
        except ValueError:
            validation_kind = ValidationKind.EMPTY
        return ToneValidationError(validation_kind, message or "Invalid request")
    error_cls = _STATUS_TO_ERROR.get(status_code)
    if error_cls is not None:
        return error_cls(message)
    if status_code >= 500:
        return UnclassifiedError(message)
    return UnclassifiedError(f"Request failed with status {status_code}")
