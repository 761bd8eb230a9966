"""Data models for the tone picker."""

from tone_picker.models.api import (
    AdjustToneResponse,
    ErrorResponse,
    HealthResponse,
    MessageResponse,
)
from tone_picker.models.tone import ToneState

__all__ = [
    "AdjustToneResponse",
    "ErrorResponse",
    "HealthResponse",
    "MessageResponse",
    "ToneState",
]
