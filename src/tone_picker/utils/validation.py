"""Input validation for tone adjustment requests.

Text is checked on its trimmed form for emptiness and minimum length, and on
its raw form for maximum length. Tone levels accept the continuous closed
range [-1, 1] even though the picker only emits -1, 0 and 1.
"""

from __future__ import annotations

import math

from tone_picker.errors import ToneValidationError, ValidationKind

MIN_TEXT_LENGTH = 3
MAX_TEXT_LENGTH = 5000
MIN_LEVEL = -1
MAX_LEVEL = 1

TEXT_MESSAGES: dict[ValidationKind, str] = {
    ValidationKind.EMPTY: "Text is required and must be a non-empty string",
    ValidationKind.TOO_SHORT: f"Text must be at least {MIN_TEXT_LENGTH} characters long",
    ValidationKind.TOO_LONG: f"Text must be less than {MAX_TEXT_LENGTH} characters",
}


def check_text(text: object) -> ValidationKind | None:
    """Return the failing kind for ``text``, or None when it is acceptable."""
    if not isinstance(text, str) or not text.strip():
        return ValidationKind.EMPTY
    if len(text.strip()) < MIN_TEXT_LENGTH:
        return ValidationKind.TOO_SHORT
    if len(text) > MAX_TEXT_LENGTH:
        return ValidationKind.TOO_LONG
    return None


def check_level(value: object) -> ValidationKind | None:
    """Return the failing kind for a tone level, or None when it is acceptable."""
    # bool is an int subclass but never a valid level
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return ValidationKind.NOT_NUMERIC
    if isinstance(value, float) and math.isnan(value):
        return ValidationKind.NOT_NUMERIC
    if value < MIN_LEVEL or value > MAX_LEVEL:
        return ValidationKind.OUT_OF_RANGE
    return None


def validate_text(text: object) -> None:
    """Raise ToneValidationError if ``text`` cannot be sent for adjustment."""
    kind = check_text(text)
    if kind is not None:
        raise ToneValidationError(kind, TEXT_MESSAGES[kind])


def validate_level(value: object, name: str = "Tone level") -> None:
    """Raise ToneValidationError if ``value`` is not a number in [-1, 1]."""
    kind = check_level(value)
    if kind is not None:
        raise ToneValidationError(
            kind, f"{name} must be a number between {MIN_LEVEL} and {MAX_LEVEL}"
        )


def validate_levels(formality_level: object, friendliness_level: object) -> None:
    validate_level(formality_level, "Formality level")
    validate_level(friendliness_level, "Friendliness level")
