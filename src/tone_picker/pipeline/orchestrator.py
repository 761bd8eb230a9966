"""Session orchestrator - coordinates validation, cache, provider and history."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum

from tone_picker.cache.request_cache import RequestCache, make_cache_key
from tone_picker.errors import ToneError
from tone_picker.history.history_store import HistoryStore
from tone_picker.models.tone import ToneState
from tone_picker.pipeline.tone_adjuster import ToneProvider, classify_provider_error
from tone_picker.utils.validation import validate_levels, validate_text

logger = logging.getLogger(__name__)

NO_ADJUSTMENT_MESSAGE = "No tone adjustment was needed for this text. Try different tone settings."
BUSY_MESSAGE = "A tone adjustment is already in progress."


class AdjustmentStatus(str, Enum):
    APPLIED = "applied"      # provider result pushed and cached
    CACHED = "cached"        # cached result pushed, no provider call
    UNCHANGED = "unchanged"  # provider echoed the input; nothing recorded
    SAME_TONE = "same_tone"  # requested tone already selected
    BUSY = "busy"            # another adjustment in flight
    INVALID = "invalid"      # local validation failed
    FAILED = "failed"        # provider call failed


@dataclass
class AdjustmentResult:
    """Outcome of one ``adjust_tone`` attempt."""

    status: AdjustmentStatus
    state: ToneState
    message: str = ""
    error: ToneError | None = None

    @property
    def changed(self) -> bool:
        return self.status in (AdjustmentStatus.APPLIED, AdjustmentStatus.CACHED)


class ToneOrchestrator:
    """Owns one session's history and cache; the only writer of either.

    At most one adjustment runs at a time. The in-flight flag is checked and
    set before the first await, so overlapping calls on the same event loop
    are rejected rather than queued.
    """

    def __init__(
        self,
        provider: ToneProvider,
        initial: ToneState | None = None,
        *,
        history: HistoryStore | None = None,
        cache: RequestCache | None = None,
    ):
        self.provider = provider
        self.history = history if history is not None else HistoryStore(initial)
        self.cache = cache if cache is not None else RequestCache()
        self._in_flight = False

    @property
    def in_flight(self) -> bool:
        return self._in_flight

    def current(self) -> ToneState:
        return self.history.current()

    async def adjust_tone(
        self, formality_level: float, friendliness_level: float
    ) -> AdjustmentResult:
        if self._in_flight:
            return self._result(AdjustmentStatus.BUSY, BUSY_MESSAGE)

        current = self.history.current()
        text = current.text.strip()
        try:
            validate_text(text)
            validate_levels(formality_level, friendliness_level)
        except ToneError as e:
            return self._result(AdjustmentStatus.INVALID, e.message, error=e)

        if self._is_same_tone(current, formality_level, friendliness_level):
            return self._result(AdjustmentStatus.SAME_TONE)

        key = make_cache_key(text, formality_level, friendliness_level)
        cached = self.cache.get(key)
        if cached is not None:
            logger.info("Cache hit for tone (%s, %s)", formality_level, friendliness_level)
            self.history.push(ToneState(
                text=cached,
                formality_level=formality_level,
                friendliness_level=friendliness_level,
            ))
            return self._result(AdjustmentStatus.CACHED)

        self._in_flight = True
        try:
            try:
                adjusted = await self.provider.adjust(text, formality_level, friendliness_level)
            except Exception as exc:
                error = classify_provider_error(exc)
                logger.info("Tone adjustment failed: %s", error.message)
                return self._result(AdjustmentStatus.FAILED, error.message, error=error)

            if self._is_unchanged_output(text, adjusted):
                return self._result(AdjustmentStatus.UNCHANGED, NO_ADJUSTMENT_MESSAGE)

            self.cache.put(key, adjusted)
            self.history.push(ToneState(
                text=adjusted,
                formality_level=formality_level,
                friendliness_level=friendliness_level,
            ))
            return self._result(AdjustmentStatus.APPLIED)
        finally:
            self._in_flight = False

    def edit_text(self, new_text: str) -> bool:
        """Record a text edit as its own undoable step."""
        if self._in_flight:
            return False
        self.history.push(self.history.current().with_text(new_text))
        return True

    def reset_tone(self) -> bool:
        if self._in_flight:
            return False
        self.history.push(self.history.current().with_tone(0, 0))
        return True

    def undo(self) -> bool:
        if self._in_flight:
            return False
        return self.history.undo()

    def redo(self) -> bool:
        if self._in_flight:
            return False
        return self.history.redo()

    def clear_cache(self) -> int:
        return self.cache.clear()

    # --- guard clauses ---

    @staticmethod
    def _is_same_tone(current: ToneState, formality_level: float, friendliness_level: float) -> bool:
        return (
            current.formality_level == formality_level
            and current.friendliness_level == friendliness_level
        )

    @staticmethod
    def _is_unchanged_output(input_text: str, output_text: str) -> bool:
        # Identical output is neither cached nor pushed
        return output_text.strip() == input_text

    def _result(
        self, status: AdjustmentStatus, message: str = "", *, error: ToneError | None = None
    ) -> AdjustmentResult:
        return AdjustmentResult(
            status=status, state=self.history.current(), message=message, error=error
        )
