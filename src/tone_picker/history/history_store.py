"""Linear undo/redo history over ToneState snapshots."""

from __future__ import annotations

import logging

from pydantic import ValidationError

from tone_picker.models.tone import ToneState

logger = logging.getLogger(__name__)


class HistoryStore:
    """A list of snapshots and a cursor into it.

    Pushing while the cursor is behind the end discards the redo branch.
    The history is never empty.
    """

    def __init__(self, initial: ToneState | None = None):
        self._states: list[ToneState] = [initial if initial is not None else ToneState()]
        self._cursor = 0

    @property
    def cursor(self) -> int:
        return self._cursor

    @property
    def snapshots(self) -> tuple[ToneState, ...]:
        return tuple(self._states)

    def __len__(self) -> int:
        return len(self._states)

    def current(self) -> ToneState:
        return self._states[self._cursor]

    def push(self, state: ToneState) -> None:
        del self._states[self._cursor + 1:]
        self._states.append(state)
        self._cursor = len(self._states) - 1

    def can_undo(self) -> bool:
        return self._cursor > 0

    def can_redo(self) -> bool:
        return self._cursor < len(self._states) - 1

    def undo(self) -> bool:
        if not self.can_undo():
            return False
        self._cursor -= 1
        return True

    def redo(self) -> bool:
        if not self.can_redo():
            return False
        self._cursor += 1
        return True

    def to_dict(self) -> dict:
        return {
            "history": [s.model_dump() for s in self._states],
            "current_index": self._cursor,
        }

    @classmethod
    def from_dict(cls, data: object, fallback: ToneState | None = None) -> HistoryStore:
        """Rebuild a history saved by ``to_dict``.

        Malformed data yields a fresh history seeded with ``fallback``.
        """
        try:
            raw_states = data["history"]  # type: ignore[index]
            cursor = data["current_index"]  # type: ignore[index]
            states = [ToneState(**s) for s in raw_states]
        except (TypeError, KeyError, ValueError, ValidationError):
            logger.warning("Ignoring malformed saved history")
            return cls(fallback)

        if (
            not states
            or isinstance(cursor, bool)
            or not isinstance(cursor, int)
            or not 0 <= cursor < len(states)
        ):
            logger.warning("Ignoring saved history with invalid cursor %s", cursor)
            return cls(fallback)

        store = cls(states[0])
        store._states = states
        store._cursor = cursor
        return store
