"""SQLite-backed persistence for editor state (text, tone, history).

Persistence is best-effort: any read or write failure is logged and the
caller gets the default value instead of an exception.
"""

from __future__ import annotations

import json
import logging
import sqlite3
from pathlib import Path
from typing import Any

from tone_picker.history.history_store import HistoryStore
from tone_picker.models.tone import ToneState

logger = logging.getLogger(__name__)

DEFAULT_DB_PATH = Path.home() / ".tone-picker" / "state.db"

TEXT_CONTENT_KEY = "tone_picker_text"
TONE_SETTINGS_KEY = "tone_picker_settings"
HISTORY_KEY = "tone_picker_history"

ALL_KEYS = (TEXT_CONTENT_KEY, TONE_SETTINGS_KEY, HISTORY_KEY)


class StateStore:
    """Key/value store of JSON documents under fixed keys."""

    def __init__(self, db_path: str | Path = DEFAULT_DB_PATH):
        self.db_path = Path(db_path)
        try:
            self.db_path.parent.mkdir(parents=True, exist_ok=True)
            self._init_db()
        except (OSError, sqlite3.Error):
            logger.warning("State storage unavailable at %s", self.db_path, exc_info=True)

    def _connect(self) -> sqlite3.Connection:
        return sqlite3.connect(str(self.db_path))

    def _init_db(self) -> None:
        with self._connect() as conn:
            conn.execute("""
                CREATE TABLE IF NOT EXISTS app_state (
                    key TEXT PRIMARY KEY,
                    value_json TEXT NOT NULL
                )
            """)

    # --- generic ---

    def save(self, key: str, data: Any) -> None:
        try:
            payload = json.dumps(data)
            with self._connect() as conn:
                conn.execute(
                    "INSERT OR REPLACE INTO app_state (key, value_json) VALUES (?, ?)",
                    (key, payload),
                )
        except (TypeError, ValueError, sqlite3.Error):
            logger.warning("Failed to save %s", key, exc_info=True)

    def load(self, key: str, default: Any = None) -> Any:
        try:
            with self._connect() as conn:
                row = conn.execute(
                    "SELECT value_json FROM app_state WHERE key = ?", (key,)
                ).fetchone()
            return json.loads(row[0]) if row else default
        except (ValueError, sqlite3.Error):
            logger.warning("Failed to load %s", key, exc_info=True)
            return default

    def remove(self, key: str) -> None:
        try:
            with self._connect() as conn:
                conn.execute("DELETE FROM app_state WHERE key = ?", (key,))
        except sqlite3.Error:
            logger.warning("Failed to remove %s", key, exc_info=True)

    def clear_all(self) -> None:
        for key in ALL_KEYS:
            self.remove(key)

    # --- app-specific ---

    def save_text(self, text: str) -> None:
        self.save(TEXT_CONTENT_KEY, text)

    def load_text(self) -> str:
        text = self.load(TEXT_CONTENT_KEY, "")
        return text if isinstance(text, str) else ""

    def save_tone(self, formality_level: float, friendliness_level: float) -> None:
        self.save(
            TONE_SETTINGS_KEY,
            {"formalityLevel": formality_level, "friendlinessLevel": friendliness_level},
        )

    def load_tone(self) -> tuple[float, float]:
        settings = self.load(TONE_SETTINGS_KEY, None)
        try:
            return settings["formalityLevel"], settings["friendlinessLevel"]
        except (TypeError, KeyError):
            return 0, 0

    def save_state(self, state: ToneState) -> None:
        self.save_text(state.text)
        self.save_tone(state.formality_level, state.friendliness_level)

    def load_state(self) -> ToneState:
        """Saved text and tone, or the defaults ("" at 0/0)."""
        text = self.load_text()
        formality, friendliness = self.load_tone()
        try:
            return ToneState(
                text=text,
                formality_level=formality,
                friendliness_level=friendliness,
            )
        except ValueError:
            logger.warning("Saved tone settings out of range; using defaults")
            return ToneState(text=text)

    def save_history(self, history: HistoryStore) -> None:
        self.save(HISTORY_KEY, history.to_dict())

    def load_history(self, fallback: ToneState | None = None) -> HistoryStore:
        data = self.load(HISTORY_KEY, None)
        if data is None:
            return HistoryStore(fallback)
        return HistoryStore.from_dict(data, fallback)
