"""In-memory cache of tone adjustment results, keyed by exact request."""

from __future__ import annotations

import logging

logger = logging.getLogger(__name__)


def _normalize_level(level: float) -> str:
    # 1 and 1.0 are the same request
    value = float(level)
    return str(int(value)) if value.is_integer() else repr(value)


def make_cache_key(text: str, formality_level: float, friendliness_level: float) -> str:
    """Build the cache key from trimmed text and both tone levels."""
    return "\x1f".join(
        (text.strip(), _normalize_level(formality_level), _normalize_level(friendliness_level))
    )


class RequestCache:
    """Exact-match key/value store with no expiry; lives as long as its owner."""

    def __init__(self) -> None:
        self._entries: dict[str, str] = {}
        self._hits = 0
        self._misses = 0

    def get(self, key: str) -> str | None:
        value = self._entries.get(key)
        if value is None:
            self._misses += 1
        else:
            self._hits += 1
        return value

    def put(self, key: str, value: str) -> None:
        self._entries[key] = value

    def clear(self) -> int:
        """Drop every entry. Returns count of removed entries."""
        count = len(self._entries)
        self._entries.clear()
        logger.info("Request cache cleared (%d entries)", count)
        return count

    def stats(self) -> dict:
        return {"entries": len(self._entries), "hits": self._hits, "misses": self._misses}

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key: object) -> bool:
        return key in self._entries
