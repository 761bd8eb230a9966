"""Usage logging data models."""

from __future__ import annotations

import uuid
from datetime import datetime

from pydantic import BaseModel, Field


class UsageLog(BaseModel):
    """Single usage log entry for one tone adjustment attempt."""

    id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    session_id: str = "anonymous"
    timestamp: datetime = Field(default_factory=datetime.now)
    mode: str  # "api" | "cli" | "session"
    formality_level: float = 0
    friendliness_level: float = 0
    text_length: int = 0
    cache_hit: bool = False
    elapsed_seconds: float = 0.0
    model: str | None = None
    input_tokens: int = 0
    output_tokens: int = 0
    estimated_cost_usd: float = 0.0
    success: bool = True
    error_type: str | None = None
    error_message: str | None = None
