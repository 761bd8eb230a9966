"""FastAPI boundary server for tone adjustment.

Endpoints:
  POST /api/adjust-tone   {text, formalityLevel, friendlinessLevel} -> {adjustedText}
  GET  /api/health        -> {status, timestamp}
  POST /api/cache/clear   -> {message}

Each app instance owns its own request cache.
"""

from __future__ import annotations

import logging
import sqlite3
import time
from contextlib import asynccontextmanager
from datetime import datetime, timezone

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from tone_picker.cache.request_cache import RequestCache, make_cache_key
from tone_picker.clients.llm_client import LLMClient
from tone_picker.config import AppConfig, load_config
from tone_picker.errors import ToneError, ToneValidationError, ValidationKind
from tone_picker.logging.cost_calculator import calculate_cost
from tone_picker.logging.models import UsageLog
from tone_picker.logging.usage_store import UsageStore
from tone_picker.models.api import (
    AdjustToneResponse,
    ErrorResponse,
    HealthResponse,
    MessageResponse,
)
from tone_picker.pipeline.tone_adjuster import ToneAdjuster
from tone_picker.utils.validation import validate_levels, validate_text

logger = logging.getLogger(__name__)


def _build_adjuster(config: AppConfig) -> ToneAdjuster:
    llm = LLMClient(timeout=config.llm.timeout)
    return ToneAdjuster(
        llm,
        model=config.llm.model,
        timeout=config.llm.timeout,
        temperature=config.llm.temperature,
        max_tokens=config.llm.max_tokens,
    )


def _record_usage(store: UsageStore | None, log: UsageLog) -> None:
    if store is None:
        return
    try:
        store.save_log(log)
    except sqlite3.Error:
        logger.warning("Failed to record usage log", exc_info=True)


def create_app(
    config: AppConfig | None = None,
    *,
    adjuster: ToneAdjuster | None = None,
    usage_store: UsageStore | None = None,
) -> FastAPI:
    config = config or load_config()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info(
            "Tone picker API starting (environment=%s, model=%s)",
            config.server.environment,
            config.llm.model,
        )
        yield
        logger.info("Tone picker API shutting down")

    app = FastAPI(title="Tone Picker API", version="1.0.0", lifespan=lifespan)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=list(config.server.cors_origins),
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.state.config = config
    app.state.adjuster = adjuster or _build_adjuster(config)
    app.state.cache = RequestCache()
    app.state.usage_store = usage_store

    @app.exception_handler(ToneError)
    async def tone_error_handler(request: Request, exc: ToneError) -> JSONResponse:
        body = ErrorResponse(error=exc.message)
        if isinstance(exc, ToneValidationError):
            body.kind = exc.kind.value
        elif exc.status_code == 500 and config.server.is_development:
            body.details = exc.detail
        return JSONResponse(status_code=exc.status_code, content=body.model_dump(exclude_none=True))

    @app.post("/api/adjust-tone", response_model=AdjustToneResponse)
    async def adjust_tone(request: Request) -> AdjustToneResponse:
        try:
            payload = await request.json()
        except ValueError:
            payload = None
        if not isinstance(payload, dict):
            raise ToneValidationError(ValidationKind.EMPTY, "Request body must be a JSON object")

        text = payload.get("text")
        formality_level = payload.get("formalityLevel")
        friendliness_level = payload.get("friendlinessLevel")
        validate_text(text)
        validate_levels(formality_level, friendliness_level)

        start = time.monotonic()
        log = UsageLog(
            mode="api",
            session_id=request.headers.get("X-Session-ID", "anonymous"),
            formality_level=formality_level,
            friendliness_level=friendliness_level,
            text_length=len(text),
        )

        cache: RequestCache = app.state.cache
        key = make_cache_key(text, formality_level, friendliness_level)
        cached = cache.get(key)
        if cached is not None:
            logger.info("Cache hit for request")
            log.cache_hit = True
            _record_usage(app.state.usage_store, log)
            return AdjustToneResponse(adjustedText=cached)

        try:
            adjustment = await app.state.adjuster.adjust_with_usage(
                text.strip(), formality_level, friendliness_level
            )
        except ToneError as exc:
            logger.error("Error adjusting tone: %s", exc.detail or exc.message)
            log.success = False
            log.error_type = type(exc).__name__
            log.error_message = exc.detail or exc.message
            log.elapsed_seconds = time.monotonic() - start
            _record_usage(app.state.usage_store, log)
            raise

        # Output identical to the input is returned but never cached
        if adjustment.text != text.strip():
            cache.put(key, adjustment.text)

        log.model = adjustment.model
        log.input_tokens = adjustment.input_tokens
        log.output_tokens = adjustment.output_tokens
        log.estimated_cost_usd = calculate_cost(
            [(adjustment.model, adjustment.input_tokens, adjustment.output_tokens)]
        )
        log.elapsed_seconds = time.monotonic() - start
        _record_usage(app.state.usage_store, log)
        return AdjustToneResponse(adjustedText=adjustment.text)

    @app.get("/api/health", response_model=HealthResponse)
    async def health() -> HealthResponse:
        timestamp = datetime.now(timezone.utc).isoformat(timespec="milliseconds")
        return HealthResponse(status="OK", timestamp=timestamp.replace("+00:00", "Z"))

    @app.post("/api/cache/clear", response_model=MessageResponse)
    async def clear_cache() -> MessageResponse:
        app.state.cache.clear()
        return MessageResponse(message="Cache cleared successfully")

    return app
