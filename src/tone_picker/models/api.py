"""Pydantic models for the HTTP surface (camelCase on the wire)."""

from __future__ import annotations

from pydantic import BaseModel


class AdjustToneResponse(BaseModel):
    adjustedText: str


class ErrorResponse(BaseModel):
    error: str
    kind: str | None = None     # validation kind for 400 responses
    details: str | None = None  # only populated in development


class HealthResponse(BaseModel):
    status: str
    timestamp: str


class MessageResponse(BaseModel):
    message: str
