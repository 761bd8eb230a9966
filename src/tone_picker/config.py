"""Application configuration loaded from config.yaml."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path

import yaml


@dataclass(frozen=True)
class LLMConfig:
    model: str = "claude-haiku-4-5-20251001"
    timeout: int = 30
    temperature: float = 0.7
    max_tokens: int = 1000

    def __post_init__(self) -> None:
        if self.timeout < 1:
            raise ValueError(f"llm.timeout must be at least 1 second, got {self.timeout}")
        if not 0 <= self.temperature <= 1:
            raise ValueError(f"llm.temperature must be between 0 and 1, got {self.temperature}")
        if self.max_tokens < 1:
            raise ValueError(f"llm.max_tokens must be positive, got {self.max_tokens}")


@dataclass(frozen=True)
class ServerConfig:
    host: str = "127.0.0.1"
    port: int = 5000
    environment: str = "production"
    cors_origins: tuple[str, ...] = ("*",)

    def __post_init__(self) -> None:
        if not 1 <= self.port <= 65535:
            raise ValueError(f"server.port must be between 1 and 65535, got {self.port}")

    @property
    def is_development(self) -> bool:
        return self.environment.lower() == "development"


@dataclass(frozen=True)
class StorageConfig:
    db_path: str = "~/.tone-picker/state.db"
    usage_db_path: str = "~/.tone-picker/usage.db"

    @property
    def resolved_db_path(self) -> Path:
        return Path(self.db_path).expanduser()

    @property
    def resolved_usage_db_path(self) -> Path:
        return Path(self.usage_db_path).expanduser()


@dataclass(frozen=True)
class AppConfig:
    llm: LLMConfig = field(default_factory=LLMConfig)
    server: ServerConfig = field(default_factory=ServerConfig)
    storage: StorageConfig = field(default_factory=StorageConfig)


def load_config(path: str | Path | None = None) -> AppConfig:
    """Load config from YAML file, falling back to defaults."""
    if path is None:
        candidates = [
            Path.cwd() / "config.yaml",
            Path(__file__).resolve().parent.parent.parent / "config.yaml",
        ]
        for c in candidates:
            if c.exists():
                path = c
                break

    raw: dict = {}
    if path is not None:
        p = Path(path)
        if p.exists():
            raw = yaml.safe_load(p.read_text()) or {}

    server_raw = dict(raw.get("server", {}))
    if "cors_origins" in server_raw:
        server_raw["cors_origins"] = tuple(server_raw["cors_origins"])
    env_override = os.environ.get("TONE_PICKER_ENV")
    if env_override:
        server_raw["environment"] = env_override

    return AppConfig(
        llm=LLMConfig(**raw.get("llm", {})),
        server=ServerConfig(**server_raw),
        storage=StorageConfig(**raw.get("storage", {})),
    )
