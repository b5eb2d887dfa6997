"""Application configuration loaded from config.yaml."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

import yaml


def _check_range(name: str, value: float, low: float, high: float) -> None:
    if not low <= value <= high:
        raise ValueError(f"{name} must be between {low} and {high}, got {value}")


@dataclass(frozen=True)
class LLMConfig:
    model: str = "claude-haiku-4-5-20251001"
    temperature: float = 0.1
    max_tokens: int = 2000
    max_retries: int = 3
    timeout: int = 60

    def __post_init__(self) -> None:
        _check_range("temperature", self.temperature, 0.0, 1.0)
        _check_range("max_tokens", self.max_tokens, 1, 64000)
        _check_range("max_retries", self.max_retries, 0, 10)
        _check_range("timeout", self.timeout, 1, 600)


@dataclass(frozen=True)
class PromptConfig:
    max_resume_chars: int = 2500
    max_job_description_chars: int = 1500

    def __post_init__(self) -> None:
        _check_range("max_resume_chars", self.max_resume_chars, 100, 100_000)
        _check_range("max_job_description_chars", self.max_job_description_chars, 50, 100_000)


@dataclass(frozen=True)
class StorageConfig:
    db_path: str = "~/.resume-fit/analyses.db"
    usage_db_path: str = "~/.resume-fit/usage.db"

    @property
    def resolved_db_path(self) -> Path:
        return Path(self.db_path).expanduser()

    @property
    def resolved_usage_db_path(self) -> Path:
        return Path(self.usage_db_path).expanduser()


@dataclass(frozen=True)
class RateLimitConfig:
    max_requests: int = 100
    window_seconds: float = 60.0

    def __post_init__(self) -> None:
        _check_range("max_requests", self.max_requests, 1, 1_000_000)
        _check_range("window_seconds", self.window_seconds, 1, 86400)


@dataclass(frozen=True)
class AppConfig:
    llm: LLMConfig = field(default_factory=LLMConfig)
    prompt: PromptConfig = field(default_factory=PromptConfig)
    storage: StorageConfig = field(default_factory=StorageConfig)
    rate_limit: RateLimitConfig = field(default_factory=RateLimitConfig)


def load_config(path: str | Path | None = None) -> AppConfig:
    """Load config from YAML file, falling back to defaults."""
    if path is None:
        # Look for config.yaml relative to the project root
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

    return AppConfig(
        llm=LLMConfig(**raw.get("llm", {})),
        prompt=PromptConfig(**raw.get("prompt", {})),
        storage=StorageConfig(**raw.get("storage", {})),
        rate_limit=RateLimitConfig(**raw.get("rate_limit", {})),
    )
