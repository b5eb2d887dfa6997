"""Usage logging data models."""

from __future__ import annotations

import uuid
from datetime import datetime

from pydantic import BaseModel, Field


class UsageLog(BaseModel):
    """Single usage log entry for one analysis request."""

    id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    client_id: str = "anonymous"
    timestamp: datetime = Field(default_factory=datetime.now)
    endpoint: str  # "analyze" | "stream"
    input_tokens: int = 0
    output_tokens: int = 0
    latency_ms: int = 0
    status_code: int = 200
    estimated_cost_usd: float = 0.0
    success: bool = True
    error_message: str | None = None

    @property
    def tokens_used(self) -> int:
        return self.input_tokens + self.output_tokens
