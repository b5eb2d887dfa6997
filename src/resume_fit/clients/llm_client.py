"""Claude API wrapper for one-shot and streaming JSON analysis calls."""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator
from dataclasses import dataclass

import anthropic

from resume_fit.errors import InferenceServiceError, MalformedOutputError

logger = logging.getLogger(__name__)

DEFAULT_MODEL = "claude-haiku-4-5-20251001"


@dataclass
class LLMResponse:
    """Response from the LLM including usage metadata."""

    text: str
    input_tokens: int
    output_tokens: int


class LLMClient:
    """Async Claude API client.

    Transport and service failures surface as :class:`InferenceServiceError`.
    Nothing is retried at this level.
    """

    def __init__(self, api_key: str | None = None, timeout: float | None = None):
        # The SDK retries 429s, 5xx and connection errors by default.
        kwargs: dict = {"max_retries": 0}
        if api_key is not None:
            kwargs["api_key"] = api_key
        if timeout is not None:
            kwargs["timeout"] = timeout
        self.client = anthropic.AsyncAnthropic(**kwargs)
        self._token_log: list[tuple[str, int, int]] = []  # (model, input_tokens, output_tokens)

    def _record_usage(self, model: str, message) -> tuple[int, int]:
        usage = (message.usage.input_tokens, message.usage.output_tokens)
        logger.debug("LLM usage: model=%s, %d input, %d output tokens", model, *usage)
        self._token_log.append((model, *usage))
        return usage

    @staticmethod
    def _request_kwargs(
        prompt: str,
        system: str,
        model: str,
        temperature: float,
        max_tokens: int,
    ) -> dict:
        kwargs: dict = {
            "model": model,
            "max_tokens": max_tokens,
            "temperature": temperature,
            "messages": [{"role": "user", "content": prompt}],
        }
        if system:
            kwargs["system"] = system
        return kwargs

    async def generate(
        self,
        prompt: str,
        system: str = "",
        model: str = DEFAULT_MODEL,
        temperature: float = 0.0,
        max_tokens: int = 2000,
    ) -> LLMResponse:
        """Send a prompt to Claude and return the text response with usage."""
        logger.debug("LLM call: model=%s", model)
        try:
            message = await self.client.messages.create(
                **self._request_kwargs(prompt, system, model, temperature, max_tokens)
            )
        except anthropic.APIError as exc:
            logger.error("LLM call failed", exc_info=True)
            raise InferenceServiceError(f"Inference service call failed: {exc}") from exc

        input_tokens, output_tokens = self._record_usage(model, message)

        text = "".join(getattr(block, "text", "") for block in message.content)
        if not text.strip():
            raise MalformedOutputError("Empty response from inference service")
        return LLMResponse(
            text=text,
            input_tokens=input_tokens,
            output_tokens=output_tokens,
        )

    async def stream_text(
        self,
        prompt: str,
        system: str = "",
        model: str = DEFAULT_MODEL,
        temperature: float = 0.0,
        max_tokens: int = 2000,
    ) -> AsyncIterator[str]:
        """Yield text fragments as Claude produces them.

        The HTTP stream is closed when iteration ends, fails, or the consumer
        closes this generator early.
        """
        logger.debug("LLM stream: model=%s", model)
        try:
            async with self.client.messages.stream(
                **self._request_kwargs(prompt, system, model, temperature, max_tokens)
            ) as stream:
                async for text in stream.text_stream:
                    if text:
                        yield text
                message = await stream.get_final_message()
        except anthropic.APIError as exc:
            logger.error("LLM stream failed", exc_info=True)
            raise InferenceServiceError(f"Inference service stream failed: {exc}") from exc

        self._record_usage(model, message)

    def get_token_summary(self) -> dict:
        """Return accumulated token usage and reset the log."""
        summary = {
            "input": sum(t[1] for t in self._token_log),
            "output": sum(t[2] for t in self._token_log),
            "calls": list(self._token_log),
        }
        self._token_log.clear()
        return summary
