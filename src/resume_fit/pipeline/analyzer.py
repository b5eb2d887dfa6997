"""Resume Analyzer - one-shot (with retries) and streaming analysis."""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator
from contextlib import aclosing

from tenacity import (
    AsyncRetrying,
    RetryCallState,
    RetryError,
    retry_if_exception_type,
    stop_after_attempt,
)

from resume_fit.clients.llm_client import DEFAULT_MODEL, LLMClient
from resume_fit.errors import (
    ContractViolationError,
    InferenceExhaustedError,
    MalformedOutputError,
)
from resume_fit.models.input import AnalysisInput
from resume_fit.models.partial import PartialResult
from resume_fit.models.result import CanonicalResult
from resume_fit.pipeline.contract import require_valid
from resume_fit.pipeline.prompt_builder import (
    DEFAULT_MAX_JOB_DESCRIPTION_CHARS,
    DEFAULT_MAX_RESUME_CHARS,
    SYSTEM_PROMPT,
    build_analysis_prompt,
)
from resume_fit.pipeline.streaming import decode_stream_closing
from resume_fit.utils.json_parser import parse_json_object

logger = logging.getLogger(__name__)

DEFAULT_MAX_RETRIES = 3
DEFAULT_TEMPERATURE = 0.1
DEFAULT_MAX_TOKENS = 2000

# Content problems are worth another attempt; transport failures are not.
RETRYABLE_ERRORS = (MalformedOutputError, ContractViolationError)


def _log_retry(retry_state: RetryCallState) -> None:
    error = retry_state.outcome.exception() if retry_state.outcome else None
    if isinstance(error, ContractViolationError):
        logger.warning(
            "Schema validation error on attempt %d (%s), retrying",
            retry_state.attempt_number,
            ", ".join(error.fields),
        )
    else:
        logger.warning(
            "JSON parse error on attempt %d (%s), retrying",
            retry_state.attempt_number,
            error,
        )


class ResumeAnalyzer:
    def __init__(
        self,
        llm: LLMClient,
        *,
        model: str = DEFAULT_MODEL,
        temperature: float = DEFAULT_TEMPERATURE,
        max_tokens: int = DEFAULT_MAX_TOKENS,
        max_retries: int = DEFAULT_MAX_RETRIES,
        max_resume_chars: int = DEFAULT_MAX_RESUME_CHARS,
        max_job_description_chars: int = DEFAULT_MAX_JOB_DESCRIPTION_CHARS,
    ):
        if max_retries < 0:
            raise ValueError("max_retries must be >= 0")
        self.llm = llm
        self.model = model
        self.temperature = temperature
        self.max_tokens = max_tokens
        self.max_retries = max_retries
        self.max_resume_chars = max_resume_chars
        self.max_job_description_chars = max_job_description_chars

    def build_prompt(self, analysis_input: AnalysisInput) -> str:
        return build_analysis_prompt(
            analysis_input,
            max_resume_chars=self.max_resume_chars,
            max_job_description_chars=self.max_job_description_chars,
        )

    async def _attempt(self, prompt: str) -> CanonicalResult:
        response = await self.llm.generate(
            prompt=prompt,
            system=SYSTEM_PROMPT,
            model=self.model,
            temperature=self.temperature,
            max_tokens=self.max_tokens,
        )
        return require_valid(parse_json_object(response.text))

    async def analyze(self, analysis_input: AnalysisInput) -> CanonicalResult:
        """Analyze a resume, re-invoking the model on malformed output.

        Makes at most ``1 + max_retries`` sequential calls. Raises
        :class:`InferenceExhaustedError` when none of them yields a
        contract-valid result; :class:`InferenceServiceError` propagates
        after the first call.
        """
        prompt = self.build_prompt(analysis_input)
        retrying = AsyncRetrying(
            stop=stop_after_attempt(self.max_retries + 1),
            retry=retry_if_exception_type(RETRYABLE_ERRORS),
            before_sleep=_log_retry,
        )
        try:
            async for attempt in retrying:
                with attempt:
                    result = await self._attempt(prompt)
        except RetryError as exc:
            last_attempt = exc.last_attempt
            last_error = last_attempt.exception()
            logger.error(
                "Analysis failed after %d attempt(s): %s",
                last_attempt.attempt_number,
                last_error,
            )
            raise InferenceExhaustedError(last_attempt.attempt_number, last_error) from last_error
        return result

    async def stream(
        self, analysis_input: AnalysisInput
    ) -> AsyncIterator[PartialResult | CanonicalResult]:
        """Stream partial results, ending with one validated result.

        A single inference session; malformed or invalid final output raises
        instead of retrying.
        """
        prompt = self.build_prompt(analysis_input)
        fragments = self.llm.stream_text(
            prompt=prompt,
            system=SYSTEM_PROMPT,
            model=self.model,
            temperature=self.temperature,
            max_tokens=self.max_tokens,
        )
        async with aclosing(decode_stream_closing(fragments)) as decoded:
            async for item in decoded:
                yield item
