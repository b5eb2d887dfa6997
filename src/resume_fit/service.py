"""Analysis service - request-level flow around the analyzer."""

from __future__ import annotations

import logging
import time
from collections.abc import AsyncIterator
from contextlib import aclosing
from dataclasses import dataclass
from typing import Literal

from resume_fit.errors import RateLimitError, StreamAbortedError, get_status_code
from resume_fit.logging.cost_calculator import calculate_cost
from resume_fit.logging.models import UsageLog
from resume_fit.logging.usage_store import UsageStore
from resume_fit.models.input import AnalysisInput
from resume_fit.models.legacy import LegacyResult
from resume_fit.models.partial import PartialResult
from resume_fit.models.result import CanonicalResult
from resume_fit.pipeline.analyzer import ResumeAnalyzer
from resume_fit.pipeline.legacy_adapter import to_legacy
from resume_fit.pipeline.robustness import AuditReport, audit
from resume_fit.rate_limit import RateLimiter
from resume_fit.storage.analysis_store import AnalysisStore

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AnalysisOutcome:
    """Everything produced for one completed analysis."""

    result: CanonicalResult
    legacy: LegacyResult
    audit: AuditReport
    analysis_id: str | None = None


@dataclass(frozen=True)
class AnalysisEvent:
    """One step of a streamed analysis."""

    status: Literal["progress", "complete"]
    partial: PartialResult | None = None
    outcome: AnalysisOutcome | None = None


class AnalysisService:
    """Validates input, runs the analyzer, then audits, stores and adapts.

    Store, usage log and rate limiter are optional collaborators.

    Token counts are drained from the analyzer's client after each request.
    Concurrent requests sharing one client would mix their counts, so give
    each concurrent request its own service built on its own ``LLMClient``.
    """

    def __init__(
        self,
        analyzer: ResumeAnalyzer,
        *,
        store: AnalysisStore | None = None,
        usage_store: UsageStore | None = None,
        rate_limiter: RateLimiter | None = None,
    ):
        self.analyzer = analyzer
        self.store = store
        self.usage_store = usage_store
        self.rate_limiter = rate_limiter

    def _check_rate_limit(self, client_id: str) -> None:
        if self.rate_limiter is None:
            return
        decision = self.rate_limiter.check(client_id)
        if not decision.allowed:
            raise RateLimitError(reset_at=decision.reset_at)

    def _finalize(
        self, analysis_input: AnalysisInput, result: CanonicalResult, save: bool
    ) -> AnalysisOutcome:
        report = audit(result)
        if not report.valid:
            logger.warning("Schema robustness issues: %s", "; ".join(report.issues))

        analysis_id = None
        if save and self.store is not None:
            analysis_id = self.store.save(analysis_input, result)
            logger.info("Stored analysis %s", analysis_id)

        return AnalysisOutcome(
            result=result,
            legacy=to_legacy(result),
            audit=report,
            analysis_id=analysis_id,
        )

    def _record_usage(
        self,
        endpoint: str,
        client_id: str,
        started: float,
        error: BaseException | None = None,
    ) -> None:
        # Drained on every request so counts never carry over to the next one.
        tokens = self.analyzer.llm.get_token_summary()
        if self.usage_store is None:
            return
        log = UsageLog(
            client_id=client_id,
            endpoint=endpoint,
            input_tokens=tokens["input"],
            output_tokens=tokens["output"],
            latency_ms=int((time.monotonic() - started) * 1000),
            status_code=200 if error is None else get_status_code(error),
            estimated_cost_usd=calculate_cost(tokens["calls"]),
            success=error is None,
            error_message=None if error is None else str(error),
        )
        try:
            self.usage_store.save_log(log)
        except Exception:
            logger.error("Failed to record usage", exc_info=True)

    async def analyze(
        self,
        resume_text: str,
        job_description: str,
        *,
        client_id: str = "local",
        save: bool = True,
    ) -> AnalysisOutcome:
        """Run a one-shot analysis."""
        started = time.monotonic()
        try:
            self._check_rate_limit(client_id)
            analysis_input = AnalysisInput(resume_text, job_description)
            result = await self.analyzer.analyze(analysis_input)
            outcome = self._finalize(analysis_input, result, save)
        except Exception as exc:
            self._record_usage("analyze", client_id, started, exc)
            raise
        self._record_usage("analyze", client_id, started)
        return outcome

    async def stream(
        self,
        resume_text: str,
        job_description: str,
        *,
        client_id: str = "local",
        save: bool = True,
    ) -> AsyncIterator[AnalysisEvent]:
        """Stream progress events, finishing with one ``complete`` event.

        A stream the consumer closes early is recorded as a failed request.
        """
        started = time.monotonic()
        recorded = False
        try:
            self._check_rate_limit(client_id)
            analysis_input = AnalysisInput(resume_text, job_description)
            async with aclosing(self.analyzer.stream(analysis_input)) as items:
                async for item in items:
                    if isinstance(item, CanonicalResult):
                        outcome = self._finalize(analysis_input, item, save)
                        self._record_usage("stream", client_id, started)
                        recorded = True
                        yield AnalysisEvent(status="complete", outcome=outcome)
                    else:
                        yield AnalysisEvent(status="progress", partial=item)
        except Exception as exc:
            self._record_usage("stream", client_id, started, exc)
            recorded = True
            raise
        finally:
            if not recorded:
                self._record_usage("stream", client_id, started, StreamAbortedError())
