"""Error taxonomy for the analysis pipeline and its service boundary."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class ContractViolation:
    """One failed rule of the output contract."""

    field: str  # dotted path, e.g. "keyword_analysis.present.0"
    message: str

    def __str__(self) -> str:
        return f"{self.field}: {self.message}"


class ResumeFitError(Exception):
    """Base class for every error raised by resume_fit."""

    code = "INTERNAL_ERROR"
    status_code = 500


class InputTooShortError(ResumeFitError, ValueError):
    """Resume or job description text is below its minimum length."""

    code = "VALIDATION_ERROR"
    status_code = 400

    def __init__(self, fields: list[str], message: str):
        super().__init__(message)
        self.fields = fields


class MalformedOutputError(ResumeFitError):
    """Inference output could not be parsed as a JSON object."""

    code = "MALFORMED_OUTPUT"
    status_code = 502


class ContractViolationError(ResumeFitError):
    """Parsed inference output does not satisfy the output contract."""

    code = "CONTRACT_VIOLATION"
    status_code = 502

    def __init__(self, violations: list[ContractViolation]):
        self.violations = violations
        summary = "; ".join(str(v) for v in violations) or "unknown violation"
        super().__init__(f"Output contract violated: {summary}")

    @property
    def fields(self) -> list[str]:
        return [v.field for v in self.violations]


class InferenceServiceError(ResumeFitError):
    """Transport or service-level failure of the inference provider."""

    code = "AI_SERVICE_ERROR"
    status_code = 502


class InferenceExhaustedError(ResumeFitError):
    """Every attempt produced malformed or contract-invalid output."""

    code = "AI_OUTPUT_EXHAUSTED"
    status_code = 502

    def __init__(self, attempts: int, last_error: Exception):
        self.attempts = attempts
        self.last_error = last_error
        super().__init__(
            f"No valid analysis after {attempts} attempt(s): {last_error}"
        )


class RateLimitError(ResumeFitError):
    code = "RATE_LIMIT_EXCEEDED"
    status_code = 429

    def __init__(self, message: str = "Rate limit exceeded", reset_at: float | None = None):
        super().__init__(message)
        self.reset_at = reset_at


class StreamAbortedError(ResumeFitError):
    """The consumer closed a streamed analysis before its final result."""

    code = "STREAM_ABORTED"
    status_code = 499

    def __init__(self, message: str = "Stream closed before completion"):
        super().__init__(message)


class NotFoundError(ResumeFitError):
    code = "NOT_FOUND"
    status_code = 404

    def __init__(self, message: str = "Resource not found"):
        super().__init__(message)


def format_error(error: BaseException) -> dict:
    """Convert an exception into a response-friendly dict."""
    if isinstance(error, ResumeFitError):
        return {
            "error": type(error).__name__,
            "message": str(error),
            "code": error.code,
        }
    message = str(error) or "An unexpected error occurred"
    return {"error": "InternalServerError", "message": message}


def get_status_code(error: BaseException) -> int:
    """Return the HTTP-style status code associated with an exception."""
    if isinstance(error, ResumeFitError):
        return error.status_code
    return 500
