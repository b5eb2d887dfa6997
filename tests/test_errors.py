"""Tests for the error taxonomy and response formatting."""

from resume_fit.errors import (
    ContractViolation,
    ContractViolationError,
    InferenceExhaustedError,
    InferenceServiceError,
    InputTooShortError,
    MalformedOutputError,
    NotFoundError,
    RateLimitError,
    StreamAbortedError,
    format_error,
    get_status_code,
)


class TestContractViolationError:
    def test_message_lists_every_violation(self):
        error = ContractViolationError(
            [
                ContractViolation("match_score", "Input should be less than or equal to 100"),
                ContractViolation("role_fit_summary", "String should have at least 50 characters"),
            ]
        )
        assert error.fields == ["match_score", "role_fit_summary"]
        assert "match_score: Input should be" in str(error)
        assert "role_fit_summary" in str(error)


class TestInferenceExhaustedError:
    def test_carries_last_error(self):
        cause = MalformedOutputError("bad json")
        error = InferenceExhaustedError(4, cause)
        assert error.attempts == 4
        assert error.last_error is cause
        assert "4 attempt(s)" in str(error)


class TestFormatError:
    def test_known_error(self):
        data = format_error(InferenceServiceError("upstream down"))
        assert data == {
            "error": "InferenceServiceError",
            "message": "upstream down",
            "code": "AI_SERVICE_ERROR",
        }

    def test_unknown_error(self):
        data = format_error(RuntimeError("boom"))
        assert data == {"error": "InternalServerError", "message": "boom"}

    def test_unknown_error_without_message(self):
        assert format_error(RuntimeError())["message"] == "An unexpected error occurred"


class TestStatusCodes:
    def test_status_codes(self):
        assert get_status_code(InputTooShortError(["resume_text"], "short")) == 400
        assert get_status_code(NotFoundError()) == 404
        assert get_status_code(RateLimitError()) == 429
        assert get_status_code(StreamAbortedError()) == 499
        assert get_status_code(MalformedOutputError("x")) == 502
        assert get_status_code(ContractViolationError([])) == 502
        assert get_status_code(KeyError("x")) == 500
