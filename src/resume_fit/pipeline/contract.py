"""Output Contract - strict validation of parsed inference output."""

from __future__ import annotations

from typing import Any

from pydantic import ValidationError

from resume_fit.errors import ContractViolation, ContractViolationError
from resume_fit.models.result import CanonicalResult

ROOT_FIELD = "<root>"


def _violations_from(error: ValidationError) -> list[ContractViolation]:
    violations = []
    for item in error.errors():
        field = ".".join(str(part) for part in item["loc"]) or ROOT_FIELD
        violations.append(ContractViolation(field=field, message=item["msg"]))
    return violations


def validate_result(candidate: Any) -> CanonicalResult | list[ContractViolation]:
    """Validate a parsed candidate, collecting every violation.

    Returns the frozen :class:`CanonicalResult` on success, otherwise the
    full list of violations (never empty).
    """
    if not isinstance(candidate, dict):
        return [
            ContractViolation(
                field=ROOT_FIELD,
                message=f"Expected a JSON object, got {type(candidate).__name__}",
            )
        ]
    try:
        return CanonicalResult.model_validate(candidate)
    except ValidationError as exc:
        return _violations_from(exc)


def require_valid(candidate: Any) -> CanonicalResult:
    """Validate a candidate or raise :class:`ContractViolationError`."""
    outcome = validate_result(candidate)
    if isinstance(outcome, CanonicalResult):
        return outcome
    raise ContractViolationError(outcome)
