"""Robustness Checker - non-fatal audit of an accepted result."""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field

from resume_fit.models.result import (
    MAX_SUMMARY_CHARS,
    MIN_SUMMARY_CHARS,
    CanonicalResult,
    FreeTextImprovement,
)


@dataclass(frozen=True)
class AuditReport:
    valid: bool
    issues: list[str] = field(default_factory=list)


def _is_sequence(value) -> bool:
    return isinstance(value, (list, tuple))


def _check_score(name: str, value, issues: list[str]) -> None:
    if not isinstance(value, int) or isinstance(value, bool):
        issues.append(f"{name} is not an integer")
    elif not 0 <= value <= 100:
        issues.append(f"{name} out of range")


def _check_entries(name: str, values, issues: list[str]) -> None:
    if not _is_sequence(values):
        issues.append(f"{name} is not an array")
        return
    texts = [v.text if isinstance(v, FreeTextImprovement) else v for v in values]
    if any(isinstance(t, str) and not t.strip() for t in texts):
        issues.append(f"{name} contains blank entries")
    counts = Counter(t.strip().lower() for t in texts if isinstance(t, str))
    duplicates = sorted(t for t, n in counts.items() if n > 1 and t)
    if duplicates:
        issues.append(f"{name} contains duplicates: {', '.join(duplicates)}")


def audit(result: CanonicalResult) -> AuditReport:
    """Flag structural anomalies without ever rejecting the result."""
    issues: list[str] = []

    _check_score("match_score", getattr(result, "match_score", None), issues)
    _check_score("ats_score", getattr(result, "ats_score", None), issues)

    for name in ("missing_skills", "resume_strengths", "improvements"):
        _check_entries(name, getattr(result, name, None), issues)

    keywords = getattr(result, "keyword_analysis", None)
    present = getattr(keywords, "present", None)
    missing = getattr(keywords, "missing", None)
    if keywords is None:
        issues.append("keyword_analysis is not an object")
    else:
        _check_entries("keyword_analysis.present", present, issues)
        _check_entries("keyword_analysis.missing", missing, issues)
        if _is_sequence(present) and _is_sequence(missing):
            overlap = {str(k).lower() for k in present} & {str(k).lower() for k in missing}
            if overlap:
                issues.append(
                    f"keywords listed as both present and missing: {', '.join(sorted(overlap))}"
                )

    summary = getattr(result, "role_fit_summary", None)
    if not isinstance(summary, str) or len(summary) < MIN_SUMMARY_CHARS:
        issues.append(f"role_fit_summary too short (min {MIN_SUMMARY_CHARS} chars)")
    elif len(summary) > MAX_SUMMARY_CHARS:
        issues.append(f"role_fit_summary too long (max {MAX_SUMMARY_CHARS} chars)")

    return AuditReport(valid=not issues, issues=issues)
