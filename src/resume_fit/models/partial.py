"""Best-effort snapshot of a result that is still streaming in."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict

# Sequence fields whose growth counts as new information mid-stream.
ARRAY_FIELDS = ("missing_skills", "resume_strengths", "improvements")


class PartialKeywordAnalysis(BaseModel):
    model_config = ConfigDict(frozen=True)

    present: tuple[Any, ...] | None = None
    missing: tuple[Any, ...] | None = None


class PartialResult(BaseModel):
    """Subset of the canonical fields seen so far; never contract-validated."""

    model_config = ConfigDict(frozen=True)

    match_score: int | None = None
    ats_score: int | None = None
    missing_skills: tuple[Any, ...] | None = None
    keyword_analysis: PartialKeywordAnalysis | None = None
    resume_strengths: tuple[Any, ...] | None = None
    improvements: tuple[Any, ...] | None = None
    role_fit_summary: str | None = None

    @classmethod
    def from_candidate(cls, data: dict) -> PartialResult:
        """Pick every field of a parsed object whose shape is plausible."""
        picked: dict[str, Any] = {}
        for name in ("match_score", "ats_score"):
            value = data.get(name)
            if isinstance(value, int) and not isinstance(value, bool):
                picked[name] = value
        for name in ARRAY_FIELDS:
            value = data.get(name)
            if isinstance(value, list):
                picked[name] = tuple(value)
        keywords = data.get("keyword_analysis")
        if isinstance(keywords, dict):
            picked["keyword_analysis"] = PartialKeywordAnalysis(
                present=tuple(keywords["present"]) if isinstance(keywords.get("present"), list) else None,
                missing=tuple(keywords["missing"]) if isinstance(keywords.get("missing"), list) else None,
            )
        summary = data.get("role_fit_summary")
        if isinstance(summary, str):
            picked["role_fit_summary"] = summary
        return cls(**picked)

    def array_lengths(self) -> dict[str, int]:
        """Length of every tracked sequence, 0 when not seen yet."""
        lengths = {name: len(getattr(self, name) or ()) for name in ARRAY_FIELDS}
        keywords = self.keyword_analysis or PartialKeywordAnalysis()
        lengths["keyword_analysis.present"] = len(keywords.present or ())
        lengths["keyword_analysis.missing"] = len(keywords.missing or ())
        return lengths
