"""Data models for the resume analysis pipeline."""

from resume_fit.models.input import AnalysisInput
from resume_fit.models.legacy import KeywordMatch, LegacyResult, SkillGap
from resume_fit.models.partial import PartialKeywordAnalysis, PartialResult
from resume_fit.models.result import (
    CanonicalResult,
    FreeTextImprovement,
    Improvement,
    KeywordAnalysis,
    StructuredImprovement,
)

__all__ = [
    "AnalysisInput",
    "CanonicalResult",
    "FreeTextImprovement",
    "Improvement",
    "KeywordAnalysis",
    "KeywordMatch",
    "LegacyResult",
    "PartialKeywordAnalysis",
    "PartialResult",
    "SkillGap",
    "StructuredImprovement",
]
