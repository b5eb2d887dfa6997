"""Legacy Adapter - reshapes a canonical result for older consumers."""

from __future__ import annotations

from functools import singledispatch

from resume_fit.models.legacy import KeywordMatch, LegacyResult, SkillGap
from resume_fit.models.result import (
    CanonicalResult,
    FreeTextImprovement,
    StructuredImprovement,
)

DEFAULT_SKILL_IMPORTANCE = 0.7
DEFAULT_KEYWORD_CATEGORY = "technical"
TITLE_MAX_CHARS = 50

URGENCY_CUES = ("critical", "important")
# First matching cue wins.
CATEGORY_CUES = (
    ("skill", "skills"),
    ("keyword", "keywords"),
    ("format", "formatting"),
)
FALLBACK_CATEGORY = "experience"
HIGH_PRIORITY_SLOTS = 2
MEDIUM_PRIORITY_SLOTS = 4


def classify_improvement_text(text: str, index: int) -> StructuredImprovement:
    """Heuristically structure a free-text improvement by keyword cues.

    ``index`` is the improvement's position in the original list; earlier
    entries are treated as more urgent.
    """
    lowered = text.lower()
    category = next(
        (name for cue, name in CATEGORY_CUES if cue in lowered),
        FALLBACK_CATEGORY,
    )
    if any(cue in lowered for cue in URGENCY_CUES) or index < HIGH_PRIORITY_SLOTS:
        priority = "high"
    elif index < MEDIUM_PRIORITY_SLOTS:
        priority = "medium"
    else:
        priority = "low"
    return StructuredImprovement(
        category=category,
        priority=priority,
        title=text[:TITLE_MAX_CHARS] or "Improvement",
        description=text,
        actionable=text,
    )


@singledispatch
def to_structured(improvement, index: int) -> StructuredImprovement:
    raise TypeError(f"Unsupported improvement variant: {type(improvement).__name__}")


@to_structured.register
def _(improvement: FreeTextImprovement, index: int) -> StructuredImprovement:
    return classify_improvement_text(improvement.text, index)


@to_structured.register
def _(improvement: StructuredImprovement, index: int) -> StructuredImprovement:
    return improvement


def to_legacy(result: CanonicalResult) -> LegacyResult:
    skill_gaps = tuple(
        SkillGap(skill=skill, required=True, present=False, importance=DEFAULT_SKILL_IMPORTANCE)
        for skill in result.missing_skills
    )
    keywords = tuple(
        KeywordMatch(keyword=keyword, count=1, category=DEFAULT_KEYWORD_CATEGORY, matched=True)
        for keyword in result.keyword_analysis.present
    ) + tuple(
        KeywordMatch(keyword=keyword, count=0, category=DEFAULT_KEYWORD_CATEGORY, matched=False)
        for keyword in result.keyword_analysis.missing
    )
    improvements = tuple(
        to_structured(item, index) for index, item in enumerate(result.improvements)
    )
    return LegacyResult(
        match_score=result.match_score,
        ats_score=result.ats_score,
        skill_gaps=skill_gaps,
        keywords=keywords,
        improvements=improvements,
    )
