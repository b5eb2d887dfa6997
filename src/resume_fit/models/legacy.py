"""Pydantic models for the denormalized legacy result shape."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

from resume_fit.models.result import StructuredImprovement


class SkillGap(BaseModel):
    model_config = ConfigDict(frozen=True)

    skill: str
    required: bool
    present: bool
    importance: float  # 0.0-1.0


class KeywordMatch(BaseModel):
    model_config = ConfigDict(frozen=True)

    keyword: str
    count: int
    category: Literal["technical", "soft", "industry"]
    matched: bool


class LegacyResult(BaseModel):
    """Presentation-oriented result; serialize with ``by_alias=True``."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    match_score: int = Field(alias="matchScore")
    ats_score: int = Field(alias="atsScore")
    skill_gaps: tuple[SkillGap, ...] = Field(alias="skillGaps")
    keywords: tuple[KeywordMatch, ...]
    improvements: tuple[StructuredImprovement, ...]
