"""Pydantic models for the canonical analysis result (the output contract)."""

from __future__ import annotations

from typing import Annotated, Any, Literal, Union

from pydantic import (
    BaseModel,
    ConfigDict,
    Discriminator,
    Field,
    StrictStr,
    Tag,
    model_serializer,
    model_validator,
)

Score = Annotated[int, Field(strict=True, ge=0, le=100)]
Category = Literal["skills", "experience", "keywords", "formatting"]
Priority = Literal["high", "medium", "low"]

MIN_SUMMARY_CHARS = 50
MAX_SUMMARY_CHARS = 500


class FreeTextImprovement(BaseModel):
    """An improvement given as a single free-text suggestion."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["text"] = "text"
    text: StrictStr

    @model_validator(mode="before")
    @classmethod
    def _wrap_plain_string(cls, data: Any) -> Any:
        if isinstance(data, str):
            return {"text": data}
        return data

    @model_serializer
    def _serialize_as_string(self) -> str:
        return self.text


class StructuredImprovement(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["structured"] = Field(default="structured", exclude=True)
    category: Category
    priority: Priority
    title: StrictStr
    description: StrictStr
    actionable: StrictStr


def _improvement_tag(value: Any) -> str | None:
    if isinstance(value, (str, FreeTextImprovement)):
        return "text"
    if isinstance(value, (dict, StructuredImprovement)):
        return "structured"
    return None


Improvement = Annotated[
    Union[
        Annotated[FreeTextImprovement, Tag("text")],
        Annotated[StructuredImprovement, Tag("structured")],
    ],
    Discriminator(_improvement_tag),
]


class KeywordAnalysis(BaseModel):
    model_config = ConfigDict(frozen=True)

    present: tuple[StrictStr, ...]
    missing: tuple[StrictStr, ...]


class CanonicalResult(BaseModel):
    """Strictly validated analysis of a resume against a job description."""

    model_config = ConfigDict(frozen=True)

    match_score: Score
    ats_score: Score
    missing_skills: tuple[StrictStr, ...]
    keyword_analysis: KeywordAnalysis
    resume_strengths: tuple[StrictStr, ...]
    improvements: tuple[Improvement, ...]
    role_fit_summary: Annotated[
        StrictStr, Field(min_length=MIN_SUMMARY_CHARS, max_length=MAX_SUMMARY_CHARS)
    ]
