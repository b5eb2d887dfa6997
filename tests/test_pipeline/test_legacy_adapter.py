"""Tests for the legacy result adapter."""

import pytest

from resume_fit.models.result import (
    CanonicalResult,
    FreeTextImprovement,
    StructuredImprovement,
)
from resume_fit.pipeline.legacy_adapter import (
    classify_improvement_text,
    to_legacy,
    to_structured,
)


def _with_improvements(payload: dict, improvements: list) -> CanonicalResult:
    return CanonicalResult.model_validate(dict(payload, improvements=improvements))


class TestToLegacy:
    def test_scores_carried_over(self, sample_result):
        legacy = to_legacy(sample_result)
        assert legacy.match_score == 82
        assert legacy.ats_score == 75

    def test_skill_gaps(self, sample_result):
        legacy = to_legacy(sample_result)
        assert len(legacy.skill_gaps) == 1
        gap = legacy.skill_gaps[0]
        assert gap.skill == "Kubernetes"
        assert gap.required is True
        assert gap.present is False
        assert gap.importance == 0.7

    def test_keywords(self, sample_result):
        legacy = to_legacy(sample_result)
        assert [(k.keyword, k.matched, k.count) for k in legacy.keywords] == [
            ("Python", True, 1),
            ("Kubernetes", False, 0),
        ]
        assert all(k.category == "technical" for k in legacy.keywords)

    def test_empty_lists(self, valid_payload):
        result = CanonicalResult.model_validate(
            dict(
                valid_payload,
                missing_skills=[],
                improvements=[],
                keyword_analysis={"present": [], "missing": []},
            )
        )
        legacy = to_legacy(result)
        assert legacy.skill_gaps == ()
        assert legacy.keywords == ()
        assert legacy.improvements == ()

    def test_improvement_order_preserved(self, valid_payload):
        texts = [f"Suggestion number {i}" for i in range(6)]
        legacy = to_legacy(_with_improvements(valid_payload, texts))
        assert [i.description for i in legacy.improvements] == texts

    def test_mixed_improvements(self, valid_payload):
        structured = {
            "category": "formatting",
            "priority": "low",
            "title": "One column",
            "description": "Use a single column layout.",
            "actionable": "Move the sidebar into the body.",
        }
        legacy = to_legacy(_with_improvements(valid_payload, ["Add metrics", structured]))
        assert legacy.improvements[0].title == "Add metrics"
        assert legacy.improvements[1] == StructuredImprovement(**structured)

    def test_idempotent(self, sample_result):
        assert to_legacy(sample_result) == to_legacy(sample_result)

    def test_alias_dump(self, sample_result):
        data = to_legacy(sample_result).model_dump(by_alias=True, mode="json")
        assert set(data) == {"matchScore", "atsScore", "skillGaps", "keywords", "improvements"}
        assert data["skillGaps"] == [
            {"skill": "Kubernetes", "required": True, "present": False, "importance": 0.7}
        ]
        assert "kind" not in data["improvements"][0]


class TestClassifyImprovementText:
    @pytest.mark.parametrize(
        "text, category",
        [
            ("Highlight cloud skills", "skills"),
            ("Add the Kubernetes keyword", "keywords"),
            ("Fix the Formatting of dates", "formatting"),
            ("Quantify project outcomes", "experience"),
            ("List skill keywords", "skills"),
        ],
    )
    def test_category_cues(self, text, category):
        assert classify_improvement_text(text, 5).category == category

    @pytest.mark.parametrize(
        "index, priority",
        [(0, "high"), (1, "high"), (2, "medium"), (3, "medium"), (4, "low"), (9, "low")],
    )
    def test_priority_by_position(self, index, priority):
        assert classify_improvement_text("Quantify outcomes", index).priority == priority

    def test_urgency_cue_raises_priority(self):
        assert classify_improvement_text("Critical: add a summary", 7).priority == "high"
        assert classify_improvement_text("It is important to add dates", 7).priority == "high"

    def test_title_truncated(self):
        text = "Rewrite every bullet point to lead with a measurable outcome and tool"
        structured = classify_improvement_text(text, 0)
        assert structured.title == text[:50]
        assert structured.description == text
        assert structured.actionable == text

    def test_empty_text_gets_placeholder_title(self):
        assert classify_improvement_text("", 0).title == "Improvement"


class TestToStructured:
    def test_free_text(self):
        structured = to_structured(FreeTextImprovement(text="Add Go"), 3)
        assert structured.priority == "medium"
        assert structured.description == "Add Go"

    def test_structured_passthrough(self):
        item = StructuredImprovement(
            category="skills",
            priority="low",
            title="t",
            description="d",
            actionable="a",
        )
        assert to_structured(item, 0) is item

    def test_unknown_variant(self):
        with pytest.raises(TypeError, match="Unsupported improvement variant"):
            to_structured("plain string", 0)
