"""Validated analysis request input."""

from __future__ import annotations

from dataclasses import dataclass

from resume_fit.errors import InputTooShortError

MIN_RESUME_CHARS = 100
MIN_JOB_DESCRIPTION_CHARS = 50


@dataclass(frozen=True)
class AnalysisInput:
    resume_text: str
    job_description: str

    def __post_init__(self) -> None:
        problems: list[str] = []
        fields: list[str] = []
        if len(self.resume_text) < MIN_RESUME_CHARS:
            fields.append("resume_text")
            problems.append(
                f"Resume text must be at least {MIN_RESUME_CHARS} characters "
                f"(got {len(self.resume_text)})"
            )
        if len(self.job_description) < MIN_JOB_DESCRIPTION_CHARS:
            fields.append("job_description")
            problems.append(
                f"Job description must be at least {MIN_JOB_DESCRIPTION_CHARS} characters "
                f"(got {len(self.job_description)})"
            )
        if problems:
            raise InputTooShortError(fields, "; ".join(problems))
