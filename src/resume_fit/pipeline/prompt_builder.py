"""Prompt Builder - renders the bounded analysis prompt."""

from __future__ import annotations

from resume_fit.models.input import AnalysisInput

DEFAULT_MAX_RESUME_CHARS = 2500
DEFAULT_MAX_JOB_DESCRIPTION_CHARS = 1500
TRUNCATION_MARKER = "..."

SYSTEM_PROMPT = """\
You are a resume analysis inference engine. Your only job is to output valid JSON.

CRITICAL RULES:
1. Output ONLY valid JSON. No markdown, no explanations, no code blocks.
2. Use EXACTLY these keys: match_score, missing_skills, ats_score, keyword_analysis, resume_strengths, improvements, role_fit_summary
3. All scores are integers 0-100
4. All arrays are arrays of strings (except keyword_analysis which has present/missing arrays)
5. role_fit_summary is a single string, 50-500 characters
6. Be conservative and realistic in scoring
7. Missing skills should be specific and actionable
8. Improvements should be concrete and prioritized

Your response must be parseable as JSON with no preprocessing."""

PROMPT_TEMPLATE = """\
Analyze this resume against the job description.

RESUME:
{resume}

JOB DESCRIPTION:
{job_description}

Output JSON with this exact structure:
{{
  "match_score": <0-100 integer>,
  "missing_skills": ["skill1", "skill2"],
  "ats_score": <0-100 integer>,
  "keyword_analysis": {{
    "present": ["keyword1", "keyword2"],
    "missing": ["keyword3", "keyword4"]
  }},
  "resume_strengths": ["strength1", "strength2"],
  "improvements": ["improvement1", "improvement2"],
  "role_fit_summary": "<50-500 character summary>"
}}

Guidelines:
- match_score: Overall fit (0-100). Be conservative.
- missing_skills: Required skills not in resume. Be specific.
- ats_score: ATS compatibility (0-100). Consider formatting, keywords, structure.
- keyword_analysis: Extract important keywords from job description. Categorize as present/missing.
- resume_strengths: What makes this resume strong for this role.
- improvements: Prioritized, actionable improvements. Be concrete.
- role_fit_summary: Concise assessment of fit. Professional tone."""


def truncate(text: str, limit: int) -> str:
    """Cut text to ``limit`` characters, marking the cut."""
    if len(text) <= limit:
        return text
    return text[:limit] + TRUNCATION_MARKER


def build_analysis_prompt(
    analysis_input: AnalysisInput,
    *,
    max_resume_chars: int = DEFAULT_MAX_RESUME_CHARS,
    max_job_description_chars: int = DEFAULT_MAX_JOB_DESCRIPTION_CHARS,
) -> str:
    return PROMPT_TEMPLATE.format(
        resume=truncate(analysis_input.resume_text, max_resume_chars),
        job_description=truncate(analysis_input.job_description, max_job_description_chars),
    )
