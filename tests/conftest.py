"""Shared test fixtures."""

from __future__ import annotations

import json
from unittest.mock import AsyncMock, MagicMock

import pytest

from resume_fit.clients.llm_client import LLMClient, LLMResponse
from resume_fit.models.input import AnalysisInput
from resume_fit.models.result import CanonicalResult

# 120 characters
RESUME_TEXT = (
    "Senior Python engineer with 5 years experience building Django and "
    "FastAPI services on AWS. Mentored three junior staff."
)
# 60 characters
JD_TEXT = "Job Title: Platform Engineer\nCompany: Acme Cloud\nKubernetes."
# 55 characters
ROLE_FIT_SUMMARY = "Strong Python backend fit; Kubernetes is the major gap."


class FragmentSource:
    """Scripted stream of text fragments that records how it was consumed."""

    def __init__(self, fragments: list[str], error: Exception | None = None):
        self.fragments = list(fragments)
        self.error = error
        self.consumed = 0
        self.closed = False

    async def iterate(self, **kwargs):
        self.kwargs = kwargs
        try:
            for fragment in self.fragments:
                self.consumed += 1
                yield fragment
            if self.error is not None:
                raise self.error
        finally:
            self.closed = True


@pytest.fixture
def resume_text() -> str:
    return RESUME_TEXT


@pytest.fixture
def jd_text() -> str:
    return JD_TEXT


@pytest.fixture
def sample_input() -> AnalysisInput:
    return AnalysisInput(resume_text=RESUME_TEXT, job_description=JD_TEXT)


@pytest.fixture
def valid_payload() -> dict:
    return {
        "match_score": 82,
        "missing_skills": ["Kubernetes"],
        "ats_score": 75,
        "keyword_analysis": {"present": ["Python"], "missing": ["Kubernetes"]},
        "resume_strengths": ["5 years experience"],
        "improvements": ["Add Kubernetes experience"],
        "role_fit_summary": ROLE_FIT_SUMMARY,
    }


@pytest.fixture
def valid_json(valid_payload) -> str:
    return json.dumps(valid_payload)


@pytest.fixture
def sample_result(valid_payload) -> CanonicalResult:
    return CanonicalResult.model_validate(valid_payload)


@pytest.fixture
def make_response():
    def _make(text: str, input_tokens: int = 100, output_tokens: int = 50) -> LLMResponse:
        return LLMResponse(text=text, input_tokens=input_tokens, output_tokens=output_tokens)

    return _make


@pytest.fixture
def mock_llm_client() -> LLMClient:
    """Create a mock LLM client."""
    client = AsyncMock(spec=LLMClient)
    client.generate = AsyncMock(
        return_value=LLMResponse(text="{}", input_tokens=100, output_tokens=50)
    )
    client.stream_text = MagicMock()
    client.get_token_summary = MagicMock(
        return_value={"input": 0, "output": 0, "calls": []}
    )
    return client


@pytest.fixture
def stream_from(mock_llm_client):
    """Script the mock client's stream; returns the FragmentSource."""

    def _script(fragments: list[str], error: Exception | None = None) -> FragmentSource:
        source = FragmentSource(fragments, error)
        mock_llm_client.stream_text.side_effect = lambda **kwargs: source.iterate(**kwargs)
        return source

    return _script
