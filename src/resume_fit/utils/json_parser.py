"""Utilities to pull a JSON object out of raw model output."""

from __future__ import annotations

import json
import re

from resume_fit.errors import MalformedOutputError

_OPENING_FENCE = re.compile(r"^```(?:json)?\s*", re.IGNORECASE)
_CLOSING_FENCE = re.compile(r"\s*```$")


def clean_json_content(text: str) -> str:
    """Strip code fences and cut the text down to its outermost braces.

    Text without a complete ``{ ... }`` pair is returned fence-stripped but
    otherwise untouched, so a partial stream buffer stays inspectable.
    """
    cleaned = text.strip()
    cleaned = _OPENING_FENCE.sub("", cleaned)
    cleaned = _CLOSING_FENCE.sub("", cleaned).strip()

    start = cleaned.find("{")
    end = cleaned.rfind("}")
    if start != -1 and end != -1 and end > start:
        cleaned = cleaned[start : end + 1]
    return cleaned


def parse_json_object(text: str) -> dict:
    """Clean and parse model output, requiring a top-level JSON object."""
    if not text or not text.strip():
        raise MalformedOutputError("Empty response from inference service")

    cleaned = clean_json_content(text)
    try:
        data = json.loads(cleaned)
    except json.JSONDecodeError as exc:
        raise MalformedOutputError(
            f"Could not parse JSON from response: {exc.msg} (near: {cleaned[:80]!r})"
        ) from exc

    if not isinstance(data, dict):
        raise MalformedOutputError(
            f"Expected a JSON object, got {type(data).__name__}"
        )
    return data
