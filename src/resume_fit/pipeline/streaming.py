"""Streaming Decoder - turns text fragments into partial and final results."""

from __future__ import annotations

import json
import logging
import re
from collections.abc import AsyncIterable, AsyncIterator
from contextlib import aclosing

from resume_fit.errors import MalformedOutputError
from resume_fit.models.partial import ARRAY_FIELDS, PartialResult
from resume_fit.models.result import CanonicalResult
from resume_fit.pipeline.contract import require_valid
from resume_fit.utils.json_parser import clean_json_content, parse_json_object

logger = logging.getLogger(__name__)

# A score only counts once its digits are terminated; "7" of a split "70" must not leak.
_SCORE_VALUE = re.compile(r"\s*(\d+)(?=\s*[,}\s])")
_STRING_VALUE = re.compile(r'\s*("(?:[^"\\]|\\.)*")')
_COLON = re.compile(r"\s*:")


def _string_end(buffer: str, start: int) -> int | None:
    """Index of the quote closing the string opened at ``start``."""
    i = start + 1
    while i < len(buffer):
        char = buffer[i]
        if char == "\\":
            i += 2
            continue
        if char == '"':
            return i
        i += 1
    return None


def top_level_keys(buffer: str) -> dict[str, int]:
    """Map each key of the outermost object to the offset just past its colon.

    Keys inside nested values or string contents are not reported, so text
    that quotes JSON cannot be mistaken for a field.
    """
    keys: dict[str, int] = {}
    depth = 0
    i = 0
    while i < len(buffer):
        char = buffer[i]
        if char == '"':
            end = _string_end(buffer, i)
            if end is None:
                break
            colon = _COLON.match(buffer, end + 1) if depth == 1 else None
            if colon:
                keys.setdefault(buffer[i + 1 : end], colon.end())
            i = end + 1
            continue
        if char in "{[":
            depth += 1
        elif char in "}]":
            depth -= 1
        i += 1
    return keys


def extract_partial(buffer: str) -> PartialResult | None:
    """Pattern-based extraction from a buffer that is not yet valid JSON.

    Only keys of the outermost object are read. Array fields are reported as
    empty placeholders as soon as their key appears; their contents are left
    for the full parse.
    """
    keys = top_level_keys(buffer)
    picked: dict = {}
    for name in ("match_score", "ats_score"):
        if name in keys:
            match = _SCORE_VALUE.match(buffer, keys[name])
            if match:
                picked[name] = int(match.group(1))
    for name in ARRAY_FIELDS:
        if name in keys:
            picked[name] = ()
    if "role_fit_summary" in keys:
        summary = _STRING_VALUE.match(buffer, keys["role_fit_summary"])
        if summary:
            try:
                picked["role_fit_summary"] = json.loads(summary.group(1))
            except json.JSONDecodeError:
                pass  # escape sequence still incomplete
    if not picked:
        return None
    return PartialResult(**picked)


def has_new_data(new: PartialResult, last: PartialResult | None) -> bool:
    """Meaningfulness test between a candidate and the last emitted partial."""
    if last is None:
        last = PartialResult()

    for name in ("match_score", "ats_score"):
        value = getattr(new, name)
        if value is not None and value != getattr(last, name):
            return True

    last_lengths = last.array_lengths()
    for name, length in new.array_lengths().items():
        if length > last_lengths[name]:
            return True

    return bool(new.role_fit_summary) and new.role_fit_summary != last.role_fit_summary


class StreamDecoder:
    """Accumulated buffer plus last-emitted snapshot for one streaming session."""

    def __init__(self) -> None:
        self._chunks: list[str] = []
        self._last_emitted: PartialResult | None = None
        self._finished = False

    @property
    def buffer(self) -> str:
        return "".join(self._chunks)

    @property
    def last_emitted(self) -> PartialResult | None:
        return self._last_emitted

    def feed(self, fragment: str) -> PartialResult | None:
        """Add a fragment; return a partial result only when it carries news."""
        if self._finished:
            raise RuntimeError("StreamDecoder already finished")
        if not fragment:
            return None
        self._chunks.append(fragment)
        buffer = self.buffer

        candidate: PartialResult | None = None
        try:
            data = json.loads(clean_json_content(buffer))
        except json.JSONDecodeError:
            data = None
        if isinstance(data, dict):
            candidate = PartialResult.from_candidate(data)
        else:
            candidate = extract_partial(buffer)

        if candidate is None or not has_new_data(candidate, self._last_emitted):
            return None
        self._last_emitted = candidate
        return candidate

    def finish(self) -> CanonicalResult:
        """Parse and strictly validate the complete buffer."""
        if self._finished:
            raise RuntimeError("StreamDecoder already finished")
        self._finished = True
        buffer = self.buffer
        if not buffer.strip():
            raise MalformedOutputError("Empty response from inference stream")
        return require_valid(parse_json_object(buffer))


async def decode_stream(
    fragments: AsyncIterable[str],
) -> AsyncIterator[PartialResult | CanonicalResult]:
    """Yield meaningful partial results, then exactly one canonical result."""
    decoder = StreamDecoder()
    emitted = 0
    async for fragment in fragments:
        partial = decoder.feed(fragment)
        if partial is not None:
            emitted += 1
            yield partial
    result = decoder.finish()
    logger.debug("Stream decoded: %d partial emission(s)", emitted)
    yield result


async def decode_stream_closing(
    fragments: AsyncIterator[str],
) -> AsyncIterator[PartialResult | CanonicalResult]:
    """:func:`decode_stream` that closes ``fragments`` when it stops, early or not."""
    async with aclosing(fragments) as source:
        async with aclosing(decode_stream(source)) as decoded:
            async for item in decoded:
                yield item
