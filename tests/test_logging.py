"""Tests for UsageLog model, UsageStore and cost calculation."""

from __future__ import annotations

from datetime import datetime, timedelta

import pytest

from resume_fit.logging.cost_calculator import ModelPricing, calculate_cost, pricing_for
from resume_fit.logging.models import UsageLog
from resume_fit.logging.usage_store import UsageStore


# --- UsageLog model tests ---


class TestUsageLog:
    def test_create_minimal(self):
        log = UsageLog(endpoint="analyze")
        assert log.endpoint == "analyze"
        assert log.client_id == "anonymous"
        assert log.success is True
        assert log.status_code == 200
        assert log.id  # uuid auto-generated

    def test_tokens_used(self):
        log = UsageLog(endpoint="stream", input_tokens=300, output_tokens=120)
        assert log.tokens_used == 420

    def test_unique_ids(self):
        assert UsageLog(endpoint="analyze").id != UsageLog(endpoint="analyze").id

    def test_timestamp_auto(self):
        before = datetime.now()
        log = UsageLog(endpoint="analyze")
        after = datetime.now()
        assert before <= log.timestamp <= after


# --- UsageStore tests ---


@pytest.fixture
def usage_store(tmp_path):
    return UsageStore(tmp_path / "usage.db")


class TestUsageStore:
    def test_save_and_get(self, usage_store):
        log = UsageLog(
            client_id="cli",
            endpoint="analyze",
            input_tokens=1000,
            output_tokens=200,
            latency_ms=850,
            estimated_cost_usd=0.002,
        )
        usage_store.save_log(log)
        logs = usage_store.get_logs()
        assert len(logs) == 1
        assert logs[0] == log

    def test_failure_round_trip(self, usage_store):
        usage_store.save_log(
            UsageLog(endpoint="stream", status_code=502, success=False, error_message="boom")
        )
        log = usage_store.get_logs()[0]
        assert log.success is False
        assert log.error_message == "boom"

    def test_newest_first_and_filter(self, usage_store):
        now = datetime.now()
        usage_store.save_log(UsageLog(client_id="a", endpoint="analyze", timestamp=now))
        usage_store.save_log(
            UsageLog(client_id="b", endpoint="analyze", timestamp=now + timedelta(seconds=1))
        )
        assert [log.client_id for log in usage_store.get_logs()] == ["b", "a"]
        assert [log.client_id for log in usage_store.get_logs(client_id="a")] == ["a"]
        assert len(usage_store.get_logs(limit=1)) == 1

    def test_summary_empty(self, usage_store):
        summary = usage_store.get_summary()
        assert summary["total_requests"] == 0
        assert summary["avg_latency_ms"] is None
        assert summary["success_rate"] == 0.0

    def test_summary(self, usage_store):
        usage_store.save_log(
            UsageLog(endpoint="analyze", input_tokens=100, output_tokens=50, latency_ms=100,
                     estimated_cost_usd=0.01)
        )
        usage_store.save_log(
            UsageLog(endpoint="analyze", input_tokens=10, latency_ms=200, success=False,
                     status_code=502)
        )
        summary = usage_store.get_summary()
        assert summary["total_requests"] == 2
        assert summary["total_input_tokens"] == 110
        assert summary["total_output_tokens"] == 50
        assert summary["avg_latency_ms"] == 150.0
        assert summary["total_cost_usd"] == pytest.approx(0.01)
        assert summary["success_rate"] == 50.0


# --- Cost calculator tests ---


class TestCalculateCost:
    def test_haiku_pricing(self):
        cost = calculate_cost([("claude-haiku-4-5-20251001", 1_000_000, 1_000_000)])
        assert cost == pytest.approx(6.0)

    def test_multiple_calls(self):
        calls = [
            ("claude-haiku-4-5-20251001", 2000, 500),
            ("claude-sonnet-4-5-20250929", 1000, 100),
        ]
        expected = (2000 * 1.0 + 500 * 5.0 + 1000 * 3.0 + 100 * 15.0) / 1_000_000
        assert calculate_cost(calls) == pytest.approx(expected)

    def test_unknown_model_free(self):
        assert calculate_cost([("some-other-model", 5000, 5000)]) == 0.0

    def test_empty(self):
        assert calculate_cost([]) == 0.0

    def test_alias_and_snapshot_resolve(self):
        assert pricing_for("claude-sonnet-4-5") == ModelPricing(input=3.00, output=15.00)
        assert pricing_for("claude-sonnet-4-5-20250929") == pricing_for("claude-sonnet-4-5")
        assert pricing_for("claude-sonnet-4-50") is None
