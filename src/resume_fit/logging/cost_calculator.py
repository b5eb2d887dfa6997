"""Token-based cost estimates for Claude models."""

from __future__ import annotations

from typing import NamedTuple


class ModelPricing(NamedTuple):
    """USD per 1M tokens."""

    input: float
    output: float


# Keyed by model family; dated snapshots and aliases resolve by prefix.
MODEL_PRICING: dict[str, ModelPricing] = {
    "claude-haiku-4-5": ModelPricing(input=1.00, output=5.00),
    "claude-sonnet-4-5": ModelPricing(input=3.00, output=15.00),
}


def pricing_for(model_id: str) -> ModelPricing | None:
    for family, pricing in MODEL_PRICING.items():
        if model_id == family or model_id.startswith(family + "-"):
            return pricing
    return None


def calculate_cost(calls: list[tuple[str, int, int]]) -> float:
    """Estimate the USD cost of ``(model_id, input_tokens, output_tokens)`` calls.

    Models without a known price are counted as free.
    """
    total = 0.0
    for model_id, input_tokens, output_tokens in calls:
        pricing = pricing_for(model_id)
        if pricing is None:
            continue
        total += (input_tokens * pricing.input + output_tokens * pricing.output) / 1_000_000
    return total
