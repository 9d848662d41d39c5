"""
Monthly cost estimation and affordability scoring.

Estimates what a model would cost per user per month under a usage table
and converts that cost into a 0-100 affordability score.

Scoring:
- A monthly cost of 0 scores 100
- A monthly cost at or above the cost ceiling scores 0
- Linear interpolation in between
"""

import math
from dataclasses import dataclass
from decimal import Decimal, ROUND_HALF_UP
from typing import Iterable, List, Sequence, Tuple

from .pricing import MAX_MONTHLY_COST, ModelCandidate, letter_grade
from .usage import MONTHLY_USAGE, UsagePattern

TOKENS_PER_PRICE_UNIT = Decimal("1000000")
COST_PRECISION = Decimal("0.0001")
SCORE_PRECISION = Decimal("0.1")


class InvalidCostCeilingError(ValueError):
    """Raised when the cost ceiling cannot produce a meaningful score."""
    def __init__(self, max_monthly_cost: float):
        super().__init__(
            f"max_monthly_cost must be > 0 and finite, got {max_monthly_cost}"
        )
        self.max_monthly_cost = max_monthly_cost


@dataclass(frozen=True)
class CostBreakdownEntry:
    """Monthly cost contributed by a single usage pattern."""
    pattern: str
    calls_per_month: int
    input_tokens: int
    output_tokens: int
    monthly_cost: float  # Rounded to 4 decimal places


@dataclass(frozen=True)
class CostResult:
    """Complete cost estimate for one model candidate."""
    model_id: str
    monthly_cost_per_user: float
    breakdown: Tuple[CostBreakdownEntry, ...]
    score: float

    @property
    def grade(self) -> str:
        """Letter grade of the affordability score."""
        return letter_grade(self.score)


def _clamp01(value: Decimal) -> Decimal:
    return max(Decimal(0), min(Decimal(1), value))


def _round_half_up(value: Decimal, precision: Decimal) -> float:
    return float(value.quantize(precision, rounding=ROUND_HALF_UP))


def _to_decimal(value: float) -> Decimal:
    # str() keeps the quoted price instead of its binary expansion
    return Decimal(str(value))


def _validate_ceiling(max_monthly_cost: float) -> Decimal:
    if not math.isfinite(max_monthly_cost) or max_monthly_cost <= 0:
        raise InvalidCostCeilingError(max_monthly_cost)
    return _to_decimal(max_monthly_cost)


def _pattern_cost(candidate: ModelCandidate, usage: UsagePattern) -> Decimal:
    """Unrounded monthly cost of one usage pattern."""
    input_cost = (
        Decimal(usage.calls * usage.input_tokens) / TOKENS_PER_PRICE_UNIT
    ) * _to_decimal(candidate.prompt_price)
    output_cost = (
        Decimal(usage.calls * usage.output_tokens) / TOKENS_PER_PRICE_UNIT
    ) * _to_decimal(candidate.completion_price)
    return input_cost + output_cost


def _score(monthly_cost: Decimal, ceiling: Decimal) -> float:
    # Clamp the ratio, not the cost, so the curve stays linear up to the ceiling
    normalized_remaining = _clamp01(1 - monthly_cost / ceiling)
    return _round_half_up(normalized_remaining * 100, SCORE_PRECISION)


def cost_score(monthly_cost: float, max_monthly_cost: float = MAX_MONTHLY_COST) -> float:
    """Score an already-known monthly cost against the cost ceiling.

    Args:
        monthly_cost: Monthly cost per user
        max_monthly_cost: Cost at or above which the score is 0

    Returns:
        Score between 0.0 and 100.0, rounded to 1 decimal place

    Raises:
        InvalidCostCeilingError: If max_monthly_cost is not positive and finite
        ValueError: If monthly_cost is not finite
    """
    ceiling = _validate_ceiling(max_monthly_cost)
    if not math.isfinite(monthly_cost):
        raise ValueError(f"monthly_cost must be finite, got {monthly_cost}")
    return _score(_to_decimal(monthly_cost), ceiling)


def estimate(
    candidate: ModelCandidate,
    usage_patterns: Sequence[UsagePattern] = MONTHLY_USAGE,
    max_monthly_cost: float = MAX_MONTHLY_COST,
) -> CostResult:
    """Estimate the monthly cost per user and affordability score of a model.

    For each usage pattern:
        input_cost  = (calls * input_tokens / 1,000,000) * prompt_price
        output_cost = (calls * output_tokens / 1,000,000) * completion_price

    Breakdown entries are rounded to 4 decimal places individually, while
    the monthly total is summed from the unrounded pattern costs and rounded
    once. All rounding is half away from zero (ROUND_HALF_UP).

    Args:
        candidate: Model pricing to evaluate
        usage_patterns: Monthly usage table; breakdown follows its order
        max_monthly_cost: Cost ceiling at which the score reaches 0

    Returns:
        CostResult with breakdown, monthly total and score

    Raises:
        InvalidCostCeilingError: If max_monthly_cost is not positive and finite
    """
    ceiling = _validate_ceiling(max_monthly_cost)

    breakdown: List[CostBreakdownEntry] = []
    monthly_cost = Decimal(0)

    for usage in usage_patterns:
        pattern_cost = _pattern_cost(candidate, usage)
        breakdown.append(CostBreakdownEntry(
            pattern=usage.pattern,
            calls_per_month=usage.calls,
            input_tokens=usage.input_tokens,
            output_tokens=usage.output_tokens,
            monthly_cost=_round_half_up(pattern_cost, COST_PRECISION),
        ))
        monthly_cost += pattern_cost

    return CostResult(
        model_id=candidate.id,
        monthly_cost_per_user=_round_half_up(monthly_cost, COST_PRECISION),
        breakdown=tuple(breakdown),
        score=_score(monthly_cost, ceiling),
    )


def estimate_many(
    candidates: Iterable[ModelCandidate],
    usage_patterns: Sequence[UsagePattern] = MONTHLY_USAGE,
    max_monthly_cost: float = MAX_MONTHLY_COST,
) -> List[CostResult]:
    """Estimate each candidate independently, preserving input order."""
    # Each estimate() checks the ceiling too; this covers an empty candidate list
    _validate_ceiling(max_monthly_cost)
    return [
        estimate(candidate, usage_patterns, max_monthly_cost)
        for candidate in candidates
    ]
