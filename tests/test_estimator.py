"""
Unit tests for monthly cost estimation.

Tests cost accuracy, rounding behavior, scoring, and error handling.
"""

import pytest
import structlog

from llm_cost_score.core.estimator import (
    CostBreakdownEntry,
    InvalidCostCeilingError,
    cost_score,
    estimate,
    estimate_many,
)
from llm_cost_score.core.pricing import ModelCandidate
from llm_cost_score.core.usage import MONTHLY_USAGE, UsagePattern


def _candidate(prompt_price=1.0, completion_price=2.0, model_id="test/model"):
    return ModelCandidate(id=model_id, prompt_price=prompt_price, completion_price=completion_price)


def _million_input_calls() -> tuple:
    """Usage table whose monthly cost equals the prompt price."""
    return (UsagePattern(pattern="Bulk", calls=1_000_000, input_tokens=1, output_tokens=0),)


class TestCostCalculation:
    """Test per-pattern and monthly cost accuracy."""

    def test_single_pattern_example(self):
        """Verify input and output costs are priced per million tokens."""
        usage = [UsagePattern(pattern="Chat", calls=1000, input_tokens=500, output_tokens=200)]
        result = estimate(_candidate(1.0, 2.0), usage, 5.0)
        # Input: 1000*500/1e6 * $1.00 = $0.50
        # Output: 1000*200/1e6 * $2.00 = $0.40
        assert result.breakdown == (
            CostBreakdownEntry(
                pattern="Chat",
                calls_per_month=1000,
                input_tokens=500,
                output_tokens=200,
                monthly_cost=0.9,
            ),
        )
        assert result.monthly_cost_per_user == 0.9
        assert result.model_id == "test/model"

    def test_empty_usage_table(self):
        """Verify an empty table is free and scores 100."""
        result = estimate(_candidate(), [], 5.0)
        assert result.monthly_cost_per_user == 0.0
        assert result.breakdown == ()
        assert result.score == 100.0

    def test_zero_price_candidate(self):
        """Verify a free model scores 100 under any usage."""
        result = estimate(_candidate(0.0, 0.0), MONTHLY_USAGE, 5.0)
        assert result.monthly_cost_per_user == 0.0
        assert result.score == 100.0
        assert all(entry.monthly_cost == 0.0 for entry in result.breakdown)

    def test_default_usage_table(self):
        """Verify defaults are used when no table or ceiling is given."""
        result = estimate(_candidate(1.0, 2.0))
        assert len(result.breakdown) == len(MONTHLY_USAGE)
        assert [e.monthly_cost for e in result.breakdown] == [
            1.305, 0.126, 0.222, 0.0173, 0.0138, 0.033, 0.13,
        ]
        # Unrounded total is 1.84705
        assert result.monthly_cost_per_user == 1.8471
        # 100 * (1 - 1.84705 / 5) = 63.059
        assert result.score == 63.1
        assert result.grade == "D"

    def test_breakdown_length_matches_usage(self):
        """Verify one entry is produced per usage pattern."""
        usage = [
            UsagePattern(pattern=f"p{i}", calls=i, input_tokens=10, output_tokens=10)
            for i in range(5)
        ]
        result = estimate(_candidate(), usage, 5.0)
        assert len(result.breakdown) == 5


class TestRounding:
    """Test rounding of breakdown entries and totals."""

    def test_half_rounds_away_from_zero(self):
        """Verify $0.00005 rounds up to $0.0001."""
        usage = [UsagePattern(pattern="Tiny", calls=1, input_tokens=50, output_tokens=0)]
        result = estimate(_candidate(1.0, 0.0), usage, 5.0)
        assert result.breakdown[0].monthly_cost == 0.0001
        assert result.monthly_cost_per_user == 0.0001

    def test_total_rounded_once_from_unrounded_costs(self):
        """Verify the total is not the sum of rounded entries."""
        usage = [
            UsagePattern(pattern=name, calls=1, input_tokens=50, output_tokens=0)
            for name in ("a", "b", "c")
        ]
        result = estimate(_candidate(1.0, 0.0), usage, 5.0)
        rounded_sum = sum(entry.monthly_cost for entry in result.breakdown)
        # Each pattern costs $0.00005 -> $0.0001 when rounded
        assert rounded_sum == pytest.approx(0.0003)
        # Total is $0.00015 -> $0.0002
        assert result.monthly_cost_per_user == 0.0002
        assert result.monthly_cost_per_user != pytest.approx(rounded_sum)

    def test_non_terminating_fractions(self):
        """Verify totals built from repeating fractions are rounded once."""
        usage = [
            UsagePattern(pattern=name, calls=3, input_tokens=11, output_tokens=7)
            for name in ("a", "b", "c")
        ]
        result = estimate(_candidate(1.3333, 0.6667), usage, 5.0)
        # Per pattern: 33/1e6 * 1.3333 + 21/1e6 * 0.6667 = 0.0000579996
        assert [e.monthly_cost for e in result.breakdown] == [0.0001, 0.0001, 0.0001]
        assert result.monthly_cost_per_user == 0.0002

    def test_score_rounded_to_one_decimal(self):
        """Verify score precision."""
        result = estimate(_candidate(1.23, 0.0), _million_input_calls(), 5.0)
        assert result.monthly_cost_per_user == 1.23
        assert result.score == 75.4


class TestScoring:
    """Test the affordability scoring curve."""

    def test_cost_at_ceiling_scores_zero(self):
        """Verify a cost equal to the ceiling scores 0."""
        result = estimate(_candidate(5.0, 0.0), _million_input_calls(), 5.0)
        assert result.monthly_cost_per_user == 5.0
        assert result.score == 0.0

    def test_overshoot_is_clamped(self):
        """Verify a cost above the ceiling never scores below 0."""
        result = estimate(_candidate(10.0, 0.0), _million_input_calls(), 5.0)
        assert result.monthly_cost_per_user == 10.0
        assert result.score == 0.0

    @pytest.mark.parametrize("cost,expected", [
        (0.0, 100.0),
        (1.0, 80.0),
        (2.5, 50.0),
        (4.0, 20.0),
    ])
    def test_score_is_linear_in_cost(self, cost, expected):
        """Verify score = 100 * (1 - cost / ceiling) below the ceiling."""
        result = estimate(_candidate(cost, 0.0), _million_input_calls(), 5.0)
        assert result.score == expected
        assert result.score == pytest.approx(100 * (1 - cost / 5.0))

    def test_cheaper_model_scores_higher(self):
        """Verify score decreases as cost increases."""
        cheap = estimate(_candidate(1.0, 0.0), _million_input_calls(), 5.0)
        pricey = estimate(_candidate(3.0, 0.0), _million_input_calls(), 5.0)
        assert cheap.score > pricey.score

    def test_cost_score_negative_cost_capped_at_100(self):
        """Verify the upper clamp bounds scores at 100."""
        assert cost_score(-1.0, 5.0) == 100.0

    def test_cost_score_matches_estimate(self):
        """Verify cost_score uses the same curve as estimate."""
        assert cost_score(1.84705) == 63.1
        assert cost_score(7.5, 5.0) == 0.0


class TestOrdering:
    """Test breakdown ordering."""

    def test_breakdown_preserves_input_order(self):
        """Verify entries follow the usage table, not cost magnitude."""
        usage = [
            UsagePattern(pattern="small", calls=1, input_tokens=10, output_tokens=0),
            UsagePattern(pattern="large", calls=1000, input_tokens=1000, output_tokens=0),
            UsagePattern(pattern="medium", calls=100, input_tokens=100, output_tokens=0),
        ]
        result = estimate(_candidate(1.0, 0.0), usage, 5.0)
        assert [e.pattern for e in result.breakdown] == ["small", "large", "medium"]


class TestErrorHandling:
    """Test invalid configuration handling."""

    @pytest.mark.parametrize("ceiling", [0, 0.0, -5.0])
    def test_non_positive_ceiling_raises(self, ceiling):
        """Verify a non-positive ceiling fails fast."""
        with pytest.raises(InvalidCostCeilingError, match="max_monthly_cost must be > 0"):
            estimate(_candidate(), MONTHLY_USAGE, ceiling)

    def test_non_positive_ceiling_raises_for_empty_usage(self):
        """Verify the ceiling is checked before any pattern is priced."""
        with pytest.raises(InvalidCostCeilingError):
            estimate(_candidate(), [], 0.0)

    def test_ceiling_error_is_value_error(self):
        """Verify callers catching ValueError see the ceiling error."""
        with pytest.raises(ValueError):
            cost_score(1.0, -1.0)

    @pytest.mark.parametrize("ceiling", [float("nan"), float("inf"), float("-inf")])
    def test_non_finite_ceiling_raises(self, ceiling):
        """Verify NaN and infinite ceilings raise the ceiling error."""
        with pytest.raises(InvalidCostCeilingError, match="must be > 0 and finite"):
            estimate(_candidate(), [], ceiling)
        with pytest.raises(InvalidCostCeilingError):
            cost_score(1.0, ceiling)

    @pytest.mark.parametrize("cost", [float("nan"), float("inf")])
    def test_cost_score_non_finite_cost_raises(self, cost):
        """Verify a non-finite monthly cost is rejected."""
        with pytest.raises(ValueError, match="monthly_cost must be finite"):
            cost_score(cost, 5.0)


class TestSideEffects:
    """Test that estimation is silent for library callers."""

    def test_estimate_writes_nothing_without_logging_setup(self, capsys):
        """Verify estimate() prints nothing when logging is unconfigured."""
        structlog.reset_defaults()
        estimate(_candidate(), MONTHLY_USAGE, 5.0)
        estimate_many([_candidate(), _candidate(0.0, 0.0)], [], 5.0)
        captured = capsys.readouterr()
        assert captured.out == ""
        assert captured.err == ""


class TestEstimateMany:
    """Test estimating several candidates."""

    def test_preserves_candidate_order(self):
        """Verify results follow the candidate order without ranking."""
        candidates = [
            _candidate(3.0, 3.0, model_id="expensive"),
            _candidate(0.1, 0.1, model_id="cheap"),
            _candidate(1.0, 1.0, model_id="middle"),
        ]
        results = estimate_many(candidates, MONTHLY_USAGE, 5.0)
        assert [r.model_id for r in results] == ["expensive", "cheap", "middle"]
        assert results == [estimate(c, MONTHLY_USAGE, 5.0) for c in candidates]

    def test_empty_candidates(self):
        assert estimate_many([]) == []

    def test_invalid_ceiling_raises_without_candidates(self):
        with pytest.raises(InvalidCostCeilingError):
            estimate_many([], MONTHLY_USAGE, 0.0)
