"""
Model pricing candidates and cost classification.

Prices are quoted per 1,000,000 tokens, as in provider catalogs.
"""

import math
from dataclasses import dataclass
from enum import Enum
from typing import Optional


# Monthly cost per user at which a candidate scores 0
MAX_MONTHLY_COST = 5.0

# Completion price (per 1M tokens) upper bounds for each tier
CHEAP_TIER_MAX = 0.50
MID_TIER_MAX = 3.0


class CostTier(Enum):
    """Price band of a model based on its completion price."""
    CHEAP = "cheap"
    MID = "mid"
    PREMIUM = "premium"


@dataclass(frozen=True)
class ModelCandidate:
    """Pricing for a model under evaluation."""
    id: str
    prompt_price: float  # Cost per 1M prompt tokens
    completion_price: float  # Cost per 1M completion tokens
    name: Optional[str] = None

    def __post_init__(self):
        """Validate identifier and prices."""
        if not self.id or not self.id.strip():
            raise ValueError("id is required and cannot be empty")
        if not math.isfinite(self.prompt_price):
            raise ValueError("prompt_price must be finite")
        if self.prompt_price < 0:
            raise ValueError("prompt_price cannot be negative")
        if not math.isfinite(self.completion_price):
            raise ValueError("completion_price must be finite")
        if self.completion_price < 0:
            raise ValueError("completion_price cannot be negative")

    @property
    def display_name(self) -> str:
        return self.name or self.id


def cost_tier(completion_price: float) -> CostTier:
    """Classify a completion price (per 1M tokens) into a cost tier."""
    if completion_price < CHEAP_TIER_MAX:
        return CostTier.CHEAP
    if completion_price < MID_TIER_MAX:
        return CostTier.MID
    return CostTier.PREMIUM


_GRADE_THRESHOLDS = (
    (97, "A+"),
    (93, "A"),
    (90, "A-"),
    (87, "B+"),
    (83, "B"),
    (80, "B-"),
    (77, "C+"),
    (73, "C"),
    (70, "C-"),
    (67, "D+"),
    (63, "D"),
    (60, "D-"),
)


def letter_grade(score: float) -> str:
    """Convert a 0-100 score to a letter grade.

    Args:
        score: Score in the range 0-100

    Returns:
        Letter grade from "A+" down to "F"
    """
    for threshold, grade in _GRADE_THRESHOLDS:
        if score >= threshold:
            return grade
    return "F"
