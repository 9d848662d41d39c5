"""
Monthly usage patterns.

Describes how often an application calls a model and how many tokens
each call consumes.
"""

import math
from dataclasses import dataclass
from typing import Tuple


@dataclass(frozen=True)
class UsagePattern:
    """Named monthly workload shape for one application feature.

    Token counts are per call; calls are per user per month.
    """
    pattern: str
    calls: int
    input_tokens: int
    output_tokens: int

    def __post_init__(self):
        """Validate counts are finite and non-negative."""
        if not self.pattern or not self.pattern.strip():
            raise ValueError("pattern is required and cannot be empty")
        for field in ("calls", "input_tokens", "output_tokens"):
            if not math.isfinite(getattr(self, field)):
                raise ValueError(f"{field} must be finite")
        if self.calls < 0:
            raise ValueError("calls cannot be negative")
        if self.input_tokens < 0:
            raise ValueError("input_tokens cannot be negative")
        if self.output_tokens < 0:
            raise ValueError("output_tokens cannot be negative")

    @property
    def total_tokens(self) -> int:
        """Tokens consumed per month (input + output across all calls)."""
        return self.calls * (self.input_tokens + self.output_tokens)


# Default per-user monthly usage
MONTHLY_USAGE: Tuple[UsagePattern, ...] = (
    UsagePattern(pattern="Part Thoughts", calls=900, input_tokens=1150, output_tokens=150),
    UsagePattern(pattern="Emotion Detection", calls=450, input_tokens=240, output_tokens=20),
    UsagePattern(pattern="Reflection", calls=60, input_tokens=2100, output_tokens=800),
    UsagePattern(pattern="Emergence", calls=15, input_tokens=850, output_tokens=150),
    UsagePattern(pattern="Growth", calls=6, input_tokens=1100, output_tokens=600),
    UsagePattern(pattern="Explorations", calls=30, input_tokens=500, output_tokens=300),
    UsagePattern(pattern="Others", calls=100, input_tokens=900, output_tokens=200),
)
