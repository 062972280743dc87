"""Strategy Selector: rational/emotional messaging split from purchase involvement."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel


class Approach(str, Enum):
    RATIONAL = "rational"
    EMOTIONAL = "emotional"


class StrategyDecision(BaseModel):
    approach: Approach
    ratio: str
    psychology: str

    @property
    def is_rational(self) -> bool:
        return self.approach == Approach.RATIONAL


RATIONAL_STRATEGY = StrategyDecision(
    approach=Approach.RATIONAL,
    ratio="70% Rational, 30% Emotional",
    psychology=(
        "Detailed proof-based messaging: leverage System 2 thinking with "
        "logical proof points, comparisons and measurable results"
    ),
)

EMOTIONAL_STRATEGY = StrategyDecision(
    approach=Approach.EMOTIONAL,
    ratio="30% Rational, 70% Emotional",
    psychology=(
        "Emotional storytelling: trigger System 1 responses with emotional "
        "imagery, social proof and a simple, memorable message"
    ),
)


def select_strategy(high_involvement: bool) -> StrategyDecision:
    """High involvement purchases lean rational (70/30); everything else emotional."""
    return RATIONAL_STRATEGY if high_involvement else EMOTIONAL_STRATEGY
