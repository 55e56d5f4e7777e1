import decimal

import pydantic as p

from .base import BaseSettings


class GradingSettings(BaseSettings):
    """Grading policy: which terms exist and how scores are bounded.

    The engine treats these as given; it does not interpret the scale.
    """

    terms: tuple[int, ...] = (1, 2, 3)
    precision: int = p.Field(default=2, ge=0, le=2)

    default_max_score: decimal.Decimal = decimal.Decimal("20")
    max_score_ceiling: decimal.Decimal = decimal.Decimal("20")

    min_weight: decimal.Decimal = decimal.Decimal("0.5")
    max_weight: decimal.Decimal = decimal.Decimal("10")

    @p.model_validator(mode="after")
    def check_bounds(self) -> "GradingSettings":
        if not self.terms:
            raise ValueError("at least one term must be configured")
        if self.default_max_score > self.max_score_ceiling:
            raise ValueError("default_max_score exceeds max_score_ceiling")
        if not (0 < self.min_weight <= self.max_weight):
            raise ValueError("weights must satisfy 0 < min_weight <= max_weight")
        return self
