"""Plausibility review of a freshness analysis."""

from pydantic import BaseModel, ConfigDict


class QualityReview(BaseModel):
    model_config = ConfigDict(frozen=True)

    is_valid: bool
    issues: tuple[str, ...] = ()
    warnings: tuple[str, ...] = ()
    confidence: float = 1.0  # 0.6-1.0
