"""Overall score and quality category from per-attribute scores."""

from collections.abc import Iterable
from decimal import ROUND_HALF_UP, Decimal

from models.schemas import AttributeScore, Category

# Used when no attribute carries a score
NEUTRAL_SCORE = 6.0

# Inclusive lower bounds, best category first
CATEGORY_THRESHOLDS: tuple[tuple[float, Category], ...] = (
    (8.5, Category.PRIME),
    (7.0, Category.GOOD),
    (4.5, Category.FAIR),
)


def round_half_up(value: float, places: int = 1) -> float:
    """Round like a person would (6.65 -> 6.7), not banker's rounding."""
    quantum = Decimal(1).scaleb(-places)
    return float(Decimal(str(value)).quantize(quantum, rounding=ROUND_HALF_UP))


def categorize(score: float) -> Category:
    for threshold, category in CATEGORY_THRESHOLDS:
        if score >= threshold:
            return category
    return Category.POOR


def aggregate(attributes: Iterable[AttributeScore]) -> tuple[float, Category]:
    """Mean of the non-null scores (one decimal, half-up) and its category.

    Falls back to ``NEUTRAL_SCORE`` when nothing was scored.
    """
    scores = [attr.score for attr in attributes if attr.score is not None]
    if not scores:
        overall = NEUTRAL_SCORE
    else:
        overall = round_half_up(sum(scores) / len(scores))
    return overall, categorize(overall)
