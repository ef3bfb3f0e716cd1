"""Advisory metadata about the structure of an upstream response."""

from pydantic import BaseModel, ConfigDict


class ValidationResult(BaseModel):
    """Outcome of the structural marker check.

    Never used as a gate: parsing proceeds whatever the outcome.
    """
    model_config = ConfigDict(frozen=True)

    is_valid: bool
    quality: int  # 0-100
    errors: tuple[str, ...] = ()
    has_required_elements: bool = False


class ConsistencyEstimate(BaseModel):
    """Coarse trust estimate for a response, optionally against a previous one."""
    model_config = ConfigDict(frozen=True)

    level: str  # very_high, high, medium, low
    percentage: int  # 10-100
    reasoning: str = ""
