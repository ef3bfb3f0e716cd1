"""Per-attribute score produced by the attribute scorer."""

from pydantic import BaseModel, ConfigDict

from models.schemas.enums import Confidence


class AttributeScore(BaseModel):
    """Score, condition and justification for one physical trait.

    ``score`` is an integer in [1, 9] for scorable attributes and ``None``
    for attributes that are informational only under the active rule set.
    """
    model_config = ConfigDict(frozen=True)

    name: str
    label: str
    score: int | None = None
    condition: str
    reasoning: str = ""
    is_scorable: bool
    confidence: Confidence
    matched_keyword: str | None = None
