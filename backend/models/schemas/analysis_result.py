"""Aggregated freshness grade for one upstream response."""

from pydantic import BaseModel, ConfigDict

from models.schemas.attribute_score import AttributeScore
from models.schemas.enums import Category

GENERIC_SUBJECT = "Fish"


class AnalysisResult(BaseModel):
    """Structured freshness analysis (SNI 2729-2013 organoleptic grading).

    Built once per call by ``fish_analyzer.analyze_freshness`` and never
    mutated afterwards.
    """
    model_config = ConfigDict(frozen=True)

    attributes: tuple[AttributeScore, ...] = ()
    overall_score: float
    category: Category
    scorable_count: int = 0
    auto_assigned_count: int = 0
    warnings: tuple[str, ...] = ()
    subject_name: str = GENERIC_SUBJECT

    def attribute(self, name: str) -> AttributeScore | None:
        """Look up an attribute by its stable identifier."""
        for attr in self.attributes:
            if attr.name == name:
                return attr
        return None
