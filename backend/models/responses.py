from pydantic import BaseModel

from models.schemas import (
    AnalysisKind,
    AnalysisResult,
    ConsistencyEstimate,
    GenerationConfig,
    QualityReview,
    SpeciesIdentification,
    ValidationResult,
)


class AnalysisResponse(BaseModel):
    analysis_type: AnalysisKind
    freshness: AnalysisResult | None = None
    species: SpeciesIdentification | None = None
    validation: ValidationResult
    consistency: ConsistencyEstimate
    review: QualityReview | None = None
    recommendations: list[str] = []
    generation_config: GenerationConfig = GenerationConfig()
    degraded: bool = False
