"""Immutable value objects produced by the parsing pipeline."""

from models.schemas.analysis_result import AnalysisResult
from models.schemas.attribute_score import AttributeScore
from models.schemas.enums import (
    AnalysisKind,
    Category,
    Confidence,
    ScoreSource,
    SpeciesConfidence,
)
from models.schemas.generation_config import GenerationConfig
from models.schemas.parsed_analysis import ParsedAnalysis
from models.schemas.quality_review import QualityReview
from models.schemas.species_identification import SpeciesIdentification
from models.schemas.validation_result import ConsistencyEstimate, ValidationResult

__all__ = [
    "AnalysisKind",
    "AnalysisResult",
    "AttributeScore",
    "Category",
    "Confidence",
    "ConsistencyEstimate",
    "GenerationConfig",
    "ParsedAnalysis",
    "QualityReview",
    "ScoreSource",
    "SpeciesConfidence",
    "SpeciesIdentification",
    "ValidationResult",
]
