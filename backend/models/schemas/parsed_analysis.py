"""Everything derived from one upstream response."""

from pydantic import BaseModel, ConfigDict

from models.schemas.analysis_result import AnalysisResult
from models.schemas.enums import AnalysisKind
from models.schemas.quality_review import QualityReview
from models.schemas.species_identification import SpeciesIdentification
from models.schemas.validation_result import ConsistencyEstimate, ValidationResult


class ParsedAnalysis(BaseModel):
    """Parsed result for one analysis kind.

    ``freshness`` is set for the freshness and combined kinds, ``species``
    for the species and combined kinds. Validation and consistency are
    advisory and never block parsing.
    """
    model_config = ConfigDict(frozen=True)

    kind: AnalysisKind
    freshness: AnalysisResult | None = None
    species: SpeciesIdentification | None = None
    validation: ValidationResult
    consistency: ConsistencyEstimate
    review: QualityReview | None = None
    recommendations: tuple[str, ...] = ()
