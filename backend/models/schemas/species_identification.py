"""Species identity extracted from an upstream response."""

from pydantic import BaseModel, ConfigDict

from models.schemas.enums import SpeciesConfidence

UNIDENTIFIED_SPECIES = "Unidentified species"


class SpeciesIdentification(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str = UNIDENTIFIED_SPECIES
    scientific_name: str | None = None
    family: str | None = None
    confidence: SpeciesConfidence = SpeciesConfidence.MEDIUM  # lexical cue heuristic
    characteristics: tuple[str, ...] = ()  # at most 5
    description: str = ""
    warnings: tuple[str, ...] = ()

    @property
    def is_identified(self) -> bool:
        return self.name != UNIDENTIFIED_SPECIES
