"""Generation parameters requested from the upstream vision model."""

from pydantic import BaseModel, ConfigDict, Field


class GenerationConfig(BaseModel):
    """Fixed sampling parameters plus an image-derived seed.

    Identical image bytes always yield an identical config, so repeated
    uploads request identical generation behaviour upstream.
    """
    model_config = ConfigDict(frozen=True)

    creativity_level: float = Field(0.1, ge=0.0, le=2.0)  # sent as temperature
    top_k: int = 10
    top_p: float = 0.3
    candidate_count: int = 1
    max_output_length: int = 1500
    seed: int = 42
