"""Reproducible generation parameters for the upstream vision model.

Sampling is kept narrow (low temperature, small top-k/top-p, one
candidate) and the seed is derived from the image bytes, so the same
photo uploaded twice asks for the same generation.
"""

import hashlib

from models.schemas import AnalysisKind, GenerationConfig

DEFAULT_SEED = 42
SEED_MODULUS = 1_000_000

CREATIVITY_LEVEL = 0.1
SPECIES_CREATIVITY_LEVEL = 0.05


def image_seed(image_bytes: bytes | None) -> int:
    """Seed in [0, 1_000_000) from the SHA-256 digest of the image."""
    if not image_bytes:
        return DEFAULT_SEED
    digest = hashlib.sha256(image_bytes).digest()
    return int.from_bytes(digest[:8], "big") % SEED_MODULUS


def generation_config(
    kind: AnalysisKind | str,
    image_bytes: bytes | None = None,
) -> GenerationConfig:
    kind = AnalysisKind(kind)
    creativity = SPECIES_CREATIVITY_LEVEL if kind is AnalysisKind.SPECIES else CREATIVITY_LEVEL
    return GenerationConfig(creativity_level=creativity, seed=image_seed(image_bytes))
