"""Advisory checks on an upstream response before it is parsed.

Nothing here gates parsing: the validation result and the consistency
estimate travel alongside the parsed analysis as metadata.
"""

import logging
import re

from rapidfuzz import fuzz

from models.schemas import AnalysisKind, ConsistencyEstimate, ValidationResult
from services.prompt_builder import (
    CATEGORY_MARKER,
    CHARACTERISTICS_MARKER,
    CONFIDENCE_MARKER,
    CONSISTENCY_KEYWORDS,
    EYES_ROW_MARKER,
    OVERALL_SCORE_MARKER,
    SPECIES_NAME_MARKER,
    TABLE_HEADER_MARKER,
)

logger = logging.getLogger(__name__)

# (marker, error message, deduction) per required element
SPECIES_CHECKS: tuple[tuple[str, str, int], ...] = (
    (SPECIES_NAME_MARKER, "Missing species name format", 30),
    (CONFIDENCE_MARKER, "Missing confidence indicator", 20),
    (CHARACTERISTICS_MARKER, "Missing characteristics section", 15),
)
FRESHNESS_CHECKS: tuple[tuple[str, str, int], ...] = (
    (OVERALL_SCORE_MARKER, "Missing overall score", 30),
    (CATEGORY_MARKER, "Missing category classification", 25),
)
TABLE_ERROR = "Missing parameter table"
TABLE_DEDUCTION = 20
KEYWORDS_ERROR = "Missing consistency keywords"
KEYWORDS_DEDUCTION = 10
MIN_CONSISTENCY_KEYWORDS = 2

MIN_VALID_QUALITY = 50
MAX_VALID_ERRORS = 1

BASE_CONSISTENCY = 85
DETAILED_LENGTH = 500

_NUMERIC_SCORE_RE = re.compile(r"\d+[.,]\d+\s*/\s*\d+")
_UNIDENTIFIED_RE = re.compile(r"tidak\s+teridentifikasi|unidentified", re.IGNORECASE)


def _wants_species(kind: AnalysisKind) -> bool:
    return kind in (AnalysisKind.SPECIES, AnalysisKind.BOTH)


def _wants_freshness(kind: AnalysisKind) -> bool:
    return kind in (AnalysisKind.FRESHNESS, AnalysisKind.BOTH)


def validate_response(text: object, kind: AnalysisKind | str) -> ValidationResult:
    """Check the response for the markers its prompt asked for.

    Quality starts at 100 and loses a fixed deduction per missing element.
    A response is valid with at most one error and quality above 50.
    """
    kind = AnalysisKind(kind)
    text = text if isinstance(text, str) else ""
    errors: list[str] = []
    quality = 100

    checks: list[tuple[str, str, int]] = []
    if _wants_species(kind):
        checks.extend(SPECIES_CHECKS)
    if _wants_freshness(kind):
        checks.extend(FRESHNESS_CHECKS)

    for marker, message, deduction in checks:
        if marker not in text:
            errors.append(message)
            quality -= deduction

    if _wants_freshness(kind):
        if TABLE_HEADER_MARKER not in text or EYES_ROW_MARKER not in text:
            errors.append(TABLE_ERROR)
            quality -= TABLE_DEDUCTION

    found = sum(1 for keyword in CONSISTENCY_KEYWORDS if keyword in text)
    if found < MIN_CONSISTENCY_KEYWORDS:
        errors.append(KEYWORDS_ERROR)
        quality -= KEYWORDS_DEDUCTION

    quality = max(0, quality)
    result = ValidationResult(
        is_valid=len(errors) <= MAX_VALID_ERRORS and quality > MIN_VALID_QUALITY,
        quality=quality,
        errors=tuple(errors),
        has_required_elements=not errors,
    )
    if errors:
        logger.info("Response validation (%s): quality=%d errors=%s", kind.value, quality, errors)
    return result


def similarity(text: str, previous: str) -> float:
    """Token-set similarity in [0, 1], insensitive to word order and repeats."""
    if not text or not previous:
        return 0.0
    return fuzz.token_set_ratio(text.lower(), previous.lower()) / 100.0


def consistency_level(percentage: int) -> str:
    if percentage >= 90:
        return "very_high"
    if percentage >= 75:
        return "high"
    if percentage >= 50:
        return "medium"
    return "low"


def _reasoning(level: str, kind: AnalysisKind, complete: bool) -> str:
    if level == "very_high":
        detail = "species identification" if kind is AnalysisKind.SPECIES else "numeric scores"
        return f"Highly consistent: fixed parameters and clear {detail}"
    if level == "high":
        return f"Consistent result with {'complete data' if complete else 'standard analysis'}"
    if level == "medium":
        return "Fairly consistent, some variability in the analysis"
    return "Low consistency, re-running the analysis is recommended"


def estimate_consistency(
    text: object,
    kind: AnalysisKind | str,
    previous: str | None = None,
) -> ConsistencyEstimate:
    """Estimate how reproducible a response is likely to be (10-100).

    Rewards a named species or numeric scores, the standard reference and
    a detailed answer; similarity with a previous response for the same
    image moves the estimate up or down.
    """
    kind = AnalysisKind(kind)
    text = text if isinstance(text, str) else ""
    percentage = BASE_CONSISTENCY

    has_species = SPECIES_NAME_MARKER in text and not _UNIDENTIFIED_RE.search(text)
    has_scores = bool(_NUMERIC_SCORE_RE.search(text))

    if _wants_species(kind):
        if has_species:
            percentage += 10
        if "**Nama Ilmiah**" in text:
            percentage += 5
    if _wants_freshness(kind):
        if has_scores:
            percentage += 10
        if CONSISTENCY_KEYWORDS[0] in text:
            percentage += 5

    if len(text) > DETAILED_LENGTH:
        percentage += 5

    if previous:
        score = similarity(text, previous)
        if score > 0.8:
            percentage += 10
        elif score < 0.3:
            percentage -= 20

    percentage = min(100, max(10, percentage))
    level = consistency_level(percentage)
    return ConsistencyEstimate(
        level=level,
        percentage=percentage,
        reasoning=_reasoning(level, kind, has_species or has_scores),
    )
