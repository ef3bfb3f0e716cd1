"""Orchestrator: upstream text -> immutable analysis results.

Pipeline:
1. Coerce the upstream payload to text (anything else counts as empty)
2. Advisory structural validation and consistency estimate
3. Attribute scoring per rule (explicit score -> keyword -> default)
4. Aggregation into an overall score and category
5. Species extraction
6. Quality review and recommendations

Parsing always proceeds; an unusable response yields defaults flagged as
auto-assigned rather than an error.
"""

import logging
import statistics
from functools import lru_cache

from config import settings
from models.responses import AnalysisResponse
from models.schemas import (
    AnalysisKind,
    AnalysisResult,
    AttributeScore,
    Confidence,
    GenerationConfig,
    ParsedAnalysis,
    QualityReview,
    SpeciesConfidence,
    SpeciesIdentification,
)
from models.schemas.analysis_result import GENERIC_SUBJECT
from services import determinism, gemini_client, prompt_builder
from services.aggregator import aggregate
from services.attribute_rules import RuleSet, build_rule_set
from services.attribute_scorer import score_attributes
from services.keyword_table import CONDITION_SCORES, KeywordTable
from services.prompt_validator import estimate_consistency, validate_response
from services.species_extractor import extract_species, extract_species_name

logger = logging.getLogger(__name__)

MIN_SCORED_FROM_TEXT = 3
MAX_AUTO_ASSIGNED = 2
MAX_SCORE_VARIANCE = 4.0
LOW_REVIEW_CONFIDENCE = 0.8

RECOMMEND_MANUAL_CHECK = "Verify the result manually against SNI 2729-2013"
RECOMMEND_BETTER_IMAGE = "Use a sharper, well-lit image for a more accurate result"
RECOMMEND_SPECIES_IMAGE = "Use an image showing the whole fish to improve species identification"


def coerce_text(raw: object) -> str:
    """Upstream payloads that are not strings count as empty text."""
    return raw if isinstance(raw, str) else ""


@lru_cache(maxsize=1)
def configured_rule_set() -> RuleSet:
    """Rule set with the scorable attributes from settings."""
    return build_rule_set(settings.scorable_attributes)


def attribute_warning(attr: AttributeScore) -> str | None:
    if attr.confidence is Confidence.AUTO_ASSIGNED:
        return f"{attr.label}: not found in the response, default score {attr.score} assigned"
    if attr.confidence is Confidence.MEDIUM:
        return f"{attr.label}: score {attr.score} derived from the condition '{attr.matched_keyword}'"
    return None


def analyze_freshness(
    text: object,
    *,
    rules: RuleSet | None = None,
    table: KeywordTable = CONDITION_SCORES,
    subject_name: str | None = None,
) -> AnalysisResult:
    """Score every attribute and aggregate them into one result."""
    text = coerce_text(text)
    if rules is None:
        rules = configured_rule_set()

    attributes = score_attributes(text, rules=rules, table=table)
    overall_score, category = aggregate(attributes)
    warnings = tuple(w for w in map(attribute_warning, attributes) if w)

    result = AnalysisResult(
        attributes=attributes,
        overall_score=overall_score,
        category=category,
        scorable_count=sum(1 for a in attributes if a.is_scorable),
        auto_assigned_count=sum(1 for a in attributes if a.confidence is Confidence.AUTO_ASSIGNED),
        warnings=warnings,
        subject_name=subject_name or extract_species_name(text) or GENERIC_SUBJECT,
    )
    logger.info(
        "Freshness: subject=%s overall=%.1f category=%s auto_assigned=%d/%d",
        result.subject_name, result.overall_score, result.category.value,
        result.auto_assigned_count, result.scorable_count,
    )
    return result


def analyze_species(text: object) -> SpeciesIdentification:
    return extract_species(coerce_text(text))


def review_freshness(result: AnalysisResult) -> QualityReview:
    """Plausibility checks on a freshness result.

    Too few attributes read from the text is an issue; many defaults or
    widely spread scores are warnings.
    """
    issues: list[str] = []
    warnings: list[str] = []

    from_text = [
        a for a in result.attributes
        if a.confidence in (Confidence.HIGH, Confidence.MEDIUM)
    ]
    if len(from_text) < MIN_SCORED_FROM_TEXT:
        issues.append(f"Fewer than {MIN_SCORED_FROM_TEXT} attributes could be scored from the response")

    if result.auto_assigned_count > MAX_AUTO_ASSIGNED:
        warnings.append("Several attributes were assigned default scores")

    scores = [a.score for a in result.attributes if a.score is not None]
    if len(scores) > 1 and statistics.pvariance(scores) > MAX_SCORE_VARIANCE:
        warnings.append("Attribute scores vary widely, the result may need validation")

    confidence = max(0.6, 1 - len(issues) * 0.15 - len(warnings) * 0.05)
    return QualityReview(
        is_valid=not issues,
        issues=tuple(issues),
        warnings=tuple(warnings),
        confidence=round(confidence, 2),
    )


def build_recommendations(
    review: QualityReview | None = None,
    result: AnalysisResult | None = None,
    species: SpeciesIdentification | None = None,
) -> tuple[str, ...]:
    recommendations: list[str] = []
    if review is not None:
        if not review.is_valid:
            recommendations.append(RECOMMEND_MANUAL_CHECK)
        if review.confidence < LOW_REVIEW_CONFIDENCE:
            recommendations.append(RECOMMEND_BETTER_IMAGE)

    if result is not None:
        informational = [a.label for a in result.attributes if not a.is_scorable]
        if informational:
            recommendations.append(
                f"{', '.join(informational)} must be checked physically on the fish"
            )

    if species is not None and (
        not species.is_identified or species.confidence is SpeciesConfidence.LOW
    ):
        recommendations.append(RECOMMEND_SPECIES_IMAGE)
    return tuple(recommendations)


def analyze_text(
    text: object,
    kind: AnalysisKind | str,
    *,
    rules: RuleSet | None = None,
    previous: str | None = None,
) -> ParsedAnalysis:
    """Parse one upstream response for the requested analysis kind.

    Unknown kinds raise ``ValueError``; nothing about the text itself does.
    """
    kind = AnalysisKind(kind)
    text = coerce_text(text)

    validation = validate_response(text, kind)
    consistency = estimate_consistency(text, kind, previous)

    species = None
    if kind in (AnalysisKind.SPECIES, AnalysisKind.BOTH):
        species = analyze_species(text)

    freshness = None
    review = None
    if kind in (AnalysisKind.FRESHNESS, AnalysisKind.BOTH):
        subject = species.name if species is not None else None
        freshness = analyze_freshness(text, rules=rules, subject_name=subject)
        review = review_freshness(freshness)

    return ParsedAnalysis(
        kind=kind,
        freshness=freshness,
        species=species,
        validation=validation,
        consistency=consistency,
        review=review,
        recommendations=build_recommendations(review, freshness, species),
    )


def to_response(
    parsed: ParsedAnalysis,
    config: GenerationConfig,
    degraded: bool = False,
) -> AnalysisResponse:
    return AnalysisResponse(
        analysis_type=parsed.kind,
        freshness=parsed.freshness,
        species=parsed.species,
        validation=parsed.validation,
        consistency=parsed.consistency,
        review=parsed.review,
        recommendations=list(parsed.recommendations),
        generation_config=config,
        degraded=degraded,
    )


async def analyze_image(
    image_bytes: bytes,
    mime_type: str,
    kind: AnalysisKind | str,
) -> AnalysisResponse:
    """Run the vision model on an image and parse its answer.

    When Gemini is unavailable the empty response is parsed as usual and
    the result is marked degraded.
    """
    kind = AnalysisKind(kind)
    config = determinism.generation_config(kind, image_bytes)
    prompt = prompt_builder.build_prompt(kind)

    text = await gemini_client.generate_analysis(image_bytes, mime_type, prompt, config)
    degraded = text is None
    if degraded:
        logger.warning("No usable Gemini response - returning defaults for %s", kind.value)

    return to_response(analyze_text(text, kind), config, degraded=degraded)
