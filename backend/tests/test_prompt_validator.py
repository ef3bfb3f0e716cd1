import pytest

from models.schemas import AnalysisKind
from services.prompt_builder import (
    CATEGORY_MARKER,
    CHARACTERISTICS_MARKER,
    CONFIDENCE_MARKER,
    EYES_ROW_MARKER,
    OVERALL_SCORE_MARKER,
    SPECIES_NAME_MARKER,
    TABLE_HEADER_MARKER,
    build_prompt,
)
from services.prompt_validator import (
    KEYWORDS_ERROR,
    TABLE_ERROR,
    consistency_level,
    estimate_consistency,
    similarity,
    validate_response,
)

FRESHNESS_RESPONSE = """**Spesies**: Ikan Nila
**Skor Keseluruhan**: 7.8/9
**Kategori**: BAIK

PARAMETER SNI 2729-2013:
| Parameter | Kondisi | Skor | Status |
|-----------|---------|------|--------|
| **Mata** | Jernih, cembung | 8 | Visual |
| **Insang** | Merah cerah | 9 | Visual |
| **Bau** | Tidak dapat dinilai | - | Non-Visual |
"""

SPECIES_RESPONSE = """**Nama Spesies**: Ikan Nila
**Nama Ilmiah**: *Oreochromis niloticus*
**Confidence**: TINGGI

CIRI PEMBEDA:
- Garis vertikal gelap pada tubuh

Identifikasi Visual sesuai SNI 2729-2013.
"""


class TestPrompts:
    def test_freshness_prompt_asks_for_every_checked_marker(self):
        prompt = build_prompt(AnalysisKind.FRESHNESS)
        for marker in (OVERALL_SCORE_MARKER, CATEGORY_MARKER, TABLE_HEADER_MARKER, EYES_ROW_MARKER):
            assert marker in prompt

    def test_species_prompt_asks_for_every_checked_marker(self):
        prompt = build_prompt("species")
        for marker in (SPECIES_NAME_MARKER, CONFIDENCE_MARKER, CHARACTERISTICS_MARKER):
            assert marker in prompt

    def test_combined_prompt_contains_both_formats(self):
        prompt = build_prompt("both")
        assert SPECIES_NAME_MARKER in prompt
        assert EYES_ROW_MARKER in prompt

    def test_prompts_pass_their_own_validation(self):
        for kind in (AnalysisKind.FRESHNESS, AnalysisKind.BOTH):
            assert validate_response(build_prompt(kind), kind).has_required_elements

    def test_unknown_kind(self):
        with pytest.raises(ValueError):
            build_prompt("colour")


class TestValidateResponse:
    def test_complete_freshness_response(self):
        result = validate_response(FRESHNESS_RESPONSE, AnalysisKind.FRESHNESS)
        assert result.is_valid
        assert result.quality == 100
        assert result.errors == ()
        assert result.has_required_elements

    def test_complete_species_response(self):
        result = validate_response(SPECIES_RESPONSE, "species")
        assert result.has_required_elements
        assert result.quality == 100

    def test_missing_table_is_one_error(self):
        text = FRESHNESS_RESPONSE.replace(EYES_ROW_MARKER, "| Mata |")
        result = validate_response(text, "freshness")
        assert result.errors == (TABLE_ERROR,)
        assert result.quality == 80
        assert result.is_valid
        assert not result.has_required_elements

    def test_freshness_markers_missing_from_species_answer(self):
        result = validate_response(SPECIES_RESPONSE, "freshness")
        assert len(result.errors) == 3
        assert result.quality == 25
        assert not result.is_valid

    def test_both_needs_both_sets(self):
        result = validate_response(FRESHNESS_RESPONSE, "both")
        assert "Missing species name format" in result.errors
        assert not result.is_valid

    def test_empty_response(self):
        result = validate_response("", "both")
        assert result.quality == 0
        assert not result.is_valid
        assert KEYWORDS_ERROR in result.errors

    def test_non_text_response(self):
        assert validate_response(None, "species").quality == 25


class TestConsistency:
    def test_levels(self):
        assert consistency_level(95) == "very_high"
        assert consistency_level(90) == "very_high"
        assert consistency_level(80) == "high"
        assert consistency_level(50) == "medium"
        assert consistency_level(49) == "low"

    def test_numeric_scores_raise_freshness_estimate(self):
        estimate = estimate_consistency(FRESHNESS_RESPONSE, "freshness")
        assert estimate.percentage == 100
        assert estimate.level == "very_high"

    def test_species_estimate(self):
        estimate = estimate_consistency(SPECIES_RESPONSE, "species")
        assert estimate.percentage == 100

    def test_plain_answer_is_base(self):
        estimate = estimate_consistency("Ikan terlihat segar.", "freshness")
        assert estimate.percentage == 85
        assert estimate.level == "high"

    def test_similar_previous_response(self):
        text = "Mata jernih, insang merah, lendir bening."
        assert estimate_consistency(text, "freshness", previous=text).percentage == 95

    def test_dissimilar_previous_response(self):
        estimate = estimate_consistency(
            "Mata jernih, insang merah.", "freshness", previous="0000 1111 2222 3333"
        )
        assert estimate.percentage == 65
        assert estimate.level == "medium"

    def test_similarity_bounds(self):
        assert similarity("", "abc") == 0.0
        assert similarity("insang merah mata jernih", "mata jernih insang merah") == 1.0
