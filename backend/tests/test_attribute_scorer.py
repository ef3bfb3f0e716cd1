import pytest

from models.schemas import Confidence, ScoreSource
from services.attribute_rules import DEFAULT_RULE_SET, NOT_ASSESSABLE_CONDITION, build_rule_set
from services.attribute_scorer import (
    SCORE_STRATEGIES,
    AttributeEvidence,
    ScoreDecision,
    confidence_for,
    default_score_strategy,
    explicit_score_strategy,
    keyword_score_strategy,
    score_attribute,
    score_attributes,
)
from services.keyword_table import CONDITION_SCORES

TABLE_RESPONSE = """**Spesies**: Ikan Nila
**Skor Keseluruhan**: 7.8/9

| Parameter | Kondisi | Skor | Status |
|-----------|---------|------|--------|
| **Mata** | Jernih, cembung | 8 | Visual |
| **Insang** | Merah cerah | 9 | Visual |
| **Lendir** | Bening, tipis | 8 | Visual |
| **Daging** | Elastis | 7 | Visual |
| **Tekstur** | Kompak | 7 | Visual |
| **Bau** | Tidak dapat dinilai | - | Non-Visual |
"""


def _evidence(text="", name="eyes", condition="", reasoning=""):
    return AttributeEvidence(
        text=text,
        rule=DEFAULT_RULE_SET.get(name),
        other_aliases=DEFAULT_RULE_SET.other_aliases(name),
        condition=condition,
        reasoning=reasoning,
        table=CONDITION_SCORES,
    )


class TestStrategies:
    def test_chain_order(self):
        assert SCORE_STRATEGIES == (
            explicit_score_strategy,
            keyword_score_strategy,
            default_score_strategy,
        )

    def test_explicit(self):
        decision = explicit_score_strategy(_evidence("Mata | jernih | 8"))
        assert decision == ScoreDecision(8, ScoreSource.EXPLICIT)

    def test_explicit_none_without_number(self):
        assert explicit_score_strategy(_evidence("Mata jernih")) is None

    def test_keyword_uses_condition_and_reasoning(self):
        decision = keyword_score_strategy(_evidence(condition="agak", reasoning="Mata keruh sekali"))
        assert decision == ScoreDecision(3, ScoreSource.KEYWORD, "keruh")

    def test_keyword_none_without_vocabulary(self):
        assert keyword_score_strategy(_evidence(condition="tidak ada data")) is None

    def test_default(self):
        assert default_score_strategy(_evidence(name="flesh")) == ScoreDecision(6, ScoreSource.DEFAULT)

    def test_confidence_tiers(self):
        assert confidence_for(ScoreSource.EXPLICIT) is Confidence.HIGH
        assert confidence_for(ScoreSource.KEYWORD) is Confidence.MEDIUM
        assert confidence_for(ScoreSource.DEFAULT) is Confidence.AUTO_ASSIGNED
        assert confidence_for(ScoreSource.INFORMATIONAL) is Confidence.LOW


def test_table_row_score_is_high_confidence():
    attr = score_attribute("Eyes | clear, bulging | 9", "eyes")
    assert attr.score == 9
    assert attr.confidence is Confidence.HIGH
    assert attr.condition == "clear, bulging"
    assert attr.matched_keyword is None


@pytest.mark.parametrize(
    "text, expected",
    [
        ("| **Mata** | Jernih, cembung | 8 | Visual |", 8),
        ("Mata: jernih, skor: 6", 6),
        ("Eyes: clear (score 7/9)", 7),
        ("Mata (agak keruh) - 5", 5),
        ("Mata: 4/9", 4),
        ("**Mata**: **3**", 3),
    ],
)
def test_explicit_score_always_high(text, expected):
    attr = score_attribute(text, "eyes")
    assert attr.score == expected
    assert attr.confidence is Confidence.HIGH


def test_explicit_score_beats_contradicting_keyword():
    attr = score_attribute("Mata busuk, skor: 8", "eyes")
    assert attr.score == 8
    assert attr.confidence is Confidence.HIGH


def test_out_of_range_score_falls_through_to_keyword():
    attr = score_attribute("| Mata | jernih | 12 |", "eyes")
    assert attr.score == 9
    assert attr.confidence is Confidence.MEDIUM
    assert attr.matched_keyword == "jernih"


def test_decimal_is_not_an_explicit_score():
    attr = score_attribute("Mata jernih 7.5", "eyes")
    assert attr.confidence is Confidence.MEDIUM
    assert attr.score == 9


def test_standard_number_is_not_a_score():
    attr = score_attribute("Mata dinilai menurut SNI 2729-2013 dan terlihat jernih", "eyes")
    assert attr.confidence is Confidence.MEDIUM


def test_keyword_score_without_numbers():
    attr = score_attribute("insang coklat, berlendir, berbau busuk", "gills")
    assert attr.score <= 2
    assert attr.confidence is Confidence.MEDIUM
    assert attr.matched_keyword == "berbau busuk"


def test_poor_keyword_bias():
    attr = score_attribute("Insang merah cerah tetapi berbau busuk", "gills")
    assert attr.score == 1


def test_section_stops_at_next_attribute():
    text = "Mata jernih dan cembung. Insang coklat dan berlendir."
    eyes = score_attribute(text, "eyes")
    gills = score_attribute(text, "gills")
    assert eyes.score == 9
    assert gills.score == 2


def test_missing_attribute_gets_default():
    attr = score_attribute("Mata jernih dan cembung.", "flesh")
    assert attr.score == 6
    assert attr.confidence is Confidence.AUTO_ASSIGNED
    assert attr.condition == "Flesh slightly soft"
    assert attr.reasoning == ""


@pytest.mark.parametrize("raw", ["", None, 7, b"Mata | jernih | 8"])
def test_empty_or_non_text_input(raw):
    attr = score_attribute(raw, "eyes")
    assert attr.score == 7
    assert attr.confidence is Confidence.AUTO_ASSIGNED
    assert attr.condition == "Eyes clear and bulging"


def test_non_scorable_attribute_has_null_score():
    attr = score_attribute(TABLE_RESPONSE, "odor")
    assert attr.is_scorable is False
    assert attr.score is None
    assert attr.confidence is Confidence.LOW
    assert attr.condition == "Tidak dapat dinilai"


def test_non_scorable_default_condition():
    attr = score_attribute("", "odor")
    assert attr.score is None
    assert attr.condition == NOT_ASSESSABLE_CONDITION


def test_scorable_override():
    attr = score_attribute("Bau: segar", "odor", is_scorable=True)
    assert attr.score == 8
    assert attr.confidence is Confidence.MEDIUM
    assert attr.condition == "segar"

    attr = score_attribute("Mata | jernih | 8", "eyes", is_scorable=False)
    assert attr.score is None
    assert attr.confidence is Confidence.LOW


def test_alias_lookup_and_unknown_name():
    assert score_attribute("", "mata").name == "eyes"
    with pytest.raises(KeyError):
        score_attribute("", "fins")


def test_condition_is_never_empty():
    for attr in score_attributes("Mata: 9. Insang (merah). Lendir: -"):
        assert attr.condition


def test_reasoning_skips_generic_phrases():
    text = "Mata berdasarkan analisis visual. Mata terlihat jernih dan cembung."
    attr = score_attribute(text, "eyes")
    assert attr.reasoning == "Mata terlihat jernih dan cembung"


def test_score_attributes_covers_every_rule_in_order():
    attrs = score_attributes(TABLE_RESPONSE)
    assert [a.name for a in attrs] == ["eyes", "gills", "slime", "flesh", "texture", "odor"]
    assert [a.score for a in attrs] == [8, 9, 8, 7, 7, None]
    assert all(a.confidence is Confidence.HIGH for a in attrs[:5])


def test_all_six_scorable_rule_set():
    rules = build_rule_set(["eyes", "gills", "slime", "flesh", "texture", "bau"])
    attrs = score_attributes("", rules=rules)
    assert all(a.is_scorable for a in attrs)
    assert attrs[-1].score == 7


def test_scores_always_in_range():
    text = "Mata 0. Insang 10/9. Lendir skor 99. Daging -3. Tekstur 1-9."
    for attr in score_attributes(text):
        if attr.is_scorable:
            assert 1 <= attr.score <= 9
