"""Per-attribute scoring with an explicit -> keyword -> default fallback chain.

Each strategy is an independent function taking the gathered evidence for
one attribute and returning a ``ScoreDecision`` or ``None``. The first
strategy that returns a decision wins, and its source decides the
confidence tier reported on the ``AttributeScore``.
"""

import logging
from typing import Callable, NamedTuple

from models.schemas import AttributeScore, Confidence, ScoreSource
from services import patterns
from services.attribute_rules import DEFAULT_RULE_SET, AttributeRule, RuleSet
from services.keyword_table import CONDITION_SCORES, KeywordTable, match_keyword

logger = logging.getLogger(__name__)


class AttributeEvidence(NamedTuple):
    text: str
    rule: AttributeRule
    other_aliases: tuple[str, ...]
    condition: str
    reasoning: str
    table: KeywordTable


class ScoreDecision(NamedTuple):
    score: int
    source: ScoreSource
    keyword: str | None = None


ScoreStrategy = Callable[[AttributeEvidence], ScoreDecision | None]

_CONFIDENCE_BY_SOURCE = {
    ScoreSource.EXPLICIT: Confidence.HIGH,
    ScoreSource.KEYWORD: Confidence.MEDIUM,
    ScoreSource.DEFAULT: Confidence.AUTO_ASSIGNED,
    ScoreSource.INFORMATIONAL: Confidence.LOW,
}


def confidence_for(source: ScoreSource) -> Confidence:
    return _CONFIDENCE_BY_SOURCE[source]


def explicit_score_strategy(evidence: AttributeEvidence) -> ScoreDecision | None:
    """Score written out by the upstream model for this attribute."""
    score = patterns.find_explicit_score(
        evidence.text, evidence.rule.aliases, evidence.other_aliases
    )
    if score is None:
        return None
    return ScoreDecision(score, ScoreSource.EXPLICIT)


def keyword_score_strategy(evidence: AttributeEvidence) -> ScoreDecision | None:
    """Score implied by condition vocabulary in the condition and reasoning."""
    described = " ".join(p for p in (evidence.condition, evidence.reasoning) if p)
    match = match_keyword(described, evidence.table)
    if match is None:
        return None
    return ScoreDecision(match.score, ScoreSource.KEYWORD, match.keyword)


def default_score_strategy(evidence: AttributeEvidence) -> ScoreDecision:
    return ScoreDecision(evidence.rule.default_score, ScoreSource.DEFAULT)


SCORE_STRATEGIES: tuple[ScoreStrategy, ...] = (
    explicit_score_strategy,
    keyword_score_strategy,
    default_score_strategy,
)


def decide_score(
    evidence: AttributeEvidence,
    strategies: tuple[ScoreStrategy, ...] = SCORE_STRATEGIES,
) -> ScoreDecision:
    for strategy in strategies:
        decision = strategy(evidence)
        if decision is not None:
            return decision
    return default_score_strategy(evidence)


def score_attribute(
    text: object,
    attribute_name: str,
    is_scorable: bool | None = None,
    *,
    rules: RuleSet = DEFAULT_RULE_SET,
    table: KeywordTable = CONDITION_SCORES,
) -> AttributeScore:
    """Score one attribute from upstream text.

    ``text`` may be raw model output or already sanitized; anything that is
    not a string counts as empty. ``is_scorable`` overrides the rule set's
    scorable membership when given. Unknown attribute names raise
    ``KeyError``; extraction misses never raise.
    """
    rule = rules.get(attribute_name)
    text = text if isinstance(text, str) else ""
    if is_scorable is None:
        is_scorable = rule.name in rules.scorable

    other_aliases = rules.other_aliases(rule.name)
    condition = patterns.extract_condition(text, rule.aliases)
    reasoning = patterns.extract_reasoning(text, rule.aliases, other_aliases)

    if not is_scorable:
        logger.debug("%s: informational only", rule.name)
        return AttributeScore(
            name=rule.name,
            label=rule.label,
            score=None,
            condition=condition or rule.default_condition(None),
            reasoning=reasoning,
            is_scorable=False,
            confidence=confidence_for(ScoreSource.INFORMATIONAL),
            matched_keyword=None,
        )

    evidence = AttributeEvidence(
        text=text,
        rule=rule,
        other_aliases=other_aliases,
        condition=condition,
        reasoning=reasoning,
        table=table,
    )
    decision = decide_score(evidence)
    logger.debug(
        "%s: score=%s source=%s keyword=%s",
        rule.name, decision.score, decision.source.value, decision.keyword,
    )

    return AttributeScore(
        name=rule.name,
        label=rule.label,
        score=decision.score,
        condition=condition or rule.default_condition(decision.score),
        reasoning=reasoning,
        is_scorable=True,
        confidence=confidence_for(decision.source),
        matched_keyword=decision.keyword,
    )


def score_attributes(
    text: object,
    *,
    rules: RuleSet = DEFAULT_RULE_SET,
    table: KeywordTable = CONDITION_SCORES,
) -> tuple[AttributeScore, ...]:
    """Score every attribute of the rule set, in rule order."""
    return tuple(
        score_attribute(text, rule.name, rules=rules, table=table)
        for rule in rules.rules
    )
