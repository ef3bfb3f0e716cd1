"""Attribute definitions for SNI 2729-2013 organoleptic grading.

Each rule names one physical trait, the words the upstream model uses for
it (Indonesian and English), the score assumed when the text says nothing
usable, and the canned condition phrases used when no condition can be
extracted. Which attributes count towards the overall score is a property
of the ``RuleSet``, not of the rule: historically the scorable set has been
both five attributes (odor excluded, since smell cannot be judged from a
photo) and all six.
"""

from collections.abc import Iterable

from pydantic import BaseModel, ConfigDict

NOT_ASSESSABLE_CONDITION = "Not assessable from this input"


class AttributeRule(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str
    label: str
    aliases: tuple[str, ...]
    default_score: int
    # Canned conditions for score bands >= 7, >= 5 and below
    good_condition: str
    fair_condition: str
    poor_condition: str

    def default_condition(self, score: int | None) -> str:
        if score is None:
            return NOT_ASSESSABLE_CONDITION
        if score >= 7:
            return self.good_condition
        if score >= 5:
            return self.fair_condition
        return self.poor_condition


class RuleSet(BaseModel):
    """Ordered attribute rules plus the subset that is scored."""
    model_config = ConfigDict(frozen=True)

    rules: tuple[AttributeRule, ...]
    scorable: frozenset[str]

    @property
    def names(self) -> tuple[str, ...]:
        return tuple(rule.name for rule in self.rules)

    def get(self, name: str) -> AttributeRule:
        lowered = name.lower().strip()
        for rule in self.rules:
            if rule.name == lowered or lowered in rule.aliases:
                return rule
        raise KeyError(f"Unknown attribute: {name}")

    def is_scorable(self, name: str) -> bool:
        return self.get(name).name in self.scorable

    def other_aliases(self, name: str) -> tuple[str, ...]:
        """Aliases of every attribute except ``name``, used to bound sections."""
        own = self.get(name).name
        return tuple(
            alias for rule in self.rules if rule.name != own for alias in rule.aliases
        )


ATTRIBUTE_RULES: tuple[AttributeRule, ...] = (
    AttributeRule(
        name="eyes",
        label="Eyes",
        aliases=("mata", "eyes", "eye"),
        default_score=7,
        good_condition="Eyes clear and bulging",
        fair_condition="Eyes slightly cloudy",
        poor_condition="Eyes cloudy and sunken",
    ),
    AttributeRule(
        name="gills",
        label="Gills",
        aliases=("insang", "gills", "gill"),
        default_score=7,
        good_condition="Gills bright red",
        fair_condition="Gills slightly pale",
        poor_condition="Gills pale and greyish",
    ),
    AttributeRule(
        name="slime",
        label="Slime",
        aliases=("lendir", "slime", "mucus"),
        default_score=7,
        good_condition="Slime clear and glossy",
        fair_condition="Slime slightly cloudy",
        poor_condition="Slime cloudy and thick",
    ),
    AttributeRule(
        name="flesh",
        label="Flesh",
        aliases=("daging", "flesh"),
        default_score=6,
        good_condition="Flesh elastic and firm",
        fair_condition="Flesh slightly soft",
        poor_condition="Flesh mushy",
    ),
    AttributeRule(
        name="texture",
        label="Texture",
        aliases=("tekstur", "texture"),
        default_score=6,
        good_condition="Texture compact and intact",
        fair_condition="Texture slightly loose",
        poor_condition="Texture falls apart easily",
    ),
    AttributeRule(
        name="odor",
        label="Odor",
        aliases=("bau", "aroma", "odor", "odour", "smell"),
        default_score=7,
        good_condition="Fresh characteristic odor",
        fair_condition="Neutral odor",
        poor_condition="Off odor",
    ),
)

# Visual (eyes, gills, slime) and estimable (flesh, texture) attributes
DEFAULT_SCORABLE: frozenset[str] = frozenset(
    {"eyes", "gills", "slime", "flesh", "texture"}
)


def build_rule_set(
    scorable: Iterable[str] | None = None,
    rules: tuple[AttributeRule, ...] = ATTRIBUTE_RULES,
) -> RuleSet:
    """Build a rule set, resolving scorable names through attribute aliases.

    Unknown names raise ``KeyError`` so a misconfigured scorable list fails
    at startup rather than silently changing the average.
    """
    base = RuleSet(rules=rules, scorable=frozenset())
    if scorable is None:
        names = DEFAULT_SCORABLE & set(base.names)
    else:
        names = {base.get(name).name for name in scorable}
    return RuleSet(rules=rules, scorable=frozenset(names))


DEFAULT_RULE_SET = build_rule_set()
