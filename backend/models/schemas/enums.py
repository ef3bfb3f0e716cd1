"""Enumerations shared by the parsing pipeline and the API layer."""

from enum import Enum


class AnalysisKind(str, Enum):
    """Which analysis the caller requested from the upstream model."""
    FRESHNESS = "freshness"
    SPECIES = "species"
    BOTH = "both"


class Confidence(str, Enum):
    """How directly an attribute score was read from the upstream text."""
    HIGH = "high"  # explicit numeric score
    MEDIUM = "medium"  # derived from a condition keyword
    AUTO_ASSIGNED = "auto_assigned"  # attribute default
    LOW = "low"  # informational attribute, never scored


class ScoreSource(str, Enum):
    """Tier of the fallback chain that produced an attribute score."""
    EXPLICIT = "explicit"
    KEYWORD = "keyword"
    DEFAULT = "default"
    INFORMATIONAL = "informational"


class Category(str, Enum):
    """Overall quality category, best first."""
    PRIME = "Prime"
    GOOD = "Good"
    FAIR = "Fair"
    POOR = "Poor"


class SpeciesConfidence(str, Enum):
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"
