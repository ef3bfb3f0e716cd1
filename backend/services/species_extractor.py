"""Species identity extraction from upstream model text.

Every field is found by an ordered list of patterns, most specific first;
a capture that fails its sanity check falls through to the next pattern.
Captures are sanitized before they are checked, so raw markdown and
already-sanitized text both work.

The confidence level is a lexical-cue heuristic over the whole response,
not a statistical estimate.
"""

import logging
import re

from models.schemas import SpeciesConfidence, SpeciesIdentification
from models.schemas.species_identification import UNIDENTIFIED_SPECIES
from services.text_sanitizer import collapse

logger = logging.getLogger(__name__)

MAX_CHARACTERISTICS = 5
DESCRIPTION_LIMIT = 200

WARNING_NO_NAME = "Species name could not be identified"
WARNING_NO_SCIENTIFIC_NAME = "Scientific name not available"

_H = r"[^\S\n]*"
_LABEL_END = rf"[*_ \t]*[:|][|*_ \t]*"

COMMON_SPECIES: tuple[str, ...] = (
    "ikan mas", "kakap merah", "kakap putih", "nila", "lele", "tongkol",
    "bandeng", "gurame", "gurami", "patin", "bawal", "kakap", "baronang",
    "kerapu", "mujair", "gabus", "belut", "tuna", "cakalang", "kembung",
    "tenggiri", "layang", "salmon", "tilapia", "catfish", "milkfish",
    "snapper", "grouper", "mackerel", "pomfret",
)

_NAME_PATTERNS: tuple[re.Pattern, ...] = (
    # **Nama Spesies**: Ikan Nila / | Species | Tilapia |
    re.compile(
        rf"(?:\bnama{_H}spesies|\bspecies{_H}name|\bnama{_H}ikan|\bfish{_H}name"
        rf"|^{_H}[^\w\n]*(?:spesies|species)\b){_LABEL_END}(?P<name>[^\n|*(]+)",
        re.IGNORECASE | re.MULTILINE,
    ),
    # Identifikasi: **Ikan Nila**
    re.compile(
        rf"\b(?:identifikasi|identification|spesies|species|nama|name){_H}:?{_H}\*\*(?P<name>[^*\n]+)\*\*",
        re.IGNORECASE,
    ),
    # ... identified as a Nile tilapia.
    re.compile(
        rf"\b(?:identified{_H}as|(?:di|ter)identifikasi{_H}sebagai"
        rf"|recogni[sz]ed{_H}as)[^\S\n]+(?:an?[^\S\n]+)?(?P<name>[^\n.,;(]+)",
        re.IGNORECASE,
    ),
    re.compile(
        r"\b(?P<name>"
        + "|".join(re.escape(s).replace(r"\ ", r"\s+") for s in COMMON_SPECIES)
        + r")\b",
        re.IGNORECASE,
    ),
    re.compile(rf"\bidentifi(?:kasi|cation){_H}:{_H}(?P<name>[^\n.]+)", re.IGNORECASE),
)

# Index of the species token list above; its captures are title-cased
_TOKEN_TIER = 3

_NEGATION_RE = re.compile(
    r"\b(?:tidak|belum|unknown|unidentified|not\s+identified|cannot)\b", re.IGNORECASE
)
_PLACEHOLDER_NAMES = frozenset({"ikan", "fish", "spesies", "species"})

_SCIENTIFIC_PATTERNS: tuple[re.Pattern, ...] = (
    re.compile(
        rf"(?i:nama{_H}ilmiah|scientific{_H}name|nama{_H}latin|latin{_H}name)"
        rf"{_LABEL_END}(?P<name>[A-Z][a-z]+[ \t]+[a-z]+)"
    ),
    # *Oreochromis niloticus* or _Oreochromis niloticus_
    re.compile(r"(?<![*\w])(?P<mark>[*_])(?P<name>[A-Z][a-z]+ [a-z]+)(?P=mark)(?![*\w])"),
)

_FAMILY_RE = re.compile(
    rf"\b(?:famili|family|familia|keluarga){_LABEL_END}(?P<family>[^\n|*(,]+)",
    re.IGNORECASE,
)

_CONFIDENCE_LABEL_RE = re.compile(
    rf"\b(?:confidence(?:{_H}level)?|kepercayaan|tingkat{_H}keyakinan){_LABEL_END}(?P<level>[^\n|*]+)",
    re.IGNORECASE,
)
_PERCENT_RE = re.compile(r"(?P<value>\d{1,3})\s*%")

_NEGATED_HIGH_RE = re.compile(
    r"\b(?:tidak|kurang)\s+(?:yakin|jelas)\b|\b(?:uncertain|unclear|not\s+(?:clear|certain))\b",
    re.IGNORECASE,
)
_HIGH_CUES_RE = re.compile(r"\b(?:tinggi|yakin|jelas|high|clear|certain)\b", re.IGNORECASE)
_LOW_CUES_RE = re.compile(
    r"\b(?:rendah|tidak\s+yakin|tidak\s+jelas|sulit|kemungkinan|low|uncertain|unclear"
    r"|difficult|possibly)\b",
    re.IGNORECASE,
)
_MEDIUM_CUES_RE = re.compile(r"\b(?:medium|sedang|moderate)\b", re.IGNORECASE)

_BULLET_RE = re.compile(r"^[^\S\n]*(?:[-•*]|\d{1,2}[.)])[^\S\n]+(?P<item>[^\n]+)$", re.MULTILINE)
_FEATURES_LABEL_RE = re.compile(
    r"\b(?:ciri\s+pembeda|ciri-ciri|ciri\s+khas|karakteristik|distinguishing\s+features"
    r"|key\s+features|characteristics)\b[^\n:]*:?(?P<tail>[^\n]*)",
    re.IGNORECASE,
)
_LIST_MARKER_RE = re.compile(r"^[^\S\n]*(?:[-•*]|\d{1,2}[.)])[^\S\n]*")
_FIELD_LABEL_RE = re.compile(
    r"\b(?:nama\s+spesies|species\s+name|nama\s+ilmiah|scientific\s+name|famili|family"
    r"|confidence|kepercayaan)\b",
    re.IGNORECASE,
)

_PARAGRAPH_SPLIT_RE = re.compile(r"\n[^\S\n]*\n")
_DESCRIPTION_LABEL_RE = re.compile(
    r"^(?:deskripsi|description|keterangan|ringkasan|summary)\s*:\s*", re.IGNORECASE
)
BOILERPLATE_PHRASES: tuple[str, ...] = (
    "berdasarkan analisis visual",
    "analisis visual gambar",
    "gambar yang diunggah",
    "berdasarkan gambar",
    "deskripsi spesies",
    "based on visual analysis",
    "based on the image",
    "uploaded image",
)


def _as_text(text: object) -> str:
    return text if isinstance(text, str) else ""


def _acceptable_name(name: str) -> bool:
    if not 2 <= len(name) <= 50:
        return False
    if name.lower() in _PLACEHOLDER_NAMES:
        return False
    return not _NEGATION_RE.search(name)


def extract_species_name(text: object) -> str | None:
    """Species name from the first pattern tier with a sane capture."""
    text = _as_text(text)
    if not text:
        return None
    for tier, pattern in enumerate(_NAME_PATTERNS):
        for match in pattern.finditer(text):
            name = collapse(match.group("name")).strip(" .,:;-")
            if tier == _TOKEN_TIER:
                name = " ".join(name.split()).title()
            if _acceptable_name(name):
                return name
    return None


def extract_scientific_name(text: object) -> str | None:
    text = _as_text(text)
    for pattern in _SCIENTIFIC_PATTERNS:
        for match in pattern.finditer(text):
            name = " ".join(collapse(match.group("name")).split())
            if " " in name and len(name) > 5:
                return name
    return None


def extract_family(text: object) -> str | None:
    text = _as_text(text)
    for match in _FAMILY_RE.finditer(text):
        family = collapse(match.group("family")).strip(" .,:;-")
        if 2 <= len(family) <= 30:
            return family
    return None


def _level_from_label(level: str) -> SpeciesConfidence | None:
    percent = _PERCENT_RE.search(level)
    if percent:
        value = int(percent.group("value"))
        if value >= 80:
            return SpeciesConfidence.HIGH
        if value >= 50:
            return SpeciesConfidence.MEDIUM
        return SpeciesConfidence.LOW
    if _NEGATED_HIGH_RE.search(level) or _LOW_CUES_RE.search(level):
        return SpeciesConfidence.LOW
    if _HIGH_CUES_RE.search(level):
        return SpeciesConfidence.HIGH
    if _MEDIUM_CUES_RE.search(level):
        return SpeciesConfidence.MEDIUM
    return None


def determine_confidence(text: object) -> SpeciesConfidence:
    """Lexical-cue confidence: labeled level, then high cues, then low cues.

    Negated high cues ("tidak yakin", "uncertain") never count as high.
    """
    text = _as_text(text)
    for match in _CONFIDENCE_LABEL_RE.finditer(text):
        level = _level_from_label(match.group("level"))
        if level is not None:
            return level

    if _HIGH_CUES_RE.search(_NEGATED_HIGH_RE.sub(" ", text)):
        return SpeciesConfidence.HIGH
    if _LOW_CUES_RE.search(text):
        return SpeciesConfidence.LOW
    return SpeciesConfidence.MEDIUM


def _feature_block_lines(text: str) -> list[str]:
    """Lines of the labeled distinguishing-features block, up to a blank line."""
    match = _FEATURES_LABEL_RE.search(text)
    if not match:
        return []
    lines = [match.group("tail")]
    following = text[match.end():].split("\n")
    for line in following[1:]:
        if not line.strip():
            break
        lines.append(line)
    return lines


def extract_characteristics(text: object) -> tuple[str, ...]:
    """Up to five distinct characteristics, feature block before loose bullets."""
    text = _as_text(text)
    candidates = _feature_block_lines(text)
    candidates += [m.group("item") for m in _BULLET_RE.finditer(text)]

    seen: set[str] = set()
    items: list[str] = []
    for raw in candidates:
        if _FIELD_LABEL_RE.search(raw):
            continue
        item = collapse(_LIST_MARKER_RE.sub("", raw)).strip(" .,;:")
        if not 5 <= len(item) <= 100 or item.lower() in seen:
            continue
        seen.add(item.lower())
        items.append(item)
        if len(items) == MAX_CHARACTERISTICS:
            break
    return tuple(items)


def is_boilerplate(text: str) -> bool:
    lowered = text.lower()
    return any(phrase in lowered for phrase in BOILERPLATE_PHRASES)


def extract_description(text: object) -> str:
    """First plain prose paragraph, truncated to 200 characters.

    Paragraphs carrying table, heading or emphasis markup, bullet lists and
    boilerplate are skipped; returns ``""`` when nothing qualifies.
    """
    text = _as_text(text).replace("\r\n", "\n")
    for block in _PARAGRAPH_SPLIT_RE.split(text):
        block = block.strip()
        if len(block) <= 50 or "|" in block or "#" in block or "**" in block:
            continue
        if _BULLET_RE.search(block):
            continue
        cleaned = _DESCRIPTION_LABEL_RE.sub("", collapse(block))
        if len(cleaned) <= 50 or is_boilerplate(cleaned):
            continue
        if len(cleaned) > DESCRIPTION_LIMIT:
            return cleaned[:DESCRIPTION_LIMIT] + "..."
        return cleaned
    return ""


def extract_species(text: object) -> SpeciesIdentification:
    """Build a species identification; never raises on malformed text."""
    text = _as_text(text)
    name = extract_species_name(text)
    scientific_name = extract_scientific_name(text)

    warnings: list[str] = []
    if name is None:
        warnings.append(WARNING_NO_NAME)
    if scientific_name is None:
        warnings.append(WARNING_NO_SCIENTIFIC_NAME)

    species = SpeciesIdentification(
        name=name or UNIDENTIFIED_SPECIES,
        scientific_name=scientific_name,
        family=extract_family(text),
        confidence=determine_confidence(text),
        characteristics=extract_characteristics(text),
        description=extract_description(text),
        warnings=tuple(warnings),
    )
    logger.info(
        "Species extracted: name=%s confidence=%s characteristics=%d",
        species.name, species.confidence.value, len(species.characteristics),
    )
    return species
