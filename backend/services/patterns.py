"""Regex library for pulling attribute evidence out of upstream text.

Three kinds of evidence are extracted for a named attribute:

- an explicit score (table row, ``skor:`` label, or a bare number after
  the attribute name), tried in that order;
- a short condition phrase (table cell after the attribute cell, then a
  parenthetical or colon-delimited phrase);
- a reasoning sentence taken from the section between the attribute name
  and the next attribute name.

Every pattern is bounded to a single line, so matching stays linear in
the input length. Captured fragments are sanitized before they are
returned, which lets the same functions run on raw model output (where
table pipes and emphasis markers anchor the patterns) and on text that
has already been sanitized.
"""

import re
from functools import lru_cache

from services.text_sanitizer import collapse

MIN_SCORE = 1
MAX_SCORE = 9

# Generic phrases the model adds regardless of the image
GENERIC_PHRASES: tuple[str, ...] = (
    "berdasarkan analisis",
    "berdasarkan gambar",
    "dari gambar",
    "dapat dilihat",
    "terlihat pada gambar",
    "analisis ai",
    "based on visual analysis",
    "based on the image",
    "from the image",
    "as seen in the image",
    "ai analysis",
)

_H = r"[^\S\n]*"  # horizontal whitespace

_SCORE_LABEL_ONLY_RE = re.compile(
    r"^(?:skor|score|nilai)\b[\s:]*\d*(?:\s*/\s*9)?$", re.IGNORECASE
)
_SYMBOLS_OR_DIGITS_RE = re.compile(r"^[\W\d_]+$")
_TRAILING_SCORE_RE = re.compile(r"\s*[-–:,]?\s*\d{1,2}(?:\s*/\s*9)?\s*$")
_FRAGMENT_SPLIT_RE = re.compile(r"[.!?\n]+")


def alias_group(aliases: tuple[str, ...]) -> str:
    """Alternation over aliases, longest first so 'eyes' wins over 'eye'."""
    ordered = sorted(set(aliases), key=lambda a: (-len(a), a))
    return r"\b(?:" + "|".join(re.escape(a) for a in ordered) + r")\b"


@lru_cache(maxsize=64)
def alias_pattern(aliases: tuple[str, ...]) -> re.Pattern:
    return re.compile(alias_group(aliases), re.IGNORECASE)


@lru_cache(maxsize=64)
def explicit_score_patterns(aliases: tuple[str, ...]) -> tuple[re.Pattern, ...]:
    """Ordered explicit-score patterns; each captures ``score``."""
    name = alias_group(aliases)
    number = r"[*_]*(?P<score>\d{1,2})(?![.,]?\d)[*_]*"
    out_of_nine = rf"(?:{_H}/{_H}9)?"
    return (
        # | **Mata** | jernih, cembung | 8 | ...
        re.compile(
            rf"^{_H}\|?[^|\n]*?{name}[^|\n]*\|(?:[^|\n]*\|)*?{_H}{number}{out_of_nine}{_H}(?:\||$)",
            re.IGNORECASE | re.MULTILINE,
        ),
        # Mata: jernih, skor: 8
        re.compile(
            rf"{name}(?P<gap>[^\n]*?)\b(?:skor|score|nilai)\b{_H}[:=]?{_H}{number}",
            re.IGNORECASE,
        ),
        # Mata (jernih) - 8
        re.compile(
            rf"{name}(?P<gap>[^\d\n]*?)(?<![\w.,/]){number}(?![-–]\d|\w)",
            re.IGNORECASE,
        ),
    )


@lru_cache(maxsize=64)
def condition_patterns(aliases: tuple[str, ...]) -> tuple[re.Pattern, ...]:
    name = alias_group(aliases)
    return (
        # Remaining cells of the table row whose first cell names the attribute
        re.compile(
            rf"^{_H}\|?[^|\n]*?{name}[^|\n]*\|(?P<cells>[^\n]*)$",
            re.IGNORECASE | re.MULTILINE,
        ),
        re.compile(
            rf"{name}[^\n(:]*?(?:\((?P<paren>[^()\n]+)\)|:{_H}(?P<colon>[^\n.;|(]+))",
            re.IGNORECASE,
        ),
    )


def in_score_range(value: int) -> bool:
    return MIN_SCORE <= value <= MAX_SCORE


def find_explicit_score(
    text: str,
    aliases: tuple[str, ...],
    other_aliases: tuple[str, ...] = (),
) -> int | None:
    """First in-range score found by the ordered explicit-score patterns.

    A label or bare-number match is rejected when another attribute is
    named between this attribute and the number.
    """
    if not text:
        return None
    other = alias_pattern(other_aliases) if other_aliases else None
    for pattern in explicit_score_patterns(aliases):
        for match in pattern.finditer(text):
            gap = match.groupdict().get("gap")
            if gap and other is not None and other.search(gap):
                continue
            score = int(match.group("score"))
            if in_score_range(score):
                return score
    return None


def is_valid_condition(candidate: str) -> bool:
    """Short sanity check for an extracted condition phrase."""
    if not candidate or len(candidate) < 3:
        return False
    if _SYMBOLS_OR_DIGITS_RE.match(candidate):
        return False
    return not _SCORE_LABEL_ONLY_RE.match(candidate)


def _clean_condition(raw: str) -> str:
    return _TRAILING_SCORE_RE.sub("", collapse(raw)).strip(" -–:,;")


def extract_condition(text: str, aliases: tuple[str, ...]) -> str:
    """Condition phrase for an attribute, or ``""`` when none is usable."""
    if not text:
        return ""
    table_row, delimited = condition_patterns(aliases)

    for match in table_row.finditer(text):
        for cell in match.group("cells").split("|"):
            candidate = _clean_condition(cell)
            if is_valid_condition(candidate):
                return candidate

    for match in delimited.finditer(text):
        candidate = _clean_condition(match.group("paren") or match.group("colon") or "")
        if is_valid_condition(candidate):
            return candidate
    return ""


def is_generic_phrase(fragment: str) -> bool:
    lowered = fragment.lower()
    return any(phrase in lowered for phrase in GENERIC_PHRASES)


def section_spans(
    text: str,
    aliases: tuple[str, ...],
    other_aliases: tuple[str, ...] = (),
) -> list[str]:
    """Spans from each mention of the attribute to the next other attribute."""
    if not text:
        return []
    other = alias_pattern(other_aliases) if other_aliases else None
    spans: list[str] = []
    for match in alias_pattern(aliases).finditer(text):
        end = len(text)
        if other is not None:
            following = other.search(text, match.end())
            if following:
                end = following.start()
        spans.append(text[match.start():end])
    return spans


def extract_reasoning(
    text: str,
    aliases: tuple[str, ...],
    other_aliases: tuple[str, ...] = (),
) -> str:
    """First non-generic sentence fragment (> 10 chars) in the attribute's section."""
    for span in section_spans(text, aliases, other_aliases):
        for piece in _FRAGMENT_SPLIT_RE.split(span):
            fragment = collapse(piece).strip(" -–:,;")
            if len(fragment) > 10 and not is_generic_phrase(fragment):
                return fragment
    return ""
