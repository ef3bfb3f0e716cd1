"""Condition vocabulary mapped to SNI score bands.

The table is ordered worst condition first, and longer phrases precede
the words they contain ("sangat keruh" before "keruh", "merah cerah"
before "merah"). ``match_keyword`` scans the poor band before the whole
table, so a description mentioning both "merah cerah" and "busuk" lands in
the spoilage band, and hedged phrases such as "agak keruh" still resolve to
the poor keyword they contain.
"""

import re
from functools import lru_cache
from typing import NamedTuple

# Keywords scoring at or below this are scanned first
POOR_THRESHOLD = 3

KeywordTable = tuple[tuple[str, int], ...]

CONDITION_SCORES: KeywordTable = (
    # Very poor (1)
    ("berbau busuk", 1), ("membusuk", 1), ("pembusukan", 1), ("busuk", 1),
    ("sangat buruk", 1), ("kondisi buruk", 1), ("sangat rusak", 1),
    ("sangat keruh", 1), ("sangat kusam", 1), ("sangat pucat", 1),
    ("sangat lembek", 1), ("sangat kendur", 1), ("sangat kotor", 1),
    ("sangat lengket", 1), ("sangat kental", 1), ("berjamur", 1),
    ("berulat", 1), ("berbintik hitam", 1), ("kehitaman", 1),
    ("berbusa", 1), ("berbuih", 1), ("terpisah", 1), ("deteriorasi", 1),
    ("hancur", 1), ("rusak", 1),
    ("rotten", 1), ("spoiled", 1), ("decomposing", 1), ("putrid", 1),
    ("moldy", 1), ("foamy", 1),
    # Poor (2-3)
    ("tidak segar", 2), ("kurang segar", 2), ("mudah hancur", 2),
    ("keabu-abuan", 2), ("abu-abu", 2), ("coklat", 2), ("cokelat", 2),
    ("cekung", 2), ("berlendir", 2), ("kental", 2), ("lengket", 2),
    ("kotor", 2), ("lembek", 2), ("rapuh", 2), ("berminyak berlebih", 2),
    ("not fresh", 2), ("sunken", 2), ("greyish", 2), ("grey", 2),
    ("gray", 2), ("brown", 2), ("slimy", 2), ("sticky", 2), ("thick", 2),
    ("dirty", 2), ("mushy", 2), ("brittle", 2),
    ("keruh", 3), ("kusam", 3), ("pucat", 3), ("keras", 3), ("kendur", 3),
    ("cloudy", 3), ("murky", 3), ("dull", 3), ("pale", 3), ("loose", 3),
    # Fair (4-5)
    ("agak keruh", 5), ("agak pucat", 5), ("agak kendur", 5), ("sedang", 5),
    ("rata", 5), ("slightly cloudy", 5), ("slightly pale", 5),
    ("moderate", 5), ("flat", 5), ("soft", 5),
    # Phrases containing good-band words
    ("merah cerah", 9), ("merah segar", 8), ("bright red", 9), ("sangat baik", 8),
    # Good (6-7)
    ("merah muda", 7), ("merah", 7), ("tipis", 7), ("padat", 7),
    ("kencang", 7), ("baik", 7),
    ("pink", 7), ("red", 7), ("thin", 7), ("dense", 7), ("good", 7),
    # Excellent (8-9)
    ("jernih", 9), ("transparan", 9), ("bening", 9),
    ("mengkilap", 9), ("prima", 9), ("utuh", 9),
    ("clear", 9), ("transparent", 9), ("glossy", 9),
    ("shiny", 9), ("intact", 9),
    ("cembung", 8), ("terang", 8),
    ("cerah", 8), ("elastis", 8), ("kenyal", 8), ("kompak", 8),
    ("solid", 8), ("segar", 8), ("optimal", 8),
    ("bulging", 8), ("bright", 8), ("elastic", 8), ("springy", 8),
    ("firm", 8), ("compact", 8), ("fresh", 8), ("excellent", 8),
)


class KeywordMatch(NamedTuple):
    keyword: str
    score: int


@lru_cache(maxsize=512)
def _keyword_pattern(keyword: str) -> re.Pattern:
    body = re.escape(keyword.lower()).replace(r"\ ", r"\s+")
    # Hyphens count as word characters: "rata-rata" (average) is not "rata" (flat)
    return re.compile(rf"(?<![\w-]){body}(?![\w-])")


def match_keyword(
    text: str,
    table: KeywordTable = CONDITION_SCORES,
    poor_threshold: int = POOR_THRESHOLD,
) -> KeywordMatch | None:
    """Return the first table keyword found in ``text``.

    Scans keywords scoring <= ``poor_threshold`` first, then the full
    table; table order decides ties within a pass.
    """
    if not text or not text.strip():
        return None
    lowered = text.lower()

    for keyword, score in table:
        if score <= poor_threshold and _keyword_pattern(keyword).search(lowered):
            return KeywordMatch(keyword, score)

    for keyword, score in table:
        if _keyword_pattern(keyword).search(lowered):
            return KeywordMatch(keyword, score)
    return None
