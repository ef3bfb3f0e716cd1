"""Formatting-residue removal for upstream model text.

Vision models answer in loosely formatted markdown: bold/italic wrappers,
table pipes, headers, bullets mixed with emphasis (``- **``, ``* -``) and
stray symbols. ``sanitize`` turns such text into plain lines of prose and
is idempotent, so already-clean text passes through unchanged.
"""

import re

# [label](url) -> label
_LINK_RE = re.compile(r"\[([^\[\]\n]*)\]\([^()\n]*\)")

# Characters that only ever carry formatting in model output
_FORMAT_CHARS_RE = re.compile(r"[*_`~|#\"“”]")

# Bullets, blockquotes and leading colons at the start of a line,
# including doubled or mismatched combinations ("- -", "• :", "> -")
_LEADING_RESIDUE_RE = re.compile(r"^[^\S\n]*(?:[-•·:>+][^\S\n]*)+", re.MULTILINE)

# Horizontal whitespace (everything except the line break)
_HSPACE_RE = re.compile(r"[^\S\n]+")

# Lines left with nothing but symbols (table separators, lone bullets)
_SYMBOL_LINE_RE = re.compile(r"^[\W_]*$")

# Superset of the leading residue characters so trimming never exposes new residue
_EDGE_PUNCT = " \t\n:-•·>+,;"


def _strip_links(text: str) -> str:
    # Repeat until stable: unwrapping one link can expose another
    while True:
        replaced = _LINK_RE.sub(r"\1", text)
        if replaced == text:
            return replaced
        text = replaced


def sanitize(raw: object) -> str:
    """Strip markdown/table residue and normalize whitespace.

    Never raises. Non-string input (None, bytes, numbers) is treated as
    empty text.
    """
    if not isinstance(raw, str) or not raw:
        return ""

    text = raw.replace("\r\n", "\n").replace("\r", "\n")
    text = _FORMAT_CHARS_RE.sub("", text)
    text = _strip_links(text)
    text = _LEADING_RESIDUE_RE.sub("", text)

    lines: list[str] = []
    for line in text.split("\n"):
        line = _HSPACE_RE.sub(" ", line).strip()
        if not line or _SYMBOL_LINE_RE.match(line):
            continue
        lines.append(line)

    return "\n".join(lines).strip(_EDGE_PUNCT)


def collapse(raw: object) -> str:
    """Sanitize and join everything onto a single line."""
    return " ".join(sanitize(raw).split())
