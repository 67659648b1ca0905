"""Text normalisation: compact scanning view and line-noise stripping.

``compact`` produces the single-line view used for whole-document keyword
scans.  ``strip_line_noise`` removes form-template residue (field labels,
placeholder tokens, bare numbers) that PDF-to-text conversion leaves behind.
"""

from __future__ import annotations

import re

from loguru import logger

_WHITESPACE_RE = re.compile(r"\s+")

# Template labels / placeholders that appear on their own line in converted forms
_LABEL_LINE_RE = re.compile(
    r"^(PHONE|PRIMARY|SECONDARY|CELL|BUS|OWNER'S|DRIVER'S|AUTOMOBILE LOSS NOTICE"
    r"|DATE OF LOSS|PHONE #|V\.I\.N\.|POLICY)$",
    re.IGNORECASE,
)
_YES_NO_LINE_RE = re.compile(r"^(Y\s*/\s*N|Y\s*N|NAI|NA)$", re.IGNORECASE)
_NUMERIC_LINE_RE = re.compile(r"^[\d\-\s/:]{1,20}$")
_CAPS_WORD_RE = re.compile(r"^[A-Z]{2,10}$")
_TRAILING_HYPHEN_RE = re.compile(r"(?:-\s*)+$")
_BLANK_RUN_RE = re.compile(r"\n{2,}")
_SPACE_RUN_RE = re.compile(r"[ \t]{2,}")

_HEADING_MAX_WORDS = 6


def compact(text: str | None) -> str:
    """Collapse CR / tab / NBSP and whitespace runs into single spaces."""
    if not text:
        return ""
    text = str(text).replace("\r", " ").replace("\t", " ").replace("\u00a0", " ")
    return _WHITESPACE_RE.sub(" ", text).strip()


def is_heading_line(line: str) -> bool:
    """True when more than 70% of the letters are uppercase and the line is short."""
    stripped = (line or "").strip()
    if not stripped:
        return False
    letters = [c for c in stripped if c.isascii() and c.isalpha()]
    if not letters:
        return False
    uppers = sum(1 for c in letters if c.isupper())
    return uppers / len(letters) > 0.7 and len(stripped) < 80


def _is_noise(line: str) -> bool:
    if not line:
        return True
    if _LABEL_LINE_RE.match(line):
        return True
    if is_heading_line(line) and len(line.split()) <= _HEADING_MAX_WORDS:
        return True
    if _YES_NO_LINE_RE.match(line):
        return True
    if _NUMERIC_LINE_RE.match(line):
        return True
    return bool(_CAPS_WORD_RE.match(line))


def strip_line_noise(text: str | None) -> str:
    """Drop label / placeholder lines and re-join what survives.

    Hyphenated line breaks lose their trailing hyphen, blank-line runs collapse
    to a single blank line and interior space runs collapse to one space.
    """
    if not text:
        return ""

    lines = [_SPACE_RUN_RE.sub(" ", line.strip()) for line in text.splitlines()]
    kept = [line for line in lines if not _is_noise(line)]

    cleaned = "\n".join(_TRAILING_HYPHEN_RE.sub("", line).rstrip() for line in kept)
    cleaned = _BLANK_RUN_RE.sub("\n\n", cleaned)
    cleaned = _SPACE_RUN_RE.sub(" ", cleaned).strip()

    logger.debug(
        "Line-noise filter kept {kept}/{total} lines",
        kept=len(kept),
        total=len(lines),
    )
    return cleaned
