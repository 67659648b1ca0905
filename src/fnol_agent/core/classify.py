"""Keyword-priority classifiers for claim type and asset type.

Each table is scanned top to bottom and the first bucket with a whole-word
keyword hit wins.
"""

from __future__ import annotations

import re

from fnol_agent.core.normalize import compact

KeywordTable = tuple[tuple[str, tuple[str, ...]], ...]

CLAIM_TYPE_TABLE: KeywordTable = (
    ("injury", ("injury", "injured", "hospital")),
    ("theft", ("theft", "stolen")),
    ("vehicle", ("vehicle", "car", "truck", "motorcycle", "bike")),
    ("property", ("property", "house", "home")),
)

ASSET_TYPE_TABLE: KeywordTable = (
    ("vehicle", ("car", "vehicle", "truck", "motorcycle", "bike", "van", "auto")),
    ("property", ("house", "home", "property", "building", "apartment", "flat")),
)


def _compile(table: KeywordTable) -> tuple[tuple[str, re.Pattern[str]], ...]:
    return tuple(
        (bucket, re.compile(r"\b(?:" + "|".join(map(re.escape, words)) + r")\b", re.IGNORECASE))
        for bucket, words in table
    )


_CLAIM_TYPE_PATTERNS = _compile(CLAIM_TYPE_TABLE)
_ASSET_TYPE_PATTERNS = _compile(ASSET_TYPE_TABLE)


def _first_bucket(
    patterns: tuple[tuple[str, re.Pattern[str]], ...], text: str | None
) -> str | None:
    scan = compact(text)
    for bucket, pattern in patterns:
        if pattern.search(scan):
            return bucket
    return None


def classify_claim_type(text: str | None) -> str | None:
    """Infer ``injury`` / ``theft`` / ``vehicle`` / ``property`` from keywords."""
    return _first_bucket(_CLAIM_TYPE_PATTERNS, text)


def classify_asset_type(text: str | None) -> str | None:
    """Infer ``vehicle`` or ``property`` from keywords, vehicle words first."""
    return _first_bucket(_ASSET_TYPE_PATTERNS, text)
