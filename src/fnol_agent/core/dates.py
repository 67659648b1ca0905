"""Date token detection and calendar resolution.

Parsing never consults the clock: tokens without a four-digit year are not
resolved, and dateutil fills missing components from a fixed default.
"""

from __future__ import annotations

import re
from datetime import datetime

from dateutil import parser as date_parser
from dateutil.parser import ParserError

from fnol_agent.schemas.claim import EffectiveDates

_DATE_TOKEN = (
    r"\d{4}-\d{2}-\d{2}"
    r"|[0-3]?\d[-/][A-Za-z0-9]+[-/]\d{2,4}"
    r"|\b[A-Za-z]{3,9}\s+\d{1,2}(?:,\s*|\s+)\d{2,4}\b"
)

DATE_TOKEN_RE = re.compile(f"({_DATE_TOKEN})")
DATE_RANGE_RE = re.compile(
    f"({_DATE_TOKEN})\\s*(?:to|-)\\s*({_DATE_TOKEN})",
    re.IGNORECASE,
)
_YEAR_RE = re.compile(r"\d{4}")

_DEFAULT_DATETIME = datetime(2000, 1, 1)


def find_date_token(text: str | None) -> str | None:
    """Return the first date-like token inside *text*."""
    if not text:
        return None
    match = DATE_TOKEN_RE.search(text)
    return match.group(1) if match else None


def parse_calendar_date(token: str | None) -> datetime | None:
    """Parse *token* as a calendar date, ``None`` if it is not one.

    Strict ISO 8601 is tried first so ``2024-03-10`` is never read day-first;
    other layouts (``01-Jan-2024``, ``10/03/2024``, ``March 5, 2024``) fall
    back to dateutil's lenient parser with day-first ordering.
    """
    if not token:
        return None
    token = token.strip()
    if not _YEAR_RE.search(token):
        return None

    try:
        return date_parser.isoparse(token)
    except ValueError:
        pass

    try:
        return date_parser.parse(token, dayfirst=True, default=_DEFAULT_DATETIME)
    except (ParserError, ValueError, OverflowError):
        return None


def resolve_date(token: str | None) -> str | None:
    """Canonical ISO date-time for *token*, or the token verbatim if unparseable."""
    if token is None:
        return None
    parsed = parse_calendar_date(token)
    if parsed is None:
        return token
    return parsed.replace(tzinfo=None).isoformat(timespec="seconds")


def parse_effective_dates(text: str | None) -> EffectiveDates | str | None:
    """Structure ``"01-Jan-2024 to 31-Dec-2024"`` as ``{from, to}``.

    Text without a recognisable range is returned unchanged.
    """
    if not text:
        return None
    match = DATE_RANGE_RE.search(text)
    if match is None:
        return text
    return EffectiveDates(from_=match.group(1).strip(), to=match.group(2).strip())
