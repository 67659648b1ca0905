"""Rule-table field extraction from FNOL document text.

Every field is produced by an ordered chain of rules in ``EXTRACTION_RULES``;
the first rule that yields a non-empty value wins and later rules for the same
field are skipped.  Three match scopes exist:

* ``LINE``: the pattern is tried against each line on its own, so a match
  can never run into an unrelated line.
* ``TEXT``: the pattern is searched in the full text, line breaks kept.
* ``DOCUMENT``: the pattern is searched in the compacted single-line view.
"""

from __future__ import annotations

import re
from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum
from typing import Any, Union

from loguru import logger

from fnol_agent.core.amounts import parse_amount
from fnol_agent.core.classify import classify_asset_type, classify_claim_type
from fnol_agent.core.dates import find_date_token, parse_effective_dates, resolve_date
from fnol_agent.core.normalize import compact
from fnol_agent.schemas.claim import ContactDetails, ExtractedFields

EMAIL_KEY = "Contact Details.email"
PHONE_KEY = "Contact Details.phone"


class MatchScope(str, Enum):
    LINE = "line"
    TEXT = "text"
    DOCUMENT = "document"


@dataclass(frozen=True)
class _Document:
    """The three views of one input that rules are evaluated against."""

    text: str
    lines: tuple[str, ...]
    compacted: str

    @classmethod
    def from_text(cls, text: str) -> _Document:
        text = text.replace("\r\n", "\n").replace("\r", "\n")
        return cls(text=text, lines=tuple(text.split("\n")), compacted=compact(text))


def _hit(match: re.Match[str]) -> str:
    group = match.group(1) if match.re.groups else None
    return (group if group is not None else match.group(0)).strip()


@dataclass(frozen=True)
class FieldRule:
    """A regex evaluated in one scope, optionally post-processed."""

    field: str
    pattern: re.Pattern[str]
    scope: MatchScope = MatchScope.LINE
    post: Callable[[str], Any] | None = None

    def search(self, doc: _Document) -> str | None:
        if self.scope is MatchScope.LINE:
            for line in doc.lines:
                match = self.pattern.search(line)
                if match and (value := _hit(match)):
                    return value
            return None

        haystack = doc.text if self.scope is MatchScope.TEXT else doc.compacted
        match = self.pattern.search(haystack)
        return (_hit(match) or None) if match else None

    def apply(self, doc: _Document, values: dict[str, Any]) -> Any:
        raw = self.search(doc)
        if raw is None:
            return None
        return self.post(raw) if self.post else raw


@dataclass(frozen=True)
class DerivedRule:
    """A fallback computed from the document and the fields found so far."""

    field: str
    derive: Callable[[_Document, dict[str, Any]], Any]

    def apply(self, doc: _Document, values: dict[str, Any]) -> Any:
        return self.derive(doc, values)


Rule = Union[FieldRule, DerivedRule]


# ---------------------------------------------------------------------------
# Patterns
# ---------------------------------------------------------------------------

_I = re.IGNORECASE

_FIELD_LABEL = (
    r"(?:Policy|Policyholder|Effective|Date|Time|Location|Claimant|Insured|Complainant"
    r"|Third[ -]?Part(?:y|ies)|Phone|Contact|Tel|Mobile|Email|Asset|VIN|Registration|Reg\."
    r"|Estimated|Initial\s+Estimate|Estimate|Claim\s*Type|Type of Claim|Attachments|Attached)"
    r"[^:\n]{0,30}:"
)

POLICY_NUMBER_RE = re.compile(
    r"\bPolicy(?!\s*holder)(?:\s*(?:Number|No\.?|#))?\s*:?\s*"
    r"(?!(?:Number|No)(?:[\s.:#]|$))([A-Z0-9\-/]+)",
    _I,
)
POLICYHOLDER_RE = re.compile(r"\bPolicyholder(?:\s+Name)?\s*:?\s*([A-Za-z ,.'-]{2,100})$", _I)
EFFECTIVE_RE = re.compile(r"\bEffective(?:\s+Dates?)?\s*:?\s*(.+)", _I)
DATE_LINE_RE = re.compile(r"(?<!Effective )\b(?:Date of Loss|Date)\b\s*:?\s*(.+)", _I)
TIME_RE = re.compile(
    r"\b(?:Time of Loss|Time)\s*:?\s*([0-2]?\d[:.][0-5]\d(?:\s*[AP]\.?M\.?)?)", _I
)
LOCATION_RE = re.compile(r"\bLocation\s*:?\s*(.+)", _I)
AT_PLACE_RE = re.compile(r"\b[Aa]t\s+([A-Z][A-Za-z0-9 ,\-]+)")
DESCRIPTION_BLOCK_RE = re.compile(
    r"\b(?<!Contact )(?:Incident\s+Description|Description|Details)\b[ \t]*:?[ \t]*"
    rf"(?:\n(?!\s*{_FIELD_LABEL})\s*)?"
    r"(\S[\s\S]{19,1199})",
    _I,
)
CLAIMANT_RE = re.compile(
    r"\b(?:Claimant|Insured|Complainant)(?:\s+Name)?\s*:?\s*([A-Za-z ,.'-]{2,100})$",
    _I,
)
THIRD_PARTY_RE = re.compile(r"\bThird[ -]?Part(?:y|ies)\s*:?\s*(.+)", _I)
EMAIL_RE = re.compile(r"[\w.\-]+@[\w.\-]+\.\w+")
PHONE_LINE_RE = re.compile(r"\b(?:Phone|Contact|Tel|Mobile)\s*:?\s*([+\d\-\s()]{7,20})", _I)
PHONE_ANY_RE = re.compile(
    r"(?<![\w/-])(?!\d{4}-\d{1,2}-\d{1,2}\b)(?![0-3]?\d[-/]\d{1,2}[-/]\d{2,4}\b)"
    r"(\+?\d[\d\-\s()]{6,}\d)(?![\w/-])"
)
ASSET_ID_RE = re.compile(
    r"\b(?:Asset\s*ID|VIN|Registration|Reg\.?)(?![A-Za-z])(?:\s*(?:Number|No\.?))?"
    r"\s*[:#]?\s*([A-Z0-9\-]{3,50})",
    _I,
)
ESTIMATE_RE = re.compile(
    r"(?:Estimated\s+Damage|Initial\s+Estimate|Estimated\s+Loss|Estimate)\s*:?\s*"
    r"(?:[₹$€£]|Rs\.?|INR|USD)?\s*(-?[\d,]+(?:\.\d{1,2})?)",
    _I,
)
INITIAL_ESTIMATE_LINE_RE = re.compile(r"\bInitial\s+Estimate\s*:?\s*(.+)", _I)
CLAIM_TYPE_RE = re.compile(r"(?:Claim\s*Type|Type of Claim)\s*:?\s*([A-Za-z ]{3,30})$", _I)
ATTACHMENTS_RE = re.compile(r"\b(?:Attachments?|Attached)\s*:\s*(.+)$", _I)
ATTACHMENT_MENTION_RE = re.compile(
    r"\b(?:attachments|attached|photos|images|police report|fir)\b", _I
)

DESCRIPTION_KEYWORDS_RE = re.compile(
    r"\b(?:loss|damage|incident|collision|theft|injury|stolen)\b", _I
)
_PARAGRAPH_BREAK_RE = re.compile(r"\n[ \t]*\n")

# A line that opens another labelled field ends a description block
_FIELD_LABEL_LINE_RE = re.compile(rf"^\s*{_FIELD_LABEL}", _I)


# ---------------------------------------------------------------------------
# Post-processors and fallbacks
# ---------------------------------------------------------------------------


def _date_value(remainder: str) -> str | None:
    return resolve_date(find_date_token(remainder) or remainder)


def _description_block(block: str) -> str | None:
    paragraph = _PARAGRAPH_BREAK_RE.split(block, maxsplit=1)[0]
    kept: list[str] = []
    for i, line in enumerate(paragraph.split("\n")):
        if i and _FIELD_LABEL_LINE_RE.match(line):
            break
        kept.append(line.rstrip())
    return "\n".join(kept).strip() or None


def _keyword_paragraph(doc: _Document, values: dict[str, Any]) -> str | None:
    for paragraph in _PARAGRAPH_BREAK_RE.split(doc.text):
        if DESCRIPTION_KEYWORDS_RE.search(paragraph):
            return paragraph.strip() or None
    return None


def _place(phrase: str) -> str | None:
    return phrase.strip(" ,-") or None


def _yes(_: str) -> str:
    return "Yes"


EXTRACTION_RULES: tuple[Rule, ...] = (
    FieldRule("Policy Number", POLICY_NUMBER_RE),
    FieldRule("Policyholder Name", POLICYHOLDER_RE),
    FieldRule("Effective Dates", EFFECTIVE_RE, post=parse_effective_dates),
    FieldRule("Date", DATE_LINE_RE, post=_date_value),
    FieldRule("Time", TIME_RE),
    FieldRule("Location", LOCATION_RE),
    FieldRule("Location", AT_PLACE_RE, MatchScope.TEXT, post=_place),
    FieldRule("Description", DESCRIPTION_BLOCK_RE, MatchScope.TEXT, post=_description_block),
    DerivedRule("Description", _keyword_paragraph),
    FieldRule("Claimant", CLAIMANT_RE),
    DerivedRule("Claimant", lambda doc, values: values.get("Policyholder Name")),
    FieldRule("Third Parties", THIRD_PARTY_RE),
    FieldRule(EMAIL_KEY, EMAIL_RE, MatchScope.TEXT),
    FieldRule(PHONE_KEY, PHONE_LINE_RE),
    FieldRule(PHONE_KEY, PHONE_ANY_RE),
    DerivedRule("Asset Type", lambda doc, values: classify_asset_type(doc.compacted)),
    FieldRule("Asset ID", ASSET_ID_RE),
    FieldRule("Estimated Damage", ESTIMATE_RE, post=parse_amount),
    FieldRule("Claim Type", CLAIM_TYPE_RE),
    DerivedRule("Claim Type", lambda doc, values: classify_claim_type(doc.compacted)),
    FieldRule("Attachments", ATTACHMENTS_RE),
    FieldRule("Attachments", ATTACHMENT_MENTION_RE, MatchScope.DOCUMENT, post=_yes),
    FieldRule("Initial Estimate", ESTIMATE_RE),
    FieldRule("Initial Estimate", INITIAL_ESTIMATE_LINE_RE),
)


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def extract_fields(
    text: str | None, rules: tuple[Rule, ...] = EXTRACTION_RULES
) -> ExtractedFields:
    """Run the rule chain over *text* and return the fixed-schema record.

    Never raises for any string input; fields no rule could fill are ``None``.
    """
    doc = _Document.from_text(text or "")
    values: dict[str, Any] = {}

    for rule in rules:
        if values.get(rule.field) is not None:
            continue
        value = rule.apply(doc, values)
        if value is not None:
            values[rule.field] = value

    contact = ContactDetails(email=values.pop(EMAIL_KEY, None), phone=values.pop(PHONE_KEY, None))
    fields = ExtractedFields.model_validate({**values, "Contact Details": contact})

    logger.debug(
        "Extracted {n}/{total} fields from {chars} chars",
        n=sum(1 for v in fields.model_dump().values() if v is not None),
        total=len(ExtractedFields.model_fields),
        chars=len(doc.text),
    )
    return fields
