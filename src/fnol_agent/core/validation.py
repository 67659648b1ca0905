"""Completeness and cross-field consistency checks on extracted fields."""

from __future__ import annotations

from collections.abc import Callable, Iterable

from loguru import logger

from fnol_agent.core.dates import parse_calendar_date
from fnol_agent.schemas.claim import EffectiveDates, ExtractedFields

DATE_OUTSIDE_EFFECTIVE = "Date is outside Effective Dates"
NEGATIVE_DAMAGE = "Estimated Damage negative"

ConsistencyRule = Callable[[ExtractedFields], "str | None"]


def find_missing_fields(fields: ExtractedFields, mandatory: Iterable[str]) -> list[str]:
    """Mandatory field names whose value is ``None`` or a blank string, in order."""
    missing: list[str] = []
    for name in mandatory:
        value = fields.get_field(name)
        if value is None or (isinstance(value, str) and not value.strip()):
            missing.append(name)
    return missing


# ---------------------------------------------------------------------------
# Rules: each returns a finding or ``None``; unparseable operands are skipped
# ---------------------------------------------------------------------------


def check_date_within_effective(fields: ExtractedFields) -> str | None:
    """Flag a loss date outside the ``[from, to]`` coverage window (inclusive)."""
    window = fields.effective_dates
    if not fields.date or not isinstance(window, EffectiveDates):
        return None

    loss = parse_calendar_date(fields.date)
    start = parse_calendar_date(window.from_)
    end = parse_calendar_date(window.to)
    if loss is None or start is None or end is None:
        logger.debug("Skipping effective-date check, unparseable operand")
        return None

    if not (start.date() <= loss.date() <= end.date()):
        return DATE_OUTSIDE_EFFECTIVE
    return None


def check_damage_non_negative(fields: ExtractedFields) -> str | None:
    """Flag a negative estimated damage amount."""
    if fields.estimated_damage is not None and fields.estimated_damage < 0:
        return NEGATIVE_DAMAGE
    return None


CONSISTENCY_RULES: tuple[ConsistencyRule, ...] = (
    check_date_within_effective,
    check_damage_non_negative,
)


def find_inconsistencies(
    fields: ExtractedFields,
    rules: Iterable[ConsistencyRule] = CONSISTENCY_RULES,
) -> list[str]:
    """Run every consistency rule and collect the findings in rule order."""
    findings = [finding for rule in rules if (finding := rule(fields))]
    if findings:
        logger.debug("Consistency findings: {findings}", findings=findings)
    return findings
