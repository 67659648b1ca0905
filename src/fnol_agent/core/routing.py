"""Route selection and end-to-end extract-and-route entry point."""

from __future__ import annotations

from loguru import logger

from fnol_agent.core.extraction import extract_fields
from fnol_agent.core.normalize import strip_line_noise
from fnol_agent.core.validation import find_inconsistencies, find_missing_fields
from fnol_agent.schemas.claim import ExtractedFields
from fnol_agent.schemas.routing import Route, RoutingConfig, RoutingResult

_DEFAULT_CONFIG = RoutingConfig()


def _number(value: float) -> str:
    return f"{value:f}".rstrip("0").rstrip(".")


def choose_route(
    fields: ExtractedFields,
    missing: list[str],
    config: RoutingConfig = _DEFAULT_CONFIG,
) -> tuple[Route, str]:
    """Apply the routing rules in priority order and return ``(route, reason)``.

    1. Any mandatory field missing        → Manual review
    2. Investigation keyword in description → Investigation
    3. Claim type is ``injury``            → Specialist Queue
    4. Estimated damage below threshold    → Fast-track, otherwise Standard
    5. Estimated damage unknown            → Standard processing
    """
    if missing:
        return Route.MANUAL_REVIEW, "One or more mandatory fields missing"

    description = (fields.description or "").lower()
    keyword = next((k for k in config.investigation_keywords if k.lower() in description), None)
    if keyword is not None:
        return Route.INVESTIGATION, f"Description contains '{keyword}'"

    if (fields.claim_type or "").strip().lower() == "injury":
        return Route.SPECIALIST_QUEUE, "Claim type = injury"

    damage = fields.estimated_damage
    if damage is not None:
        threshold = config.fast_track_threshold
        if damage < threshold:
            return Route.FAST_TRACK, f"Estimated damage ({_number(damage)}) < {_number(threshold)}"
        return Route.STANDARD, f"Estimated damage ({_number(damage)}) >= {_number(threshold)}"

    return Route.STANDARD, "Estimated damage unknown -> Standard processing"


def compose_reasoning(reason: str, inconsistent: list[str], missing: list[str]) -> str:
    """Join the rule reason with any inconsistency and missing-field notes."""
    parts = [reason]
    if inconsistent:
        parts.append("Inconsistencies: " + ", ".join(inconsistent))
    if missing:
        parts.append("Missing fields: " + ", ".join(missing))
    return " ; ".join(parts)


def extract_and_route(
    text: str | None,
    config: RoutingConfig | None = None,
    *,
    strip_noise: bool = False,
) -> RoutingResult:
    """Extract claim fields from *text* and recommend a processing route.

    Parameters
    ----------
    text:
        Decoded document text; ``None`` and ``""`` are accepted.
    config:
        Rule set to apply; the built-in defaults when omitted.
    strip_noise:
        Run the line-noise filter first (meant for text converted from PDF).

    Returns
    -------
    RoutingResult
        Fully shaped result; every schema field is present.
    """
    config = config or _DEFAULT_CONFIG
    text = text or ""
    if strip_noise:
        text = strip_line_noise(text)

    fields = extract_fields(text)
    missing = find_missing_fields(fields, config.mandatory_fields)
    inconsistent = find_inconsistencies(fields)
    route, reason = choose_route(fields, missing, config)

    logger.info(
        "Routed document → {route} ({n_missing} missing, {n_bad} inconsistent)",
        route=route.value,
        n_missing=len(missing),
        n_bad=len(inconsistent),
    )
    return RoutingResult(
        extracted_fields=fields,
        missing_fields=missing,
        inconsistent_fields=inconsistent,
        recommended_route=route,
        reasoning=compose_reasoning(reason, inconsistent, missing),
    )
