"""Pydantic schemas for the FNOL extraction and routing system."""

from fnol_agent.schemas.claim import ContactDetails, EffectiveDates, ExtractedFields
from fnol_agent.schemas.routing import Route, RoutingConfig, RoutingResult

__all__ = [
    "ContactDetails",
    "EffectiveDates",
    "ExtractedFields",
    "Route",
    "RoutingConfig",
    "RoutingResult",
]
