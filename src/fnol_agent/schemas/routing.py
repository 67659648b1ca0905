"""Pydantic models for routing configuration and routing results."""

from __future__ import annotations

from enum import Enum
from typing import TYPE_CHECKING, Any

from pydantic import BaseModel, ConfigDict, Field

from fnol_agent.schemas.claim import ExtractedFields

if TYPE_CHECKING:
    from omegaconf import DictConfig


class Route(str, Enum):
    """Every processing queue a claim can be sent to."""

    MANUAL_REVIEW = "Manual review"
    INVESTIGATION = "Investigation"
    SPECIALIST_QUEUE = "Specialist Queue"
    FAST_TRACK = "Fast-track"
    STANDARD = "Standard processing"


MANDATORY_FIELDS: tuple[str, ...] = (
    "Policy Number",
    "Policyholder Name",
    "Effective Dates",
    "Date",
    "Location",
    "Description",
    "Claimant",
    "Claim Type",
    "Attachments",
    "Initial Estimate",
)

INVESTIGATION_KEYWORDS: tuple[str, ...] = (
    "fraud",
    "fraudulent",
    "staged",
    "inconsistent",
    "suspect",
    "suspicious",
)

FAST_TRACK_THRESHOLD = 25000.0


class RoutingConfig(BaseModel):
    """Read-only rule set consumed by the routing engine."""

    model_config = ConfigDict(frozen=True)

    mandatory_fields: tuple[str, ...] = Field(
        default=MANDATORY_FIELDS,
        description="Fields whose absence forces manual review",
    )
    investigation_keywords: tuple[str, ...] = Field(
        default=INVESTIGATION_KEYWORDS,
        description="Description keywords that flag a claim for investigation",
    )
    fast_track_threshold: float = Field(
        default=FAST_TRACK_THRESHOLD,
        ge=0,
        description="Estimated damage strictly below this amount is fast-tracked",
    )

    @classmethod
    def from_cfg(cls, cfg: DictConfig | None) -> RoutingConfig:
        """Build from the ``routing`` config section; missing keys keep defaults."""
        if cfg is None:
            return cls()
        from omegaconf import OmegaConf

        data: dict[str, Any] = OmegaConf.to_container(cfg, resolve=True)  # type: ignore[assignment]
        return cls(**{k: v for k, v in data.items() if v is not None})


class RoutingResult(BaseModel):
    """Extraction + routing outcome for a single document."""

    model_config = ConfigDict(populate_by_name=True)

    extracted_fields: ExtractedFields = Field(..., alias="extractedFields")
    missing_fields: list[str] = Field(default_factory=list, alias="missingFields")
    inconsistent_fields: list[str] = Field(default_factory=list, alias="inconsistentFields")
    recommended_route: Route = Field(..., alias="recommendedRoute")
    reasoning: str = Field(..., description="Why the route was chosen")

    def to_json_dict(self) -> dict[str, Any]:
        """JSON-ready dict keyed by the public (camelCase / display) names."""
        return self.model_dump(mode="json", by_alias=True)
