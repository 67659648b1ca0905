"""Pydantic models for the fields extracted from an FNOL document."""

from __future__ import annotations

from typing import Any, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field


class EffectiveDates(BaseModel):
    """Policy coverage window as found in the document (raw tokens)."""

    model_config = ConfigDict(populate_by_name=True)

    from_: str = Field(..., alias="from", description="Start of the coverage period")
    to: str = Field(..., description="End of the coverage period")


class ContactDetails(BaseModel):
    """Email and phone pair. Always present; members may be ``None``."""

    email: Optional[str] = Field(default=None, description="First email address in the document")
    phone: Optional[str] = Field(default=None, description="Labelled or phone-like number")


class ExtractedFields(BaseModel):
    """Fixed-schema record of every field the extractor knows about.

    Attributes are snake_case; the JSON representation uses the display names
    (``"Policy Number"``, ``"Estimated Damage"``, ...) as keys and every key is
    always emitted, ``null`` when absent.
    """

    model_config = ConfigDict(populate_by_name=True)

    policy_number: Optional[str] = Field(default=None, alias="Policy Number")
    policyholder_name: Optional[str] = Field(default=None, alias="Policyholder Name")
    effective_dates: Optional[Union[EffectiveDates, str]] = Field(
        default=None, alias="Effective Dates"
    )
    date: Optional[str] = Field(
        default=None,
        alias="Date",
        description="Canonical ISO date-time when parseable, otherwise the raw token",
    )
    time: Optional[str] = Field(default=None, alias="Time")
    location: Optional[str] = Field(default=None, alias="Location")
    description: Optional[str] = Field(default=None, alias="Description")
    claimant: Optional[str] = Field(default=None, alias="Claimant")
    third_parties: Optional[str] = Field(default=None, alias="Third Parties")
    contact_details: ContactDetails = Field(
        default_factory=ContactDetails, alias="Contact Details"
    )
    asset_type: Optional[Literal["vehicle", "property"]] = Field(default=None, alias="Asset Type")
    asset_id: Optional[str] = Field(default=None, alias="Asset ID")
    estimated_damage: Optional[float] = Field(default=None, alias="Estimated Damage")
    claim_type: Optional[str] = Field(default=None, alias="Claim Type")
    attachments: Optional[str] = Field(default=None, alias="Attachments")
    initial_estimate: Optional[str] = Field(default=None, alias="Initial Estimate")

    @classmethod
    def field_names(cls) -> list[str]:
        """Display names of every field, in schema order."""
        return [info.alias or name for name, info in cls.model_fields.items()]

    def get_field(self, name: str) -> Any:
        """Return the value stored under display name *name*."""
        for attr, info in type(self).model_fields.items():
            if info.alias == name:
                return getattr(self, attr)
        raise KeyError(name)
