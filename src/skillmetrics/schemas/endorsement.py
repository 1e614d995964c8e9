"""Endorsement Pydantic schemas."""

from datetime import datetime

from skillmetrics.schemas.base import CamelModel


class EndorsementCreate(CamelModel):
    """Schema for endorsing a skill."""

    comment: str | None = None


class Endorsement(CamelModel):
    """Complete endorsement schema, optionally enriched with joined fields."""

    id: int
    skill_id: int
    endorser_id: int
    endorsee_id: int
    comment: str | None
    created_at: datetime
    endorser_email: str | None = None
    skill_name: str | None = None
