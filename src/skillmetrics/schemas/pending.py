"""Pending skill update Pydantic schemas."""

from datetime import datetime

from pydantic import model_validator

from skillmetrics.schemas.base import CamelModel
from skillmetrics.schemas.enums import ApprovalStatus, SkillLevel
from skillmetrics.schemas.skill import SkillBase


class PendingSkillSubmit(SkillBase):
    """Schema for submitting a new skill or an edit for approval."""

    is_update: bool = False
    skill_id: int | None = None

    @model_validator(mode="after")
    def check_target_skill(self) -> "PendingSkillSubmit":
        """An update must name the skill it edits; a new skill must not."""
        if self.is_update and self.skill_id is None:
            raise ValueError("skillId is required when isUpdate is true")
        if not self.is_update and self.skill_id is not None:
            raise ValueError("skillId must be omitted for a new skill")
        return self


class ReviewRequest(CamelModel):
    """Schema for an approve or reject decision."""

    notes: str | None = None


class PendingSkillUpdate(CamelModel):
    """Complete pending skill update schema."""

    id: int
    user_id: int
    skill_id: int | None
    name: str
    category: str
    level: SkillLevel
    certification: str | None
    credly_link: str | None
    notes: str | None
    certification_date: datetime | None
    expiration_date: datetime | None
    is_update: bool
    status: ApprovalStatus
    submitted_at: datetime
    reviewed_at: datetime | None
    reviewed_by: int | None
    review_notes: str | None
    user_email: str | None = None
    username: str | None = None
