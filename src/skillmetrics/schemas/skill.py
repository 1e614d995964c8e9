"""Skill Pydantic schemas."""

from datetime import datetime
from typing import ClassVar

from pydantic import Field

from skillmetrics.schemas.base import CamelModel, UpdateModel
from skillmetrics.schemas.enums import SkillLevel


class SkillBase(CamelModel):
    """Base skill schema with common fields."""

    name: str = Field(min_length=1)
    category: str = Field(min_length=1)
    level: SkillLevel
    certification: str | None = None
    credly_link: str | None = None
    notes: str | None = None
    certification_date: datetime | None = None
    expiration_date: datetime | None = None


class SkillCreate(SkillBase):
    """Schema for creating a skill directly (without approval)."""

    pass


class SkillUpdate(UpdateModel):
    """
    Schema for editing a skill.

    ``change_note`` is not a skill column; it is stored on the history row
    written when the level changes.
    """

    non_nullable_fields: ClassVar[tuple[str, ...]] = ("name", "category", "level")

    name: str | None = Field(default=None, min_length=1)
    category: str | None = Field(default=None, min_length=1)
    level: SkillLevel | None = None
    certification: str | None = None
    credly_link: str | None = None
    notes: str | None = None
    certification_date: datetime | None = None
    expiration_date: datetime | None = None
    change_note: str | None = None


class Skill(SkillBase):
    """Complete skill schema with database fields."""

    id: int
    user_id: int
    endorsement_count: int
    last_updated: datetime


class SkillHistory(CamelModel):
    """Skill level change audit row."""

    id: int
    skill_id: int
    user_id: int
    previous_level: SkillLevel | None
    new_level: SkillLevel
    change_note: str | None
    created_at: datetime
