"""Skill template and skill target Pydantic schemas."""

from datetime import date, datetime
from typing import ClassVar

from pydantic import Field

from skillmetrics.schemas.base import CamelModel, UpdateModel
from skillmetrics.schemas.enums import SkillLevel


class SkillTemplateBase(CamelModel):
    """Base skill template schema with common fields."""

    name: str = Field(min_length=1)
    category: str = Field(min_length=1)
    description: str | None = None
    is_recommended: bool = False
    target_level: SkillLevel | None = None
    target_date: date | None = None


class SkillTemplateCreate(SkillTemplateBase):
    """Schema for creating a skill template."""

    pass


class SkillTemplateUpdate(UpdateModel):
    """Schema for editing a skill template."""

    non_nullable_fields: ClassVar[tuple[str, ...]] = ("name", "category", "is_recommended")

    name: str | None = Field(default=None, min_length=1)
    category: str | None = Field(default=None, min_length=1)
    description: str | None = None
    is_recommended: bool | None = None
    target_level: SkillLevel | None = None
    target_date: date | None = None


class SkillTemplate(SkillTemplateBase):
    """Complete skill template schema with database fields."""

    id: int
    created_at: datetime
    updated_at: datetime


class SkillTargetBase(CamelModel):
    """Base skill target schema with common fields."""

    name: str = Field(min_length=1)
    description: str | None = None
    target_level: SkillLevel
    target_date: date | None = None
    target_number: int | None = Field(default=None, ge=0)
    skill_ids: list[int] = Field(default_factory=list)
    user_ids: list[int] = Field(default_factory=list)


class SkillTargetCreate(SkillTargetBase):
    """Schema for creating a skill target."""

    pass


class SkillTargetUpdate(UpdateModel):
    """
    Schema for editing a skill target.

    ``skill_ids`` and ``user_ids``, when sent, replace the existing link sets.
    """

    non_nullable_fields: ClassVar[tuple[str, ...]] = (
        "name",
        "target_level",
        "skill_ids",
        "user_ids",
    )

    name: str | None = Field(default=None, min_length=1)
    description: str | None = None
    target_level: SkillLevel | None = None
    target_date: date | None = None
    target_number: int | None = Field(default=None, ge=0)
    skill_ids: list[int] | None = None
    user_ids: list[int] | None = None


class SkillTarget(SkillTargetBase):
    """Complete skill target schema with database fields."""

    id: int
    created_at: datetime
    updated_at: datetime
