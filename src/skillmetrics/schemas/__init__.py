"""Pydantic schemas package."""

from skillmetrics.schemas.enums import (
    ApprovalStatus,
    NotificationType,
    ResourceAction,
    SkillLevel,
)
from skillmetrics.schemas.pending import PendingSkillSubmit, PendingSkillUpdate, ReviewRequest
from skillmetrics.schemas.skill import Skill, SkillBase, SkillCreate, SkillHistory, SkillUpdate

__all__ = [
    "ApprovalStatus",
    "NotificationType",
    "PendingSkillSubmit",
    "PendingSkillUpdate",
    "ResourceAction",
    "ReviewRequest",
    "Skill",
    "SkillBase",
    "SkillCreate",
    "SkillHistory",
    "SkillLevel",
    "SkillUpdate",
]
