"""Admin analytics Pydantic schemas."""

from datetime import datetime

from skillmetrics.schemas.base import CamelModel
from skillmetrics.schemas.enums import SkillLevel


class SkillSummary(CamelModel):
    """Organisation-wide skill counts."""

    total_skills: int
    total_users: int
    certified_skills: int
    by_level: dict[str, int]
    by_category: dict[str, int]
    pending_reviews: int


class SkillGap(CamelModel):
    """One user falling short of a skill target for one skill."""

    user_id: int
    username: str
    skill_name: str
    current_level: SkillLevel | None
    target_level: SkillLevel


class TargetGapReport(CamelModel):
    """Gap report for a single skill target."""

    target_id: int
    target_name: str
    target_level: SkillLevel
    users_on_target: int
    users_meeting_target: int
    gaps: list[SkillGap]


class ProjectSkillGap(CamelModel):
    """Coverage of one project skill requirement by the project's resources."""

    skill_name: str
    required_level: SkillLevel
    qualified_user_ids: list[int]
    has_gap: bool


class CertificationEntry(CamelModel):
    """A certified skill and the state of its certification."""

    skill_id: int
    user_id: int
    username: str
    skill_name: str
    certification: str
    certification_date: datetime | None
    expiration_date: datetime | None
    status: str
