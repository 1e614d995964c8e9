"""Admin analytics over skills, skill targets, project requirements and certifications."""

from __future__ import annotations

import logging
from collections import Counter
from datetime import datetime, timedelta

from sqlalchemy.orm import Session

from skillmetrics.config import settings
from skillmetrics.models.pending_skill_update import PendingSkillUpdate
from skillmetrics.models.project_resource import ProjectResource
from skillmetrics.models.skill import Skill
from skillmetrics.models.skill_target import SkillTarget, SkillTargetSkill, SkillTargetUser
from skillmetrics.models.user import User
from skillmetrics.schemas.analytics import (
    CertificationEntry,
    ProjectSkillGap,
    SkillGap,
    SkillSummary,
    TargetGapReport,
)
from skillmetrics.schemas.enums import ApprovalStatus, SkillLevel
from skillmetrics.services.project_service import ProjectService

logger = logging.getLogger(__name__)


def _best_levels(skills: list[Skill]) -> dict[tuple[int, str], SkillLevel]:
    """Highest level each user holds per (case-insensitive) skill name."""
    best: dict[tuple[int, str], SkillLevel] = {}
    for skill in skills:
        key = (skill.user_id, skill.name.strip().lower())
        if key not in best or skill.level.rank > best[key].rank:
            best[key] = skill.level
    return best


def certification_status(expiration_date: datetime | None, now: datetime, warning_days: int) -> str:
    """
    Classify a certification by its expiration date.

    Returns:
        ``no_expiry``, ``expired``, ``expiring`` (within ``warning_days``) or ``valid``
    """
    if expiration_date is None:
        return "no_expiry"
    if expiration_date < now:
        return "expired"
    if expiration_date <= now + timedelta(days=warning_days):
        return "expiring"
    return "valid"


class AnalyticsService:
    """Read-only aggregate reports for administrators."""

    def __init__(self, db: Session) -> None:
        """
        Initialize the analytics service.

        Args:
            db: SQLAlchemy database session
        """
        self.db = db

    def summary(self) -> SkillSummary:
        """Organisation-wide skill counts by level and by category."""
        skills = self.db.query(Skill).all()
        by_level = {level.value: 0 for level in SkillLevel}
        by_level.update(Counter(skill.level.value for skill in skills))
        by_category = Counter(skill.category for skill in skills)

        return SkillSummary(
            total_skills=len(skills),
            total_users=self.db.query(User).count(),
            certified_skills=sum(1 for skill in skills if skill.certification),
            by_level=by_level,
            by_category=dict(sorted(by_category.items())),
            pending_reviews=self.db.query(PendingSkillUpdate)
            .filter(PendingSkillUpdate.status == ApprovalStatus.PENDING)
            .count(),
        )

    def skill_gaps(self) -> list[TargetGapReport]:
        """
        Compare every skill target against the skills of its assigned users.

        A user has a gap for a target skill when they hold no skill of that
        name, or hold it below the target level.
        """
        reports = []
        for target in self.db.query(SkillTarget).order_by(SkillTarget.id).all():
            skill_names = sorted(
                {
                    skill.name.strip()
                    for skill in self.db.query(Skill)
                    .join(SkillTargetSkill, SkillTargetSkill.skill_id == Skill.id)
                    .filter(SkillTargetSkill.target_id == target.id)
                }
            )
            users = (
                self.db.query(User)
                .join(SkillTargetUser, SkillTargetUser.user_id == User.id)
                .filter(SkillTargetUser.target_id == target.id)
                .order_by(User.username)
                .all()
            )
            user_ids = [user.id for user in users]
            best = _best_levels(self.db.query(Skill).filter(Skill.user_id.in_(user_ids)).all())

            gaps = []
            meeting = 0
            for user in users:
                user_gaps = []
                for name in skill_names:
                    current = best.get((user.id, name.lower()))
                    if current is None or current.rank < target.target_level.rank:
                        user_gaps.append(
                            SkillGap(
                                user_id=user.id,
                                username=user.username,
                                skill_name=name,
                                current_level=current,
                                target_level=target.target_level,
                            )
                        )
                if not user_gaps:
                    meeting += 1
                gaps.extend(user_gaps)

            reports.append(
                TargetGapReport(
                    target_id=target.id,
                    target_name=target.name,
                    target_level=target.target_level,
                    users_on_target=len(users),
                    users_meeting_target=meeting,
                    gaps=gaps,
                )
            )
        return reports

    def project_skill_gaps(self, project_id: int) -> list[ProjectSkillGap]:
        """
        Check a project's skill requirements against its current resources.

        Raises:
            NotFoundError: If the project does not exist
        """
        requirements = ProjectService(self.db).list_skills(project_id)
        user_ids = [
            row.user_id
            for row in self.db.query(ProjectResource.user_id).filter(ProjectResource.project_id == project_id)
        ]
        best = _best_levels(self.db.query(Skill).filter(Skill.user_id.in_(user_ids)).all())

        result = []
        for project_skill, skill in requirements:
            name = skill.name.strip().lower()
            qualified = sorted(
                user_id
                for user_id in set(user_ids)
                if (user_id, name) in best
                and best[(user_id, name)].rank >= project_skill.required_level.rank
            )
            result.append(
                ProjectSkillGap(
                    skill_name=skill.name,
                    required_level=project_skill.required_level,
                    qualified_user_ids=qualified,
                    has_gap=not qualified,
                )
            )
        return result

    def certifications(self, now: datetime | None = None) -> list[CertificationEntry]:
        """
        List certified skills with the state of each certification.

        Entries are ordered by expiration date, soonest first; certifications
        without an expiry come last.
        """
        now = now or datetime.now()
        warning_days = settings.certification_expiry_warning_days
        rows = (
            self.db.query(Skill, User)
            .join(User, Skill.user_id == User.id)
            .filter(Skill.certification.isnot(None), Skill.certification != "")
            .all()
        )
        entries = [
            CertificationEntry(
                skill_id=skill.id,
                user_id=user.id,
                username=user.username,
                skill_name=skill.name,
                certification=skill.certification,
                certification_date=skill.certification_date,
                expiration_date=skill.expiration_date,
                status=certification_status(skill.expiration_date, now, warning_days),
            )
            for skill, user in rows
        ]
        entries.sort(key=lambda e: (e.expiration_date is None, e.expiration_date or now, e.skill_id))
        return entries
