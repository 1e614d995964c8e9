"""Skill directory service: owner-scoped skill CRUD, search and level history."""

from __future__ import annotations

import logging
from typing import Any

from sqlalchemy import or_
from sqlalchemy.orm import Session

from skillmetrics.exceptions import NotFoundError
from skillmetrics.models.endorsement import Endorsement
from skillmetrics.models.notification import Notification
from skillmetrics.models.pending_skill_update import PendingSkillUpdate
from skillmetrics.models.project import ProjectSkill
from skillmetrics.models.skill import Skill, SkillHistory
from skillmetrics.models.skill_target import SkillTargetSkill
from skillmetrics.schemas.enums import NotificationType, SkillLevel
from skillmetrics.schemas.skill import SkillCreate, SkillUpdate
from skillmetrics.services.notification_service import NotificationService
from skillmetrics.utils import LIKE_ESCAPE, contains_pattern

logger = logging.getLogger(__name__)

# Columns a skill edit or an approved pending update may write.
SKILL_MUTABLE_FIELDS: tuple[str, ...] = (
    "name",
    "category",
    "level",
    "certification",
    "credly_link",
    "notes",
    "certification_date",
    "expiration_date",
)


def apply_skill_fields(skill: Skill, values: dict[str, Any]) -> None:
    """
    Copy the mutable skill fields present in ``values`` onto ``skill``.

    Keys outside ``SKILL_MUTABLE_FIELDS`` are ignored, so ownership, the
    endorsement counter and timestamps can never be overwritten this way.
    """
    for field in SKILL_MUTABLE_FIELDS:
        if field in values:
            setattr(skill, field, values[field])


class SkillService:
    """
    Service for the skill directory.

    Handles:
    - Direct (legacy) skill creation with an initial history row
    - Edits that append history when the level changes
    - Deletion with removal of dependent rows
    - Search and history queries
    """

    def __init__(self, db: Session) -> None:
        """
        Initialize the skill service.

        Args:
            db: SQLAlchemy database session
        """
        self.db = db

    def get(self, skill_id: int) -> Skill:
        """
        Fetch a skill by ID.

        Raises:
            NotFoundError: If the skill does not exist
        """
        skill = self.db.get(Skill, skill_id)
        if skill is None:
            raise NotFoundError("Skill", skill_id)
        return skill

    def list_for_user(self, user_id: int) -> list[Skill]:
        """List a user's skills, most recently updated first."""
        return (
            self.db.query(Skill)
            .filter(Skill.user_id == user_id)
            .order_by(Skill.last_updated.desc(), Skill.id.desc())
            .all()
        )

    def list_all(self) -> list[Skill]:
        """List every skill in the organisation."""
        return self.db.query(Skill).order_by(Skill.last_updated.desc(), Skill.id.desc()).all()

    def search(self, query: str) -> list[Skill]:
        """
        Case-insensitive substring search over name, category and certification.

        Args:
            query: Search text

        Returns:
            Matching skills ordered by name
        """
        pattern = contains_pattern(query)
        return (
            self.db.query(Skill)
            .filter(
                or_(
                    Skill.name.ilike(pattern, escape=LIKE_ESCAPE),
                    Skill.category.ilike(pattern, escape=LIKE_ESCAPE),
                    Skill.certification.ilike(pattern, escape=LIKE_ESCAPE),
                )
            )
            .order_by(Skill.name)
            .all()
        )

    def record_history(
        self,
        skill: Skill,
        previous_level: SkillLevel | None,
        new_level: SkillLevel,
        change_note: str | None,
    ) -> SkillHistory:
        """Add a SkillHistory row to the current transaction (flush only)."""
        history = SkillHistory(
            skill_id=skill.id,
            user_id=skill.user_id,
            previous_level=previous_level,
            new_level=new_level,
            change_note=change_note,
        )
        self.db.add(history)
        self.db.flush()
        return history

    def create(self, user_id: int, data: SkillCreate) -> Skill:
        """
        Create a skill directly, bypassing approval.

        Writes the skill and its initial history row in one commit.
        """
        skill = Skill(user_id=user_id, endorsement_count=0)
        apply_skill_fields(skill, data.model_dump())
        try:
            self.db.add(skill)
            self.db.flush()
            self.record_history(skill, None, skill.level, "Initial skill creation")
            self.db.commit()
        except Exception:
            self.db.rollback()
            logger.exception("Failed to create skill %r for user %s", data.name, user_id)
            raise

        self.db.refresh(skill)
        logger.info("Created skill %s (%s) for user %s", skill.id, skill.name, user_id)
        return skill

    def update(self, skill: Skill, data: SkillUpdate) -> Skill:
        """
        Apply an edit to a skill.

        A level change appends a SkillHistory row; a level increase also
        notifies the owner with a ``level_up`` notification.
        """
        changes = data.changes()
        change_note = changes.pop("change_note", None)
        previous_level = skill.level
        new_level = changes.get("level", previous_level)

        try:
            apply_skill_fields(skill, changes)
            if new_level != previous_level:
                self.record_history(
                    skill,
                    previous_level,
                    new_level,
                    change_note or f"Updated from {previous_level.value} to {new_level.value}",
                )
                if new_level.rank > previous_level.rank:
                    NotificationService(self.db).create(
                        user_id=skill.user_id,
                        type=NotificationType.LEVEL_UP,
                        content=f"Your {skill.name} skill is now {new_level.value}",
                        related_skill_id=skill.id,
                    )
            self.db.commit()
        except Exception:
            self.db.rollback()
            logger.exception("Failed to update skill %s", skill.id)
            raise

        self.db.refresh(skill)
        return skill

    def delete_dependents(self, skill_ids: list[int]) -> None:
        """Delete rows that reference the given skills (no commit)."""
        if not skill_ids:
            return
        for model, column in (
            (SkillHistory, SkillHistory.skill_id),
            (Endorsement, Endorsement.skill_id),
            (PendingSkillUpdate, PendingSkillUpdate.skill_id),
            (ProjectSkill, ProjectSkill.skill_id),
            (SkillTargetSkill, SkillTargetSkill.skill_id),
        ):
            self.db.query(model).filter(column.in_(skill_ids)).delete(synchronize_session=False)
        self.db.query(Notification).filter(Notification.related_skill_id.in_(skill_ids)).update(
            {Notification.related_skill_id: None}, synchronize_session=False
        )

    def delete(self, skill_id: int) -> None:
        """
        Delete a skill together with its history, endorsements and links.

        Raises:
            NotFoundError: If the skill does not exist
        """
        skill = self.get(skill_id)
        try:
            self.delete_dependents([skill.id])
            self.db.delete(skill)
            self.db.commit()
        except Exception:
            self.db.rollback()
            logger.exception("Failed to delete skill %s", skill_id)
            raise
        logger.info("Deleted skill %s", skill_id)

    def history(self, skill_id: int) -> list[SkillHistory]:
        """Level history of one skill, newest first."""
        return (
            self.db.query(SkillHistory)
            .filter(SkillHistory.skill_id == skill_id)
            .order_by(SkillHistory.created_at.desc(), SkillHistory.id.desc())
            .all()
        )

    def user_history(self, user_id: int) -> list[SkillHistory]:
        """Level history across all of a user's skills, newest first."""
        return (
            self.db.query(SkillHistory)
            .filter(SkillHistory.user_id == user_id)
            .order_by(SkillHistory.created_at.desc(), SkillHistory.id.desc())
            .all()
        )

    def all_history(self) -> list[SkillHistory]:
        """Organisation-wide level history, newest first."""
        return (
            self.db.query(SkillHistory)
            .order_by(SkillHistory.created_at.desc(), SkillHistory.id.desc())
            .all()
        )
