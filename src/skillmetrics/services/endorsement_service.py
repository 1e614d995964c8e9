"""Skill endorsement service."""

from __future__ import annotations

import logging

from sqlalchemy import case, func
from sqlalchemy.orm import Session

from skillmetrics.exceptions import InvalidInputError, NotFoundError
from skillmetrics.models.endorsement import Endorsement
from skillmetrics.models.skill import Skill
from skillmetrics.models.user import User
from skillmetrics.schemas.enums import NotificationType
from skillmetrics.services.notification_service import NotificationService
from skillmetrics.services.skill_service import SkillService

logger = logging.getLogger(__name__)


class EndorsementService:
    """
    Service for colleagues vouching for each other's skills.

    A user endorses a skill at most once; endorsing again replaces the
    comment. ``Skill.endorsement_count`` is bumped on every endorse call,
    including repeats, and decremented (never below zero) on deletion.
    """

    def __init__(self, db: Session) -> None:
        """
        Initialize the endorsement service.

        Args:
            db: SQLAlchemy database session
        """
        self.db = db

    def endorse(self, skill_id: int, endorser: User, comment: str | None = None) -> Endorsement:
        """
        Endorse a skill, or refresh an existing endorsement by the same user.

        Args:
            skill_id: Skill being endorsed
            endorser: Authenticated user giving the endorsement
            comment: Optional free-text comment

        Returns:
            The created or refreshed endorsement

        Raises:
            NotFoundError: If the skill does not exist
            InvalidInputError: If the endorser owns the skill
        """
        skill = SkillService(self.db).get(skill_id)
        if skill.user_id == endorser.id:
            raise InvalidInputError("You cannot endorse your own skill")

        try:
            endorsement = (
                self.db.query(Endorsement)
                .filter(Endorsement.skill_id == skill_id, Endorsement.endorser_id == endorser.id)
                .first()
            )
            if endorsement is None:
                endorsement = Endorsement(
                    skill_id=skill_id,
                    endorser_id=endorser.id,
                    endorsee_id=skill.user_id,
                    comment=comment,
                )
                self.db.add(endorsement)
            else:
                endorsement.comment = comment
                endorsement.created_at = func.now()

            self.db.query(Skill).filter(Skill.id == skill_id).update(
                {Skill.endorsement_count: Skill.endorsement_count + 1}, synchronize_session=False
            )
            NotificationService(self.db).create(
                user_id=skill.user_id,
                type=NotificationType.ENDORSEMENT,
                content=f"{endorser.display_name} endorsed your {skill.name} skill",
                related_skill_id=skill_id,
                related_user_id=endorser.id,
            )
            self.db.commit()
        except Exception:
            self.db.rollback()
            logger.exception("Failed to endorse skill %s by user %s", skill_id, endorser.id)
            raise

        self.db.refresh(endorsement)
        logger.info("User %s endorsed skill %s", endorser.id, skill_id)
        return endorsement

    def list_for_skill(self, skill_id: int) -> list[tuple[Endorsement, User]]:
        """Endorsements of one skill with their endorsers, newest first."""
        return (
            self.db.query(Endorsement, User)
            .join(User, Endorsement.endorser_id == User.id)
            .filter(Endorsement.skill_id == skill_id)
            .order_by(Endorsement.created_at.desc(), Endorsement.id.desc())
            .all()
        )

    def list_received(self, user_id: int) -> list[tuple[Endorsement, User, Skill]]:
        """Endorsements a user has received, with endorser and skill, newest first."""
        return (
            self.db.query(Endorsement, User, Skill)
            .join(User, Endorsement.endorser_id == User.id)
            .join(Skill, Endorsement.skill_id == Skill.id)
            .filter(Endorsement.endorsee_id == user_id)
            .order_by(Endorsement.created_at.desc(), Endorsement.id.desc())
            .all()
        )

    def delete(self, endorsement_id: int) -> None:
        """
        Remove an endorsement and decrement the skill's counter.

        Raises:
            NotFoundError: If the endorsement does not exist
        """
        endorsement = self.db.get(Endorsement, endorsement_id)
        if endorsement is None:
            raise NotFoundError("Endorsement", endorsement_id)

        skill_id = endorsement.skill_id
        try:
            self.db.delete(endorsement)
            self.db.query(Skill).filter(Skill.id == skill_id).update(
                {
                    Skill.endorsement_count: case(
                        (Skill.endorsement_count > 0, Skill.endorsement_count - 1),
                        else_=0,
                    )
                },
                synchronize_session=False,
            )
            self.db.commit()
        except Exception:
            self.db.rollback()
            logger.exception("Failed to delete endorsement %s", endorsement_id)
            raise
        logger.info("Deleted endorsement %s on skill %s", endorsement_id, skill_id)
