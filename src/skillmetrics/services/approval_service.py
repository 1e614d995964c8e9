"""
Pending skill update approval workflow.

A submission sits in ``pending`` until an admin approves or rejects it; both
outcomes are terminal. Approval materialises the proposed values onto the
skill table, records a history row and notifies the submitter, all in one
transaction.
"""

from __future__ import annotations

import logging

from sqlalchemy import func
from sqlalchemy.orm import Session

from skillmetrics.exceptions import AlreadyReviewedError, NotFoundError
from skillmetrics.models.pending_skill_update import PendingSkillUpdate
from skillmetrics.models.skill import Skill
from skillmetrics.models.user import User
from skillmetrics.permissions import ensure_owner_or_admin
from skillmetrics.schemas.enums import ApprovalStatus, NotificationType
from skillmetrics.schemas.pending import PendingSkillSubmit
from skillmetrics.services.notification_service import NotificationService
from skillmetrics.services.skill_service import (
    SKILL_MUTABLE_FIELDS,
    SkillService,
    apply_skill_fields,
)

logger = logging.getLogger(__name__)


def approval_note(reviewer_id: int, notes: str | None) -> str:
    """Change note written to the skill history on approval."""
    note = f"Approved by admin (ID: {reviewer_id})"
    if notes:
        note += f": {notes}"
    return note


class ApprovalService:
    """Service for submitting, listing and reviewing pending skill updates."""

    def __init__(self, db: Session) -> None:
        """
        Initialize the approval service.

        Args:
            db: SQLAlchemy database session
        """
        self.db = db

    # ------------------------------------------------------------------
    # Submission and listing
    # ------------------------------------------------------------------

    def submit(self, submitter: User, data: PendingSkillSubmit) -> PendingSkillUpdate:
        """
        Queue a new skill or an edit to an existing skill for review.

        Args:
            submitter: Authenticated user making the submission
            data: Proposed skill values

        Returns:
            The stored pending update (status ``pending``)

        Raises:
            NotFoundError: If an update names a skill that does not exist
            PermissionDeniedError: If an update targets someone else's skill
        """
        if data.is_update:
            skill = SkillService(self.db).get(data.skill_id)
            ensure_owner_or_admin(submitter, skill.user_id)

        values = data.model_dump(include=set(SKILL_MUTABLE_FIELDS))
        update = PendingSkillUpdate(
            user_id=submitter.id,
            skill_id=data.skill_id if data.is_update else None,
            is_update=data.is_update,
            status=ApprovalStatus.PENDING,
            **values,
        )
        self.db.add(update)
        self.db.commit()
        self.db.refresh(update)
        logger.info(
            "User %s submitted pending skill update %s (%s, is_update=%s)",
            submitter.id,
            update.id,
            update.name,
            update.is_update,
        )
        return update

    def get(self, update_id: int) -> PendingSkillUpdate:
        """
        Fetch a pending update by ID, whatever its status.

        Raises:
            NotFoundError: If it does not exist
        """
        update = self.db.get(PendingSkillUpdate, update_id)
        if update is None:
            raise NotFoundError("Pending skill update", update_id)
        return update

    def list_pending(self) -> list[tuple[PendingSkillUpdate, User]]:
        """All updates still awaiting review, oldest first, with their submitters."""
        return (
            self.db.query(PendingSkillUpdate, User)
            .join(User, PendingSkillUpdate.user_id == User.id)
            .filter(PendingSkillUpdate.status == ApprovalStatus.PENDING)
            .order_by(PendingSkillUpdate.submitted_at, PendingSkillUpdate.id)
            .all()
        )

    def list_for_user(self, user_id: int) -> list[PendingSkillUpdate]:
        """Every submission a user has made, newest first."""
        return (
            self.db.query(PendingSkillUpdate)
            .filter(PendingSkillUpdate.user_id == user_id)
            .order_by(PendingSkillUpdate.submitted_at.desc(), PendingSkillUpdate.id.desc())
            .all()
        )

    # ------------------------------------------------------------------
    # Review
    # ------------------------------------------------------------------

    def _claim(
        self, update_id: int, status: ApprovalStatus, reviewer_id: int, notes: str | None
    ) -> PendingSkillUpdate:
        """
        Move a pending update to ``status`` if, and only if, it is still pending.

        The status check and the write are a single conditional UPDATE, so of
        two concurrent reviews exactly one claims the row.

        Raises:
            NotFoundError: If the update does not exist
            AlreadyReviewedError: If it was already approved or rejected
        """
        claimed = (
            self.db.query(PendingSkillUpdate)
            .filter(
                PendingSkillUpdate.id == update_id,
                PendingSkillUpdate.status == ApprovalStatus.PENDING,
            )
            .update(
                {
                    PendingSkillUpdate.status: status,
                    PendingSkillUpdate.reviewed_at: func.now(),
                    PendingSkillUpdate.reviewed_by: reviewer_id,
                    PendingSkillUpdate.review_notes: notes,
                },
                synchronize_session=False,
            )
        )
        if claimed == 0:
            existing = self.db.get(PendingSkillUpdate, update_id)
            if existing is None:
                raise NotFoundError("Pending skill update", update_id)
            self.db.refresh(existing)
            raise AlreadyReviewedError(update_id, existing.status.value)

        update = self.db.get(PendingSkillUpdate, update_id)
        self.db.refresh(update)
        return update

    def approve(
        self, update_id: int, reviewer_id: int, notes: str | None = None
    ) -> tuple[Skill, PendingSkillUpdate]:
        """
        Approve a pending update and apply it to the skill table.

        Args:
            update_id: Pending update to approve
            reviewer_id: Admin performing the review
            notes: Optional reviewer notes

        Returns:
            (resulting skill, reviewed pending update)

        Raises:
            NotFoundError: If the update, or the skill an update targets, is missing
            AlreadyReviewedError: If the update is no longer pending
        """
        skills = SkillService(self.db)
        try:
            update = self._claim(update_id, ApprovalStatus.APPROVED, reviewer_id, notes)
            values = {field: getattr(update, field) for field in SKILL_MUTABLE_FIELDS}

            if update.is_update:
                skill = self.db.get(Skill, update.skill_id) if update.skill_id else None
                if skill is None:
                    raise NotFoundError("Skill", update.skill_id)
                previous_level = skill.level
                apply_skill_fields(skill, values)
            else:
                skill = Skill(user_id=update.user_id, endorsement_count=0)
                apply_skill_fields(skill, values)
                self.db.add(skill)
                previous_level = None
            self.db.flush()

            skills.record_history(skill, previous_level, update.level, approval_note(reviewer_id, notes))
            NotificationService(self.db).create(
                user_id=update.user_id,
                type=NotificationType.ACHIEVEMENT,
                content=f'Your skill "{update.name}" has been approved!',
                related_skill_id=skill.id,
                related_user_id=reviewer_id,
            )
            self.db.commit()
        except Exception:
            self.db.rollback()
            logger.exception("Failed to approve pending skill update %s", update_id)
            raise

        self.db.refresh(skill)
        self.db.refresh(update)
        logger.info(
            "Admin %s approved pending skill update %s -> skill %s", reviewer_id, update_id, skill.id
        )
        return skill, update

    def reject(self, update_id: int, reviewer_id: int, notes: str | None = None) -> PendingSkillUpdate:
        """
        Reject a pending update. The skill table is left untouched.

        Raises:
            NotFoundError: If the update does not exist
            AlreadyReviewedError: If the update is no longer pending
        """
        try:
            update = self._claim(update_id, ApprovalStatus.REJECTED, reviewer_id, notes)
            NotificationService(self.db).create(
                user_id=update.user_id,
                type=NotificationType.ACHIEVEMENT,
                content=f'Your skill "{update.name}" was not approved. {notes or "No reason provided."}',
                related_skill_id=update.skill_id,
                related_user_id=reviewer_id,
            )
            self.db.commit()
        except Exception:
            self.db.rollback()
            logger.exception("Failed to reject pending skill update %s", update_id)
            raise

        self.db.refresh(update)
        logger.info("Admin %s rejected pending skill update %s", reviewer_id, update_id)
        return update
