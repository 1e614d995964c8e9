"""Pending skill updates API router - submission and the admin review queue."""

from __future__ import annotations

from fastapi import APIRouter, BackgroundTasks, Depends, status
from sqlalchemy.orm import Session

from skillmetrics.database import get_db
from skillmetrics.dependencies import get_current_user, get_email_service, require_admin
from skillmetrics.models.user import User
from skillmetrics.permissions import ensure_owner_or_admin
from skillmetrics.schemas.pending import PendingSkillSubmit, PendingSkillUpdate, ReviewRequest
from skillmetrics.schemas.skill import Skill as SkillSchema
from skillmetrics.services.approval_service import ApprovalService
from skillmetrics.services.email_service import EmailService
from skillmetrics.services.user_service import UserService

router = APIRouter()


@router.post("/skills/pending", response_model=PendingSkillUpdate, status_code=status.HTTP_201_CREATED)
def submit_pending_skill(
    payload: PendingSkillSubmit,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> PendingSkillUpdate:
    """
    Submit a new skill, or an edit to one of your skills, for admin review.

    Raises:
        PermissionDeniedError (403): If the edit targets someone else's skill.
        NotFoundError (404): If the edited skill does not exist.
    """
    return PendingSkillUpdate.model_validate(ApprovalService(db).submit(user, payload))


@router.get("/user/pending-skills", response_model=list[PendingSkillUpdate])
def my_pending_skills(
    user: User = Depends(get_current_user), db: Session = Depends(get_db)
) -> list[PendingSkillUpdate]:
    """List the current user's submissions in every status."""
    return [PendingSkillUpdate.model_validate(row) for row in ApprovalService(db).list_for_user(user.id)]


@router.get("/admin/pending-skills", response_model=list[PendingSkillUpdate])
def list_pending_skills(
    _: User = Depends(require_admin), db: Session = Depends(get_db)
) -> list[PendingSkillUpdate]:
    """List submissions awaiting review, oldest first, with submitter details."""
    result = []
    for update, submitter in ApprovalService(db).list_pending():
        item = PendingSkillUpdate.model_validate(update)
        item.user_email = submitter.email
        item.username = submitter.username
        result.append(item)
    return result


@router.get("/admin/pending-skills/{update_id}", response_model=PendingSkillUpdate)
def get_pending_skill(
    update_id: int, user: User = Depends(get_current_user), db: Session = Depends(get_db)
) -> PendingSkillUpdate:
    """Fetch one submission; visible to its submitter and to admins."""
    update = ApprovalService(db).get(update_id)
    ensure_owner_or_admin(user, update.user_id)
    return PendingSkillUpdate.model_validate(update)


@router.post("/admin/pending-skills/{update_id}/approve", response_model=SkillSchema)
def approve_pending_skill(
    update_id: int,
    background_tasks: BackgroundTasks,
    payload: ReviewRequest | None = None,
    admin: User = Depends(require_admin),
    db: Session = Depends(get_db),
    email_service: EmailService = Depends(get_email_service),
) -> SkillSchema:
    """
    Approve a submission and apply it to the skill table.

    Returns:
        The created or updated skill.

    Raises:
        NotFoundError (404): If the submission (or the skill it edits) does not exist.
        AlreadyReviewedError (409): If the submission was already approved or rejected.
    """
    notes = payload.notes if payload else None
    skill, update = ApprovalService(db).approve(update_id, admin.id, notes)
    submitter = UserService(db).get(update.user_id)
    background_tasks.add_task(email_service.send_skill_reviewed, submitter.email, update.name, True, notes)
    return SkillSchema.model_validate(skill)


@router.post("/admin/pending-skills/{update_id}/reject", response_model=PendingSkillUpdate)
def reject_pending_skill(
    update_id: int,
    background_tasks: BackgroundTasks,
    payload: ReviewRequest | None = None,
    admin: User = Depends(require_admin),
    db: Session = Depends(get_db),
    email_service: EmailService = Depends(get_email_service),
) -> PendingSkillUpdate:
    """
    Reject a submission. No skill is created or changed.

    Raises:
        NotFoundError (404): If the submission does not exist.
        AlreadyReviewedError (409): If the submission was already approved or rejected.
    """
    notes = payload.notes if payload else None
    update = ApprovalService(db).reject(update_id, admin.id, notes)
    submitter = UserService(db).get(update.user_id)
    background_tasks.add_task(email_service.send_skill_reviewed, submitter.email, update.name, False, notes)
    return PendingSkillUpdate.model_validate(update)
