"""Skills API router - list, direct create, search, detail, edit, delete and level history."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from skillmetrics.database import get_db
from skillmetrics.dependencies import get_current_user, require_admin
from skillmetrics.models.user import User
from skillmetrics.permissions import ensure_owner_or_admin
from skillmetrics.schemas.skill import Skill as SkillSchema
from skillmetrics.schemas.skill import SkillCreate, SkillHistory, SkillUpdate
from skillmetrics.services.skill_service import SkillService

router = APIRouter()


@router.get("/skills", response_model=list[SkillSchema])
def list_my_skills(
    user: User = Depends(get_current_user), db: Session = Depends(get_db)
) -> list[SkillSchema]:
    """List the current user's skills."""
    return [SkillSchema.model_validate(skill) for skill in SkillService(db).list_for_user(user.id)]


@router.post("/skills", response_model=SkillSchema, status_code=status.HTTP_201_CREATED)
def create_skill(
    payload: SkillCreate,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> SkillSchema:
    """
    Create a skill directly, without going through approval.

    The pending-update flow (``POST /skills/pending``) is the normal path;
    this endpoint is kept for existing clients.
    """
    return SkillSchema.model_validate(SkillService(db).create(user.id, payload))


@router.get("/skills/search", response_model=list[SkillSchema])
def search_skills(
    q: str = Query(..., min_length=1),
    _: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> list[SkillSchema]:
    """Search all skills by name, category or certification."""
    return [SkillSchema.model_validate(skill) for skill in SkillService(db).search(q)]


@router.get("/skills/{skill_id}", response_model=SkillSchema)
def get_skill(
    skill_id: int, _: User = Depends(get_current_user), db: Session = Depends(get_db)
) -> SkillSchema:
    return SkillSchema.model_validate(SkillService(db).get(skill_id))


@router.patch("/skills/{skill_id}", response_model=SkillSchema)
def update_skill(
    skill_id: int,
    payload: SkillUpdate,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> SkillSchema:
    """
    Edit a skill.

    Raises:
        PermissionDeniedError (403): If the caller neither owns the skill nor is an admin.
        NotFoundError (404): If the skill does not exist.
    """
    service = SkillService(db)
    skill = service.get(skill_id)
    ensure_owner_or_admin(user, skill.user_id)
    return SkillSchema.model_validate(service.update(skill, payload))


@router.delete("/skills/{skill_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_skill(
    skill_id: int, user: User = Depends(get_current_user), db: Session = Depends(get_db)
) -> None:
    service = SkillService(db)
    ensure_owner_or_admin(user, service.get(skill_id).user_id)
    service.delete(skill_id)


@router.get("/skills/{skill_id}/history", response_model=list[SkillHistory])
def skill_history(
    skill_id: int, _: User = Depends(get_current_user), db: Session = Depends(get_db)
) -> list[SkillHistory]:
    service = SkillService(db)
    service.get(skill_id)
    return [SkillHistory.model_validate(row) for row in service.history(skill_id)]


@router.get("/user/skills/history", response_model=list[SkillHistory])
def my_skill_history(
    user: User = Depends(get_current_user), db: Session = Depends(get_db)
) -> list[SkillHistory]:
    return [SkillHistory.model_validate(row) for row in SkillService(db).user_history(user.id)]


@router.get("/admin/skills", response_model=list[SkillSchema])
def list_all_skills(_: User = Depends(require_admin), db: Session = Depends(get_db)) -> list[SkillSchema]:
    return [SkillSchema.model_validate(skill) for skill in SkillService(db).list_all()]


@router.get("/admin/skill-history", response_model=list[SkillHistory])
def list_all_skill_history(
    _: User = Depends(require_admin), db: Session = Depends(get_db)
) -> list[SkillHistory]:
    return [SkillHistory.model_validate(row) for row in SkillService(db).all_history()]
