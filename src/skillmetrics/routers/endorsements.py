"""Endorsements API router."""

from __future__ import annotations

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from skillmetrics.database import get_db
from skillmetrics.dependencies import get_current_user, require_admin
from skillmetrics.models.user import User
from skillmetrics.schemas.endorsement import Endorsement, EndorsementCreate
from skillmetrics.services.endorsement_service import EndorsementService
from skillmetrics.services.skill_service import SkillService

router = APIRouter()


@router.post("/skills/{skill_id}/endorse", response_model=Endorsement, status_code=status.HTTP_201_CREATED)
def endorse_skill(
    skill_id: int,
    payload: EndorsementCreate | None = None,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> Endorsement:
    """
    Endorse a colleague's skill.

    Raises:
        InvalidInputError (400): If the skill belongs to the caller.
        NotFoundError (404): If the skill does not exist.
    """
    comment = payload.comment if payload else None
    endorsement = EndorsementService(db).endorse(skill_id, user, comment)
    result = Endorsement.model_validate(endorsement)
    result.endorser_email = user.email
    return result


@router.get("/skills/{skill_id}/endorsements", response_model=list[Endorsement])
def list_skill_endorsements(
    skill_id: int, _: User = Depends(get_current_user), db: Session = Depends(get_db)
) -> list[Endorsement]:
    SkillService(db).get(skill_id)
    result = []
    for endorsement, endorser in EndorsementService(db).list_for_skill(skill_id):
        item = Endorsement.model_validate(endorsement)
        item.endorser_email = endorser.email
        result.append(item)
    return result


@router.get("/user/endorsements", response_model=list[Endorsement])
def my_endorsements(
    user: User = Depends(get_current_user), db: Session = Depends(get_db)
) -> list[Endorsement]:
    """List endorsements the current user has received."""
    result = []
    for endorsement, endorser, skill in EndorsementService(db).list_received(user.id):
        item = Endorsement.model_validate(endorsement)
        item.endorser_email = endorser.email
        item.skill_name = skill.name
        result.append(item)
    return result


@router.delete("/endorsements/{endorsement_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_endorsement(
    endorsement_id: int, _: User = Depends(require_admin), db: Session = Depends(get_db)
) -> None:
    EndorsementService(db).delete(endorsement_id)
