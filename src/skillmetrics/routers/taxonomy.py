"""Admin skill templates and skill targets API router."""

from __future__ import annotations

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from skillmetrics.database import get_db
from skillmetrics.dependencies import require_admin
from skillmetrics.schemas.taxonomy import (
    SkillTarget,
    SkillTargetCreate,
    SkillTargetUpdate,
    SkillTemplate,
    SkillTemplateCreate,
    SkillTemplateUpdate,
)
from skillmetrics.services.taxonomy_service import TaxonomyService

router = APIRouter(prefix="/admin", dependencies=[Depends(require_admin)])


# ---------------------------------------------------------------------------
# Skill templates
# ---------------------------------------------------------------------------


@router.get("/skill-templates", response_model=list[SkillTemplate])
def list_templates(db: Session = Depends(get_db)) -> list[SkillTemplate]:
    return [SkillTemplate.model_validate(row) for row in TaxonomyService(db).list_templates()]


@router.post("/skill-templates", response_model=SkillTemplate, status_code=status.HTTP_201_CREATED)
def create_template(payload: SkillTemplateCreate, db: Session = Depends(get_db)) -> SkillTemplate:
    return SkillTemplate.model_validate(TaxonomyService(db).create_template(payload))


@router.get("/skill-templates/{template_id}", response_model=SkillTemplate)
def get_template(template_id: int, db: Session = Depends(get_db)) -> SkillTemplate:
    return SkillTemplate.model_validate(TaxonomyService(db).get_template(template_id))


@router.patch("/skill-templates/{template_id}", response_model=SkillTemplate)
def update_template(
    template_id: int, payload: SkillTemplateUpdate, db: Session = Depends(get_db)
) -> SkillTemplate:
    return SkillTemplate.model_validate(TaxonomyService(db).update_template(template_id, payload))


@router.delete("/skill-templates/{template_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_template(template_id: int, db: Session = Depends(get_db)) -> None:
    TaxonomyService(db).delete_template(template_id)


# ---------------------------------------------------------------------------
# Skill targets
# ---------------------------------------------------------------------------


@router.get("/skill-targets", response_model=list[SkillTarget])
def list_targets(db: Session = Depends(get_db)) -> list[SkillTarget]:
    return TaxonomyService(db).list_targets()


@router.post("/skill-targets", response_model=SkillTarget, status_code=status.HTTP_201_CREATED)
def create_target(payload: SkillTargetCreate, db: Session = Depends(get_db)) -> SkillTarget:
    """Create a target; ``skillIds`` and ``userIds`` become its link sets."""
    return TaxonomyService(db).create_target(payload)


@router.get("/skill-targets/{target_id}", response_model=SkillTarget)
def get_target(target_id: int, db: Session = Depends(get_db)) -> SkillTarget:
    return TaxonomyService(db).get_target(target_id)


@router.patch("/skill-targets/{target_id}", response_model=SkillTarget)
def update_target(
    target_id: int, payload: SkillTargetUpdate, db: Session = Depends(get_db)
) -> SkillTarget:
    """Edit a target; link sets present in the body replace the stored ones."""
    return TaxonomyService(db).update_target(target_id, payload)


@router.delete("/skill-targets/{target_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_target(target_id: int, db: Session = Depends(get_db)) -> None:
    TaxonomyService(db).delete_target(target_id)
