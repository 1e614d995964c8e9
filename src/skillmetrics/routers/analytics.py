"""Admin analytics API router."""

from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from skillmetrics.database import get_db
from skillmetrics.dependencies import require_admin
from skillmetrics.schemas.analytics import (
    CertificationEntry,
    ProjectSkillGap,
    SkillSummary,
    TargetGapReport,
)
from skillmetrics.schemas.project import ProjectResourceHistory
from skillmetrics.services.analytics_service import AnalyticsService
from skillmetrics.services.project_service import ProjectService

router = APIRouter(prefix="/admin/analytics", dependencies=[Depends(require_admin)])


@router.get("/summary", response_model=SkillSummary)
def skill_summary(db: Session = Depends(get_db)) -> SkillSummary:
    return AnalyticsService(db).summary()


@router.get("/skill-gaps", response_model=list[TargetGapReport])
def skill_gaps(db: Session = Depends(get_db)) -> list[TargetGapReport]:
    """Per skill target, which assigned users lack a target skill or hold it below the target level."""
    return AnalyticsService(db).skill_gaps()


@router.get("/project-skill-gaps/{project_id}", response_model=list[ProjectSkillGap])
def project_skill_gaps(project_id: int, db: Session = Depends(get_db)) -> list[ProjectSkillGap]:
    return AnalyticsService(db).project_skill_gaps(project_id)


@router.get("/certifications", response_model=list[CertificationEntry])
def certifications(db: Session = Depends(get_db)) -> list[CertificationEntry]:
    """Certified skills flagged ``expired``, ``expiring``, ``valid`` or ``no_expiry``."""
    return AnalyticsService(db).certifications()


@router.get("/resource-history", response_model=list[ProjectResourceHistory])
def resource_history(db: Session = Depends(get_db)) -> list[ProjectResourceHistory]:
    return [ProjectResourceHistory.model_validate(row) for row in ProjectService(db).all_history()]
