"""Skill template and skill target administration."""

from __future__ import annotations

import logging

from sqlalchemy.orm import Session

from skillmetrics.exceptions import NotFoundError
from skillmetrics.models.skill_target import SkillTarget, SkillTargetSkill, SkillTargetUser
from skillmetrics.models.skill_template import SkillTemplate
from skillmetrics.schemas.taxonomy import SkillTarget as SkillTargetSchema
from skillmetrics.schemas.taxonomy import (
    SkillTargetCreate,
    SkillTargetUpdate,
    SkillTemplateCreate,
    SkillTemplateUpdate,
)

logger = logging.getLogger(__name__)

TARGET_LINK_FIELDS = ("skill_ids", "user_ids")


class TaxonomyService:
    """Service for the admin-managed skill catalogue and organisational skill targets."""

    def __init__(self, db: Session) -> None:
        """
        Initialize the taxonomy service.

        Args:
            db: SQLAlchemy database session
        """
        self.db = db

    # ------------------------------------------------------------------
    # Skill templates
    # ------------------------------------------------------------------

    def list_templates(self) -> list[SkillTemplate]:
        """All templates ordered by category, then name."""
        return self.db.query(SkillTemplate).order_by(SkillTemplate.category, SkillTemplate.name).all()

    def get_template(self, template_id: int) -> SkillTemplate:
        """
        Fetch a template by ID.

        Raises:
            NotFoundError: If the template does not exist
        """
        template = self.db.get(SkillTemplate, template_id)
        if template is None:
            raise NotFoundError("Skill template", template_id)
        return template

    def create_template(self, data: SkillTemplateCreate) -> SkillTemplate:
        template = SkillTemplate(**data.model_dump())
        self.db.add(template)
        self.db.commit()
        self.db.refresh(template)
        logger.info("Created skill template %s (%s)", template.id, template.name)
        return template

    def update_template(self, template_id: int, data: SkillTemplateUpdate) -> SkillTemplate:
        template = self.get_template(template_id)
        for field, value in data.changes().items():
            setattr(template, field, value)
        self.db.commit()
        self.db.refresh(template)
        return template

    def delete_template(self, template_id: int) -> None:
        template = self.get_template(template_id)
        self.db.delete(template)
        self.db.commit()
        logger.info("Deleted skill template %s", template_id)

    # ------------------------------------------------------------------
    # Skill targets
    # ------------------------------------------------------------------

    def _get_target_row(self, target_id: int) -> SkillTarget:
        target = self.db.get(SkillTarget, target_id)
        if target is None:
            raise NotFoundError("Skill target", target_id)
        return target

    def linked_skill_ids(self, target_id: int) -> list[int]:
        """Skill IDs linked to a target, ascending."""
        rows = (
            self.db.query(SkillTargetSkill.skill_id)
            .filter(SkillTargetSkill.target_id == target_id)
            .order_by(SkillTargetSkill.skill_id)
        )
        return [row.skill_id for row in rows]

    def linked_user_ids(self, target_id: int) -> list[int]:
        """User IDs assigned to a target, ascending."""
        rows = (
            self.db.query(SkillTargetUser.user_id)
            .filter(SkillTargetUser.target_id == target_id)
            .order_by(SkillTargetUser.user_id)
        )
        return [row.user_id for row in rows]

    def _to_schema(self, target: SkillTarget) -> SkillTargetSchema:
        return SkillTargetSchema(
            id=target.id,
            name=target.name,
            description=target.description,
            target_level=target.target_level,
            target_date=target.target_date,
            target_number=target.target_number,
            skill_ids=self.linked_skill_ids(target.id),
            user_ids=self.linked_user_ids(target.id),
            created_at=target.created_at,
            updated_at=target.updated_at,
        )

    def _replace_links(
        self, target_id: int, skill_ids: list[int] | None, user_ids: list[int] | None
    ) -> None:
        """Replace a target's skill and/or user link sets (no commit)."""
        if skill_ids is not None:
            self.db.query(SkillTargetSkill).filter(SkillTargetSkill.target_id == target_id).delete(
                synchronize_session=False
            )
            for skill_id in dict.fromkeys(skill_ids):
                self.db.add(SkillTargetSkill(target_id=target_id, skill_id=skill_id))
        if user_ids is not None:
            self.db.query(SkillTargetUser).filter(SkillTargetUser.target_id == target_id).delete(
                synchronize_session=False
            )
            for user_id in dict.fromkeys(user_ids):
                self.db.add(SkillTargetUser(target_id=target_id, user_id=user_id))

    def list_targets(self) -> list[SkillTargetSchema]:
        """All targets with their link sets, newest first."""
        targets = self.db.query(SkillTarget).order_by(SkillTarget.id.desc()).all()
        return [self._to_schema(target) for target in targets]

    def list_target_rows(self) -> list[SkillTarget]:
        """All target rows without their link sets."""
        return self.db.query(SkillTarget).order_by(SkillTarget.id).all()

    def get_target(self, target_id: int) -> SkillTargetSchema:
        """
        Fetch a target with its link sets.

        Raises:
            NotFoundError: If the target does not exist
        """
        return self._to_schema(self._get_target_row(target_id))

    def create_target(self, data: SkillTargetCreate) -> SkillTargetSchema:
        """Create a target and its skill/user links in one commit."""
        target = SkillTarget(**data.model_dump(exclude=set(TARGET_LINK_FIELDS)))
        try:
            self.db.add(target)
            self.db.flush()
            self._replace_links(target.id, data.skill_ids, data.user_ids)
            self.db.commit()
        except Exception:
            self.db.rollback()
            logger.exception("Failed to create skill target %r", data.name)
            raise

        self.db.refresh(target)
        logger.info("Created skill target %s (%s)", target.id, target.name)
        return self._to_schema(target)

    def update_target(self, target_id: int, data: SkillTargetUpdate) -> SkillTargetSchema:
        """Edit a target; link sets sent in the request replace the stored ones."""
        target = self._get_target_row(target_id)
        changes = data.changes()
        skill_ids = changes.pop("skill_ids", None)
        user_ids = changes.pop("user_ids", None)
        try:
            for field, value in changes.items():
                setattr(target, field, value)
            self._replace_links(target.id, skill_ids, user_ids)
            self.db.commit()
        except Exception:
            self.db.rollback()
            logger.exception("Failed to update skill target %s", target_id)
            raise

        self.db.refresh(target)
        return self._to_schema(target)

    def delete_target(self, target_id: int) -> None:
        """Delete a target along with its link rows."""
        target = self._get_target_row(target_id)
        try:
            self._replace_links(target.id, [], [])
            self.db.delete(target)
            self.db.commit()
        except Exception:
            self.db.rollback()
            logger.exception("Failed to delete skill target %s", target_id)
            raise
        logger.info("Deleted skill target %s", target_id)
