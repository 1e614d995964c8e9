"""
Project staffing service.

Covers projects, the users staffed on them (resources), the skills a
project requires, and the immutable resource history that records every
staffing change.
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Any

from sqlalchemy import or_
from sqlalchemy.orm import Session

from skillmetrics.exceptions import InvalidInputError, NotFoundError
from skillmetrics.models.client import Client
from skillmetrics.models.project import Project, ProjectSkill
from skillmetrics.models.project_resource import ProjectResource, ProjectResourceHistory
from skillmetrics.models.skill import Skill
from skillmetrics.models.user import User
from skillmetrics.schemas.enums import ResourceAction
from skillmetrics.schemas.project import Project as ProjectSchema
from skillmetrics.schemas.project import ProjectResource as ProjectResourceSchema
from skillmetrics.schemas.project import (
    ProjectCreate,
    ProjectResourceCreate,
    ProjectResourceUpdate,
    ProjectSkillCreate,
    ProjectUpdate,
)
from skillmetrics.utils import LIKE_ESCAPE, contains_pattern

logger = logging.getLogger(__name__)

PROJECT_LEAD_ROLE = "Project Lead"
DELIVERY_LEAD_ROLE = "Delivery Lead"

# Project fields reported in update emails, with their display labels.
TRACKED_PROJECT_FIELDS = {
    "name": "Project Name",
    "status": "Status",
    "description": "Description",
    "client_id": "Client",
    "lead_id": "Project Lead",
    "start_date": "Start Date",
    "end_date": "End Date",
    "location": "Location",
}


class ProjectService:
    """
    Service for projects and their staffing.

    Handles:
    - Project CRUD, search and per-client / per-user listings
    - Automatic staffing of project and delivery leads
    - Resource add/update/remove with history rows
    - Project skill requirements
    - Transactional project deletion
    """

    def __init__(self, db: Session) -> None:
        """
        Initialize the project service.

        Args:
            db: SQLAlchemy database session
        """
        self.db = db

    # ------------------------------------------------------------------
    # Lookups
    # ------------------------------------------------------------------

    def get(self, project_id: int) -> Project:
        """
        Fetch a project by ID.

        Raises:
            NotFoundError: If the project does not exist
        """
        project = self.db.get(Project, project_id)
        if project is None:
            raise NotFoundError("Project", project_id)
        return project

    def _require_user(self, user_id: int) -> User:
        user = self.db.get(User, user_id)
        if user is None:
            raise NotFoundError("User", user_id)
        return user

    def _require_client(self, client_id: int) -> Client:
        client = self.db.get(Client, client_id)
        if client is None:
            raise NotFoundError("Client", client_id)
        return client

    def describe(self, project: Project) -> ProjectSchema:
        """Build the API view of a project with client and lead names filled in."""
        result = ProjectSchema.model_validate(project)
        if project.client_id:
            client = self.db.get(Client, project.client_id)
            result.client_name = client.name if client else None
        if project.lead_id:
            lead = self.db.get(User, project.lead_id)
            result.lead_name = lead.username if lead else None
        if project.delivery_lead_id:
            delivery_lead = self.db.get(User, project.delivery_lead_id)
            result.delivery_lead_name = delivery_lead.username if delivery_lead else None
        return result

    def list_all(self) -> list[Project]:
        return self.db.query(Project).order_by(Project.name).all()

    def list_for_client(self, client_id: int) -> list[Project]:
        """Projects of one client, ordered by name."""
        self._require_client(client_id)
        return self.db.query(Project).filter(Project.client_id == client_id).order_by(Project.name).all()

    def list_for_user(self, user_id: int) -> list[Project]:
        """Projects a user is staffed on or leads."""
        staffed = self.db.query(ProjectResource.project_id).filter(ProjectResource.user_id == user_id)
        return (
            self.db.query(Project)
            .filter(
                or_(
                    Project.id.in_(staffed),
                    Project.lead_id == user_id,
                    Project.delivery_lead_id == user_id,
                )
            )
            .order_by(Project.name)
            .all()
        )

    def search(self, query: str) -> list[Project]:
        """Case-insensitive substring search over name, description, location and client name."""
        pattern = contains_pattern(query)
        return (
            self.db.query(Project)
            .outerjoin(Client, Project.client_id == Client.id)
            .filter(
                or_(
                    Project.name.ilike(pattern, escape=LIKE_ESCAPE),
                    Project.description.ilike(pattern, escape=LIKE_ESCAPE),
                    Project.location.ilike(pattern, escape=LIKE_ESCAPE),
                    Client.name.ilike(pattern, escape=LIKE_ESCAPE),
                )
            )
            .order_by(Project.name)
            .all()
        )

    # ------------------------------------------------------------------
    # Project writes
    # ------------------------------------------------------------------

    def _validate_references(self, values: dict[str, Any]) -> None:
        if values.get("client_id") is not None:
            self._require_client(values["client_id"])
        for field in ("lead_id", "delivery_lead_id"):
            if values.get(field) is not None:
                self._require_user(values[field])

    def _record(
        self,
        project_id: int,
        user_id: int,
        action: ResourceAction,
        performed_by_id: int | None,
        note: str | None = None,
        previous_role: str | None = None,
        new_role: str | None = None,
        previous_allocation: int | None = None,
        new_allocation: int | None = None,
    ) -> None:
        """Append a resource history row (no commit)."""
        self.db.add(
            ProjectResourceHistory(
                project_id=project_id,
                user_id=user_id,
                action=action,
                previous_role=previous_role,
                new_role=new_role,
                previous_allocation=previous_allocation,
                new_allocation=new_allocation,
                performed_by_id=performed_by_id,
                note=note,
            )
        )

    def _add_lead_as_resource(self, project: Project, user_id: int, role: str) -> ProjectResource | None:
        """
        Staff a lead on their project at full allocation unless already staffed.

        Returns:
            The new resource, or None if the user was already on the project
        """
        existing = (
            self.db.query(ProjectResource)
            .filter(ProjectResource.project_id == project.id, ProjectResource.user_id == user_id)
            .first()
        )
        if existing is not None:
            return None

        resource = ProjectResource(project_id=project.id, user_id=user_id, role=role, allocation=100)
        self.db.add(resource)
        self._record(
            project.id,
            user_id,
            ResourceAction.ADDED,
            performed_by_id=user_id,
            note=f"Added automatically as {role}",
            new_role=role,
            new_allocation=100,
        )
        self.db.flush()
        return resource

    def _staff_leads(self, project: Project, lead_fields: list[str]) -> list[ProjectResource]:
        roles = {"lead_id": PROJECT_LEAD_ROLE, "delivery_lead_id": DELIVERY_LEAD_ROLE}
        added = []
        for field in lead_fields:
            user_id = getattr(project, field)
            if user_id is None:
                continue
            resource = self._add_lead_as_resource(project, user_id, roles[field])
            if resource is not None:
                added.append(resource)
        return added

    def create(self, data: ProjectCreate) -> tuple[Project, list[ProjectResource]]:
        """
        Create a project and staff its leads.

        Returns:
            (project, resources added automatically for the leads)

        Raises:
            NotFoundError: If the client or a lead does not exist
        """
        values = data.model_dump()
        self._validate_references(values)
        project = Project(**values)
        try:
            self.db.add(project)
            self.db.flush()
            added = self._staff_leads(project, ["lead_id", "delivery_lead_id"])
            self.db.commit()
        except Exception:
            self.db.rollback()
            logger.exception("Failed to create project %r", data.name)
            raise

        self.db.refresh(project)
        logger.info("Created project %s (%s) with %d lead resource(s)", project.id, project.name, len(added))
        return project, added

    def _display(self, field: str, value: Any) -> str | None:
        """Human-readable value of a project field for change emails."""
        if value is None:
            return None
        if field == "client_id":
            client = self.db.get(Client, value)
            return client.name if client else "Unknown client"
        if field == "lead_id":
            user = self.db.get(User, value)
            return user.display_name if user else "Unknown lead"
        if isinstance(value, datetime):
            return value.strftime("%b %d, %Y")
        return str(value)

    def update(
        self, project_id: int, data: ProjectUpdate
    ) -> tuple[Project, list[tuple[str, str | None, str | None]], list[ProjectResource]]:
        """
        Edit a project.

        Returns:
            (project, (label, old, new) changes for tracked fields, lead resources added)

        Raises:
            NotFoundError: If the project, a new client or a new lead does not exist
        """
        project = self.get(project_id)
        values = data.changes()
        self._validate_references(values)

        changes = []
        for field, label in TRACKED_PROJECT_FIELDS.items():
            if field in values:
                old = self._display(field, getattr(project, field))
                new = self._display(field, values[field])
                if old != new:
                    changes.append((label, old, new))

        new_leads = [
            field
            for field in ("lead_id", "delivery_lead_id")
            if field in values and values[field] != getattr(project, field)
        ]
        try:
            for field, value in values.items():
                setattr(project, field, value)
            self.db.flush()
            added = self._staff_leads(project, new_leads)
            self.db.commit()
        except Exception:
            self.db.rollback()
            logger.exception("Failed to update project %s", project_id)
            raise

        self.db.refresh(project)
        logger.info("Updated project %s (%d tracked change(s))", project_id, len(changes))
        return project, changes, added

    def delete(self, project_id: int) -> None:
        """
        Delete a project with its resources, skill requirements and resource history.

        All rows go in one transaction; nothing is removed if any delete fails.

        Raises:
            NotFoundError: If the project does not exist
        """
        project = self.get(project_id)
        try:
            for model, column in (
                (ProjectResourceHistory, ProjectResourceHistory.project_id),
                (ProjectResource, ProjectResource.project_id),
                (ProjectSkill, ProjectSkill.project_id),
            ):
                self.db.query(model).filter(column == project_id).delete(synchronize_session=False)
            self.db.delete(project)
            self.db.commit()
        except Exception:
            self.db.rollback()
            logger.exception("Failed to delete project %s", project_id)
            raise
        logger.info("Deleted project %s", project_id)

    # ------------------------------------------------------------------
    # Resources
    # ------------------------------------------------------------------

    def get_resource(self, resource_id: int) -> ProjectResource:
        """
        Fetch a resource assignment by ID.

        Raises:
            NotFoundError: If it does not exist
        """
        resource = self.db.get(ProjectResource, resource_id)
        if resource is None:
            raise NotFoundError("Project resource", resource_id)
        return resource

    def describe_resource(self, resource: ProjectResource) -> ProjectResourceSchema:
        """API view of a resource with the staffed user's username and email."""
        result = ProjectResourceSchema.model_validate(resource)
        user = self.db.get(User, resource.user_id)
        if user is not None:
            result.username = user.username
            result.email = user.email
        return result

    def list_resources(self, project_id: int) -> list[tuple[ProjectResource, User]]:
        """Resources of a project with their users, ordered by username."""
        self.get(project_id)
        return (
            self.db.query(ProjectResource, User)
            .join(User, ProjectResource.user_id == User.id)
            .filter(ProjectResource.project_id == project_id)
            .order_by(User.username, ProjectResource.id)
            .all()
        )

    def add_resource(
        self, project_id: int, data: ProjectResourceCreate, performed_by_id: int | None
    ) -> ProjectResource:
        """
        Staff a user onto a project and record an ``added`` history row.

        Raises:
            NotFoundError: If the project or user does not exist
            InvalidInputError: If the user is already staffed on the project
        """
        self.get(project_id)
        self._require_user(data.user_id)
        existing = (
            self.db.query(ProjectResource)
            .filter(ProjectResource.project_id == project_id, ProjectResource.user_id == data.user_id)
            .first()
        )
        if existing is not None:
            raise InvalidInputError("User is already a resource on this project")

        resource = ProjectResource(project_id=project_id, **data.model_dump())
        try:
            self.db.add(resource)
            self._record(
                project_id,
                data.user_id,
                ResourceAction.ADDED,
                performed_by_id=performed_by_id,
                note=data.notes,
                new_role=data.role,
                new_allocation=data.allocation,
            )
            self.db.commit()
        except Exception:
            self.db.rollback()
            logger.exception("Failed to add user %s to project %s", data.user_id, project_id)
            raise

        self.db.refresh(resource)
        logger.info("Added user %s to project %s as %r", data.user_id, project_id, data.role)
        return resource

    def update_resource(
        self, resource_id: int, data: ProjectResourceUpdate, performed_by_id: int | None
    ) -> ProjectResource:
        """
        Edit a resource assignment.

        A role change and an allocation change each append one history row,
        with the previous value read before the write.
        """
        resource = self.get_resource(resource_id)
        values = data.changes()
        previous_role = resource.role
        previous_allocation = resource.allocation

        try:
            if "role" in values and values["role"] != previous_role:
                self._record(
                    resource.project_id,
                    resource.user_id,
                    ResourceAction.ROLE_CHANGED,
                    performed_by_id=performed_by_id,
                    previous_role=previous_role,
                    new_role=values["role"],
                )
            if "allocation" in values and values["allocation"] != previous_allocation:
                self._record(
                    resource.project_id,
                    resource.user_id,
                    ResourceAction.ALLOCATION_CHANGED,
                    performed_by_id=performed_by_id,
                    previous_allocation=previous_allocation,
                    new_allocation=values["allocation"],
                )
            for field, value in values.items():
                setattr(resource, field, value)
            self.db.commit()
        except Exception:
            self.db.rollback()
            logger.exception("Failed to update project resource %s", resource_id)
            raise

        self.db.refresh(resource)
        return resource

    def remove_resource(self, resource_id: int, performer: User | None) -> ProjectResourceSchema:
        """
        Take a user off a project and record a ``removed`` history row.

        Returns:
            Snapshot of the removed assignment (with username and email)
        """
        resource = self.get_resource(resource_id)
        snapshot = self.describe_resource(resource)
        note = f"Removed from project by {performer.display_name}" if performer else None
        try:
            self._record(
                resource.project_id,
                resource.user_id,
                ResourceAction.REMOVED,
                performed_by_id=performer.id if performer else None,
                note=note,
                previous_role=resource.role,
                previous_allocation=resource.allocation,
            )
            self.db.delete(resource)
            self.db.commit()
        except Exception:
            self.db.rollback()
            logger.exception("Failed to remove project resource %s", resource_id)
            raise

        logger.info("Removed user %s from project %s", snapshot.user_id, snapshot.project_id)
        return snapshot

    # ------------------------------------------------------------------
    # Project skills
    # ------------------------------------------------------------------

    def list_skills(self, project_id: int) -> list[tuple[ProjectSkill, Skill]]:
        """Skill requirements of a project with the referenced skills."""
        self.get(project_id)
        return (
            self.db.query(ProjectSkill, Skill)
            .join(Skill, ProjectSkill.skill_id == Skill.id)
            .filter(ProjectSkill.project_id == project_id)
            .order_by(Skill.name)
            .all()
        )

    def add_skill(self, project_id: int, data: ProjectSkillCreate) -> tuple[ProjectSkill, Skill]:
        """
        Add a skill requirement to a project.

        Raises:
            NotFoundError: If the project or skill does not exist
            InvalidInputError: If the project already requires the skill
        """
        self.get(project_id)
        skill = self.db.get(Skill, data.skill_id)
        if skill is None:
            raise NotFoundError("Skill", data.skill_id)
        existing = (
            self.db.query(ProjectSkill)
            .filter(ProjectSkill.project_id == project_id, ProjectSkill.skill_id == data.skill_id)
            .first()
        )
        if existing is not None:
            raise InvalidInputError("Skill is already required by this project")

        project_skill = ProjectSkill(project_id=project_id, **data.model_dump())
        self.db.add(project_skill)
        self.db.commit()
        self.db.refresh(project_skill)
        return project_skill, skill

    def remove_skill(self, project_skill_id: int) -> None:
        project_skill = self.db.get(ProjectSkill, project_skill_id)
        if project_skill is None:
            raise NotFoundError("Project skill", project_skill_id)
        self.db.delete(project_skill)
        self.db.commit()

    # ------------------------------------------------------------------
    # Resource history
    # ------------------------------------------------------------------

    def resource_history(self, project_id: int) -> list[ProjectResourceHistory]:
        """Staffing history of a project, newest first."""
        self.get(project_id)
        return (
            self.db.query(ProjectResourceHistory)
            .filter(ProjectResourceHistory.project_id == project_id)
            .order_by(ProjectResourceHistory.date.desc(), ProjectResourceHistory.id.desc())
            .all()
        )

    def user_history(self, user_id: int) -> list[ProjectResourceHistory]:
        """Staffing history of a user across projects, newest first."""
        return (
            self.db.query(ProjectResourceHistory)
            .filter(ProjectResourceHistory.user_id == user_id)
            .order_by(ProjectResourceHistory.date.desc(), ProjectResourceHistory.id.desc())
            .all()
        )

    def all_history(self) -> list[ProjectResourceHistory]:
        return (
            self.db.query(ProjectResourceHistory)
            .order_by(ProjectResourceHistory.date.desc(), ProjectResourceHistory.id.desc())
            .all()
        )
