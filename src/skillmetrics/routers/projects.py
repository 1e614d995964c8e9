"""Projects API router - projects, resources, project skills and resource history."""

from __future__ import annotations

from fastapi import APIRouter, BackgroundTasks, Depends, Query, status
from sqlalchemy.orm import Session

from skillmetrics.database import get_db
from skillmetrics.dependencies import get_current_user, get_email_service, require_admin
from skillmetrics.models.project import Project
from skillmetrics.models.project_resource import ProjectResource
from skillmetrics.models.user import User
from skillmetrics.schemas.project import Project as ProjectSchema
from skillmetrics.schemas.project import ProjectResource as ProjectResourceSchema
from skillmetrics.schemas.project import (
    ProjectCreate,
    ProjectResourceCreate,
    ProjectResourceHistory,
    ProjectResourceUpdate,
    ProjectSkill,
    ProjectSkillCreate,
    ProjectUpdate,
)
from skillmetrics.services.email_service import EmailService
from skillmetrics.services.project_service import ProjectService

router = APIRouter()

AUTOMATIC_ASSIGNMENT = "System (Automatic Assignment)"


def _queue_resource_added(
    background_tasks: BackgroundTasks,
    email_service: EmailService,
    project: Project,
    resource: ProjectResource,
    staffed: User,
    performer_name: str | None,
) -> None:
    """
    Queue the "resource added" email with plain values.

    The values are read now, while the session is open; the task runs after
    the response is sent.
    """
    background_tasks.add_task(
        email_service.send_resource_added,
        project.name,
        staffed.username,
        staffed.email,
        resource.role,
        resource.allocation,
        resource.start_date,
        resource.end_date,
        performer_name,
        project.hr_coordinator_email,
        project.finance_team_email,
    )


def _queue_lead_emails(
    background_tasks: BackgroundTasks,
    email_service: EmailService,
    db: Session,
    project: Project,
    added: list[ProjectResource],
) -> None:
    for resource in added:
        staffed = db.get(User, resource.user_id)
        _queue_resource_added(
            background_tasks, email_service, project, resource, staffed, AUTOMATIC_ASSIGNMENT
        )


# ---------------------------------------------------------------------------
# Projects
# ---------------------------------------------------------------------------


@router.get("/projects", response_model=list[ProjectSchema])
def list_projects(_: User = Depends(get_current_user), db: Session = Depends(get_db)) -> list[ProjectSchema]:
    service = ProjectService(db)
    return [service.describe(project) for project in service.list_all()]


@router.post("/projects", response_model=ProjectSchema, status_code=status.HTTP_201_CREATED)
def create_project(
    payload: ProjectCreate,
    background_tasks: BackgroundTasks,
    _: User = Depends(require_admin),
    db: Session = Depends(get_db),
    email_service: EmailService = Depends(get_email_service),
) -> ProjectSchema:
    """
    Create a project.

    The project lead and delivery lead, when given, are staffed on the
    project automatically. HR and finance are emailed after the commit.

    Raises:
        NotFoundError (404): If the client or a lead does not exist.
    """
    service = ProjectService(db)
    project, added = service.create(payload)
    result = service.describe(project)

    background_tasks.add_task(
        email_service.send_project_created,
        result.name,
        result.client_name,
        result.description,
        result.start_date,
        result.end_date,
        result.lead_name,
        result.hr_coordinator_email,
        result.finance_team_email,
    )
    _queue_lead_emails(background_tasks, email_service, db, project, added)
    return result


@router.get("/projects/search", response_model=list[ProjectSchema])
def search_projects(
    q: str = Query(..., min_length=1),
    _: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> list[ProjectSchema]:
    service = ProjectService(db)
    return [service.describe(project) for project in service.search(q)]


@router.get("/projects/{project_id}", response_model=ProjectSchema)
def get_project(
    project_id: int, _: User = Depends(get_current_user), db: Session = Depends(get_db)
) -> ProjectSchema:
    service = ProjectService(db)
    return service.describe(service.get(project_id))


@router.patch("/projects/{project_id}", response_model=ProjectSchema)
def update_project(
    project_id: int,
    payload: ProjectUpdate,
    background_tasks: BackgroundTasks,
    admin: User = Depends(require_admin),
    db: Session = Depends(get_db),
    email_service: EmailService = Depends(get_email_service),
) -> ProjectSchema:
    """
    Edit a project.

    Changes to tracked fields are emailed to HR and finance; a newly
    assigned lead is staffed on the project.
    """
    service = ProjectService(db)
    previous_name = service.get(project_id).name
    project, changes, added = service.update(project_id, payload)

    if changes:
        background_tasks.add_task(
            email_service.send_project_updated,
            previous_name,
            changes,
            admin.display_name,
            project.hr_coordinator_email,
            project.finance_team_email,
        )
    _queue_lead_emails(background_tasks, email_service, db, project, added)
    return service.describe(project)


@router.delete("/projects/{project_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_project(project_id: int, _: User = Depends(require_admin), db: Session = Depends(get_db)) -> None:
    """Delete a project with its resources, skill requirements and resource history."""
    ProjectService(db).delete(project_id)


@router.get("/user/projects", response_model=list[ProjectSchema])
def my_projects(user: User = Depends(get_current_user), db: Session = Depends(get_db)) -> list[ProjectSchema]:
    """List projects the current user is staffed on or leads."""
    service = ProjectService(db)
    return [service.describe(project) for project in service.list_for_user(user.id)]


# ---------------------------------------------------------------------------
# Resources
# ---------------------------------------------------------------------------


@router.get("/projects/{project_id}/resources", response_model=list[ProjectResourceSchema])
def list_resources(
    project_id: int, _: User = Depends(get_current_user), db: Session = Depends(get_db)
) -> list[ProjectResourceSchema]:
    result = []
    for resource, staffed in ProjectService(db).list_resources(project_id):
        item = ProjectResourceSchema.model_validate(resource)
        item.username = staffed.username
        item.email = staffed.email
        result.append(item)
    return result


@router.post(
    "/projects/{project_id}/resources",
    response_model=ProjectResourceSchema,
    status_code=status.HTTP_201_CREATED,
)
def add_resource(
    project_id: int,
    payload: ProjectResourceCreate,
    background_tasks: BackgroundTasks,
    admin: User = Depends(require_admin),
    db: Session = Depends(get_db),
    email_service: EmailService = Depends(get_email_service),
) -> ProjectResourceSchema:
    """
    Staff a user onto a project.

    Raises:
        InvalidInputError (400): If the user is already on the project.
        NotFoundError (404): If the project or user does not exist.
    """
    service = ProjectService(db)
    resource = service.add_resource(project_id, payload, admin.id)
    project = service.get(project_id)
    staffed = db.get(User, resource.user_id)
    _queue_resource_added(background_tasks, email_service, project, resource, staffed, admin.display_name)
    return service.describe_resource(resource)


@router.patch("/project-resources/{resource_id}", response_model=ProjectResourceSchema)
def update_resource(
    resource_id: int,
    payload: ProjectResourceUpdate,
    admin: User = Depends(require_admin),
    db: Session = Depends(get_db),
) -> ProjectResourceSchema:
    """Edit a staffing assignment; role and allocation changes are recorded in history."""
    service = ProjectService(db)
    return service.describe_resource(service.update_resource(resource_id, payload, admin.id))


@router.delete("/project-resources/{resource_id}", status_code=status.HTTP_204_NO_CONTENT)
def remove_resource(
    resource_id: int,
    background_tasks: BackgroundTasks,
    admin: User = Depends(require_admin),
    db: Session = Depends(get_db),
    email_service: EmailService = Depends(get_email_service),
) -> None:
    service = ProjectService(db)
    removed = service.remove_resource(resource_id, admin)
    project = service.get(removed.project_id)
    background_tasks.add_task(
        email_service.send_resource_removed,
        project.name,
        removed.username,
        removed.email,
        removed.role,
        removed.allocation,
        admin.display_name,
        project.hr_coordinator_email,
        project.finance_team_email,
    )


# ---------------------------------------------------------------------------
# Project skills
# ---------------------------------------------------------------------------


@router.get("/projects/{project_id}/skills", response_model=list[ProjectSkill])
def list_project_skills(
    project_id: int, _: User = Depends(get_current_user), db: Session = Depends(get_db)
) -> list[ProjectSkill]:
    result = []
    for project_skill, skill in ProjectService(db).list_skills(project_id):
        item = ProjectSkill.model_validate(project_skill)
        item.skill_name = skill.name
        item.skill_category = skill.category
        result.append(item)
    return result


@router.post("/projects/{project_id}/skills", response_model=ProjectSkill, status_code=status.HTTP_201_CREATED)
def add_project_skill(
    project_id: int,
    payload: ProjectSkillCreate,
    _: User = Depends(require_admin),
    db: Session = Depends(get_db),
) -> ProjectSkill:
    project_skill, skill = ProjectService(db).add_skill(project_id, payload)
    result = ProjectSkill.model_validate(project_skill)
    result.skill_name = skill.name
    result.skill_category = skill.category
    return result


@router.delete("/project-skills/{project_skill_id}", status_code=status.HTTP_204_NO_CONTENT)
def remove_project_skill(
    project_skill_id: int, _: User = Depends(require_admin), db: Session = Depends(get_db)
) -> None:
    ProjectService(db).remove_skill(project_skill_id)


# ---------------------------------------------------------------------------
# Resource history
# ---------------------------------------------------------------------------


@router.get("/projects/{project_id}/resource-history", response_model=list[ProjectResourceHistory])
def project_resource_history(
    project_id: int, _: User = Depends(get_current_user), db: Session = Depends(get_db)
) -> list[ProjectResourceHistory]:
    return [ProjectResourceHistory.model_validate(row) for row in ProjectService(db).resource_history(project_id)]


@router.get("/user/project-history", response_model=list[ProjectResourceHistory])
def my_project_history(
    user: User = Depends(get_current_user), db: Session = Depends(get_db)
) -> list[ProjectResourceHistory]:
    return [ProjectResourceHistory.model_validate(row) for row in ProjectService(db).user_history(user.id)]
