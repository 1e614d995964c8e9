"""Client, project and project resource Pydantic schemas."""

from datetime import datetime
from typing import ClassVar

from pydantic import EmailStr, Field

from skillmetrics.schemas.base import CamelModel, UpdateModel
from skillmetrics.schemas.enums import ResourceAction, SkillLevel


class ClientBase(CamelModel):
    """Base client schema with common fields."""

    name: str = Field(min_length=1)
    industry: str | None = None
    contact_name: str | None = None
    contact_email: EmailStr | None = None
    contact_phone: str | None = None
    website: str | None = None
    logo_url: str | None = None
    notes: str | None = None


class ClientCreate(ClientBase):
    """Schema for creating a client."""

    pass


class ClientUpdate(UpdateModel):
    """Schema for editing a client."""

    non_nullable_fields: ClassVar[tuple[str, ...]] = ("name",)

    name: str | None = Field(default=None, min_length=1)
    industry: str | None = None
    contact_name: str | None = None
    contact_email: EmailStr | None = None
    contact_phone: str | None = None
    website: str | None = None
    logo_url: str | None = None
    notes: str | None = None


class Client(ClientBase):
    """Complete client schema with database fields."""

    contact_email: str | None = None
    id: int
    created_at: datetime
    updated_at: datetime


class ProjectBase(CamelModel):
    """Base project schema with common fields."""

    name: str = Field(min_length=1)
    description: str | None = None
    client_id: int | None = None
    start_date: datetime | None = None
    end_date: datetime | None = None
    location: str | None = None
    confluence_link: str | None = None
    lead_id: int | None = None
    delivery_lead_id: int | None = None
    hr_coordinator_email: EmailStr | None = None
    finance_team_email: EmailStr | None = None
    status: str = "active"


class ProjectCreate(ProjectBase):
    """Schema for creating a project."""

    pass


class ProjectUpdate(UpdateModel):
    """Schema for editing a project."""

    non_nullable_fields: ClassVar[tuple[str, ...]] = ("name", "status")

    name: str | None = Field(default=None, min_length=1)
    description: str | None = None
    client_id: int | None = None
    start_date: datetime | None = None
    end_date: datetime | None = None
    location: str | None = None
    confluence_link: str | None = None
    lead_id: int | None = None
    delivery_lead_id: int | None = None
    hr_coordinator_email: EmailStr | None = None
    finance_team_email: EmailStr | None = None
    status: str | None = None


class Project(ProjectBase):
    """Complete project schema with database fields and joined names."""

    hr_coordinator_email: str | None = None
    finance_team_email: str | None = None
    id: int
    created_at: datetime
    updated_at: datetime
    client_name: str | None = None
    lead_name: str | None = None
    delivery_lead_name: str | None = None


class ProjectResourceCreate(CamelModel):
    """Schema for staffing a user onto a project."""

    user_id: int
    role: str | None = None
    allocation: int = Field(default=100, ge=0, le=100)
    start_date: datetime | None = None
    end_date: datetime | None = None
    notes: str | None = None


class ProjectResourceUpdate(UpdateModel):
    """Schema for editing a staffing assignment."""

    non_nullable_fields: ClassVar[tuple[str, ...]] = ("allocation",)

    role: str | None = None
    allocation: int | None = Field(default=None, ge=0, le=100)
    start_date: datetime | None = None
    end_date: datetime | None = None
    notes: str | None = None


class ProjectResource(CamelModel):
    """Complete project resource schema."""

    id: int
    project_id: int
    user_id: int
    role: str | None
    allocation: int
    start_date: datetime | None
    end_date: datetime | None
    notes: str | None
    created_at: datetime
    updated_at: datetime
    username: str | None = None
    email: str | None = None


class ProjectSkillCreate(CamelModel):
    """Schema for adding a required skill to a project."""

    skill_id: int
    required_level: SkillLevel = SkillLevel.BEGINNER


class ProjectSkill(CamelModel):
    """Complete project skill schema."""

    id: int
    project_id: int
    skill_id: int
    required_level: SkillLevel
    created_at: datetime
    skill_name: str | None = None
    skill_category: str | None = None


class ProjectResourceHistory(CamelModel):
    """Staffing change audit row."""

    id: int
    project_id: int
    user_id: int
    action: ResourceAction
    previous_role: str | None
    new_role: str | None
    previous_allocation: int | None
    new_allocation: int | None
    date: datetime
    performed_by_id: int | None
    note: str | None
