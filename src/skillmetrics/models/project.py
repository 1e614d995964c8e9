"""Project and project skill database models."""

from sqlalchemy import Column, DateTime, ForeignKey, Integer, String, Text, UniqueConstraint
from sqlalchemy.sql import func

from skillmetrics.database import Base, enum_column
from skillmetrics.schemas.enums import SkillLevel


class Project(Base):
    """
    Project model representing a client engagement that users are staffed on.

    Attributes:
        id: Primary key
        name: Project name
        description: Project description
        client_id: Foreign key to clients table
        start_date: Planned start
        end_date: Planned end
        location: Delivery location
        confluence_link: Link to project documentation
        lead_id: Project lead (user)
        delivery_lead_id: Delivery lead (user)
        hr_coordinator_email: Recipient of staffing emails
        finance_team_email: Recipient of staffing emails
        status: Project status (active, completed, on_hold, ...)
        created_at: Timestamp when record was created
        updated_at: Timestamp of the last modification
    """

    __tablename__ = "projects"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String, nullable=False, index=True)
    description = Column(Text, nullable=True)
    client_id = Column(Integer, ForeignKey("clients.id"), nullable=True, index=True)
    start_date = Column(DateTime, nullable=True)
    end_date = Column(DateTime, nullable=True)
    location = Column(String, nullable=True)
    confluence_link = Column(String, nullable=True)
    lead_id = Column(Integer, ForeignKey("users.id"), nullable=True)
    delivery_lead_id = Column(Integer, ForeignKey("users.id"), nullable=True)
    hr_coordinator_email = Column(String, nullable=True)
    finance_team_email = Column(String, nullable=True)
    status = Column(String, default="active", nullable=False)
    created_at = Column(DateTime, server_default=func.now(), nullable=False)
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now(), nullable=False)

    def __repr__(self) -> str:
        """String representation of Project."""
        return f"<Project(id={self.id}, name='{self.name}', client_id={self.client_id})>"


class ProjectSkill(Base):
    """
    ProjectSkill model linking projects to the skills they require.

    Attributes:
        id: Primary key
        project_id: Foreign key to projects table
        skill_id: Foreign key to skills table
        required_level: Minimum level the project needs
        created_at: Timestamp when record was created
    """

    __tablename__ = "project_skills"

    id = Column(Integer, primary_key=True, autoincrement=True)
    project_id = Column(Integer, ForeignKey("projects.id"), nullable=False, index=True)
    skill_id = Column(Integer, ForeignKey("skills.id"), nullable=False, index=True)
    required_level = Column(
        enum_column(SkillLevel, "skill_level"), nullable=False, default=SkillLevel.BEGINNER
    )
    created_at = Column(DateTime, server_default=func.now(), nullable=False)

    # Ensure unique combination of project_id and skill_id
    __table_args__ = (UniqueConstraint("project_id", "skill_id", name="_project_skill_uc"),)

    def __repr__(self) -> str:
        """String representation of ProjectSkill."""
        return (
            f"<ProjectSkill(id={self.id}, project_id={self.project_id}, "
            f"skill_id={self.skill_id}, level='{self.required_level}')>"
        )
