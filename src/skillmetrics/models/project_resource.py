"""Project resource and resource history database models."""

from sqlalchemy import Column, DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.sql import func

from skillmetrics.database import Base, enum_column
from skillmetrics.schemas.enums import ResourceAction


class ProjectResource(Base):
    """
    A user staffed onto a project.

    Attributes:
        id: Primary key
        project_id: Foreign key to projects table
        user_id: Foreign key to users table
        role: Role on the project
        allocation: Percentage of time allocated (0-100)
        start_date: Assignment start
        end_date: Assignment end
        notes: Free-text notes
        created_at: Timestamp when record was created
        updated_at: Timestamp of the last modification
    """

    __tablename__ = "project_resources"

    id = Column(Integer, primary_key=True, autoincrement=True)
    project_id = Column(Integer, ForeignKey("projects.id"), nullable=False, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    role = Column(String, nullable=True)
    allocation = Column(Integer, nullable=False, default=100)
    start_date = Column(DateTime, nullable=True)
    end_date = Column(DateTime, nullable=True)
    notes = Column(Text, nullable=True)
    created_at = Column(DateTime, server_default=func.now(), nullable=False)
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now(), nullable=False)

    def __repr__(self) -> str:
        """String representation of ProjectResource."""
        return (
            f"<ProjectResource(id={self.id}, project_id={self.project_id}, "
            f"user_id={self.user_id}, role='{self.role}')>"
        )


class ProjectResourceHistory(Base):
    """Immutable audit row for a staffing change on a project."""

    __tablename__ = "project_resource_histories"

    id = Column(Integer, primary_key=True, autoincrement=True)
    project_id = Column(Integer, ForeignKey("projects.id"), nullable=False, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    action = Column(enum_column(ResourceAction, "resource_action"), nullable=False)
    previous_role = Column(String, nullable=True)
    new_role = Column(String, nullable=True)
    previous_allocation = Column(Integer, nullable=True)
    new_allocation = Column(Integer, nullable=True)
    date = Column(DateTime, server_default=func.now(), nullable=False)
    performed_by_id = Column(Integer, ForeignKey("users.id"), nullable=True)
    note = Column(Text, nullable=True)

    def __repr__(self) -> str:
        """String representation of ProjectResourceHistory."""
        return (
            f"<ProjectResourceHistory(id={self.id}, project_id={self.project_id}, "
            f"user_id={self.user_id}, action='{self.action}')>"
        )
