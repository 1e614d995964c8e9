"""User and profile history database models."""

from sqlalchemy import Boolean, Column, DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.sql import func

from skillmetrics.database import Base


class User(Base):
    """
    User model representing an employee account.

    Attributes:
        id: Primary key
        email: Login email address (unique)
        username: Display handle, derived from the email local part
        password: Password hash (never serialized)
        is_admin: Whether the user may review submissions and manage taxonomies
        first_name: Given name
        last_name: Family name
        project: Free-text current project
        role: Job title
        location: Office or city
        created_at: Timestamp when record was created
    """

    __tablename__ = "users"

    id = Column(Integer, primary_key=True, autoincrement=True)
    email = Column(String, nullable=False, unique=True, index=True)
    username = Column(String, nullable=False, default="", index=True)
    password = Column(String, nullable=False, default="")
    is_admin = Column(Boolean, nullable=False, default=False)
    first_name = Column(String, nullable=False, default="")
    last_name = Column(String, nullable=False, default="")
    project = Column(String, nullable=False, default="")
    role = Column(String, nullable=False, default="")
    location = Column(String, nullable=False, default="")
    created_at = Column(DateTime, server_default=func.now(), nullable=False)

    @property
    def display_name(self) -> str:
        """Full name when known, otherwise the username."""
        full_name = f"{self.first_name or ''} {self.last_name or ''}".strip()
        return full_name or self.username

    def __repr__(self) -> str:
        """String representation of User."""
        return f"<User(id={self.id}, email='{self.email}', is_admin={self.is_admin})>"


class ProfileHistory(Base):
    """One changed profile field, recorded on every profile edit."""

    __tablename__ = "profile_histories"

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    changed_field = Column(String, nullable=False)
    previous_value = Column(Text, nullable=True)
    new_value = Column(Text, nullable=False)
    created_at = Column(DateTime, server_default=func.now(), nullable=False)

    def __repr__(self) -> str:
        """String representation of ProfileHistory."""
        return (
            f"<ProfileHistory(id={self.id}, user_id={self.user_id}, "
            f"field='{self.changed_field}')>"
        )
