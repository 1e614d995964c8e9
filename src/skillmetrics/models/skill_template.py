"""Skill template database model."""

from sqlalchemy import Boolean, Column, Date, DateTime, Integer, String, Text
from sqlalchemy.sql import func

from skillmetrics.database import Base, enum_column
from skillmetrics.schemas.enums import SkillLevel


class SkillTemplate(Base):
    """
    Skill template model: an admin-curated entry in the skill taxonomy.

    Attributes:
        id: Primary key
        name: Skill name
        category: Skill category
        description: Longer description shown to users
        is_recommended: Whether the skill is promoted to all users
        target_level: Suggested proficiency level
        target_date: Suggested date to reach the target level
        created_at: Timestamp when record was created
        updated_at: Timestamp of the last modification
    """

    __tablename__ = "skill_templates"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String, nullable=False, index=True)
    category = Column(String, nullable=False)
    description = Column(Text, nullable=True)
    is_recommended = Column(Boolean, nullable=False, default=False)
    target_level = Column(enum_column(SkillLevel, "skill_level"), nullable=True)
    target_date = Column(Date, nullable=True)
    created_at = Column(DateTime, server_default=func.now(), nullable=False)
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now(), nullable=False)

    def __repr__(self) -> str:
        """String representation of SkillTemplate."""
        return f"<SkillTemplate(id={self.id}, name='{self.name}', category='{self.category}')>"
