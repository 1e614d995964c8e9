"""Skill target database models (target plus its skill and user links)."""

from sqlalchemy import Column, Date, DateTime, ForeignKey, Integer, String, Text, UniqueConstraint
from sqlalchemy.sql import func

from skillmetrics.database import Base, enum_column
from skillmetrics.schemas.enums import SkillLevel


class SkillTarget(Base):
    """
    Skill target model: a goal that a set of users reach a level in a set of skills.

    Attributes:
        id: Primary key
        name: Target name
        description: Target description
        target_level: Level each linked user should reach
        target_date: Deadline
        target_number: Number of people the organisation wants at the level
        created_at: Timestamp when record was created
        updated_at: Timestamp of the last modification
    """

    __tablename__ = "skill_targets"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String, nullable=False)
    description = Column(Text, nullable=True)
    target_level = Column(enum_column(SkillLevel, "skill_level"), nullable=False)
    target_date = Column(Date, nullable=True)
    target_number = Column(Integer, nullable=True)
    created_at = Column(DateTime, server_default=func.now(), nullable=False)
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now(), nullable=False)

    def __repr__(self) -> str:
        """String representation of SkillTarget."""
        return f"<SkillTarget(id={self.id}, name='{self.name}', level='{self.target_level}')>"


class SkillTargetSkill(Base):
    """Link between a skill target and a skill."""

    __tablename__ = "skill_target_skills"

    id = Column(Integer, primary_key=True, autoincrement=True)
    target_id = Column(Integer, ForeignKey("skill_targets.id"), nullable=False, index=True)
    skill_id = Column(Integer, ForeignKey("skills.id"), nullable=False, index=True)

    __table_args__ = (UniqueConstraint("target_id", "skill_id", name="_target_skill_uc"),)


class SkillTargetUser(Base):
    """Link between a skill target and a user."""

    __tablename__ = "skill_target_users"

    id = Column(Integer, primary_key=True, autoincrement=True)
    target_id = Column(Integer, ForeignKey("skill_targets.id"), nullable=False, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)

    __table_args__ = (UniqueConstraint("target_id", "user_id", name="_target_user_uc"),)
