"""Skill and skill history database models."""

from sqlalchemy import Column, DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.sql import func

from skillmetrics.database import Base, enum_column
from skillmetrics.schemas.enums import SkillLevel


class Skill(Base):
    """
    Skill model representing one user's proficiency in one skill.

    Attributes:
        id: Primary key
        user_id: Foreign key to users table (owner)
        name: Skill name
        category: Skill category (e.g. DevOps, Frontend)
        level: Proficiency level (beginner, intermediate, expert)
        certification: Certification name, if any
        credly_link: Link to a Credly badge
        notes: Free-text notes
        certification_date: When the certification was obtained
        expiration_date: When the certification expires
        endorsement_count: Number of endorsements received
        last_updated: Timestamp of the last modification
    """

    __tablename__ = "skills"

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    name = Column(String, nullable=False, index=True)
    category = Column(String, nullable=False)
    level = Column(enum_column(SkillLevel, "skill_level"), nullable=False)
    certification = Column(String, nullable=True)
    credly_link = Column(String, nullable=True)
    notes = Column(Text, nullable=True)
    certification_date = Column(DateTime, nullable=True)
    expiration_date = Column(DateTime, nullable=True)
    endorsement_count = Column(Integer, nullable=False, default=0)
    last_updated = Column(
        DateTime, server_default=func.now(), onupdate=func.now(), nullable=False
    )

    def __repr__(self) -> str:
        """String representation of Skill."""
        return f"<Skill(id={self.id}, name='{self.name}', level='{self.level}')>"


class SkillHistory(Base):
    """
    Immutable audit row for a skill level change.

    ``previous_level`` is null for the row written when a skill is created.
    """

    __tablename__ = "skill_histories"

    id = Column(Integer, primary_key=True, autoincrement=True)
    skill_id = Column(Integer, ForeignKey("skills.id"), nullable=False, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    previous_level = Column(enum_column(SkillLevel, "skill_level"), nullable=True)
    new_level = Column(enum_column(SkillLevel, "skill_level"), nullable=False)
    change_note = Column(Text, nullable=True)
    created_at = Column(DateTime, server_default=func.now(), nullable=False)

    def __repr__(self) -> str:
        """String representation of SkillHistory."""
        return (
            f"<SkillHistory(id={self.id}, skill_id={self.skill_id}, "
            f"{self.previous_level} -> {self.new_level})>"
        )
