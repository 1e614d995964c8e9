"""Endorsement database model."""

from sqlalchemy import Column, DateTime, ForeignKey, Integer, Text, UniqueConstraint
from sqlalchemy.sql import func

from skillmetrics.database import Base


class Endorsement(Base):
    """
    Endorsement model: a colleague's attestation of another user's skill.

    Attributes:
        id: Primary key
        skill_id: Foreign key to skills table
        endorser_id: User giving the endorsement
        endorsee_id: Owner of the endorsed skill
        comment: Optional comment
        created_at: Timestamp of the latest endorsement by this endorser
    """

    __tablename__ = "endorsements"

    id = Column(Integer, primary_key=True, autoincrement=True)
    skill_id = Column(Integer, ForeignKey("skills.id"), nullable=False, index=True)
    endorser_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    endorsee_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    comment = Column(Text, nullable=True)
    created_at = Column(DateTime, server_default=func.now(), nullable=False)

    # One endorsement per endorser per skill
    __table_args__ = (UniqueConstraint("skill_id", "endorser_id", name="_skill_endorser_uc"),)

    def __repr__(self) -> str:
        """String representation of Endorsement."""
        return (
            f"<Endorsement(id={self.id}, skill_id={self.skill_id}, "
            f"endorser_id={self.endorser_id})>"
        )
