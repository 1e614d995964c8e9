"""Pending skill update database model."""

from sqlalchemy import Boolean, Column, DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.sql import func

from skillmetrics.database import Base, enum_column
from skillmetrics.schemas.enums import ApprovalStatus, SkillLevel


class PendingSkillUpdate(Base):
    """
    A proposed skill creation or edit awaiting admin review.

    Holds a full copy of the proposed skill fields. ``is_update`` is false
    for a new skill and true for an edit of ``skill_id``. ``status`` moves
    once from pending to approved or rejected and never back.

    Attributes:
        id: Primary key
        user_id: Submitter
        skill_id: Skill being edited (null for new skills)
        name, category, level, certification, credly_link, notes,
        certification_date, expiration_date: Proposed skill fields
        is_update: Whether this edits an existing skill
        status: pending, approved or rejected
        submitted_at: Submission timestamp
        reviewed_at: Review timestamp
        reviewed_by: Reviewing admin
        review_notes: Reviewer's notes
    """

    __tablename__ = "pending_skill_updates"

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    skill_id = Column(Integer, ForeignKey("skills.id"), nullable=True, index=True)
    name = Column(String, nullable=False)
    category = Column(String, nullable=False)
    level = Column(enum_column(SkillLevel, "skill_level"), nullable=False)
    certification = Column(String, nullable=True)
    credly_link = Column(String, nullable=True)
    notes = Column(Text, nullable=True)
    certification_date = Column(DateTime, nullable=True)
    expiration_date = Column(DateTime, nullable=True)
    is_update = Column(Boolean, nullable=False, default=False)
    status = Column(
        enum_column(ApprovalStatus, "approval_status"),
        nullable=False,
        default=ApprovalStatus.PENDING,
        index=True,
    )
    submitted_at = Column(DateTime, server_default=func.now(), nullable=False)
    reviewed_at = Column(DateTime, nullable=True)
    reviewed_by = Column(Integer, ForeignKey("users.id"), nullable=True)
    review_notes = Column(Text, nullable=True)

    def __repr__(self) -> str:
        """String representation of PendingSkillUpdate."""
        return (
            f"<PendingSkillUpdate(id={self.id}, name='{self.name}', "
            f"status='{self.status}', is_update={self.is_update})>"
        )
