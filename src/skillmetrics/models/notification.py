"""Notification database model."""

from sqlalchemy import Boolean, Column, DateTime, ForeignKey, Integer, Text
from sqlalchemy.sql import func

from skillmetrics.database import Base, enum_column
from skillmetrics.schemas.enums import NotificationType


class Notification(Base):
    """In-app inbox entry for a single user."""

    __tablename__ = "notifications"

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    type = Column(enum_column(NotificationType, "notification_type"), nullable=False)
    content = Column(Text, nullable=False)
    is_read = Column(Boolean, nullable=False, default=False)
    related_skill_id = Column(Integer, nullable=True)
    related_user_id = Column(Integer, nullable=True)
    created_at = Column(DateTime, server_default=func.now(), nullable=False)

    def __repr__(self) -> str:
        """String representation of Notification."""
        return f"<Notification(id={self.id}, user_id={self.user_id}, type='{self.type}')>"
