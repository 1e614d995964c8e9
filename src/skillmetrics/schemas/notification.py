"""Notification Pydantic schemas."""

from datetime import datetime

from skillmetrics.schemas.base import CamelModel
from skillmetrics.schemas.enums import NotificationType


class Notification(CamelModel):
    """Complete notification schema."""

    id: int
    user_id: int
    type: NotificationType
    content: str
    is_read: bool
    related_skill_id: int | None
    related_user_id: int | None
    created_at: datetime
