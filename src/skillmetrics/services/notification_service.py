"""In-app notification service."""

from __future__ import annotations

import logging

from sqlalchemy.orm import Session

from skillmetrics.exceptions import NotFoundError, PermissionDeniedError
from skillmetrics.models.notification import Notification
from skillmetrics.schemas.enums import NotificationType

logger = logging.getLogger(__name__)


class NotificationService:
    """
    Service for per-user notification inboxes.

    ``create`` only flushes: notifications are written inside the caller's
    transaction and commit together with the change they announce.
    """

    def __init__(self, db: Session) -> None:
        """
        Initialize the notification service.

        Args:
            db: SQLAlchemy database session
        """
        self.db = db

    def create(
        self,
        user_id: int,
        type: NotificationType,
        content: str,
        related_skill_id: int | None = None,
        related_user_id: int | None = None,
    ) -> Notification:
        """
        Add a notification to the current transaction.

        Returns:
            The flushed (not yet committed) Notification
        """
        notification = Notification(
            user_id=user_id,
            type=type,
            content=content,
            is_read=False,
            related_skill_id=related_skill_id,
            related_user_id=related_user_id,
        )
        self.db.add(notification)
        self.db.flush()
        return notification

    def list_for_user(self, user_id: int, unread_only: bool = False) -> list[Notification]:
        """List a user's notifications, newest first."""
        query = self.db.query(Notification).filter(Notification.user_id == user_id)
        if unread_only:
            query = query.filter(Notification.is_read.is_(False))
        return query.order_by(Notification.created_at.desc(), Notification.id.desc()).all()

    def mark_read(self, notification_id: int, user_id: int) -> Notification:
        """
        Mark one notification as read.

        Raises:
            NotFoundError: If the notification does not exist
            PermissionDeniedError: If it belongs to another user
        """
        notification = self.db.get(Notification, notification_id)
        if notification is None:
            raise NotFoundError("Notification", notification_id)
        if notification.user_id != user_id:
            raise PermissionDeniedError("Forbidden")

        notification.is_read = True
        self.db.commit()
        self.db.refresh(notification)
        return notification

    def mark_all_read(self, user_id: int) -> int:
        """
        Mark every unread notification of a user as read.

        Returns:
            Number of notifications updated
        """
        count = (
            self.db.query(Notification)
            .filter(Notification.user_id == user_id, Notification.is_read.is_(False))
            .update({Notification.is_read: True}, synchronize_session=False)
        )
        self.db.commit()
        logger.info("Marked %d notifications read for user %s", count, user_id)
        return count
