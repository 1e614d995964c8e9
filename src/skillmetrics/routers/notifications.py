"""Notifications API router."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from skillmetrics.database import get_db
from skillmetrics.dependencies import get_current_user
from skillmetrics.models.user import User
from skillmetrics.schemas.notification import Notification
from skillmetrics.services.notification_service import NotificationService

router = APIRouter(prefix="/notifications")


@router.get("", response_model=list[Notification])
def list_notifications(
    unread_only: bool = Query(False, alias="unreadOnly"),
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> list[Notification]:
    """List the current user's notifications, newest first."""
    rows = NotificationService(db).list_for_user(user.id, unread_only=unread_only)
    return [Notification.model_validate(row) for row in rows]


@router.post("/read-all")
def mark_all_read(user: User = Depends(get_current_user), db: Session = Depends(get_db)) -> dict:
    """
    Mark all of the current user's notifications as read.

    Returns:
        ``{"updated": <count>}``
    """
    return {"updated": NotificationService(db).mark_all_read(user.id)}


@router.post("/{notification_id}/read", response_model=Notification)
def mark_read(
    notification_id: int, user: User = Depends(get_current_user), db: Session = Depends(get_db)
) -> Notification:
    """
    Mark one notification as read.

    Raises:
        PermissionDeniedError (403): If it belongs to another user.
        NotFoundError (404): If it does not exist.
    """
    return Notification.model_validate(NotificationService(db).mark_read(notification_id, user.id))
