"""
Shared FastAPI dependencies.

Provides:
- Authentication from the session cookie (get_current_user)
- Admin gate (require_admin)
- Email service instance (get_email_service)
"""

import logging

from fastapi import Depends, Request
from sqlalchemy.orm import Session

from skillmetrics.config import email_config
from skillmetrics.database import get_db
from skillmetrics.exceptions import AuthenticationError, PermissionDeniedError
from skillmetrics.models.user import User
from skillmetrics.services.email_service import EmailService

logger = logging.getLogger(__name__)

SESSION_USER_KEY = "user_id"


def get_current_user(request: Request, db: Session = Depends(get_db)) -> User:
    """
    Resolve the logged-in user from the session cookie.

    Raises:
        AuthenticationError: If there is no session or its user no longer exists
    """
    user_id = request.session.get(SESSION_USER_KEY)
    if user_id is None:
        raise AuthenticationError("Unauthorized")

    user = db.get(User, user_id)
    if user is None:
        logger.info("Session references deleted user %s; clearing session", user_id)
        request.session.clear()
        raise AuthenticationError("Unauthorized")
    return user


def require_admin(user: User = Depends(get_current_user)) -> User:
    """
    Require an authenticated admin.

    Raises:
        PermissionDeniedError: If the current user is not an admin
    """
    if not user.is_admin:
        raise PermissionDeniedError("Forbidden")
    return user


def get_email_service() -> EmailService:
    """Dependency returning the outbound email service."""
    return EmailService(config=email_config)
