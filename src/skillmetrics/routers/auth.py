"""Auth and profile API router - registration, session login/logout, current user, profile edits."""

from __future__ import annotations

import logging

from fastapi import APIRouter, BackgroundTasks, Depends, Request, status
from sqlalchemy.orm import Session

from skillmetrics.config import settings
from skillmetrics.database import get_db
from skillmetrics.dependencies import SESSION_USER_KEY, get_current_user, get_email_service
from skillmetrics.models.user import User
from skillmetrics.schemas.user import ChangePasswordRequest, LoginRequest, ProfileUpdate, RegisterRequest
from skillmetrics.schemas.user import ProfileHistory as ProfileHistorySchema
from skillmetrics.schemas.user import User as UserSchema
from skillmetrics.services.email_service import EmailService
from skillmetrics.services.user_service import UserService

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/register", response_model=UserSchema, status_code=status.HTTP_201_CREATED)
def register(
    payload: RegisterRequest,
    background_tasks: BackgroundTasks,
    db: Session = Depends(get_db),
    email_service: EmailService = Depends(get_email_service),
) -> UserSchema:
    """
    Register an account from an email address.

    A password is generated and emailed to the new user; the caller is not
    logged in.

    Raises:
        InvalidInputError (400): If the email is taken or outside the allowed domain.
    """
    user, password = UserService(db).register(payload.email, settings.allowed_email_domain)
    background_tasks.add_task(email_service.send_registration, user.email, user.username, password)
    return UserSchema.model_validate(user)


@router.post("/login", response_model=UserSchema)
def login(payload: LoginRequest, request: Request, db: Session = Depends(get_db)) -> UserSchema:
    """
    Log in with email and password and start a cookie session.

    Raises:
        AuthenticationError (401): If the credentials are wrong.
    """
    user = UserService(db).authenticate(payload.email, payload.password)
    request.session.clear()
    request.session[SESSION_USER_KEY] = user.id
    logger.info("User %s logged in", user.id)
    return UserSchema.model_validate(user)


@router.post("/logout", status_code=status.HTTP_204_NO_CONTENT)
def logout(request: Request) -> None:
    """End the current session. Succeeds even when nobody is logged in."""
    request.session.clear()


@router.get("/user", response_model=UserSchema)
def current_user(user: User = Depends(get_current_user)) -> UserSchema:
    """Return the logged-in user."""
    return UserSchema.model_validate(user)


@router.post("/user/change-password", status_code=status.HTTP_204_NO_CONTENT)
def change_password(
    payload: ChangePasswordRequest,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> None:
    UserService(db).change_password(user, payload.current_password, payload.new_password)


@router.get("/user/profile", response_model=UserSchema)
def get_profile(user: User = Depends(get_current_user)) -> UserSchema:
    return UserSchema.model_validate(user)


@router.patch("/user/profile", response_model=UserSchema)
def update_profile(
    payload: ProfileUpdate,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> UserSchema:
    """Edit the current user's profile; each changed field is recorded in profile history."""
    return UserSchema.model_validate(UserService(db).update_profile(user, payload))


@router.get("/user/profile/history", response_model=list[ProfileHistorySchema])
def profile_history(
    user: User = Depends(get_current_user), db: Session = Depends(get_db)
) -> list[ProfileHistorySchema]:
    return [ProfileHistorySchema.model_validate(row) for row in UserService(db).profile_history(user.id)]
