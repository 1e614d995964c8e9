"""Admin user management API router."""

from __future__ import annotations

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from skillmetrics.database import get_db
from skillmetrics.dependencies import require_admin
from skillmetrics.exceptions import InvalidInputError
from skillmetrics.models.user import User
from skillmetrics.schemas.user import AdminFlagUpdate
from skillmetrics.schemas.user import User as UserSchema
from skillmetrics.services.user_service import UserService

router = APIRouter(prefix="/admin/users")


@router.get("", response_model=list[UserSchema])
def list_users(_: User = Depends(require_admin), db: Session = Depends(get_db)) -> list[UserSchema]:
    return [UserSchema.model_validate(user) for user in UserService(db).list_all()]


@router.patch("/{user_id}/admin", response_model=UserSchema)
def set_admin_flag(
    user_id: int,
    payload: AdminFlagUpdate,
    admin: User = Depends(require_admin),
    db: Session = Depends(get_db),
) -> UserSchema:
    """
    Grant or revoke admin rights.

    Raises:
        InvalidInputError (400): If an admin tries to revoke their own rights.
    """
    if user_id == admin.id and not payload.is_admin:
        raise InvalidInputError("You cannot revoke your own admin rights")
    return UserSchema.model_validate(UserService(db).set_admin(user_id, payload.is_admin))


@router.delete("/{user_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_user(
    user_id: int, admin: User = Depends(require_admin), db: Session = Depends(get_db)
) -> None:
    """
    Delete a user and everything they own.

    Raises:
        InvalidInputError (400): If an admin tries to delete their own account.
        NotFoundError (404): If the user does not exist.
    """
    if user_id == admin.id:
        raise InvalidInputError("You cannot delete your own account")
    UserService(db).delete_user(user_id)
