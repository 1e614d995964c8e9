"""Authorization predicates shared by the routers and services."""

from skillmetrics.exceptions import PermissionDeniedError
from skillmetrics.models.user import User


def is_owner_or_admin(user: User, owner_id: int) -> bool:
    """Return True when ``user`` owns the resource or is an admin."""
    return user.is_admin or user.id == owner_id


def ensure_owner_or_admin(user: User, owner_id: int) -> None:
    """
    Require that ``user`` owns the resource or is an admin.

    Raises:
        PermissionDeniedError: If neither holds
    """
    if not is_owner_or_admin(user, owner_id):
        raise PermissionDeniedError("Forbidden")
