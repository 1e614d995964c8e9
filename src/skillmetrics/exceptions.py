"""
Custom exceptions for the Skill Metrics backend.

Services raise these; the application maps each one to an HTTP status
code through a single exception handler registered in ``main.py``.
"""


class SkillMetricsError(Exception):
    """Base exception for all Skill Metrics errors."""

    status_code = 500


class InvalidInputError(SkillMetricsError):
    """Raised when request data fails a business validation rule."""

    status_code = 400


class AuthenticationError(SkillMetricsError):
    """Raised when a request has no valid session or bad credentials."""

    status_code = 401


class PermissionDeniedError(SkillMetricsError):
    """Raised when the current user may not act on a resource."""

    status_code = 403


class NotFoundError(SkillMetricsError):
    """Raised when a referenced record does not exist."""

    status_code = 404

    def __init__(self, entity: str, entity_id: int | str | None = None):
        self.entity = entity
        self.entity_id = entity_id
        msg = f"{entity} not found"
        if entity_id is not None:
            msg = f"{entity} {entity_id} not found"
        super().__init__(msg)


class AlreadyReviewedError(SkillMetricsError):
    """Raised when approving or rejecting a pending update that is no longer pending."""

    status_code = 409

    def __init__(self, update_id: int, status: str):
        self.update_id = update_id
        self.status = status
        super().__init__(f"Pending skill update {update_id} has already been {status}")
