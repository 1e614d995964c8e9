"""User directory service: registration, credentials, profiles and admin management."""

from __future__ import annotations

import logging

from sqlalchemy import func, or_
from sqlalchemy.orm import Session

from skillmetrics.auth import generate_password, hash_password, verify_password
from skillmetrics.exceptions import AuthenticationError, InvalidInputError, NotFoundError
from skillmetrics.models.endorsement import Endorsement
from skillmetrics.models.notification import Notification
from skillmetrics.models.pending_skill_update import PendingSkillUpdate
from skillmetrics.models.project import Project
from skillmetrics.models.project_resource import ProjectResource, ProjectResourceHistory
from skillmetrics.models.skill import Skill, SkillHistory
from skillmetrics.models.skill_target import SkillTargetUser
from skillmetrics.models.user import ProfileHistory, User
from skillmetrics.schemas.user import ProfileUpdate
from skillmetrics.services.skill_service import SkillService

logger = logging.getLogger(__name__)


class UserService:
    """
    Service for user accounts.

    Handles:
    - Email-only registration with a generated password
    - Credential checks and password changes
    - Profile edits with a per-field audit trail
    - Admin listing, admin-flag changes and cascading deletion
    """

    def __init__(self, db: Session) -> None:
        """
        Initialize the user service.

        Args:
            db: SQLAlchemy database session
        """
        self.db = db

    def get(self, user_id: int) -> User:
        """
        Fetch a user by ID.

        Raises:
            NotFoundError: If the user does not exist
        """
        user = self.db.get(User, user_id)
        if user is None:
            raise NotFoundError("User", user_id)
        return user

    def get_by_email(self, email: str) -> User | None:
        """Look up a user by email, case-insensitively."""
        return self.db.query(User).filter(func.lower(User.email) == email.strip().lower()).first()

    def list_all(self) -> list[User]:
        """List all users ordered by email."""
        return self.db.query(User).order_by(User.email).all()

    def create_user(
        self, email: str, password: str, username: str | None = None, is_admin: bool = False
    ) -> User:
        """
        Create an account with a known password.

        Args:
            email: Login email (stored lower-cased)
            password: Plain text password, hashed before storage
            username: Display name (defaults to the email's local part)
            is_admin: Whether the account has admin rights

        Raises:
            InvalidInputError: If the email is already registered
        """
        email = email.strip().lower()
        if self.get_by_email(email) is not None:
            raise InvalidInputError("Email already registered")

        user = User(
            email=email,
            username=username or email.split("@")[0],
            password=hash_password(password),
            is_admin=is_admin,
        )
        self.db.add(user)
        self.db.commit()
        self.db.refresh(user)
        logger.info("Created user %s (%s, admin=%s)", user.id, user.email, user.is_admin)
        return user

    def register(self, email: str, allowed_domain: str | None = None) -> tuple[User, str]:
        """
        Register a new account from an email address alone.

        Args:
            email: Address to register
            allowed_domain: If set, only addresses in this domain may register

        Returns:
            (new user, generated plain text password) so the caller can mail it

        Raises:
            InvalidInputError: If the domain is not allowed or the email is taken
        """
        domain = email.rsplit("@", 1)[-1].lower()
        if allowed_domain and domain != allowed_domain:
            raise InvalidInputError(f"Only @{allowed_domain} email addresses can register")

        password = generate_password()
        user = self.create_user(email, password)
        return user, password

    def authenticate(self, email: str, password: str) -> User:
        """
        Check login credentials.

        Raises:
            AuthenticationError: If the email is unknown or the password is wrong
        """
        user = self.get_by_email(email)
        if user is None or not verify_password(password, user.password):
            logger.info("Failed login for %s", email)
            raise AuthenticationError("Invalid email or password")
        return user

    def change_password(self, user: User, current_password: str, new_password: str) -> None:
        """
        Replace a user's password after checking the current one.

        Raises:
            InvalidInputError: If the current password is wrong
        """
        if not verify_password(current_password, user.password):
            raise InvalidInputError("Current password is incorrect")
        user.password = hash_password(new_password)
        self.db.commit()
        logger.info("User %s changed their password", user.id)

    def update_profile(self, user: User, data: ProfileUpdate) -> User:
        """
        Apply profile edits, writing one ProfileHistory row per changed field.

        Fields sent with their current value are not recorded.
        """
        try:
            for field, value in data.changes().items():
                new_value = value if value is not None else ""
                previous_value = getattr(user, field)
                if previous_value == new_value:
                    continue
                self.db.add(
                    ProfileHistory(
                        user_id=user.id,
                        changed_field=field,
                        previous_value=previous_value,
                        new_value=new_value,
                    )
                )
                setattr(user, field, new_value)
            self.db.commit()
        except Exception:
            self.db.rollback()
            logger.exception("Failed to update profile of user %s", user.id)
            raise

        self.db.refresh(user)
        return user

    def profile_history(self, user_id: int) -> list[ProfileHistory]:
        """A user's profile changes, newest first."""
        return (
            self.db.query(ProfileHistory)
            .filter(ProfileHistory.user_id == user_id)
            .order_by(ProfileHistory.created_at.desc(), ProfileHistory.id.desc())
            .all()
        )

    def set_admin(self, user_id: int, is_admin: bool) -> User:
        """Grant or revoke admin rights."""
        user = self.get(user_id)
        user.is_admin = is_admin
        self.db.commit()
        self.db.refresh(user)
        logger.info("User %s admin flag set to %s", user_id, is_admin)
        return user

    def delete_user(self, user_id: int) -> None:
        """
        Delete a user and everything that references them.

        Removes owned skills (with their history, endorsements, pending updates
        and project/target links), profile history, notifications, endorsements
        given or received, pending submissions, target memberships, project
        assignments and resource history. Projects the user led, history rows
        they performed and other users' notifications about them keep their
        rows with the reference cleared.

        Raises:
            NotFoundError: If the user does not exist
        """
        user = self.get(user_id)
        try:
            skill_ids = [row.id for row in self.db.query(Skill.id).filter(Skill.user_id == user_id)]
            SkillService(self.db).delete_dependents(skill_ids)
            self.db.query(Skill).filter(Skill.user_id == user_id).delete(synchronize_session=False)

            for model, condition in (
                (SkillHistory, SkillHistory.user_id == user_id),
                (ProfileHistory, ProfileHistory.user_id == user_id),
                (Notification, Notification.user_id == user_id),
                (
                    Endorsement,
                    or_(Endorsement.endorser_id == user_id, Endorsement.endorsee_id == user_id),
                ),
                (PendingSkillUpdate, PendingSkillUpdate.user_id == user_id),
                (SkillTargetUser, SkillTargetUser.user_id == user_id),
                (ProjectResource, ProjectResource.user_id == user_id),
                (ProjectResourceHistory, ProjectResourceHistory.user_id == user_id),
            ):
                self.db.query(model).filter(condition).delete(synchronize_session=False)

            self.db.query(PendingSkillUpdate).filter(PendingSkillUpdate.reviewed_by == user_id).update(
                {PendingSkillUpdate.reviewed_by: None}, synchronize_session=False
            )
            self.db.query(ProjectResourceHistory).filter(
                ProjectResourceHistory.performed_by_id == user_id
            ).update({ProjectResourceHistory.performed_by_id: None}, synchronize_session=False)
            self.db.query(Notification).filter(Notification.related_user_id == user_id).update(
                {Notification.related_user_id: None}, synchronize_session=False
            )
            self.db.query(Project).filter(Project.lead_id == user_id).update(
                {Project.lead_id: None}, synchronize_session=False
            )
            self.db.query(Project).filter(Project.delivery_lead_id == user_id).update(
                {Project.delivery_lead_id: None}, synchronize_session=False
            )

            self.db.delete(user)
            self.db.commit()
        except Exception:
            self.db.rollback()
            logger.exception("Failed to delete user %s", user_id)
            raise
        logger.info("Deleted user %s and %d owned skills", user_id, len(skill_ids))
