"""Enumerations shared by the database models and the API schemas."""

from enum import Enum


class SkillLevel(str, Enum):
    """Skill proficiency level enumeration."""

    BEGINNER = "beginner"
    INTERMEDIATE = "intermediate"
    EXPERT = "expert"

    @property
    def rank(self) -> int:
        """Ordinal position, used to compare levels."""
        return _LEVEL_RANKS[self]


_LEVEL_RANKS = {
    SkillLevel.BEGINNER: 1,
    SkillLevel.INTERMEDIATE: 2,
    SkillLevel.EXPERT: 3,
}


class ApprovalStatus(str, Enum):
    """Pending skill update status enumeration."""

    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


class NotificationType(str, Enum):
    """Notification type enumeration."""

    ENDORSEMENT = "endorsement"
    LEVEL_UP = "level_up"
    ACHIEVEMENT = "achievement"


class ResourceAction(str, Enum):
    """Project resource history action enumeration."""

    ADDED = "added"
    REMOVED = "removed"
    ROLE_CHANGED = "role_changed"
    ALLOCATION_CHANGED = "allocation_changed"
