"""Database models package."""

from skillmetrics.models.client import Client
from skillmetrics.models.endorsement import Endorsement
from skillmetrics.models.notification import Notification
from skillmetrics.models.pending_skill_update import PendingSkillUpdate
from skillmetrics.models.project import Project, ProjectSkill
from skillmetrics.models.project_resource import ProjectResource, ProjectResourceHistory
from skillmetrics.models.skill import Skill, SkillHistory
from skillmetrics.models.skill_target import SkillTarget, SkillTargetSkill, SkillTargetUser
from skillmetrics.models.skill_template import SkillTemplate
from skillmetrics.models.user import ProfileHistory, User

__all__ = [
    "Client",
    "Endorsement",
    "Notification",
    "PendingSkillUpdate",
    "ProfileHistory",
    "Project",
    "ProjectResource",
    "ProjectResourceHistory",
    "ProjectSkill",
    "Skill",
    "SkillHistory",
    "SkillTarget",
    "SkillTargetSkill",
    "SkillTargetUser",
    "SkillTemplate",
    "User",
]
