"""Services package."""

from skillmetrics.services.analytics_service import AnalyticsService
from skillmetrics.services.approval_service import ApprovalService
from skillmetrics.services.client_service import ClientService
from skillmetrics.services.email_service import EmailService
from skillmetrics.services.endorsement_service import EndorsementService
from skillmetrics.services.notification_service import NotificationService
from skillmetrics.services.project_service import ProjectService
from skillmetrics.services.skill_service import SkillService
from skillmetrics.services.taxonomy_service import TaxonomyService
from skillmetrics.services.user_service import UserService

__all__ = [
    "AnalyticsService",
    "ApprovalService",
    "ClientService",
    "EmailService",
    "EndorsementService",
    "NotificationService",
    "ProjectService",
    "SkillService",
    "TaxonomyService",
    "UserService",
]
