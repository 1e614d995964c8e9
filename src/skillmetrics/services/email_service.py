"""Outbound email service for best-effort staffing and review notices."""

from __future__ import annotations

import logging
import smtplib
from datetime import datetime
from email.message import EmailMessage

from skillmetrics.config import EmailConfig

logger = logging.getLogger(__name__)

DATE_FORMAT = "%b %d, %Y"


def _format_date(value: datetime | None) -> str:
    """Render an optional date for an email body."""
    return value.strftime(DATE_FORMAT) if value else "Not specified"


class EmailService:
    """
    Service for sending notification emails over SMTP.

    Every public ``send_*`` method is best-effort: delivery failures are
    logged and reported through the boolean return value, never raised.
    Callers queue these methods as post-commit background tasks so that a
    failed email can never undo the write that triggered it.
    """

    def __init__(self, config: EmailConfig | None = None) -> None:
        """
        Initialize the email service.

        Args:
            config: Email configuration (uses defaults if not provided)
        """
        self.config = config or EmailConfig()

    def _deliver(self, message: EmailMessage) -> None:
        """
        Hand a message to the configured SMTP server.

        Raises:
            smtplib.SMTPException: If the server rejects the message
            OSError: If the server cannot be reached
        """
        with smtplib.SMTP(
            self.config.host, self.config.port, timeout=self.config.timeout_seconds
        ) as smtp:
            if self.config.use_tls:
                smtp.starttls()
            password = self.config.get_password()
            if self.config.username and password:
                smtp.login(self.config.username, password)
            smtp.send_message(message)

    def send(self, recipients: list[str | None], subject: str, body: str) -> bool:
        """
        Send a plain-text email.

        Args:
            recipients: Addresses; empty and None entries are dropped
            subject: Subject line
            body: Plain-text body

        Returns:
            True if the message was handed to the SMTP server
        """
        to = [address for address in recipients if address]
        if not to:
            logger.info("No recipients for email %r; skipping", subject)
            return False
        if not self.config.enabled:
            logger.info("Email disabled; not sending %r to %s", subject, ", ".join(to))
            return False

        message = EmailMessage()
        message["From"] = self.config.from_address
        message["To"] = ", ".join(to)
        message["Subject"] = subject
        message.set_content(body)

        try:
            self._deliver(message)
        except Exception:
            logger.exception("Failed to send email %r to %s", subject, ", ".join(to))
            return False

        logger.info("Sent email %r to %s", subject, ", ".join(to))
        return True

    def staffing_recipients(
        self, hr_email: str | None, finance_email: str | None
    ) -> list[str | None]:
        """Project-specific HR and finance addresses, falling back to the configured defaults."""
        return [
            hr_email or self.config.default_hr_email,
            finance_email or self.config.default_finance_email,
        ]

    def send_registration(self, email: str, username: str, password: str) -> bool:
        """Send a new account's generated credentials."""
        body = (
            f"Hello {username},\n\n"
            "Your account has been created successfully.\n"
            "Please use the following credentials to log in:\n\n"
            f"Email: {email}\n"
            f"Password: {password}\n\n"
            "Please change your password after logging in.\n\n"
            "Best regards,\n"
            "The Skill Metrics Team\n"
        )
        return self.send([email], "Your Skill Metrics Account", body)

    def send_skill_reviewed(
        self, email: str, skill_name: str, approved: bool, notes: str | None = None
    ) -> bool:
        """Tell a submitter the outcome of their pending skill update."""
        if approved:
            subject = f"Skill approved: {skill_name}"
            body = f'Your skill "{skill_name}" has been approved.\n'
        else:
            subject = f"Skill not approved: {skill_name}"
            body = f'Your skill "{skill_name}" was not approved.\n'
        if notes:
            body += f"\nReviewer notes: {notes}\n"
        return self.send([email], subject, body)

    def send_project_created(
        self,
        project_name: str,
        client_name: str | None,
        description: str | None,
        start_date: datetime | None,
        end_date: datetime | None,
        lead_name: str | None,
        hr_email: str | None = None,
        finance_email: str | None = None,
    ) -> bool:
        """Announce a new project to HR and finance."""
        body = (
            "A new project has been created.\n\n"
            f"Project: {project_name}\n"
            f"Client: {client_name or 'Not specified'}\n"
            f"Description: {description or 'Not specified'}\n"
            f"Start date: {_format_date(start_date)}\n"
            f"End date: {_format_date(end_date)}\n"
            f"Project lead: {lead_name or 'Not assigned'}\n"
        )
        return self.send(
            self.staffing_recipients(hr_email, finance_email),
            f"New project created: {project_name}",
            body,
        )

    def send_project_updated(
        self,
        project_name: str,
        changes: list[tuple[str, str | None, str | None]],
        performer_name: str | None = None,
        hr_email: str | None = None,
        finance_email: str | None = None,
    ) -> bool:
        """
        Announce project field changes to HR and finance.

        Args:
            project_name: Project name before the update
            changes: (field label, old value, new value) tuples
            performer_name: Who made the change, if known
        """
        lines = [f"Project {project_name} has been updated"]
        if performer_name:
            lines[0] += f" by {performer_name}"
        lines[0] += ".\n"
        for label, old, new in changes:
            lines.append(f"{label}: {old or 'None'} -> {new or 'None'}")
        return self.send(
            self.staffing_recipients(hr_email, finance_email),
            f"Project updated: {project_name}",
            "\n".join(lines) + "\n",
        )

    def send_resource_added(
        self,
        project_name: str,
        username: str,
        user_email: str,
        role: str | None,
        allocation: int,
        start_date: datetime | None,
        end_date: datetime | None,
        performer_name: str | None = None,
        hr_email: str | None = None,
        finance_email: str | None = None,
    ) -> bool:
        """Announce that a user was staffed onto a project."""
        body = (
            f"{username} ({user_email}) has been added to project {project_name}.\n\n"
            f"Role: {role or 'Team Member'}\n"
            f"Allocation: {allocation}%\n"
            f"Start date: {_format_date(start_date)}\n"
            f"End date: {_format_date(end_date)}\n"
        )
        if performer_name:
            body += f"Added by: {performer_name}\n"
        return self.send(
            self.staffing_recipients(hr_email, finance_email),
            f"Resource added to {project_name}",
            body,
        )

    def send_resource_removed(
        self,
        project_name: str,
        username: str,
        user_email: str,
        role: str | None,
        allocation: int | None,
        performer_name: str | None = None,
        hr_email: str | None = None,
        finance_email: str | None = None,
    ) -> bool:
        """Announce that a user was removed from a project."""
        body = (
            f"{username} ({user_email}) has been removed from project {project_name}.\n\n"
            f"Role: {role or 'Team Member'}\n"
            f"Allocation: {allocation if allocation is not None else 'Unknown'}%\n"
        )
        if performer_name:
            body += f"Removed by: {performer_name}\n"
        return self.send(
            self.staffing_recipients(hr_email, finance_email),
            f"Resource removed from {project_name}",
            body,
        )
