"""Tests for the SMTP email service."""

import logging
import smtplib
from datetime import datetime
from unittest.mock import patch

import pytest

from skillmetrics.config import EmailConfig
from skillmetrics.services.email_service import EmailService


@pytest.fixture
def enabled_config():
    return EmailConfig(
        enabled=True,
        host="smtp.test",
        port=2525,
        username="mailer",
        password_env="TEST_SMTP_PASS",
        default_hr_email="hr@default.test",
        default_finance_email="finance@default.test",
    )


@pytest.fixture
def smtp():
    """Patched SMTP class; ``smtp.return_value.__enter__.return_value`` is the connection."""
    with patch("skillmetrics.services.email_service.smtplib.SMTP") as smtp_class:
        yield smtp_class


def sent_message(smtp):
    return smtp.return_value.__enter__.return_value.send_message.call_args.args[0]


class TestSend:
    """Tests for EmailService.send."""

    def test_disabled_sends_nothing(self, smtp):
        service = EmailService(EmailConfig(enabled=False))
        assert service.send(["a@test.com"], "Hi", "Body") is False
        smtp.assert_not_called()

    def test_no_recipients(self, smtp, enabled_config):
        service = EmailService(enabled_config)
        assert service.send([None, ""], "Hi", "Body") is False
        smtp.assert_not_called()

    def test_delivers_with_tls_and_login(self, smtp, enabled_config, monkeypatch):
        monkeypatch.setenv("TEST_SMTP_PASS", "pw")
        service = EmailService(enabled_config)

        assert service.send(["a@test.com", None, "b@test.com"], "Hi", "Body") is True

        smtp.assert_called_once_with("smtp.test", 2525, timeout=10)
        connection = smtp.return_value.__enter__.return_value
        connection.starttls.assert_called_once()
        connection.login.assert_called_once_with("mailer", "pw")
        message = sent_message(smtp)
        assert message["To"] == "a@test.com, b@test.com"
        assert message["Subject"] == "Hi"

    def test_skips_login_without_password(self, smtp, enabled_config, monkeypatch):
        monkeypatch.delenv("TEST_SMTP_PASS", raising=False)
        EmailService(enabled_config).send(["a@test.com"], "Hi", "Body")
        smtp.return_value.__enter__.return_value.login.assert_not_called()

    def test_failure_is_logged_not_raised(self, smtp, enabled_config, caplog):
        """SMTP errors turn into a False return and an error log."""
        smtp.return_value.__enter__.return_value.send_message.side_effect = smtplib.SMTPException("boom")

        with caplog.at_level(logging.ERROR, logger="skillmetrics.services.email_service"):
            assert EmailService(enabled_config).send(["a@test.com"], "Hi", "Body") is False

        assert "Failed to send email" in caplog.text

    def test_connection_error_is_logged_not_raised(self, smtp, enabled_config):
        smtp.side_effect = ConnectionRefusedError()
        assert EmailService(enabled_config).send(["a@test.com"], "Hi", "Body") is False


class TestMessages:
    """Tests for the individual notification emails."""

    def test_staffing_recipients_fall_back_to_defaults(self, enabled_config):
        service = EmailService(enabled_config)
        assert service.staffing_recipients("hr@project.test", None) == [
            "hr@project.test",
            "finance@default.test",
        ]

    def test_registration_contains_credentials(self, smtp, enabled_config):
        EmailService(enabled_config).send_registration("carol@test.com", "carol", "Pa55word!")

        message = sent_message(smtp)
        assert message["To"] == "carol@test.com"
        assert "Pa55word!" in message.get_content()

    def test_resource_added(self, smtp, enabled_config):
        EmailService(enabled_config).send_resource_added(
            "Apollo", "alice", "alice@test.com", None, 50, datetime(2024, 3, 1), None, "Ada Admin"
        )

        message = sent_message(smtp)
        body = message.get_content()
        assert message["To"] == "hr@default.test, finance@default.test"
        assert "Role: Team Member" in body
        assert "Allocation: 50%" in body
        assert "Start date: Mar 01, 2024" in body
        assert "End date: Not specified" in body
        assert "Added by: Ada Admin" in body

    def test_project_updated_lists_changes(self, smtp, enabled_config):
        EmailService(enabled_config).send_project_updated(
            "Apollo", [("Status", "active", "completed"), ("Location", None, "Berlin")], "Ada Admin"
        )

        body = sent_message(smtp).get_content()
        assert body.startswith("Project Apollo has been updated by Ada Admin.")
        assert "Status: active -> completed" in body
        assert "Location: None -> Berlin" in body

    def test_skill_rejected_includes_notes(self, smtp, enabled_config):
        EmailService(enabled_config).send_skill_reviewed("a@test.com", "Go", approved=False, notes="Need proof")

        message = sent_message(smtp)
        assert message["Subject"] == "Skill not approved: Go"
        assert "Reviewer notes: Need proof" in message.get_content()
