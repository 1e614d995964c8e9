"""Integration tests for registration, sessions, profiles and admin user management."""

from __future__ import annotations

from conftest import DEFAULT_PASSWORD, login

from skillmetrics.config import settings
from skillmetrics.models.endorsement import Endorsement
from skillmetrics.models.notification import Notification
from skillmetrics.models.project import Project
from skillmetrics.models.project_resource import ProjectResource
from skillmetrics.models.skill import Skill, SkillHistory
from skillmetrics.models.user import ProfileHistory, User


class TestRegistration:
    """Tests for POST /api/register."""

    def test_register_emails_generated_password(self, client, db, email_service):
        """The generated password is mailed and works for login."""
        response = client.post("/api/register", json={"email": "Carol@Example.com"})

        assert response.status_code == 201, response.text
        data = response.json()
        assert data["email"] == "carol@example.com"
        assert data["username"] == "carol"
        assert data["isAdmin"] is False
        assert "password" not in data

        email_service.send_registration.assert_called_once()
        email, username, password = email_service.send_registration.call_args.args
        assert (email, username) == ("carol@example.com", "carol")
        assert db.query(User).one().password != password

        login_response = client.post("/api/login", json={"email": email, "password": password})
        assert login_response.status_code == 200

    def test_register_duplicate_email(self, client, alice):
        response = client.post("/api/register", json={"email": "alice@example.com"})
        assert response.status_code == 400

    def test_register_invalid_email(self, client):
        assert client.post("/api/register", json={"email": "not-an-email"}).status_code == 400

    def test_register_enforces_allowed_domain(self, client, monkeypatch):
        """Only the configured domain may register when one is set."""
        monkeypatch.setattr(settings, "allowed_email_domain", "example.com")

        assert client.post("/api/register", json={"email": "x@other.org"}).status_code == 400
        assert client.post("/api/register", json={"email": "x@example.com"}).status_code == 201


class TestSession:
    """Tests for login, logout and the current user."""

    def test_login_sets_session(self, client, alice):
        login(client, alice)
        response = client.get("/api/user")
        assert response.status_code == 200
        assert response.json()["email"] == "alice@example.com"

    def test_wrong_password(self, client, alice):
        response = client.post("/api/login", json={"email": alice.email, "password": "nope"})
        assert response.status_code == 401

    def test_unknown_email(self, client):
        response = client.post("/api/login", json={"email": "ghost@example.com", "password": "x"})
        assert response.status_code == 401

    def test_logout_clears_session(self, client, alice):
        login(client, alice)
        assert client.post("/api/logout").status_code == 204
        assert client.get("/api/user").status_code == 401

    def test_change_password(self, client, alice):
        login(client, alice)
        response = client.post(
            "/api/user/change-password",
            json={"currentPassword": DEFAULT_PASSWORD, "newPassword": "brand-new"},
        )
        assert response.status_code == 204

        client.post("/api/logout")
        login(client, alice, password="brand-new")

    def test_change_password_wrong_current(self, client, alice):
        login(client, alice)
        response = client.post(
            "/api/user/change-password",
            json={"currentPassword": "wrong", "newPassword": "brand-new"},
        )
        assert response.status_code == 400


class TestProfile:
    """Tests for /api/user/profile."""

    def test_profile_update_records_each_changed_field(self, client, db, alice):
        login(client, alice)
        response = client.patch(
            "/api/user/profile", json={"firstName": "Alice", "location": "Berlin", "role": ""}
        )

        assert response.status_code == 200, response.text
        assert response.json()["firstName"] == "Alice"
        rows = db.query(ProfileHistory).order_by(ProfileHistory.changed_field).all()
        assert [(r.changed_field, r.previous_value, r.new_value) for r in rows] == [
            ("first_name", "", "Alice"),
            ("location", "", "Berlin"),
        ]

        history = client.get("/api/user/profile/history").json()
        assert {h["changedField"] for h in history} == {"first_name", "location"}

    def test_profile_rejects_unknown_fields(self, client, alice):
        """Profile edits cannot touch the admin flag."""
        login(client, alice)
        assert client.patch("/api/user/profile", json={"isAdmin": True}).status_code == 400

    def test_profile_rejects_null_username(self, client, alice):
        login(client, alice)
        assert client.patch("/api/user/profile", json={"username": None}).status_code == 400


class TestAdminUsers:
    """Tests for /api/admin/users."""

    def test_list_users_requires_admin(self, client, admin, alice):
        login(client, alice)
        assert client.get("/api/admin/users").status_code == 403
        login(client, admin)
        assert len(client.get("/api/admin/users").json()) == 2

    def test_toggle_admin_flag(self, client, admin, alice):
        login(client, admin)
        response = client.patch(f"/api/admin/users/{alice.id}/admin", json={"isAdmin": True})
        assert response.status_code == 200
        assert response.json()["isAdmin"] is True

    def test_admin_flag_must_be_boolean(self, client, admin, alice):
        """Strings like "yes" are not accepted for the admin flag."""
        login(client, admin)
        response = client.patch(f"/api/admin/users/{alice.id}/admin", json={"isAdmin": "yes"})
        assert response.status_code == 400

    def test_admin_cannot_delete_self(self, client, admin):
        login(client, admin)
        assert client.delete(f"/api/admin/users/{admin.id}").status_code == 400

    def test_delete_user_cascades(self, client, db, admin, alice, bob):
        """Deleting a user leaves no rows referencing them."""
        login(client, alice)
        skill = client.post("/api/skills", json={"name": "Go", "category": "Lang", "level": "beginner"}).json()
        login(client, bob)
        bob_skill = client.post("/api/skills", json={"name": "C", "category": "Lang", "level": "expert"}).json()
        client.post(f"/api/skills/{skill['id']}/endorse", json={"comment": "ok"})
        login(client, alice)
        client.post(f"/api/skills/{bob_skill['id']}/endorse", json={"comment": "ok"})
        client.patch("/api/user/profile", json={"location": "Paris"})

        project = Project(name="Apollo", lead_id=alice.id)
        db.add(project)
        db.commit()
        db.add(ProjectResource(project_id=project.id, user_id=alice.id, role="Dev", allocation=50))
        db.commit()
        alice_id = alice.id

        login(client, admin)
        response = client.delete(f"/api/admin/users/{alice_id}")

        assert response.status_code == 204
        db.expire_all()
        assert db.get(User, alice_id) is None
        assert db.query(Skill).filter(Skill.user_id == alice_id).count() == 0
        assert db.query(SkillHistory).filter(SkillHistory.user_id == alice_id).count() == 0
        assert db.query(ProfileHistory).filter(ProfileHistory.user_id == alice_id).count() == 0
        assert db.query(Notification).filter(Notification.user_id == alice_id).count() == 0
        assert db.query(Endorsement).count() == 0
        assert db.query(ProjectResource).count() == 0
        assert db.get(Project, project.id).lead_id is None
        assert db.query(Skill).filter(Skill.user_id == bob.id).count() == 1

        bob_notification = db.query(Notification).filter(Notification.user_id == bob.id).one()
        assert bob_notification.related_user_id is None
        assert db.query(Notification).filter(Notification.related_user_id == alice_id).count() == 0

    def test_deleted_user_session_is_rejected(self, client, db, alice):
        """A session pointing at a deleted user is no longer authenticated."""
        login(client, alice)
        db.delete(alice)
        db.commit()
        assert client.get("/api/user").status_code == 401
