"""Tests for the pending skill update approval workflow."""

from __future__ import annotations

import threading

import pytest
from conftest import login
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from skillmetrics.database import Base
from skillmetrics.exceptions import AlreadyReviewedError
from skillmetrics.models.notification import Notification
from skillmetrics.models.pending_skill_update import PendingSkillUpdate
from skillmetrics.models.skill import Skill, SkillHistory
from skillmetrics.models.user import User
from skillmetrics.schemas.enums import ApprovalStatus, NotificationType, SkillLevel
from skillmetrics.services.approval_service import ApprovalService

NEW_SKILL = {"name": "Kubernetes", "category": "DevOps", "level": "intermediate", "isUpdate": False}


def submit(client, payload=None):
    response = client.post("/api/skills/pending", json=payload or NEW_SKILL)
    assert response.status_code == 201, response.text
    return response.json()


def make_skill(db, user, name="Python", level=SkillLevel.BEGINNER):
    skill = Skill(user_id=user.id, name=name, category="Programming", level=level, endorsement_count=0)
    db.add(skill)
    db.commit()
    db.refresh(skill)
    return skill


# ---------------------------------------------------------------------------
# Submission
# ---------------------------------------------------------------------------


class TestSubmit:
    """Tests for POST /api/skills/pending."""

    def test_submit_creates_pending_row_only(self, client, db, alice):
        """Submitting stores a pending row and leaves the skill table alone."""
        login(client, alice)
        data = submit(client)

        assert data["status"] == "pending"
        assert data["userId"] == alice.id
        assert data["skillId"] is None
        assert data["isUpdate"] is False
        assert db.query(Skill).count() == 0

    def test_submit_requires_login(self, client):
        """Anonymous submissions are rejected."""
        response = client.post("/api/skills/pending", json=NEW_SKILL)
        assert response.status_code == 401

    def test_submit_rejects_invalid_level(self, client, alice):
        """A level outside the enum is a validation error."""
        login(client, alice)
        response = client.post("/api/skills/pending", json={**NEW_SKILL, "level": "guru"})
        assert response.status_code == 400

    def test_submit_rejects_empty_name(self, client, alice):
        """Name must be non-empty."""
        login(client, alice)
        response = client.post("/api/skills/pending", json={**NEW_SKILL, "name": "  "})
        assert response.status_code == 400

    def test_update_requires_skill_id(self, client, alice):
        """An edit without a skill id is a validation error."""
        login(client, alice)
        response = client.post("/api/skills/pending", json={**NEW_SKILL, "isUpdate": True})
        assert response.status_code == 400

    def test_update_of_someone_elses_skill_is_forbidden(self, client, db, alice, bob):
        """Users may only propose edits to their own skills."""
        skill = make_skill(db, bob)
        login(client, alice)
        response = client.post(
            "/api/skills/pending", json={**NEW_SKILL, "isUpdate": True, "skillId": skill.id}
        )
        assert response.status_code == 403

    def test_user_lists_own_submissions(self, client, alice, bob):
        """GET /user/pending-skills returns only the caller's submissions."""
        login(client, alice)
        submit(client)
        login(client, bob)
        submit(client, {**NEW_SKILL, "name": "Terraform"})

        response = client.get("/api/user/pending-skills")
        assert response.status_code == 200
        assert [item["name"] for item in response.json()] == ["Terraform"]


# ---------------------------------------------------------------------------
# Admin queue
# ---------------------------------------------------------------------------


class TestAdminQueue:
    """Tests for the admin listing endpoints."""

    def test_list_pending_includes_submitter(self, client, admin, alice):
        """The admin queue carries the submitter's email and username."""
        login(client, alice)
        submit(client)
        login(client, admin)

        response = client.get("/api/admin/pending-skills")
        assert response.status_code == 200
        items = response.json()
        assert len(items) == 1
        assert items[0]["userEmail"] == "alice@example.com"
        assert items[0]["username"] == "alice"

    def test_list_pending_requires_admin(self, client, alice):
        """Non-admins cannot see the queue."""
        login(client, alice)
        assert client.get("/api/admin/pending-skills").status_code == 403

    def test_get_single_update_visible_to_owner(self, client, alice, bob):
        """The submitter can read their own update; others cannot."""
        login(client, alice)
        update = submit(client)

        assert client.get(f"/api/admin/pending-skills/{update['id']}").status_code == 200
        login(client, bob)
        assert client.get(f"/api/admin/pending-skills/{update['id']}").status_code == 403


# ---------------------------------------------------------------------------
# Approve / reject
# ---------------------------------------------------------------------------


class TestApprove:
    """Tests for POST /api/admin/pending-skills/{id}/approve."""

    def test_approve_new_skill(self, client, db, admin, alice, email_service):
        """Approving a new-skill submission creates the skill, history and notification."""
        login(client, alice)
        update = submit(client)
        login(client, admin)

        response = client.post(
            f"/api/admin/pending-skills/{update['id']}/approve", json={"notes": "looks good"}
        )
        assert response.status_code == 200, response.text
        skill = response.json()
        assert skill["name"] == "Kubernetes"
        assert skill["level"] == "intermediate"
        assert skill["userId"] == alice.id

        history = db.query(SkillHistory).filter(SkillHistory.skill_id == skill["id"]).all()
        assert len(history) == 1
        assert history[0].previous_level is None
        assert history[0].new_level == SkillLevel.INTERMEDIATE
        assert history[0].change_note == f"Approved by admin (ID: {admin.id}): looks good"

        row = db.get(PendingSkillUpdate, update["id"])
        assert row.status == ApprovalStatus.APPROVED
        assert row.reviewed_by == admin.id
        assert row.review_notes == "looks good"
        assert row.reviewed_at is not None

        notification = db.query(Notification).filter(Notification.user_id == alice.id).one()
        assert notification.type == NotificationType.ACHIEVEMENT
        assert notification.related_skill_id == skill["id"]
        assert notification.content == 'Your skill "Kubernetes" has been approved!'

        email_service.send_skill_reviewed.assert_called_once_with(
            "alice@example.com", "Kubernetes", True, "looks good"
        )

    def test_approve_update_applies_fields(self, client, db, admin, alice):
        """Approving an edit overwrites the skill and records the previous level."""
        skill = make_skill(db, alice, level=SkillLevel.BEGINNER)
        login(client, alice)
        update = submit(
            client,
            {
                "name": "Python",
                "category": "Programming",
                "level": "expert",
                "certification": "PCPP",
                "isUpdate": True,
                "skillId": skill.id,
            },
        )
        login(client, admin)

        response = client.post(f"/api/admin/pending-skills/{update['id']}/approve")
        assert response.status_code == 200, response.text
        assert response.json()["id"] == skill.id

        db.expire_all()
        refreshed = db.get(Skill, skill.id)
        assert refreshed.level == SkillLevel.EXPERT
        assert refreshed.certification == "PCPP"
        assert db.query(Skill).count() == 1

        history = db.query(SkillHistory).one()
        assert history.previous_level == SkillLevel.BEGINNER
        assert history.new_level == SkillLevel.EXPERT
        assert history.change_note == f"Approved by admin (ID: {admin.id})"

    def test_second_approval_conflicts_without_side_effects(self, client, db, admin, alice):
        """An already-approved update cannot be approved again."""
        login(client, alice)
        update = submit(client)
        login(client, admin)

        first = client.post(f"/api/admin/pending-skills/{update['id']}/approve")
        second = client.post(f"/api/admin/pending-skills/{update['id']}/approve")

        assert first.status_code == 200
        assert second.status_code == 409
        assert db.query(Skill).count() == 1
        assert db.query(SkillHistory).count() == 1
        assert db.query(Notification).count() == 1

    def test_reject_after_approve_conflicts(self, client, db, admin, alice):
        """Terminal states never change."""
        login(client, alice)
        update = submit(client)
        login(client, admin)

        client.post(f"/api/admin/pending-skills/{update['id']}/approve")
        response = client.post(f"/api/admin/pending-skills/{update['id']}/reject")

        assert response.status_code == 409
        assert db.get(PendingSkillUpdate, update["id"]).status == ApprovalStatus.APPROVED

    def test_approve_unknown_update(self, client, admin):
        """Approving a missing update is a 404."""
        login(client, admin)
        assert client.post("/api/admin/pending-skills/999/approve").status_code == 404

    def test_approve_with_missing_target_skill_rolls_back(self, client, db, admin, alice):
        """If the edited skill is gone, nothing is written and the update stays pending."""
        update = PendingSkillUpdate(
            user_id=alice.id,
            skill_id=12345,
            name="Go",
            category="Programming",
            level=SkillLevel.EXPERT,
            is_update=True,
        )
        db.add(update)
        db.commit()
        update_id = update.id
        login(client, admin)

        response = client.post(f"/api/admin/pending-skills/{update_id}/approve")

        assert response.status_code == 404
        db.expire_all()
        assert db.get(PendingSkillUpdate, update_id).status == ApprovalStatus.PENDING
        assert db.query(SkillHistory).count() == 0
        assert db.query(Notification).count() == 0

    def test_approve_requires_admin(self, client, alice):
        """Regular users cannot approve."""
        login(client, alice)
        update = submit(client)
        response = client.post(f"/api/admin/pending-skills/{update['id']}/approve")
        assert response.status_code == 403


class TestReject:
    """Tests for POST /api/admin/pending-skills/{id}/reject."""

    def test_reject_touches_no_skill(self, client, db, admin, alice, email_service):
        """Rejection records the decision and notifies, without writing skills."""
        skill = make_skill(db, alice)
        login(client, alice)
        update = submit(
            client,
            {"name": "Python", "category": "Programming", "level": "expert", "isUpdate": True, "skillId": skill.id},
        )
        login(client, admin)

        response = client.post(
            f"/api/admin/pending-skills/{update['id']}/reject", json={"notes": "Need evidence"}
        )
        assert response.status_code == 200, response.text
        assert response.json()["status"] == "rejected"

        db.expire_all()
        assert db.get(Skill, skill.id).level == SkillLevel.BEGINNER
        assert db.query(SkillHistory).count() == 0

        notification = db.query(Notification).filter(Notification.user_id == alice.id).one()
        assert notification.content == 'Your skill "Python" was not approved. Need evidence'
        email_service.send_skill_reviewed.assert_called_once_with(
            "alice@example.com", "Python", False, "Need evidence"
        )

    def test_reject_default_reason(self, client, db, admin, alice):
        """Without notes the notification uses a default reason."""
        login(client, alice)
        update = submit(client)
        login(client, admin)

        client.post(f"/api/admin/pending-skills/{update['id']}/reject")

        notification = db.query(Notification).one()
        assert notification.content == 'Your skill "Kubernetes" was not approved. No reason provided.'

    def test_double_reject_conflicts(self, client, db, admin, alice):
        """A second rejection is refused and adds no notification."""
        login(client, alice)
        update = submit(client)
        login(client, admin)

        assert client.post(f"/api/admin/pending-skills/{update['id']}/reject").status_code == 200
        assert client.post(f"/api/admin/pending-skills/{update['id']}/reject").status_code == 409
        assert db.query(Notification).count() == 1


# ---------------------------------------------------------------------------
# Concurrent review
# ---------------------------------------------------------------------------

REVIEWERS = 8


@pytest.fixture
def file_sessions(tmp_path):
    """Session factory on a file-backed SQLite database shared across threads."""
    file_engine = create_engine(
        f"sqlite:///{tmp_path / 'approvals.db'}",
        connect_args={"check_same_thread": False, "timeout": 30},
    )
    Base.metadata.create_all(bind=file_engine)
    yield sessionmaker(autocommit=False, autoflush=False, bind=file_engine)
    file_engine.dispose()


class TestConcurrentReview:
    """Simultaneous reviews of one pending update from separate sessions."""

    def test_parallel_approvals_apply_once(self, file_sessions):
        """Exactly one reviewer wins; the rest conflict and write nothing."""
        with file_sessions() as session:
            reviewer = User(email="admin@example.com", username="admin", password="x", is_admin=True)
            submitter = User(email="alice@example.com", username="alice", password="x")
            session.add_all([reviewer, submitter])
            session.flush()
            update = PendingSkillUpdate(
                user_id=submitter.id,
                name="Kubernetes",
                category="DevOps",
                level=SkillLevel.INTERMEDIATE,
                is_update=False,
                status=ApprovalStatus.PENDING,
            )
            session.add(update)
            session.commit()
            update_id, reviewer_id = update.id, reviewer.id

        barrier = threading.Barrier(REVIEWERS, timeout=30)
        outcomes = []
        lock = threading.Lock()

        def review():
            session = file_sessions()
            try:
                barrier.wait()
                ApprovalService(session).approve(update_id, reviewer_id)
                outcome = "approved"
            except AlreadyReviewedError:
                outcome = "conflict"
            except Exception as exc:
                outcome = repr(exc)
            finally:
                session.close()
            with lock:
                outcomes.append(outcome)

        threads = [threading.Thread(target=review) for _ in range(REVIEWERS)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join(timeout=60)

        assert sorted(outcomes) == ["approved"] + ["conflict"] * (REVIEWERS - 1)
        with file_sessions() as session:
            assert session.query(Skill).count() == 1
            assert session.query(SkillHistory).count() == 1
            assert session.query(Notification).count() == 1
            assert session.get(PendingSkillUpdate, update_id).status == ApprovalStatus.APPROVED
