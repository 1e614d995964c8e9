"""Tests for the admin analytics reports."""

from __future__ import annotations

from datetime import datetime, timedelta

import pytest
from conftest import login

from skillmetrics.models.pending_skill_update import PendingSkillUpdate
from skillmetrics.models.project import Project, ProjectSkill
from skillmetrics.models.project_resource import ProjectResource
from skillmetrics.models.skill import Skill
from skillmetrics.models.skill_target import SkillTarget, SkillTargetSkill, SkillTargetUser
from skillmetrics.schemas.enums import ApprovalStatus, SkillLevel
from skillmetrics.services.analytics_service import AnalyticsService, certification_status


def add_skill(db, user, name, level, **fields):
    skill = Skill(user_id=user.id, name=name, category=fields.pop("category", "Tech"), level=level,
                  endorsement_count=0, **fields)
    db.add(skill)
    db.commit()
    return skill


# ---------------------------------------------------------------------------
# certification_status
# ---------------------------------------------------------------------------


class TestCertificationStatus:
    """Unit tests for certification_status."""

    NOW = datetime(2024, 6, 1)

    @pytest.mark.parametrize(
        "expires, expected",
        [
            (None, "no_expiry"),
            (datetime(2024, 5, 31), "expired"),
            (datetime(2024, 6, 15), "expiring"),
            (datetime(2024, 7, 1), "expiring"),
            (datetime(2024, 7, 2), "valid"),
        ],
    )
    def test_status(self, expires, expected):
        assert certification_status(expires, self.NOW, 30) == expected


# ---------------------------------------------------------------------------
# Reports
# ---------------------------------------------------------------------------


class TestSummary:
    """Tests for GET /api/admin/analytics/summary."""

    def test_counts(self, client, db, admin, alice, bob):
        add_skill(db, alice, "Python", SkillLevel.EXPERT, category="Code", certification="PCAP")
        add_skill(db, bob, "Python", SkillLevel.BEGINNER, category="Code")
        add_skill(db, bob, "AWS", SkillLevel.EXPERT, category="Cloud")
        db.add(PendingSkillUpdate(user_id=bob.id, name="Go", category="Code", level=SkillLevel.BEGINNER,
                                  status=ApprovalStatus.PENDING))
        db.commit()
        login(client, admin)

        data = client.get("/api/admin/analytics/summary").json()

        assert data["totalSkills"] == 3
        assert data["totalUsers"] == 3
        assert data["certifiedSkills"] == 1
        assert data["byLevel"] == {"beginner": 1, "intermediate": 0, "expert": 2}
        assert data["byCategory"] == {"Cloud": 1, "Code": 2}
        assert data["pendingReviews"] == 1

    def test_requires_admin(self, client, alice):
        login(client, alice)
        assert client.get("/api/admin/analytics/summary").status_code == 403


class TestSkillGaps:
    """Tests for GET /api/admin/analytics/skill-gaps."""

    def test_reports_missing_and_low_levels(self, client, db, admin, alice, bob):
        aws = add_skill(db, alice, "AWS", SkillLevel.EXPERT)
        add_skill(db, bob, "aws", SkillLevel.BEGINNER)
        target = SkillTarget(name="Cloud", target_level=SkillLevel.INTERMEDIATE)
        db.add(target)
        db.commit()
        db.add_all(
            [
                SkillTargetSkill(target_id=target.id, skill_id=aws.id),
                SkillTargetUser(target_id=target.id, user_id=alice.id),
                SkillTargetUser(target_id=target.id, user_id=bob.id),
                SkillTargetUser(target_id=target.id, user_id=admin.id),
            ]
        )
        db.commit()
        login(client, admin)

        [report] = client.get("/api/admin/analytics/skill-gaps").json()

        assert report["usersOnTarget"] == 3
        assert report["usersMeetingTarget"] == 1
        gaps = {(g["username"], g["currentLevel"]) for g in report["gaps"]}
        assert gaps == {("admin", None), ("bob", "beginner")}


class TestProjectSkillGaps:
    """Tests for GET /api/admin/analytics/project-skill-gaps/{id}."""

    def test_coverage(self, client, db, admin, alice, bob):
        sql = add_skill(db, alice, "SQL", SkillLevel.EXPERT)
        rust = add_skill(db, bob, "Rust", SkillLevel.BEGINNER)
        project = Project(name="Apollo")
        db.add(project)
        db.commit()
        db.add_all(
            [
                ProjectResource(project_id=project.id, user_id=alice.id, allocation=50),
                ProjectResource(project_id=project.id, user_id=bob.id, allocation=50),
                ProjectSkill(project_id=project.id, skill_id=sql.id, required_level=SkillLevel.INTERMEDIATE),
                ProjectSkill(project_id=project.id, skill_id=rust.id, required_level=SkillLevel.EXPERT),
            ]
        )
        db.commit()
        login(client, admin)

        data = client.get(f"/api/admin/analytics/project-skill-gaps/{project.id}").json()

        by_name = {row["skillName"]: row for row in data}
        assert by_name["SQL"]["qualifiedUserIds"] == [alice.id]
        assert by_name["SQL"]["hasGap"] is False
        assert by_name["Rust"]["qualifiedUserIds"] == []
        assert by_name["Rust"]["hasGap"] is True

    def test_missing_project(self, client, admin):
        login(client, admin)
        assert client.get("/api/admin/analytics/project-skill-gaps/999").status_code == 404


class TestCertifications:
    """Tests for the certification report."""

    def test_sorted_soonest_first_with_no_expiry_last(self, db, alice):
        now = datetime(2024, 6, 1)
        add_skill(db, alice, "Open", SkillLevel.EXPERT, certification="Forever")
        add_skill(db, alice, "Later", SkillLevel.EXPERT, certification="B", expiration_date=now + timedelta(days=90))
        add_skill(db, alice, "Soon", SkillLevel.EXPERT, certification="A", expiration_date=now + timedelta(days=5))
        add_skill(db, alice, "Gone", SkillLevel.EXPERT, certification="C", expiration_date=now - timedelta(days=1))
        add_skill(db, alice, "Plain", SkillLevel.EXPERT)

        entries = AnalyticsService(db).certifications(now=now)

        assert [(e.skill_name, e.status) for e in entries] == [
            ("Gone", "expired"),
            ("Soon", "expiring"),
            ("Later", "valid"),
            ("Open", "no_expiry"),
        ]

    def test_endpoint(self, client, db, admin, alice):
        add_skill(db, alice, "AWS", SkillLevel.EXPERT, certification="SAA")
        login(client, admin)

        data = client.get("/api/admin/analytics/certifications").json()

        assert data[0]["username"] == "alice"
        assert data[0]["status"] == "no_expiry"
