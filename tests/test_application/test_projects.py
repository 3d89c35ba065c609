"""Tests for projects and their member assignments."""
from datetime import date
from decimal import Decimal

import pytest

from app.infrastructure.db.models import ProjectModel, ProjectMemberModel
from app.application.clients import CreateClientUseCase, ClientNotFoundError
from app.application.team_members import CreateTeamMemberUseCase, TeamMemberNotFoundError
from app.application.projects import (
    CreateProjectUseCase, UpdateProjectUseCase, DeleteProjectUseCase,
    ListProjectMembersUseCase, AddProjectMemberUseCase,
    UpdateProjectMemberUseCase, RemoveProjectMemberUseCase, ProjectReadService,
    ProjectValidationError, ProjectNotFoundError, ProjectMemberNotFoundError,
)

ACCOUNT = 1


@pytest.fixture
def client_id(db_session):
    return CreateClientUseCase(db_session).execute(ACCOUNT, "Acme").id


@pytest.fixture
def project(db_session, client_id):
    return CreateProjectUseCase(db_session).execute(ACCOUNT, "Website", client_id=client_id)


class TestCreateProject:
    def test_defaults(self, project, client_id):
        assert project.name == "Website"
        assert project.client_id == client_id
        assert project.status == "planning"
        assert project.payment_type == "hourly_rate"
        assert project.personal_project is False
        assert project.budget is None

    def test_personal_project_needs_no_client(self, db_session):
        project = CreateProjectUseCase(db_session).execute(
            ACCOUNT, "Side app", personal_project=True, payment_type="fixed_budget", budget="2000",
        )
        assert project.client_id is None
        assert project.budget == Decimal("2000")

    def test_client_required_otherwise(self, db_session):
        with pytest.raises(ProjectValidationError, match="client_id"):
            CreateProjectUseCase(db_session).execute(ACCOUNT, "Website")

    def test_unknown_client(self, db_session):
        with pytest.raises(ClientNotFoundError):
            CreateProjectUseCase(db_session).execute(ACCOUNT, "Website", client_id=404)
        assert db_session.query(ProjectModel).count() == 0

    def test_name_required(self, db_session, client_id):
        with pytest.raises(ProjectValidationError, match="name is required"):
            CreateProjectUseCase(db_session).execute(ACCOUNT, "  ", client_id=client_id)

    @pytest.mark.parametrize("field, value", [
        ("status", "archived"),
        ("payment_type", "barter"),
    ])
    def test_invalid_choice(self, db_session, client_id, field, value):
        with pytest.raises(ProjectValidationError, match=field):
            CreateProjectUseCase(db_session).execute(ACCOUNT, "Website", client_id=client_id, **{field: value})

    def test_negative_rate(self, db_session, client_id):
        with pytest.raises(ProjectValidationError, match="hourly_rate"):
            CreateProjectUseCase(db_session).execute(ACCOUNT, "Website", client_id=client_id, hourly_rate="-5")

    def test_end_before_start(self, db_session, client_id):
        with pytest.raises(ProjectValidationError, match="end_date"):
            CreateProjectUseCase(db_session).execute(
                ACCOUNT, "Website", client_id=client_id,
                start_date="2024-03-01", end_date="2024-02-01",
            )


class TestUpdateProject:
    def test_partial_update(self, db_session, project):
        UpdateProjectUseCase(db_session).execute(project.id, ACCOUNT, status="active", hourly_rate="95.50")
        assert project.status == "active"
        assert project.hourly_rate == Decimal("95.50")
        assert project.name == "Website"

    def test_end_date_checked_against_stored_start(self, db_session, project):
        UpdateProjectUseCase(db_session).execute(project.id, ACCOUNT, start_date=date(2024, 5, 1))
        with pytest.raises(ProjectValidationError, match="end_date"):
            UpdateProjectUseCase(db_session).execute(project.id, ACCOUNT, end_date="2024-04-01")

    def test_dropping_client_requires_personal_flag(self, db_session, project):
        with pytest.raises(ProjectValidationError, match="client_id"):
            UpdateProjectUseCase(db_session).execute(project.id, ACCOUNT, client_id=None)
        UpdateProjectUseCase(db_session).execute(project.id, ACCOUNT, client_id=None, personal_project=True)
        assert project.client_id is None

    def test_other_owner(self, db_session, project):
        with pytest.raises(ProjectNotFoundError):
            UpdateProjectUseCase(db_session).execute(project.id, 2, status="active")


class TestMembers:
    def test_linked_member_copies_roster_details(self, db_session, project):
        roster = CreateTeamMemberUseCase(db_session).execute(
            ACCOUNT, "Sam", email="sam@example.test", role="Designer", hourly_rate="80",
        )
        member = AddProjectMemberUseCase(db_session).execute(project.id, ACCOUNT, team_member_id=roster.id)

        assert member.team_member_id == roster.id
        assert member.name == "Sam"
        assert member.email == "sam@example.test"
        assert member.role == "Designer"
        assert member.hourly_rate == Decimal("80")
        assert member.payment_status == "pending"
        assert member.is_active is True
        assert member.joined_date is not None

    def test_explicit_values_win_over_roster(self, db_session, project):
        roster = CreateTeamMemberUseCase(db_session).execute(ACCOUNT, "Sam", role="Designer", hourly_rate="80")
        member = AddProjectMemberUseCase(db_session).execute(
            project.id, ACCOUNT, team_member_id=roster.id, role="Lead", hourly_rate="120",
        )
        assert member.role == "Lead"
        assert member.hourly_rate == Decimal("120")

    def test_ad_hoc_member_needs_name(self, db_session, project):
        with pytest.raises(ProjectValidationError, match="name is required"):
            AddProjectMemberUseCase(db_session).execute(project.id, ACCOUNT)

    def test_unknown_team_member(self, db_session, project):
        with pytest.raises(TeamMemberNotFoundError):
            AddProjectMemberUseCase(db_session).execute(project.id, ACCOUNT, team_member_id=77)

    def test_update_and_deactivate(self, db_session, project):
        member = AddProjectMemberUseCase(db_session).execute(project.id, ACCOUNT, name="Kim")
        UpdateProjectMemberUseCase(db_session).execute(
            project.id, member.id, ACCOUNT,
            payment_status="paid", is_active=False, left_date="2024-06-30",
        )
        assert member.payment_status == "paid"
        assert member.is_active is False
        assert member.left_date == date(2024, 6, 30)

    def test_invalid_payment_status(self, db_session, project):
        member = AddProjectMemberUseCase(db_session).execute(project.id, ACCOUNT, name="Kim")
        with pytest.raises(ProjectValidationError, match="payment_status"):
            UpdateProjectMemberUseCase(db_session).execute(project.id, member.id, ACCOUNT, payment_status="late")

    def test_member_must_belong_to_project(self, db_session, client_id, project):
        other = CreateProjectUseCase(db_session).execute(ACCOUNT, "App", client_id=client_id)
        member = AddProjectMemberUseCase(db_session).execute(project.id, ACCOUNT, name="Kim")
        with pytest.raises(ProjectMemberNotFoundError):
            RemoveProjectMemberUseCase(db_session).execute(other.id, member.id, ACCOUNT)

    def test_remove(self, db_session, project):
        member = AddProjectMemberUseCase(db_session).execute(project.id, ACCOUNT, name="Kim")
        RemoveProjectMemberUseCase(db_session).execute(project.id, member.id, ACCOUNT)
        assert ListProjectMembersUseCase(db_session).execute(project.id, ACCOUNT) == []


class TestReadAndDelete:
    def test_list_filters_and_active_members_only(self, db_session, client_id, project):
        other = CreateProjectUseCase(db_session).execute(ACCOUNT, "Side", personal_project=True, status="active")
        active = AddProjectMemberUseCase(db_session).execute(project.id, ACCOUNT, name="Kim")
        gone = AddProjectMemberUseCase(db_session).execute(project.id, ACCOUNT, name="Lee")
        UpdateProjectMemberUseCase(db_session).execute(project.id, gone.id, ACCOUNT, is_active=False)

        service = ProjectReadService(db_session)
        rows = service.list_projects(ACCOUNT)
        assert [r["project"].id for r in rows] == [other.id, project.id]

        by_client = service.list_projects(ACCOUNT, client_id=client_id)
        assert [r["project"].id for r in by_client] == [project.id]
        assert by_client[0]["client"].name == "Acme"
        assert [m.id for m in by_client[0]["members"]] == [active.id]

        assert [r["project"].id for r in service.list_projects(ACCOUNT, status="active")] == [other.id]

        detail = service.get_project(project.id, ACCOUNT)
        assert {m.id for m in detail["members"]} == {active.id, gone.id}

    def test_list_rejects_unknown_status(self, db_session):
        with pytest.raises(ProjectValidationError, match="status"):
            ProjectReadService(db_session).list_projects(ACCOUNT, status="someday")

    def test_delete_removes_members(self, db_session, project):
        AddProjectMemberUseCase(db_session).execute(project.id, ACCOUNT, name="Kim")
        DeleteProjectUseCase(db_session).execute(project.id, ACCOUNT)
        assert db_session.query(ProjectModel).count() == 0
        assert db_session.query(ProjectMemberModel).count() == 0

    def test_other_owner_hidden(self, db_session, project):
        with pytest.raises(ProjectNotFoundError):
            ProjectReadService(db_session).get_project(project.id, 2)
        assert ProjectReadService(db_session).list_projects(2) == []
