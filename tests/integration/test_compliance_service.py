"""
Integration tests for ComplianceService against the JSON backend.

Each test seeds a fresh data directory with the sample data.
"""

import asyncio
import re
import pytest

from compliance import (
    AccessDeniedError,
    CollaboratorError,
    CollectionQuery,
    IncompleteTaskError,
    NotFoundError,
    Session,
    TrackingLookup,
    ValidationError,
)
from compliance.reports import RepositoryReportSubmitter
from compliance.seed import ADMIN_ID, EMPLOYEE_ID, seed_repository
from compliance.service import ComplianceService
from compliance.tracking import RepositoryStatusSource
from models import (
    Acknowledgement,
    ComplianceTask,
    PolicyStatus,
    Profile,
    ReportStatus,
    ReportSubmission,
    Role,
    TaskStatus,
)

TRACKING_FORMAT = re.compile(r"^TRK-[0-9A-F]{4}-[0-9A-F]{4}$")


@pytest.fixture
def seeded(json_repo, fixed_time):
    seed_repository(json_repo, now=fixed_time)
    return json_repo


@pytest.fixture
def as_employee(seeded):
    return ComplianceService(seeded, Session(user=seeded.profiles.get(EMPLOYEE_ID)))


@pytest.fixture
def as_admin(seeded):
    return ComplianceService(seeded, Session(user=seeded.profiles.get(ADMIN_ID)))


@pytest.fixture
def as_anonymous(seeded):
    return ComplianceService(seeded, Session.anonymous())


def test_seed_counts(json_repo, fixed_time):
    counts = seed_repository(json_repo, now=fixed_time)
    assert counts == {
        "profiles": 2, "policies": 5, "acknowledgements": 3, "tasks": 3, "reports": 5,
    }
    assert json_repo.profiles.get_by_email("admin@example.com").id == ADMIN_ID


class TestTasks:

    def test_toggle_persists(self, as_employee, seeded):
        task = as_employee.toggle_document("1", "Data Handling Certification", True)

        assert task.progress == 67
        assert task.status == TaskStatus.IN_PROGRESS
        stored = seeded.tasks.get("1")
        assert stored.progress == 67
        assert stored.document("Data Handling Certification").uploaded

    def test_last_document_completes(self, as_employee):
        as_employee.toggle_document("1", "Data Handling Certification", True)
        task = as_employee.toggle_document("1", "GDPR Compliance Form", True)

        assert task.progress == 100
        assert task.status == TaskStatus.COMPLETED

    def test_optional_document_does_not_count(self, as_employee):
        task = as_employee.toggle_document("3", "Ethics Quiz Results", True)
        assert task.progress == 0
        assert task.status == TaskStatus.OVERDUE

    def test_unknown_document_changes_nothing(self, as_employee, seeded, capsys):
        before = seeded.tasks.get("1")

        task = as_employee.toggle_document("1", "No Such Form", True)

        assert task.progress == 33
        assert seeded.tasks.get("1").updated_at == before.updated_at
        assert "[WARN]" in capsys.readouterr().out

    def test_submit_incomplete_leaves_task(self, as_employee, seeded):
        as_employee.toggle_document("1", "Data Handling Certification", True)

        with pytest.raises(IncompleteTaskError) as exc:
            as_employee.submit_task("1")

        assert exc.value.progress == 67
        stored = seeded.tasks.get("1")
        assert stored.status == TaskStatus.IN_PROGRESS
        assert stored.submitted_at is None

    def test_submit_complete(self, as_employee, seeded, fixed_time):
        as_employee.toggle_document("1", "Data Handling Certification", True)
        as_employee.toggle_document("1", "GDPR Compliance Form", True)

        task = as_employee.submit_task("1", now=fixed_time)

        assert task.status == TaskStatus.COMPLETED
        assert seeded.tasks.get("1").submitted_at == fixed_time

    def test_failed_save_keeps_stored_state(self, as_employee, seeded, monkeypatch):
        def broken_save(entity):
            raise CollaboratorError("disk full")

        monkeypatch.setattr(seeded.tasks, "save", broken_save)

        with pytest.raises(CollaboratorError):
            as_employee.toggle_document("1", "Data Handling Certification", True)

        monkeypatch.undo()
        stored = seeded.tasks.get("1")
        assert stored.progress == 33
        assert not stored.document("Data Handling Certification").uploaded

    def test_employee_sees_own_tasks(self, as_employee, as_admin, seeded, fixed_time):
        seeded.tasks.save(ComplianceTask(id="other", title="Other", due_date=fixed_time, assigned_to="someone"))

        assert [t.id for t in as_employee.tasks()] == ["1", "2", "3"]
        assert len(as_admin.tasks()) == 4

    def test_someone_elses_task(self, as_employee, seeded, fixed_time):
        seeded.tasks.save(ComplianceTask(id="other", title="Other", due_date=fixed_time, assigned_to="someone"))

        with pytest.raises(AccessDeniedError):
            as_employee.toggle_document("other", "x", True)

    def test_missing_task(self, as_employee):
        with pytest.raises(NotFoundError):
            as_employee.submit_task("nope")


class TestPolicies:

    def test_employee_filters_by_category(self, as_employee):
        rows = as_employee.policies(CollectionQuery(category="HR"))
        assert [p.id for p in rows] == ["2", "5"]

    def test_viewer_sees_own_acknowledgements(self, as_employee):
        badges = {p.id: p.badge for p in as_employee.policies()}
        assert badges == {
            "1": "Active",
            "2": "Action Required",
            "3": "Pending",
            "4": "Active",
            "5": "Active",
        }

    def test_acknowledge(self, as_employee, seeded):
        policy = as_employee.acknowledge_policy("2")

        assert policy.acknowledgement == Acknowledgement.ACKNOWLEDGED
        assert not policy.action_required
        assert seeded.acknowledgements.find("2", EMPLOYEE_ID) is not None
        shown = {p.id: p for p in as_employee.policies()}
        assert not shown["2"].action_required

    def test_acknowledgement_is_per_employee(self, as_employee, seeded):
        bob = Profile(id="profile-bob", full_name="Bob Stone", email="bob@example.com", role=Role.EMPLOYEE)
        seeded.profiles.save(bob)
        as_bob = ComplianceService(seeded, Session(user=bob))

        as_employee.acknowledge_policy("2")

        shown = {p.id: p for p in as_bob.policies()}
        assert shown["2"].acknowledgement == Acknowledgement.PENDING
        assert shown["2"].action_required
        # Bob has acknowledged nothing, the seeded employee's records stay theirs
        assert shown["1"].action_required
        assert seeded.acknowledgements.for_profile("profile-bob") == []

    def test_shared_row_never_stores_an_answer(self, as_employee, seeded):
        as_employee.acknowledge_policy("2")
        assert seeded.policies.get("2").acknowledgement == Acknowledgement.PENDING

    def test_acknowledge_twice_is_noop(self, as_employee, seeded):
        before = seeded.acknowledgements.find("1", EMPLOYEE_ID)

        policy = as_employee.acknowledge_policy("1")

        assert policy.acknowledged
        after = seeded.acknowledgements.find("1", EMPLOYEE_ID)
        assert after.acknowledged_at == before.acknowledged_at
        assert len(seeded.acknowledgements.for_profile(EMPLOYEE_ID)) == 3

    def test_admin_cannot_acknowledge(self, as_admin):
        with pytest.raises(AccessDeniedError):
            as_admin.acknowledge_policy("2")

    def test_create_policy(self, as_admin, seeded, fixed_time):
        policy = as_admin.create_policy({
            "title": "Travel Policy",
            "description": "Booking and expenses for business travel.",
            "category": "Finance",
            "effectiveDate": "2024-03-01",
            "acknowledgementRequired": False,
        })

        assert policy.status == PolicyStatus.PENDING
        assert policy.created_by == ADMIN_ID
        assert policy.acknowledgement == Acknowledgement.NOT_APPLICABLE
        assert seeded.policies.exists(policy.id)

    def test_create_policy_invalid(self, as_admin, seeded):
        with pytest.raises(ValidationError) as exc:
            as_admin.create_policy({
                "title": "Travel Policy",
                "description": "short",
                "category": "Finance",
                "effectiveDate": "2024-03-01",
            })
        assert "description" in exc.value.message
        assert len(seeded.policies.list()) == 5

    def test_acknowledge_not_required(self, as_admin, as_employee):
        policy = as_admin.create_policy({
            "title": "Travel Policy",
            "description": "Booking and expenses for business travel.",
            "category": "Finance",
            "effectiveDate": "2024-03-01",
            "acknowledgementRequired": False,
        })
        with pytest.raises(ValidationError):
            as_employee.acknowledge_policy(policy.id)

    def test_anonymous_denied(self, as_anonymous):
        with pytest.raises(AccessDeniedError):
            as_anonymous.policies()


class TestReports:

    def test_admin_list_newest_first(self, as_admin):
        rows = as_admin.reports()
        assert [r.id for r in rows] == [
            "WB-2023-0042", "WB-2023-0041", "WB-2023-0040", "WB-2023-0039", "WB-2023-0038",
        ]

    def test_search_by_tracking_id(self, as_admin):
        rows = as_admin.reports(CollectionQuery(search_text="trk-6d50"))
        assert [r.id for r in rows] == ["WB-2023-0040"]

    def test_employee_denied(self, as_employee):
        with pytest.raises(AccessDeniedError):
            as_employee.reports()

    def test_update_report(self, as_admin, seeded):
        report = as_admin.update_report("WB-2023-0041", status="Investigating", assigned_to="Ann Lee",
                                        notes="Interviewed witness")

        assert report.status == ReportStatus.INVESTIGATING
        stored = seeded.reports.get("WB-2023-0041")
        assert stored.assigned_to == "Ann Lee"
        assert stored.investigation_notes == "Interviewed witness"

    def test_update_report_bad_status(self, as_admin, seeded):
        with pytest.raises(ValidationError):
            as_admin.update_report("WB-2023-0041", status="closed")
        assert seeded.reports.get("WB-2023-0041").status == ReportStatus.PENDING

    def test_update_missing_report(self, as_admin):
        with pytest.raises(NotFoundError):
            as_admin.update_report("WB-0000", status="resolved")


class TestAnonymousSubmission:

    def submit(self, service, **fields):
        data = {"incidentType": "safety", "description": "Blocked fire exit on floor 3"}
        data.update(fields)
        return asyncio.run(service.submit_report(data))

    def test_tracking_id_returned(self, as_anonymous, seeded):
        tracking_id = self.submit(as_anonymous, location="Floor 3")

        assert TRACKING_FORMAT.match(tracking_id)
        report = seeded.reports.get_by_tracking_id(tracking_id)
        assert report.id != tracking_id
        assert report.status == ReportStatus.PENDING
        assert report.title == "Safety Concern"
        assert "Location: Floor 3" in report.description

    def test_submitted_report_is_trackable(self, as_anonymous, seeded):
        tracking_id = self.submit(as_anonymous)

        lookup = TrackingLookup(RepositoryStatusSource(seeded.reports))
        record = asyncio.run(lookup.track(tracking_id))

        assert record.status == ReportStatus.PENDING
        assert record.tracking_id == tracking_id

    def test_invalid_submission(self, as_anonymous, seeded):
        with pytest.raises(ValidationError):
            self.submit(as_anonymous, description="too short")
        assert len(seeded.reports.list()) == 5

    def test_tracking_id_collision_retried(self, seeded):
        ids = iter(["TRK-8F72-9D3E", "TRK-0000-0001"])
        submitter = RepositoryReportSubmitter(seeded.reports, id_factory=lambda: next(ids))
        submission = ReportSubmission.model_validate(
            {"incidentType": "data", "description": "Customer list emailed externally"}
        )

        assert asyncio.run(submitter.submit(submission)) == "TRK-0000-0001"

    def test_tracking_id_exhausted(self, seeded):
        submitter = RepositoryReportSubmitter(seeded.reports, id_factory=lambda: "TRK-8F72-9D3E")
        submission = ReportSubmission.model_validate(
            {"incidentType": "data", "description": "Customer list emailed externally"}
        )

        with pytest.raises(CollaboratorError):
            asyncio.run(submitter.submit(submission))
