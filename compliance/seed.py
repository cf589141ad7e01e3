"""
Sample data matching the dashboard's demo screens.

Used by `cli.py seed` and by tests that need a realistic collection.
"""

from datetime import date, datetime, timedelta
from typing import Optional

from models import (
    ComplianceTask,
    Document,
    Policy,
    PolicyAcknowledgement,
    Profile,
    Report,
    ReportStatusRecord,
    Role,
)

ADMIN_ID = "profile-admin"
EMPLOYEE_ID = "profile-employee"


def sample_profiles() -> list[Profile]:
    return [
        Profile(id=ADMIN_ID, full_name="Sarah Johnson", email="admin@example.com", role=Role.ADMIN),
        Profile(id=EMPLOYEE_ID, full_name="John Doe", email="employee@example.com", role=Role.EMPLOYEE),
    ]


def sample_policies() -> list[Policy]:
    """Policies as the demo employee sees them."""
    rows = [
        {
            "id": "1",
            "title": "Data Privacy Policy",
            "category": "Information Security",
            "effectiveDate": "2023-05-15",
            "status": "active",
            "description": "Guidelines for handling customer data in compliance with GDPR and other privacy regulations.",
            "lastUpdated": "2023-04-01",
            "acknowledgementRequired": True,
            "acknowledged": True,
        },
        {
            "id": "2",
            "title": "Anti-Harassment Policy",
            "category": "HR",
            "effectiveDate": "2023-03-10",
            "status": "active",
            "description": "Guidelines to prevent and address workplace harassment and discrimination.",
            "lastUpdated": "2023-02-15",
            "acknowledgementRequired": True,
            "acknowledged": False,
        },
        {
            "id": "3",
            "title": "Information Security Policy",
            "category": "Information Security",
            "effectiveDate": "2023-06-01",
            "status": "pending",
            "description": "Guidelines for securing company information assets and preventing data breaches.",
            "lastUpdated": "2023-05-20",
            "acknowledgementRequired": True,
        },
        {
            "id": "4",
            "title": "Code of Conduct",
            "category": "Ethics",
            "effectiveDate": "2022-12-01",
            "status": "active",
            "description": "Standards of ethical business conduct expected from all employees.",
            "lastUpdated": "2022-11-15",
            "acknowledgementRequired": True,
            "acknowledged": True,
        },
        {
            "id": "5",
            "title": "Remote Work Policy",
            "category": "HR",
            "effectiveDate": "2023-01-15",
            "status": "active",
            "description": "Guidelines for working remotely, including security and productivity expectations.",
            "lastUpdated": "2022-12-20",
            "acknowledgementRequired": True,
            "acknowledged": True,
        },
    ]
    return [Policy.model_validate(row) for row in rows]


def sample_acknowledgements(profile_id: str = EMPLOYEE_ID) -> list[PolicyAcknowledgement]:
    """The demo employee's acknowledgements behind `sample_policies`."""
    return [
        PolicyAcknowledgement(policy_id=p.id, profile_id=profile_id)
        for p in sample_policies() if p.acknowledged
    ]


def sample_tasks(now: Optional[datetime] = None, assignee: str = EMPLOYEE_ID) -> list[ComplianceTask]:
    now = now or datetime.now()
    return [
        ComplianceTask(
            id="1",
            title="Annual Data Privacy Certification",
            description="Complete the annual data privacy certification process including documentation review and quiz.",
            due_date=now + timedelta(days=7),
            status="in-progress",
            priority="high",
            category="Data Privacy",
            progress=33,
            assigned_to=assignee,
            documents=(
                Document(name="Privacy Policy Acknowledgment", required=True, uploaded=True),
                Document(name="Data Handling Certification", required=True, uploaded=False),
                Document(name="GDPR Compliance Form", required=True, uploaded=False),
            ),
        ),
        ComplianceTask(
            id="2",
            title="Quarterly Security Training",
            description="Complete the mandatory security awareness training for Q2 2023.",
            due_date=now + timedelta(days=3),
            status="pending",
            priority="medium",
            category="Security",
            progress=0,
            assigned_to=assignee,
            documents=(
                Document(name="Training Completion Certificate", required=True, uploaded=False),
            ),
        ),
        ComplianceTask(
            id="3",
            title="Code of Conduct Review",
            description="Annual review and acknowledgment of the company code of conduct.",
            due_date=now - timedelta(days=2),
            status="overdue",
            priority="high",
            category="Ethics",
            progress=0,
            assigned_to=assignee,
            documents=(
                Document(name="Code of Conduct Acknowledgment", required=True, uploaded=False),
                Document(name="Ethics Quiz Results", required=False, uploaded=False),
            ),
        ),
    ]


def sample_reports() -> list[Report]:
    rows = [
        ("WB-2023-0042", "Potential Data Privacy Violation", "Data Privacy", date(2023, 6, 15),
         "Investigating", "High", "Sarah Johnson", "TRK-8F72-9D3E"),
        ("WB-2023-0041", "Harassment Complaint", "Workplace Conduct", date(2023, 6, 10),
         "Pending", "Medium", None, "TRK-7E61-8C2D"),
        ("WB-2023-0040", "Financial Irregularity", "Financial", date(2023, 6, 5),
         "Resolved", "High", "Michael Chen", "TRK-6D50-7B1C"),
        ("WB-2023-0039", "Safety Protocol Violation", "Health & Safety", date(2023, 5, 28),
         "Investigating", "Medium", "Alex Rodriguez", "TRK-5C49-6A0B"),
        ("WB-2023-0038", "Conflict of Interest", "Ethics", date(2023, 5, 20),
         "Resolved", "Low", "Sarah Johnson", "TRK-4B38-5Z9A"),
    ]
    return [
        Report(
            id=report_id,
            title=title,
            category=category,
            date_submitted=submitted,
            status=status,
            priority=priority,
            assigned_to=assignee,
            tracking_id=tracking_id,
        )
        for report_id, title, category, submitted, status, priority, assignee, tracking_id in rows
    ]


def sample_status_records() -> list[ReportStatusRecord]:
    """Reporter-side records for the tracker demo."""
    rows = [
        {
            "trackingId": "WB-2023-001",
            "status": "pending",
            "title": "Potential Policy Violation",
            "dateSubmitted": "2023-06-15",
            "lastUpdated": "2023-06-15",
            "message": "Your report has been received and is pending review by our compliance team.",
        },
        {
            "trackingId": "WB-2023-002",
            "status": "investigating",
            "title": "Workplace Safety Concern",
            "dateSubmitted": "2023-05-20",
            "lastUpdated": "2023-05-25",
            "message": (
                "Your report is currently under investigation. "
                "An investigator has been assigned to review the details provided."
            ),
        },
        {
            "trackingId": "WB-2023-003",
            "status": "resolved",
            "title": "Ethical Misconduct Report",
            "dateSubmitted": "2023-04-10",
            "lastUpdated": "2023-05-05",
            "message": (
                "Your report has been fully investigated and appropriate actions have been taken. "
                "The case is now closed."
            ),
        },
    ]
    return [ReportStatusRecord.model_validate(row) for row in rows]


def seed_repository(repo, now: Optional[datetime] = None) -> dict:
    """Write every sample row. Returns counts per collection."""
    counts = {}
    for name, rows in (
        ("profiles", sample_profiles()),
        ("policies", [p.shared() for p in sample_policies()]),
        ("acknowledgements", sample_acknowledgements()),
        ("tasks", sample_tasks(now)),
        ("reports", sample_reports()),
    ):
        store = getattr(repo, name)
        for row in rows:
            store.save(row)
        counts[name] = len(rows)
    return counts
